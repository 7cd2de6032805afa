from django.apps import AppConfig, apps

from shared.domain.bus import IEventBus
from shared.infrastructure.bus import InMemoryEventBus


class CoreConfig(AppConfig):
    """Composition root for collaborators shared across modules.

    Owns the event bus: module AppConfigs subscribe their handlers to it
    in ``ready()`` and the views hand it to the services they build.
    """

    default_auto_field = "django.db.models.BigAutoField"
    name = "modules.core"
    label = "core"

    def __init__(self, app_name, app_module) -> None:
        super().__init__(app_name, app_module)
        self.event_bus = InMemoryEventBus()


def get_event_bus() -> IEventBus:
    return apps.get_app_config("core").event_bus
