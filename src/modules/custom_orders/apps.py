from django.apps import AppConfig


class CustomOrdersConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "modules.custom_orders"
    label = "custom_orders"

    def ready(self) -> None:
        from modules.custom_orders.events import (
            CustomOrderConverted,
            CustomOrderRejected,
        )
        from modules.custom_orders.handlers import (
            custom_order_converted_handler,
            custom_order_rejected_handler,
        )
        from modules.core.apps import get_event_bus

        event_bus = get_event_bus()

        event_bus.subscribe(CustomOrderConverted, custom_order_converted_handler)
        event_bus.subscribe(CustomOrderRejected, custom_order_rejected_handler)
