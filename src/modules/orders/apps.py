from django.apps import AppConfig


class OrdersConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "modules.orders"
    label = "orders"

    def ready(self) -> None:
        from modules.orders.events import (
            EmployeeAssigned,
            OrderCancelled,
            OrderCompleted,
            OrderPlaced,
            OrderStatusChanged,
        )
        from modules.orders.handlers import (
            employee_assigned_handler,
            order_cancelled_handler,
            order_completed_notifier,
            order_placed_handler,
            order_status_changed_handler,
        )
        from modules.core.apps import get_event_bus

        event_bus = get_event_bus()

        event_bus.subscribe(OrderPlaced, order_placed_handler)
        event_bus.subscribe(OrderStatusChanged, order_status_changed_handler)
        event_bus.subscribe(OrderCancelled, order_cancelled_handler)
        event_bus.subscribe(OrderCompleted, order_completed_notifier)
        event_bus.subscribe(EmployeeAssigned, employee_assigned_handler)
