"""Event handlers for Orders domain events.

Handlers run after the business transaction has committed, so they
read fresh state and never influence the outcome of the use case that
raised the event.
"""

from __future__ import annotations

import structlog
from django.conf import settings
from django.core.mail import send_mail

from modules.orders.events import OrderCompleted
from modules.orders.models import Order
from shared.domain.bus import IEventHandler
from shared.infrastructure.bus import EventLogHandler

logger = structlog.get_logger(__name__)


class OrderCompletedNotifier(IEventHandler[OrderCompleted]):
    """E-mail the customer once their order is completed.

    Disabled by ``ORDER_NOTIFICATIONS_ENABLED = False``.  A delivery
    failure is logged and dropped; the order stays Completed.
    """

    def handle(self, event: OrderCompleted) -> None:
        log = logger.bind(order_id=event.aggregate_id)
        if not settings.ORDER_NOTIFICATIONS_ENABLED:
            log.debug("order.notification_disabled")
            return

        order = Order.objects.select_related("customer").filter(id=event.aggregate_id).first()
        if order is None or not order.customer.email:
            log.warning("order.notification_skipped")
            return

        try:
            send_mail(
                subject=f"Your order #{order.id} is complete",
                message=(
                    f"Hello {order.customer.full_name},\n\n"
                    f"Your order #{order.id} placed on {order.order_date:%Y-%m-%d} "
                    f"has been completed. Total: ${order.total_amount}.\n\n"
                    "Thank you for your purchase."
                ),
                from_email=settings.DEFAULT_FROM_EMAIL,
                recipient_list=[order.customer.email],
            )
        except Exception:
            log.exception("order.notification_failed")
            return
        log.info("order.notification_sent", customer_id=order.customer_id)


order_placed_handler = EventLogHandler(logger, "order.event.placed", "order_id")
order_status_changed_handler = EventLogHandler(
    logger, "order.event.status_changed", "order_id"
)
order_cancelled_handler = EventLogHandler(logger, "order.event.cancelled", "order_id")
employee_assigned_handler = EventLogHandler(
    logger, "order.event.employee_assigned", "order_id"
)
order_completed_notifier = OrderCompletedNotifier()
