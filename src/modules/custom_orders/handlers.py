"""Event handlers for Custom Orders domain events."""

from __future__ import annotations

import structlog

from shared.infrastructure.bus import EventLogHandler

logger = structlog.get_logger(__name__)

custom_order_converted_handler = EventLogHandler(
    logger, "custom_order.event.converted", "custom_order_id"
)
custom_order_rejected_handler = EventLogHandler(
    logger, "custom_order.event.rejected", "custom_order_id"
)
