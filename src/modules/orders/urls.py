"""Order routes: list, create and retrieve plus the lifecycle actions.

``/orders/active/``, ``/orders/archived/`` and ``/orders/summary/`` are
list routes; ``transition``, ``cancel`` and ``assign`` are detail routes.
"""

from __future__ import annotations

from rest_framework.routers import SimpleRouter

from modules.orders.views import OrderViewSet

router = SimpleRouter()
router.register("orders", OrderViewSet, basename="order")

urlpatterns = router.urls
