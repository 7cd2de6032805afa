"""Custom order URL configuration."""

from __future__ import annotations

from rest_framework.routers import SimpleRouter

from modules.custom_orders.views import CustomOrderViewSet

router = SimpleRouter()
router.register("custom-orders", CustomOrderViewSet, basename="custom-order")

urlpatterns = router.urls
