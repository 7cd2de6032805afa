"""Stone URL configuration."""

from __future__ import annotations

from rest_framework.routers import SimpleRouter

from modules.stones.views import StoneViewSet

router = SimpleRouter()
router.register("stones", StoneViewSet, basename="stone")

urlpatterns = router.urls
