"""Participant URL configuration."""

from __future__ import annotations

from rest_framework.routers import DefaultRouter

from modules.participants.views import (
    HerderViewSet,
    RoleViewSet,
    SlaughterhouseViewSet,
    TransporterViewSet,
)

router = DefaultRouter(trailing_slash=True)
router.register("roles", RoleViewSet, basename="role")
router.register("herders", HerderViewSet, basename="herder")
router.register("slaughterhouses", SlaughterhouseViewSet, basename="slaughterhouse")
router.register("transporters", TransporterViewSet, basename="transporter")

urlpatterns = router.urls
