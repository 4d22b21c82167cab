# booking/urls.py
#
# Purpose:
# - Expose the scheduling API via a DRF router.
#     POST /api/bookings/                 commit a booking
#     GET  /api/bookings/availability/    bookable start times
#     GET  /api/health/                   configuration check
#
from django.urls import include, path
from rest_framework.routers import DefaultRouter

from .views import BookingViewSet, HealthView

router = DefaultRouter()
router.register(r"bookings", BookingViewSet, basename="booking")

urlpatterns = [
    path("", include(router.urls)),
    path("health/", HealthView.as_view(), name="health"),
]
