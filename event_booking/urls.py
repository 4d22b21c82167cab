# event_booking/urls.py
#
# Purpose:
# - Project URL router.
# - All JSON APIs live under /api/; Stripe posts to /api/stripe/webhook/.
#
from django.contrib import admin
from django.urls import include, path

urlpatterns = [
    # Django admin (staff review and cancel local calendar events here)
    path("admin/", admin.site.urls),

    # =====
    # API's
    # =====
    path("api/", include("booking.urls")),
    path("api/stripe/", include("payments.urls")),
]
