# coupons/urls.py

"""
Mounted under /api/coupons/. validate/ is registered before the router so it
is never captured as a coupon id.
"""

from django.urls import include, path
from rest_framework.routers import SimpleRouter

from coupons.views import CouponViewSet, ValidateCouponView

app_name = "coupons"

router = SimpleRouter()
router.register(r"", CouponViewSet, basename="coupons")

urlpatterns = [
    path("validate/", ValidateCouponView.as_view(), name="validate"),
    path("", include(router.urls)),
]
