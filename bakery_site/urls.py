"""
URL configuration for the bakery_site project.

Mobile and admin clients talk to `/api/`; `/admin/` is the Django admin used by
staff to manage the catalogue.
"""

from django.contrib import admin
from django.urls import include, path

from apps.observability.views.health import healthz, readyz

handler404 = "bakery_site.error_views.handle_404"
handler500 = "bakery_site.error_views.handle_500"

urlpatterns = [
    path("healthz", healthz, name="healthz"),
    path("readyz", readyz, name="readyz"),
    path("admin/", admin.site.urls),
    path("api/", include("bakery_site.api_urls")),
]
