from django.apps import AppConfig
from django.conf import settings
from django.core.exceptions import ImproperlyConfigured


class OrdersConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "apps.orders"
    verbose_name = "Orders"

    def ready(self) -> None:
        env = (getattr(settings, "ENVIRONMENT", "") or "").strip().lower()
        if env in {"prod", "production"}:
            if getattr(settings, "DEBUG", False):
                raise ImproperlyConfigured("DEBUG must be False in production.")
            if (getattr(settings, "SECRET_KEY", "") or "").startswith("django-insecure"):
                raise ImproperlyConfigured("DJANGO_SECRET_KEY must be set in production.")
