from django.apps import AppConfig


class TakeoffConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "takeoff"
    verbose_name = "Plan Takeoff"
