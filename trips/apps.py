from django.apps import AppConfig


class TripsConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'trips'
    verbose_name = 'Trips & Expenses'

    def ready(self):
        from . import signals  # noqa: F401
