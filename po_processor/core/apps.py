from django.apps import AppConfig


class CoreConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'po_processor.core'
    label = 'core'

    def ready(self):
        """Import signals when app is ready"""
        import po_processor.core.cache_signals  # noqa: F401
