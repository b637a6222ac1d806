from django.apps import AppConfig


class CoreConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'dailishaw.core'

    def ready(self):
        """Import signals when app is ready"""
        import dailishaw.core.session_cache  # noqa: F401
