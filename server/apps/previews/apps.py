"""Django app configuration for previews app."""

from typing import override

from django.apps import AppConfig


class PreviewsConfig(AppConfig):
    """Configuration for previews app."""

    default_auto_field = 'django.db.models.BigAutoField'
    name = 'server.apps.previews'
    verbose_name = 'Previews'

    @override
    def ready(self) -> None:
        """Import signal handlers when app is ready."""
        from server.apps.previews import signals  # noqa: F401
