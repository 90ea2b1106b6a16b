"""This file contains all the settings used in development."""

from server.settings.components.common import ALLOWED_HOSTS

DEBUG = True

ALLOWED_HOSTS = [
    *ALLOWED_HOSTS,
    'localhost',
    '0.0.0.0',  # noqa: S104
    '127.0.0.1',
    '[::1]',
]
