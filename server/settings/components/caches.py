"""Caching settings.

Used for drive region lookups and the Cognito key set.
"""

CACHES = {
    'default': {
        'BACKEND': 'django.core.cache.backends.locmem.LocMemCache',
        'LOCATION': 'drive-browser',
    },
}
