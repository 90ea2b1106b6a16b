"""Main entry point for Django settings.

Settings are split into components and composed with
``django-split-settings``. ``DJANGO_ENV`` selects the environment
overrides that are applied last.
"""

from os import environ

from split_settings.tools import include, optional

# Managing environment via `DJANGO_ENV` variable:
environ.setdefault('DJANGO_ENV', 'development')
_ENV = environ['DJANGO_ENV']

_base_settings = (
    'components/common.py',
    'components/database.py',
    'components/caches.py',
    'components/logging.py',
    'components/storages.py',
    'components/drive.py',
    'components/previews.py',
    'components/cognito.py',

    # Select the right env:
    'environments/{0}.py'.format(_ENV),

    # Optionally override some settings:
    optional('environments/local.py'),
)

# Include settings:
include(*_base_settings)
