"""AWS Cognito identity settings.

Leaving ``COGNITO_USER_POOL_ID`` empty disables token verification,
which is only meant for local development.
"""

from server.settings.components import config

COGNITO_USER_POOL_ID = config('COGNITO_USER_POOL_ID', default='')
COGNITO_CLIENT_ID = config('COGNITO_CLIENT_ID', default='')

# Pool ids look like `eu-west-1_AbCdEf`, the prefix is the region
COGNITO_REGION = config(
    'COGNITO_REGION',
    default=COGNITO_USER_POOL_ID.split('_', 1)[0] if COGNITO_USER_POOL_ID else '',
)

# Seconds the pool's signing keys are cached
COGNITO_JWKS_CACHE_TIMEOUT = config(
    'COGNITO_JWKS_CACHE_TIMEOUT',
    cast=int,
    default=3600,
)
COGNITO_JWKS_REQUEST_TIMEOUT = config(
    'COGNITO_JWKS_REQUEST_TIMEOUT',
    cast=int,
    default=10,
)
