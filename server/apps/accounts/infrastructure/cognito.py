"""Clients for the Cognito user pool.

Signing keys are fetched from the pool's public JWKS endpoint and
cached, user-facing flows go through the boto3 ``cognito-idp`` client.
"""

import logging
from typing import TYPE_CHECKING, Any

import boto3
import requests
from django.conf import settings
from django.core.cache import cache

from server.apps.accounts.exceptions import IdentityProviderUnavailableError

if TYPE_CHECKING:
    from mypy_boto3_cognito_idp import CognitoIdentityProviderClient

logger = logging.getLogger(__name__)


def is_configured() -> bool:
    """Whether a user pool is configured."""
    return bool(settings.COGNITO_USER_POOL_ID)


def get_issuer() -> str:
    """Issuer URL tokens of the configured pool carry."""
    return 'https://cognito-idp.{0}.amazonaws.com/{1}'.format(
        settings.COGNITO_REGION,
        settings.COGNITO_USER_POOL_ID,
    )


def _jwks_cache_key() -> str:
    return f'accounts:jwks:{settings.COGNITO_USER_POOL_ID}'


def _fetch_jwks() -> dict[str, Any]:
    url = f'{get_issuer()}/.well-known/jwks.json'
    logger.info('Fetching signing keys from %s', url)
    response = requests.get(
        url,
        timeout=settings.COGNITO_JWKS_REQUEST_TIMEOUT,
    )
    response.raise_for_status()
    return response.json()


def get_signing_keys(*, refresh: bool = False) -> list[dict[str, Any]]:
    """Return the pool's public signing keys.

    Args:
        refresh: Skip the cache, used after a key id wasn't found.

    Returns:
        List of JWK dictionaries.

    Raises:
        IdentityProviderUnavailableError: If the keys can't be fetched.
    """
    cache_key = _jwks_cache_key()
    if not refresh:
        cached = cache.get(cache_key)
        if cached is not None:
            return cached

    try:
        jwks = _fetch_jwks()
    except (requests.RequestException, ValueError) as error:
        logger.exception('Failed to fetch signing keys')
        raise IdentityProviderUnavailableError(
            'Unable to fetch signing keys',
        ) from error

    keys = jwks.get('keys', [])
    cache.set(cache_key, keys, settings.COGNITO_JWKS_CACHE_TIMEOUT)
    return keys


def find_signing_key(key_id: str) -> dict[str, Any] | None:
    """Find the JWK with the given key id.

    A miss refreshes the cached key set once, the pool may have
    rotated its keys since they were cached.
    """
    for refresh in (False, True):
        for jwk in get_signing_keys(refresh=refresh):
            if jwk.get('kid') == key_id:
                return jwk
    return None


def get_idp_client() -> 'CognitoIdentityProviderClient':
    """Create a boto3 client for the pool's region.

    Raises:
        IdentityProviderUnavailableError: If no user pool is configured.
    """
    if not (is_configured() and settings.COGNITO_CLIENT_ID):
        raise IdentityProviderUnavailableError(
            'Cognito user pool is not configured',
        )
    return boto3.client('cognito-idp', region_name=settings.COGNITO_REGION)
