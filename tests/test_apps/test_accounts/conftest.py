"""Shared fixtures for accounts app tests."""

import time
from unittest import mock

import pytest
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa
from jose import jwk, jwt

POOL_ID = 'eu-west-1_TestPool'
CLIENT_ID = 'test-client-id'
ISSUER = f'https://cognito-idp.eu-west-1.amazonaws.com/{POOL_ID}'
KEY_ID = 'test-key'


def _pem_pair():
    private_key = rsa.generate_private_key(public_exponent=65537, key_size=2048)
    private_pem = private_key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption(),
    )
    public_pem = private_key.public_key().public_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PublicFormat.SubjectPublicKeyInfo,
    )
    return private_pem, public_pem


_PRIVATE_PEM, _PUBLIC_PEM = _pem_pair()


@pytest.fixture
def cognito_pool(settings):
    """Configure a user pool for the test."""
    settings.COGNITO_USER_POOL_ID = POOL_ID
    settings.COGNITO_CLIENT_ID = CLIENT_ID
    settings.COGNITO_REGION = 'eu-west-1'
    return POOL_ID


@pytest.fixture
def signing_jwk():
    """Public JWK matching the test signing key."""
    public_jwk = jwk.construct(_PUBLIC_PEM, 'RS256').to_dict()
    public_jwk['kid'] = KEY_ID
    public_jwk['use'] = 'sig'
    return public_jwk


@pytest.fixture
def fetch_jwks(signing_jwk):
    """Serve the test key set instead of calling the pool.

    Yields:
        Mock of the key set download.
    """
    with mock.patch(
        'server.apps.accounts.infrastructure.cognito._fetch_jwks',
        return_value={'keys': [signing_jwk]},
    ) as fetch:
        yield fetch


@pytest.fixture
def make_token():
    """Factory for signed ID tokens.

    Returns:
        Callable building a token from claim overrides.
    """
    def factory(key_id=KEY_ID, **overrides):
        now = int(time.time())
        claims = {
            'sub': '5f1c-user-sub',
            'cognito:username': 'alice',
            'email': 'alice@example.com',
            'token_use': 'id',
            'iss': ISSUER,
            'aud': CLIENT_ID,
            'iat': now,
            'exp': now + 3600,
        }
        claims.update(overrides)
        claims = {name: value for name, value in claims.items() if value is not None}
        return jwt.encode(
            claims,
            _PRIVATE_PEM.decode(),
            algorithm='RS256',
            headers={'kid': key_id},
        )
    return factory
