"""Tests for user pool sign-in flows."""

from unittest import mock

import pytest
from botocore.exceptions import ClientError, EndpointConnectionError

from server.apps.accounts.exceptions import (
    AuthenticationError,
    IdentityProviderUnavailableError,
)
from server.apps.accounts.infrastructure.cognito import get_idp_client
from server.apps.accounts.logic.sign_in import refresh, sign_in, sign_out

_AUTH_RESULT = {
    'AuthenticationResult': {
        'IdToken': 'id-token',
        'AccessToken': 'access-token',
        'RefreshToken': 'refresh-token',
        'ExpiresIn': 3600,
    },
}


def _client_error(code, message='Boom'):
    return ClientError(
        {'Error': {'Code': code, 'Message': message}},
        'InitiateAuth',
    )


@pytest.fixture
def idp_client(cognito_pool):
    """Stub cognito-idp client.

    Yields:
        MagicMock standing in for the boto3 client.
    """
    client = mock.MagicMock()
    with mock.patch(
        'server.apps.accounts.infrastructure.cognito.get_idp_client',
        return_value=client,
    ):
        yield client


def test_get_idp_client_requires_pool():
    """Test the client can't be built without a pool."""
    with pytest.raises(IdentityProviderUnavailableError):
        get_idp_client()


def test_get_idp_client_uses_pool_region(cognito_pool):
    """Test the client targets the pool's region."""
    assert get_idp_client().meta.region_name == 'eu-west-1'


def test_sign_in(idp_client, settings):
    """Test password sign-in returns every token."""
    idp_client.initiate_auth.return_value = _AUTH_RESULT

    tokens = sign_in('alice', 'secret')

    assert tokens.id_token == 'id-token'
    assert tokens.access_token == 'access-token'
    assert tokens.refresh_token == 'refresh-token'
    assert tokens.expires_in == 3600
    idp_client.initiate_auth.assert_called_once_with(
        ClientId=settings.COGNITO_CLIENT_ID,
        AuthFlow='USER_PASSWORD_AUTH',
        AuthParameters={'USERNAME': 'alice', 'PASSWORD': 'secret'},
    )


def test_sign_in_rejected(idp_client):
    """Test rejected credentials are an authentication error."""
    idp_client.initiate_auth.side_effect = _client_error(
        'NotAuthorizedException',
        'Incorrect username or password.',
    )

    with pytest.raises(AuthenticationError, match='Incorrect username'):
        sign_in('alice', 'wrong')


def test_sign_in_challenge(idp_client):
    """Test challenges are not supported."""
    idp_client.initiate_auth.return_value = {
        'ChallengeName': 'NEW_PASSWORD_REQUIRED',
        'Session': 'session',
    }

    with pytest.raises(AuthenticationError, match='NEW_PASSWORD_REQUIRED'):
        sign_in('alice', 'secret')


def test_sign_in_provider_failure(idp_client):
    """Test unexpected provider errors are a 503."""
    idp_client.initiate_auth.side_effect = _client_error('InternalErrorException')

    with pytest.raises(IdentityProviderUnavailableError):
        sign_in('alice', 'secret')


def test_sign_in_unreachable(idp_client):
    """Test connection failures are a 503."""
    idp_client.initiate_auth.side_effect = EndpointConnectionError(
        endpoint_url='https://cognito-idp.eu-west-1.amazonaws.com',
    )

    with pytest.raises(IdentityProviderUnavailableError):
        sign_in('alice', 'secret')


def test_refresh(idp_client):
    """Test refresh uses the refresh token flow."""
    idp_client.initiate_auth.return_value = {
        'AuthenticationResult': {
            'IdToken': 'new-id-token',
            'AccessToken': 'new-access-token',
            'ExpiresIn': 3600,
        },
    }

    tokens = refresh('refresh-token')

    assert tokens.id_token == 'new-id-token'
    assert tokens.refresh_token is None
    call_kwargs = idp_client.initiate_auth.call_args.kwargs
    assert call_kwargs['AuthFlow'] == 'REFRESH_TOKEN_AUTH'
    assert call_kwargs['AuthParameters'] == {'REFRESH_TOKEN': 'refresh-token'}


def test_sign_out(idp_client):
    """Test sign-out revokes the access token."""
    sign_out('access-token')

    idp_client.global_sign_out.assert_called_once_with(
        AccessToken='access-token',
    )


def test_sign_out_rejected(idp_client):
    """Test an invalid access token can't sign out."""
    idp_client.global_sign_out.side_effect = _client_error(
        'NotAuthorizedException',
        'Access Token has been revoked',
    )

    with pytest.raises(AuthenticationError, match='revoked'):
        sign_out('access-token')
