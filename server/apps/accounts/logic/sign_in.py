"""User pool sign-in flows."""

import logging
from dataclasses import dataclass
from typing import Final, NoReturn, final

from botocore.exceptions import BotoCoreError, ClientError
from django.conf import settings

from server.apps.accounts.exceptions import (
    AuthenticationError,
    IdentityProviderUnavailableError,
)
from server.apps.accounts.infrastructure import cognito

logger = logging.getLogger(__name__)

_REJECTED_CODES: Final = frozenset((
    'NotAuthorizedException',
    'UserNotFoundException',
    'UserNotConfirmedException',
    'PasswordResetRequiredException',
))


@final
@dataclass(frozen=True, slots=True)
class TokenSet:
    """Tokens returned by a successful authentication."""

    id_token: str
    access_token: str
    expires_in: int
    refresh_token: str | None = None


def sign_in(username: str, password: str) -> TokenSet:
    """Authenticate with username and password.

    Raises:
        AuthenticationError: If the credentials are rejected or the
            pool asks for an additional challenge.
        IdentityProviderUnavailableError: If the pool can't be reached.
    """
    logger.info('Signing in user %s', username)
    return _initiate_auth(
        'USER_PASSWORD_AUTH',
        {'USERNAME': username, 'PASSWORD': password},
    )


def refresh(refresh_token: str) -> TokenSet:
    """Exchange a refresh token for fresh ID and access tokens."""
    return _initiate_auth(
        'REFRESH_TOKEN_AUTH',
        {'REFRESH_TOKEN': refresh_token},
    )


def sign_out(access_token: str) -> None:
    """Revoke every token issued to the access token's user."""
    client = cognito.get_idp_client()
    try:
        client.global_sign_out(AccessToken=access_token)
    except ClientError as error:
        _raise_for_client_error(error)
    except BotoCoreError as error:
        logger.exception('Sign-out request failed')
        raise IdentityProviderUnavailableError('Sign-out failed') from error


def _initiate_auth(flow: str, parameters: dict[str, str]) -> TokenSet:
    client = cognito.get_idp_client()
    try:
        response = client.initiate_auth(
            ClientId=settings.COGNITO_CLIENT_ID,
            AuthFlow=flow,  # type: ignore[arg-type]
            AuthParameters=parameters,
        )
    except ClientError as error:
        _raise_for_client_error(error)
    except BotoCoreError as error:
        logger.exception('Authentication request failed: %s', flow)
        raise IdentityProviderUnavailableError('Authentication failed') from error

    result = response.get('AuthenticationResult')
    if not result:
        challenge = response.get('ChallengeName', 'unknown')
        raise AuthenticationError(f'Additional challenge required: {challenge}')

    return TokenSet(
        id_token=result['IdToken'],
        access_token=result['AccessToken'],
        expires_in=result.get('ExpiresIn', 0),
        refresh_token=result.get('RefreshToken'),
    )


def _raise_for_client_error(error: ClientError) -> NoReturn:
    code = error.response.get('Error', {}).get('Code', '')
    if code in _REJECTED_CODES:
        raise AuthenticationError(
            error.response['Error'].get('Message') or 'Authentication failed',
        ) from error
    logger.exception('Identity provider request failed: %s', code)
    raise IdentityProviderUnavailableError('Identity provider error') from error
