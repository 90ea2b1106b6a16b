"""Verification of Cognito identity tokens."""

import logging
from dataclasses import dataclass, field
from typing import Any, Final, final

from django.conf import settings
from jose import JWTError, jwt

from server.apps.accounts.exceptions import AuthenticationError
from server.apps.accounts.infrastructure import cognito

logger = logging.getLogger(__name__)

ANONYMOUS_USERNAME: Final = 'anonymous'
_BEARER_SCHEME: Final = 'bearer'
_ALGORITHMS: Final = ('RS256',)


@final
@dataclass(frozen=True, slots=True)
class AuthenticatedUser:
    """Identity attached to a verified request."""

    username: str
    email: str | None = None
    claims: dict[str, Any] = field(default_factory=dict)

    @property
    def is_anonymous(self) -> bool:
        """Whether verification was skipped."""
        return not self.claims and self.username == ANONYMOUS_USERNAME


def extract_token(authorization_header: str | None) -> str:
    """Pull the token out of an ``Authorization`` header.

    Both ``Bearer <token>`` and the bare token are accepted.

    Raises:
        AuthenticationError: If the header or token is missing.
    """
    if not authorization_header:
        raise AuthenticationError('Authorization header is missing')

    token = authorization_header.strip()
    scheme, _, credentials = token.partition(' ')
    if scheme.lower() == _BEARER_SCHEME:
        token = credentials.strip()
    if not token:
        raise AuthenticationError('Token is missing')
    return token


@final
class CognitoAuthenticator:
    """Verifies ID tokens issued by the configured user pool."""

    def verify(self, authorization_header: str | None) -> AuthenticatedUser:
        """Verify the header's token and return the user it names.

        When no user pool is configured the token is not checked and
        an anonymous user is returned, for local development only.

        Args:
            authorization_header: Raw ``Authorization`` header value.

        Returns:
            AuthenticatedUser built from the token claims.

        Raises:
            AuthenticationError: If the token is missing or invalid.
        """
        token = extract_token(authorization_header)

        if not cognito.is_configured():
            logger.warning(
                'COGNITO_USER_POOL_ID is not set, skipping token verification',
            )
            return AuthenticatedUser(username=ANONYMOUS_USERNAME)

        claims = self._decode(token)
        if claims.get('token_use') != 'id':
            raise AuthenticationError('Token is not an ID token')

        username = claims.get('cognito:username') or claims.get('sub') or 'unknown'
        return AuthenticatedUser(
            username=username,
            email=claims.get('email'),
            claims=claims,
        )

    def _decode(self, token: str) -> dict[str, Any]:
        try:
            header = jwt.get_unverified_header(token)
        except JWTError as error:
            raise AuthenticationError('Malformed token') from error

        signing_key = cognito.find_signing_key(header.get('kid', ''))
        if signing_key is None:
            raise AuthenticationError('Token signing key is unknown')

        client_id = settings.COGNITO_CLIENT_ID or None
        try:
            return jwt.decode(
                token,
                signing_key,
                algorithms=list(_ALGORITHMS),
                audience=client_id,
                issuer=cognito.get_issuer(),
                options={
                    'verify_aud': client_id is not None,
                    'verify_at_hash': False,
                },
            )
        except JWTError as error:
            logger.info('Token verification failed: %s', error)
            raise AuthenticationError('Invalid token') from error
