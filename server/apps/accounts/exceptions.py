"""Exceptions for accounts app."""

from server.http import ApiError


class AuthenticationError(ApiError):
    """Raised when a request can't be tied to a verified identity."""

    status_code = 401


class IdentityProviderUnavailableError(ApiError):
    """Raised when the identity provider is not configured or unreachable."""

    status_code = 503


class PreferenceError(ApiError):
    """Raised when a preference update is invalid."""

    status_code = 400
