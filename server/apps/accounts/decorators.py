"""View decorators for accounts app."""

import functools
import logging
from collections.abc import Callable
from typing import Concatenate, ParamSpec

from django.http import HttpRequest, HttpResponse

from server.apps.accounts.exceptions import AuthenticationError
from server.apps.accounts.logic.authentication import CognitoAuthenticator
from server.http import ApiError, error_response

logger = logging.getLogger(__name__)

_Params = ParamSpec('_Params')

_authenticator = CognitoAuthenticator()


def token_required(
    view: Callable[Concatenate[HttpRequest, _Params], HttpResponse],
) -> Callable[Concatenate[HttpRequest, _Params], HttpResponse]:
    """Reject requests without a valid identity token.

    The verified user is attached to the request as ``drive_user``.
    Use with ``method_decorator(..., name='dispatch')`` on class based
    views.
    """
    @functools.wraps(view)
    def wrapper(
        request: HttpRequest,
        *args: _Params.args,
        **kwargs: _Params.kwargs,
    ) -> HttpResponse:
        try:
            user = _authenticator.verify(request.headers.get('Authorization'))
        except AuthenticationError as error:
            logger.info('Rejected request to %s: %s', request.path, error)
            return error_response(str(error), error.status_code)
        except ApiError as error:
            return error_response(str(error), error.status_code)

        request.drive_user = user  # type: ignore[attr-defined]
        return view(request, *args, **kwargs)
    return wrapper
