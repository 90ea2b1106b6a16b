"""Shared helpers for the JSON API views.

Every app raises subclasses of :class:`ApiError` from its logic layer.
``json_errors`` turns them into ``{"error": message}`` responses with
the status code the error class declares.
"""

import functools
import json
import logging
from collections.abc import Callable, Mapping
from typing import Any, ClassVar, Final, ParamSpec

from django.http import HttpRequest, HttpResponse, JsonResponse

logger = logging.getLogger(__name__)

_Params = ParamSpec('_Params')

_TRUE_VALUES: Final = frozenset(('1', 'true', 'yes', 'on'))


class ApiError(Exception):
    """Base class for errors reported to API clients."""

    status_code: ClassVar[int] = 500


class BadRequestError(ApiError):
    """Raised when the request itself can't be understood."""

    status_code = 400


def error_response(message: str, status: int) -> JsonResponse:
    """Build the JSON error body used by every endpoint.

    Args:
        message: Human-readable error.
        status: HTTP status code.

    Returns:
        JsonResponse with ``{"error": message}``.
    """
    return JsonResponse({'error': message}, status=status)


def json_errors(
    fallback_message: str,
) -> Callable[[Callable[_Params, HttpResponse]], Callable[_Params, HttpResponse]]:
    """Translate errors raised by a view into JSON responses.

    ApiError subclasses answer with their own status and message.
    Anything else is logged and answered with a 500 and the fallback
    message, so internals never leak to the client.

    Works for plain view functions and for methods of class based views.

    Args:
        fallback_message: Message for unexpected failures.

    Returns:
        View decorator.
    """
    def decorator(
        view: Callable[_Params, HttpResponse],
    ) -> Callable[_Params, HttpResponse]:
        @functools.wraps(view)
        def wrapper(*args: _Params.args, **kwargs: _Params.kwargs) -> HttpResponse:
            try:
                return view(*args, **kwargs)
            except ApiError as error:
                if error.status_code >= 500:  # noqa: WPS432
                    logger.error('%s: %s', fallback_message, error)
                else:
                    logger.info('Request rejected: %s', error)
                return error_response(str(error), error.status_code)
            except Exception:
                logger.exception(fallback_message)
                return error_response(fallback_message, 500)
        return wrapper
    return decorator


def read_json_body(request: HttpRequest) -> dict[str, Any]:
    """Parse a JSON object request body.

    Args:
        request: Incoming request.

    Returns:
        Decoded JSON object.

    Raises:
        BadRequestError: If the body is not a JSON object.
    """
    try:
        payload = json.loads(request.body or b'{}')
    except (ValueError, UnicodeDecodeError) as error:
        raise BadRequestError('Request body must be valid JSON') from error

    if not isinstance(payload, dict):
        raise BadRequestError('Request body must be a JSON object')
    return payload


def get_int_param(
    params: Mapping[str, str],
    name: str,
    default: int | None = None,
) -> int | None:
    """Read an integer query parameter.

    Args:
        params: Query or form parameters.
        name: Parameter name.
        default: Value used when the parameter is absent or empty.

    Returns:
        Parsed integer or the default.

    Raises:
        BadRequestError: If the value isn't an integer.
    """
    raw = params.get(name)
    if raw in (None, ''):
        return default
    try:
        return int(raw)  # type: ignore[arg-type]
    except ValueError as error:
        raise BadRequestError(f'{name} must be an integer') from error


def get_bool(value: object) -> bool:
    """Interpret a JSON or query value as a boolean."""
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in _TRUE_VALUES


def require_fields(payload: Mapping[str, Any], *names: str) -> None:
    """Ensure that required fields are present and non-empty.

    Raises:
        BadRequestError: If any field is missing.
    """
    missing = [name for name in names if payload.get(name) in (None, '')]
    if missing:
        raise BadRequestError(
            'Missing required fields: {0}'.format(', '.join(missing)),
        )
