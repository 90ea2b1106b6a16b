"""HTTP views for accounts app."""

from django.http import HttpRequest, JsonResponse
from django.utils.decorators import method_decorator
from django.views import View
from django.views.decorators.csrf import csrf_exempt

from server.apps.accounts.decorators import token_required
from server.apps.accounts.logic import preferences, sign_in
from server.apps.accounts.serializers import (
    deserialize_preferences,
    serialize_preferences,
    serialize_tokens,
)
from server.http import json_errors, read_json_body, require_fields


@method_decorator(csrf_exempt, name='dispatch')
class LoginView(View):
    """Exchange username and password for tokens."""

    @json_errors('Failed to sign in')
    def post(self, request: HttpRequest) -> JsonResponse:
        payload = read_json_body(request)
        require_fields(payload, 'username', 'password')
        tokens = sign_in.sign_in(payload['username'], payload['password'])
        return JsonResponse(serialize_tokens(tokens))


@method_decorator(csrf_exempt, name='dispatch')
class RefreshView(View):
    """Exchange a refresh token for new tokens."""

    @json_errors('Failed to refresh session')
    def post(self, request: HttpRequest) -> JsonResponse:
        payload = read_json_body(request)
        require_fields(payload, 'refreshToken')
        tokens = sign_in.refresh(payload['refreshToken'])
        return JsonResponse(serialize_tokens(tokens))


@method_decorator(csrf_exempt, name='dispatch')
@method_decorator(token_required, name='dispatch')
class LogoutView(View):
    """Revoke the caller's tokens."""

    @json_errors('Failed to sign out')
    def post(self, request: HttpRequest) -> JsonResponse:
        payload = read_json_body(request)
        require_fields(payload, 'accessToken')
        sign_in.sign_out(payload['accessToken'])
        return JsonResponse({'success': True})


@method_decorator(csrf_exempt, name='dispatch')
@method_decorator(token_required, name='dispatch')
class PreferencesView(View):
    """Read and update the caller's preferences."""

    @json_errors('Failed to load preferences')
    def get(self, request: HttpRequest) -> JsonResponse:
        username = request.drive_user.username  # type: ignore[attr-defined]
        return JsonResponse(
            serialize_preferences(preferences.get_preferences(username)),
        )

    @json_errors('Failed to save preferences')
    def put(self, request: HttpRequest) -> JsonResponse:
        username = request.drive_user.username  # type: ignore[attr-defined]
        changes = deserialize_preferences(read_json_body(request))
        updated = preferences.update_preferences(username, **changes)
        return JsonResponse(serialize_preferences(updated))
