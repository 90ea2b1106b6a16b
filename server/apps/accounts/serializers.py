"""JSON shapes of accounts app responses."""

from typing import Any, Final

from server.apps.accounts.logic.sign_in import TokenSet
from server.apps.accounts.models import UserPreferences

# API field name -> model field name
PREFERENCE_FIELDS: Final = {
    'deleteProtection': 'delete_protection',
    'viewMode': 'view_mode',
    'itemsPerPage': 'items_per_page',
    'defaultView': 'default_view',
}


def serialize_preferences(preferences: UserPreferences) -> dict[str, Any]:
    return {
        api_name: getattr(preferences, field_name)
        for api_name, field_name in PREFERENCE_FIELDS.items()
    }


def deserialize_preferences(payload: dict[str, Any]) -> dict[str, Any]:
    """Map API field names to model fields, unknown names pass through."""
    return {
        PREFERENCE_FIELDS.get(name, name): value
        for name, value in payload.items()
    }


def serialize_tokens(tokens: TokenSet) -> dict[str, Any]:
    payload: dict[str, Any] = {
        'idToken': tokens.id_token,
        'accessToken': tokens.access_token,
        'expiresIn': tokens.expires_in,
    }
    if tokens.refresh_token:
        payload['refreshToken'] = tokens.refresh_token
    return payload
