"""Per-user preferences of the file explorer."""

import logging
from typing import Any, Final

from django.conf import settings
from django.db import transaction

from server.apps.accounts.exceptions import PreferenceError
from server.apps.accounts.models import UserPreferences, ViewMode

logger = logging.getLogger(__name__)

EDITABLE_FIELDS: Final = frozenset((
    'delete_protection',
    'view_mode',
    'items_per_page',
    'default_view',
))


def get_preferences(username: str) -> UserPreferences:
    """Return stored preferences, or unsaved defaults for new users."""
    preferences = UserPreferences.objects.filter(username=username).first()
    if preferences is None:
        return UserPreferences(username=username)
    return preferences


def update_preferences(username: str, **changes: Any) -> UserPreferences:
    """Validate and persist preference changes.

    Args:
        username: Owner of the preferences.
        changes: Field values to update.

    Returns:
        Updated UserPreferences instance.

    Raises:
        PreferenceError: If a field is unknown or a value is invalid.
    """
    unknown = sorted(set(changes) - EDITABLE_FIELDS)
    if unknown:
        raise PreferenceError(
            'Unknown preferences: {0}'.format(', '.join(unknown)),
        )

    cleaned = {name: _clean(name, value) for name, value in changes.items()}

    with transaction.atomic():
        preferences, _ = UserPreferences.objects.select_for_update().get_or_create(
            username=username,
        )
        for name, value in cleaned.items():
            setattr(preferences, name, value)
        preferences.save()

    logger.info(
        'Updated preferences for %s: %s',
        username,
        ', '.join(sorted(cleaned)) or 'no changes',
    )
    return preferences


def is_delete_protection_enabled(username: str) -> bool:
    """Whether deletes must be confirmed by the user."""
    return get_preferences(username).delete_protection


def is_view_mode_enabled(username: str) -> bool:
    """Whether files open in the preview panel."""
    return get_preferences(username).view_mode


def _clean(name: str, value: Any) -> Any:  # noqa: WPS231
    if name in {'delete_protection', 'view_mode'}:
        if not isinstance(value, bool):
            raise PreferenceError(f'{name} must be a boolean')
        return value

    if name == 'items_per_page':
        # bool is an int subclass
        if isinstance(value, bool) or not isinstance(value, int):
            raise PreferenceError('items_per_page must be an integer')
        if not 1 <= value <= settings.DRIVE_MAX_ITEMS_PER_PAGE:
            raise PreferenceError(
                'items_per_page must be between 1 and {0}'.format(
                    settings.DRIVE_MAX_ITEMS_PER_PAGE,
                ),
            )
        return value

    if value not in ViewMode.values:
        raise PreferenceError(
            'default_view must be one of: {0}'.format(', '.join(ViewMode.values)),
        )
    return value
