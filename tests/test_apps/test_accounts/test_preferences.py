"""Tests for user preferences logic."""

import pytest

from server.apps.accounts.exceptions import PreferenceError
from server.apps.accounts.logic.preferences import (
    get_preferences,
    is_delete_protection_enabled,
    is_view_mode_enabled,
    update_preferences,
)
from server.apps.accounts.models import UserPreferences


@pytest.mark.django_db
def test_defaults_for_new_user():
    """Test unknown users get defaults without a stored row."""
    preferences = get_preferences('alice')

    assert preferences.pk is None
    assert preferences.delete_protection is True
    assert preferences.view_mode is True
    assert preferences.items_per_page == 20
    assert preferences.default_view == 'list'
    assert not UserPreferences.objects.exists()


@pytest.mark.django_db
def test_update_creates_row():
    """Test the first update stores the preferences."""
    update_preferences('alice', delete_protection=False, items_per_page=50)

    stored = UserPreferences.objects.get(username='alice')
    assert stored.delete_protection is False
    assert stored.items_per_page == 50
    assert stored.view_mode is True


@pytest.mark.django_db
def test_update_keeps_other_fields():
    """Test partial updates leave other fields alone."""
    update_preferences('alice', default_view='grid')
    update_preferences('alice', view_mode=False)

    preferences = get_preferences('alice')
    assert preferences.default_view == 'grid'
    assert preferences.view_mode is False
    assert UserPreferences.objects.count() == 1


@pytest.mark.django_db
def test_preferences_are_per_user():
    """Test users don't share preferences."""
    update_preferences('alice', delete_protection=False)

    assert is_delete_protection_enabled('alice') is False
    assert is_delete_protection_enabled('bob') is True
    assert is_view_mode_enabled('bob') is True


@pytest.mark.django_db
@pytest.mark.parametrize(('changes', 'message'), [
    ({'theme': 'dark'}, 'Unknown preferences: theme'),
    ({'delete_protection': 'yes'}, 'must be a boolean'),
    ({'view_mode': 1}, 'must be a boolean'),
    ({'items_per_page': True}, 'must be an integer'),
    ({'items_per_page': '20'}, 'must be an integer'),
    ({'items_per_page': 0}, 'between 1 and'),
    ({'items_per_page': 10_000}, 'between 1 and'),
    ({'default_view': 'table'}, 'default_view must be one of'),
])
def test_update_rejects_invalid_values(changes, message):
    """Test invalid changes are rejected and nothing is stored."""
    with pytest.raises(PreferenceError, match=message):
        update_preferences('alice', **changes)

    assert not UserPreferences.objects.exists()
