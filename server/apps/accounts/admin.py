"""Django admin configuration for accounts app."""

from django.contrib import admin

from server.apps.accounts.models import UserPreferences


@admin.register(UserPreferences)
class UserPreferencesAdmin(admin.ModelAdmin[UserPreferences]):
    """Admin interface for UserPreferences model."""

    list_display = [
        'username',
        'default_view',
        'items_per_page',
        'delete_protection',
        'view_mode',
        'updated_at',
    ]

    list_filter = [
        'default_view',
        'delete_protection',
        'view_mode',
    ]

    search_fields = [
        'username',
    ]

    readonly_fields = [
        'updated_at',
    ]
