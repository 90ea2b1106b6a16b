"""Database models for accounts app."""

from typing import ClassVar, Final, final, override

from django.db import models

# Cognito usernames are at most 128 characters
_USERNAME_MAX_LENGTH: Final = 128
_VIEW_MAX_LENGTH: Final = 16
_DEFAULT_ITEMS_PER_PAGE: Final = 20


class ViewMode(models.TextChoices):
    """Layouts the file explorer can render a listing in."""

    LIST = 'list', 'List'
    GRID = 'grid', 'Grid'
    PREVIEW = 'preview', 'Preview'


@final
class UserPreferences(models.Model):
    """Per-user view preferences of the file explorer.

    Users live in the identity provider, not in Django's auth tables,
    so preferences are keyed by the verified username.
    """

    username = models.CharField(
        max_length=_USERNAME_MAX_LENGTH,
        unique=True,
        help_text='Username from the verified identity token',
    )

    delete_protection = models.BooleanField(
        default=True,
        help_text='Ask for confirmation before deleting objects',
    )

    view_mode = models.BooleanField(
        default=True,
        help_text='Open files in the preview panel instead of downloading',
    )

    items_per_page = models.PositiveSmallIntegerField(
        default=_DEFAULT_ITEMS_PER_PAGE,
        help_text='Listing page size',
    )

    default_view = models.CharField(
        max_length=_VIEW_MAX_LENGTH,
        choices=ViewMode.choices,
        default=ViewMode.LIST,
    )

    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        """Model metadata."""

        verbose_name = 'User Preferences'  # type: ignore[mutable-override]
        verbose_name_plural = 'User Preferences'  # type: ignore[mutable-override]
        ordering: ClassVar[list[str]] = ['username']

        constraints: ClassVar[list[models.BaseConstraint]] = [
            models.CheckConstraint(
                condition=models.Q(items_per_page__gte=1),
                name='preferences_items_per_page_positive',
            ),
        ]

    @override
    def __str__(self) -> str:
        """String representation."""
        return f'{self.username} preferences'
