"""Signal handlers for previews app."""

import logging

from django.dispatch import receiver

from server.apps.drive.signals import object_removed
from server.apps.previews.logic.thumbnails import purge_thumbnails

logger = logging.getLogger(__name__)


@receiver(object_removed)
def delete_cached_thumbnails(
    sender: object,
    drive: str,
    key: str,
    **kwargs: object,
) -> None:
    """Delete cached thumbnails of an object that changed or went away.

    Args:
        sender: Signal sender (unused).
        drive: Drive (bucket) name.
        key: Key of the removed or overwritten object.
        **kwargs: Additional signal arguments.
    """
    try:
        purged = purge_thumbnails(drive, key)
    except Exception:
        # Log error but don't raise, the object operation already succeeded
        logger.exception(
            'Failed to purge thumbnails (orphaned): %s/%s',
            drive,
            key,
        )
        return

    if purged:
        logger.info('Purged %d thumbnails of %s/%s', len(purged), drive, key)
