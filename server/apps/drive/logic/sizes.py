"""Business logic for drive and directory size aggregation."""

import logging
from collections.abc import Iterator
from dataclasses import dataclass
from typing import Final, final

from botocore.exceptions import BotoCoreError, ClientError
from django.conf import settings

from server.apps.drive.exceptions import StorageOperationError
from server.apps.drive.infrastructure.file_types import format_bytes
from server.apps.drive.infrastructure.paths import (
    directory_prefix,
    is_directory_key,
)
from server.apps.drive.infrastructure.s3 import (
    get_client_for_drive,
    iter_objects,
)

logger = logging.getLogger(__name__)

_TOO_LARGE_LABEL: Final = 'Too large'


@final
@dataclass(frozen=True)
class SizeSummary:
    """Total size and object count of a drive or directory."""

    total_size: int
    total_objects: int
    too_large: bool = False

    @property
    def formatted_size(self) -> str:
        """Human-readable total, 'Too large' when over the limits."""
        if self.too_large:
            return _TOO_LARGE_LABEL
        return format_bytes(self.total_size)


@dataclass
class _Tally:
    size: int = 0
    objects: int = 0

    def add(self, size: int) -> None:
        self.size += size
        self.objects += 1

    def summary(self) -> SizeSummary:
        return SizeSummary(total_size=self.size, total_objects=self.objects)


def _iter_sized_objects(drive: str, prefix: str) -> Iterator[tuple[str, int]]:
    """Yield (key, size) for every real object under a prefix.

    Directory markers are skipped, they hold no data.
    """
    client = get_client_for_drive(drive)
    try:
        for obj in iter_objects(client, drive, prefix):
            key = obj['Key']
            if is_directory_key(key):
                continue
            yield key, obj.get('Size', 0)
    except (BotoCoreError, ClientError) as error:
        logger.exception('Failed to list objects for sizing: %s/%s', drive, prefix)
        raise StorageOperationError(
            f'Failed to calculate sizes: {error}',
        ) from error


def drive_size(drive: str) -> SizeSummary:
    """Sum every object in a drive.

    Args:
        drive: Drive (bucket) name.

    Returns:
        SizeSummary for the whole drive.

    Raises:
        StorageOperationError: If listing fails.
    """
    tally = _Tally()
    for _, size in _iter_sized_objects(drive, ''):
        tally.add(size)

    logger.info(
        'Drive %s holds %d objects (%d bytes)',
        drive,
        tally.objects,
        tally.size,
    )
    return tally.summary()


def directory_sizes(drive: str, prefix: str = '') -> dict[str, SizeSummary]:
    """Compute the recursive size of every directory under a prefix.

    Each object counts toward all of its ancestor directories, so
    ``a/`` includes what is stored in ``a/b/``. Objects at the drive
    root belong to no directory and are not reported. Only directories
    at or below the prefix are reported, ancestors above it would only
    see part of their content.

    Args:
        drive: Drive (bucket) name.
        prefix: Key prefix to restrict the scan to.

    Returns:
        Mapping of directory prefix (ending with a slash) to its summary.

    Raises:
        StorageOperationError: If listing fails.
    """
    tallies: dict[str, _Tally] = {}
    for key, size in _iter_sized_objects(drive, prefix):
        segments = key.split('/')[:-1]
        for depth in range(1, len(segments) + 1):
            directory = '/'.join(segments[:depth]) + '/'
            if not directory.startswith(prefix):
                continue
            tallies.setdefault(directory, _Tally()).add(size)

    return {
        directory: tally.summary()
        for directory, tally in sorted(tallies.items())
    }


def directory_size(drive: str, key: str) -> SizeSummary:
    """Compute the recursive size of one directory.

    Directories above ``DRIVE_DIRECTORY_MAX_OBJECTS`` objects or
    ``DRIVE_DIRECTORY_MAX_BYTES`` bytes are reported as too large with
    zero totals. The scan stops as soon as a limit is crossed.

    Args:
        drive: Drive (bucket) name.
        key: Directory key, trailing slash optional.

    Returns:
        SizeSummary for the directory, zeros when it holds nothing.

    Raises:
        StorageOperationError: If listing fails.
    """
    prefix = directory_prefix(key)
    max_objects = settings.DRIVE_DIRECTORY_MAX_OBJECTS
    max_bytes = settings.DRIVE_DIRECTORY_MAX_BYTES

    tally = _Tally()
    for _, size in _iter_sized_objects(drive, prefix):
        tally.add(size)
        if tally.objects > max_objects or tally.size > max_bytes:
            logger.info('Directory too large to size: %s/%s', drive, prefix)
            return SizeSummary(total_size=0, total_objects=0, too_large=True)

    return tally.summary()
