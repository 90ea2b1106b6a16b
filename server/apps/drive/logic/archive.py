"""Business logic for downloading a directory as a ZIP archive."""

import io
import logging
import zipfile
from dataclasses import dataclass, field
from typing import Any, Final, final

from botocore.exceptions import BotoCoreError, ClientError
from django.conf import settings

from server.apps.drive.exceptions import (
    DirectoryEmptyError,
    InvalidRequestError,
    StorageOperationError,
)
from server.apps.drive.infrastructure.paths import (
    directory_prefix,
    is_directory_key,
    object_name,
)
from server.apps.drive.infrastructure.s3 import (
    get_client_for_drive,
    iter_objects,
)

logger = logging.getLogger(__name__)

_BYTES_PER_MB: Final = 1024 * 1024
_COMPRESS_LEVEL: Final = 1  # Fast compression
_PREVIEW_FILE_COUNT: Final = 20
_DEFAULT_ARCHIVE_NAME: Final = 'directory'

OVERSIZE_SUGGESTIONS: Final = (
    'Download individual files using the file browser',
    'Use AWS CLI: aws s3 sync s3://bucket/path/ ./local-folder/',
    'Contact administrator for bulk download assistance',
    'Consider using S3 Transfer Acceleration for large downloads',
)


@final
@dataclass(frozen=True)
class ArchiveMember:
    """An object that will be placed into the archive."""

    key: str
    name: str
    size: int


@final
@dataclass(frozen=True)
class DirectoryArchive:
    """A built ZIP archive of a directory."""

    filename: str
    content: bytes
    file_count: int
    skipped: list[str] = field(default_factory=list)


@final
@dataclass(frozen=True)
class OversizedDirectory:
    """Answer for directories that are too big to zip on the fly."""

    directory_name: str
    file_count: int
    total_size_mb: float
    files: list[ArchiveMember]
    suggestions: tuple[str, ...] = OVERSIZE_SUGGESTIONS

    @property
    def message(self) -> str:
        """Explanation shown to the user."""
        return (
            'Directory is too large for ZIP download '
            f'({self.file_count} files, {self.total_size_mb:.2f} MB)'
        )


def build_directory_archive(
    drive: str,
    directory_key: str,
) -> DirectoryArchive | OversizedDirectory:
    """Zip every object under a directory.

    Small directories (``DRIVE_ARCHIVE_MAX_FILES`` files and
    ``DRIVE_ARCHIVE_MAX_MB`` megabytes at most) are zipped in memory.
    Objects that fail to download are logged and left out of the
    archive. Bigger directories get an OversizedDirectory answer.

    Args:
        drive: Drive (bucket) name.
        directory_key: Directory key, trailing slash optional.

    Returns:
        DirectoryArchive or OversizedDirectory.

    Raises:
        InvalidRequestError: If the directory key is empty.
        DirectoryEmptyError: If the directory holds no files.
        StorageOperationError: If listing fails.
    """
    prefix = directory_prefix(directory_key)
    if not prefix:
        raise InvalidRequestError('Drive and directory path are required')

    directory_name = object_name(prefix) or _DEFAULT_ARCHIVE_NAME
    client = get_client_for_drive(drive)
    members = _collect_members(client, drive, prefix)
    if not members:
        raise DirectoryEmptyError('Directory is empty')

    total_size = sum(member.size for member in members)
    total_size_mb = total_size / _BYTES_PER_MB
    if (
        len(members) > settings.DRIVE_ARCHIVE_MAX_FILES
        or total_size_mb > settings.DRIVE_ARCHIVE_MAX_MB
    ):
        logger.info(
            'Directory too large to zip: %s/%s (%d files, %.2f MB)',
            drive,
            prefix,
            len(members),
            total_size_mb,
        )
        return OversizedDirectory(
            directory_name=directory_name,
            file_count=len(members),
            total_size_mb=round(total_size_mb, 2),
            files=members[:_PREVIEW_FILE_COUNT],
        )

    buffer = io.BytesIO()
    skipped: list[str] = []
    with zipfile.ZipFile(
        buffer,
        mode='w',
        compression=zipfile.ZIP_DEFLATED,
        compresslevel=_COMPRESS_LEVEL,
    ) as archive:
        for member in members:
            try:
                response = client.get_object(Bucket=drive, Key=member.key)
                archive.writestr(member.key[len(prefix):], response['Body'].read())
            except (BotoCoreError, ClientError):
                logger.exception(
                    'Skipping object in archive: %s/%s',
                    drive,
                    member.key,
                )
                skipped.append(member.key)

    logger.info(
        'Built archive for %s/%s: %d files, %d skipped',
        drive,
        prefix,
        len(members) - len(skipped),
        len(skipped),
    )
    return DirectoryArchive(
        filename=f'{directory_name}.zip',
        content=buffer.getvalue(),
        file_count=len(members) - len(skipped),
        skipped=skipped,
    )


def _collect_members(client: Any, drive: str, prefix: str) -> list[ArchiveMember]:
    try:
        return [
            ArchiveMember(
                key=obj['Key'],
                name=object_name(obj['Key']),
                size=obj.get('Size', 0),
            )
            for obj in iter_objects(client, drive, prefix)
            if not is_directory_key(obj['Key'])
        ]
    except (BotoCoreError, ClientError) as error:
        logger.exception('Failed to list directory: %s/%s', drive, prefix)
        raise StorageOperationError(
            f'Failed to process directory: {error}',
        ) from error
