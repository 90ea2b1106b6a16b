"""Business logic for browsing drives."""

import logging
import math
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Final, Literal, final

from botocore.exceptions import BotoCoreError, ClientError

from server.apps.drive.exceptions import InvalidRequestError, StorageOperationError
from server.apps.drive.infrastructure import file_types
from server.apps.drive.infrastructure.paths import (
    directory_prefix,
    is_directory_key,
    object_name,
)
from server.apps.drive.infrastructure.s3 import get_client, get_client_for_drive

logger = logging.getLogger(__name__)

SortColumn = Literal['name', 'size', 'modified']
SortDirection = Literal['asc', 'desc']

_SORT_COLUMNS: Final = frozenset(('name', 'size', 'modified'))
_SORT_DIRECTIONS: Final = frozenset(('asc', 'desc'))
_EPOCH: Final = datetime.min.replace(tzinfo=UTC)

# Type filters that keep only matching files and hide directories
_FILE_TYPE_FILTERS: Final[dict[str, Callable[[str], bool]]] = {
    'images': file_types.is_image,
    'videos': file_types.is_video,
    'sound': file_types.is_audio,
    'docs': file_types.is_document,
}
TYPE_FILTERS: Final = frozenset(('directory', 'file', *_FILE_TYPE_FILTERS))


@final
@dataclass(frozen=True)
class DriveInfo:
    """A drive (bucket) visible to the configured credentials."""

    name: str
    creation_date: datetime | None = None


@final
@dataclass(frozen=True)
class FileEntry:
    """An object shown as a file in a listing."""

    key: str
    name: str
    size: int
    last_modified: datetime | None
    etag: str | None = None
    is_directory: bool = field(default=False, init=False)

    @property
    def id(self) -> str:  # noqa: WPS125
        """Stable id derived from the key."""
        return file_types.stable_id(self.key)


@final
@dataclass(frozen=True)
class DirectoryEntry:
    """A common prefix shown as a directory in a listing."""

    key: str
    name: str
    last_modified: datetime | None = None
    is_directory: bool = field(default=True, init=False)

    @property
    def id(self) -> str:  # noqa: WPS125
        """Stable id derived from the key."""
        return file_types.stable_id(self.key)

    @property
    def size(self) -> int:
        """Directories carry no size of their own in a listing."""
        return 0


Entry = FileEntry | DirectoryEntry


@final
@dataclass(frozen=True)
class DirectoryListing:
    """Direct children of a prefix."""

    files: list[FileEntry]
    directories: list[DirectoryEntry]


@final
@dataclass(frozen=True)
class ListingQuery:
    """Filtering, sorting and pagination options for a listing."""

    page: int = 1
    limit: int = 20
    name: str = ''
    type: str = ''  # noqa: WPS125
    extension: str = ''
    sort: SortColumn | None = None
    direction: SortDirection | None = None

    def __post_init__(self) -> None:
        """Validate option values.

        Raises:
            InvalidRequestError: If any option is out of range.
        """
        if self.page < 1:
            raise InvalidRequestError('Page must be at least 1')
        if self.limit < 1:
            raise InvalidRequestError('Limit must be at least 1')
        if self.type and self.type not in TYPE_FILTERS:
            raise InvalidRequestError(f'Unknown type filter: {self.type}')
        if self.sort is not None and self.sort not in _SORT_COLUMNS:
            raise InvalidRequestError(f'Unknown sort column: {self.sort}')
        if self.direction is not None and self.direction not in _SORT_DIRECTIONS:
            raise InvalidRequestError(
                f'Unknown sort direction: {self.direction}',
            )


@final
@dataclass(frozen=True)
class ListingPage:
    """One page of a filtered and sorted listing."""

    files: list[FileEntry]
    directories: list[DirectoryEntry]
    total_files: int
    total_directories: int
    total_pages: int
    current_page: int


def list_drives() -> list[DriveInfo]:
    """List all drives visible to the configured credentials.

    Returns:
        DriveInfo per bucket, in the order the store returns them.

    Raises:
        StorageOperationError: If the store rejects the request.
    """
    try:
        response = get_client().list_buckets()
    except (BotoCoreError, ClientError) as error:
        logger.exception('Failed to list drives')
        raise StorageOperationError('Failed to list drives') from error

    return [
        DriveInfo(
            name=bucket.get('Name', ''),
            creation_date=bucket.get('CreationDate'),
        )
        for bucket in response.get('Buckets', [])
    ]


def list_directory(drive: str, prefix: str = '') -> DirectoryListing:
    """List files and directories directly under a prefix.

    Directories come from the store's common prefixes. Stores that
    ignore the delimiter return nested keys instead, the first level
    directory of such keys is inferred so it still shows up.

    Args:
        drive: Drive (bucket) name.
        prefix: Directory key, with or without trailing slash.

    Returns:
        DirectoryListing with direct children only.

    Raises:
        StorageOperationError: If the store rejects the request.
    """
    prefix = directory_prefix(prefix)
    logger.debug('Listing directory: %s/%s', drive, prefix)

    files: list[FileEntry] = []
    directories: list[DirectoryEntry] = []
    seen_directories: set[str] = set()

    def add_directory(dir_key: str) -> None:  # noqa: WPS430
        if dir_key in seen_directories:
            return
        seen_directories.add(dir_key)
        directories.append(
            DirectoryEntry(key=dir_key, name=object_name(dir_key)),
        )

    client = get_client_for_drive(drive)
    paginator = client.get_paginator('list_objects_v2')
    try:
        for page in paginator.paginate(Bucket=drive, Prefix=prefix, Delimiter='/'):
            for common_prefix in page.get('CommonPrefixes', []):
                add_directory(common_prefix['Prefix'])

            for obj in page.get('Contents', []):
                key = obj['Key']
                if key == prefix or is_directory_key(key):
                    continue

                relative_parts = key[len(prefix):].split('/')
                if len(relative_parts) > 1:
                    add_directory(prefix + relative_parts[0] + '/')
                    continue

                files.append(FileEntry(
                    key=key,
                    name=object_name(key),
                    size=obj.get('Size', 0),
                    last_modified=obj.get('LastModified'),
                    etag=obj.get('ETag'),
                ))
    except (BotoCoreError, ClientError) as error:
        logger.exception('Failed to list objects: %s/%s', drive, prefix)
        raise StorageOperationError('Failed to list objects') from error

    return DirectoryListing(files=files, directories=directories)


def browse(drive: str, prefix: str, query: ListingQuery) -> ListingPage:
    """List a directory and apply filters, sorting and pagination.

    Directories always come before files, both when sorted and when
    paginated, so a page may mix the tail of the directories with the
    head of the files.

    Args:
        drive: Drive (bucket) name.
        prefix: Directory key.
        query: Listing options.

    Returns:
        The requested ListingPage.
    """
    listing = list_directory(drive, prefix)
    files, directories = filter_entries(
        listing.files,
        listing.directories,
        query,
    )
    entries = sort_entries([*directories, *files], query.sort, query.direction)

    total = len(entries)
    total_pages = max(1, math.ceil(total / query.limit))
    start = (query.page - 1) * query.limit
    page_entries = entries[start:start + query.limit]

    return ListingPage(
        files=[entry for entry in page_entries if isinstance(entry, FileEntry)],
        directories=[
            entry for entry in page_entries
            if isinstance(entry, DirectoryEntry)
        ],
        total_files=len(files),
        total_directories=len(directories),
        total_pages=total_pages,
        current_page=query.page,
    )


def filter_entries(
    files: Sequence[FileEntry],
    directories: Sequence[DirectoryEntry],
    query: ListingQuery,
) -> tuple[list[FileEntry], list[DirectoryEntry]]:
    """Apply name, type and extension filters.

    Args:
        files: File entries.
        directories: Directory entries.
        query: Listing options holding the filters.

    Returns:
        Filtered files and directories.
    """
    kept_files = list(files)
    kept_directories = list(directories)

    if query.name:
        needle = query.name.lower()
        kept_files = [entry for entry in kept_files if needle in entry.name.lower()]
        kept_directories = [
            entry for entry in kept_directories
            if needle in entry.name.lower()
        ]

    if query.type == 'directory':
        kept_files = []
    elif query.type == 'file':
        kept_directories = []
    elif query.type:
        matches = _FILE_TYPE_FILTERS[query.type]
        kept_files = [entry for entry in kept_files if matches(entry.name)]
        kept_directories = []

    extensions = parse_extensions(query.extension)
    if extensions:
        kept_files = [
            entry for entry in kept_files
            if file_types.get_file_extension(entry.name) in extensions
        ]
        kept_directories = []

    return kept_files, kept_directories


def parse_extensions(raw: str) -> frozenset[str]:
    """Parse an extension filter like '.jpg, png pdf'.

    Args:
        raw: Comma or whitespace separated extensions.

    Returns:
        Lowercase extensions without dots.
    """
    tokens = raw.replace(',', ' ').split()
    return frozenset(
        token.lstrip('.').lower() for token in tokens if token.lstrip('.')
    )


def sort_entries(
    entries: Sequence[Entry],
    column: SortColumn | None,
    direction: SortDirection | None,
) -> list[Entry]:
    """Sort entries keeping directories on top.

    Args:
        entries: Directories and files.
        column: Column to sort by, None keeps the store's order.
        direction: 'asc' or 'desc'.

    Returns:
        New sorted list.
    """
    directories = [entry for entry in entries if entry.is_directory]
    files = [entry for entry in entries if not entry.is_directory]
    if column is None or direction is None:
        return [*directories, *files]

    reverse = direction == 'desc'
    sort_key = _SORT_KEYS[column]
    return [
        *sorted(directories, key=sort_key, reverse=reverse),
        *sorted(files, key=sort_key, reverse=reverse),
    ]


def _name_key(entry: Entry) -> str:
    return entry.name.lower()


def _size_key(entry: Entry) -> int:
    return entry.size


def _modified_key(entry: Entry) -> datetime:
    return entry.last_modified or _EPOCH


_SORT_KEYS: Final[dict[str, Callable[[Entry], str | int | datetime]]] = {
    'name': _name_key,
    'size': _size_key,
    'modified': _modified_key,
}
