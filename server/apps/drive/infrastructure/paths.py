"""Path utilities for drive objects.

The browser addresses everything as ``drive/key/parts``: the first
segment is the drive (bucket) name and the rest is the object key.
Directories are implicit, a directory key is a prefix ending with ``/``.
"""

from typing import Final, NamedTuple

from server.apps.drive.exceptions import InvalidPathError

_PATH_SEPARATOR: Final = '/'


class DrivePath(NamedTuple):
    """Drive name and object key parsed from a browser path."""

    drive: str
    key: str


def parse_drive_path(path: str | None) -> DrivePath:
    """Split a ``drive/key`` path into its drive and key.

    Empty segments are dropped, so ``/photos//2024`` gives drive
    ``photos`` and key ``2024``. A trailing slash is kept on the key,
    ``photos/2024/`` addresses the directory ``2024/``.

    Args:
        path: Browser path.

    Returns:
        Parsed DrivePath. The key is empty for a drive root.

    Raises:
        InvalidPathError: If the path is empty or holds an unsafe key.
    """
    if not path:
        raise InvalidPathError('Path is required')

    segments = [segment for segment in path.split(_PATH_SEPARATOR) if segment]
    if not segments:
        raise InvalidPathError('Drive name is required')

    key = _PATH_SEPARATOR.join(segments[1:])
    if key and path.endswith(_PATH_SEPARATOR):
        key += _PATH_SEPARATOR
    validate_key(key)
    return DrivePath(drive=segments[0], key=key)


def parse_object_path(path: str | None) -> DrivePath:
    """Parse a ``drive/key`` path that must address an object.

    Raises:
        InvalidPathError: If the path is invalid or has no key.
    """
    drive_path = parse_drive_path(path)
    if not drive_path.key:
        raise InvalidPathError('Drive and key are required')
    return drive_path


def validate_key(key: str) -> None:
    """Validate an object key for security.

    Checks for path traversal segments and null bytes.

    Args:
        key: Object key.

    Raises:
        InvalidPathError: If the key is unsafe.
    """
    if '\x00' in key:
        raise InvalidPathError('Key must not contain null bytes')

    if '..' in key.split(_PATH_SEPARATOR):
        raise InvalidPathError('Key must not contain ".." segments')


def directory_prefix(key: str) -> str:
    """Normalize a directory key to a listing prefix.

    Example: 'photos/2024' -> 'photos/2024/'

    Args:
        key: Directory key with or without trailing slash.

    Returns:
        Prefix ending with a slash, or empty string for the root.
    """
    stripped = key.strip(_PATH_SEPARATOR)
    if not stripped:
        return ''
    return stripped + _PATH_SEPARATOR


def is_directory_key(key: str) -> bool:
    """Check if a key addresses a directory (ends with a slash)."""
    return key.endswith(_PATH_SEPARATOR)


def object_name(key: str) -> str:
    """Extract the last path segment of a key.

    Example: 'photos/2024/beach.jpg' -> 'beach.jpg'
    Example: 'photos/2024/' -> '2024'

    Args:
        key: Object or directory key.

    Returns:
        Name component, empty string for the root.
    """
    segments = [segment for segment in key.split(_PATH_SEPARATOR) if segment]
    if not segments:
        return ''
    return segments[-1]


def parent_prefix(key: str) -> str:
    """Get the directory prefix that contains a key.

    Example: 'photos/2024/beach.jpg' -> 'photos/2024/'

    Args:
        key: Object or directory key.

    Returns:
        Parent prefix, empty string for root level keys.
    """
    stripped = key.rstrip(_PATH_SEPARATOR)
    if _PATH_SEPARATOR not in stripped:
        return ''
    return stripped.rsplit(_PATH_SEPARATOR, 1)[0] + _PATH_SEPARATOR


def split_extension(name: str) -> tuple[str, str]:
    """Split a filename into stem and extension.

    Example: 'archive.tar.gz' -> ('archive.tar', 'gz')

    Args:
        name: Filename.

    Returns:
        Tuple of stem and extension without dot. A name without a dot
        has an empty extension.
    """
    if '.' not in name:
        return name, ''
    stem, extension = name.rsplit('.', 1)
    return stem, extension
