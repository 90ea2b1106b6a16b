"""File type classification and display formatting."""

import mimetypes
from pathlib import PurePosixPath
from typing import Final

_BYTES_BASE: Final = 1024
_SIZE_UNITS: Final = ('Bytes', 'KB', 'MB', 'GB', 'TB', 'PB')
_SECONDS_PER_HOUR: Final = 3600
_SECONDS_PER_MINUTE: Final = 60

# djb2 seed and 32-bit mask for stable item ids
_DJB2_SEED: Final = 5381
_UINT32_MASK: Final = 0xFFFFFFFF
_BASE36_DIGITS: Final = '0123456789abcdefghijklmnopqrstuvwxyz'

IMAGE_EXTENSIONS: Final = frozenset((
    'jpg', 'jpeg', 'png', 'gif', 'bmp', 'svg', 'webp', 'ico', 'tiff',
))
VIDEO_EXTENSIONS: Final = frozenset((
    'mp4', 'avi', 'mov', 'wmv', 'flv', 'webm', 'mkv', 'm4v',
))
AUDIO_EXTENSIONS: Final = frozenset((
    'mp3', 'wav', 'flac', 'aac', 'ogg', 'm4a',
))
CODE_EXTENSIONS: Final = frozenset((
    'js', 'ts', 'jsx', 'tsx', 'html', 'css', 'scss', 'sass', 'php', 'py',
    'java', 'cpp', 'c', 'cs', 'go', 'rs', 'rb', 'swift', 'kt', 'json',
    'xml', 'yaml', 'yml', 'md', 'sql',
))
EDITABLE_TEXT_EXTENSIONS: Final = CODE_EXTENSIONS | frozenset(('txt',))
DOCUMENT_EXTENSIONS: Final = CODE_EXTENSIONS | frozenset((
    'pdf', 'doc', 'docx', 'txt', 'rtf', 'odt',
    'xls', 'xlsx', 'csv', 'ods',
    'ppt', 'pptx', 'odp',
))

_ICON_GROUPS: Final = (
    (IMAGE_EXTENSIONS, 'image'),
    (VIDEO_EXTENSIONS, 'video'),
    (AUDIO_EXTENSIONS, 'music'),
    (frozenset(('pdf', 'doc', 'docx', 'txt', 'rtf', 'odt')), 'file-text'),
    (frozenset(('xls', 'xlsx', 'csv', 'ods')), 'table'),
    (frozenset(('ppt', 'pptx', 'odp')), 'presentation'),
    (frozenset(('zip', 'rar', '7z', 'tar', 'gz')), 'archive'),
    (CODE_EXTENSIONS, 'code'),
    (frozenset(('exe', 'msi', 'dmg', 'pkg')), 'cpu'),
)


def get_file_extension(filename: str) -> str:
    """Get file extension from filename.

    Args:
        filename: Filename (e.g., 'document.pdf').

    Returns:
        Extension without dot, lowercase (e.g., 'pdf').
        Returns empty string if no extension.
    """
    extension = PurePosixPath(filename).suffix
    return extension.lstrip('.').lower()


def detect_mime_type(filename: str) -> str:
    """Guess MIME type from filename extension.

    Args:
        filename: Filename with extension.

    Returns:
        MIME type string, 'application/octet-stream' when unknown.
    """
    mime_type, _ = mimetypes.guess_type(filename)
    if mime_type is None:
        return 'application/octet-stream'
    return mime_type


def is_image(filename: str) -> bool:
    """Check if file is an image."""
    return get_file_extension(filename) in IMAGE_EXTENSIONS


def is_video(filename: str) -> bool:
    """Check if file is a video."""
    return get_file_extension(filename) in VIDEO_EXTENSIONS


def is_audio(filename: str) -> bool:
    """Check if file is audio."""
    return get_file_extension(filename) in AUDIO_EXTENSIONS


def is_pdf(filename: str) -> bool:
    """Check if file is a PDF document."""
    return get_file_extension(filename) == 'pdf'


def is_document(filename: str) -> bool:
    """Check if file is a document, spreadsheet, slide deck or text."""
    return get_file_extension(filename) in DOCUMENT_EXTENSIONS


def is_editable_text(filename: str) -> bool:
    """Check if file is plain text that can be edited in the browser."""
    return get_file_extension(filename) in EDITABLE_TEXT_EXTENSIONS


def get_file_icon(filename: str) -> str:
    """Get the icon family name shown for a file.

    Args:
        filename: Filename with extension.

    Returns:
        Icon name such as 'image' or 'archive', 'file' when unknown.
    """
    extension = get_file_extension(filename)
    for extensions, icon in _ICON_GROUPS:
        if extension in extensions:
            return icon
    return 'file'


def format_bytes(size_bytes: int) -> str:
    """Format bytes in human-readable format.

    Args:
        size_bytes: Size in bytes.

    Returns:
        Formatted size string with at most two decimals
        (e.g., '0 Bytes', '1.5 KB', '2 MB').
    """
    if size_bytes <= 0:
        return '0 Bytes'

    value = float(size_bytes)
    unit_index = 0
    while value >= _BYTES_BASE and unit_index < len(_SIZE_UNITS) - 1:
        value /= _BYTES_BASE
        unit_index += 1

    formatted = f'{value:.2f}'.rstrip('0').rstrip('.')
    return f'{formatted} {_SIZE_UNITS[unit_index]}'


def format_duration(seconds: float | None) -> str:
    """Format a video duration.

    Args:
        seconds: Duration in seconds.

    Returns:
        'M:SS' or 'H:MM:SS', empty string when unknown.
    """
    if not seconds:
        return ''

    total = int(seconds)
    hours, remainder = divmod(total, _SECONDS_PER_HOUR)
    minutes, secs = divmod(remainder, _SECONDS_PER_MINUTE)
    if hours:
        return f'{hours}:{minutes:02d}:{secs:02d}'
    return f'{minutes}:{secs:02d}'


def format_dimensions(width: int | None, height: int | None) -> str:
    """Format image or video dimensions as 'W × H'."""
    if not width or not height:
        return ''
    return f'{width} × {height}'


def stable_id(key: str) -> str:
    """Derive a short id from an object key.

    Uses the djb2 string hash so the same key always maps to the same
    id across requests, which lets the UI keep selection state.

    Args:
        key: Object or directory key.

    Returns:
        Id like 'id_1x2y3z'.
    """
    hash_value = _DJB2_SEED
    for char in key:
        hash_value = ((hash_value << 5) + hash_value + ord(char)) & _UINT32_MASK

    digits = []
    while True:
        hash_value, remainder = divmod(hash_value, 36)
        digits.append(_BASE36_DIGITS[remainder])
        if not hash_value:
            break
    return 'id_' + ''.join(reversed(digits))
