"""Cached WebP previews of images, videos and PDFs."""

import logging
from typing import Final

from django.core.files.base import ContentFile
from django.core.files.storage import default_storage

from server.apps.drive.infrastructure import file_types
from server.apps.drive.infrastructure.paths import (
    object_name,
    parent_prefix,
    split_extension,
    validate_key,
)
from server.apps.drive.logic.object_operations import read_object
from server.apps.previews.exceptions import UnsupportedFileTypeError
from server.apps.previews.infrastructure import media

logger = logging.getLogger(__name__)

# Pillow can't rasterize vector images
RASTER_IMAGE_EXTENSIONS: Final = file_types.IMAGE_EXTENSIONS - {'svg'}
PREVIEW_EXTENSIONS: Final = RASTER_IMAGE_EXTENSIONS | {'mp4', 'pdf'}


def is_previewable(key: str) -> bool:
    """Whether a thumbnail can be rendered for the key."""
    return file_types.get_file_extension(key) in PREVIEW_EXTENSIONS


def thumbnail_key(key: str, max_width: int = 0, max_height: int = 0) -> str:
    """Key of the cached thumbnail for an object.

    Example: ('a/b/cat.jpg', 200, 100) -> 'a/b/cat-100x200.webp'
    Example: ('a/b/cat.jpg', 0, 0) -> 'a/b/cat-original.webp'

    Args:
        key: Source object key.
        max_width: Width bound.
        max_height: Height bound.

    Returns:
        Thumbnail key, sized only when both bounds are given.
    """
    stem, _ = split_extension(object_name(key))
    if max_width and max_height:
        suffix = f'-{max_height}x{max_width}'
    else:
        suffix = '-original'
    return f'{parent_prefix(key)}{stem}{suffix}.webp'


def cache_name(drive: str, key: str, max_width: int = 0, max_height: int = 0) -> str:
    """Storage path of a thumbnail in the cache bucket.

    Thumbnails of every drive share the bucket, so the drive name is
    the first path segment.
    """
    return f'{drive}/{thumbnail_key(key, max_width, max_height)}'


def get_thumbnail(
    drive: str,
    key: str,
    max_width: int = 0,
    max_height: int = 0,
) -> bytes:
    """Return a WebP preview, rendering and caching it on a miss.

    The cache bucket is optional. Read and write failures are logged
    and the thumbnail is rendered and returned anyway.

    Args:
        drive: Drive (bucket) name.
        key: Source object key.
        max_width: Width bound.
        max_height: Height bound. Unless both bounds are given the
            original size is rendered.

    Returns:
        WebP bytes.

    Raises:
        UnsupportedFileTypeError: If the file type can't be previewed.
        ObjectNotFoundError: If the source object doesn't exist.
        PreviewGenerationError: If rendering fails.
    """
    validate_key(key)
    if not is_previewable(key):
        raise UnsupportedFileTypeError('File type not supported for preview')

    # A single bound is served at original size, matching the cache key
    if not (max_width and max_height):
        max_width, max_height = 0, 0

    name = cache_name(drive, key, max_width, max_height)
    cached = _read_cached(name)
    if cached is not None:
        return cached

    thumbnail = render_thumbnail(read_object(drive, key), key, max_width, max_height)
    _store_cached(name, thumbnail)
    return thumbnail


def render_thumbnail(
    data: bytes,
    key: str,
    max_width: int = 0,
    max_height: int = 0,
) -> bytes:
    """Render source bytes to a bounded WebP image."""
    extension = file_types.get_file_extension(key)
    if extension == 'mp4':
        data = media.extract_video_frame(data)
    elif extension == 'pdf':
        data = media.render_pdf_page(data)
    return media.render_webp(data, max_width, max_height)


def purge_thumbnails(drive: str, key: str) -> list[str]:
    """Delete every cached size of an object's thumbnail."""
    if not is_previewable(key):
        return []
    stem, _ = split_extension(object_name(key))
    directory = f'{drive}/{parent_prefix(key)}'.rstrip('/')
    return default_storage.purge_variants(directory, stem)  # type: ignore[attr-defined]


def _read_cached(name: str) -> bytes | None:
    try:
        with default_storage.open(name, 'rb') as cached:
            return cached.read()
    except FileNotFoundError:
        return None
    except Exception:
        logger.warning(
            'Thumbnail cache unavailable, reading %s failed',
            name,
            exc_info=True,
        )
        return None


def _store_cached(name: str, thumbnail: bytes) -> None:
    try:
        default_storage.save(name, ContentFile(thumbnail))
    except Exception:
        # Already logged by the storage backend
        logger.warning('Serving uncached thumbnail: %s', name)
