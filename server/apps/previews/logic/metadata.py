"""Dimensions and duration of media objects."""

from typing import Any

from server.apps.drive.infrastructure import file_types
from server.apps.drive.infrastructure.paths import validate_key
from server.apps.drive.logic.object_operations import read_object
from server.apps.previews.exceptions import UnsupportedFileTypeError
from server.apps.previews.infrastructure import media
from server.apps.previews.logic.thumbnails import RASTER_IMAGE_EXTENSIONS


def get_media_metadata(drive: str, key: str) -> dict[str, Any]:
    """Describe an image or a video.

    Images give ``width``, ``height`` and ``format``. Videos give
    ``width``, ``height`` and ``duration`` in seconds, ``None`` when
    neither the video stream nor the container reports one.

    Args:
        drive: Drive (bucket) name.
        key: Object key.

    Returns:
        Metadata dictionary.

    Raises:
        UnsupportedFileTypeError: If the object is neither image nor video.
        ObjectNotFoundError: If the object doesn't exist.
        PreviewGenerationError: If extraction fails.
    """
    validate_key(key)
    extension = file_types.get_file_extension(key)
    if extension in RASTER_IMAGE_EXTENSIONS:
        return media.read_image_info(read_object(drive, key))
    if file_types.is_video(key):
        return video_metadata(media.probe_video(read_object(drive, key)))
    raise UnsupportedFileTypeError(
        'File type not supported for metadata extraction',
    )


def video_metadata(probe: dict[str, Any]) -> dict[str, Any]:
    """Pick dimensions and duration out of ffprobe output."""
    video_stream = next(
        (
            stream for stream in probe.get('streams', [])
            if stream.get('codec_type') == 'video'
        ),
        {},
    )
    duration = (
        video_stream.get('duration')
        or probe.get('format', {}).get('duration')
    )
    return {
        'width': video_stream.get('width') or 0,
        'height': video_stream.get('height') or 0,
        'duration': float(duration) if duration else None,
    }
