"""Rendering and inspection of media with Pillow and external tools.

Videos and PDFs are handed to ``ffmpeg``, ``ffprobe`` and ``pdftoppm``
through temporary files, which are removed on every path.
"""

import io
import json
import logging
import subprocess  # noqa: S404
import tempfile
from collections.abc import Sequence
from pathlib import Path
from typing import Any, Final

from django.conf import settings
from PIL import Image, UnidentifiedImageError

from server.apps.previews.exceptions import PreviewGenerationError

logger = logging.getLogger(__name__)

_RESAMPLING_FILTER: Final = Image.Resampling.LANCZOS
_WEBP_MODES: Final = frozenset(('RGB', 'RGBA'))
_TOOL_ERRORS: Final = (
    subprocess.CalledProcessError,
    subprocess.TimeoutExpired,
    OSError,
)


def render_webp(data: bytes, max_width: int = 0, max_height: int = 0) -> bytes:
    """Encode an image as WebP, fitting it inside the given bounds.

    Images are never enlarged. A zero bound leaves that side as is.

    Args:
        data: Encoded source image.
        max_width: Maximum width in pixels, 0 for no limit.
        max_height: Maximum height in pixels, 0 for no limit.

    Returns:
        WebP bytes.

    Raises:
        PreviewGenerationError: If the image can't be decoded.
    """
    try:
        with Image.open(io.BytesIO(data)) as image:
            image.load()
            if max_width or max_height:
                image.thumbnail(
                    (max_width or image.width, max_height or image.height),
                    _RESAMPLING_FILTER,
                )
            rendered = _webp_compatible(image)
            output = io.BytesIO()
            rendered.save(
                output,
                format='WEBP',
                quality=settings.PREVIEW_WEBP_QUALITY,
            )
    except (UnidentifiedImageError, OSError, ValueError) as error:
        logger.warning('Failed to decode image for preview: %s', error)
        raise PreviewGenerationError('Failed to generate thumbnail') from error
    return output.getvalue()


def _webp_compatible(image: Image.Image) -> Image.Image:
    if image.mode in _WEBP_MODES:
        return image
    has_alpha = 'A' in image.getbands() or 'transparency' in image.info
    return image.convert('RGBA' if has_alpha else 'RGB')


def read_image_info(data: bytes) -> dict[str, Any]:
    """Read dimensions and format of an image without decoding pixels.

    Raises:
        PreviewGenerationError: If the image can't be identified.
    """
    try:
        with Image.open(io.BytesIO(data)) as image:
            return {
                'width': image.width,
                'height': image.height,
                'format': (image.format or '').lower() or None,
            }
    except (UnidentifiedImageError, OSError) as error:
        raise PreviewGenerationError(
            'Failed to extract image metadata',
        ) from error


def extract_video_frame(data: bytes) -> bytes:
    """Grab the first frame of a video as PNG bytes with ffmpeg.

    Raises:
        PreviewGenerationError: If ffmpeg is missing or fails.
    """
    with tempfile.TemporaryDirectory(prefix='preview_') as temp_dir:
        source = Path(temp_dir) / 'input.mp4'
        target = Path(temp_dir) / 'frame.png'
        source.write_bytes(data)
        _run_tool((
            settings.FFMPEG_BINARY,
            '-y',
            '-i', str(source),
            '-vframes', '1',
            '-f', 'image2',
            str(target),
        ))
        return _read_output(target, settings.FFMPEG_BINARY)


def render_pdf_page(data: bytes) -> bytes:
    """Rasterize the first page of a PDF as PNG bytes with pdftoppm.

    Raises:
        PreviewGenerationError: If pdftoppm is missing or fails.
    """
    with tempfile.TemporaryDirectory(prefix='preview_') as temp_dir:
        source = Path(temp_dir) / 'input.pdf'
        target_root = Path(temp_dir) / 'page'
        source.write_bytes(data)
        # -singlefile writes exactly <root>.png
        _run_tool((
            settings.PDFTOPPM_BINARY,
            '-png',
            '-f', '1',
            '-l', '1',
            '-singlefile',
            str(source),
            str(target_root),
        ))
        return _read_output(
            target_root.with_suffix('.png'),
            settings.PDFTOPPM_BINARY,
        )


def probe_video(data: bytes) -> dict[str, Any]:
    """Describe a video's streams and container with ffprobe.

    Returns:
        Decoded ``ffprobe -print_format json`` output.

    Raises:
        PreviewGenerationError: If ffprobe is missing, fails, or prints
            something that isn't JSON.
    """
    with tempfile.TemporaryDirectory(prefix='probe_') as temp_dir:
        source = Path(temp_dir) / 'input'
        source.write_bytes(data)
        completed = _run_tool((
            settings.FFPROBE_BINARY,
            '-v', 'quiet',
            '-print_format', 'json',
            '-show_format',
            '-show_streams',
            str(source),
        ))

    try:
        return json.loads(completed.stdout or b'{}')
    except ValueError as error:
        raise PreviewGenerationError(
            'Failed to extract video metadata',
        ) from error


def _run_tool(command: Sequence[str]) -> subprocess.CompletedProcess[bytes]:
    try:
        return subprocess.run(  # noqa: S603
            list(command),
            check=True,
            capture_output=True,
            timeout=settings.PREVIEW_TOOL_TIMEOUT,
        )
    except _TOOL_ERRORS as error:
        logger.exception('External tool failed: %s', command[0])
        raise PreviewGenerationError(
            f'Failed to run {Path(command[0]).name}, make sure it is installed',
        ) from error


def _read_output(path: Path, tool: str) -> bytes:
    try:
        return path.read_bytes()
    except OSError as error:
        logger.exception('%s produced no output', tool)
        raise PreviewGenerationError(
            f'{Path(tool).name} produced no output',
        ) from error
