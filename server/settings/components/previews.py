"""Thumbnail and media inspection settings."""

from server.settings.components import config

THUMBNAIL_MAX_WIDTH = config('THUMBNAIL_MAX_WIDTH', cast=int, default=200)
THUMBNAIL_MAX_HEIGHT = config('THUMBNAIL_MAX_HEIGHT', cast=int, default=200)
PREVIEW_MAX_WIDTH = config('PREVIEW_MAX_WIDTH', cast=int, default=1000)
PREVIEW_MAX_HEIGHT = config('PREVIEW_MAX_HEIGHT', cast=int, default=1000)
PREVIEW_WEBP_QUALITY = config('PREVIEW_WEBP_QUALITY', cast=int, default=80)

# External binaries, resolved through PATH by default
FFMPEG_BINARY = config('FFMPEG_BINARY', default='ffmpeg')
FFPROBE_BINARY = config('FFPROBE_BINARY', default='ffprobe')
PDFTOPPM_BINARY = config('PDFTOPPM_BINARY', default='pdftoppm')
PREVIEW_TOOL_TIMEOUT = config('PREVIEW_TOOL_TIMEOUT', cast=int, default=60)
