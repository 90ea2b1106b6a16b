"""Exceptions for previews app."""

from server.http import ApiError


class PreviewError(ApiError):
    """Base error for preview and metadata extraction."""

    status_code = 500


class UnsupportedFileTypeError(PreviewError):
    """Raised when no preview can be made for a file type."""

    status_code = 400


class PreviewGenerationError(PreviewError):
    """Raised when decoding or an external tool fails."""

    status_code = 500
