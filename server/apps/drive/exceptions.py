"""Exceptions for drive app."""

from server.http import ApiError


class DriveError(ApiError):
    """Base error for drive operations.

    Carries the HTTP status code the API answers with, so views can
    translate any subclass without knowing about it.
    """

    status_code = 500


class InvalidRequestError(DriveError):
    """Raised when request parameters are missing or malformed."""

    status_code = 400


class InvalidPathError(InvalidRequestError):
    """Raised when a drive path or object key is malformed."""


class ObjectNotFoundError(DriveError):
    """Raised when the requested object does not exist in the drive."""

    status_code = 404

    def __init__(self, drive: str, key: str) -> None:
        """Initialize ObjectNotFoundError.

        Args:
            drive: Drive (bucket) name.
            key: Object key that was not found.
        """
        self.drive = drive
        self.key = key
        super().__init__(f'Object not found: {drive}/{key}')


class DirectoryEmptyError(DriveError):
    """Raised when a directory operation finds no objects."""

    status_code = 404


class StorageOperationError(DriveError):
    """Raised when the object store rejects or fails an operation."""

    status_code = 500
