"""Business logic for object operations."""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import IO, Any, Final, final

from botocore.exceptions import BotoCoreError, ClientError
from django.conf import settings
from django.utils.http import content_disposition_header

from server.apps.drive.exceptions import (
    InvalidRequestError,
    ObjectNotFoundError,
    StorageOperationError,
)
from server.apps.drive.infrastructure.file_types import detect_mime_type
from server.apps.drive.infrastructure.paths import (
    directory_prefix,
    is_directory_key,
    object_name,
    validate_key,
)
from server.apps.drive.infrastructure.s3 import (
    get_client_for_drive,
    is_not_found,
    iter_objects,
)
from server.apps.drive.signals import object_removed

logger = logging.getLogger(__name__)

# DeleteObjects accepts at most this many keys per request
_DELETE_BATCH_SIZE: Final = 1000
_TEXT_ENCODING: Final = 'utf-8'


@final
@dataclass(frozen=True)
class TextContent:
    """Decoded content of a text object."""

    content: str
    content_type: str
    last_modified: datetime | None
    size: int


@final
@dataclass(frozen=True)
class ObjectMetadata:
    """Summary of a HeadObject response."""

    key: str
    name: str
    size: int
    content_type: str
    last_modified: datetime | None
    etag: str | None
    metadata: dict[str, str]


def _require_key(key: str) -> None:
    if not key:
        raise InvalidRequestError('Object key is required')
    validate_key(key)


def upload_object(
    drive: str,
    key: str,
    file_obj: IO[bytes],
    content_type: str | None = None,
) -> None:
    """Upload an object to a drive.

    Args:
        drive: Drive (bucket) name.
        key: Destination key.
        file_obj: Binary file-like object to upload.
        content_type: MIME type, guessed from the key when not given.

    Raises:
        InvalidRequestError: If the key is empty or unsafe.
        StorageOperationError: If the upload fails.
    """
    _require_key(key)
    content_type = content_type or detect_mime_type(key)

    try:
        logger.info('Uploading object: %s/%s', drive, key)
        get_client_for_drive(drive).upload_fileobj(
            file_obj,
            drive,
            key,
            ExtraArgs={'ContentType': content_type},
        )
        logger.info('Uploaded object: %s/%s', drive, key)
    except (BotoCoreError, ClientError) as error:
        logger.exception('Failed to upload object: %s/%s', drive, key)
        raise StorageOperationError('Failed to upload file') from error


def create_directory(drive: str, dir_key: str) -> str:
    """Create an empty directory marker object.

    Object stores have no real directories, an empty object whose key
    ends with a slash makes an empty folder show up in listings.

    Args:
        drive: Drive (bucket) name.
        dir_key: Directory key, trailing slash optional.

    Returns:
        The marker key that was written.

    Raises:
        InvalidRequestError: If the key is empty or unsafe.
        StorageOperationError: If the write fails.
    """
    marker_key = directory_prefix(dir_key)
    _require_key(marker_key)

    try:
        get_client_for_drive(drive).put_object(
            Bucket=drive,
            Key=marker_key,
            Body=b'',
        )
        logger.info('Created directory: %s/%s', drive, marker_key)
    except (BotoCoreError, ClientError) as error:
        logger.exception('Failed to create directory: %s/%s', drive, marker_key)
        raise StorageOperationError('Failed to create directory') from error

    return marker_key


def delete_object(drive: str, key: str) -> int:
    """Delete an object, or every object under a directory key.

    Args:
        drive: Drive (bucket) name.
        key: Object key, or directory key ending with a slash.

    Returns:
        Number of objects deleted.

    Raises:
        InvalidRequestError: If the key is empty or unsafe.
        StorageOperationError: If a delete request fails.
    """
    _require_key(key)
    if is_directory_key(key):
        return _delete_prefix(drive, key)

    try:
        logger.info('Deleting object: %s/%s', drive, key)
        get_client_for_drive(drive).delete_object(Bucket=drive, Key=key)
    except (BotoCoreError, ClientError) as error:
        logger.exception('Failed to delete object: %s/%s', drive, key)
        raise StorageOperationError('Failed to delete file') from error

    object_removed.send(sender=None, drive=drive, key=key)
    return 1


def _delete_prefix(drive: str, prefix: str) -> int:
    client = get_client_for_drive(drive)
    deleted_keys: list[str] = []

    try:
        logger.info('Deleting directory: %s/%s', drive, prefix)
        batch: list[str] = []
        for obj in iter_objects(client, drive, prefix):
            batch.append(obj['Key'])
            if len(batch) == _DELETE_BATCH_SIZE:
                deleted_keys.extend(_delete_batch(client, drive, batch))
                batch = []
        if batch:
            deleted_keys.extend(_delete_batch(client, drive, batch))
    except (BotoCoreError, ClientError) as error:
        logger.exception('Failed to delete directory: %s/%s', drive, prefix)
        raise StorageOperationError('Failed to delete directory') from error

    logger.info(
        'Deleted directory %s/%s (%d objects)',
        drive,
        prefix,
        len(deleted_keys),
    )
    return len(deleted_keys)


def _delete_batch(client: Any, drive: str, keys: list[str]) -> list[str]:
    response = client.delete_objects(
        Bucket=drive,
        Delete={'Objects': [{'Key': key} for key in keys], 'Quiet': False},
    )
    deleted_keys = [deleted['Key'] for deleted in response.get('Deleted', [])]
    # Removed objects are announced even when the rest of the batch fails
    for deleted_key in deleted_keys:
        object_removed.send(sender=None, drive=drive, key=deleted_key)

    errors = response.get('Errors', [])
    if errors:
        logger.error(
            'Failed to delete %d objects in %s, first: %s',
            len(errors),
            drive,
            errors[0].get('Key'),
        )
        raise StorageOperationError(f'Failed to delete {len(errors)} objects')
    return deleted_keys


def rename_object(drive: str, old_key: str, new_key: str) -> int:
    """Rename (move) an object or a directory.

    Object stores don't support native rename, so this performs a
    server-side copy followed by deletion of the source.

    Note: This operation is not atomic. If the copy succeeds but the
    delete fails, both objects exist and the error propagates. A
    directory rename that fails midway leaves the already moved objects
    at the new prefix.

    Args:
        drive: Drive (bucket) name.
        old_key: Current key, directory keys end with a slash.
        new_key: New key.

    Returns:
        Number of objects moved.

    Raises:
        InvalidRequestError: If a key is empty, unsafe, or unchanged.
        ObjectNotFoundError: If the source object does not exist.
        StorageOperationError: If copy or delete fails.
    """
    _require_key(old_key)
    _require_key(new_key)
    if old_key == new_key:
        raise InvalidRequestError('New key must differ from the old key')

    client = get_client_for_drive(drive)
    if not is_directory_key(old_key):
        _move_object(client, drive, old_key, new_key)
        return 1

    old_prefix = old_key
    new_prefix = directory_prefix(new_key)
    if new_prefix.startswith(old_prefix):
        raise InvalidRequestError('Cannot move a directory into itself')

    try:
        source_keys = [obj['Key'] for obj in iter_objects(client, drive, old_prefix)]
    except (BotoCoreError, ClientError) as error:
        logger.exception('Failed to list directory: %s/%s', drive, old_prefix)
        raise StorageOperationError('Failed to rename directory') from error

    if not source_keys:
        raise ObjectNotFoundError(drive, old_prefix)

    for source_key in source_keys:
        destination = new_prefix + source_key[len(old_prefix):]
        _move_object(client, drive, source_key, destination)
    return len(source_keys)


def _move_object(client: Any, drive: str, source: str, destination: str) -> None:
    try:
        logger.info('Moving object: %s/%s -> %s', drive, source, destination)
        client.copy_object(
            Bucket=drive,
            CopySource={'Bucket': drive, 'Key': source},
            Key=destination,
        )
        client.delete_object(Bucket=drive, Key=source)
        logger.info('Moved object: %s/%s -> %s', drive, source, destination)
    except ClientError as error:
        if is_not_found(error):
            raise ObjectNotFoundError(drive, source) from error
        logger.exception('Move failed: %s/%s -> %s', drive, source, destination)
        raise StorageOperationError('Failed to rename file') from error
    except BotoCoreError as error:
        logger.exception('Move failed: %s/%s -> %s', drive, source, destination)
        raise StorageOperationError('Failed to rename file') from error

    object_removed.send(sender=None, drive=drive, key=source)


def get_text_content(drive: str, key: str) -> TextContent:
    """Read an object as UTF-8 text.

    Args:
        drive: Drive (bucket) name.
        key: Object key.

    Returns:
        TextContent with the decoded body.

    Raises:
        InvalidRequestError: If the key is empty or the body isn't UTF-8.
        ObjectNotFoundError: If the object does not exist.
        StorageOperationError: If the read fails.
    """
    _require_key(key)
    try:
        response = get_client_for_drive(drive).get_object(Bucket=drive, Key=key)
        body = response['Body'].read()
    except ClientError as error:
        if is_not_found(error):
            raise ObjectNotFoundError(drive, key) from error
        logger.exception('Failed to read object: %s/%s', drive, key)
        raise StorageOperationError('Failed to get file content') from error
    except BotoCoreError as error:
        logger.exception('Failed to read object: %s/%s', drive, key)
        raise StorageOperationError('Failed to get file content') from error

    try:
        content = body.decode(_TEXT_ENCODING)
    except UnicodeDecodeError as error:
        raise InvalidRequestError('File is not valid UTF-8 text') from error

    return TextContent(
        content=content,
        content_type=response.get('ContentType') or 'text/plain',
        last_modified=response.get('LastModified'),
        size=response.get('ContentLength', len(body)),
    )


def save_text_content(
    drive: str,
    key: str,
    content: str,
    content_type: str = 'text/plain',
) -> None:
    """Overwrite an object with UTF-8 text.

    Args:
        drive: Drive (bucket) name.
        key: Object key.
        content: New text.
        content_type: MIME type stored with the object.

    Raises:
        InvalidRequestError: If the key is empty or unsafe.
        StorageOperationError: If the write fails.
    """
    _require_key(key)
    try:
        logger.info('Saving text content: %s/%s', drive, key)
        get_client_for_drive(drive).put_object(
            Bucket=drive,
            Key=key,
            Body=content.encode(_TEXT_ENCODING),
            ContentType=content_type,
        )
    except (BotoCoreError, ClientError) as error:
        logger.exception('Failed to save text content: %s/%s', drive, key)
        raise StorageOperationError('Failed to save file content') from error

    # Previews rendered from the old content are stale now
    object_removed.send(sender=None, drive=drive, key=key)


def get_download_url(
    drive: str,
    key: str,
    expires_in: int | None = None,
) -> str:
    """Generate a presigned GET URL.

    Args:
        drive: Drive (bucket) name.
        key: Object key.
        expires_in: Lifetime in seconds, defaults to
            ``DRIVE_PRESIGNED_URL_EXPIRES``.

    Returns:
        Presigned URL.

    Raises:
        InvalidRequestError: If the key is empty or unsafe.
        StorageOperationError: If signing fails.
    """
    _require_key(key)
    expires_in = _expiry(expires_in)
    try:
        return get_client_for_drive(drive).generate_presigned_url(
            'get_object',
            Params={
                'Bucket': drive,
                'Key': key,
                'ResponseContentDisposition': content_disposition_header(
                    as_attachment=True,
                    filename=object_name(key),
                ),
            },
            ExpiresIn=expires_in,
        )
    except (BotoCoreError, ClientError) as error:
        logger.exception('Failed to sign download URL: %s/%s', drive, key)
        raise StorageOperationError('Failed to generate download URL') from error


def get_upload_url(
    drive: str,
    key: str,
    content_type: str,
    expires_in: int | None = None,
) -> str:
    """Generate a presigned PUT URL for direct browser uploads.

    The client must send the same Content-Type header it was signed for.

    Args:
        drive: Drive (bucket) name.
        key: Destination key.
        content_type: MIME type of the upload.
        expires_in: Lifetime in seconds.

    Returns:
        Presigned URL.

    Raises:
        InvalidRequestError: If the key or content type is missing.
        StorageOperationError: If signing fails.
    """
    _require_key(key)
    if not content_type:
        raise InvalidRequestError('Content type is required')
    expires_in = _expiry(expires_in)
    try:
        return get_client_for_drive(drive).generate_presigned_url(
            'put_object',
            Params={'Bucket': drive, 'Key': key, 'ContentType': content_type},
            ExpiresIn=expires_in,
        )
    except (BotoCoreError, ClientError) as error:
        logger.exception('Failed to sign upload URL: %s/%s', drive, key)
        raise StorageOperationError('Failed to generate upload URL') from error


def _expiry(expires_in: int | None) -> int:
    if expires_in is None:
        return settings.DRIVE_PRESIGNED_URL_EXPIRES
    if expires_in <= 0:
        raise InvalidRequestError('expiresIn must be positive')
    return expires_in


def get_object_metadata(drive: str, key: str) -> ObjectMetadata:
    """Fetch object metadata without downloading the body.

    Args:
        drive: Drive (bucket) name.
        key: Object key.

    Returns:
        ObjectMetadata summary.

    Raises:
        ObjectNotFoundError: If the object does not exist.
        StorageOperationError: If the request fails.
    """
    _require_key(key)
    try:
        response = get_client_for_drive(drive).head_object(Bucket=drive, Key=key)
    except ClientError as error:
        if is_not_found(error):
            raise ObjectNotFoundError(drive, key) from error
        logger.exception('Failed to get metadata: %s/%s', drive, key)
        raise StorageOperationError('Failed to get file metadata') from error
    except BotoCoreError as error:
        logger.exception('Failed to get metadata: %s/%s', drive, key)
        raise StorageOperationError('Failed to get file metadata') from error

    return ObjectMetadata(
        key=key,
        name=object_name(key),
        size=response.get('ContentLength', 0),
        content_type=response.get('ContentType') or detect_mime_type(key),
        last_modified=response.get('LastModified'),
        etag=response.get('ETag'),
        metadata=response.get('Metadata', {}),
    )


def read_object(drive: str, key: str) -> bytes:
    """Download an object body into memory.

    Args:
        drive: Drive (bucket) name.
        key: Object key.

    Returns:
        Object bytes.

    Raises:
        ObjectNotFoundError: If the object does not exist.
        StorageOperationError: If the download fails.
    """
    _require_key(key)
    try:
        response = get_client_for_drive(drive).get_object(Bucket=drive, Key=key)
        return response['Body'].read()
    except ClientError as error:
        if is_not_found(error):
            raise ObjectNotFoundError(drive, key) from error
        logger.exception('Failed to download object: %s/%s', drive, key)
        raise StorageOperationError('Failed to download file') from error
    except BotoCoreError as error:
        logger.exception('Failed to download object: %s/%s', drive, key)
        raise StorageOperationError('Failed to download file') from error
