"""boto3 access to S3-compatible drives."""

import logging
from collections.abc import Iterator
from typing import TYPE_CHECKING, Any, Final

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError
from django.conf import settings
from django.core.cache import cache

if TYPE_CHECKING:
    from mypy_boto3_s3 import S3Client

logger = logging.getLogger(__name__)

# GetBucketLocation answers null for the original AWS region
_NULL_LOCATION_REGION: Final = 'us-east-1'
_LIST_PAGE_SIZE: Final = 1000
_REGION_CACHE_KEY: Final = 'drive:region:{drive}'
_CLIENT_CONFIG: Final = Config(signature_version='s3v4')


def get_client(region: str | None = None) -> 'S3Client':
    """Build an S3 client from project settings.

    Args:
        region: Region to sign requests for. Defaults to ``AWS_REGION``.

    Returns:
        boto3 S3 client.
    """
    return boto3.client(
        's3',
        aws_access_key_id=settings.AWS_ACCESS_KEY_ID,
        aws_secret_access_key=settings.AWS_SECRET_ACCESS_KEY,
        endpoint_url=settings.AWS_S3_ENDPOINT_URL,
        region_name=region or settings.AWS_REGION,
        config=_CLIENT_CONFIG,
    )


def get_drive_region(drive: str) -> str:
    """Look up the region a drive lives in.

    The answer is cached. Lookup failures fall back to the configured
    region instead of raising, the following request surfaces the real
    error if the drive is unreachable.

    Args:
        drive: Drive (bucket) name.

    Returns:
        Region name.
    """
    cache_key = _REGION_CACHE_KEY.format(drive=drive)
    region = cache.get(cache_key)
    if region is not None:
        return region

    try:
        response = get_client().get_bucket_location(Bucket=drive)
    except (BotoCoreError, ClientError):
        logger.warning(
            'Could not resolve region for drive %s, using %s',
            drive,
            settings.AWS_REGION,
        )
        return settings.AWS_REGION

    region = response.get('LocationConstraint') or _NULL_LOCATION_REGION
    cache.set(cache_key, region, settings.DRIVE_REGION_CACHE_TIMEOUT)
    return region


def get_client_for_drive(drive: str) -> 'S3Client':
    """Get an S3 client signing for the drive's own region.

    Args:
        drive: Drive (bucket) name.

    Returns:
        boto3 S3 client.
    """
    return get_client(get_drive_region(drive))


def iter_objects(
    client: 'S3Client',
    drive: str,
    prefix: str = '',
) -> Iterator[dict[str, Any]]:
    """Yield every object stored under a prefix.

    Walks all ``list_objects_v2`` pages, no delimiter, so nested
    "directories" are included.

    Args:
        client: S3 client to list with.
        drive: Drive (bucket) name.
        prefix: Key prefix, empty for the whole drive.

    Yields:
        Raw ``Contents`` entries (``Key``, ``Size``, ``LastModified``...).
    """
    paginator = client.get_paginator('list_objects_v2')
    pages = paginator.paginate(
        Bucket=drive,
        Prefix=prefix,
        PaginationConfig={'PageSize': _LIST_PAGE_SIZE},
    )
    for page in pages:
        yield from page.get('Contents', [])


def is_not_found(error: ClientError) -> bool:
    """Check whether a client error means the key does not exist.

    Args:
        error: botocore client error.

    Returns:
        True for ``NoSuchKey``/``404``/``NotFound`` error codes.
    """
    code = error.response.get('Error', {}).get('Code', '')
    return code in {'NoSuchKey', '404', 'NotFound'}
