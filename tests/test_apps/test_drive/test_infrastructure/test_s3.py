"""Tests for drive region lookup."""

from unittest import mock

import boto3
from botocore.exceptions import ClientError
from django.core.cache import cache

from server.apps.drive.infrastructure import s3


def test_get_drive_region(mock_s3, empty_drive):
    """Test the region comes from the bucket location and is cached."""
    assert s3.get_drive_region(empty_drive) == 'eu-west-1'
    assert cache.get(f'drive:region:{empty_drive}') == 'eu-west-1'


def test_get_drive_region_null_location(mock_s3):
    """Test buckets without a location constraint live in us-east-1."""
    boto3.client('s3', region_name='us-east-1').create_bucket(Bucket='legacy')

    assert s3.get_drive_region('legacy') == 'us-east-1'


def test_get_drive_region_falls_back(settings, mock_s3):
    """Test lookup failures use the configured region without caching."""
    settings.AWS_REGION = 'eu-central-1'

    assert s3.get_drive_region('missing-drive') == 'eu-central-1'
    assert cache.get('drive:region:missing-drive') is None


def test_iter_objects_walks_all_pages(mock_s3, empty_drive):
    """Test pagination yields every object."""
    for index in range(5):
        mock_s3.put_object(Bucket=empty_drive, Key=f'a/{index}.txt', Body=b'x')

    with mock.patch.object(s3, '_LIST_PAGE_SIZE', 2):
        keys = [obj['Key'] for obj in s3.iter_objects(mock_s3, empty_drive, 'a/')]

    assert keys == [f'a/{index}.txt' for index in range(5)]


def test_is_not_found():
    """Test not found error codes."""
    not_found = ClientError({'Error': {'Code': 'NoSuchKey'}}, 'GetObject')
    head_missing = ClientError({'Error': {'Code': '404'}}, 'HeadObject')
    denied = ClientError({'Error': {'Code': 'AccessDenied'}}, 'GetObject')

    assert s3.is_not_found(not_found)
    assert s3.is_not_found(head_missing)
    assert not s3.is_not_found(denied)
