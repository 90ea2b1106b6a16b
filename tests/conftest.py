"""Fixtures shared by every test package."""

import boto3
import pytest
from django.conf import settings
from django.core.cache import cache
from moto import mock_aws

TEST_REGION = 'eu-west-1'


@pytest.fixture(autouse=True)
def aws_credentials(monkeypatch):
    """Fake credentials so boto3 never talks to a real account."""
    monkeypatch.setenv('AWS_ACCESS_KEY_ID', 'testing')
    monkeypatch.setenv('AWS_SECRET_ACCESS_KEY', 'testing')
    monkeypatch.setenv('AWS_SECURITY_TOKEN', 'testing')
    monkeypatch.setenv('AWS_SESSION_TOKEN', 'testing')
    monkeypatch.setenv('AWS_DEFAULT_REGION', TEST_REGION)


@pytest.fixture(autouse=True)
def clear_cache():
    """Drop cached regions and signing keys between tests."""
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def s3_client():
    """Mock S3 with the thumbnail cache bucket.

    Yields:
        boto3 S3 client.
    """
    with mock_aws():
        client = boto3.client('s3', region_name=TEST_REGION)
        client.create_bucket(
            Bucket=settings.THUMBNAIL_BUCKET_NAME,
            CreateBucketConfiguration={'LocationConstraint': TEST_REGION},
        )
        yield client


@pytest.fixture(autouse=True)
def unverified_tokens(settings):
    """Run without a user pool, any bearer token is accepted."""
    settings.COGNITO_USER_POOL_ID = ''
    settings.COGNITO_CLIENT_ID = ''


@pytest.fixture
def api_client(client):
    """Django test client sending a bearer token.

    Returns:
        Configured test client.
    """
    client.defaults['HTTP_AUTHORIZATION'] = 'Bearer development-token'
    return client
