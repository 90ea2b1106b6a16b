"""Shared fixtures for drive app tests."""

import pytest

DRIVE = 'test-drive'
TEST_REGION = 'eu-west-1'

# key -> body of the objects in the populated drive
DRIVE_OBJECTS = {
    'readme.txt': b'hello drive',
    'photos/cat.jpg': b'c' * 100,
    'photos/2024/beach.png': b'b' * 200,
    'docs/': b'',
    'docs/notes.md': b'# notes',
    'videos/clip.mp4': b'v' * 300,
}


@pytest.fixture
def mock_s3(s3_client):
    """Mock S3 service with an empty test drive.

    Yields:
        boto3 S3 client.
    """
    s3_client.create_bucket(
        Bucket=DRIVE,
        CreateBucketConfiguration={'LocationConstraint': TEST_REGION},
    )
    yield s3_client


@pytest.fixture
def populated_drive(mock_s3):
    """Test drive holding DRIVE_OBJECTS.

    Returns:
        Drive name.
    """
    for key, body in DRIVE_OBJECTS.items():
        mock_s3.put_object(Bucket=DRIVE, Key=key, Body=body)
    return DRIVE


@pytest.fixture
def object_keys(mock_s3):
    """Callable listing every key currently stored in the test drive."""
    def list_keys():
        response = mock_s3.list_objects_v2(Bucket=DRIVE)
        return sorted(obj['Key'] for obj in response.get('Contents', []))
    return list_keys


@pytest.fixture
def empty_drive(mock_s3):
    """Name of the test drive without any objects."""
    return DRIVE
