"""Shared fixtures for previews app tests."""

import io
import subprocess  # noqa: S404
from pathlib import Path
from unittest import mock

import pytest
from django.conf import settings
from PIL import Image

DRIVE = 'media-drive'


def make_image(width, height, image_format='PNG'):
    """Encode a solid image with Pillow."""
    buffer = io.BytesIO()
    Image.new('RGB', (width, height), color='red').save(buffer, format=image_format)
    return buffer.getvalue()


@pytest.fixture
def media_drive(s3_client):
    """Drive holding a few media files.

    Returns:
        Drive name.
    """
    s3_client.create_bucket(
        Bucket=DRIVE,
        CreateBucketConfiguration={'LocationConstraint': 'eu-west-1'},
    )
    s3_client.put_object(Bucket=DRIVE, Key='pics/wide.png', Body=make_image(400, 200))
    s3_client.put_object(
        Bucket=DRIVE,
        Key='pics/photo.jpg',
        Body=make_image(64, 48, 'JPEG'),
    )
    s3_client.put_object(
        Bucket=DRIVE,
        Key='pics/palette.gif',
        Body=make_image(30, 30, 'GIF'),
    )
    s3_client.put_object(Bucket=DRIVE, Key='videos/clip.mp4', Body=b'fake mp4')
    s3_client.put_object(Bucket=DRIVE, Key='docs/paper.pdf', Body=b'%PDF-1.4 fake')
    s3_client.put_object(Bucket=DRIVE, Key='docs/notes.txt', Body=b'text')
    return DRIVE


@pytest.fixture
def thumbnail_keys(s3_client):
    """Callable listing every key in the thumbnail cache bucket."""
    def list_keys():
        response = s3_client.list_objects_v2(Bucket=settings.THUMBNAIL_BUCKET_NAME)
        return sorted(obj['Key'] for obj in response.get('Contents', []))
    return list_keys


@pytest.fixture
def fake_tools():
    """Replace ffmpeg and pdftoppm with writers of a 120x80 PNG.

    Yields:
        Mock of ``subprocess.run`` recording the commands.
    """
    frame = make_image(120, 80)

    def run(command, **kwargs):
        if command[0] == settings.PDFTOPPM_BINARY:
            Path(f'{command[-1]}.png').write_bytes(frame)
        else:
            Path(command[-1]).write_bytes(frame)
        return subprocess.CompletedProcess(command, 0, b'', b'')

    with mock.patch(
        'server.apps.previews.infrastructure.media.subprocess.run',
        side_effect=run,
    ) as run_mock:
        yield run_mock
