"""Tests for media metadata extraction."""

import json
import subprocess  # noqa: S404
from unittest import mock

import pytest

from server.apps.previews.exceptions import (
    PreviewGenerationError,
    UnsupportedFileTypeError,
)
from server.apps.previews.logic.metadata import get_media_metadata, video_metadata


def _probe_result(payload):
    return subprocess.CompletedProcess(
        ['ffprobe'],
        0,
        json.dumps(payload).encode(),
        b'',
    )


def test_image_metadata(media_drive):
    """Test images report dimensions and format."""
    assert get_media_metadata(media_drive, 'pics/wide.png') == {
        'width': 400,
        'height': 200,
        'format': 'png',
    }
    assert get_media_metadata(media_drive, 'pics/photo.jpg')['format'] == 'jpeg'


def test_video_metadata(media_drive):
    """Test videos are described by ffprobe."""
    probe = {
        'streams': [
            {'codec_type': 'audio', 'duration': '9.0'},
            {'codec_type': 'video', 'width': 1920, 'height': 1080, 'duration': '12.5'},
        ],
        'format': {'duration': '13.0'},
    }
    with mock.patch(
        'server.apps.previews.infrastructure.media.subprocess.run',
        return_value=_probe_result(probe),
    ) as run:
        metadata = get_media_metadata(media_drive, 'videos/clip.mp4')

    assert metadata == {'width': 1920, 'height': 1080, 'duration': 12.5}
    command = run.call_args.args[0]
    assert command[0] == 'ffprobe'
    assert '-show_streams' in command


def test_video_duration_falls_back_to_container():
    """Test the container duration is used when the stream has none."""
    probe = {
        'streams': [{'codec_type': 'video', 'width': 640, 'height': 360}],
        'format': {'duration': '42.25'},
    }

    assert video_metadata(probe)['duration'] == 42.25


def test_video_without_duration():
    """Test unknown durations are None and missing streams are zero."""
    assert video_metadata({}) == {'width': 0, 'height': 0, 'duration': None}


def test_video_metadata_probe_failure(media_drive):
    """Test ffprobe failures are generation errors."""
    with mock.patch(
        'server.apps.previews.infrastructure.media.subprocess.run',
        side_effect=subprocess.CalledProcessError(1, 'ffprobe'),
    ):
        with pytest.raises(PreviewGenerationError):
            get_media_metadata(media_drive, 'videos/clip.mp4')


def test_unsupported_metadata(media_drive):
    """Test documents have no media metadata."""
    with pytest.raises(UnsupportedFileTypeError):
        get_media_metadata(media_drive, 'docs/paper.pdf')
