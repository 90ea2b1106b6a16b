"""Tests for file classification and formatting."""

import re

import pytest

from server.apps.drive.infrastructure import file_types


def test_get_file_extension():
    """Test extensions are lowercase without the dot."""
    assert file_types.get_file_extension('Photo.JPG') == 'jpg'
    assert file_types.get_file_extension('dir/archive.tar.gz') == 'gz'
    assert file_types.get_file_extension('README') == ''


def test_detect_mime_type():
    """Test MIME types are guessed from the extension."""
    assert file_types.detect_mime_type('notes.txt') == 'text/plain'
    assert file_types.detect_mime_type('cat.png') == 'image/png'
    assert file_types.detect_mime_type('blob.unknownext') == (
        'application/octet-stream'
    )


def test_classification():
    """Test type predicates."""
    assert file_types.is_image('cat.webp')
    assert file_types.is_video('clip.MKV')
    assert file_types.is_audio('song.flac')
    assert file_types.is_pdf('paper.pdf')
    assert file_types.is_document('sheet.xlsx')
    assert file_types.is_document('main.py')
    assert file_types.is_editable_text('notes.txt')
    assert not file_types.is_editable_text('paper.pdf')
    assert not file_types.is_image('clip.mp4')


@pytest.mark.parametrize(('filename', 'icon'), [
    ('cat.jpg', 'image'),
    ('clip.mp4', 'video'),
    ('song.mp3', 'music'),
    ('paper.pdf', 'file-text'),
    ('sheet.csv', 'table'),
    ('deck.pptx', 'presentation'),
    ('backup.zip', 'archive'),
    ('main.py', 'code'),
    ('setup.exe', 'cpu'),
    ('unknown.xyz', 'file'),
])
def test_get_file_icon(filename, icon):
    """Test icon families."""
    assert file_types.get_file_icon(filename) == icon


@pytest.mark.parametrize(('size', 'formatted'), [
    (0, '0 Bytes'),
    (512, '512 Bytes'),
    (1024, '1 KB'),
    (1536, '1.5 KB'),
    (1024 * 1024, '1 MB'),
    (int(2.25 * 1024 ** 3), '2.25 GB'),
])
def test_format_bytes(size, formatted):
    """Test sizes use base 1024 and at most two decimals."""
    assert file_types.format_bytes(size) == formatted


def test_format_duration():
    """Test durations below and above one hour."""
    assert file_types.format_duration(65) == '1:05'
    assert file_types.format_duration(3725.4) == '1:02:05'
    assert file_types.format_duration(None) == ''


def test_format_dimensions():
    """Test dimensions need both sides."""
    assert file_types.format_dimensions(1920, 1080) == '1920 × 1080'
    assert file_types.format_dimensions(None, 1080) == ''


def test_stable_id():
    """Test ids are deterministic djb2 hashes in base 36."""
    assert file_types.stable_id('a') == 'id_3t3a'
    assert file_types.stable_id('photos/cat.jpg') == (
        file_types.stable_id('photos/cat.jpg')
    )
    assert file_types.stable_id('photos/') != file_types.stable_id('photos')
    assert re.fullmatch('id_[0-9a-z]+', file_types.stable_id('x' * 500))
