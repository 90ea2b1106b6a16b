"""Tests for drive_usage management command."""

from io import StringIO

import pytest
from django.core.management import call_command
from django.core.management.base import CommandError


def test_drive_usage_reports_largest_directories(populated_drive):
    """Test totals and directories ordered by size."""
    out = StringIO()

    call_command('drive_usage', populated_drive, '--top', '2', stdout=out)

    lines = out.getvalue().splitlines()
    assert lines[0] == f'Drive {populated_drive}: 618 Bytes in 5 objects'
    assert lines[1].strip().startswith(('photos/: 300 Bytes', 'videos/: 300 Bytes'))
    assert len([line for line in lines if line.startswith('  ')]) == 2
    assert 'Reported 2 of 4 directories' in lines[-1]


def test_drive_usage_with_prefix(populated_drive):
    """Test the directory report can be restricted to a prefix."""
    out = StringIO()

    call_command('drive_usage', populated_drive, '--prefix', 'photos/2024', stdout=out)

    assert '  photos/2024/: 200 Bytes (1 objects)' in out.getvalue()
    assert '  photos/:' not in out.getvalue()


def test_drive_usage_missing_drive(mock_s3):
    """Test unreadable drives fail the command."""
    with pytest.raises(CommandError, match='no-such-drive'):
        call_command('drive_usage', 'no-such-drive', stdout=StringIO())
