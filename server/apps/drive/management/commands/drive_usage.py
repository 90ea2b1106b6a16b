"""Management command to report storage used by a drive."""

import logging
from typing import Any, Final

from django.core.management.base import BaseCommand, CommandError

from server.apps.drive.exceptions import DriveError
from server.apps.drive.infrastructure.paths import directory_prefix
from server.apps.drive.logic.sizes import directory_sizes, drive_size

_DEFAULT_TOP: Final = 10

logger = logging.getLogger(__name__)


class Command(BaseCommand):
    """Print the size of a drive and its largest directories."""

    help = 'Report total size of a drive and its largest directories'

    def add_arguments(self, parser: Any) -> None:
        """Add command line arguments.

        Args:
            parser: Argument parser.
        """
        parser.add_argument('drive', help='Drive (bucket) name')
        parser.add_argument(
            '--prefix',
            default='',
            help='Only report directories below this prefix',
        )
        parser.add_argument(
            '--top',
            type=int,
            default=_DEFAULT_TOP,
            help=f'Number of directories to show (default: {_DEFAULT_TOP})',
        )

    def handle(self, *args: Any, **options: Any) -> None:
        """Execute the usage report.

        Args:
            args: Positional arguments (unused).
            options: Command options.

        Raises:
            CommandError: If the drive can't be listed.
        """
        drive = options['drive']
        prefix = directory_prefix(options['prefix'])
        top = options['top']

        try:
            total = drive_size(drive)
            sizes = directory_sizes(drive, prefix)
        except DriveError as error:
            logger.exception('Failed to compute usage of drive %s', drive)
            raise CommandError(f'Failed to read drive {drive}: {error}') from error

        self.stdout.write(
            f'Drive {drive}: {total.formatted_size} '
            f'in {total.total_objects} objects',
        )

        largest = sorted(
            sizes.items(),
            key=lambda item: item[1].total_size,
            reverse=True,
        )[:top]
        for dir_key, summary in largest:
            self.stdout.write(
                f'  {dir_key}: {summary.formatted_size} '
                f'({summary.total_objects} objects)',
            )

        self.stdout.write(
            self.style.SUCCESS(
                f'Reported {len(largest)} of {len(sizes)} directories',
            ),
        )
