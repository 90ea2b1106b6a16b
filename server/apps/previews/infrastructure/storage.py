"""Storage backend for cached thumbnails."""

import logging
import re
from typing import Any, final, override

from storages.backends.s3 import S3Storage

logger = logging.getLogger(__name__)

_VARIANT_SUFFIX = r'-(?:\d+x\d+|original)\.webp'


@final
class ThumbnailStorage(S3Storage):
    """S3 storage for rendered thumbnails.

    Extends django-storages S3Storage with:
    - Enhanced error logging
    - Removal of every size variant cached for a source object
    """

    @override
    def save(  # noqa: WPS211
        self,
        name: str,
        content: Any,
        max_length: int | None = None,
    ) -> str:
        """Save a thumbnail to S3 with error handling and logging.

        Args:
            name: Storage path for the thumbnail.
            content: Thumbnail content (file-like object).
            max_length: Optional maximum length for the filename.

        Returns:
            Actual storage path used.

        Raises:
            Exception: If S3 upload fails.
        """
        try:
            logger.debug('Caching thumbnail: %s', name)
            saved_name = super().save(name, content, max_length)
            logger.info('Cached thumbnail: %s', saved_name)
        except Exception:
            logger.exception('Failed to cache thumbnail: %s', name)
            raise
        else:
            return saved_name

    @override
    def delete(self, name: str) -> None:
        """Delete a thumbnail from S3 with error handling and logging.

        Args:
            name: Storage path of the thumbnail.

        Raises:
            Exception: If S3 delete fails.
        """
        try:
            super().delete(name)
            logger.info('Deleted thumbnail: %s', name)
        except Exception:
            logger.exception('Failed to delete thumbnail: %s', name)
            raise

    def purge_variants(self, directory: str, stem: str) -> list[str]:
        """Delete every cached size of one source object.

        Args:
            directory: Storage directory of the thumbnails, no trailing slash.
            stem: Source filename without extension.

        Returns:
            Storage paths that were deleted.
        """
        pattern = re.compile(re.escape(stem) + _VARIANT_SUFFIX)
        _, filenames = self.listdir(directory)

        deleted = []
        for filename in filenames:
            if not pattern.fullmatch(filename):
                continue
            name = f'{directory}/{filename}' if directory else filename
            self.delete(name)
            deleted.append(name)
        return deleted
