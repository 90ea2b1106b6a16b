"""JSON shapes of drive app responses.

The browser client expects camelCase keys.
"""

from datetime import datetime
from typing import Any

from server.apps.drive.logic.archive import OversizedDirectory
from server.apps.drive.logic.listing import (
    DirectoryEntry,
    DriveInfo,
    FileEntry,
    ListingPage,
)
from server.apps.drive.logic.object_operations import ObjectMetadata, TextContent
from server.apps.drive.logic.sizes import SizeSummary


def _timestamp(value: datetime | None) -> str | None:
    return value.isoformat() if value is not None else None


def serialize_drive(drive: DriveInfo) -> dict[str, Any]:
    return {
        'name': drive.name,
        'creationDate': _timestamp(drive.creation_date),
    }


def serialize_entry(entry: FileEntry | DirectoryEntry) -> dict[str, Any]:
    payload: dict[str, Any] = {
        'id': entry.id,
        'key': entry.key,
        'name': entry.name,
        'size': entry.size,
        'lastModified': _timestamp(entry.last_modified),
        'isDirectory': entry.is_directory,
    }
    if isinstance(entry, FileEntry):
        payload['etag'] = entry.etag
    return payload


def serialize_listing_page(page: ListingPage) -> dict[str, Any]:
    return {
        'files': [serialize_entry(entry) for entry in page.files],
        'directories': [serialize_entry(entry) for entry in page.directories],
        'totalFiles': page.total_files,
        'totalDirectories': page.total_directories,
        'totalPages': page.total_pages,
        'currentPage': page.current_page,
    }


def serialize_size(summary: SizeSummary) -> dict[str, Any]:
    payload: dict[str, Any] = {
        'totalSize': summary.total_size,
        'totalObjects': summary.total_objects,
        'formattedSize': summary.formatted_size,
    }
    if summary.too_large:
        payload['error'] = 'Directory too large to calculate'
    return payload


def serialize_directory_sizes(
    drive: str,
    prefix: str,
    sizes: dict[str, SizeSummary],
) -> dict[str, Any]:
    return {
        'drive': drive,
        'prefix': prefix,
        'directorySizes': {
            dir_key: {
                'size': summary.total_size,
                'objects': summary.total_objects,
                'formattedSize': summary.formatted_size,
            }
            for dir_key, summary in sizes.items()
        },
    }


def serialize_text(text: TextContent) -> dict[str, Any]:
    return {
        'content': text.content,
        'contentType': text.content_type,
        'lastModified': _timestamp(text.last_modified),
        'size': text.size,
    }


def serialize_metadata(metadata: ObjectMetadata) -> dict[str, Any]:
    return {
        'key': metadata.key,
        'name': metadata.name,
        'size': metadata.size,
        'contentType': metadata.content_type,
        'lastModified': _timestamp(metadata.last_modified),
        'etag': metadata.etag,
        'metadata': metadata.metadata,
    }


def serialize_oversized(oversized: OversizedDirectory) -> dict[str, Any]:
    return {
        'message': oversized.message,
        'directoryName': oversized.directory_name,
        'fileCount': oversized.file_count,
        'totalSizeMB': f'{oversized.total_size_mb:.2f}',
        'suggestions': list(oversized.suggestions),
        'files': [
            {'key': member.key, 'name': member.name, 'size': member.size}
            for member in oversized.files
        ],
    }
