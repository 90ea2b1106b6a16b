"""Drive browsing settings."""

from server.settings.components import config

# Listing pagination
DRIVE_DEFAULT_ITEMS_PER_PAGE = config(
    'DRIVE_DEFAULT_ITEMS_PER_PAGE',
    cast=int,
    default=20,
)
DRIVE_MAX_ITEMS_PER_PAGE = config(
    'DRIVE_MAX_ITEMS_PER_PAGE',
    cast=int,
    default=200,
)

# Presigned URL lifetime in seconds
DRIVE_PRESIGNED_URL_EXPIRES = config(
    'DRIVE_PRESIGNED_URL_EXPIRES',
    cast=int,
    default=3600,
)

# Directories above these limits are not zipped
DRIVE_ARCHIVE_MAX_FILES = config('DRIVE_ARCHIVE_MAX_FILES', cast=int, default=100)
DRIVE_ARCHIVE_MAX_MB = config('DRIVE_ARCHIVE_MAX_MB', cast=int, default=50)

# Directories above these limits report "Too large" instead of a size
DRIVE_DIRECTORY_MAX_OBJECTS = config(
    'DRIVE_DIRECTORY_MAX_OBJECTS',
    cast=int,
    default=10000,
)
DRIVE_DIRECTORY_MAX_BYTES = config(
    'DRIVE_DIRECTORY_MAX_BYTES',
    cast=int,
    default=1024 * 1024 * 1024,
)

# How long a drive's region lookup is cached, in seconds
DRIVE_REGION_CACHE_TIMEOUT = config(
    'DRIVE_REGION_CACHE_TIMEOUT',
    cast=int,
    default=3600,
)
