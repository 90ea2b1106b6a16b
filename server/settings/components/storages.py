"""Django storage configuration for S3-compatible backends.

Drives themselves are accessed through boto3 directly, the default
storage only holds generated thumbnails. It points at a separate
bucket so cached previews never show up inside a browsed drive.
"""

from typing import Any, Final

from server.settings.components import config

AWS_ACCESS_KEY_ID = config('AWS_ACCESS_KEY_ID', default=None)
AWS_SECRET_ACCESS_KEY = config('AWS_SECRET_ACCESS_KEY', default=None)
AWS_S3_ENDPOINT_URL = config('AWS_S3_ENDPOINT_URL', default=None)
AWS_REGION = config('AWS_REGION', default='eu-west-1')

THUMBNAIL_BUCKET_NAME = config(
    'THUMBNAIL_BUCKET_NAME',
    default='drive-browser-thumbnails',
)

# Storage configuration dictionary
# Uses S3-compatible storage for thumbnails, local storage for static files
STORAGES: Final[dict[str, dict[str, Any]]] = {
    'default': {
        'BACKEND': 'server.apps.previews.infrastructure.storage.ThumbnailStorage',
        'OPTIONS': {
            'bucket_name': THUMBNAIL_BUCKET_NAME,
            'access_key': AWS_ACCESS_KEY_ID,
            'secret_key': AWS_SECRET_ACCESS_KEY,
            'endpoint_url': AWS_S3_ENDPOINT_URL,
            'region_name': AWS_REGION,
            'file_overwrite': True,  # Thumbnail keys are deterministic
            'default_acl': None,  # Inherit bucket ACL
            'object_parameters': {
                'ContentType': 'image/webp',
                'CacheControl': 'max-age=31536000',
            },
        },
    },
    'staticfiles': {
        'BACKEND': 'django.contrib.staticfiles.storage.StaticFilesStorage',
    },
}
