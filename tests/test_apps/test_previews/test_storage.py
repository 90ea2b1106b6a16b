"""Tests for the thumbnail storage backend."""

from django.conf import settings
from django.core.files.base import ContentFile
from django.core.files.storage import default_storage, storages

from server.apps.previews.infrastructure.storage import ThumbnailStorage


def test_default_storage_is_thumbnail_storage():
    """Test thumbnails go through the custom backend."""
    assert isinstance(storages['default'], ThumbnailStorage)
    assert storages['default'].bucket_name == settings.THUMBNAIL_BUCKET_NAME


def test_save_overwrites_existing_thumbnail(s3_client):
    """Test deterministic names are overwritten instead of renamed."""
    first = default_storage.save('d/cat-1x1.webp', ContentFile(b'one'))
    second = default_storage.save('d/cat-1x1.webp', ContentFile(b'two'))

    body = s3_client.get_object(
        Bucket=settings.THUMBNAIL_BUCKET_NAME,
        Key='d/cat-1x1.webp',
    )['Body'].read()
    assert first == second == 'd/cat-1x1.webp'
    assert body == b'two'


def test_purge_variants_matches_stem_exactly(s3_client):
    """Test only size variants of the same stem are deleted."""
    for name in (
        'd/pics/cat-10x10.webp',
        'd/pics/cat-original.webp',
        'd/pics/cat-family-10x10.webp',
        'd/pics/cat.webp',
        'd/pics/nested/cat-10x10.webp',
    ):
        default_storage.save(name, ContentFile(b'x'))

    deleted = default_storage.purge_variants('d/pics', 'cat')

    assert sorted(deleted) == ['d/pics/cat-10x10.webp', 'd/pics/cat-original.webp']
    assert default_storage.exists('d/pics/cat-family-10x10.webp')
    assert default_storage.exists('d/pics/nested/cat-10x10.webp')
