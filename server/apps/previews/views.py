"""HTTP views for previews app."""

from typing import Final

from django.conf import settings
from django.http import HttpRequest, HttpResponse, JsonResponse
from django.utils.decorators import method_decorator
from django.views import View
from django.views.decorators.csrf import csrf_exempt

from server.apps.accounts.decorators import token_required
from server.apps.drive.infrastructure.paths import parse_object_path
from server.apps.previews.logic.metadata import get_media_metadata
from server.apps.previews.logic.thumbnails import get_thumbnail
from server.http import BadRequestError, get_int_param, json_errors

_CACHE_CONTROL: Final = 'max-age=31536000'
_THUMBNAIL_PRESET: Final = 'thumbnail'


def _bounds(request: HttpRequest) -> tuple[int, int]:
    """Requested size bounds, capped at the largest preview size."""
    if request.GET.get('preset') == _THUMBNAIL_PRESET:
        return settings.THUMBNAIL_MAX_WIDTH, settings.THUMBNAIL_MAX_HEIGHT

    max_width = get_int_param(request.GET, 'mw', 0) or 0
    max_height = get_int_param(request.GET, 'mh', 0) or 0
    if max_width < 0 or max_height < 0:
        raise BadRequestError('mw and mh must not be negative')
    return (
        min(max_width, settings.PREVIEW_MAX_WIDTH),
        min(max_height, settings.PREVIEW_MAX_HEIGHT),
    )


@method_decorator(csrf_exempt, name='dispatch')
@method_decorator(token_required, name='dispatch')
class ThumbnailView(View):
    """WebP previews of images, videos and PDFs."""

    @json_errors('Failed to generate thumbnail')
    def get(self, request: HttpRequest) -> HttpResponse:
        drive_path = parse_object_path(request.GET.get('path'))
        max_width, max_height = _bounds(request)
        thumbnail = get_thumbnail(
            drive_path.drive,
            drive_path.key,
            max_width,
            max_height,
        )
        response = HttpResponse(thumbnail, content_type='image/webp')
        response['Cache-Control'] = _CACHE_CONTROL
        return response


@method_decorator(csrf_exempt, name='dispatch')
@method_decorator(token_required, name='dispatch')
class MetadataView(View):
    """Dimensions and duration of media files."""

    @json_errors('Failed to extract metadata')
    def get(self, request: HttpRequest) -> JsonResponse:
        drive_path = parse_object_path(request.GET.get('path'))
        return JsonResponse(
            get_media_metadata(drive_path.drive, drive_path.key),
        )
