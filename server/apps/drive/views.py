"""HTTP views for drive app.

Objects are addressed with a ``path`` parameter of the form
``drive/key``. Every view requires a verified identity token.
"""

from django.conf import settings
from django.http import HttpRequest, HttpResponse, JsonResponse
from django.utils.decorators import method_decorator
from django.utils.http import content_disposition_header
from django.views import View
from django.views.decorators.csrf import csrf_exempt

from server.apps.accounts.decorators import token_required
from server.apps.drive import serializers
from server.apps.drive.exceptions import InvalidRequestError
from server.apps.drive.infrastructure.paths import (
    directory_prefix,
    parse_drive_path,
    parse_object_path,
)
from server.apps.drive.logic import archive, listing, object_operations, sizes
from server.apps.drive.logic.archive import OversizedDirectory
from server.http import (
    get_int_param,
    json_errors,
    read_json_body,
    require_fields,
)


def _listing_query(request: HttpRequest) -> listing.ListingQuery:
    params = request.GET
    limit = get_int_param(
        params,
        'limit',
        settings.DRIVE_DEFAULT_ITEMS_PER_PAGE,
    )
    return listing.ListingQuery(
        page=get_int_param(params, 'page', 1),  # type: ignore[arg-type]
        limit=min(limit, settings.DRIVE_MAX_ITEMS_PER_PAGE),  # type: ignore[type-var]
        name=params.get('name', ''),
        type=params.get('type', ''),
        extension=params.get('extension', ''),
        sort=params.get('sort') or None,  # type: ignore[arg-type]
        direction=params.get('direction') or None,  # type: ignore[arg-type]
    )


@method_decorator(csrf_exempt, name='dispatch')
@method_decorator(token_required, name='dispatch')
class DriveListView(View):
    """List the drives visible to the configured credentials."""

    @json_errors('Failed to list drives')
    def get(self, request: HttpRequest) -> JsonResponse:
        drives = listing.list_drives()
        return JsonResponse({
            'drives': [serializers.serialize_drive(drive) for drive in drives],
        })


@method_decorator(csrf_exempt, name='dispatch')
@method_decorator(token_required, name='dispatch')
class DriveSizeView(View):
    """Total size of a whole drive."""

    @json_errors('Failed to calculate drive size')
    def get(self, request: HttpRequest) -> JsonResponse:
        drive = request.GET.get('drive')
        if not drive:
            raise InvalidRequestError('Drive name is required')
        payload = serializers.serialize_size(sizes.drive_size(drive))
        return JsonResponse({'drive': drive, **payload})


@method_decorator(csrf_exempt, name='dispatch')
@method_decorator(token_required, name='dispatch')
class DriveObjectsView(View):
    """Browse, upload, delete and rename objects."""

    @json_errors('Failed to list objects')
    def get(self, request: HttpRequest) -> JsonResponse:
        drive_path = parse_drive_path(request.GET.get('path'))
        page = listing.browse(
            drive_path.drive,
            directory_prefix(drive_path.key),
            _listing_query(request),
        )
        return JsonResponse(serializers.serialize_listing_page(page))

    @json_errors('Failed to upload file')
    def post(self, request: HttpRequest) -> JsonResponse:
        if request.content_type.startswith('multipart/'):
            return self._upload(request)

        payload = read_json_body(request)
        require_fields(payload, 'drive', 'dirKey')
        marker_key = object_operations.create_directory(
            payload['drive'],
            payload['dirKey'],
        )
        return JsonResponse({'success': True, 'key': marker_key}, status=201)

    @json_errors('Failed to delete file')
    def delete(self, request: HttpRequest) -> JsonResponse:
        drive_path = parse_object_path(request.GET.get('path'))
        deleted = object_operations.delete_object(drive_path.drive, drive_path.key)
        return JsonResponse({'success': True, 'deleted': deleted})

    @json_errors('Failed to rename file')
    def patch(self, request: HttpRequest) -> JsonResponse:
        payload = read_json_body(request)
        require_fields(payload, 'drive', 'oldKey', 'newKey')
        moved = object_operations.rename_object(
            payload['drive'],
            payload['oldKey'],
            payload['newKey'],
        )
        return JsonResponse({'success': True, 'moved': moved})

    def _upload(self, request: HttpRequest) -> JsonResponse:
        uploaded = request.FILES.get('file')
        require_fields(request.POST, 'drive', 'key')
        if uploaded is None:
            raise InvalidRequestError('Missing required fields: file')

        object_operations.upload_object(
            request.POST['drive'],
            request.POST['key'],
            uploaded,
            content_type=uploaded.content_type,
        )
        return JsonResponse({'success': True}, status=201)


@method_decorator(csrf_exempt, name='dispatch')
@method_decorator(token_required, name='dispatch')
class FileContentView(View):
    """Read and save text files."""

    @json_errors('Failed to get file content')
    def get(self, request: HttpRequest) -> JsonResponse:
        drive_path = parse_object_path(request.GET.get('path'))
        text = object_operations.get_text_content(drive_path.drive, drive_path.key)
        return JsonResponse(serializers.serialize_text(text))

    @json_errors('Failed to save file content')
    def put(self, request: HttpRequest) -> JsonResponse:
        drive_path = parse_object_path(request.GET.get('path'))
        payload = read_json_body(request)
        content = payload.get('content')
        if not isinstance(content, str):
            raise InvalidRequestError('Missing required fields: content')

        object_operations.save_text_content(
            drive_path.drive,
            drive_path.key,
            content,
            content_type=payload.get('contentType') or 'text/plain',
        )
        return JsonResponse({'success': True})


@method_decorator(csrf_exempt, name='dispatch')
@method_decorator(token_required, name='dispatch')
class DownloadUrlView(View):
    """Presigned download links."""

    @json_errors('Failed to generate download URL')
    def get(self, request: HttpRequest) -> JsonResponse:
        drive_path = parse_object_path(request.GET.get('path'))
        url = object_operations.get_download_url(
            drive_path.drive,
            drive_path.key,
            expires_in=get_int_param(request.GET, 'expiresIn'),
        )
        return JsonResponse({'downloadUrl': url})


@method_decorator(csrf_exempt, name='dispatch')
@method_decorator(token_required, name='dispatch')
class UploadUrlView(View):
    """Presigned upload links for direct browser uploads."""

    @json_errors('Failed to generate upload URL')
    def post(self, request: HttpRequest) -> JsonResponse:
        payload = read_json_body(request)
        require_fields(payload, 'drive', 'key', 'contentType')
        expires_in = payload.get('expiresIn')
        if expires_in is not None and (
            isinstance(expires_in, bool) or not isinstance(expires_in, int)
        ):
            raise InvalidRequestError('expiresIn must be an integer')

        url = object_operations.get_upload_url(
            payload['drive'],
            payload['key'],
            payload['contentType'],
            expires_in=expires_in,
        )
        return JsonResponse({'uploadUrl': url})


@method_decorator(csrf_exempt, name='dispatch')
@method_decorator(token_required, name='dispatch')
class FileInfoView(View):
    """Object metadata without the body."""

    @json_errors('Failed to get file info')
    def get(self, request: HttpRequest) -> JsonResponse:
        drive_path = parse_object_path(request.GET.get('path'))
        metadata = object_operations.get_object_metadata(
            drive_path.drive,
            drive_path.key,
        )
        return JsonResponse(serializers.serialize_metadata(metadata))


@method_decorator(csrf_exempt, name='dispatch')
@method_decorator(token_required, name='dispatch')
class DirectorySizeView(View):
    """Size of one directory, or of every directory at a drive root."""

    @json_errors('Failed to calculate directory sizes')
    def get(self, request: HttpRequest) -> JsonResponse:
        drive_path = parse_drive_path(request.GET.get('path'))
        if not drive_path.key:
            all_sizes = sizes.directory_sizes(drive_path.drive)
            return JsonResponse(
                serializers.serialize_directory_sizes(
                    drive_path.drive,
                    '',
                    all_sizes,
                ),
            )

        summary = sizes.directory_size(drive_path.drive, drive_path.key)
        return JsonResponse(serializers.serialize_size(summary))


@method_decorator(csrf_exempt, name='dispatch')
@method_decorator(token_required, name='dispatch')
class DirectorySizesView(View):
    """Sizes of every directory below a prefix."""

    @json_errors('Failed to calculate directory sizes')
    def get(self, request: HttpRequest) -> JsonResponse:
        drive = request.GET.get('drive')
        if not drive:
            raise InvalidRequestError('Drive name is required')
        prefix = directory_prefix(request.GET.get('prefix', ''))
        all_sizes = sizes.directory_sizes(drive, prefix)
        return JsonResponse(
            serializers.serialize_directory_sizes(drive, prefix, all_sizes),
        )


@method_decorator(csrf_exempt, name='dispatch')
@method_decorator(token_required, name='dispatch')
class DirectoryDownloadView(View):
    """ZIP download of a directory."""

    @json_errors('Failed to process directory')
    def get(self, request: HttpRequest) -> HttpResponse:
        drive_path = parse_drive_path(request.GET.get('path'))
        result = archive.build_directory_archive(drive_path.drive, drive_path.key)
        if isinstance(result, OversizedDirectory):
            return JsonResponse(serializers.serialize_oversized(result))

        response = HttpResponse(result.content, content_type='application/zip')
        response['Content-Disposition'] = content_disposition_header(
            as_attachment=True,
            filename=result.filename,
        )
        response['Content-Length'] = str(len(result.content))
        return response
