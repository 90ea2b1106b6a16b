"""URL configuration for drive app."""

from django.urls import path

from server.apps.drive import views

app_name = 'drive'

urlpatterns = [
    path('drives/', views.DriveListView.as_view(), name='drives'),
    path('drives/size/', views.DriveSizeView.as_view(), name='drive-size'),
    path('drive/', views.DriveObjectsView.as_view(), name='objects'),
    path('drive/file/', views.FileContentView.as_view(), name='file-content'),
    path(
        'drive/file/download/',
        views.DownloadUrlView.as_view(),
        name='download-url',
    ),
    path(
        'drive/file/upload-url/',
        views.UploadUrlView.as_view(),
        name='upload-url',
    ),
    path('drive/file/info/', views.FileInfoView.as_view(), name='file-info'),
    path(
        'drive/directory/size/',
        views.DirectorySizeView.as_view(),
        name='directory-size',
    ),
    path(
        'drive/directory/sizes/',
        views.DirectorySizesView.as_view(),
        name='directory-sizes',
    ),
    path(
        'drive/directory/download/',
        views.DirectoryDownloadView.as_view(),
        name='directory-download',
    ),
]
