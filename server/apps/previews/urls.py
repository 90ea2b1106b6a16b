"""URL configuration for previews app."""

from django.urls import path

from server.apps.previews import views

app_name = 'previews'

urlpatterns = [
    path('thumbnail/', views.ThumbnailView.as_view(), name='thumbnail'),
    path('metadata/', views.MetadataView.as_view(), name='metadata'),
]
