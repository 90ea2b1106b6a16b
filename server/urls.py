"""Root URL configuration.

Every JSON endpoint lives below ``/api/``.
"""

from django.contrib import admin
from django.urls import include, path

urlpatterns = [
    path('admin/', admin.site.urls),
    path('api/', include('server.apps.accounts.urls')),
    path('api/', include('server.apps.drive.urls')),
    path('api/previews/', include('server.apps.previews.urls')),
]
