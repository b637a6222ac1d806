"""
URL configuration for the Dailishaw back office.

Admin console endpoints live under ``api/v1/dashboard/`` and field user
endpoints under ``api/v1/user-dashboard/``; each app mounts its own routes.
"""
from django.contrib import admin
from django.urls import path, include, re_path
from django.conf import settings
from django.views.static import serve

from dailishaw.catalog.storage import azure_configured
from dailishaw.core.views import delete_user

admin.site.site_header = "Dailishaw Admin Panel"
admin.site.site_title = "Dailishaw Admin Portal"
admin.site.index_title = "Welcome to Dailishaw Admin Portal"

urlpatterns = [
    path('admin/', admin.site.urls),
    path('api/delete-user/', delete_user, name='delete-user'),
    path('api/v1/', include('dailishaw.core.urls')),
    path('api/v1/', include('dailishaw.catalog.urls')),
    path('api/v1/', include('dailishaw.ledger.urls')),
    path('api/v1/', include('dailishaw.reports.urls')),
]


def media_urlpatterns():
    """Serve MEDIA_ROOT when product images are stored locally"""
    if azure_configured():
        return []
    return [
        re_path(r'^media/(?P<path>.*)$', serve, {'document_root': settings.MEDIA_ROOT}),
    ]


urlpatterns += media_urlpatterns()
