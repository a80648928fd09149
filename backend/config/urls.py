"""
URL configuration for the agency backend.

Every app is mounted under /api/v1/; the admin lives at /admin/.
"""
from django.contrib import admin
from django.urls import path, include, re_path
from django.conf import settings
from django.views.static import serve

admin.site.site_header = "Agency Operations Admin Panel"
admin.site.site_title = "Agency Operations Admin Portal"
admin.site.index_title = "Welcome to the Agency Operations Admin"

urlpatterns = [
    path('admin/', admin.site.urls),
    path('api/v1/', include('backend.core.urls')),
    path('api/v1/', include('backend.clients.urls')),
    path('api/v1/', include('backend.billing.urls')),
    path('api/v1/', include('backend.catalog.urls')),
    path('api/v1/', include('backend.expenses.urls')),
    path('api/v1/', include('backend.team.urls')),
    path('api/v1/', include('backend.leave.urls')),
    path('api/v1/', include('backend.proposals.urls')),
    path('api/v1/', include('backend.assets.urls')),
    path('api/v1/', include('backend.reports.urls')),
    re_path(r'^media/(?P<path>.*)$', serve, {'document_root': settings.MEDIA_ROOT}),
    re_path(r'^static/(?P<path>.*)$', serve, {'document_root': settings.STATIC_ROOT}),
]
