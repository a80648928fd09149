from django.urls import path

from . import views
from .registry import REPORTS

urlpatterns = []

for report_name in REPORTS:
    slug = report_name.replace('/', '-')
    urlpatterns.append(
        path(f'reports/{report_name}/', views.report_detail, {'name': report_name}, name=f'report-{slug}')
    )
    if REPORTS[report_name].layout is not None:
        urlpatterns.append(
            path(f'reports/{report_name}/export/<str:fmt>/', views.report_export, {'name': report_name},
                 name=f'report-{slug}-export')
        )
