import logging

from django.http import Http404, HttpResponse
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from backend.core.models import CompanyProfile
from backend.core.utils import create_audit_log, today
from .exporters import EXCEL_CONTENT_TYPE, PDF_CONTENT_TYPE, build_excel, build_pdf
from .periods import PeriodError
from .registry import REPORTS, exportable, run_report

logger = logging.getLogger('backend.reports')

EXPORT_FORMATS = {
    'excel': (build_excel, EXCEL_CONTENT_TYPE, 'xlsx'),
    'pdf': (build_pdf, PDF_CONTENT_TYPE, 'pdf'),
}


def _subtitle(data, layout):
    if layout.get('subtitle'):
        return layout['subtitle']
    period = data.get('period')
    if period:
        return f"Period: {period['label']} ({period['from']} to {period['to']})"
    return ''


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def report_detail(request, name):
    """Run a financial or GST report for the requested period"""
    if name not in REPORTS:
        raise Http404(f"Unknown report '{name}'")
    try:
        return Response(run_report(name, request.query_params))
    except PeriodError as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)
    except Exception as e:
        logger.error(f"Error in report {name}: {str(e)}", exc_info=True)
        return Response(
            {'error': f'An error occurred while generating the {name} report'},
            status=status.HTTP_500_INTERNAL_SERVER_ERROR
        )


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def report_export(request, name, fmt):
    """Download a report as an Excel workbook or a PDF"""
    if not exportable(name):
        raise Http404(f"Report '{name}' cannot be exported")
    if fmt not in EXPORT_FORMATS:
        return Response(
            {'error': f"Unsupported export format '{fmt}'. Use one of: {', '.join(EXPORT_FORMATS)}"},
            status=status.HTTP_400_BAD_REQUEST
        )

    builder, content_type, extension = EXPORT_FORMATS[fmt]
    try:
        data = run_report(name, request.query_params)
        layout = REPORTS[name].layout(data)
        profile = CompanyProfile.objects.first()
        company_name = profile.company_name if profile else 'Agency'
        content = builder(layout, company_name, _subtitle(data, layout))
    except PeriodError as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)
    except Exception as e:
        logger.error(f"Error exporting report {name} as {fmt}: {str(e)}", exc_info=True)
        return Response(
            {'error': f'An error occurred while exporting the {name} report'},
            status=status.HTTP_500_INTERNAL_SERVER_ERROR
        )

    filename = f"{name.replace('/', '-')}-{today().isoformat()}.{extension}"
    response = HttpResponse(content, content_type=content_type)
    response['Content-Disposition'] = f'attachment; filename="{filename}"'

    create_audit_log(request, 'export', 'Report', name,
                     {'format': fmt, 'period': data.get('period') or data.get('as_of')},
                     object_name=layout['title'])
    logger.info(f"Report {name} exported as {fmt} by {request.user}")
    return response
