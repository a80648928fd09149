import logging
from datetime import datetime, timedelta

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from django.db import transaction
from django.shortcuts import get_object_or_404

from backend.core.cache_utils import get_cached_dashboard_summary, cache_dashboard_summary
from backend.core.utils import create_audit_log, today
from .dashboard import dashboard_summary, financial_summary, month_bounds
from .filters import InvoiceFilter
from .models import Invoice
from .serializers import InvoiceSerializer, InvoiceStatusSerializer, PaymentSerializer
from .services import record_payment, upcoming_invoices

logger = logging.getLogger('backend.billing')


def _invoice_queryset():
    return Invoice.objects.select_related('client', 'project').prefetch_related('line_items', 'payments')


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def invoice_list_create(request):
    """List invoices or create a new invoice with line items"""
    if request.method == 'GET':
        invoices = InvoiceFilter(request.query_params, queryset=_invoice_queryset()).qs
        serializer = InvoiceSerializer(invoices, many=True)
        return Response(serializer.data)
    else:
        serializer = InvoiceSerializer(data=request.data, context={'user': request.user})
        if serializer.is_valid():
            invoice = serializer.save()
            create_audit_log(request, 'create', 'Invoice', invoice.id,
                             {'total_amount': invoice.total_amount, 'client': invoice.client_id},
                             object_name=invoice.client.name, object_reference=invoice.invoice_number)
            return Response(InvoiceSerializer(invoice).data, status=status.HTTP_201_CREATED)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def invoice_detail(request, pk):
    """Retrieve, update or delete an invoice"""
    invoice = get_object_or_404(_invoice_queryset(), pk=pk)

    if request.method == 'GET':
        serializer = InvoiceSerializer(invoice)
        return Response(serializer.data)
    elif request.method in ('PUT', 'PATCH'):
        serializer = InvoiceSerializer(invoice, data=request.data, partial=request.method == 'PATCH')
        if serializer.is_valid():
            invoice = serializer.save()
            create_audit_log(request, 'update', 'Invoice', invoice.id,
                             {k: v for k, v in request.data.items() if k != 'line_items'},
                             object_reference=invoice.invoice_number)
            return Response(InvoiceSerializer(_invoice_queryset().get(pk=invoice.pk)).data)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    else:  # DELETE
        invoice_number = invoice.invoice_number
        with transaction.atomic():
            invoice.payments.all().delete()
            invoice.line_items.all().delete()
            invoice.delete()
        create_audit_log(request, 'delete', 'Invoice', pk, object_reference=invoice_number)
        logger.info(f"Invoice {invoice_number} deleted with its line items and payments")
        return Response(status=status.HTTP_204_NO_CONTENT)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def invoice_status(request, pk):
    """Set an invoice's status (e.g. DRAFT -> SENT)"""
    invoice = get_object_or_404(Invoice, pk=pk)
    if not request.data.get('status'):
        return Response({'error': 'Status is required'}, status=status.HTTP_400_BAD_REQUEST)
    serializer = InvoiceStatusSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    old_status = invoice.status
    invoice.status = serializer.validated_data['status']
    invoice.save(update_fields=['status', 'updated_at'])
    create_audit_log(request, 'status_change', 'Invoice', invoice.id,
                     {'status': {'old': old_status, 'new': invoice.status}},
                     object_reference=invoice.invoice_number)
    return Response(InvoiceSerializer(_invoice_queryset().get(pk=invoice.pk)).data)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def invoice_upcoming(request):
    """Open invoices due in the next 30 days"""
    serializer = InvoiceSerializer(upcoming_invoices().prefetch_related('line_items', 'payments'), many=True)
    return Response(serializer.data)


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def invoice_payments(request, pk):
    """List an invoice's payments or record a new one"""
    invoice = get_object_or_404(Invoice, pk=pk)

    if request.method == 'GET':
        serializer = PaymentSerializer(invoice.payments.all(), many=True)
        return Response(serializer.data)

    serializer = PaymentSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    payment, invoice = record_payment(invoice.pk, serializer.validated_data, user=request.user)
    create_audit_log(request, 'payment_add', 'Invoice', invoice.id,
                     {'amount': payment.amount, 'method': payment.method,
                      'balance_due': invoice.balance_due, 'status': invoice.status},
                     object_reference=invoice.invoice_number)
    return Response(PaymentSerializer(payment).data, status=status.HTTP_201_CREATED)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def dashboard_summary_view(request):
    """Headline figures for the dashboard"""
    data = get_cached_dashboard_summary()
    if data is None:
        data = dashboard_summary()
        cache_dashboard_summary(data)
    return Response(data)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def dashboard_financial_view(request):
    """Income, expenses and profit for a date range (defaults to this month)"""
    from_date = request.query_params.get('from_date', None)
    to_date = request.query_params.get('to_date', None)
    month_start, next_month = month_bounds(today())

    try:
        if not from_date:
            from_date = month_start
        else:
            from_date = datetime.strptime(from_date, '%Y-%m-%d').date()

        if not to_date:
            to_date = next_month - timedelta(days=1)
        else:
            to_date = datetime.strptime(to_date, '%Y-%m-%d').date()
    except ValueError:
        return Response({'error': 'Dates must be in YYYY-MM-DD format'}, status=status.HTTP_400_BAD_REQUEST)

    if to_date < from_date:
        return Response({'error': 'to_date cannot be before from_date'}, status=status.HTTP_400_BAD_REQUEST)

    return Response(financial_summary(from_date, to_date))
