"""
Invoice and payment operations.

Views call these inside a request; they own the transactions and keep
amount_paid / balance_due / status consistent.
"""
import logging
from datetime import timedelta
from decimal import Decimal

from django.db import transaction

from backend.core.cache_utils import invalidate_dashboard_cache
from backend.core.integrations import post_slack_message
from backend.core.utils import next_document_number, quantize, today, get_agency_setting
from .models import Invoice, InvoiceLineItem, Payment

logger = logging.getLogger('backend.billing')


def _replace_line_items(invoice, line_items):
    invoice.line_items.all().delete()
    for item in line_items:
        InvoiceLineItem.objects.create(invoice=invoice, **item)


@transaction.atomic
def create_invoice(data, line_items, user=None, tax_amount=None):
    """Create an invoice with its line items; totals are always computed here"""
    if not data.get('invoice_number'):
        data['invoice_number'] = next_document_number(Invoice, 'invoice_number', 'INV')
    invoice = Invoice.objects.create(created_by=user, **data)
    _replace_line_items(invoice, line_items)
    invoice.recalculate_totals(tax_amount=tax_amount)
    invoice.save()
    logger.info(f"Invoice {invoice.invoice_number} created for client {invoice.client_id}: total {invoice.total_amount}")
    return invoice


@transaction.atomic
def update_invoice(invoice, data, line_items=None, tax_amount=None):
    """Update invoice fields and optionally replace its line items"""
    invoice = Invoice.objects.select_for_update().get(pk=invoice.pk)
    if tax_amount is None and line_items is None and 'tax_rate' not in data:
        tax_amount = invoice.tax_amount
    for field, value in data.items():
        setattr(invoice, field, value)
    if line_items is not None:
        _replace_line_items(invoice, line_items)
    invoice.recalculate_totals(tax_amount=tax_amount)
    if invoice.amount_paid > 0:
        invoice.status = invoice.status_after_payment(today())
    invoice.save()
    return invoice


def record_payment(invoice_id, data, user=None):
    """
    Record a payment against an invoice.

    amount_paid grows by the payment, balance_due = total - amount_paid, and the
    status moves to PAID, OVERDUE or PARTIALLY_PAID.
    """
    with transaction.atomic():
        invoice = Invoice.objects.select_for_update().get(pk=invoice_id)
        payment = Payment.objects.create(invoice=invoice, created_by=user, **data)

        invoice.amount_paid = quantize(invoice.amount_paid + payment.amount)
        invoice.balance_due = invoice.total_amount - invoice.amount_paid
        invoice.status = invoice.status_after_payment(today())
        invoice.save(update_fields=['amount_paid', 'balance_due', 'status', 'updated_at'])

    logger.info(
        f"Payment of {payment.amount} recorded on {invoice.invoice_number}; "
        f"balance {invoice.balance_due}, status {invoice.status}"
    )
    post_slack_message(
        f"Payment received: {invoice.currency} {payment.amount} on {invoice.invoice_number} "
        f"({invoice.client.name}). Balance due: {invoice.balance_due}",
        flag="notify_on_payment",
    )
    return payment, invoice


def upcoming_invoices(days=None):
    """Open invoices due between today and `days` from now, soonest first"""
    if days is None:
        days = get_agency_setting('UPCOMING_INVOICE_DAYS', 30)
    start = today()
    return Invoice.objects.select_related('client', 'project').filter(
        due_date__gte=start,
        due_date__lte=start + timedelta(days=days),
    ).exclude(status='PAID').order_by('due_date')


def mark_overdue_invoices(as_of=None):
    """Flip sent or part-paid invoices past their due date to OVERDUE"""
    as_of = as_of or today()
    updated = Invoice.objects.filter(
        due_date__lt=as_of,
        status__in=['SENT', 'PARTIALLY_PAID'],
        balance_due__gt=Decimal('0.00'),
    ).update(status='OVERDUE')
    if updated:
        # queryset.update() bypasses post_save
        invalidate_dashboard_cache()
        logger.info(f"Marked {updated} invoice(s) overdue as of {as_of}")
    return updated
