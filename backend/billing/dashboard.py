"""Dashboard aggregates over invoices, payments, expenses and salaries"""
from decimal import Decimal

from django.db.models import Q, Sum

from backend.clients.models import Client
from backend.core.utils import today
from backend.expenses.models import Expense
from backend.team.models import SalaryPayment
from .models import Invoice, Payment

ZERO = Decimal('0.00')


def _sum(queryset, field):
    return queryset.aggregate(total=Sum(field))['total'] or ZERO


def month_bounds(day):
    start = day.replace(day=1)
    if start.month == 12:
        next_start = start.replace(year=start.year + 1, month=1)
    else:
        next_start = start.replace(month=start.month + 1)
    return start, next_start


def dashboard_summary():
    """Totals across all invoices plus this month's billing and collections"""
    now = today()
    month_start, next_month = month_bounds(now)
    invoices = Invoice.objects.all()

    overdue = invoices.filter(
        Q(status='OVERDUE') |
        Q(due_date__lt=now, balance_due__gt=0, status__in=['SENT', 'PARTIALLY_PAID'])
    )

    return {
        'total_invoiced': float(_sum(invoices, 'total_amount')),
        'total_paid': float(_sum(invoices, 'amount_paid')),
        'total_outstanding': float(_sum(invoices, 'balance_due')),
        'this_month_invoiced': float(_sum(
            invoices.filter(created_at__date__gte=month_start, created_at__date__lt=next_month),
            'total_amount'
        )),
        'this_month_collected': float(_sum(
            Payment.objects.filter(payment_date__gte=month_start, payment_date__lt=next_month),
            'amount'
        )),
        'count_active_clients': Client.objects.filter(status='ACTIVE').count(),
        'count_overdue_invoices': overdue.count(),
    }


def financial_summary(from_date, to_date):
    """
    Income vs. spend for a date range.

    Income is what was collected (payments), expenses are PAID expenses by
    expense date plus PAID salaries whose month falls in the range.
    """
    total_invoiced = _sum(Invoice.objects.filter(issue_date__gte=from_date, issue_date__lte=to_date), 'total_amount')
    collected = _sum(Payment.objects.filter(payment_date__gte=from_date, payment_date__lte=to_date), 'amount')

    paid_expenses = Expense.objects.filter(status='PAID', expense_date__gte=from_date, expense_date__lte=to_date)
    expense_total = _sum(paid_expenses, 'amount')

    salaries = SalaryPayment.objects.filter(
        status='PAID',
        month__gte=from_date.strftime('%Y-%m'),
        month__lte=to_date.strftime('%Y-%m'),
    )
    salary_total = _sum(salaries, 'amount')
    total_expenses = expense_total + salary_total

    by_category = paid_expenses.values('category_id', 'category__name').annotate(
        total=Sum('amount')
    ).order_by('-total')
    top_vendors = paid_expenses.filter(vendor__isnull=False).values('vendor_id', 'vendor__name').annotate(
        total=Sum('amount')
    ).order_by('-total')[:5]

    return {
        'period': {'from': from_date.isoformat(), 'to': to_date.isoformat()},
        'total_invoiced': float(total_invoiced),
        'total_income': float(collected),
        'total_expenses': float(total_expenses),
        'expense_total': float(expense_total),
        'salary_total': float(salary_total),
        'net_profit': float(collected - total_expenses),
        'breakdown_by_category': [
            {'category_id': row['category_id'], 'category_name': row['category__name'], 'total': float(row['total'])}
            for row in by_category if row['total']
        ],
        'top_vendors': [
            {'vendor_id': row['vendor_id'], 'vendor_name': row['vendor__name'], 'total': float(row['total'])}
            for row in top_vendors
        ],
    }
