"""
Financial reports over invoices, payments, expenses, salaries and fixed assets.

Every function returns a plain dict ready for `Response`; money is
converted to float (2 places) here and nowhere earlier. DRAFT invoices
have not been issued and stay out of every report.
"""
from collections import OrderedDict
from datetime import date, timedelta
from decimal import Decimal

from django.db.models import Count, Sum

from backend.assets.depreciation import asset_valuation
from backend.assets.models import FixedAsset
from backend.billing.models import Invoice, Payment
from backend.core.utils import quantize, today
from backend.expenses.models import Expense
from backend.team.models import SalaryPayment
from .periods import iter_months, month_end, month_start, period_payload, previous_window, shift_months

ZERO = Decimal('0.00')

AGING_BUCKETS = [
    ('Current', None, 0),
    ('1-30 days', 1, 30),
    ('31-60 days', 31, 60),
    ('61-90 days', 61, 90),
    ('90+ days', 91, None),
]


def money(value):
    return float(quantize(value or ZERO))


def percent(part, whole):
    if not whole:
        return 0.0
    return round(float(part) / float(whole) * 100, 2)


def _sum(queryset, field):
    return queryset.aggregate(total=Sum(field))['total'] or ZERO


def issued_invoices():
    return Invoice.objects.exclude(status='DRAFT')


def paid_expenses(from_date=None, to_date=None):
    expenses = Expense.objects.filter(status='PAID')
    if from_date:
        expenses = expenses.filter(expense_date__gte=from_date)
    if to_date:
        expenses = expenses.filter(expense_date__lte=to_date)
    return expenses


def paid_salaries(from_date=None, to_date=None):
    salaries = SalaryPayment.objects.filter(status='PAID')
    if from_date:
        salaries = salaries.filter(month__gte=from_date.strftime('%Y-%m'))
    if to_date:
        salaries = salaries.filter(month__lte=to_date.strftime('%Y-%m'))
    return salaries


def collections(from_date=None, to_date=None):
    payments = Payment.objects.all()
    if from_date:
        payments = payments.filter(payment_date__gte=from_date)
    if to_date:
        payments = payments.filter(payment_date__lte=to_date)
    return payments


def period_totals(from_date, to_date):
    """Collected revenue, total spend and profit for a window"""
    revenue = _sum(collections(from_date, to_date), 'amount')
    expenses = _sum(paid_expenses(from_date, to_date), 'amount') + _sum(paid_salaries(from_date, to_date), 'amount')
    return revenue, expenses, revenue - expenses


# ---------------------------------------------------------------------------
# Revenue and receivables
# ---------------------------------------------------------------------------

def revenue_by_client(from_date, to_date, label):
    rows = issued_invoices().filter(
        issue_date__gte=from_date, issue_date__lte=to_date
    ).values('client_id', 'client__name').annotate(
        total_invoiced=Sum('total_amount'),
        total_paid=Sum('amount_paid'),
        total_outstanding=Sum('balance_due'),
        invoice_count=Count('id'),
    ).order_by('-total_invoiced')

    clients = [
        {
            'client_id': row['client_id'],
            'client_name': row['client__name'],
            'total_invoiced': money(row['total_invoiced']),
            'total_paid': money(row['total_paid']),
            'total_outstanding': money(row['total_outstanding']),
            'invoice_count': row['invoice_count'],
        }
        for row in rows
    ]
    return {
        'period': period_payload(from_date, to_date, label),
        'clients': clients,
        'summary': {
            'total_invoiced': round(sum(c['total_invoiced'] for c in clients), 2),
            'total_paid': round(sum(c['total_paid'] for c in clients), 2),
            'total_outstanding': round(sum(c['total_outstanding'] for c in clients), 2),
            'client_count': len(clients),
        },
    }


def aging_bucket(days_overdue):
    for label, low, high in AGING_BUCKETS:
        if (low is None or days_overdue >= low) and (high is None or days_overdue <= high):
            return label
    return AGING_BUCKETS[-1][0]


def invoice_aging(as_of=None):
    """Unpaid issued invoices grouped by how far past due they are"""
    as_of = as_of or today()
    buckets = OrderedDict(
        (label, {'label': label, 'count': 0, 'amount': ZERO, 'invoices': []})
        for label, _, _ in AGING_BUCKETS
    )

    unpaid = issued_invoices().filter(balance_due__gt=ZERO).select_related('client').order_by('due_date')
    for invoice in unpaid:
        days_overdue = max(0, (as_of - invoice.due_date).days)
        bucket = buckets[aging_bucket(days_overdue)]
        bucket['count'] += 1
        bucket['amount'] += invoice.balance_due
        bucket['invoices'].append({
            'invoice_id': invoice.id,
            'invoice_number': invoice.invoice_number,
            'client_name': invoice.client.name,
            'amount': money(invoice.balance_due),
            'due_date': invoice.due_date.isoformat(),
            'days_overdue': days_overdue,
        })

    total = sum((b['amount'] for b in buckets.values()), ZERO)
    for bucket in buckets.values():
        bucket['amount'] = money(bucket['amount'])

    return {
        'as_of': as_of.isoformat(),
        'buckets': list(buckets.values()),
        'summary': {
            'total_outstanding': money(total),
            'invoice_count': sum(b['count'] for b in buckets.values()),
        },
    }


# ---------------------------------------------------------------------------
# Spend and profitability
# ---------------------------------------------------------------------------

def expenses_by_category(from_date, to_date, label):
    rows = paid_expenses(from_date, to_date).values(
        'category_id', 'category__code', 'category__name', 'category__group'
    ).annotate(total_amount=Sum('amount'), count=Count('id')).order_by('-total_amount')
    rows = list(rows)
    grand_total = sum((row['total_amount'] for row in rows), ZERO)

    return {
        'period': period_payload(from_date, to_date, label),
        'categories': [
            {
                'category_id': row['category_id'],
                'category_code': row['category__code'],
                'category_name': row['category__name'],
                'group': row['category__group'],
                'total_amount': money(row['total_amount']),
                'count': row['count'],
                'percentage': percent(row['total_amount'], grand_total),
            }
            for row in rows
        ],
        'summary': {
            'total_expenses': money(grand_total),
            'expense_count': sum(row['count'] for row in rows),
            'category_count': len(rows),
        },
    }


def profit_by_client(from_date, to_date, label):
    """
    Collected revenue per client less a share of the period's spend.

    Costs are not tracked per client, so spend is allocated in proportion
    to each client's share of collected revenue.
    """
    rows = list(collections(from_date, to_date).values(
        'invoice__client_id', 'invoice__client__name'
    ).annotate(revenue=Sum('amount')).order_by('-revenue'))

    total_revenue = sum((row['revenue'] for row in rows), ZERO)
    _, total_expenses, _ = period_totals(from_date, to_date)

    clients = []
    for row in rows:
        allocated = total_expenses * row['revenue'] / total_revenue if total_revenue else ZERO
        profit = row['revenue'] - allocated
        clients.append({
            'client_id': row['invoice__client_id'],
            'client_name': row['invoice__client__name'],
            'revenue': money(row['revenue']),
            'expenses': money(allocated),
            'profit': money(profit),
            'margin': percent(profit, row['revenue']),
        })

    total_profit = total_revenue - total_expenses if total_revenue else ZERO
    return {
        'period': period_payload(from_date, to_date, label),
        'clients': clients,
        'summary': {
            'total_revenue': money(total_revenue),
            'total_expenses': money(total_expenses if total_revenue else ZERO),
            'total_profit': money(total_profit),
            'average_margin': percent(total_profit, total_revenue),
        },
    }


def profit_loss(from_date, to_date, label):
    invoiced = _sum(issued_invoices().filter(issue_date__gte=from_date, issue_date__lte=to_date), 'total_amount')
    collected = _sum(collections(from_date, to_date), 'amount')

    expenses = paid_expenses(from_date, to_date)
    operational = _sum(expenses.filter(vendor__isnull=True), 'amount')
    vendors = _sum(expenses.filter(vendor__isnull=False), 'amount')
    salaries = _sum(paid_salaries(from_date, to_date), 'amount')
    other = ZERO
    total = operational + salaries + vendors + other

    gross_profit = collected - vendors
    net_profit = collected - total

    return {
        'period': period_payload(from_date, to_date, label),
        'revenue': {
            'invoiced': money(invoiced),
            'collected': money(collected),
        },
        'expenses': {
            'operational': money(operational),
            'salaries': money(salaries),
            'vendors': money(vendors),
            'other': money(other),
            'total': money(total),
        },
        'gross_profit': money(gross_profit),
        'net_profit': money(net_profit),
        'margin': percent(net_profit, collected),
    }


# ---------------------------------------------------------------------------
# Position and cash
# ---------------------------------------------------------------------------

def cash_position(up_to=None):
    """Collections less paid expenses and salaries, everything up to `up_to`"""
    return (
        _sum(collections(to_date=up_to), 'amount')
        - _sum(paid_expenses(to_date=up_to), 'amount')
        - _sum(paid_salaries(to_date=up_to), 'amount')
    )


def balance_sheet(as_of=None):
    as_of = as_of or today()

    cash = cash_position(as_of)
    receivable = _sum(issued_invoices().filter(issue_date__lte=as_of), 'balance_due')
    fixed = sum(
        (asset_valuation(asset, as_of)['current_value']
         for asset in FixedAsset.objects.filter(status='ACTIVE', purchase_date__lte=as_of)),
        ZERO,
    )
    total_assets = cash + receivable + fixed

    payable = _sum(Expense.objects.filter(status__in=['DUE', 'PLANNED'], expense_date__lte=as_of), 'amount')
    pending_salaries = _sum(
        SalaryPayment.objects.filter(status='PENDING', month__lte=as_of.strftime('%Y-%m')), 'amount'
    )
    total_liabilities = payable + pending_salaries
    retained = total_assets - total_liabilities

    return {
        'as_of': as_of.isoformat(),
        'assets': {
            'current': {
                'cash': money(cash),
                'accounts_receivable': money(receivable),
                'total': money(cash + receivable),
            },
            'fixed': money(fixed),
            'total': money(total_assets),
        },
        'liabilities': {
            'current': {
                'accounts_payable': money(payable),
                'pending_salaries': money(pending_salaries),
                'total': money(total_liabilities),
            },
            'total': money(total_liabilities),
        },
        'equity': {
            'retained_earnings': money(retained),
            'total': money(retained),
        },
        'total_liabilities_and_equity': money(total_liabilities + retained),
    }


def _bucket_by_month(pairs):
    totals = {}
    for day, amount in pairs:
        key = day.strftime('%Y-%m')
        totals[key] = totals.get(key, ZERO) + amount
    return totals


def cash_flow(from_date, to_date, label):
    """Month-by-month inflows and outflows with a running cash balance"""
    inflow = _bucket_by_month(collections(from_date, to_date).values_list('payment_date', 'amount'))
    expenses = paid_expenses(from_date, to_date)
    operational = _bucket_by_month(expenses.filter(vendor__isnull=True).values_list('expense_date', 'amount'))
    vendor_spend = _bucket_by_month(expenses.filter(vendor__isnull=False).values_list('expense_date', 'amount'))
    salaries = {}
    for month, amount in paid_salaries(from_date, to_date).values_list('month', 'amount'):
        salaries[month] = salaries.get(month, ZERO) + amount

    opening = cash_position(from_date - timedelta(days=1))
    starting_balance = opening
    rows = []
    totals = {'collections': ZERO, 'expenses': ZERO, 'salaries': ZERO, 'vendors': ZERO}

    for first_day in iter_months(from_date, to_date):
        key = first_day.strftime('%Y-%m')
        month_in = inflow.get(key, ZERO)
        month_expenses = operational.get(key, ZERO)
        month_salaries = salaries.get(key, ZERO)
        month_vendors = vendor_spend.get(key, ZERO)
        total_out = month_expenses + month_salaries + month_vendors
        net = month_in - total_out
        closing = opening + net

        rows.append({
            'period': key,
            'month': first_day.strftime('%b %Y'),
            'opening_balance': money(opening),
            'inflows': {'collections': money(month_in)},
            'outflows': {
                'expenses': money(month_expenses),
                'salaries': money(month_salaries),
                'vendors': money(month_vendors),
            },
            'total_inflows': money(month_in),
            'total_outflows': money(total_out),
            'net_cash_flow': money(net),
            'closing_balance': money(closing),
        })
        totals['collections'] += month_in
        totals['expenses'] += month_expenses
        totals['salaries'] += month_salaries
        totals['vendors'] += month_vendors
        opening = closing

    total_in = totals['collections']
    total_out = totals['expenses'] + totals['salaries'] + totals['vendors']
    return {
        'period': period_payload(from_date, to_date, label),
        'months': rows,
        'summary': {
            'opening_balance': money(starting_balance),
            'total_inflows': money(total_in),
            'total_outflows': money(total_out),
            'total_expenses': money(totals['expenses']),
            'total_salaries': money(totals['salaries']),
            'total_vendors': money(totals['vendors']),
            'net_cash_flow': money(total_in - total_out),
            'closing_balance': money(starting_balance + total_in - total_out),
        },
    }


# ---------------------------------------------------------------------------
# Books
# ---------------------------------------------------------------------------

def _salary_date(salary):
    if salary.payment_date:
        return salary.payment_date
    year, month = salary.month.split('-')
    return date(int(year), int(month), 1)


def ledger_entries(from_date, to_date):
    """Receipts, paid expenses and paid salaries as ledger lines, oldest first"""
    entries = []

    for payment in collections(from_date, to_date).select_related('invoice__client'):
        entries.append({
            'date': payment.payment_date,
            'voucher_no': f"RCT-{payment.id:05d}",
            'particulars': f"Payment received - {payment.invoice.invoice_number} ({payment.invoice.client.name})",
            'account_head': 'Sales/Receivables',
            'debit': ZERO,
            'credit': payment.amount,
        })

    for expense in paid_expenses(from_date, to_date).select_related('vendor', 'category'):
        particulars = expense.description
        if expense.vendor:
            particulars = f"{particulars} ({expense.vendor.name})"
        entries.append({
            'date': expense.expense_date,
            'voucher_no': f"EXP-{expense.id:05d}",
            'particulars': particulars,
            'account_head': expense.category.name,
            'debit': expense.amount,
            'credit': ZERO,
        })

    for salary in paid_salaries(from_date, to_date).select_related('team_member'):
        entries.append({
            'date': _salary_date(salary),
            'voucher_no': f"SAL-{salary.id:05d}",
            'particulars': f"Salary - {salary.team_member.name} ({salary.month})",
            'account_head': 'Salaries',
            'debit': salary.amount,
            'credit': ZERO,
        })

    entries.sort(key=lambda e: (e['date'], e['voucher_no']))
    return entries


def general_ledger(from_date, to_date, label):
    balance = ZERO
    total_debit = ZERO
    total_credit = ZERO
    rows = []
    for entry in ledger_entries(from_date, to_date):
        balance += entry['credit'] - entry['debit']
        total_debit += entry['debit']
        total_credit += entry['credit']
        rows.append({
            'date': entry['date'].isoformat(),
            'voucher_no': entry['voucher_no'],
            'particulars': entry['particulars'],
            'account_head': entry['account_head'],
            'debit': money(entry['debit']),
            'credit': money(entry['credit']),
            'balance': money(balance),
        })

    return {
        'period': period_payload(from_date, to_date, label),
        'entries': rows,
        'summary': {
            'total_debit': money(total_debit),
            'total_credit': money(total_credit),
            'closing_balance': money(balance),
            'entry_count': len(rows),
        },
    }


def trial_balance(from_date, to_date, label):
    """
    Debit and credit balances per account for the window.

    Retained Earnings absorbs whatever the other accounts leave unbalanced.
    """
    invoices = issued_invoices().filter(issue_date__gte=from_date, issue_date__lte=to_date)
    sales = _sum(invoices, 'total_amount')
    receivable = _sum(invoices, 'balance_due')
    collected = _sum(collections(from_date, to_date), 'amount')
    expenses = paid_expenses(from_date, to_date)
    expense_total = _sum(expenses, 'amount')
    salaries = _sum(paid_salaries(from_date, to_date), 'amount')
    cash = collected - expense_total - salaries
    payable = _sum(
        Expense.objects.filter(status__in=['DUE', 'PLANNED'], expense_date__gte=from_date, expense_date__lte=to_date),
        'amount',
    )

    accounts = [
        ('Sales', 'Income', ZERO, sales),
        ('Accounts Receivable', 'Asset', receivable, ZERO),
        ('Bank/Cash', 'Asset', cash if cash >= 0 else ZERO, -cash if cash < 0 else ZERO),
    ]
    by_category = expenses.values('category__name').annotate(total=Sum('amount')).order_by('category__name')
    for row in by_category:
        accounts.append((row['category__name'], 'Expense', row['total'], ZERO))
    accounts.append(('Salaries', 'Expense', salaries, ZERO))
    accounts.append(('Accounts Payable', 'Liability', ZERO, payable))

    total_debit = sum((a[2] for a in accounts), ZERO)
    total_credit = sum((a[3] for a in accounts), ZERO)
    difference = total_debit - total_credit
    if difference > 0:
        accounts.append(('Retained Earnings', 'Equity', ZERO, difference))
    elif difference < 0:
        accounts.append(('Retained Earnings', 'Equity', -difference, ZERO))

    total_debit = sum((a[2] for a in accounts), ZERO)
    total_credit = sum((a[3] for a in accounts), ZERO)
    return {
        'period': period_payload(from_date, to_date, label),
        'accounts': [
            {'account_name': name, 'account_type': kind, 'debit': money(debit), 'credit': money(credit)}
            for name, kind, debit, credit in accounts
            if debit or credit or name in ('Sales', 'Bank/Cash')
        ],
        'summary': {
            'total_debit': money(total_debit),
            'total_credit': money(total_credit),
            'is_balanced': abs(total_debit - total_credit) < Decimal('0.01'),
        },
    }


def fixed_asset_register(as_of=None):
    as_of = as_of or today()
    assets = []
    categories = OrderedDict()
    totals = {'purchase': ZERO, 'current': ZERO, 'depreciation': ZERO}

    for asset in FixedAsset.objects.select_related('vendor').order_by('category', 'name'):
        valuation = asset_valuation(asset, as_of)
        assets.append({
            'id': asset.id,
            'name': asset.name,
            'category': asset.category,
            'purchase_date': asset.purchase_date.isoformat(),
            'purchase_value': money(asset.purchase_value),
            'depreciation_method': asset.depreciation_method,
            'depreciation_rate': float(asset.depreciation_rate),
            'accumulated_depreciation': money(valuation['accumulated_depreciation']),
            'current_value': money(valuation['current_value']),
            'years_owned': valuation['years_owned'],
            'status': asset.status,
            'vendor_name': asset.vendor.name if asset.vendor else None,
        })
        totals['purchase'] += asset.purchase_value
        totals['current'] += valuation['current_value']
        totals['depreciation'] += valuation['accumulated_depreciation']

        key = asset.category or 'Uncategorized'
        group = categories.setdefault(key, {
            'category': key, 'count': 0, 'purchase_value': ZERO, 'current_value': ZERO, 'depreciation': ZERO,
        })
        group['count'] += 1
        group['purchase_value'] += asset.purchase_value
        group['current_value'] += valuation['current_value']
        group['depreciation'] += valuation['accumulated_depreciation']

    return {
        'as_of': as_of.isoformat(),
        'assets': assets,
        'summary': {
            'total_assets': len(assets),
            'active_assets': sum(1 for a in assets if a['status'] == 'ACTIVE'),
            'total_purchase_value': money(totals['purchase']),
            'total_current_value': money(totals['current']),
            'total_depreciation': money(totals['depreciation']),
            'by_category': [
                {**group, 'purchase_value': money(group['purchase_value']),
                 'current_value': money(group['current_value']),
                 'depreciation': money(group['depreciation'])}
                for group in categories.values()
            ],
        },
    }


# ---------------------------------------------------------------------------
# Comparisons
# ---------------------------------------------------------------------------

def change_percent(current, previous):
    if previous == 0:
        if current == 0:
            return 0.0
        return 100.0 if current > 0 else -100.0
    return round((float(current) - float(previous)) / abs(float(previous)) * 100, 2)


def trend(change):
    if change > 0:
        return 'up'
    if change < 0:
        return 'down'
    return 'neutral'


def _metrics(from_date, to_date):
    revenue, expenses, profit = period_totals(from_date, to_date)
    return {
        'revenue': revenue,
        'expenses': expenses,
        'profit': profit,
        'margin': Decimal(str(percent(profit, revenue))),
    }


def _compare(current, previous, from_date, to_date):
    result = {'from': from_date.isoformat(), 'to': to_date.isoformat()}
    for metric in ('revenue', 'expenses', 'profit', 'margin'):
        change = change_percent(current[metric], previous[metric])
        result[metric] = {
            'previous': money(previous[metric]),
            'change': change,
            'trend': trend(change),
        }
    return result


def comparison(from_date, to_date, label):
    """Current window against the previous month, quarter and year"""
    current = _metrics(from_date, to_date)
    payload = {
        'period': period_payload(from_date, to_date, label),
        'current': {metric: money(value) for metric, value in current.items()},
    }
    for key, months in (('mom', 1), ('qoq', 3), ('yoy', 12)):
        prev_from, prev_to = previous_window(from_date, to_date, months)
        payload[key] = _compare(current, _metrics(prev_from, prev_to), prev_from, prev_to)
    return payload


def trends(months=12, reference=None):
    """Collected revenue, spend and profit for the last `months` months"""
    end_month = month_start(reference or today())
    first = shift_months(end_month, -(months - 1))
    rows = []
    for first_day in iter_months(first, end_month):
        revenue, expenses, profit = period_totals(first_day, month_end(first_day))
        rows.append({
            'month': first_day.strftime('%b %Y'),
            'month_key': first_day.strftime('%Y-%m'),
            'revenue': money(revenue),
            'expenses': money(expenses),
            'profit': money(profit),
        })
    return {'months': rows}
