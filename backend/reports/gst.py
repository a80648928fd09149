"""
GST registers and summaries.

Place of supply decides the split: when the client's state matches the
company state (or either is missing) the tax is intra-state and split into
equal CGST and SGST halves, otherwise it is IGST.
"""
from collections import OrderedDict
from decimal import Decimal

from backend.core.models import CompanyProfile
from backend.core.utils import quantize
from .financial import ZERO, issued_invoices, money, paid_expenses
from .periods import period_payload

HEADS = ('cgst', 'sgst', 'igst')


def company_state():
    profile = CompanyProfile.objects.first()
    return profile.state.strip() if profile and profile.state else ''


def company_state_code():
    profile = CompanyProfile.objects.first()
    return profile.tax_id.strip()[:2] if profile and profile.tax_id else ''


def is_intra_state(client_state, home_state):
    if not client_state or not home_state:
        return True
    return client_state.strip().lower() == home_state.strip().lower()


def split_tax(tax_amount, intra_state):
    """Split a tax amount into CGST/SGST halves or a single IGST figure"""
    tax_amount = Decimal(tax_amount or ZERO)
    if intra_state:
        cgst = quantize(tax_amount / 2)
        return {'cgst': cgst, 'sgst': tax_amount - cgst, 'igst': ZERO}
    return {'cgst': ZERO, 'sgst': ZERO, 'igst': tax_amount}


def _zero_heads():
    return {head: ZERO for head in HEADS}


def _period_invoices(from_date, to_date):
    return issued_invoices().filter(
        issue_date__gte=from_date, issue_date__lte=to_date
    ).select_related('client').order_by('issue_date', 'invoice_number')


def sales_rows(from_date, to_date):
    home = company_state()
    rows = []
    for invoice in _period_invoices(from_date, to_date):
        intra = is_intra_state(invoice.client.state, home)
        rows.append({
            'invoice': invoice,
            'intra_state': intra,
            'taxable': invoice.subtotal,
            'tax': invoice.tax_amount,
            **split_tax(invoice.tax_amount, intra),
        })
    return rows


def _outward_totals(rows):
    totals = {'taxable_value': ZERO, **_zero_heads()}
    for row in rows:
        totals['taxable_value'] += row['taxable']
        for head in HEADS:
            totals[head] += row[head]
    return totals


def sales_register(from_date, to_date, label):
    rows = sales_rows(from_date, to_date)
    invoices = []
    for row in rows:
        invoice = row['invoice']
        invoices.append({
            'invoice_id': invoice.id,
            'invoice_number': invoice.invoice_number,
            'date': invoice.issue_date.isoformat(),
            'client': invoice.client.name,
            'gstin': invoice.client.gstin,
            'place_of_supply': invoice.client.state,
            'type': 'B2B' if invoice.client.gstin else 'B2C',
            'supply_type': 'Intra-State' if row['intra_state'] else 'Inter-State',
            'tax_rate': float(invoice.tax_rate),
            'taxable': money(row['taxable']),
            'cgst': money(row['cgst']),
            'sgst': money(row['sgst']),
            'igst': money(row['igst']),
            'total_tax': money(row['tax']),
            'total': money(invoice.total_amount),
        })

    totals = _outward_totals(rows)
    return {
        'period': period_payload(from_date, to_date, label),
        'invoices': invoices,
        'summary': {
            'invoice_count': len(invoices),
            'b2b_count': sum(1 for i in invoices if i['type'] == 'B2B'),
            'b2c_count': sum(1 for i in invoices if i['type'] == 'B2C'),
            'total_taxable': money(totals['taxable_value']),
            'total_cgst': money(totals['cgst']),
            'total_sgst': money(totals['sgst']),
            'total_igst': money(totals['igst']),
            'total_tax': money(totals['cgst'] + totals['sgst'] + totals['igst']),
            'total_value': money(sum((row['invoice'].total_amount for row in rows), ZERO)),
        },
    }


def purchase_rows(from_date, to_date):
    home_code = company_state_code()
    rows = []
    expenses = paid_expenses(from_date, to_date).filter(tax_amount__gt=ZERO).select_related('vendor', 'category')
    for expense in expenses.order_by('expense_date', 'id'):
        gstin = expense.vendor.gstin if expense.vendor else ''
        # the first two GSTIN digits are the state code
        intra = not gstin or not home_code or gstin[:2] == home_code
        rows.append({
            'expense': expense,
            'gstin': gstin,
            'itc_eligible': bool(gstin) and expense.tax_amount > 0,
            **split_tax(expense.tax_amount, intra),
        })
    return rows


def purchase_register(from_date, to_date, label):
    rows = purchase_rows(from_date, to_date)
    purchases = []
    for row in rows:
        expense = row['expense']
        purchases.append({
            'expense_id': expense.id,
            'voucher_no': f"EXP-{expense.id:05d}",
            'date': expense.expense_date.isoformat(),
            'vendor': expense.vendor.name if expense.vendor else '',
            'gstin': row['gstin'],
            'description': expense.description,
            'category': expense.category.name,
            'taxable': money(expense.amount),
            'gst': money(expense.tax_amount),
            'total': money(expense.amount + expense.tax_amount),
            'itc_eligible': row['itc_eligible'],
        })

    eligible = [row for row in rows if row['itc_eligible']]
    return {
        'period': period_payload(from_date, to_date, label),
        'purchases': purchases,
        'summary': {
            'purchase_count': len(purchases),
            'itc_eligible_count': len(eligible),
            'total_taxable': money(sum((row['expense'].amount for row in rows), ZERO)),
            'total_gst': money(sum((row['expense'].tax_amount for row in rows), ZERO)),
            'total_itc': money(sum((row['expense'].tax_amount for row in eligible), ZERO)),
            'total_value': money(sum((row['expense'].amount + row['expense'].tax_amount for row in rows), ZERO)),
        },
    }


def _heads_payload(values, taxable=None):
    payload = {head: money(values[head]) for head in HEADS}
    payload['total'] = money(sum((values[head] for head in HEADS), ZERO))
    if taxable is not None:
        payload['taxable_value'] = money(taxable)
    return payload


def gstr3b_summary(from_date, to_date, label):
    """Outward liability, eligible input credit and what is left to pay per head"""
    outward = _outward_totals(sales_rows(from_date, to_date))

    itc = _zero_heads()
    eligible_taxable = ZERO
    for row in purchase_rows(from_date, to_date):
        if not row['itc_eligible']:
            continue
        eligible_taxable += row['expense'].amount
        for head in HEADS:
            itc[head] += row[head]

    utilized = {head: min(itc[head], outward[head]) for head in HEADS}
    payable = {head: outward[head] - utilized[head] for head in HEADS}

    return {
        'period': period_payload(from_date, to_date, label),
        'outward_supplies': _heads_payload(outward, outward['taxable_value']),
        'input_tax_credit': _heads_payload(itc, eligible_taxable),
        'itc_utilization': _heads_payload(utilized),
        'net_tax_payable': _heads_payload(payable),
    }


def hsn_summary(from_date, to_date, label):
    """
    Line items grouped by HSN/SAC code.

    Each line carries its invoice's tax in proportion to its share of the
    invoice subtotal.
    """
    home = company_state()
    groups = OrderedDict()
    invoices = _period_invoices(from_date, to_date).prefetch_related('line_items')

    for invoice in invoices:
        intra = is_intra_state(invoice.client.state, home)
        for item in invoice.line_items.all():
            code = item.hsn_sac_code or 'N/A'
            group = groups.setdefault(code, {
                'hsn_code': code, 'description': item.description, 'quantity': ZERO,
                'taxable_value': ZERO, **_zero_heads(),
            })
            share = item.line_total / invoice.subtotal if invoice.subtotal else ZERO
            for head, value in split_tax(invoice.tax_amount * share, intra).items():
                group[head] += value
            group['quantity'] += item.quantity
            group['taxable_value'] += item.line_total

    codes = []
    for group in sorted(groups.values(), key=lambda g: g['hsn_code']):
        total_tax = group['cgst'] + group['sgst'] + group['igst']
        codes.append({
            'hsn_code': group['hsn_code'],
            'description': group['description'],
            'quantity': float(group['quantity']),
            'taxable_value': money(group['taxable_value']),
            'cgst': money(group['cgst']),
            'sgst': money(group['sgst']),
            'igst': money(group['igst']),
            'total_tax': money(total_tax),
        })

    return {
        'period': period_payload(from_date, to_date, label),
        'codes': codes,
        'summary': {
            'code_count': len(codes),
            'total_taxable': round(sum(c['taxable_value'] for c in codes), 2),
            'total_tax': round(sum(c['total_tax'] for c in codes), 2),
        },
    }


def rate_summary(from_date, to_date, label):
    groups = OrderedDict()
    for row in sales_rows(from_date, to_date):
        invoice = row['invoice']
        group = groups.setdefault(invoice.tax_rate, {
            'invoice_count': 0, 'taxable_value': ZERO, 'invoice_value': ZERO, **_zero_heads(),
        })
        group['invoice_count'] += 1
        group['taxable_value'] += row['taxable']
        group['invoice_value'] += invoice.total_amount
        for head in HEADS:
            group[head] += row[head]

    rates = []
    for rate in sorted(groups):
        group = groups[rate]
        rates.append({
            'rate': float(rate),
            'invoice_count': group['invoice_count'],
            'taxable_value': money(group['taxable_value']),
            'cgst': money(group['cgst']),
            'sgst': money(group['sgst']),
            'igst': money(group['igst']),
            'total_tax': money(group['cgst'] + group['sgst'] + group['igst']),
            'invoice_value': money(group['invoice_value']),
        })

    return {
        'period': period_payload(from_date, to_date, label),
        'rates': rates,
        'summary': {
            'invoice_count': sum(r['invoice_count'] for r in rates),
            'total_taxable': round(sum(r['taxable_value'] for r in rates), 2),
            'total_tax': round(sum(r['total_tax'] for r in rates), 2),
            'total_value': round(sum(r['invoice_value'] for r in rates), 2),
        },
    }
