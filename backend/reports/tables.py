"""
Tabular layouts of each report for the Excel and PDF exporters.

A layout is a dict with a title, column definitions (header, key, kind,
width), the data rows and summary pairs. `kind` is 'text', 'money' or
'number'; only money columns get the currency format.
"""

TEXT = 'text'
MONEY = 'money'
NUMBER = 'number'


def col(header, key, kind=TEXT, width=15):
    return {'header': header, 'key': key, 'kind': kind, 'width': width}


def _particulars(pairs):
    return [{'particulars': label, 'amount': amount} for label, amount in pairs]


PARTICULARS_COLUMNS = [col('Particulars', 'particulars', width=40), col('Amount', 'amount', MONEY, 20)]


def revenue_by_client(data):
    summary = data['summary']
    return {
        'title': 'Revenue by Client',
        'columns': [
            col('Client', 'client_name', width=30),
            col('Invoices', 'invoice_count', NUMBER, 10),
            col('Total Invoiced', 'total_invoiced', MONEY, 18),
            col('Total Paid', 'total_paid', MONEY, 18),
            col('Outstanding', 'total_outstanding', MONEY, 18),
        ],
        'rows': data['clients'],
        'summary': [
            ('Total Invoiced', summary['total_invoiced']),
            ('Total Paid', summary['total_paid']),
            ('Total Outstanding', summary['total_outstanding']),
        ],
    }


def invoice_aging(data):
    rows = []
    for bucket in data['buckets']:
        for invoice in bucket['invoices']:
            rows.append({**invoice, 'bucket': bucket['label']})
    return {
        'title': 'Invoice Aging',
        'subtitle': f"As of {data['as_of']}",
        'columns': [
            col('Invoice No', 'invoice_number'),
            col('Client', 'client_name', width=25),
            col('Due Date', 'due_date', width=12),
            col('Days Overdue', 'days_overdue', NUMBER, 12),
            col('Bucket', 'bucket', width=12),
            col('Amount Due', 'amount', MONEY, 18),
        ],
        'rows': rows,
        'summary': [(bucket['label'], bucket['amount']) for bucket in data['buckets']] + [
            ('Total Outstanding', data['summary']['total_outstanding']),
        ],
    }


def expenses_by_category(data):
    return {
        'title': 'Expenses by Category',
        'columns': [
            col('Category', 'category_name', width=30),
            col('Group', 'group', width=20),
            col('Count', 'count', NUMBER, 10),
            col('Amount', 'total_amount', MONEY, 18),
            col('Share %', 'percentage', NUMBER, 10),
        ],
        'rows': data['categories'],
        'summary': [('Total Expenses', data['summary']['total_expenses'])],
    }


def profit_by_client(data):
    summary = data['summary']
    return {
        'title': 'Profit by Client',
        'columns': [
            col('Client', 'client_name', width=30),
            col('Revenue', 'revenue', MONEY, 18),
            col('Allocated Expenses', 'expenses', MONEY, 18),
            col('Profit', 'profit', MONEY, 18),
            col('Margin %', 'margin', NUMBER, 10),
        ],
        'rows': data['clients'],
        'summary': [
            ('Total Revenue', summary['total_revenue']),
            ('Total Expenses', summary['total_expenses']),
            ('Total Profit', summary['total_profit']),
        ],
    }


def profit_loss(data):
    revenue, expenses = data['revenue'], data['expenses']
    return {
        'title': 'Profit & Loss Statement',
        'columns': PARTICULARS_COLUMNS,
        'rows': _particulars([
            ('Revenue - Invoiced', revenue['invoiced']),
            ('Revenue - Collected', revenue['collected']),
            ('Operational Expenses', expenses['operational']),
            ('Salaries', expenses['salaries']),
            ('Vendor Payments', expenses['vendors']),
            ('Other Expenses', expenses['other']),
            ('Total Expenses', expenses['total']),
            ('Gross Profit', data['gross_profit']),
        ]),
        'summary': [
            ('Net Profit', data['net_profit']),
            ('Net Margin', f"{data['margin']}%"),
        ],
    }


def balance_sheet(data):
    assets, liabilities = data['assets'], data['liabilities']
    return {
        'title': 'Balance Sheet',
        'subtitle': f"As of {data['as_of']}",
        'columns': PARTICULARS_COLUMNS,
        'rows': _particulars([
            ('Cash & Bank', assets['current']['cash']),
            ('Accounts Receivable', assets['current']['accounts_receivable']),
            ('Fixed Assets', assets['fixed']),
            ('Total Assets', assets['total']),
            ('Accounts Payable', liabilities['current']['accounts_payable']),
            ('Pending Salaries', liabilities['current']['pending_salaries']),
            ('Total Liabilities', liabilities['total']),
            ('Retained Earnings', data['equity']['retained_earnings']),
        ]),
        'summary': [('Total Liabilities & Equity', data['total_liabilities_and_equity'])],
    }


def cash_flow(data):
    rows = [
        {
            'period': month['month'],
            'opening_balance': month['opening_balance'],
            'total_inflows': month['total_inflows'],
            'total_outflows': month['total_outflows'],
            'net_cash_flow': month['net_cash_flow'],
            'closing_balance': month['closing_balance'],
        }
        for month in data['months']
    ]
    summary = data['summary']
    return {
        'title': 'Cash Flow Statement',
        'columns': [
            col('Period', 'period', width=12),
            col('Opening', 'opening_balance', MONEY, 16),
            col('Inflows', 'total_inflows', MONEY, 16),
            col('Outflows', 'total_outflows', MONEY, 16),
            col('Net Flow', 'net_cash_flow', MONEY, 16),
            col('Closing', 'closing_balance', MONEY, 16),
        ],
        'rows': rows,
        'summary': [
            ('Total Inflows', summary['total_inflows']),
            ('Total Outflows', summary['total_outflows']),
            ('Net Cash Flow', summary['net_cash_flow']),
            ('Closing Balance', summary['closing_balance']),
        ],
    }


def general_ledger(data):
    summary = data['summary']
    return {
        'title': 'General Ledger',
        'columns': [
            col('Date', 'date', width=12),
            col('Voucher No', 'voucher_no', width=12),
            col('Particulars', 'particulars', width=35),
            col('Account Head', 'account_head', width=20),
            col('Debit', 'debit', MONEY, 14),
            col('Credit', 'credit', MONEY, 14),
            col('Balance', 'balance', MONEY, 14),
        ],
        'rows': data['entries'],
        'summary': [
            ('Total Debit', summary['total_debit']),
            ('Total Credit', summary['total_credit']),
            ('Closing Balance', summary['closing_balance']),
        ],
    }


def trial_balance(data):
    summary = data['summary']
    return {
        'title': 'Trial Balance',
        'columns': [
            col('Account', 'account_name', width=30),
            col('Type', 'account_type', width=12),
            col('Debit', 'debit', MONEY, 18),
            col('Credit', 'credit', MONEY, 18),
        ],
        'rows': data['accounts'],
        'summary': [
            ('Total Debit', summary['total_debit']),
            ('Total Credit', summary['total_credit']),
            ('Balanced', 'Yes' if summary['is_balanced'] else 'No'),
        ],
    }


def fixed_asset_register(data):
    summary = data['summary']
    return {
        'title': 'Fixed Asset Register',
        'subtitle': f"As of {data['as_of']}",
        'columns': [
            col('Asset', 'name', width=25),
            col('Category', 'category', width=15),
            col('Purchase Date', 'purchase_date', width=12),
            col('Method', 'depreciation_method', width=8),
            col('Purchase Value', 'purchase_value', MONEY, 15),
            col('Depreciation', 'accumulated_depreciation', MONEY, 15),
            col('Current Value', 'current_value', MONEY, 15),
            col('Years', 'years_owned', NUMBER, 8),
            col('Status', 'status', width=10),
        ],
        'rows': data['assets'],
        'summary': [
            ('Total Purchase Value', summary['total_purchase_value']),
            ('Total Depreciation', summary['total_depreciation']),
            ('Total Current Value', summary['total_current_value']),
        ],
    }


def gst_sales_register(data):
    summary = data['summary']
    return {
        'title': 'GSTR-1 Sales Register',
        'columns': [
            col('Invoice No', 'invoice_number'),
            col('Date', 'date', width=12),
            col('Client', 'client', width=25),
            col('GSTIN', 'gstin', width=18),
            col('Type', 'type', width=8),
            col('Taxable Value', 'taxable', MONEY, 15),
            col('CGST', 'cgst', MONEY, 12),
            col('SGST', 'sgst', MONEY, 12),
            col('IGST', 'igst', MONEY, 12),
            col('Total', 'total', MONEY, 15),
        ],
        'rows': data['invoices'],
        'summary': [
            ('Total Taxable', summary['total_taxable']),
            ('Total Tax', summary['total_tax']),
            ('Total Invoice Value', summary['total_value']),
        ],
    }


def gst_purchase_register(data):
    summary = data['summary']
    rows = [{**row, 'itc': 'Yes' if row['itc_eligible'] else 'No'} for row in data['purchases']]
    return {
        'title': 'Purchase Register (ITC)',
        'columns': [
            col('Voucher No', 'voucher_no'),
            col('Date', 'date', width=12),
            col('Vendor', 'vendor', width=25),
            col('GSTIN', 'gstin', width=18),
            col('Description', 'description', width=25),
            col('Taxable', 'taxable', MONEY, 12),
            col('GST', 'gst', MONEY, 12),
            col('Total', 'total', MONEY, 12),
            col('ITC', 'itc', width=8),
        ],
        'rows': rows,
        'summary': [
            ('Total GST', summary['total_gst']),
            ('Eligible ITC', summary['total_itc']),
        ],
    }


def gstr3b_summary(data):
    def line(label, values):
        return {
            'particulars': label,
            'taxable_value': values.get('taxable_value', ''),
            'cgst': values['cgst'],
            'sgst': values['sgst'],
            'igst': values['igst'],
            'total': values['total'],
        }

    return {
        'title': 'GSTR-3B Monthly Summary',
        'columns': [
            col('Particulars', 'particulars', width=40),
            col('Taxable Value', 'taxable_value', MONEY, 18),
            col('CGST', 'cgst', MONEY, 15),
            col('SGST', 'sgst', MONEY, 15),
            col('IGST', 'igst', MONEY, 15),
            col('Total', 'total', MONEY, 18),
        ],
        'rows': [
            line('3.1(a) Outward taxable supplies', data['outward_supplies']),
            line('4(A) Input tax credit available', data['input_tax_credit']),
            line('ITC utilized', data['itc_utilization']),
            line('Net tax payable', data['net_tax_payable']),
        ],
        'summary': [('Net Tax Payable', data['net_tax_payable']['total'])],
    }


def hsn_summary(data):
    return {
        'title': 'HSN/SAC Summary',
        'columns': [
            col('SAC Code', 'hsn_code', width=12),
            col('Description', 'description', width=35),
            col('Quantity', 'quantity', NUMBER, 10),
            col('Taxable Value', 'taxable_value', MONEY, 18),
            col('CGST', 'cgst', MONEY, 12),
            col('SGST', 'sgst', MONEY, 12),
            col('IGST', 'igst', MONEY, 12),
            col('Total Tax', 'total_tax', MONEY, 15),
        ],
        'rows': data['codes'],
        'summary': [
            ('Total Taxable', data['summary']['total_taxable']),
            ('Total Tax', data['summary']['total_tax']),
        ],
    }


def gst_rate_summary(data):
    rows = [{**row, 'rate_label': f"{row['rate']:g}%"} for row in data['rates']]
    return {
        'title': 'GST Rate-wise Summary',
        'columns': [
            col('GST Rate', 'rate_label', width=12),
            col('Invoices', 'invoice_count', NUMBER, 10),
            col('Taxable Value', 'taxable_value', MONEY, 18),
            col('CGST', 'cgst', MONEY, 12),
            col('SGST', 'sgst', MONEY, 12),
            col('IGST', 'igst', MONEY, 12),
            col('Total Tax', 'total_tax', MONEY, 15),
            col('Invoice Value', 'invoice_value', MONEY, 18),
        ],
        'rows': rows,
        'summary': [
            ('Total Tax', data['summary']['total_tax']),
            ('Total Invoice Value', data['summary']['total_value']),
        ],
    }
