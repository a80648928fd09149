"""Report names, how to compute each one and how to lay it out for export"""
from collections import OrderedDict, namedtuple

from . import financial, gst, tables
from .periods import resolve_period

# uses_period: the report covers a window; otherwise it is "as of today"
Report = namedtuple('Report', ['compute', 'layout', 'uses_period'])

REPORTS = OrderedDict([
    ('revenue-by-client', Report(financial.revenue_by_client, tables.revenue_by_client, True)),
    ('invoice-aging', Report(financial.invoice_aging, tables.invoice_aging, False)),
    ('expenses-by-category', Report(financial.expenses_by_category, tables.expenses_by_category, True)),
    ('profit-by-client', Report(financial.profit_by_client, tables.profit_by_client, True)),
    ('profit-loss', Report(financial.profit_loss, tables.profit_loss, True)),
    ('balance-sheet', Report(financial.balance_sheet, tables.balance_sheet, False)),
    ('cash-flow', Report(financial.cash_flow, tables.cash_flow, True)),
    ('general-ledger', Report(financial.general_ledger, tables.general_ledger, True)),
    ('trial-balance', Report(financial.trial_balance, tables.trial_balance, True)),
    ('fixed-asset-register', Report(financial.fixed_asset_register, tables.fixed_asset_register, False)),
    ('gst/sales-register', Report(gst.sales_register, tables.gst_sales_register, True)),
    ('gst/purchase-register', Report(gst.purchase_register, tables.gst_purchase_register, True)),
    ('gst/gstr3b-summary', Report(gst.gstr3b_summary, tables.gstr3b_summary, True)),
    ('gst/hsn-summary', Report(gst.hsn_summary, tables.hsn_summary, True)),
    ('gst/rate-summary', Report(gst.rate_summary, tables.gst_rate_summary, True)),
    ('comparison', Report(financial.comparison, None, True)),
    ('trends', Report(financial.trends, None, False)),
])


def exportable(name):
    report = REPORTS.get(name)
    return report is not None and report.layout is not None


def run_report(name, query_params):
    """Compute a report; raises PeriodError for a bad period or date range"""
    report = REPORTS[name]
    if report.uses_period:
        return report.compute(*resolve_period(query_params))
    return report.compute()
