"""
Comprehensive test suite for Reports module
Tests: Period resolution, Revenue, Aging, P&L, Balance Sheet, Cash Flow, Ledger, Trial Balance,
GST registers and summaries, Comparison, Trends, Excel/PDF export
"""
from datetime import date
from decimal import Decimal
from io import BytesIO

from django.test import TestCase
from openpyxl import load_workbook
from rest_framework import status

from backend.core.models import AuditLog
from backend.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from backend.reports.financial import aging_bucket, change_percent, trend
from backend.reports.periods import PeriodError, named_period, previous_window, resolve_period, shift_months

MARCH_2024 = '?from_date=2024-03-01&to_date=2024-03-31'


class PeriodTests(TestCase):
    """Test named periods and explicit date ranges"""

    def test_named_quarters(self):
        """Test calendar quarter boundaries"""
        reference = date(2024, 5, 15)
        start, end, label = named_period('this-quarter', reference)
        self.assertEqual((start, end), (date(2024, 4, 1), date(2024, 6, 30)))
        self.assertEqual(label, 'Q2 2024')
        start, end, _ = named_period('last-quarter', reference)
        self.assertEqual((start, end), (date(2024, 1, 1), date(2024, 3, 31)))

    def test_last_month_across_year(self):
        """Test last month from January is December of the previous year"""
        start, end, _ = named_period('last-month', date(2024, 1, 10))
        self.assertEqual((start, end), (date(2023, 12, 1), date(2023, 12, 31)))

    def test_shift_months_clamps_day(self):
        """Test month shifting clamps to the shorter month"""
        self.assertEqual(shift_months(date(2024, 3, 31), -1), date(2024, 2, 29))
        self.assertEqual(shift_months(date(2024, 1, 31), 13), date(2025, 2, 28))

    def test_previous_window_keeps_month_end(self):
        """Test the previous window of a full month is the full previous month"""
        self.assertEqual(
            previous_window(date(2024, 3, 1), date(2024, 3, 31), 1),
            (date(2024, 2, 1), date(2024, 2, 29))
        )
        self.assertEqual(
            previous_window(date(2024, 3, 1), date(2024, 3, 31), 12),
            (date(2023, 3, 1), date(2023, 3, 31))
        )

    def test_explicit_range(self):
        """Test explicit from/to dates win over period"""
        start, end, _ = resolve_period({'from_date': '2024-01-01', 'to_date': '2024-01-31', 'period': 'this-year'})
        self.assertEqual((start, end), (date(2024, 1, 1), date(2024, 1, 31)))

    def test_invalid_inputs(self):
        """Test bad periods and ranges raise PeriodError"""
        with self.assertRaises(PeriodError):
            resolve_period({'period': 'fortnight'})
        with self.assertRaises(PeriodError):
            resolve_period({'from_date': '2024-02-01', 'to_date': '2024-01-01'})
        with self.assertRaises(PeriodError):
            resolve_period({'from_date': '01/02/2024'})


class ReportHelperTests(TestCase):
    """Test change percentages, trends and aging buckets"""

    def test_change_percent(self):
        self.assertEqual(change_percent(0, 0), 0.0)
        self.assertEqual(change_percent(50, 0), 100.0)
        self.assertEqual(change_percent(150, 100), 50.0)
        self.assertEqual(change_percent(50, 100), -50.0)

    def test_trend(self):
        self.assertEqual(trend(12.5), 'up')
        self.assertEqual(trend(-3), 'down')
        self.assertEqual(trend(0), 'neutral')

    def test_aging_buckets(self):
        self.assertEqual(aging_bucket(0), 'Current')
        self.assertEqual(aging_bucket(1), '1-30 days')
        self.assertEqual(aging_bucket(30), '1-30 days')
        self.assertEqual(aging_bucket(31), '31-60 days')
        self.assertEqual(aging_bucket(90), '61-90 days')
        self.assertEqual(aging_bucket(91), '90+ days')


class ReportsTests(TestCase):
    """Test report endpoints against a month of agency activity"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)

        TestDataFactory.create_company_profile(company_name='Acme Digital', state='Karnataka',
                                               tax_id='29ABCDE1234F1Z5')
        self.local_client = TestDataFactory.create_client(name='Local Co', state='Karnataka',
                                                          gstin='29AAAAA0000A1Z5')
        self.remote_client = TestDataFactory.create_client(name='Remote Co', state='Maharashtra')

        # 1000 + 18% GST each
        self.local_invoice = TestDataFactory.create_invoice(
            client=self.local_client, issue_date=date(2024, 3, 5), due_date=date(2024, 3, 20)
        )
        self.remote_invoice = TestDataFactory.create_invoice(
            client=self.remote_client, issue_date=date(2024, 3, 10), due_date=date(2024, 3, 10),
            items=[{'description': 'Ad management', 'hsn_sac_code': '998365',
                    'quantity': Decimal('2.00'), 'unit_price': Decimal('500.00')}]
        )
        TestDataFactory.create_invoice(client=self.remote_client, issue_date=date(2024, 3, 12), status='DRAFT')
        TestDataFactory.create_payment(self.local_invoice, '1180.00', payment_date=date(2024, 3, 15))
        TestDataFactory.create_payment(self.remote_invoice, '500.00', payment_date=date(2024, 3, 25))

        self.category = TestDataFactory.create_expense_category(code='SOFT', name='Software')
        self.vendor = TestDataFactory.create_vendor(name='Cloud Vendor', gstin='29BBBBB1111B1Z5')
        TestDataFactory.create_expense(amount='300.00', category=self.category, expense_date=date(2024, 3, 8))
        TestDataFactory.create_expense(amount='200.00', tax_amount='36.00', category=self.category,
                                       vendor=self.vendor, expense_date=date(2024, 3, 9))
        TestDataFactory.create_expense(amount='150.00', category=self.category, status='DUE',
                                       expense_date=date(2024, 3, 10))
        TestDataFactory.create_salary(month='2024-03', amount='1000.00', payment_date=date(2024, 3, 31))

    def test_requires_authentication(self):
        """Test reports reject anonymous callers"""
        self.client.logout()
        response = self.client.get(f'/api/v1/reports/profit-loss/{MARCH_2024}')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_invalid_period(self):
        """Test an unknown period is a bad request"""
        response = self.client.get('/api/v1/reports/profit-loss/?period=fortnight')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('error', response.data)

    def test_default_period(self):
        """Test reports default to this month"""
        response = self.client.get('/api/v1/reports/revenue-by-client/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['summary']['client_count'], 0)

    def test_revenue_by_client(self):
        """Test revenue totals per client skip draft invoices"""
        response = self.client.get(f'/api/v1/reports/revenue-by-client/{MARCH_2024}')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data['clients']), 2)
        summary = response.data['summary']
        self.assertEqual(summary['total_invoiced'], 2360.0)
        self.assertEqual(summary['total_paid'], 1680.0)
        self.assertEqual(summary['total_outstanding'], 680.0)

    def test_invoice_aging(self):
        """Test unpaid invoices land in the oldest bucket"""
        response = self.client.get('/api/v1/reports/invoice-aging/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        buckets = {b['label']: b for b in response.data['buckets']}
        self.assertEqual(list(buckets), ['Current', '1-30 days', '31-60 days', '61-90 days', '90+ days'])
        self.assertEqual(buckets['90+ days']['count'], 1)
        self.assertEqual(buckets['90+ days']['invoices'][0]['invoice_number'], self.remote_invoice.invoice_number)
        self.assertEqual(response.data['summary']['total_outstanding'], 680.0)

    def test_expenses_by_category(self):
        """Test only paid expenses are counted"""
        response = self.client.get(f'/api/v1/reports/expenses-by-category/{MARCH_2024}')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        category = response.data['categories'][0]
        self.assertEqual(category['total_amount'], 500.0)
        self.assertEqual(category['count'], 2)
        self.assertEqual(category['percentage'], 100.0)

    def test_profit_by_client(self):
        """Test spend is allocated by revenue share"""
        response = self.client.get(f'/api/v1/reports/profit-by-client/{MARCH_2024}')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        rows = {row['client_name']: row for row in response.data['clients']}
        self.assertEqual(rows['Local Co']['revenue'], 1180.0)
        self.assertEqual(rows['Local Co']['expenses'], 1053.57)
        self.assertEqual(response.data['summary']['total_profit'], 180.0)

    def test_profit_loss(self):
        """Test P&L revenue, expense heads and margin"""
        response = self.client.get(f'/api/v1/reports/profit-loss/{MARCH_2024}')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        data = response.data
        self.assertEqual(data['revenue'], {'invoiced': 2360.0, 'collected': 1680.0})
        self.assertEqual(data['expenses']['operational'], 300.0)
        self.assertEqual(data['expenses']['vendors'], 200.0)
        self.assertEqual(data['expenses']['salaries'], 1000.0)
        self.assertEqual(data['expenses']['total'], 1500.0)
        self.assertEqual(data['gross_profit'], 1480.0)
        self.assertEqual(data['net_profit'], 180.0)
        self.assertEqual(data['margin'], 10.71)

    def test_balance_sheet(self):
        """Test assets, liabilities and retained earnings"""
        response = self.client.get('/api/v1/reports/balance-sheet/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        data = response.data
        self.assertEqual(data['assets']['current']['cash'], 180.0)
        self.assertEqual(data['assets']['current']['accounts_receivable'], 680.0)
        self.assertEqual(data['liabilities']['current']['accounts_payable'], 150.0)
        self.assertEqual(data['equity']['retained_earnings'], 710.0)

    def test_cash_flow(self):
        """Test monthly inflows, outflows and running balance"""
        response = self.client.get(f'/api/v1/reports/cash-flow/{MARCH_2024}')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data['months']), 1)
        month = response.data['months'][0]
        self.assertEqual(month['opening_balance'], 0.0)
        self.assertEqual(month['inflows']['collections'], 1680.0)
        self.assertEqual(month['outflows'], {'expenses': 300.0, 'salaries': 1000.0, 'vendors': 200.0})
        self.assertEqual(month['net_cash_flow'], 180.0)
        self.assertEqual(month['closing_balance'], 180.0)

    def test_cash_flow_opening_balance(self):
        """Test the opening balance carries earlier activity"""
        response = self.client.get('/api/v1/reports/cash-flow/?from_date=2024-04-01&to_date=2024-05-31')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        months = response.data['months']
        self.assertEqual(len(months), 2)
        self.assertEqual(months[0]['opening_balance'], 180.0)
        self.assertEqual(months[1]['closing_balance'], 180.0)

    def test_general_ledger(self):
        """Test ledger entries are chronological with a running balance"""
        response = self.client.get(f'/api/v1/reports/general-ledger/{MARCH_2024}')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        entries = response.data['entries']
        self.assertEqual(len(entries), 5)
        self.assertEqual([e['date'] for e in entries], sorted(e['date'] for e in entries))
        self.assertEqual(entries[-1]['account_head'], 'Salaries')
        self.assertTrue(entries[-1]['voucher_no'].startswith('SAL-'))
        summary = response.data['summary']
        self.assertEqual(summary['total_debit'], 1500.0)
        self.assertEqual(summary['total_credit'], 1680.0)
        self.assertEqual(summary['closing_balance'], 180.0)

    def test_trial_balance(self):
        """Test the trial balance always balances"""
        response = self.client.get(f'/api/v1/reports/trial-balance/{MARCH_2024}')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        accounts = {a['account_name']: a for a in response.data['accounts']}
        self.assertEqual(accounts['Sales']['credit'], 2360.0)
        self.assertEqual(accounts['Accounts Receivable']['debit'], 680.0)
        self.assertEqual(accounts['Software']['debit'], 500.0)
        self.assertEqual(accounts['Accounts Payable']['credit'], 150.0)
        self.assertTrue(response.data['summary']['is_balanced'])
        self.assertEqual(response.data['summary']['total_debit'], response.data['summary']['total_credit'])

    def test_fixed_asset_register(self):
        """Test depreciation is capped at the depreciable amount"""
        TestDataFactory.create_fixed_asset(purchase_value='100000.00', purchase_date=date(2018, 1, 1),
                                           useful_life_years=5)
        response = self.client.get('/api/v1/reports/fixed-asset-register/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        asset = response.data['assets'][0]
        self.assertEqual(asset['accumulated_depreciation'], 100000.0)
        self.assertEqual(asset['current_value'], 0.0)
        summary = response.data['summary']
        self.assertEqual(summary['total_assets'], 1)
        self.assertEqual(summary['active_assets'], 1)
        self.assertEqual(summary['by_category'][0]['category'], 'Computers')

    def test_gst_sales_register(self):
        """Test intra-state invoices split CGST/SGST and inter-state use IGST"""
        response = self.client.get(f'/api/v1/reports/gst/sales-register/{MARCH_2024}')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        rows = {row['client']: row for row in response.data['invoices']}
        self.assertEqual(len(rows), 2)
        self.assertEqual((rows['Local Co']['cgst'], rows['Local Co']['sgst'], rows['Local Co']['igst']),
                         (90.0, 90.0, 0.0))
        self.assertEqual(rows['Local Co']['type'], 'B2B')
        self.assertEqual(rows['Remote Co']['igst'], 180.0)
        self.assertEqual(rows['Remote Co']['type'], 'B2C')
        self.assertEqual(response.data['summary']['total_tax'], 360.0)

    def test_gst_purchase_register(self):
        """Test ITC eligibility needs a vendor GSTIN and tax"""
        response = self.client.get(f'/api/v1/reports/gst/purchase-register/{MARCH_2024}')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data['purchases']), 1)
        self.assertTrue(response.data['purchases'][0]['itc_eligible'])
        self.assertEqual(response.data['summary']['total_itc'], 36.0)

    def test_gstr3b_summary(self):
        """Test ITC utilization and net payable per head"""
        response = self.client.get(f'/api/v1/reports/gst/gstr3b-summary/{MARCH_2024}')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        data = response.data
        self.assertEqual(data['outward_supplies']['igst'], 180.0)
        self.assertEqual(data['input_tax_credit']['cgst'], 18.0)
        self.assertEqual(data['itc_utilization']['cgst'], 18.0)
        self.assertEqual(data['itc_utilization']['igst'], 0.0)
        self.assertEqual(data['net_tax_payable']['cgst'], 72.0)
        self.assertEqual(data['net_tax_payable']['igst'], 180.0)

    def test_hsn_summary(self):
        """Test line items are grouped by SAC code"""
        response = self.client.get(f'/api/v1/reports/gst/hsn-summary/{MARCH_2024}')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        codes = {c['hsn_code']: c for c in response.data['codes']}
        self.assertEqual(set(codes), {'998361', '998365'})
        self.assertEqual(codes['998365']['quantity'], 2.0)
        self.assertEqual(codes['998365']['igst'], 180.0)
        self.assertEqual(codes['998361']['cgst'], 90.0)

    def test_gst_rate_summary(self):
        """Test invoices grouped by tax rate"""
        response = self.client.get(f'/api/v1/reports/gst/rate-summary/{MARCH_2024}')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data['rates']), 1)
        self.assertEqual(response.data['rates'][0]['rate'], 18.0)
        self.assertEqual(response.data['rates'][0]['invoice_count'], 2)

    def test_comparison(self):
        """Test MoM change against an empty previous month"""
        response = self.client.get(f'/api/v1/reports/comparison/{MARCH_2024}')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['current']['revenue'], 1680.0)
        mom = response.data['mom']
        self.assertEqual(mom['from'], '2024-02-01')
        self.assertEqual(mom['revenue'], {'previous': 0.0, 'change': 100.0, 'trend': 'up'})
        self.assertIn('qoq', response.data)
        self.assertIn('yoy', response.data)

    def test_trends(self):
        """Test trends cover the last twelve months"""
        response = self.client.get('/api/v1/reports/trends/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data['months']), 12)

    def test_export_excel(self):
        """Test Excel export layout and audit trail"""
        response = self.client.get(f'/api/v1/reports/revenue-by-client/export/excel/{MARCH_2024}')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIn('attachment;', response['Content-Disposition'])
        self.assertIn('.xlsx', response['Content-Disposition'])

        ws = load_workbook(BytesIO(response.content)).active
        self.assertEqual(ws['A1'].value, 'Acme Digital')
        self.assertEqual(ws['A2'].value, 'Revenue by Client')
        self.assertEqual(ws['A5'].value, 'Client')
        self.assertTrue(ws['A5'].font.bold)
        self.assertEqual(ws['C6'].number_format, '"Rs. "#,##0.00')
        self.assertTrue(AuditLog.objects.filter(action='export', object_id='revenue-by-client').exists())

    def test_export_pdf(self):
        """Test PDF export for a GST report"""
        response = self.client.get(f'/api/v1/reports/gst/sales-register/export/pdf/{MARCH_2024}')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response['Content-Type'], 'application/pdf')
        self.assertTrue(response.content.startswith(b'%PDF'))
        self.assertIn('gst-sales-register', response['Content-Disposition'])

    def test_export_unknown_format(self):
        """Test an unsupported export format is a bad request"""
        response = self.client.get('/api/v1/reports/profit-loss/export/csv/')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_export_not_available(self):
        """Test comparison and unknown reports have no export"""
        response = self.client.get('/api/v1/reports/comparison/export/excel/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        response = self.client.get('/api/v1/reports/unknown-report/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
