"""
Comprehensive test suite for Billing module
Tests: Invoices, line item totals, payments, status transitions, upcoming and overdue invoices, Dashboard
"""
from datetime import timedelta
from decimal import Decimal
from io import StringIO

from django.core.cache import cache
from django.core.management import call_command
from django.test import TestCase
from rest_framework import status

from backend.billing.models import Invoice, Payment
from backend.billing.services import mark_overdue_invoices, upcoming_invoices
from backend.core.cache_utils import cache_dashboard_summary, get_cached_dashboard_summary
from backend.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from backend.core.utils import today


class InvoiceAPITests(TestCase):
    """Test Invoice API endpoints"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)
        self.record = TestDataFactory.create_client()

    def _payload(self, **overrides):
        data = {
            'client': self.record.id,
            'issue_date': '2024-04-01',
            'due_date': '2024-04-15',
            'line_items': [
                {'description': 'Social media management', 'hsn_sac_code': '998361',
                 'quantity': '2.00', 'unit_price': '500.00'},
                {'description': 'Ad creatives', 'quantity': '1.00', 'unit_price': '500.00'},
            ],
        }
        data.update(overrides)
        return data

    def test_create_invoice_computes_totals(self):
        """Test subtotal, tax and total are computed from the line items"""
        response = self.client.post('/api/v1/invoices/', self._payload(), format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['invoice_number'], 'INV-0001')
        self.assertEqual(response.data['status'], 'DRAFT')
        self.assertEqual(response.data['subtotal'], Decimal('1500.00'))
        self.assertEqual(response.data['tax_amount'], Decimal('270.00'))
        self.assertEqual(response.data['total_amount'], Decimal('1770.00'))
        self.assertEqual(response.data['balance_due'], Decimal('1770.00'))
        self.assertEqual(response.data['line_items'][0]['line_total'], Decimal('1000.00'))

    def test_invoice_numbers_are_sequential(self):
        self.client.post('/api/v1/invoices/', self._payload(), format='json')
        response = self.client.post('/api/v1/invoices/', self._payload(), format='json')
        self.assertEqual(response.data['invoice_number'], 'INV-0002')

    def test_explicit_tax_amount_overrides_rate(self):
        response = self.client.post('/api/v1/invoices/', self._payload(tax_amount='100.00'), format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['tax_amount'], Decimal('100.00'))
        self.assertEqual(response.data['total_amount'], Decimal('1600.00'))

    def test_create_invoice_requires_line_items(self):
        response = self.client.post('/api/v1/invoices/', self._payload(line_items=[]), format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('line_items', response.data)

    def test_due_date_before_issue_date(self):
        response = self.client.post('/api/v1/invoices/', self._payload(due_date='2024-03-01'), format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('due_date', response.data)

    def test_project_must_belong_to_client(self):
        other_project = TestDataFactory.create_project()
        response = self.client.post('/api/v1/invoices/', self._payload(project=other_project.id), format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('project', response.data)

    def test_duplicate_invoice_number(self):
        TestDataFactory.create_invoice(client=self.record)
        response = self.client.post('/api/v1/invoices/', self._payload(invoice_number='INV-0001'), format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('invoice_number', response.data)

    def test_update_line_items_recalculates(self):
        invoice = TestDataFactory.create_invoice(client=self.record)
        data = {'line_items': [{'description': 'Audit', 'quantity': '3.00', 'unit_price': '200.00'}]}
        response = self.client.patch(f'/api/v1/invoices/{invoice.id}/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['subtotal'], Decimal('600.00'))
        self.assertEqual(response.data['total_amount'], Decimal('708.00'))
        self.assertEqual(len(response.data['line_items']), 1)

    def test_update_tax_rate(self):
        invoice = TestDataFactory.create_invoice(client=self.record)
        response = self.client.patch(f'/api/v1/invoices/{invoice.id}/', {'tax_rate': '5.00'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['tax_amount'], Decimal('50.00'))
        self.assertEqual(response.data['total_amount'], Decimal('1050.00'))

    def test_update_keeps_manual_tax(self):
        """Test editing other fields leaves an overridden tax amount alone"""
        response = self.client.post('/api/v1/invoices/', self._payload(tax_amount='100.00'), format='json')
        invoice_id = response.data['id']
        response = self.client.patch(f'/api/v1/invoices/{invoice_id}/', {'notes': 'Net 15'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['tax_amount'], Decimal('100.00'))

    def test_filter_by_status_and_client(self):
        TestDataFactory.create_invoice(client=self.record, status='DRAFT')
        TestDataFactory.create_invoice(client=self.record, status='SENT')
        TestDataFactory.create_invoice(status='SENT')
        response = self.client.get(f'/api/v1/invoices/?client={self.record.id}&status=SENT')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data), 1)

    def test_status_change(self):
        invoice = TestDataFactory.create_invoice(client=self.record, status='DRAFT')
        response = self.client.post(f'/api/v1/invoices/{invoice.id}/status/', {'status': 'SENT'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['status'], 'SENT')

    def test_status_change_requires_status(self):
        invoice = TestDataFactory.create_invoice(client=self.record)
        response = self.client.post(f'/api/v1/invoices/{invoice.id}/status/', {}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_delete_invoice_removes_payments(self):
        invoice = TestDataFactory.create_invoice(client=self.record)
        TestDataFactory.create_payment(invoice, '100.00')
        response = self.client.delete(f'/api/v1/invoices/{invoice.id}/')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(Invoice.objects.filter(pk=invoice.pk).exists())
        self.assertFalse(Payment.objects.filter(invoice_id=invoice.pk).exists())


class PaymentTests(TestCase):
    """Test recording payments against invoices"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)
        self.invoice = TestDataFactory.create_invoice(due_date=today() + timedelta(days=10))

    def _pay(self, amount):
        data = {'amount': amount, 'payment_date': today().isoformat(), 'method': 'UPI'}
        return self.client.post(f'/api/v1/invoices/{self.invoice.id}/payments/', data, format='json')

    def test_partial_then_full_payment(self):
        response = self._pay('180.00')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.invoice.refresh_from_db()
        self.assertEqual(self.invoice.amount_paid, Decimal('180.00'))
        self.assertEqual(self.invoice.balance_due, Decimal('1000.00'))
        self.assertEqual(self.invoice.status, 'PARTIALLY_PAID')

        self._pay('1000.00')
        self.invoice.refresh_from_db()
        self.assertEqual(self.invoice.balance_due, Decimal('0.00'))
        self.assertEqual(self.invoice.status, 'PAID')

    def test_partial_payment_after_due_date(self):
        invoice = TestDataFactory.create_invoice(issue_date=today() - timedelta(days=40),
                                                 due_date=today() - timedelta(days=10))
        TestDataFactory.create_payment(invoice, '100.00')
        invoice.refresh_from_db()
        self.assertEqual(invoice.status, 'OVERDUE')

    def test_overpayment_marks_paid_with_negative_balance(self):
        response = self._pay('1500.00')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.invoice.refresh_from_db()
        self.assertEqual(self.invoice.amount_paid, Decimal('1500.00'))
        self.assertEqual(self.invoice.balance_due, Decimal('-320.00'))
        self.assertEqual(self.invoice.status, 'PAID')

    def test_payment_amount_must_be_positive(self):
        response = self._pay('0.00')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('amount', response.data)

    def test_list_payments(self):
        self._pay('100.00')
        self._pay('200.00')
        response = self.client.get(f'/api/v1/invoices/{self.invoice.id}/payments/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data), 2)
        self.assertEqual(response.data[0]['invoice_number'], self.invoice.invoice_number)


class UpcomingAndOverdueTests(TestCase):
    """Test upcoming invoice window and overdue marking"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)

    def test_upcoming_window(self):
        soon = TestDataFactory.create_invoice(due_date=today() + timedelta(days=10))
        TestDataFactory.create_invoice(due_date=today() + timedelta(days=40))
        paid = TestDataFactory.create_invoice(due_date=today() + timedelta(days=5))
        TestDataFactory.create_payment(paid, '1180.00')
        TestDataFactory.create_invoice(issue_date=today() - timedelta(days=20), due_date=today() - timedelta(days=1))

        self.assertEqual(list(upcoming_invoices()), [soon])
        response = self.client.get('/api/v1/invoices/upcoming/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([row['id'] for row in response.data], [soon.id])

    def test_mark_overdue(self):
        late = TestDataFactory.create_invoice(issue_date=today() - timedelta(days=30),
                                              due_date=today() - timedelta(days=1))
        draft = TestDataFactory.create_invoice(issue_date=today() - timedelta(days=30),
                                               due_date=today() - timedelta(days=1), status='DRAFT')
        current = TestDataFactory.create_invoice(due_date=today() + timedelta(days=1))

        self.assertEqual(mark_overdue_invoices(), 1)
        late.refresh_from_db()
        draft.refresh_from_db()
        current.refresh_from_db()
        self.assertEqual(late.status, 'OVERDUE')
        self.assertEqual(draft.status, 'DRAFT')
        self.assertEqual(current.status, 'SENT')

    def test_mark_overdue_command(self):
        TestDataFactory.create_invoice(issue_date=today() - timedelta(days=30),
                                       due_date=today() - timedelta(days=2))
        out = StringIO()
        call_command('mark_overdue_invoices', stdout=out)
        self.assertIn('1 invoice(s) marked overdue', out.getvalue())


class DashboardTests(TestCase):
    """Test dashboard summary and financial endpoints"""

    def setUp(self):
        cache.clear()
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)

    def tearDown(self):
        cache.clear()

    def test_summary_figures(self):
        invoice = TestDataFactory.create_invoice()
        TestDataFactory.create_payment(invoice, '180.00')
        TestDataFactory.create_invoice(issue_date=today() - timedelta(days=30), due_date=today() - timedelta(days=3))

        response = self.client.get('/api/v1/dashboard/summary/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['total_invoiced'], 2360.0)
        self.assertEqual(response.data['total_paid'], 180.0)
        self.assertEqual(response.data['total_outstanding'], 2180.0)
        self.assertEqual(response.data['this_month_collected'], 180.0)
        self.assertEqual(response.data['count_active_clients'], 2)
        self.assertEqual(response.data['count_overdue_invoices'], 1)

    def test_summary_is_cached(self):
        cache_dashboard_summary({'total_invoiced': 42.0})
        response = self.client.get('/api/v1/dashboard/summary/')
        self.assertEqual(response.data, {'total_invoiced': 42.0})

    def test_cache_dropped_on_billing_change(self):
        self.client.get('/api/v1/dashboard/summary/')
        self.assertIsNotNone(get_cached_dashboard_summary())

        TestDataFactory.create_invoice()
        self.assertIsNone(get_cached_dashboard_summary())
        response = self.client.get('/api/v1/dashboard/summary/')
        self.assertEqual(response.data['total_invoiced'], 1180.0)

    def test_financial_summary(self):
        invoice = TestDataFactory.create_invoice(issue_date=today())
        TestDataFactory.create_payment(invoice, '1180.00')
        vendor = TestDataFactory.create_vendor(name='Cloud Host')
        TestDataFactory.create_expense(amount='300.00', vendor=vendor)
        TestDataFactory.create_expense(amount='50.00', status='DUE')
        TestDataFactory.create_salary(amount='500.00')

        start = today().replace(day=1).isoformat()
        response = self.client.get(f'/api/v1/dashboard/financial/?from_date={start}&to_date={today().isoformat()}')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['total_income'], 1180.0)
        self.assertEqual(response.data['expense_total'], 300.0)
        self.assertEqual(response.data['salary_total'], 500.0)
        self.assertEqual(response.data['net_profit'], 380.0)
        self.assertEqual(response.data['top_vendors'][0]['vendor_name'], 'Cloud Host')

    def test_financial_bad_dates(self):
        response = self.client.get('/api/v1/dashboard/financial/?from_date=04/01/2024')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        response = self.client.get('/api/v1/dashboard/financial/?from_date=2024-04-10&to_date=2024-04-01')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
