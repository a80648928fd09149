"""
Comprehensive test suite for Expenses module
Tests: Vendors, Expense categories, default category seeding, Expenses, mark-paid flow
"""
from decimal import Decimal
from io import StringIO

from django.core.management import call_command
from django.test import TestCase
from rest_framework import status

from backend.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from backend.expenses.defaults import DEFAULT_EXPENSE_CATEGORIES
from backend.expenses.models import Expense, ExpenseCategory, Vendor
from backend.expenses.services import seed_default_categories


class VendorAPITests(TestCase):
    """Test Vendor API endpoints"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)

    def test_create_vendor(self):
        data = {'name': 'Canva', 'category': 'SOFTWARE', 'gstin': '29aaacc1234d1z5'}
        response = self.client.post('/api/v1/vendors/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['gstin'], '29AAACC1234D1Z5')
        self.assertEqual(response.data['status'], 'ACTIVE')

    def test_invalid_gstin(self):
        response = self.client.post('/api/v1/vendors/', {'name': 'Canva', 'gstin': '29AAA'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('gstin', response.data)

    def test_list_total_spend_counts_paid_only(self):
        vendor = TestDataFactory.create_vendor(name='Figma')
        TestDataFactory.create_expense(amount='1200.00', vendor=vendor)
        TestDataFactory.create_expense(amount='800.00', vendor=vendor, status='DUE')

        response = self.client.get('/api/v1/vendors/?search=fig')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data[0]['total_spend'], Decimal('1200.00'))
        self.assertEqual(response.data[0]['expense_count'], 2)

    def test_status_change(self):
        vendor = TestDataFactory.create_vendor()
        response = self.client.put(f'/api/v1/vendors/{vendor.id}/status/', {'status': 'INACTIVE'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        vendor.refresh_from_db()
        self.assertEqual(vendor.status, 'INACTIVE')

    def test_delete_vendor_with_expenses_refused(self):
        vendor = TestDataFactory.create_vendor()
        TestDataFactory.create_expense(vendor=vendor)
        response = self.client.delete(f'/api/v1/vendors/{vendor.id}/')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('1 expense(s)', response.data['error'])
        self.assertTrue(Vendor.objects.filter(pk=vendor.pk).exists())

    def test_delete_unused_vendor(self):
        vendor = TestDataFactory.create_vendor()
        response = self.client.delete(f'/api/v1/vendors/{vendor.id}/')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)


class ExpenseCategoryTests(TestCase):
    """Test expense categories and the default seed"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)

    def test_code_is_uppercased_and_unique(self):
        response = self.client.post('/api/v1/expense-categories/',
                                    {'name': 'Stock photos', 'code': 'photo', 'group': 'Client Project Costs'},
                                    format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['code'], 'PHOTO')

        response = self.client.post('/api/v1/expense-categories/', {'name': 'Photos', 'code': 'Photo'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('code', response.data)

    def test_filter_by_group(self):
        TestDataFactory.create_expense_category(code='ADS', group='Marketing & Sales')
        TestDataFactory.create_expense_category(code='RENT', group='Operations')
        response = self.client.get('/api/v1/expense-categories/?group=Operations')
        self.assertEqual([c['code'] for c in response.data], ['RENT'])

    def test_seed_defaults_skips_existing_codes(self):
        TestDataFactory.create_expense_category(code='rent', name='Studio rent')
        result = seed_default_categories()
        self.assertEqual(result['created'], len(DEFAULT_EXPENSE_CATEGORIES) - 1)
        self.assertEqual(result['skipped'], 1)
        self.assertEqual(ExpenseCategory.objects.get(code='RENT').name, 'Studio rent')

        again = seed_default_categories()
        self.assertEqual(again, {'created': 0, 'skipped': len(DEFAULT_EXPENSE_CATEGORIES)})

    def test_seed_defaults_endpoint(self):
        response = self.client.post('/api/v1/expense-categories/seed-defaults/')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['created'], len(DEFAULT_EXPENSE_CATEGORIES))
        response = self.client.post('/api/v1/expense-categories/seed-defaults/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)

    def test_seed_command(self):
        out = StringIO()
        call_command('seed_expense_categories', stdout=out)
        self.assertIn(f'{len(DEFAULT_EXPENSE_CATEGORIES)} created', out.getvalue())

    def test_delete_category_in_use_refused(self):
        category = TestDataFactory.create_expense_category()
        TestDataFactory.create_expense(category=category)
        response = self.client.delete(f'/api/v1/expense-categories/{category.id}/')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertTrue(ExpenseCategory.objects.filter(pk=category.pk).exists())


class ExpenseAPITests(TestCase):
    """Test Expense API endpoints"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)
        self.category = TestDataFactory.create_expense_category(code='SOFTWARE')

    def test_create_paid_expense_defaults_paid_date(self):
        data = {'category': self.category.id, 'description': 'Semrush subscription', 'amount': '9999.00',
                'expense_date': '2024-05-02', 'status': 'PAID'}
        response = self.client.post('/api/v1/expenses/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['paid_date'], '2024-05-02')
        self.assertEqual(response.data['category_code'], 'SOFTWARE')
        self.assertIsNone(response.data['vendor_name'])

    def test_amount_must_be_positive(self):
        data = {'category': self.category.id, 'description': 'Nothing', 'amount': '0.00', 'expense_date': '2024-05-02'}
        response = self.client.post('/api/v1/expenses/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('amount', response.data)

    def test_filters(self):
        vendor = TestDataFactory.create_vendor()
        TestDataFactory.create_expense(category=self.category, vendor=vendor, expense_date='2024-05-10')
        TestDataFactory.create_expense(category=self.category, status='DUE', expense_date='2024-06-10')

        response = self.client.get('/api/v1/expenses/?from_date=2024-06-01&to_date=2024-06-30')
        self.assertEqual(len(response.data), 1)
        response = self.client.get(f'/api/v1/expenses/?vendor={vendor.id}')
        self.assertEqual(len(response.data), 1)
        response = self.client.get('/api/v1/expenses/?status=DUE')
        self.assertEqual(response.data[0]['status'], 'DUE')

    def test_mark_paid(self):
        expense = TestDataFactory.create_expense(category=self.category, status='DUE')
        data = {'payment_date': '2024-05-20', 'payment_method': 'UPI', 'reference': 'UTR123'}
        response = self.client.post(f'/api/v1/expenses/{expense.id}/mark-paid/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['status'], 'PAID')
        self.assertEqual(response.data['paid_date'], '2024-05-20')
        self.assertEqual(response.data['reference'], 'UTR123')

    def test_mark_paid_twice_refused(self):
        expense = TestDataFactory.create_expense(category=self.category, status='PAID')
        data = {'payment_date': '2024-05-20', 'payment_method': 'UPI'}
        response = self.client.post(f'/api/v1/expenses/{expense.id}/mark-paid/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('already paid', response.data['error'])

    def test_mark_paid_requires_method(self):
        expense = TestDataFactory.create_expense(category=self.category, status='DUE')
        response = self.client.post(f'/api/v1/expenses/{expense.id}/mark-paid/',
                                    {'payment_date': '2024-05-20'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('payment_method', response.data)

    def test_delete_expense(self):
        expense = TestDataFactory.create_expense(category=self.category)
        response = self.client.delete(f'/api/v1/expenses/{expense.id}/')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(Expense.objects.filter(pk=expense.pk).exists())
