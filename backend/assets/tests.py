"""
Comprehensive test suite for Fixed Assets module
Tests: Depreciation (SLM, WDV), valuation, Fixed asset CRUD and validation
"""
from datetime import date
from decimal import Decimal

from django.test import TestCase
from rest_framework import status

from backend.assets.depreciation import accumulated_depreciation, asset_valuation
from backend.assets.models import FixedAsset
from backend.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from backend.core.utils import today

# 1461 days is exactly four years of 365.25 days
FOUR_YEARS_LATER = date(2024, 1, 1)


class DepreciationTests(TestCase):
    """Test depreciation calculations"""

    def test_slm_over_useful_life(self):
        asset = TestDataFactory.create_fixed_asset(purchase_value='100000.00', salvage_value='10000.00',
                                                   useful_life_years=5, purchase_date=date(2020, 1, 1))
        self.assertEqual(accumulated_depreciation(asset, FOUR_YEARS_LATER), Decimal('72000.00'))

    def test_slm_capped_at_depreciable_amount(self):
        asset = TestDataFactory.create_fixed_asset(purchase_value='100000.00', salvage_value='10000.00',
                                                   useful_life_years=5, purchase_date=date(2020, 1, 1))
        valuation = asset_valuation(asset, date(2030, 1, 1))
        self.assertEqual(valuation['accumulated_depreciation'], Decimal('90000.00'))
        self.assertEqual(valuation['current_value'], Decimal('10000.00'))

    def test_slm_with_rate_only(self):
        asset = TestDataFactory.create_fixed_asset(purchase_value='50000.00', rate='10.00', useful_life_years=None,
                                                   purchase_date=date(2020, 1, 1))
        self.assertEqual(accumulated_depreciation(asset, FOUR_YEARS_LATER), Decimal('20000.00'))

    def test_wdv(self):
        asset = TestDataFactory.create_fixed_asset(purchase_value='100000.00', method='WDV', rate='20.00',
                                                   purchase_date=date(2020, 1, 1))
        valuation = asset_valuation(asset, FOUR_YEARS_LATER)
        self.assertEqual(valuation['accumulated_depreciation'], Decimal('59040.00'))
        self.assertEqual(valuation['current_value'], Decimal('40960.00'))
        self.assertEqual(valuation['years_owned'], 4.0)

    def test_no_depreciation_before_purchase(self):
        asset = TestDataFactory.create_fixed_asset(purchase_date=date(2024, 6, 1))
        self.assertEqual(accumulated_depreciation(asset, date(2024, 1, 1)), Decimal('0.00'))


class FixedAssetAPITests(TestCase):
    """Test Fixed Asset API endpoints"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)

    def test_create_asset(self):
        vendor = TestDataFactory.create_vendor(name='Laptop World')
        data = {'name': 'MacBook Pro', 'category': 'Computers', 'purchase_date': today().isoformat(),
                'purchase_value': '180000.00', 'useful_life_years': 3, 'vendor': vendor.id}
        response = self.client.post('/api/v1/fixed-assets/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['vendor_name'], 'Laptop World')
        self.assertEqual(response.data['accumulated_depreciation'], Decimal('0.00'))
        self.assertEqual(response.data['current_value'], Decimal('180000.00'))

    def test_salvage_above_purchase_rejected(self):
        data = {'name': 'Chair', 'purchase_date': '2024-01-01', 'purchase_value': '5000.00',
                'salvage_value': '6000.00', 'useful_life_years': 5}
        response = self.client.post('/api/v1/fixed-assets/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('salvage_value', response.data)

    def test_wdv_requires_rate(self):
        data = {'name': 'Car', 'purchase_date': '2024-01-01', 'purchase_value': '800000.00',
                'depreciation_method': 'WDV'}
        response = self.client.post('/api/v1/fixed-assets/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('depreciation_rate', response.data)

    def test_slm_requires_life_or_rate(self):
        data = {'name': 'Desk', 'purchase_date': '2024-01-01', 'purchase_value': '12000.00'}
        response = self.client.post('/api/v1/fixed-assets/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('useful_life_years', response.data)

    def test_list_filters(self):
        TestDataFactory.create_fixed_asset(name='Camera', category='Equipment', useful_life_years=5)
        TestDataFactory.create_fixed_asset(name='Old printer', category='Equipment', status='DISPOSED',
                                           useful_life_years=5)
        TestDataFactory.create_fixed_asset(name='Sofa', category='Furniture', useful_life_years=10)
        response = self.client.get('/api/v1/fixed-assets/?category=equipment&status=ACTIVE')
        self.assertEqual([a['name'] for a in response.data], ['Camera'])

    def test_update_and_delete(self):
        asset = TestDataFactory.create_fixed_asset(useful_life_years=5)
        response = self.client.patch(f'/api/v1/fixed-assets/{asset.id}/', {'status': 'DISPOSED'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['status'], 'DISPOSED')

        response = self.client.delete(f'/api/v1/fixed-assets/{asset.id}/')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(FixedAsset.objects.filter(pk=asset.pk).exists())
