"""
Comprehensive test suite for Catalog module
Tests: Service CRUD, validation, filters
"""
from decimal import Decimal

from django.test import TestCase
from rest_framework import status

from backend.catalog.models import Service
from backend.core.models import AuditLog
from backend.core.test_utils import TestDataFactory, AuthenticatedAPIClient


class ServiceAPITests(TestCase):
    """Test Service API endpoints"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)

    def test_create_service(self):
        data = {'name': '  Technical SEO Audit ', 'category': 'SEO', 'default_price': '15000.00',
                'unit': 'Project', 'sac_code': '998361'}
        response = self.client.post('/api/v1/services/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['name'], 'Technical SEO Audit')
        self.assertEqual(response.data['category_display'], 'SEO')
        self.assertEqual(response.data['currency'], 'INR')
        self.assertTrue(AuditLog.objects.filter(model_name='Service', action='create').exists())

    def test_negative_price_rejected(self):
        data = {'name': 'Logo design', 'category': 'DESIGN', 'default_price': '-1.00'}
        response = self.client.post('/api/v1/services/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('default_price', response.data)

    def test_blank_name_rejected(self):
        response = self.client.post('/api/v1/services/', {'name': '   ', 'default_price': '10.00'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('name', response.data)

    def test_filters(self):
        TestDataFactory.create_service(name='Keyword research', category='SEO')
        TestDataFactory.create_service(name='Reels production', category='SOCIAL_MEDIA')
        retired = TestDataFactory.create_service(name='Print ads', category='ADVERTISING')
        Service.objects.filter(pk=retired.pk).update(status='INACTIVE')

        response = self.client.get('/api/v1/services/?category=SEO')
        self.assertEqual([s['name'] for s in response.data], ['Keyword research'])
        response = self.client.get('/api/v1/services/?status=INACTIVE')
        self.assertEqual([s['name'] for s in response.data], ['Print ads'])
        response = self.client.get('/api/v1/services/?search=reels')
        self.assertEqual([s['name'] for s in response.data], ['Reels production'])

    def test_update_and_delete(self):
        service = TestDataFactory.create_service()
        response = self.client.patch(f'/api/v1/services/{service.id}/', {'default_price': '7500.00'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['default_price'], Decimal('7500.00'))

        response = self.client.delete(f'/api/v1/services/{service.id}/')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(Service.objects.filter(pk=service.pk).exists())

    def test_requires_authentication(self):
        self.client.logout()
        response = self.client.get('/api/v1/services/')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
