"""
Comprehensive test suite for Clients module
Tests: Client CRUD, stats, status changes, delete protection, onboarding links, Projects
"""
from decimal import Decimal

from django.test import TestCase
from rest_framework import status

from backend.clients.models import Client, Project
from backend.core.test_utils import TestDataFactory, AuthenticatedAPIClient


class ClientAPITests(TestCase):
    """Test Client API endpoints"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)

    def test_quick_add_client(self):
        """Test creating a client with only the required fields"""
        data = {'name': 'Bright Foods', 'contact_name': 'Asha Rao', 'email': 'asha@brightfoods.test'}
        response = self.client.post('/api/v1/clients/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['status'], 'ACTIVE')
        self.assertEqual(len(response.data['onboarding_token']), 32)
        self.assertEqual(response.data['total_invoiced'], Decimal('0.00'))

    def test_create_client_missing_name(self):
        data = {'name': '', 'contact_name': 'Asha Rao', 'email': 'asha@brightfoods.test'}
        response = self.client.post('/api/v1/clients/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('name', response.data)

    def test_quick_add_requires_contact_and_valid_email(self):
        response = self.client.post('/api/v1/clients/', {'name': 'Bright Foods', 'email': 'asha@brightfoods.test'},
                                    format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('contact_name', response.data)
        data = {'name': 'Bright Foods', 'contact_name': 'Asha', 'email': 'not-an-email'}
        response = self.client.post('/api/v1/clients/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('email', response.data)

    def test_invalid_gstin(self):
        data = {'name': 'Bright Foods', 'contact_name': 'Asha', 'email': 'a@b.test', 'gstin': '123'}
        response = self.client.post('/api/v1/clients/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('gstin', response.data)

    def test_list_with_stats(self):
        """Test list rows carry invoiced and outstanding totals"""
        client = TestDataFactory.create_client(name='Stats Co')
        TestDataFactory.create_project(client=client)
        invoice = TestDataFactory.create_invoice(client=client)
        TestDataFactory.create_payment(invoice, '180.00')

        response = self.client.get('/api/v1/clients/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        row = response.data[0]
        self.assertEqual(row['total_invoiced'], Decimal('1180.00'))
        self.assertEqual(row['outstanding_amount'], Decimal('1000.00'))
        self.assertEqual(row['project_count'], 1)

    def test_search_and_status_filter(self):
        TestDataFactory.create_client(name='Alpha Media')
        TestDataFactory.create_client(name='Beta Labs', status='INACTIVE')
        response = self.client.get('/api/v1/clients/?search=alpha')
        self.assertEqual([c['name'] for c in response.data], ['Alpha Media'])
        response = self.client.get('/api/v1/clients/?status=INACTIVE')
        self.assertEqual([c['name'] for c in response.data], ['Beta Labs'])

    def test_detail_includes_projects(self):
        client = TestDataFactory.create_client()
        TestDataFactory.create_project(client=client, name='Website relaunch')
        response = self.client.get(f'/api/v1/clients/{client.id}/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['projects'][0]['name'], 'Website relaunch')

    def test_status_change(self):
        client = TestDataFactory.create_client()
        response = self.client.put(f'/api/v1/clients/{client.id}/status/', {'status': 'ARCHIVED'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        client.refresh_from_db()
        self.assertEqual(client.status, 'ARCHIVED')

    def test_status_change_invalid(self):
        client = TestDataFactory.create_client()
        response = self.client.put(f'/api/v1/clients/{client.id}/status/', {'status': 'GONE'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        response = self.client.put(f'/api/v1/clients/{client.id}/status/', {}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_delete_client(self):
        client = TestDataFactory.create_client()
        response = self.client.delete(f'/api/v1/clients/{client.id}/')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(Client.objects.filter(pk=client.pk).exists())

    def test_delete_client_with_children_refused(self):
        """Test a client with projects or invoices cannot be deleted"""
        client = TestDataFactory.create_client()
        TestDataFactory.create_project(client=client)
        TestDataFactory.create_invoice(client=client)
        response = self.client.delete(f'/api/v1/clients/{client.id}/')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('1 project(s)', response.data['error'])
        self.assertIn('1 invoice(s)', response.data['error'])
        self.assertTrue(Client.objects.filter(pk=client.pk).exists())

    def test_missing_client(self):
        response = self.client.get('/api/v1/clients/99999/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)


class OnboardingTests(TestCase):
    """Test the public onboarding link"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.record = TestDataFactory.create_client(name='Onboard Co')

    def test_public_get_and_submit(self):
        """Test the onboarding form works without authentication"""
        url = f'/api/v1/public/onboarding/{self.record.onboarding_token}/'
        response = self.client.get(url)
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['client_name'], 'Onboard Co')

        response = self.client.post(url, {'onboarding_data': {'brand_colors': ['#fff']}}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.record.refresh_from_db()
        self.assertEqual(self.record.onboarding_data, {'brand_colors': ['#fff']})
        self.assertIsNotNone(self.record.onboarding_completed_at)

    def test_unknown_token(self):
        response = self.client.get('/api/v1/public/onboarding/not-a-token/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_regenerate_token(self):
        """Test regenerating invalidates the old link"""
        old_token = self.record.onboarding_token
        self.client.authenticate_user(self.user)
        response = self.client.post(f'/api/v1/clients/{self.record.id}/onboarding-token/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertNotEqual(response.data['onboarding_token'], old_token)

        self.client.logout()
        response = self.client.get(f'/api/v1/public/onboarding/{old_token}/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)


class ProjectAPITests(TestCase):
    """Test Project API endpoints"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)
        self.record = TestDataFactory.create_client()

    def test_create_project(self):
        data = {'client': self.record.id, 'name': 'SEO Sprint', 'start_date': '2024-01-01', 'end_date': '2024-03-31'}
        response = self.client.post('/api/v1/projects/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['client_name'], self.record.name)

    def test_project_dates_validated(self):
        data = {'client': self.record.id, 'name': 'SEO Sprint', 'start_date': '2024-03-01', 'end_date': '2024-01-01'}
        response = self.client.post('/api/v1/projects/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('end_date', response.data)

    def test_filter_by_client(self):
        TestDataFactory.create_project(client=self.record)
        TestDataFactory.create_project()
        response = self.client.get(f'/api/v1/projects/?client={self.record.id}')
        self.assertEqual(len(response.data), 1)

    def test_delete_project_with_invoice_refused(self):
        project = TestDataFactory.create_project(client=self.record)
        TestDataFactory.create_invoice(client=self.record, project=project)
        response = self.client.delete(f'/api/v1/projects/{project.id}/')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertTrue(Project.objects.filter(pk=project.pk).exists())
