"""
Comprehensive test suite for Core module
Tests: Authentication, Users, Company Profile, Logo upload, Secret settings, Slack and
payment gateway checks, Audit logs, utilities
"""
import base64
from io import BytesIO
from unittest.mock import patch, MagicMock

import requests
from PIL import Image
from django.core.files.uploadedfile import SimpleUploadedFile
from django.core.management import call_command
from django.test import TestCase, override_settings
from django.conf import settings
from rest_framework import status

from backend.core.models import AuditLog, ApiSettings, CompanyProfile, SlackSettings, PaymentGatewaySettings, User
from backend.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from backend.core.integrations import post_slack_message
from backend.core.utils import is_masked, mask_secret, next_document_number, quantize
from backend.billing.models import Invoice
from decimal import Decimal


def make_png(size=(10, 10)):
    buffer = BytesIO()
    Image.new('RGB', size, color='red').save(buffer, format='PNG')
    return SimpleUploadedFile('logo.png', buffer.getvalue(), content_type='image/png')


class AuthenticationTests(TestCase):
    """Test login, refresh, registration and the current-user endpoint"""

    def setUp(self):
        self.client = AuthenticatedAPIClient()

    def test_register_first_user_becomes_admin(self):
        """Test the first registered user bootstraps as ADMIN"""
        data = {
            'email': 'owner@agency.test',
            'name': 'Owner',
            'password': 'Str0ng-pass-123',
            'password_confirm': 'Str0ng-pass-123',
        }
        response = self.client.post('/api/v1/auth/register/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['user']['role'], 'ADMIN')
        self.assertIn('access', response.data)

    def test_register_closed_after_bootstrap(self):
        """Test anonymous registration is refused once users exist"""
        TestDataFactory.create_user()
        data = {
            'email': 'someone@agency.test',
            'password': 'Str0ng-pass-123',
            'password_confirm': 'Str0ng-pass-123',
        }
        response = self.client.post('/api/v1/auth/register/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_login_with_email(self):
        """Test login returns tokens and the user profile"""
        TestDataFactory.create_user(email='staff@agency.test', name='Staff Member')
        response = self.client.post('/api/v1/auth/login/',
                                    {'email': 'staff@agency.test', 'password': 'testpass123'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIn('access', response.data)
        self.assertIn('refresh', response.data)
        self.assertEqual(response.data['user']['role'], 'STAFF')
        self.assertEqual(response.data['user']['name'], 'Staff Member')

    def test_login_wrong_password(self):
        """Test bad credentials are rejected"""
        TestDataFactory.create_user(email='staff@agency.test')
        response = self.client.post('/api/v1/auth/login/',
                                    {'email': 'staff@agency.test', 'password': 'wrong'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_refresh_token(self):
        """Test a refresh token yields a new access token"""
        TestDataFactory.create_user(email='staff@agency.test')
        login = self.client.post('/api/v1/auth/login/',
                                 {'email': 'staff@agency.test', 'password': 'testpass123'}, format='json')
        response = self.client.post('/api/v1/auth/refresh/', {'refresh': login.data['refresh']}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIn('access', response.data)

    def test_me(self):
        """Test the current user endpoint reports role flags"""
        admin = TestDataFactory.create_admin()
        self.client.authenticate_user(admin)
        response = self.client.get('/api/v1/auth/me/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(response.data['is_admin'])
        self.assertTrue(response.data['can_manage_finance'])

    def test_me_requires_authentication(self):
        response = self.client.get('/api/v1/auth/me/')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)


class UserManagementTests(TestCase):
    """Test admin-only user management"""

    def setUp(self):
        self.admin = TestDataFactory.create_admin()
        self.staff = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()

    def test_staff_cannot_list_users(self):
        self.client.authenticate_user(self.staff)
        response = self.client.get('/api/v1/users/')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_admin_creates_user(self):
        """Test an admin can create a manager"""
        self.client.authenticate_user(self.admin)
        data = {
            'email': 'manager@agency.test',
            'name': 'Manager',
            'role': 'MANAGER',
            'password': 'Str0ng-pass-123',
            'password_confirm': 'Str0ng-pass-123',
        }
        response = self.client.post('/api/v1/users/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['role'], 'MANAGER')
        self.assertTrue(AuditLog.objects.filter(action='create', model_name='User').exists())

    def test_password_mismatch(self):
        self.client.authenticate_user(self.admin)
        data = {
            'email': 'manager@agency.test',
            'password': 'Str0ng-pass-123',
            'password_confirm': 'Different-pass-123',
        }
        response = self.client.post('/api/v1/users/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_admin_cannot_delete_self(self):
        self.client.authenticate_user(self.admin)
        response = self.client.delete(f'/api/v1/users/{self.admin.id}/')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_admin_deletes_user(self):
        self.client.authenticate_user(self.admin)
        response = self.client.delete(f'/api/v1/users/{self.staff.id}/')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(User.objects.filter(pk=self.staff.pk).exists())


class CompanyProfileTests(TestCase):
    """Test the company profile and logo upload"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)

    def test_profile_empty(self):
        """Test GET returns null before the profile is set up"""
        response = self.client.get('/api/v1/settings/company/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIsNone(response.data)

    def test_create_and_update_profile(self):
        response = self.client.post('/api/v1/settings/company/',
                                    {'company_name': 'Acme Digital', 'state': 'Karnataka'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        profile_id = response.data['id']

        response = self.client.post('/api/v1/settings/company/', {'company_name': 'Second'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

        response = self.client.patch(f'/api/v1/settings/company/{profile_id}/', {'city': 'Bengaluru'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['city'], 'Bengaluru')

    def test_logo_upload(self):
        """Test the logo is stored as a data URL"""
        TestDataFactory.create_company_profile()
        response = self.client.post('/api/v1/settings/company/logo/', {'logo': make_png()}, format='multipart')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(response.data['logo_url'].startswith('data:image/png;base64,'))

    def test_logo_too_large(self):
        """Test logos over the size limit are rejected"""
        TestDataFactory.create_company_profile()
        agency = {**settings.AGENCY, 'MAX_LOGO_SIZE': 10}
        with override_settings(AGENCY=agency):
            response = self.client.post('/api/v1/settings/company/logo/', {'logo': make_png()}, format='multipart')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(CompanyProfile.objects.first().logo_url, '')

    def test_logo_data_url_size_checked_on_profile(self):
        """Test a data URL logo sent through the profile endpoints obeys the size limit"""
        data_url = 'data:image/png;base64,' + base64.b64encode(b'x' * 20).decode()
        agency = {**settings.AGENCY, 'MAX_LOGO_SIZE': 10}
        with override_settings(AGENCY=agency):
            response = self.client.post('/api/v1/settings/company/',
                                        {'company_name': 'Acme Digital', 'logo_url': data_url}, format='json')
            self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
            self.assertIn('logo_url', response.data)
            self.assertFalse(CompanyProfile.objects.exists())

            profile = TestDataFactory.create_company_profile()
            response = self.client.patch(f'/api/v1/settings/company/{profile.id}/', {'logo_url': data_url},
                                         format='json')
            self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
            profile.refresh_from_db()
            self.assertEqual(profile.logo_url, '')

        response = self.client.patch(f'/api/v1/settings/company/{profile.id}/', {'logo_url': data_url},
                                     format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['logo_url'], data_url)

    def test_logo_requires_profile(self):
        response = self.client.post('/api/v1/settings/company/logo/', {'logo': make_png()}, format='multipart')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)


class IntegrationSettingsTests(TestCase):
    """Test masked secrets and the Slack / payment gateway connection checks"""

    def setUp(self):
        self.admin = TestDataFactory.create_admin()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.admin)

    def test_api_keys_masked(self):
        """Test secrets are masked on read and masked input is ignored"""
        response = self.client.put('/api/v1/settings/api-keys/',
                                   {'openai_api_key': 'sk-test-1234567890'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['openai_api_key'], 'sk-t**********7890')
        self.assertTrue(response.data['has_openai_key'])

        self.client.put('/api/v1/settings/api-keys/', {'openai_api_key': 'sk-t**********7890'}, format='json')
        response = self.client.get('/api/v1/settings/api-keys/')
        self.assertEqual(response.data['openai_api_key'], 'sk-t**********7890')

    def test_api_keys_blank_clears_and_omitted_keeps(self):
        """Test a blank value clears a key while omitted keys are left alone"""
        self.client.put('/api/v1/settings/api-keys/',
                        {'openai_api_key': 'sk-test-1234567890', 'gemini_api_key': 'gm-key-abcdefgh'}, format='json')

        response = self.client.put('/api/v1/settings/api-keys/', {'openai_api_key': ''}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertFalse(response.data['has_openai_key'])
        self.assertTrue(response.data['has_gemini_key'])

        api_settings = ApiSettings.load()
        self.assertEqual(api_settings.openai_api_key, '')
        self.assertEqual(api_settings.gemini_api_key, 'gm-key-abcdefgh')

    def test_short_secret_mask_not_saved(self):
        """Test echoing back the all-star display of a short key keeps the stored key"""
        self.client.put('/api/v1/settings/api-keys/', {'resend_api_key': 'abc'}, format='json')
        response = self.client.get('/api/v1/settings/api-keys/')
        self.assertEqual(response.data['resend_api_key'], '***')

        self.client.put('/api/v1/settings/api-keys/', {'resend_api_key': '***'}, format='json')
        self.assertEqual(ApiSettings.load().resend_api_key, 'abc')

    def test_settings_admin_only(self):
        staff = TestDataFactory.create_user()
        self.client.authenticate_user(staff)
        response = self.client.get('/api/v1/slack/settings/')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    @patch('backend.core.integrations.requests.post')
    def test_slack_connection_ok(self, mock_post):
        mock_post.return_value = MagicMock(json=MagicMock(return_value={'ok': True, 'team': 'Acme'}))
        response = self.client.post('/api/v1/slack/test-connection/', {'bot_token': 'xoxb-123'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(response.data['success'])
        self.assertEqual(response.data['team'], 'Acme')

    @patch('backend.core.integrations.requests.post')
    def test_slack_connection_error(self, mock_post):
        mock_post.return_value = MagicMock(json=MagicMock(return_value={'ok': False, 'error': 'invalid_auth'}))
        response = self.client.post('/api/v1/slack/test-connection/', {'bot_token': 'xoxb-bad'}, format='json')
        self.assertFalse(response.data['success'])
        self.assertIn('invalid_auth', response.data['message'])

    def test_slack_connection_without_token(self):
        response = self.client.post('/api/v1/slack/test-connection/', {}, format='json')
        self.assertFalse(response.data['success'])

    @patch('backend.core.integrations.requests.get')
    def test_payment_gateway_check(self, mock_get):
        """Test the selected provider's credentials are checked"""
        gateway = PaymentGatewaySettings.load()
        gateway.active_provider = 'STRIPE'
        gateway.stripe_secret_key = 'sk_test_abc'
        gateway.save()
        mock_get.return_value = MagicMock(status_code=200)
        response = self.client.post('/api/v1/settings/payment-gateway/test/', {}, format='json')
        self.assertTrue(response.data['success'])

        mock_get.return_value = MagicMock(status_code=401)
        response = self.client.post('/api/v1/settings/payment-gateway/test/', {}, format='json')
        self.assertFalse(response.data['success'])

    @patch('backend.core.integrations.requests.get')
    def test_payment_gateway_unreachable(self, mock_get):
        gateway = PaymentGatewaySettings.load()
        gateway.razorpay_key_id = 'rzp_test'
        gateway.razorpay_key_secret = 'secret'
        gateway.save()
        mock_get.side_effect = requests.exceptions.ConnectionError('down')
        response = self.client.post('/api/v1/settings/payment-gateway/test/', {'provider': 'RAZORPAY'},
                                    format='json')
        self.assertFalse(response.data['success'])
        self.assertIn('Could not reach', response.data['message'])

    @patch('backend.core.integrations.requests.post')
    def test_slack_notification_skipped_when_disabled(self, mock_post):
        self.assertFalse(post_slack_message('hello'))
        mock_post.assert_not_called()

    @patch('backend.core.integrations.requests.post')
    def test_payment_posts_to_slack(self, mock_post):
        """Test recording a payment notifies Slack when enabled"""
        SlackSettings.objects.create(bot_token='xoxb-123', default_channel_id='C123', is_enabled=True)
        mock_post.return_value = MagicMock(json=MagicMock(return_value={'ok': True}))
        invoice = TestDataFactory.create_invoice()
        TestDataFactory.create_payment(invoice, '100.00')
        mock_post.assert_called_once()
        self.assertIn(invoice.invoice_number, mock_post.call_args.kwargs['json']['text'])

    @patch('backend.core.integrations.requests.post')
    def test_payment_notification_respects_toggle(self, mock_post):
        """Test payments are not posted when payment notifications are off"""
        SlackSettings.objects.create(bot_token='xoxb-123', default_channel_id='C123', is_enabled=True,
                                     notify_on_payment=False)
        invoice = TestDataFactory.create_invoice()
        TestDataFactory.create_payment(invoice, '100.00')
        mock_post.assert_not_called()


class AuditLogTests(TestCase):
    """Test audit log visibility"""

    def setUp(self):
        self.admin = TestDataFactory.create_admin()
        self.staff = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        AuditLog.objects.create(user=self.admin, action='create', model_name='Client', object_id='1')
        self.own = AuditLog.objects.create(user=self.staff, action='update', model_name='Client', object_id='1')

    def test_staff_sees_own_logs(self):
        self.client.authenticate_user(self.staff)
        response = self.client.get('/api/v1/audit-logs/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data), 1)

    def test_admin_sees_all_logs(self):
        self.client.authenticate_user(self.admin)
        response = self.client.get('/api/v1/audit-logs/?model=Client')
        self.assertEqual(len(response.data), 2)

    def test_staff_cannot_read_others(self):
        other = AuditLog.objects.filter(user=self.admin).first()
        self.client.authenticate_user(self.staff)
        response = self.client.get(f'/api/v1/audit-logs/{other.id}/')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)


class UtilityTests(TestCase):
    """Test document numbering, rounding, masking and the admin command"""

    def test_next_document_number(self):
        self.assertEqual(next_document_number(Invoice, 'invoice_number', 'INV'), 'INV-0001')
        TestDataFactory.create_invoice()
        self.assertEqual(next_document_number(Invoice, 'invoice_number', 'INV'), 'INV-0002')

    def test_quantize_half_up(self):
        self.assertEqual(quantize(Decimal('2.345')), Decimal('2.35'))
        self.assertEqual(quantize(Decimal('2.344')), Decimal('2.34'))

    def test_mask_secret(self):
        self.assertEqual(mask_secret(''), '')
        self.assertEqual(mask_secret('short'), '*****')
        self.assertEqual(mask_secret('abcd12345678wxyz'), 'abcd********wxyz')

    def test_is_masked(self):
        for secret in ('ab', 'abc', 'abcd1234', 'abcd1wxyz', 'abcd12345678wxyz'):
            self.assertTrue(is_masked(mask_secret(secret)), secret)
        self.assertFalse(is_masked(''))
        self.assertFalse(is_masked('sk-live-abcdef'))

    def test_create_admin_user_command(self):
        call_command('create_admin_user', '--email', 'Boss@Agency.test', '--password', 'secret-123', '--name', 'Boss')
        user = User.objects.get(email='boss@agency.test')
        self.assertEqual(user.role, 'ADMIN')
        self.assertTrue(user.check_password('secret-123'))
