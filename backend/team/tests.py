"""
Comprehensive test suite for Team module
Tests: Job roles, Team members, onboarding links, Salary payments
"""
from decimal import Decimal
from io import StringIO

from django.core.management import call_command
from django.test import TestCase
from rest_framework import status

from backend.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from backend.core.utils import today
from backend.leave.models import LeaveBalance
from backend.team.defaults import DEFAULT_JOB_ROLES
from backend.team.models import JobRole, SalaryPayment, TeamMember


class JobRoleTests(TestCase):
    """Test job role endpoints and seeding"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)

    def test_create_role_and_member_count(self):
        response = self.client.post('/api/v1/job-roles/', {'title': 'SEO Specialist', 'department': 'Digital Marketing'},
                                    format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        TestDataFactory.create_team_member(role_title='seo specialist')

        response = self.client.get(f"/api/v1/job-roles/{response.data['id']}/")
        self.assertEqual(response.data['member_count'], 1)

    def test_duplicate_title_rejected(self):
        TestDataFactory.create_job_role(title='Copywriter')
        response = self.client.post('/api/v1/job-roles/', {'title': 'Copywriter'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_filter_active(self):
        TestDataFactory.create_job_role(title='Intern')
        JobRole.objects.create(title='Retired role', is_active=False)
        response = self.client.get('/api/v1/job-roles/?is_active=false')
        self.assertEqual([r['title'] for r in response.data], ['Retired role'])

    def test_seed_defaults(self):
        TestDataFactory.create_job_role(title='copywriter')
        response = self.client.post('/api/v1/job-roles/seed-defaults/')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data, {'created': len(DEFAULT_JOB_ROLES) - 1, 'skipped': 1})

        out = StringIO()
        call_command('seed_job_roles', stdout=out)
        self.assertIn('0 created', out.getvalue())


class TeamMemberTests(TestCase):
    """Test team member endpoints"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)

    def test_create_member_initializes_leave_balances(self):
        """Test a new member gets a balance per active leave type"""
        casual = TestDataFactory.create_leave_type(code='CL', category='CASUAL')
        TestDataFactory.create_leave_type(code='SL', category='SICK')
        TestDataFactory.create_leave_type(code='OLD', category='OTHER', is_active=False)

        data = {'name': 'Priya Nair', 'email': 'priya@agency.test', 'role_title': 'Designer',
                'joined_date': '2020-01-15', 'base_salary': '60000.00'}
        response = self.client.post('/api/v1/team-members/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(len(response.data['onboarding_token']), 32)

        balances = LeaveBalance.objects.filter(team_member_id=response.data['id'], year=today().year)
        self.assertEqual(balances.count(), 2)
        self.assertEqual(balances.get(leave_type=casual).total_quota, Decimal('12.00'))

    def test_exit_before_joining_rejected(self):
        data = {'name': 'Ravi', 'email': 'ravi@agency.test', 'joined_date': '2024-05-01', 'exit_date': '2024-04-01'}
        response = self.client.post('/api/v1/team-members/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('exit_date', response.data)

    def test_duplicate_email_rejected(self):
        TestDataFactory.create_team_member(email='dup@agency.test')
        response = self.client.post('/api/v1/team-members/', {'name': 'Dup', 'email': 'dup@agency.test'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('email', response.data)

    def test_search_and_status(self):
        TestDataFactory.create_team_member(name='Anita', role_title='Video Editor')
        TestDataFactory.create_team_member(name='Kabir', status='INACTIVE')
        response = self.client.get('/api/v1/team-members/?search=video')
        self.assertEqual([m['name'] for m in response.data], ['Anita'])
        response = self.client.get('/api/v1/team-members/?status=INACTIVE')
        self.assertEqual([m['name'] for m in response.data], ['Kabir'])

    def test_status_change(self):
        member = TestDataFactory.create_team_member()
        response = self.client.put(f'/api/v1/team-members/{member.id}/status/', {'status': 'INACTIVE'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['status'], 'INACTIVE')

    def test_delete_member_with_salaries_refused(self):
        member = TestDataFactory.create_team_member()
        TestDataFactory.create_salary(team_member=member)
        response = self.client.delete(f'/api/v1/team-members/{member.id}/')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('1 salary record(s)', response.data['error'])
        self.assertTrue(TeamMember.objects.filter(pk=member.pk).exists())

    def test_delete_member_without_salaries(self):
        member = TestDataFactory.create_team_member()
        response = self.client.delete(f'/api/v1/team-members/{member.id}/')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(TeamMember.objects.filter(pk=member.pk).exists())

    def test_public_onboarding(self):
        member = TestDataFactory.create_team_member(name='Meera', role_title='Copywriter')
        old_token = member.onboarding_token
        self.client.logout()

        url = f'/api/v1/public/team-onboarding/{old_token}/'
        response = self.client.get(url)
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['role_title'], 'Copywriter')
        response = self.client.post(url, {'onboarding_data': {'pan': 'ABCDE1234F'}}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        member.refresh_from_db()
        self.assertIsNotNone(member.onboarding_completed_at)

        response = self.client.post(url, {'onboarding_data': ['not', 'an', 'object']}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

        self.client.authenticate_user(self.user)
        response = self.client.post(f'/api/v1/team-members/{member.id}/onboarding-token/')
        self.assertNotEqual(response.data['onboarding_token'], old_token)


class SalaryPaymentTests(TestCase):
    """Test salary payment endpoints"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)
        self.member = TestDataFactory.create_team_member(name='Arjun')

    def test_create_pending_salary(self):
        data = {'team_member': self.member.id, 'month': '2024-03', 'amount': '45000.00'}
        response = self.client.post('/api/v1/salaries/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['status'], 'PENDING')
        self.assertEqual(response.data['team_member_name'], 'Arjun')

    def test_invalid_month(self):
        data = {'team_member': self.member.id, 'month': '2024-13', 'amount': '45000.00'}
        response = self.client.post('/api/v1/salaries/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('month', response.data)

    def test_paid_salary_requires_payment_date(self):
        data = {'team_member': self.member.id, 'month': '2024-03', 'amount': '45000.00', 'status': 'PAID'}
        response = self.client.post('/api/v1/salaries/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('payment_date', response.data)

    def test_mark_paid(self):
        salary = TestDataFactory.create_salary(team_member=self.member, month='2024-03', status='PENDING')
        data = {'payment_date': '2024-04-01', 'payment_method': 'BANK_TRANSFER', 'reference': 'NEFT-9'}
        response = self.client.post(f'/api/v1/salaries/{salary.id}/mark-paid/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['status'], 'PAID')
        self.assertEqual(response.data['payment_date'], '2024-04-01')

        response = self.client.post(f'/api/v1/salaries/{salary.id}/mark-paid/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('already paid', response.data['error'])

    def test_filter_by_month(self):
        TestDataFactory.create_salary(team_member=self.member, month='2024-02')
        TestDataFactory.create_salary(team_member=self.member, month='2024-03')
        response = self.client.get('/api/v1/salaries/?month=2024-03')
        self.assertEqual(len(response.data), 1)
        self.assertEqual(response.data[0]['month'], '2024-03')

    def test_delete_salary(self):
        salary = TestDataFactory.create_salary(team_member=self.member)
        response = self.client.delete(f'/api/v1/salaries/{salary.id}/')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(SalaryPayment.objects.filter(pk=salary.pk).exists())
