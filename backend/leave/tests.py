"""
Comprehensive test suite for Leave module
Tests: Leave types, policies, balances (proration, re-initialization), availability checks, request workflow
"""
from datetime import date
from decimal import Decimal
from io import StringIO

from django.core.management import call_command
from django.test import TestCase
from rest_framework import status

from backend.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from backend.core.utils import today
from backend.leave.models import LeaveBalance, LeavePolicy, LeaveRequest, LeaveType
from backend.leave.services import (
    check_availability, initialize_leave_balances_for_member, prorated_quota, seed_default_leave_policies
)


class LeaveSetupTests(TestCase):
    """Test leave types, policies and seeding"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)

    def test_seed_leave_types(self):
        response = self.client.post('/api/v1/leave-types/seed/')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data, {'created': 3, 'skipped': 0})
        self.assertEqual(set(LeaveType.objects.values_list('code', flat=True)), {'CL', 'SL', 'EL'})

        response = self.client.post('/api/v1/leave-types/seed/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['created'], 0)

    def test_leave_type_code_unique(self):
        TestDataFactory.create_leave_type(code='CL')
        response = self.client.post('/api/v1/leave-types/', {'name': 'Casual', 'code': 'cl'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('code', response.data)

    def test_seed_policies_uses_category_defaults(self):
        role = TestDataFactory.create_job_role(title='Designer')
        TestDataFactory.create_leave_type(code='CL', category='CASUAL')
        TestDataFactory.create_leave_type(code='SL', category='SICK')

        result = seed_default_leave_policies()
        self.assertEqual(result, {'created': 2, 'skipped': 0})
        policy = LeavePolicy.objects.get(job_role=role, leave_type__code='CL')
        self.assertEqual(policy.annual_quota, Decimal('12.00'))
        self.assertEqual(policy.carry_forward_limit, Decimal('3.00'))

        self.assertEqual(seed_default_leave_policies(), {'created': 0, 'skipped': 2})

    def test_seed_policies_endpoint(self):
        TestDataFactory.create_job_role(title='Designer')
        TestDataFactory.create_leave_type(code='CL', category='CASUAL')
        response = self.client.post('/api/v1/leave-policies/seed/')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data, {'created': 1, 'skipped': 0})

        response = self.client.post('/api/v1/leave-policies/seed/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data, {'created': 0, 'skipped': 1})

    def test_seed_command(self):
        TestDataFactory.create_job_role(title='Designer')
        out = StringIO()
        call_command('seed_leave_defaults', stdout=out)
        self.assertIn('Leave types: 3 created', out.getvalue())
        self.assertEqual(LeavePolicy.objects.count(), 3)

    def test_policy_list_filter(self):
        role = TestDataFactory.create_job_role()
        leave_type = TestDataFactory.create_leave_type()
        TestDataFactory.create_leave_policy(role, leave_type)
        TestDataFactory.create_leave_policy(TestDataFactory.create_job_role(), leave_type)
        response = self.client.get(f'/api/v1/leave-policies/?job_role={role.id}')
        self.assertEqual(len(response.data), 1)
        self.assertEqual(response.data[0]['job_role_title'], role.title)


class LeaveBalanceTests(TestCase):
    """Test balance initialization and proration"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)
        self.year = today().year
        self.role = TestDataFactory.create_job_role(title='Account Manager')
        self.casual = TestDataFactory.create_leave_type(code='CL', category='CASUAL')
        self.sick = TestDataFactory.create_leave_type(code='SL', category='SICK')
        TestDataFactory.create_leave_policy(self.role, self.casual, annual_quota=Decimal('8.00'))

    def test_prorated_quota(self):
        self.assertEqual(prorated_quota(Decimal('12'), date(2024, 7, 10), 2024), Decimal('6.00'))
        self.assertEqual(prorated_quota(Decimal('12'), date(2023, 7, 10), 2024), Decimal('12.00'))
        self.assertEqual(prorated_quota(Decimal('10'), None, 2024), Decimal('10.00'))

    def test_policy_quota_then_category_default(self):
        member = TestDataFactory.create_team_member(role_title='account manager', joined_date=date(2015, 1, 1))
        initialize_leave_balances_for_member(member, self.year)
        self.assertEqual(LeaveBalance.objects.get(team_member=member, leave_type=self.casual).total_quota,
                         Decimal('8.00'))
        self.assertEqual(LeaveBalance.objects.get(team_member=member, leave_type=self.sick).total_quota,
                         Decimal('10.00'))

    def test_initialize_is_idempotent(self):
        member = TestDataFactory.create_team_member()
        response = self.client.post(f'/api/v1/leave-balances/initialize/{member.id}/')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(len(response.data), 2)
        response = self.client.post(f'/api/v1/leave-balances/initialize/{member.id}/')
        self.assertEqual(response.data, [])

    def test_reinitialize_applies_new_policy_and_keeps_usage(self):
        member = TestDataFactory.create_team_member(role_title='Account Manager', joined_date=date(2015, 1, 1))
        initialize_leave_balances_for_member(member, self.year)
        leave_request = LeaveRequest.objects.create(
            team_member=member, leave_type=self.casual, start_date=date(self.year, 1, 5),
            end_date=date(self.year, 1, 6), total_days=Decimal('2.00'), status='APPROVED'
        )
        LeavePolicy.objects.filter(job_role=self.role, leave_type=self.casual).update(annual_quota=Decimal('15.00'))

        response = self.client.post(f'/api/v1/leave-balances/reinitialize/{member.id}/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        casual = LeaveBalance.objects.get(team_member=member, leave_type=self.casual, year=self.year)
        self.assertEqual(casual.total_quota, Decimal('15.00'))
        self.assertEqual(casual.used, leave_request.total_days)
        self.assertEqual(casual.available, Decimal('13.00'))

    def test_reinitialize_all_active_members(self):
        TestDataFactory.create_team_member()
        TestDataFactory.create_team_member(status='INACTIVE')
        response = self.client.post('/api/v1/leave-balances/reinitialize-all/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data, {'members': 1, 'balances': 2, 'year': self.year})

    def test_balance_list_filter(self):
        member = TestDataFactory.create_team_member()
        initialize_leave_balances_for_member(member, self.year)
        initialize_leave_balances_for_member(TestDataFactory.create_team_member(), self.year)
        response = self.client.get(f'/api/v1/leave-balances/?team_member={member.id}&year={self.year}')
        self.assertEqual(len(response.data), 2)


class LeaveRequestTests(TestCase):
    """Test availability checks and the request workflow"""

    def setUp(self):
        self.user = TestDataFactory.create_user(name='HR Lead')
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)
        self.year = today().year
        self.leave_type = TestDataFactory.create_leave_type(code='CL', name='Casual Leave', category='CASUAL')
        self.member = TestDataFactory.create_team_member(joined_date=date(2015, 1, 1))
        initialize_leave_balances_for_member(self.member, self.year)

    def _request(self, days, start_day=10):
        data = {
            'team_member': self.member.id,
            'leave_type': self.leave_type.id,
            'start_date': date(self.year, 6, start_day).isoformat(),
            'end_date': date(self.year, 6, start_day + 4).isoformat(),
            'total_days': str(days),
            'reason': 'Family function',
        }
        return self.client.post('/api/v1/leave-requests/', data, format='json')

    def _balance(self):
        return LeaveBalance.objects.get(team_member=self.member, leave_type=self.leave_type, year=self.year)

    def test_check_availability(self):
        result = check_availability(self.member.id, self.leave_type.id, Decimal('2'))
        self.assertTrue(result['available'])
        self.assertEqual(result['balance'], 12.0)
        self.assertEqual(result['message'],
                         'You have 12 Casual Leave days available. After this request, you will have 10 days remaining.')

        result = check_availability(self.member.id, self.leave_type.id, Decimal('14.5'))
        self.assertFalse(result['available'])
        self.assertEqual(result['shortfall'], 2.5)
        self.assertIn('You are short by 2.5 days', result['message'])

    def test_check_availability_unknown_member(self):
        result = check_availability(99999, self.leave_type.id, Decimal('1'))
        self.assertFalse(result['available'])
        self.assertEqual(result['message'], 'Team member not found')

    def test_check_availability_endpoint(self):
        data = {'team_member': self.member.id, 'leave_type': self.leave_type.id, 'requested_days': '3'}
        response = self.client.post('/api/v1/leave-requests/check-availability/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(response.data['available'])
        self.assertEqual(response.data['leave_type_name'], 'Casual Leave')

    def test_create_request_holds_days_as_pending(self):
        response = self._request(3)
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['status'], 'PENDING')
        balance = self._balance()
        self.assertEqual(balance.pending, Decimal('3.00'))
        self.assertEqual(balance.available, Decimal('9.00'))

    def test_request_over_balance_refused(self):
        response = self._request(13)
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('Insufficient Casual Leave balance', response.data['error'])
        self.assertFalse(LeaveRequest.objects.exists())

    def test_pending_days_count_against_new_requests(self):
        self._request(10)
        response = self._request(3, start_day=20)
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_end_before_start(self):
        data = {'team_member': self.member.id, 'leave_type': self.leave_type.id,
                'start_date': date(self.year, 6, 10).isoformat(), 'end_date': date(self.year, 6, 1).isoformat(),
                'total_days': '1'}
        response = self.client.post('/api/v1/leave-requests/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('end_date', response.data)

    def test_approve_then_cancel(self):
        request_id = self._request(3).data['id']
        response = self.client.post(f'/api/v1/leave-requests/{request_id}/approve/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['status'], 'APPROVED')
        self.assertEqual(response.data['approver_name'], 'HR Lead')
        balance = self._balance()
        self.assertEqual(balance.used, Decimal('3.00'))
        self.assertEqual(balance.pending, Decimal('0.00'))
        self.assertEqual(balance.available, Decimal('9.00'))

        response = self.client.post(f'/api/v1/leave-requests/{request_id}/cancel/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(self._balance().available, Decimal('12.00'))

    def test_reject_is_terminal(self):
        request_id = self._request(2).data['id']
        response = self.client.post(f'/api/v1/leave-requests/{request_id}/reject/',
                                    {'reason': 'Client launch week'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['rejection_reason'], 'Client launch week')
        self.assertEqual(self._balance().available, Decimal('12.00'))

        response = self.client.post(f'/api/v1/leave-requests/{request_id}/approve/')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['error'], 'Cannot change a rejected leave request to approved.')

    def test_delete_request_restores_balance(self):
        request_id = self._request(4).data['id']
        response = self.client.delete(f'/api/v1/leave-requests/{request_id}/')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertEqual(self._balance().pending, Decimal('0.00'))

    def test_filter_by_status(self):
        self._request(1)
        second = self._request(1, start_day=20).data['id']
        self.client.post(f'/api/v1/leave-requests/{second}/approve/')
        response = self.client.get('/api/v1/leave-requests/?status=APPROVED')
        self.assertEqual([r['id'] for r in response.data], [second])

    def test_leave_type_in_use_cannot_be_deleted(self):
        self._request(1)
        response = self.client.delete(f'/api/v1/leave-types/{self.leave_type.id}/')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('Deactivate it instead', response.data['error'])
