"""
Comprehensive test suite for Proposals module
Tests: Pricing, Proposal CRUD and status timestamps, conversion to contract, Contracts
"""
from decimal import Decimal

from django.test import TestCase
from rest_framework import status

from backend.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from backend.core.utils import today
from backend.proposals.models import Contract
from backend.proposals.pricing import calculate_pricing


class PricingTests(TestCase):
    """Test proposal pricing rules"""

    def test_percentage_discount_before_tax(self):
        pricing = calculate_pricing(
            [{'name': 'SEO', 'price': 10000}, {'name': 'Social', 'price': '5000'}],
            discount=Decimal('10'), discount_type='PERCENTAGE', tax_rate=Decimal('18'),
            payment_schedule=[{'milestone': 'Kickoff', 'percentage': 50}, {'milestone': 'Delivery', 'percentage': 50}],
        )
        self.assertEqual(pricing['subtotal'], Decimal('15000.00'))
        self.assertEqual(pricing['discount_amount'], Decimal('1500.00'))
        self.assertEqual(pricing['tax_amount'], Decimal('2430.00'))
        self.assertEqual(pricing['total_amount'], Decimal('15930.00'))
        self.assertEqual([m['amount'] for m in pricing['payment_schedule']], [7965.0, 7965.0])
        self.assertEqual(pricing['payment_schedule'][0]['milestone'], 'Kickoff')

    def test_fixed_discount_example(self):
        pricing = calculate_pricing([{'name': 'Retainer', 'price': 100000}], discount=Decimal('10000'),
                                    discount_type='FIXED', tax_rate=Decimal('18'))
        self.assertEqual(pricing['after_discount'], Decimal('90000.00'))
        self.assertEqual(pricing['tax_amount'], Decimal('16200.00'))
        self.assertEqual(pricing['total_amount'], Decimal('106200.00'))

    def test_fixed_discount(self):
        pricing = calculate_pricing([{'name': 'Design', 'price': 2000}], discount=Decimal('500'), tax_rate=Decimal('0'))
        self.assertEqual(pricing['after_discount'], Decimal('1500.00'))
        self.assertEqual(pricing['total_amount'], Decimal('1500.00'))

    def test_rounds_half_up(self):
        pricing = calculate_pricing(
            [{'name': 'A', 'price': '333.33'}, {'name': 'B', 'price': '333.33'}, {'name': 'C', 'price': '333.33'}],
            discount=Decimal('12.5'), discount_type='PERCENTAGE', tax_rate=Decimal('18'),
        )
        self.assertEqual(pricing['subtotal'], Decimal('999.99'))
        self.assertEqual(pricing['discount_amount'], Decimal('125.00'))
        self.assertEqual(pricing['tax_amount'], Decimal('157.50'))
        self.assertEqual(pricing['total_amount'], Decimal('1032.49'))

    def test_non_finite_price_counts_as_zero(self):
        pricing = calculate_pricing([{'name': 'A', 'price': 'NaN'}, {'name': 'B', 'price': '100'}], tax_rate='0')
        self.assertEqual(pricing['total_amount'], Decimal('100.00'))

    def test_empty_services(self):
        pricing = calculate_pricing([])
        self.assertEqual(pricing['total_amount'], Decimal('0.00'))


class ProposalAPITests(TestCase):
    """Test Proposal API endpoints"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)
        self.record = TestDataFactory.create_client(name='Green Leaf')

    def _payload(self, **overrides):
        data = {
            'client': self.record.id,
            'title': 'Q3 Growth Plan',
            'services': [
                {'service_type': 'SEO', 'name': 'SEO', 'price': 10000, 'deliverables': ['Audit', 'Backlinks']},
                {'service_type': 'SOCIAL_MEDIA', 'name': 'Social', 'price': 5000},
            ],
            'discount': '10.00',
            'discount_type': 'PERCENTAGE',
            'payment_schedule': [{'milestone': 'Advance', 'percentage': 40}],
        }
        data.update(overrides)
        return data

    def test_create_proposal_computes_totals(self):
        """Test client-sent totals are ignored and recomputed"""
        response = self.client.post('/api/v1/proposals/', self._payload(total_amount='1.00'), format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['proposal_number'], 'PROP-0001')
        self.assertEqual(response.data['status'], 'DRAFT')
        self.assertEqual(response.data['subtotal'], Decimal('15000.00'))
        self.assertEqual(response.data['discount_amount'], Decimal('1500.00'))
        self.assertEqual(response.data['total_amount'], Decimal('15930.00'))
        self.assertEqual(response.data['payment_schedule'][0]['amount'], 6372.0)

    def test_service_without_price_rejected(self):
        response = self.client.post('/api/v1/proposals/', self._payload(services=[{'name': 'SEO'}]), format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('services', response.data)

    def test_bad_schedule_percentage(self):
        response = self.client.post('/api/v1/proposals/',
                                    self._payload(payment_schedule=[{'milestone': 'All', 'percentage': 120}]),
                                    format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('payment_schedule', response.data)

    def test_non_finite_amounts_rejected(self):
        """Test NaN and Infinity prices or percentages are validation errors"""
        response = self.client.post('/api/v1/proposals/',
                                    self._payload(services=[{'name': 'SEO', 'price': 'Infinity'}]), format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('services', response.data)

        response = self.client.post('/api/v1/proposals/',
                                    self._payload(payment_schedule=[{'milestone': 'All', 'percentage': 'NaN'}]),
                                    format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('payment_schedule', response.data)

        for price in ('NaN', '-Infinity'):
            response = self.client.post('/api/v1/proposals/preview-pricing/',
                                        {'services': [{'name': 'SEO', 'price': price}]}, format='json')
            self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
            self.assertIn('services', response.data)

    def test_percentage_discount_over_100(self):
        response = self.client.post('/api/v1/proposals/', self._payload(discount='150.00'), format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('discount', response.data)

    def test_update_recomputes_totals(self):
        proposal_id = self.client.post('/api/v1/proposals/', self._payload(), format='json').data['id']
        response = self.client.patch(f'/api/v1/proposals/{proposal_id}/',
                                     {'discount': '0.00', 'tax_rate': '0.00'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['total_amount'], Decimal('15000.00'))
        self.assertEqual(response.data['proposal_number'], 'PROP-0001')

    def test_preview_pricing(self):
        data = {'services': [{'name': 'Content', 'price': 8000}], 'discount': '1000.00'}
        response = self.client.post('/api/v1/proposals/preview-pricing/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['after_discount'], Decimal('7000.00'))
        self.assertEqual(response.data['total_amount'], Decimal('8260.00'))

    def test_status_timestamps(self):
        proposal = TestDataFactory.create_proposal(client=self.record)
        response = self.client.post(f'/api/v1/proposals/{proposal.id}/status/', {'status': 'SENT'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIsNotNone(response.data['sent_at'])
        self.assertIsNone(response.data['responded_at'])

        response = self.client.post(f'/api/v1/proposals/{proposal.id}/status/', {'status': 'ACCEPTED'}, format='json')
        self.assertIsNotNone(response.data['responded_at'])

    def test_filter_and_search(self):
        TestDataFactory.create_proposal(client=self.record, title='Brand refresh')
        TestDataFactory.create_proposal(status='SENT')
        response = self.client.get('/api/v1/proposals/?search=brand')
        self.assertEqual([p['title'] for p in response.data], ['Brand refresh'])
        response = self.client.get('/api/v1/proposals/?status=SENT')
        self.assertEqual(len(response.data), 1)


class ContractTests(TestCase):
    """Test contracts and proposal conversion"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)
        self.record = TestDataFactory.create_client()

    def test_convert_accepted_proposal(self):
        proposal = TestDataFactory.create_proposal(
            client=self.record, status='ACCEPTED',
            services=[{'name': 'SEO', 'price': 10000, 'description': 'Organic growth',
                       'deliverables': ['Keyword research', 'Monthly report']}],
            payment_terms='50% advance',
        )
        response = self.client.post(f'/api/v1/proposals/{proposal.id}/convert-to-contract/')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['contract_number'], 'CONTRACT-0001')
        self.assertEqual(response.data['status'], 'DRAFT')
        self.assertEqual(response.data['contract_value'], proposal.total_amount)
        self.assertEqual(response.data['scope_of_work'], 'SEO: Organic growth')
        self.assertEqual(response.data['deliverables'], '- Keyword research\n- Monthly report')
        self.assertEqual(response.data['payment_terms'], '50% advance')

        response = self.client.post(f'/api/v1/proposals/{proposal.id}/convert-to-contract/')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('already converted to contract CONTRACT-0001', response.data['error'])

    def test_convert_requires_accepted(self):
        proposal = TestDataFactory.create_proposal(client=self.record, status='SENT')
        response = self.client.post(f'/api/v1/proposals/{proposal.id}/convert-to-contract/')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertFalse(Contract.objects.exists())

    def test_create_signed_contract_sets_signed_date(self):
        data = {'client': self.record.id, 'title': 'Retainer', 'contract_value': '120000.00', 'status': 'SIGNED'}
        response = self.client.post('/api/v1/contracts/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['signed_date'], today().isoformat())

    def test_proposal_must_match_client(self):
        proposal = TestDataFactory.create_proposal()
        data = {'client': self.record.id, 'proposal': proposal.id, 'title': 'Mismatch'}
        response = self.client.post('/api/v1/contracts/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('proposal', response.data)

    def test_status_change_to_signed(self):
        data = {'client': self.record.id, 'title': 'Retainer'}
        contract_id = self.client.post('/api/v1/contracts/', data, format='json').data['id']
        response = self.client.post(f'/api/v1/contracts/{contract_id}/status/', {'status': 'SIGNED'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['signed_date'], today().isoformat())

    def test_client_with_contract_cannot_be_deleted(self):
        self.client.post('/api/v1/contracts/', {'client': self.record.id, 'title': 'Retainer'}, format='json')
        response = self.client.delete(f'/api/v1/clients/{self.record.id}/')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('1 contract(s)', response.data['error'])
