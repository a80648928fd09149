"""
Test utilities and factories for creating test data
"""
from django.contrib.auth import get_user_model
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from backend.core.models import CompanyProfile
from backend.core.utils import today
from backend.clients.models import Client, Project
from backend.billing.services import create_invoice, record_payment
from backend.catalog.models import Service
from backend.expenses.models import Vendor, ExpenseCategory, Expense
from backend.team.models import JobRole, TeamMember, SalaryPayment
from backend.leave.models import LeaveType, LeavePolicy
from backend.proposals.models import Proposal
from backend.proposals.services import save_proposal
from backend.assets.models import FixedAsset
from decimal import Decimal
import random
import string

User = get_user_model()


class TestDataFactory:
    """Factory class for creating test data"""

    @staticmethod
    def random_string(length=10):
        """Generate a random string"""
        return ''.join(random.choices(string.ascii_letters + string.digits, k=length))

    @staticmethod
    def create_user(username=None, email=None, password='testpass123', role='STAFF', name=None,
                    is_staff=False, is_superuser=False):
        """Create a test user"""
        if not username:
            username = f'testuser_{TestDataFactory.random_string(6)}'
        if not email:
            email = f'{username}@test.com'
        return User.objects.create_user(
            username=username,
            email=email,
            password=password,
            role=role,
            name=name or username,
            is_staff=is_staff,
            is_superuser=is_superuser
        )

    @staticmethod
    def create_admin(**kwargs):
        """Create a user with the ADMIN role"""
        return TestDataFactory.create_user(role='ADMIN', **kwargs)

    @staticmethod
    def create_company_profile(company_name='Acme Digital', state='Karnataka', tax_id='29ABCDE1234F1Z5'):
        """Create the company profile"""
        return CompanyProfile.objects.create(
            company_name=company_name,
            state=state,
            tax_id=tax_id,
            email='billing@acme.test'
        )

    @staticmethod
    def create_client(name=None, email=None, state='Karnataka', gstin='', status='ACTIVE'):
        """Create a test client"""
        if not name:
            name = f'Client_{TestDataFactory.random_string(6)}'
        return Client.objects.create(
            name=name,
            contact_name=f'Contact {name}',
            email=email or f'{name.lower()}@test.com',
            state=state,
            gstin=gstin,
            status=status
        )

    @staticmethod
    def create_project(client=None, name=None, status='ACTIVE'):
        """Create a test project"""
        if not client:
            client = TestDataFactory.create_client()
        return Project.objects.create(
            client=client,
            name=name or f'Project_{TestDataFactory.random_string(6)}',
            status=status
        )

    @staticmethod
    def create_invoice(client=None, items=None, issue_date=None, due_date=None, tax_rate=None,
                       status='SENT', user=None, project=None):
        """Create an invoice with line items; totals are computed by the billing service"""
        if not client:
            client = TestDataFactory.create_client()
        if items is None:
            items = [{'description': 'SEO retainer', 'hsn_sac_code': '998361',
                      'quantity': Decimal('1.00'), 'unit_price': Decimal('1000.00')}]
        issue_date = issue_date or today()
        data = {
            'client': client,
            'project': project,
            'issue_date': issue_date,
            'due_date': due_date or issue_date,
            'status': status,
        }
        if tax_rate is not None:
            data['tax_rate'] = tax_rate
        return create_invoice(data, items, user=user)

    @staticmethod
    def create_payment(invoice, amount, payment_date=None, method='BANK_TRANSFER'):
        """Record a payment against an invoice"""
        payment, _ = record_payment(invoice.pk, {
            'amount': Decimal(str(amount)),
            'payment_date': payment_date or today(),
            'method': method,
        })
        return payment

    @staticmethod
    def create_service(name=None, category='SEO', default_price=Decimal('5000.00')):
        """Create a catalog service"""
        return Service.objects.create(
            name=name or f'Service_{TestDataFactory.random_string(6)}',
            category=category,
            default_price=default_price
        )

    @staticmethod
    def create_vendor(name=None, gstin='', category='SOFTWARE'):
        """Create a test vendor"""
        return Vendor.objects.create(
            name=name or f'Vendor_{TestDataFactory.random_string(6)}',
            gstin=gstin,
            category=category
        )

    @staticmethod
    def create_expense_category(code=None, name=None, group='Operations'):
        """Create a test expense category"""
        if not code:
            code = TestDataFactory.random_string(6).upper()
        return ExpenseCategory.objects.create(
            code=code,
            name=name or f'Category {code}',
            group=group
        )

    @staticmethod
    def create_expense(amount=Decimal('100.00'), category=None, vendor=None, status='PAID',
                       expense_date=None, tax_amount=Decimal('0.00'), description='Office supplies'):
        """Create a test expense"""
        if not category:
            category = TestDataFactory.create_expense_category()
        expense_date = expense_date or today()
        return Expense.objects.create(
            category=category,
            vendor=vendor,
            description=description,
            amount=Decimal(str(amount)),
            tax_amount=Decimal(str(tax_amount)),
            expense_date=expense_date,
            paid_date=expense_date if status == 'PAID' else None,
            status=status
        )

    @staticmethod
    def create_job_role(title=None, department='Marketing'):
        """Create a test job role"""
        return JobRole.objects.create(
            title=title or f'Role_{TestDataFactory.random_string(6)}',
            department=department
        )

    @staticmethod
    def create_team_member(name=None, email=None, role_title='', joined_date=None, base_salary=Decimal('50000.00'),
                           status='ACTIVE'):
        """Create a test team member"""
        if not name:
            name = f'Member_{TestDataFactory.random_string(6)}'
        return TeamMember.objects.create(
            name=name,
            email=email or f'{name.lower()}@test.com',
            role_title=role_title,
            joined_date=joined_date,
            base_salary=base_salary,
            status=status
        )

    @staticmethod
    def create_salary(team_member=None, month=None, amount=Decimal('50000.00'), status='PAID', payment_date=None):
        """Create a salary payment record"""
        if not team_member:
            team_member = TestDataFactory.create_team_member()
        month = month or today().strftime('%Y-%m')
        if status == 'PAID' and payment_date is None:
            payment_date = today()
        return SalaryPayment.objects.create(
            team_member=team_member,
            month=month,
            amount=Decimal(str(amount)),
            status=status,
            payment_date=payment_date
        )

    @staticmethod
    def create_leave_type(code=None, name=None, category='CASUAL', is_active=True):
        """Create a test leave type"""
        if not code:
            code = TestDataFactory.random_string(4).upper()
        return LeaveType.objects.create(
            code=code,
            name=name or f'Leave {code}',
            category=category,
            is_active=is_active
        )

    @staticmethod
    def create_leave_policy(job_role, leave_type, annual_quota=Decimal('12.00')):
        """Create a leave policy"""
        return LeavePolicy.objects.create(
            job_role=job_role,
            leave_type=leave_type,
            annual_quota=annual_quota
        )

    @staticmethod
    def create_proposal(client=None, services=None, status='DRAFT', user=None, **extra):
        """Create a proposal; totals are computed by the pricing service"""
        if not client:
            client = TestDataFactory.create_client()
        if services is None:
            services = [{'name': 'SEO', 'price': 10000, 'deliverables': ['Keyword research']}]
        data = {'client': client, 'title': 'Growth Marketing Proposal', 'services': services, **extra}
        proposal = save_proposal(data, user=user)
        if status != 'DRAFT':
            Proposal.objects.filter(pk=proposal.pk).update(status=status)
            proposal.refresh_from_db()
        return proposal

    @staticmethod
    def create_fixed_asset(name=None, purchase_value=Decimal('100000.00'), purchase_date=None, method='SLM',
                           rate=Decimal('0.00'), useful_life_years=5, salvage_value=Decimal('0.00'),
                           category='Computers', status='ACTIVE'):
        """Create a fixed asset"""
        return FixedAsset.objects.create(
            name=name or f'Asset_{TestDataFactory.random_string(6)}',
            category=category,
            purchase_date=purchase_date or today(),
            purchase_value=Decimal(str(purchase_value)),
            depreciation_method=method,
            depreciation_rate=Decimal(str(rate)),
            useful_life_years=useful_life_years,
            salvage_value=Decimal(str(salvage_value)),
            status=status
        )


class AuthenticatedAPIClient(APIClient):
    """APIClient with authentication helper"""

    def authenticate_user(self, user):
        """Authenticate the client with a user"""
        refresh = RefreshToken.for_user(user)
        self.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
        return self

    def logout(self):
        """Remove authentication"""
        self.credentials()
