import re
from decimal import Decimal

from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator
from django.db import models

from backend.core.exceptions import BusinessRuleError
from backend.core.utils import generate_onboarding_token
from backend.expenses.models import PAYMENT_METHOD_CHOICES

MONTH_RE = re.compile(r'^\d{4}-\d{2}$')


def validate_salary_month(value):
    """Month in YYYY-MM form with a real month number"""
    if not MONTH_RE.match(value or '') or not 1 <= int(value[5:7]) <= 12:
        raise ValidationError('Month must be in YYYY-MM format (e.g. 2024-03).')


class JobRole(models.Model):
    title = models.CharField(max_length=255, unique=True)
    department = models.CharField(max_length=100, blank=True)
    description = models.TextField(blank=True)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'job_roles'
        ordering = ['title']

    def __str__(self):
        return self.title


class TeamMember(models.Model):
    EMPLOYMENT_TYPE_CHOICES = [
        ('FULL_TIME', 'Full Time'),
        ('PART_TIME', 'Part Time'),
        ('CONTRACT', 'Contract'),
        ('INTERN', 'Intern'),
    ]
    STATUS_CHOICES = [
        ('ACTIVE', 'Active'),
        ('INACTIVE', 'Inactive'),
    ]

    name = models.CharField(max_length=255)
    email = models.EmailField(unique=True)
    phone = models.CharField(max_length=30, blank=True)
    role_title = models.CharField(max_length=255, blank=True, help_text="Matched against JobRole.title for leave policies")
    employment_type = models.CharField(max_length=20, choices=EMPLOYMENT_TYPE_CHOICES, default='FULL_TIME')
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='ACTIVE')
    base_salary = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0.00'),
                                      validators=[MinValueValidator(Decimal('0.00'))])
    joined_date = models.DateField(null=True, blank=True)
    exit_date = models.DateField(null=True, blank=True)
    notes = models.TextField(blank=True)
    onboarding_token = models.CharField(max_length=32, unique=True, default=generate_onboarding_token)
    onboarding_data = models.JSONField(default=dict, blank=True)
    onboarding_completed_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'team_members'
        ordering = ['name']

    def __str__(self):
        return self.name

    def ensure_deletable(self):
        count = self.salary_payments.count()
        if count:
            raise BusinessRuleError(
                f"Cannot delete team member '{self.name}': they have {count} salary record(s). "
                f"Mark them inactive instead."
            )

    def regenerate_onboarding_token(self):
        self.onboarding_token = generate_onboarding_token()
        self.save(update_fields=['onboarding_token', 'updated_at'])
        return self.onboarding_token


class SalaryPayment(models.Model):
    STATUS_CHOICES = [
        ('PENDING', 'Pending'),
        ('PAID', 'Paid'),
    ]

    team_member = models.ForeignKey(TeamMember, on_delete=models.PROTECT, related_name='salary_payments')
    month = models.CharField(max_length=7, validators=[validate_salary_month], help_text="YYYY-MM")
    payment_date = models.DateField(null=True, blank=True)
    amount = models.DecimalField(max_digits=12, decimal_places=2, validators=[MinValueValidator(Decimal('0.01'))])
    currency = models.CharField(max_length=3, default='INR')
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='PENDING')
    payment_method = models.CharField(max_length=20, choices=PAYMENT_METHOD_CHOICES, blank=True)
    reference = models.CharField(max_length=200, blank=True)
    notes = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'salary_payments'
        ordering = ['-month', 'team_member__name']
        indexes = [
            models.Index(fields=['status', 'month'], name='salary_status_month_idx'),
        ]

    def __str__(self):
        return f"{self.team_member.name} - {self.month}"

    def mark_paid(self, payment_date, payment_method, reference=''):
        if self.status == 'PAID':
            raise BusinessRuleError(f"Salary for {self.month} is already paid.")
        self.status = 'PAID'
        self.payment_date = payment_date
        self.payment_method = payment_method
        if reference:
            self.reference = reference
        self.save(update_fields=['status', 'payment_date', 'payment_method', 'reference', 'updated_at'])
