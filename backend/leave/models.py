from decimal import Decimal

from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models

from backend.core.exceptions import BusinessRuleError
from backend.team.models import JobRole, TeamMember


class LeaveType(models.Model):
    CATEGORY_CHOICES = [
        ('CASUAL', 'Casual'),
        ('SICK', 'Sick'),
        ('EARNED', 'Earned'),
        ('MATERNITY', 'Maternity'),
        ('PATERNITY', 'Paternity'),
        ('UNPAID', 'Unpaid'),
        ('COMPENSATORY', 'Compensatory'),
        ('OTHER', 'Other'),
    ]

    name = models.CharField(max_length=100)
    code = models.CharField(max_length=10, unique=True)
    category = models.CharField(max_length=20, choices=CATEGORY_CHOICES, default='OTHER')
    description = models.TextField(blank=True)
    is_paid = models.BooleanField(default=True)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'leave_types'
        ordering = ['name']

    def __str__(self):
        return f"{self.name} ({self.code})"

    def save(self, *args, **kwargs):
        self.code = (self.code or '').strip().upper()
        super().save(*args, **kwargs)

    def ensure_deletable(self):
        count = self.requests.count()
        if count:
            raise BusinessRuleError(
                f"Cannot delete leave type '{self.name}': it is used by {count} leave request(s). "
                f"Deactivate it instead."
            )


class LeavePolicy(models.Model):
    """Annual quota of a leave type for a job role"""
    job_role = models.ForeignKey(JobRole, on_delete=models.CASCADE, related_name='leave_policies')
    leave_type = models.ForeignKey(LeaveType, on_delete=models.CASCADE, related_name='policies')
    annual_quota = models.DecimalField(max_digits=6, decimal_places=2, validators=[MinValueValidator(Decimal('0.00'))])
    carry_forward_limit = models.DecimalField(max_digits=6, decimal_places=2, default=Decimal('0.00'),
                                              validators=[MinValueValidator(Decimal('0.00'))])
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'leave_policies'
        unique_together = ['job_role', 'leave_type']
        ordering = ['job_role__title', 'leave_type__name']
        verbose_name_plural = 'Leave policies'

    def __str__(self):
        return f"{self.job_role.title} - {self.leave_type.code}: {self.annual_quota}"


class LeaveBalance(models.Model):
    team_member = models.ForeignKey(TeamMember, on_delete=models.CASCADE, related_name='leave_balances')
    leave_type = models.ForeignKey(LeaveType, on_delete=models.CASCADE, related_name='balances')
    year = models.PositiveIntegerField()
    total_quota = models.DecimalField(max_digits=6, decimal_places=2, default=Decimal('0.00'))
    carry_forward = models.DecimalField(max_digits=6, decimal_places=2, default=Decimal('0.00'))
    used = models.DecimalField(max_digits=6, decimal_places=2, default=Decimal('0.00'))
    pending = models.DecimalField(max_digits=6, decimal_places=2, default=Decimal('0.00'))
    available = models.DecimalField(max_digits=6, decimal_places=2, default=Decimal('0.00'))
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'leave_balances'
        unique_together = ['team_member', 'leave_type', 'year']
        ordering = ['team_member__name', 'leave_type__name']

    def __str__(self):
        return f"{self.team_member.name} - {self.leave_type.code} {self.year}: {self.available}"

    def compute_available(self):
        return max(Decimal('0.00'), self.total_quota + self.carry_forward - self.used - self.pending)


class LeaveRequest(models.Model):
    STATUS_CHOICES = [
        ('PENDING', 'Pending'),
        ('APPROVED', 'Approved'),
        ('REJECTED', 'Rejected'),
        ('CANCELLED', 'Cancelled'),
    ]
    # REJECTED and CANCELLED are terminal
    ALLOWED_TRANSITIONS = {
        'PENDING': {'APPROVED', 'REJECTED', 'CANCELLED'},
        'APPROVED': {'CANCELLED'},
    }

    team_member = models.ForeignKey(TeamMember, on_delete=models.CASCADE, related_name='leave_requests')
    leave_type = models.ForeignKey(LeaveType, on_delete=models.PROTECT, related_name='requests')
    start_date = models.DateField()
    end_date = models.DateField()
    total_days = models.DecimalField(max_digits=6, decimal_places=2, validators=[MinValueValidator(Decimal('0.01'))])
    reason = models.TextField(blank=True)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='PENDING')
    approved_by = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True,
                                    related_name='approved_leave_requests')
    approved_at = models.DateTimeField(null=True, blank=True)
    rejection_reason = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'leave_requests'
        ordering = ['-start_date', '-id']
        indexes = [
            models.Index(fields=['team_member', 'leave_type', 'status'], name='leave_req_member_type_idx'),
        ]

    def __str__(self):
        return f"{self.team_member.name} - {self.leave_type.code} {self.start_date} ({self.status})"

    def can_transition_to(self, new_status):
        return new_status in self.ALLOWED_TRANSITIONS.get(self.status, set())
