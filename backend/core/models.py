from django.contrib.auth.models import AbstractUser
from django.db import models


class User(AbstractUser):
    """Agency user - logs in with email"""
    ROLE_CHOICES = [
        ('ADMIN', 'Admin'),
        ('MANAGER', 'Manager'),
        ('STAFF', 'Staff'),
    ]

    name = models.CharField(max_length=255, blank=True)
    email = models.EmailField(unique=True)
    role = models.CharField(max_length=20, choices=ROLE_CHOICES, default='STAFF')
    phone = models.CharField(max_length=20, blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    USERNAME_FIELD = 'email'
    REQUIRED_FIELDS = ['username']

    class Meta:
        db_table = 'users'

    def __str__(self):
        return self.name or self.email

    @property
    def is_admin_role(self):
        return self.is_superuser or self.role == 'ADMIN'


class AuditLog(models.Model):
    """Audit log for critical operations"""
    ACTION_CHOICES = [
        ('create', 'Create'),
        ('update', 'Update'),
        ('delete', 'Delete'),
        ('status_change', 'Status Change'),
        ('payment_add', 'Payment Added'),
        ('mark_paid', 'Marked Paid'),
        ('leave_approve', 'Leave Approved'),
        ('leave_reject', 'Leave Rejected'),
        ('leave_cancel', 'Leave Cancelled'),
        ('settings_update', 'Settings Updated'),
        ('token_regenerate', 'Token Regenerated'),
        ('export', 'Report Export'),
    ]

    user = models.ForeignKey(User, on_delete=models.SET_NULL, null=True, related_name='audit_logs')
    action = models.CharField(max_length=50, choices=ACTION_CHOICES)
    model_name = models.CharField(max_length=100)
    object_id = models.CharField(max_length=100)
    object_name = models.CharField(max_length=255, blank=True, null=True, help_text="Human-readable name of the object (e.g., client name)")
    object_reference = models.CharField(max_length=255, blank=True, null=True, help_text="Reference identifier (e.g., invoice number, proposal number)")
    changes = models.JSONField(default=dict, blank=True)
    ip_address = models.GenericIPAddressField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'audit_logs'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['-created_at'], name='audit_created_idx'),
            models.Index(fields=['action'], name='audit_action_idx'),
            models.Index(fields=['model_name'], name='audit_model_idx'),
            models.Index(fields=['object_reference'], name='audit_ref_idx'),
        ]

    def __str__(self):
        return f"{self.action} {self.model_name}#{self.object_id}"


class SingletonModel(models.Model):
    """A model with at most one row"""

    class Meta:
        abstract = True

    @classmethod
    def load(cls):
        """Return the single row, creating an empty one if needed"""
        obj = cls.objects.first()
        if obj is None:
            obj = cls.objects.create()
        return obj


class CompanyProfile(models.Model):
    """Company details printed on invoices, proposals and contracts"""
    company_name = models.CharField(max_length=255)
    logo_url = models.TextField(blank=True)
    address_line1 = models.CharField(max_length=255, blank=True)
    address_line2 = models.CharField(max_length=255, blank=True)
    city = models.CharField(max_length=100, blank=True)
    state = models.CharField(max_length=100, blank=True)
    postal_code = models.CharField(max_length=20, blank=True)
    country = models.CharField(max_length=100, blank=True)
    email = models.EmailField(blank=True)
    phone = models.CharField(max_length=30, blank=True)
    tax_id = models.CharField(max_length=30, blank=True, help_text="GSTIN")
    bank_name = models.CharField(max_length=255, blank=True)
    bank_account_number = models.CharField(max_length=50, blank=True)
    bank_ifsc_code = models.CharField(max_length=20, blank=True)
    bank_account_holder_name = models.CharField(max_length=255, blank=True)
    upi_id = models.CharField(max_length=100, blank=True)
    payment_link = models.URLField(blank=True)
    payment_gateway_details = models.TextField(blank=True)
    invoice_terms = models.TextField(blank=True)
    payment_notes = models.TextField(blank=True)
    authorized_signatory_name = models.CharField(max_length=255, blank=True)
    authorized_signatory_title = models.CharField(max_length=255, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'company_profiles'

    def __str__(self):
        return self.company_name


class ApiSettings(SingletonModel):
    """Keys for the AI and email providers"""
    openai_api_key = models.CharField(max_length=255, blank=True)
    gemini_api_key = models.CharField(max_length=255, blank=True)
    resend_api_key = models.CharField(max_length=255, blank=True)
    resend_from_email = models.EmailField(blank=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'api_settings'

    def __str__(self):
        return 'API Settings'


class PaymentGatewaySettings(SingletonModel):
    PROVIDER_CHOICES = [
        ('STRIPE', 'Stripe'),
        ('RAZORPAY', 'Razorpay'),
    ]

    active_provider = models.CharField(max_length=20, choices=PROVIDER_CHOICES, blank=True)
    is_test_mode = models.BooleanField(default=True)
    stripe_public_key = models.CharField(max_length=255, blank=True)
    stripe_secret_key = models.CharField(max_length=255, blank=True)
    stripe_webhook_secret = models.CharField(max_length=255, blank=True)
    razorpay_key_id = models.CharField(max_length=255, blank=True)
    razorpay_key_secret = models.CharField(max_length=255, blank=True)
    razorpay_webhook_secret = models.CharField(max_length=255, blank=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'payment_gateway_settings'

    def __str__(self):
        return 'Payment Gateway Settings'


class SlackSettings(SingletonModel):
    bot_token = models.CharField(max_length=255, blank=True)
    signing_secret = models.CharField(max_length=255, blank=True)
    default_channel_id = models.CharField(max_length=50, blank=True)
    is_enabled = models.BooleanField(default=False)
    notify_on_payment = models.BooleanField(default=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'slack_settings'

    def __str__(self):
        return 'Slack Settings'
