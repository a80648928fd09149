from django.db import models

from backend.core.exceptions import BusinessRuleError
from backend.core.utils import generate_onboarding_token


class Client(models.Model):
    """Agency client (company)"""
    STATUS_CHOICES = [
        ('ACTIVE', 'Active'),
        ('INACTIVE', 'Inactive'),
        ('ARCHIVED', 'Archived'),
    ]

    name = models.CharField(max_length=255)
    contact_name = models.CharField(max_length=255)
    email = models.EmailField()
    phone = models.CharField(max_length=30, blank=True)
    company_website = models.URLField(blank=True)
    address = models.TextField(blank=True)
    gstin = models.CharField(max_length=15, blank=True)
    state = models.CharField(max_length=100, blank=True, help_text="Place of supply for GST")
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='ACTIVE')
    notes = models.TextField(blank=True)
    portal_url = models.URLField(blank=True)
    onboarding_token = models.CharField(max_length=32, unique=True, default=generate_onboarding_token)
    onboarding_data = models.JSONField(default=dict, blank=True)
    onboarding_completed_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'clients'
        ordering = ['name']

    def __str__(self):
        return self.name

    def ensure_deletable(self):
        blockers = []
        for label, related in (('project', self.projects), ('invoice', self.invoices),
                               ('proposal', self.proposals), ('contract', self.contracts)):
            count = related.count()
            if count:
                blockers.append(f"{count} {label}(s)")
        if blockers:
            raise BusinessRuleError(
                f"Cannot delete client '{self.name}': it still has {', '.join(blockers)}. "
                f"Archive the client instead."
            )

    def regenerate_onboarding_token(self):
        self.onboarding_token = generate_onboarding_token()
        self.save(update_fields=['onboarding_token', 'updated_at'])
        return self.onboarding_token


class Project(models.Model):
    STATUS_CHOICES = [
        ('ACTIVE', 'Active'),
        ('ON_HOLD', 'On Hold'),
        ('COMPLETED', 'Completed'),
        ('CANCELLED', 'Cancelled'),
    ]

    client = models.ForeignKey(Client, on_delete=models.PROTECT, related_name='projects')
    name = models.CharField(max_length=255)
    scope = models.TextField(blank=True)
    start_date = models.DateField(null=True, blank=True)
    end_date = models.DateField(null=True, blank=True)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='ACTIVE')
    notes = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'projects'
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.client.name} - {self.name}"

    def ensure_deletable(self):
        invoice_count = self.invoices.count()
        if invoice_count:
            raise BusinessRuleError(
                f"Cannot delete project '{self.name}': it is referenced by {invoice_count} invoice(s)."
            )
