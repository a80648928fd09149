from decimal import Decimal

from django.core.validators import MinValueValidator
from django.db import models

from backend.core.exceptions import BusinessRuleError

PAYMENT_METHOD_CHOICES = [
    ('BANK_TRANSFER', 'Bank Transfer'),
    ('UPI', 'UPI'),
    ('CASH', 'Cash'),
    ('CARD', 'Card'),
    ('CHEQUE', 'Cheque'),
    ('OTHER', 'Other'),
]


class Vendor(models.Model):
    """Supplier the agency pays (tools, freelancers, media)"""
    CATEGORY_CHOICES = [
        ('SOFTWARE', 'Software'),
        ('FREELANCER', 'Freelancer'),
        ('MEDIA_BUY', 'Media Buy'),
        ('OTHER', 'Other'),
    ]
    STATUS_CHOICES = [
        ('ACTIVE', 'Active'),
        ('INACTIVE', 'Inactive'),
    ]

    name = models.CharField(max_length=255)
    contact_name = models.CharField(max_length=255, blank=True)
    email = models.EmailField(blank=True)
    phone = models.CharField(max_length=30, blank=True)
    website = models.URLField(blank=True)
    address = models.TextField(blank=True)
    gstin = models.CharField(max_length=15, blank=True)
    category = models.CharField(max_length=20, choices=CATEGORY_CHOICES, default='OTHER')
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='ACTIVE')
    notes = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'vendors'
        ordering = ['name']

    def __str__(self):
        return self.name

    def ensure_deletable(self):
        count = self.expenses.count()
        if count:
            raise BusinessRuleError(
                f"Cannot delete vendor '{self.name}': it has {count} expense(s). Mark it inactive instead."
            )


class ExpenseCategory(models.Model):
    name = models.CharField(max_length=255)
    code = models.CharField(max_length=10, unique=True)
    group = models.CharField(max_length=100, blank=True)
    description = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'expense_categories'
        ordering = ['group', 'name']
        verbose_name_plural = 'Expense categories'

    def __str__(self):
        return f"{self.code} - {self.name}"

    def save(self, *args, **kwargs):
        self.code = (self.code or '').strip().upper()
        super().save(*args, **kwargs)

    def ensure_deletable(self):
        count = self.expenses.count()
        if count:
            raise BusinessRuleError(
                f"Cannot delete category '{self.name}': it is used by {count} expense(s)."
            )


class Expense(models.Model):
    STATUS_CHOICES = [
        ('PLANNED', 'Planned'),
        ('DUE', 'Due'),
        ('PAID', 'Paid'),
        ('CANCELLED', 'Cancelled'),
    ]

    vendor = models.ForeignKey(Vendor, on_delete=models.PROTECT, null=True, blank=True, related_name='expenses')
    category = models.ForeignKey(ExpenseCategory, on_delete=models.PROTECT, related_name='expenses')
    description = models.CharField(max_length=500)
    amount = models.DecimalField(max_digits=12, decimal_places=2, validators=[MinValueValidator(Decimal('0.01'))])
    tax_amount = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0.00'),
                                     validators=[MinValueValidator(Decimal('0.00'))])
    currency = models.CharField(max_length=3, default='INR')
    expense_date = models.DateField()
    due_date = models.DateField(null=True, blank=True)
    paid_date = models.DateField(null=True, blank=True)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='DUE')
    payment_method = models.CharField(max_length=20, choices=PAYMENT_METHOD_CHOICES, blank=True)
    reference = models.CharField(max_length=200, blank=True)
    notes = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'expenses'
        ordering = ['-expense_date', '-id']
        indexes = [
            models.Index(fields=['status', 'expense_date'], name='expense_status_date_idx'),
        ]

    def __str__(self):
        return f"{self.description} ({self.amount})"

    def mark_paid(self, payment_date, payment_method, reference=''):
        if self.status in ('PAID', 'CANCELLED'):
            raise BusinessRuleError(f"Expense is already {self.get_status_display().lower()}.")
        self.status = 'PAID'
        self.paid_date = payment_date
        self.payment_method = payment_method
        if reference:
            self.reference = reference
        self.save(update_fields=['status', 'paid_date', 'payment_method', 'reference', 'updated_at'])
