from decimal import Decimal

from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models

from backend.expenses.models import Vendor


class FixedAsset(models.Model):
    DEPRECIATION_METHOD_CHOICES = [
        ('SLM', 'Straight Line'),
        ('WDV', 'Written Down Value'),
    ]
    STATUS_CHOICES = [
        ('ACTIVE', 'Active'),
        ('DISPOSED', 'Disposed'),
        ('UNDER_MAINTENANCE', 'Under Maintenance'),
    ]

    name = models.CharField(max_length=255)
    description = models.TextField(blank=True)
    category = models.CharField(max_length=100, blank=True, help_text="e.g. Computers, Furniture, Vehicles")
    purchase_date = models.DateField()
    purchase_value = models.DecimalField(max_digits=12, decimal_places=2,
                                         validators=[MinValueValidator(Decimal('0.01'))])
    depreciation_method = models.CharField(max_length=3, choices=DEPRECIATION_METHOD_CHOICES, default='SLM')
    depreciation_rate = models.DecimalField(max_digits=5, decimal_places=2, default=Decimal('0.00'),
                                            validators=[MinValueValidator(Decimal('0.00')),
                                                        MaxValueValidator(Decimal('100.00'))],
                                            help_text="Percent per year")
    useful_life_years = models.PositiveIntegerField(null=True, blank=True)
    salvage_value = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0.00'),
                                        validators=[MinValueValidator(Decimal('0.00'))])
    location = models.CharField(max_length=255, blank=True)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='ACTIVE')
    vendor = models.ForeignKey(Vendor, on_delete=models.SET_NULL, null=True, blank=True, related_name='fixed_assets')
    invoice_number = models.CharField(max_length=100, blank=True)
    notes = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'fixed_assets'
        ordering = ['-purchase_date', 'name']

    def __str__(self):
        return self.name
