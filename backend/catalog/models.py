from decimal import Decimal

from django.core.validators import MinValueValidator
from django.db import models


class Service(models.Model):
    """A service the agency sells, used to prefill proposals and invoices"""
    CATEGORY_CHOICES = [
        ('SEO', 'SEO'),
        ('SOCIAL_MEDIA', 'Social Media'),
        ('CONTENT', 'Content'),
        ('ADVERTISING', 'Advertising'),
        ('DESIGN', 'Design'),
        ('DEVELOPMENT', 'Development'),
        ('CONSULTING', 'Consulting'),
        ('OTHER', 'Other'),
    ]
    STATUS_CHOICES = [
        ('ACTIVE', 'Active'),
        ('INACTIVE', 'Inactive'),
    ]

    name = models.CharField(max_length=255)
    description = models.TextField(blank=True)
    category = models.CharField(max_length=20, choices=CATEGORY_CHOICES, default='OTHER')
    default_price = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0.00'),
                                        validators=[MinValueValidator(Decimal('0.00'))])
    currency = models.CharField(max_length=3, default='INR')
    unit = models.CharField(max_length=50, default='Hour')
    sac_code = models.CharField(max_length=20, blank=True, help_text="SAC code printed on GST invoices")
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='ACTIVE')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'services'
        ordering = ['category', 'name']
        indexes = [
            models.Index(fields=['category', 'status'], name='service_category_status_idx'),
        ]

    def __str__(self):
        return self.name
