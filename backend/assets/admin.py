from django.contrib import admin
from .models import FixedAsset


@admin.register(FixedAsset)
class FixedAssetAdmin(admin.ModelAdmin):
    list_display = ['name', 'category', 'purchase_date', 'purchase_value', 'depreciation_method', 'status']
    list_filter = ['status', 'depreciation_method', 'category']
    search_fields = ['name', 'invoice_number', 'location']
