from django.contrib import admin
from .models import Service


@admin.register(Service)
class ServiceAdmin(admin.ModelAdmin):
    list_display = ['name', 'category', 'default_price', 'currency', 'unit', 'status']
    list_filter = ['category', 'status']
    search_fields = ['name', 'sac_code']
