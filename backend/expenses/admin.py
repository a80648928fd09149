from django.contrib import admin
from .models import Expense, ExpenseCategory, Vendor


@admin.register(Vendor)
class VendorAdmin(admin.ModelAdmin):
    list_display = ['name', 'category', 'email', 'phone', 'status']
    list_filter = ['category', 'status']
    search_fields = ['name', 'contact_name', 'email', 'gstin']


@admin.register(ExpenseCategory)
class ExpenseCategoryAdmin(admin.ModelAdmin):
    list_display = ['code', 'name', 'group']
    list_filter = ['group']
    search_fields = ['code', 'name']


@admin.register(Expense)
class ExpenseAdmin(admin.ModelAdmin):
    list_display = ['description', 'category', 'vendor', 'amount', 'expense_date', 'status']
    list_filter = ['status', 'category', 'expense_date']
    search_fields = ['description', 'reference', 'vendor__name']
    date_hierarchy = 'expense_date'
