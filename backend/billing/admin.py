from django.contrib import admin
from .models import Invoice, InvoiceLineItem, Payment


class InvoiceLineItemInline(admin.TabularInline):
    model = InvoiceLineItem
    extra = 0
    readonly_fields = ['line_total']


class PaymentInline(admin.TabularInline):
    model = Payment
    extra = 0


@admin.register(Invoice)
class InvoiceAdmin(admin.ModelAdmin):
    list_display = ['invoice_number', 'client', 'issue_date', 'due_date', 'total_amount', 'balance_due', 'status']
    list_filter = ['status', 'issue_date']
    search_fields = ['invoice_number', 'client__name']
    readonly_fields = ['subtotal', 'total_amount', 'amount_paid', 'balance_due', 'created_at', 'updated_at']
    inlines = [InvoiceLineItemInline, PaymentInline]


@admin.register(Payment)
class PaymentAdmin(admin.ModelAdmin):
    list_display = ['invoice', 'payment_date', 'amount', 'method', 'reference']
    list_filter = ['method', 'payment_date']
    search_fields = ['invoice__invoice_number', 'reference']
