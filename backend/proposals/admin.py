from django.contrib import admin
from .models import Contract, Proposal


@admin.register(Proposal)
class ProposalAdmin(admin.ModelAdmin):
    list_display = ['proposal_number', 'title', 'client', 'total_amount', 'status', 'valid_until']
    list_filter = ['status', 'discount_type']
    search_fields = ['proposal_number', 'title', 'client__name']
    readonly_fields = ['subtotal', 'tax_amount', 'total_amount', 'sent_at', 'viewed_at', 'responded_at']


@admin.register(Contract)
class ContractAdmin(admin.ModelAdmin):
    list_display = ['contract_number', 'title', 'client', 'contract_value', 'status', 'signed_date']
    list_filter = ['status']
    search_fields = ['contract_number', 'title', 'client__name']
