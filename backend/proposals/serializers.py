from decimal import Decimal

from rest_framework import serializers

from backend.core.utils import today
from .models import Contract, Proposal
from .pricing import calculate_pricing, to_decimal
from .services import create_contract, save_proposal


def validate_services_payload(value):
    if not isinstance(value, list):
        raise serializers.ValidationError('Services must be a list.')
    for index, service in enumerate(value, start=1):
        if not isinstance(service, dict):
            raise serializers.ValidationError(f'Service #{index} must be an object.')
        if not (service.get('name') or service.get('service_type')):
            raise serializers.ValidationError(f'Service #{index} needs a name.')
        price = to_decimal(service.get('price'), default=None)
        if price is None or price < 0:
            raise serializers.ValidationError(f'Service #{index} needs a non-negative price.')
    return value


def validate_schedule_payload(value):
    if not isinstance(value, list):
        raise serializers.ValidationError('Payment schedule must be a list.')
    for index, milestone in enumerate(value, start=1):
        if not isinstance(milestone, dict):
            raise serializers.ValidationError(f'Milestone #{index} must be an object.')
        percentage = to_decimal(milestone.get('percentage'), default=None)
        if percentage is None or not Decimal('0') <= percentage <= Decimal('100'):
            raise serializers.ValidationError(f'Milestone #{index} percentage must be between 0 and 100.')
    return value


class ProposalSerializer(serializers.ModelSerializer):
    client_name = serializers.CharField(source='client.name', read_only=True)
    discount_amount = serializers.SerializerMethodField()
    proposal_number = serializers.CharField(max_length=50, required=False, allow_blank=True)

    class Meta:
        model = Proposal
        fields = ['id', 'client', 'client_name', 'title', 'proposal_number', 'valid_until', 'services',
                  'project_start_date', 'project_end_date', 'project_duration', 'subtotal', 'discount',
                  'discount_type', 'discount_amount', 'tax_rate', 'tax_amount', 'total_amount',
                  'payment_terms', 'payment_schedule', 'executive_summary', 'terms_and_conditions', 'notes',
                  'show_company_logo', 'custom_header_text', 'custom_footer_text', 'status', 'sent_at',
                  'viewed_at', 'responded_at', 'created_at', 'updated_at']
        # Totals are always recomputed on save
        read_only_fields = ['subtotal', 'tax_amount', 'total_amount', 'status', 'sent_at', 'viewed_at',
                            'responded_at', 'created_at', 'updated_at']

    def get_discount_amount(self, obj):
        return calculate_pricing(obj.services, obj.discount, obj.discount_type, obj.tax_rate)['discount_amount']

    def validate_services(self, value):
        return validate_services_payload(value)

    def validate_payment_schedule(self, value):
        return validate_schedule_payload(value)

    def validate_proposal_number(self, value):
        value = value.strip()
        if value:
            existing = Proposal.objects.filter(proposal_number=value)
            if self.instance:
                existing = existing.exclude(pk=self.instance.pk)
            if existing.exists():
                raise serializers.ValidationError('A proposal with this number already exists.')
        return value

    def validate(self, attrs):
        start = attrs.get('project_start_date', getattr(self.instance, 'project_start_date', None))
        end = attrs.get('project_end_date', getattr(self.instance, 'project_end_date', None))
        if start and end and end < start:
            raise serializers.ValidationError({'project_end_date': 'End date cannot be before the start date.'})
        discount = attrs.get('discount', getattr(self.instance, 'discount', Decimal('0.00')))
        discount_type = attrs.get('discount_type', getattr(self.instance, 'discount_type', 'FIXED'))
        if discount < 0:
            raise serializers.ValidationError({'discount': 'Discount cannot be negative.'})
        if discount_type == 'PERCENTAGE' and discount > 100:
            raise serializers.ValidationError({'discount': 'Percentage discount cannot exceed 100.'})
        return attrs

    def create(self, validated_data):
        return save_proposal(validated_data, user=self.context.get('user'))

    def update(self, instance, validated_data):
        if not validated_data.get('proposal_number'):
            validated_data.pop('proposal_number', None)
        return save_proposal(validated_data, instance=instance)


class ProposalStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=Proposal.STATUS_CHOICES)


class PricingPreviewSerializer(serializers.Serializer):
    services = serializers.JSONField()
    discount = serializers.DecimalField(max_digits=12, decimal_places=2, required=False, default=Decimal('0.00'),
                                        min_value=Decimal('0.00'))
    discount_type = serializers.ChoiceField(choices=Proposal.DISCOUNT_TYPE_CHOICES, required=False, default='FIXED')
    tax_rate = serializers.DecimalField(max_digits=5, decimal_places=2, required=False, default=Decimal('18.00'),
                                        min_value=Decimal('0.00'))
    payment_schedule = serializers.JSONField(required=False, default=list)

    def validate_services(self, value):
        return validate_services_payload(value)

    def validate_payment_schedule(self, value):
        return validate_schedule_payload(value)


class ContractSerializer(serializers.ModelSerializer):
    client_name = serializers.CharField(source='client.name', read_only=True)
    proposal_title = serializers.CharField(source='proposal.title', read_only=True, default=None)
    contract_number = serializers.CharField(max_length=50, required=False, allow_blank=True)

    class Meta:
        model = Contract
        fields = ['id', 'contract_number', 'client', 'client_name', 'proposal', 'proposal_title', 'title',
                  'scope_of_work', 'deliverables', 'contract_value', 'currency', 'payment_terms',
                  'start_date', 'end_date', 'status', 'signed_date', 'client_signatory_name',
                  'client_signature_date', 'agency_signatory_name', 'agency_signature_date',
                  'terms_and_conditions', 'attachments', 'notes', 'created_at', 'updated_at']
        read_only_fields = ['created_at', 'updated_at']

    def validate_contract_number(self, value):
        value = value.strip()
        if value:
            existing = Contract.objects.filter(contract_number=value)
            if self.instance:
                existing = existing.exclude(pk=self.instance.pk)
            if existing.exists():
                raise serializers.ValidationError('A contract with this number already exists.')
        return value

    def validate_attachments(self, value):
        if not isinstance(value, list):
            raise serializers.ValidationError('Attachments must be a list.')
        return value

    def validate(self, attrs):
        start = attrs.get('start_date', getattr(self.instance, 'start_date', None))
        end = attrs.get('end_date', getattr(self.instance, 'end_date', None))
        if start and end and end < start:
            raise serializers.ValidationError({'end_date': 'End date cannot be before the start date.'})
        proposal = attrs.get('proposal', getattr(self.instance, 'proposal', None))
        client = attrs.get('client', getattr(self.instance, 'client', None))
        if proposal and client and proposal.client_id != client.id:
            raise serializers.ValidationError({'proposal': 'Proposal belongs to a different client.'})
        return attrs

    def create(self, validated_data):
        return create_contract(validated_data, user=self.context.get('user'))

    def update(self, instance, validated_data):
        if not validated_data.get('contract_number'):
            validated_data.pop('contract_number', None)
        if validated_data.get('status') == 'SIGNED' and not validated_data.get('signed_date', instance.signed_date):
            validated_data['signed_date'] = today()
        return super().update(instance, validated_data)


class ContractStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=Contract.STATUS_CHOICES)
