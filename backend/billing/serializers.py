from decimal import Decimal

from rest_framework import serializers

from .models import Invoice, InvoiceLineItem, Payment
from .services import create_invoice, update_invoice


class InvoiceLineItemSerializer(serializers.ModelSerializer):
    quantity = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=Decimal('0.01'))
    unit_price = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=Decimal('0.00'))

    class Meta:
        model = InvoiceLineItem
        fields = ['id', 'description', 'hsn_sac_code', 'quantity', 'unit_price', 'line_total']
        read_only_fields = ['line_total']


class PaymentSerializer(serializers.ModelSerializer):
    amount = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=Decimal('0.01'))
    invoice_number = serializers.CharField(source='invoice.invoice_number', read_only=True)

    class Meta:
        model = Payment
        fields = ['id', 'invoice', 'invoice_number', 'payment_date', 'amount', 'method',
                  'reference', 'notes', 'created_at']
        read_only_fields = ['invoice', 'created_at']


class InvoiceSerializer(serializers.ModelSerializer):
    client_name = serializers.CharField(source='client.name', read_only=True)
    project_name = serializers.CharField(source='project.name', read_only=True, default=None)
    project_scope = serializers.CharField(source='project.scope', read_only=True, default=None)
    line_items = InvoiceLineItemSerializer(many=True, required=False)
    payments = PaymentSerializer(many=True, read_only=True)
    invoice_number = serializers.CharField(max_length=50, required=False, allow_blank=True)
    tax_amount = serializers.DecimalField(max_digits=12, decimal_places=2, required=False, allow_null=True,
                                          min_value=Decimal('0.00'))

    class Meta:
        model = Invoice
        fields = ['id', 'client', 'client_name', 'project', 'project_name', 'project_scope',
                  'invoice_number', 'issue_date', 'due_date', 'currency', 'subtotal', 'tax_rate',
                  'tax_amount', 'total_amount', 'amount_paid', 'balance_due', 'status', 'notes',
                  'line_items', 'payments', 'created_at', 'updated_at']
        read_only_fields = ['subtotal', 'total_amount', 'amount_paid', 'balance_due',
                            'created_at', 'updated_at']

    def validate_invoice_number(self, value):
        value = value.strip()
        if value:
            existing = Invoice.objects.filter(invoice_number=value)
            if self.instance:
                existing = existing.exclude(pk=self.instance.pk)
            if existing.exists():
                raise serializers.ValidationError('An invoice with this number already exists.')
        return value

    def validate(self, attrs):
        issue = attrs.get('issue_date', getattr(self.instance, 'issue_date', None))
        due = attrs.get('due_date', getattr(self.instance, 'due_date', None))
        if issue and due and due < issue:
            raise serializers.ValidationError({'due_date': 'Due date cannot be before the issue date.'})

        client = attrs.get('client', getattr(self.instance, 'client', None))
        project = attrs.get('project', getattr(self.instance, 'project', None))
        if project and client and project.client_id != client.id:
            raise serializers.ValidationError({'project': 'Project does not belong to the selected client.'})

        if self.instance is None and not attrs.get('line_items'):
            raise serializers.ValidationError({'line_items': 'At least one line item is required.'})
        return attrs

    def create(self, validated_data):
        line_items = validated_data.pop('line_items', [])
        tax_amount = validated_data.pop('tax_amount', None)
        user = self.context.get('user')
        return create_invoice(validated_data, line_items, user=user, tax_amount=tax_amount)

    def update(self, instance, validated_data):
        line_items = validated_data.pop('line_items', None)
        tax_amount = validated_data.pop('tax_amount', None)
        return update_invoice(instance, validated_data, line_items=line_items, tax_amount=tax_amount)


class InvoiceStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=Invoice.STATUS_CHOICES)
