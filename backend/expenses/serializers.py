from decimal import Decimal

from django.db.models import Sum
from rest_framework import serializers

from .models import PAYMENT_METHOD_CHOICES, Expense, ExpenseCategory, Vendor


class VendorSerializer(serializers.ModelSerializer):
    total_spend = serializers.SerializerMethodField()
    expense_count = serializers.SerializerMethodField()

    class Meta:
        model = Vendor
        fields = ['id', 'name', 'contact_name', 'email', 'phone', 'website', 'address', 'gstin',
                  'category', 'status', 'notes', 'total_spend', 'expense_count', 'created_at', 'updated_at']
        read_only_fields = ['created_at', 'updated_at']

    def get_total_spend(self, obj):
        if hasattr(obj, 'total_spend'):
            return obj.total_spend
        return obj.expenses.filter(status='PAID').aggregate(total=Sum('amount'))['total'] or Decimal('0.00')

    def get_expense_count(self, obj):
        if hasattr(obj, 'expense_count'):
            return obj.expense_count
        return obj.expenses.count()

    def validate_gstin(self, value):
        value = value.strip().upper()
        if value and len(value) != 15:
            raise serializers.ValidationError('GSTIN must be 15 characters.')
        return value


class VendorStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=Vendor.STATUS_CHOICES)


class ExpenseCategorySerializer(serializers.ModelSerializer):
    expense_count = serializers.IntegerField(read_only=True, required=False)

    class Meta:
        model = ExpenseCategory
        fields = ['id', 'name', 'code', 'group', 'description', 'expense_count', 'created_at', 'updated_at']
        read_only_fields = ['created_at', 'updated_at']

    def validate_code(self, value):
        value = value.strip().upper()
        if not value:
            raise serializers.ValidationError('Code is required.')
        existing = ExpenseCategory.objects.filter(code=value)
        if self.instance:
            existing = existing.exclude(pk=self.instance.pk)
        if existing.exists():
            raise serializers.ValidationError(f"Category code '{value}' already exists.")
        return value


class ExpenseSerializer(serializers.ModelSerializer):
    vendor_name = serializers.CharField(source='vendor.name', read_only=True, default=None)
    category_name = serializers.CharField(source='category.name', read_only=True)
    category_code = serializers.CharField(source='category.code', read_only=True)
    amount = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=Decimal('0.01'))

    class Meta:
        model = Expense
        fields = ['id', 'vendor', 'vendor_name', 'category', 'category_name', 'category_code',
                  'description', 'amount', 'tax_amount', 'currency', 'expense_date', 'due_date',
                  'paid_date', 'status', 'payment_method', 'reference', 'notes', 'created_at', 'updated_at']
        read_only_fields = ['created_at', 'updated_at']

    def validate(self, attrs):
        status_value = attrs.get('status', getattr(self.instance, 'status', 'DUE'))
        paid_date = attrs.get('paid_date', getattr(self.instance, 'paid_date', None))
        if status_value == 'PAID' and not paid_date:
            attrs['paid_date'] = attrs.get('expense_date', getattr(self.instance, 'expense_date', None))
        return attrs


class MarkPaidSerializer(serializers.Serializer):
    """Shared by expenses and salaries"""
    payment_date = serializers.DateField()
    payment_method = serializers.ChoiceField(choices=PAYMENT_METHOD_CHOICES)
    reference = serializers.CharField(max_length=200, required=False, allow_blank=True)
