from decimal import Decimal

from rest_framework import serializers

from .models import Service


class ServiceSerializer(serializers.ModelSerializer):
    category_display = serializers.CharField(source='get_category_display', read_only=True)
    default_price = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=Decimal('0.00'))

    class Meta:
        model = Service
        fields = ['id', 'name', 'description', 'category', 'category_display', 'default_price',
                  'currency', 'unit', 'sac_code', 'status', 'created_at', 'updated_at']
        read_only_fields = ['created_at', 'updated_at']

    def validate_name(self, value):
        value = value.strip()
        if not value:
            raise serializers.ValidationError('Service name is required.')
        return value
