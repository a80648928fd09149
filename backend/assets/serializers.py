from decimal import Decimal

from rest_framework import serializers

from .depreciation import asset_valuation
from .models import FixedAsset


class FixedAssetSerializer(serializers.ModelSerializer):
    vendor_name = serializers.CharField(source='vendor.name', read_only=True, default=None)
    accumulated_depreciation = serializers.SerializerMethodField()
    current_value = serializers.SerializerMethodField()
    years_owned = serializers.SerializerMethodField()

    class Meta:
        model = FixedAsset
        fields = ['id', 'name', 'description', 'category', 'purchase_date', 'purchase_value',
                  'depreciation_method', 'depreciation_rate', 'useful_life_years', 'salvage_value',
                  'location', 'status', 'vendor', 'vendor_name', 'invoice_number', 'notes',
                  'accumulated_depreciation', 'current_value', 'years_owned', 'created_at', 'updated_at']
        read_only_fields = ['created_at', 'updated_at']

    def _valuation(self, obj):
        cache = self.context.setdefault('_valuations', {})
        if obj.pk not in cache:
            cache[obj.pk] = asset_valuation(obj)
        return cache[obj.pk]

    def get_accumulated_depreciation(self, obj):
        return self._valuation(obj)['accumulated_depreciation']

    def get_current_value(self, obj):
        return self._valuation(obj)['current_value']

    def get_years_owned(self, obj):
        return self._valuation(obj)['years_owned']

    def validate(self, attrs):
        purchase = attrs.get('purchase_value', getattr(self.instance, 'purchase_value', None))
        salvage = attrs.get('salvage_value', getattr(self.instance, 'salvage_value', Decimal('0.00')))
        if purchase is not None and salvage is not None and salvage > purchase:
            raise serializers.ValidationError({'salvage_value': 'Salvage value cannot exceed the purchase value.'})
        method = attrs.get('depreciation_method', getattr(self.instance, 'depreciation_method', 'SLM'))
        rate = attrs.get('depreciation_rate', getattr(self.instance, 'depreciation_rate', Decimal('0.00')))
        life = attrs.get('useful_life_years', getattr(self.instance, 'useful_life_years', None))
        if method == 'WDV' and not rate:
            raise serializers.ValidationError({'depreciation_rate': 'WDV needs a depreciation rate.'})
        if method == 'SLM' and not rate and not life:
            raise serializers.ValidationError(
                {'useful_life_years': 'Straight line needs a useful life or a depreciation rate.'}
            )
        return attrs
