from decimal import Decimal

from django.db.models import Sum
from rest_framework import serializers

from .models import Client, Project


class ProjectSerializer(serializers.ModelSerializer):
    client_name = serializers.CharField(source='client.name', read_only=True)

    class Meta:
        model = Project
        fields = ['id', 'client', 'client_name', 'name', 'scope', 'start_date', 'end_date',
                  'status', 'notes', 'created_at', 'updated_at']
        read_only_fields = ['created_at', 'updated_at']

    def validate(self, attrs):
        start = attrs.get('start_date', getattr(self.instance, 'start_date', None))
        end = attrs.get('end_date', getattr(self.instance, 'end_date', None))
        if start and end and end < start:
            raise serializers.ValidationError({'end_date': 'End date cannot be before the start date.'})
        return attrs


class ClientSerializer(serializers.ModelSerializer):
    total_invoiced = serializers.SerializerMethodField()
    outstanding_amount = serializers.SerializerMethodField()
    project_count = serializers.SerializerMethodField()

    class Meta:
        model = Client
        fields = ['id', 'name', 'contact_name', 'email', 'phone', 'company_website', 'address',
                  'gstin', 'state', 'status', 'notes', 'portal_url', 'onboarding_token',
                  'onboarding_completed_at', 'total_invoiced', 'outstanding_amount', 'project_count',
                  'created_at', 'updated_at']
        read_only_fields = ['onboarding_token', 'onboarding_completed_at', 'created_at', 'updated_at']
        extra_kwargs = {
            'name': {'error_messages': {'blank': 'Company name is required.'}},
            'contact_name': {'error_messages': {'blank': 'Contact name is required.'}},
        }

    # List views annotate these; single objects fall back to a query
    def get_total_invoiced(self, obj):
        if hasattr(obj, 'total_invoiced'):
            return obj.total_invoiced
        return obj.invoices.aggregate(total=Sum('total_amount'))['total'] or Decimal('0.00')

    def get_outstanding_amount(self, obj):
        if hasattr(obj, 'outstanding_amount'):
            return obj.outstanding_amount
        return obj.invoices.exclude(status='PAID').aggregate(total=Sum('balance_due'))['total'] or Decimal('0.00')

    def get_project_count(self, obj):
        if hasattr(obj, 'project_count'):
            return obj.project_count
        return obj.projects.count()

    def validate_gstin(self, value):
        value = value.strip().upper()
        if value and len(value) != 15:
            raise serializers.ValidationError('GSTIN must be 15 characters.')
        return value


class ClientDetailSerializer(ClientSerializer):
    projects = ProjectSerializer(many=True, read_only=True)

    class Meta(ClientSerializer.Meta):
        fields = ClientSerializer.Meta.fields + ['onboarding_data', 'projects']
        read_only_fields = ClientSerializer.Meta.read_only_fields + ['onboarding_data']


class ClientStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=Client.STATUS_CHOICES)


class PublicOnboardingSerializer(serializers.ModelSerializer):
    """What an unauthenticated client sees and submits through the onboarding link"""
    client_name = serializers.CharField(source='name', read_only=True)

    class Meta:
        model = Client
        fields = ['client_name', 'contact_name', 'onboarding_data', 'onboarding_completed_at']
        read_only_fields = ['client_name', 'contact_name', 'onboarding_completed_at']

    def validate_onboarding_data(self, value):
        if not isinstance(value, dict):
            raise serializers.ValidationError('Onboarding data must be an object.')
        return value
