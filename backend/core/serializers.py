import base64
import binascii

from rest_framework import serializers
from django.contrib.auth.password_validation import validate_password
from rest_framework_simplejwt.serializers import TokenObtainPairSerializer
from rest_framework_simplejwt.exceptions import AuthenticationFailed

from .models import User, AuditLog, CompanyProfile, ApiSettings, PaymentGatewaySettings, SlackSettings
from .utils import get_agency_setting, mask_secret, is_masked


class UserSerializer(serializers.ModelSerializer):
    class Meta:
        model = User
        fields = ['id', 'username', 'name', 'email', 'role', 'phone', 'is_active', 'created_at', 'updated_at']
        read_only_fields = ['created_at', 'updated_at']


class UserCreateSerializer(serializers.ModelSerializer):
    password = serializers.CharField(write_only=True, validators=[validate_password])
    password_confirm = serializers.CharField(write_only=True)
    username = serializers.CharField(required=False, allow_blank=True)

    class Meta:
        model = User
        fields = ['username', 'name', 'email', 'role', 'phone', 'password', 'password_confirm']

    def validate(self, attrs):
        if attrs['password'] != attrs['password_confirm']:
            raise serializers.ValidationError({"password": "Passwords don't match"})
        if not attrs.get('username'):
            attrs['username'] = attrs['email']
        if User.objects.filter(username=attrs['username']).exists():
            raise serializers.ValidationError({"username": "A user with that username already exists."})
        return attrs

    def create(self, validated_data):
        validated_data.pop('password_confirm')
        password = validated_data.pop('password')
        user = User(**validated_data, is_active=True)
        user.set_password(password)
        user.save()
        return user


class EmailTokenObtainPairSerializer(TokenObtainPairSerializer):
    """Login with email + password; returns tokens and the user profile"""

    def validate(self, attrs):
        data = super().validate(attrs)
        if not self.user.is_active:
            raise AuthenticationFailed('User account is disabled.')
        data['user'] = {
            'id': self.user.id,
            'name': self.user.name,
            'email': self.user.email,
            'role': self.user.role,
        }
        return data

    @classmethod
    def get_token(cls, user):
        token = super().get_token(user)
        token['email'] = user.email
        token['name'] = user.name
        token['role'] = user.role
        return token


class AuditLogSerializer(serializers.ModelSerializer):
    user_email = serializers.CharField(source='user.email', read_only=True, default=None)

    class Meta:
        model = AuditLog
        fields = ['id', 'user', 'user_email', 'action', 'model_name', 'object_id', 'object_name',
                  'object_reference', 'changes', 'ip_address', 'created_at']


def validate_logo_size(size):
    max_size = get_agency_setting('MAX_LOGO_SIZE', 1024 * 1024)
    if size > max_size:
        raise serializers.ValidationError(
            f"Logo must be {max_size // 1024}KB or smaller (got {size // 1024}KB)."
        )


class CompanyProfileSerializer(serializers.ModelSerializer):
    class Meta:
        model = CompanyProfile
        fields = ['id', 'company_name', 'logo_url', 'address_line1', 'address_line2', 'city',
                  'state', 'postal_code', 'country', 'email', 'phone', 'tax_id', 'bank_name',
                  'bank_account_number', 'bank_ifsc_code', 'bank_account_holder_name', 'upi_id',
                  'payment_link', 'payment_gateway_details', 'invoice_terms', 'payment_notes',
                  'authorized_signatory_name', 'authorized_signatory_title', 'created_at', 'updated_at']
        read_only_fields = ['created_at', 'updated_at']

    def validate_logo_url(self, value):
        if value and value.startswith('data:'):
            try:
                payload = value.split(',', 1)[1]
                size = len(base64.b64decode(payload, validate=True))
            except (IndexError, binascii.Error):
                raise serializers.ValidationError("Logo is not a valid base64 data URL.")
            validate_logo_size(size)
        return value


class LogoUploadSerializer(serializers.Serializer):
    logo = serializers.ImageField()

    def validate_logo(self, value):
        validate_logo_size(value.size)
        return value


class MaskedSecretsMixin:
    """Masks secret fields on output and ignores masked values on input"""
    secret_fields = ()

    def to_representation(self, instance):
        data = super().to_representation(instance)
        for field in self.secret_fields:
            data[field] = mask_secret(getattr(instance, field))
        return data

    def validate(self, attrs):
        for field in self.secret_fields:
            if field in attrs and is_masked(attrs[field]):
                attrs.pop(field)
        return super().validate(attrs)


class ApiSettingsSerializer(MaskedSecretsMixin, serializers.ModelSerializer):
    secret_fields = ('openai_api_key', 'gemini_api_key', 'resend_api_key')

    has_openai_key = serializers.SerializerMethodField()
    has_gemini_key = serializers.SerializerMethodField()
    has_resend_key = serializers.SerializerMethodField()

    class Meta:
        model = ApiSettings
        fields = ['openai_api_key', 'gemini_api_key', 'resend_api_key', 'resend_from_email',
                  'has_openai_key', 'has_gemini_key', 'has_resend_key', 'updated_at']
        read_only_fields = ['updated_at']

    def get_has_openai_key(self, obj):
        return bool(obj.openai_api_key)

    def get_has_gemini_key(self, obj):
        return bool(obj.gemini_api_key)

    def get_has_resend_key(self, obj):
        return bool(obj.resend_api_key)


class PaymentGatewaySettingsSerializer(MaskedSecretsMixin, serializers.ModelSerializer):
    secret_fields = ('stripe_secret_key', 'stripe_webhook_secret', 'razorpay_key_secret', 'razorpay_webhook_secret')

    class Meta:
        model = PaymentGatewaySettings
        fields = ['active_provider', 'is_test_mode', 'stripe_public_key', 'stripe_secret_key',
                  'stripe_webhook_secret', 'razorpay_key_id', 'razorpay_key_secret',
                  'razorpay_webhook_secret', 'updated_at']
        read_only_fields = ['updated_at']


class SlackSettingsSerializer(MaskedSecretsMixin, serializers.ModelSerializer):
    secret_fields = ('bot_token', 'signing_secret')

    class Meta:
        model = SlackSettings
        fields = ['bot_token', 'signing_secret', 'default_channel_id', 'is_enabled',
                  'notify_on_payment', 'updated_at']
        read_only_fields = ['updated_at']
