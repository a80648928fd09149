import base64
import logging

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes, parser_classes
from rest_framework.parsers import MultiPartParser, FormParser
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated, AllowAny
from rest_framework_simplejwt.views import TokenObtainPairView, TokenRefreshView
from rest_framework_simplejwt.serializers import TokenRefreshSerializer
from rest_framework_simplejwt.exceptions import InvalidToken, TokenError
from django.contrib.auth import get_user_model
from django.core.exceptions import ObjectDoesNotExist
from django.shortcuts import get_object_or_404

from .models import AuditLog, CompanyProfile, ApiSettings, PaymentGatewaySettings, SlackSettings
from .permissions import IsAdminRole
from .serializers import (
    UserSerializer, UserCreateSerializer, EmailTokenObtainPairSerializer,
    AuditLogSerializer, CompanyProfileSerializer, LogoUploadSerializer,
    ApiSettingsSerializer, PaymentGatewaySettingsSerializer, SlackSettingsSerializer
)
from .integrations import check_slack_connection, check_payment_gateway
from .utils import create_audit_log

User = get_user_model()
logger = logging.getLogger(__name__)


class EmailTokenObtainPairView(TokenObtainPairView):
    serializer_class = EmailTokenObtainPairSerializer


class CustomTokenRefreshSerializer(TokenRefreshSerializer):
    """Token refresh that reports deleted users as an invalid token"""
    def validate(self, attrs):
        try:
            return super().validate(attrs)
        except (InvalidToken, TokenError):
            raise InvalidToken('Token is invalid or expired.')
        except (ObjectDoesNotExist, User.DoesNotExist):
            raise InvalidToken('Token is invalid. User no longer exists.')


class CustomTokenRefreshView(TokenRefreshView):
    serializer_class = CustomTokenRefreshSerializer


@api_view(['POST'])
@permission_classes([AllowAny])
def register(request):
    """
    Register a user.

    Open only while no users exist (bootstraps the first ADMIN); afterwards
    only admins may register new accounts.
    """
    bootstrap = not User.objects.exists()
    if not bootstrap:
        if not (request.user and request.user.is_authenticated and request.user.is_admin_role):
            return Response({'error': 'Only admins can register new users'}, status=status.HTTP_403_FORBIDDEN)

    serializer = UserCreateSerializer(data=request.data)
    if serializer.is_valid():
        if bootstrap:
            user = serializer.save(role='ADMIN', is_staff=True)
        else:
            user = serializer.save()
        token = EmailTokenObtainPairSerializer.get_token(user)
        return Response({
            'user': UserSerializer(user).data,
            'access': str(token.access_token),
            'refresh': str(token),
        }, status=status.HTTP_201_CREATED)
    return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def user_me(request):
    """Current user with role flags"""
    data = UserSerializer(request.user).data
    data['is_admin'] = request.user.is_admin_role
    data['can_manage_finance'] = request.user.is_admin_role or request.user.role == 'MANAGER'
    return Response(data)


# User views
@api_view(['GET', 'POST'])
@permission_classes([IsAdminRole])
def user_list_create(request):
    """List all users or create a new user"""
    if request.method == 'GET':
        users = User.objects.all().order_by('name', 'email')
        role = request.query_params.get('role')
        if role:
            users = users.filter(role=role)
        serializer = UserSerializer(users, many=True)
        return Response(serializer.data)
    else:
        serializer = UserCreateSerializer(data=request.data)
        if serializer.is_valid():
            user = serializer.save()
            create_audit_log(request, 'create', 'User', user.id, {'email': user.email, 'role': user.role},
                             object_name=user.email)
            return Response(UserSerializer(user).data, status=status.HTTP_201_CREATED)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAdminRole])
def user_detail(request, pk):
    """Retrieve, update or delete a user"""
    user = get_object_or_404(User, pk=pk)

    if request.method == 'GET':
        serializer = UserSerializer(user)
        return Response(serializer.data)
    elif request.method in ('PUT', 'PATCH'):
        serializer = UserSerializer(user, data=request.data, partial=request.method == 'PATCH')
        if serializer.is_valid():
            serializer.save()
            create_audit_log(request, 'update', 'User', user.id, request.data, object_name=user.email)
            return Response(serializer.data)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    else:  # DELETE
        if user.pk == request.user.pk:
            return Response({'error': 'You cannot delete your own account'}, status=status.HTTP_400_BAD_REQUEST)
        create_audit_log(request, 'delete', 'User', user.id, object_name=user.email)
        user.delete()
        return Response(status=status.HTTP_204_NO_CONTENT)


# Company profile
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def company_profile(request):
    """Get the company profile (null when not set up) or create it"""
    profile = CompanyProfile.objects.first()
    if request.method == 'GET':
        if profile is None:
            return Response(None)
        return Response(CompanyProfileSerializer(profile).data)

    if profile is not None:
        return Response({'error': 'Company profile already exists, update it instead'},
                        status=status.HTTP_400_BAD_REQUEST)
    serializer = CompanyProfileSerializer(data=request.data)
    if serializer.is_valid():
        profile = serializer.save()
        create_audit_log(request, 'create', 'CompanyProfile', profile.id, object_name=profile.company_name)
        return Response(serializer.data, status=status.HTTP_201_CREATED)
    return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['PUT', 'PATCH'])
@permission_classes([IsAuthenticated])
def company_profile_detail(request, pk):
    profile = get_object_or_404(CompanyProfile, pk=pk)
    serializer = CompanyProfileSerializer(profile, data=request.data, partial=request.method == 'PATCH')
    if serializer.is_valid():
        serializer.save()
        create_audit_log(request, 'settings_update', 'CompanyProfile', profile.id,
                         {k: v for k, v in request.data.items() if k != 'logo_url'},
                         object_name=profile.company_name)
        return Response(serializer.data)
    return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
@parser_classes([MultiPartParser, FormParser])
def company_logo_upload(request):
    """Upload the company logo (max 1MB); stored inline as a data URL"""
    profile = CompanyProfile.objects.first()
    if profile is None:
        return Response({'error': 'Create the company profile before uploading a logo'},
                        status=status.HTTP_400_BAD_REQUEST)

    serializer = LogoUploadSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    logo = serializer.validated_data['logo']
    logo.seek(0)
    content_type = getattr(logo, 'content_type', None) or 'image/png'
    encoded = base64.b64encode(logo.read()).decode('ascii')
    profile.logo_url = f"data:{content_type};base64,{encoded}"
    profile.save(update_fields=['logo_url', 'updated_at'])
    create_audit_log(request, 'settings_update', 'CompanyProfile', profile.id,
                     {'logo': logo.name, 'size': logo.size}, object_name=profile.company_name)
    logger.info(f"Company logo updated ({logo.size} bytes)")
    return Response(CompanyProfileSerializer(profile).data)


def _upsert_settings(request, model, serializer_class, model_name):
    instance = model.load()
    if request.method == 'GET':
        return Response(serializer_class(instance).data)
    serializer = serializer_class(instance, data=request.data, partial=True)
    if serializer.is_valid():
        serializer.save()
        changed = sorted(k for k in request.data.keys())
        create_audit_log(request, 'settings_update', model_name, instance.id, {'fields': changed})
        return Response(serializer.data)
    return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET', 'PUT'])
@permission_classes([IsAdminRole])
def api_keys_settings(request):
    """AI / email provider keys, masked on read"""
    return _upsert_settings(request, ApiSettings, ApiSettingsSerializer, 'ApiSettings')


@api_view(['GET', 'PUT'])
@permission_classes([IsAdminRole])
def payment_gateway_settings(request):
    """Stripe / Razorpay credentials, masked on read"""
    return _upsert_settings(request, PaymentGatewaySettings, PaymentGatewaySettingsSerializer, 'PaymentGatewaySettings')


@api_view(['POST'])
@permission_classes([IsAdminRole])
def payment_gateway_test(request):
    gateway = PaymentGatewaySettings.load()
    result = check_payment_gateway(gateway, request.data.get('provider'))
    return Response(result)


@api_view(['GET', 'PUT'])
@permission_classes([IsAdminRole])
def slack_settings(request):
    return _upsert_settings(request, SlackSettings, SlackSettingsSerializer, 'SlackSettings')


@api_view(['POST'])
@permission_classes([IsAdminRole])
def slack_test_connection(request):
    """Check the stored (or a just-entered) bot token against Slack"""
    bot_token = request.data.get('bot_token') or SlackSettings.load().bot_token
    return Response(check_slack_connection(bot_token))


# AuditLog views (read-only)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def audit_log_list(request):
    """List audit logs with filtering"""
    queryset = AuditLog.objects.select_related('user')

    if not request.user.is_admin_role:
        queryset = queryset.filter(user=request.user)

    action_filter = request.query_params.get('action', None)
    if action_filter:
        queryset = queryset.filter(action=action_filter)

    model_filter = request.query_params.get('model', None)
    if model_filter:
        queryset = queryset.filter(model_name=model_filter)

    date_from = request.query_params.get('date_from', None)
    date_to = request.query_params.get('date_to', None)
    if date_from:
        queryset = queryset.filter(created_at__date__gte=date_from)
    if date_to:
        queryset = queryset.filter(created_at__date__lte=date_to)

    queryset = queryset.order_by('-created_at')[:500]
    serializer = AuditLogSerializer(queryset, many=True)
    return Response(serializer.data)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def audit_log_detail(request, pk):
    audit_log = get_object_or_404(AuditLog, pk=pk)

    if not request.user.is_admin_role and audit_log.user != request.user:
        return Response({'error': 'Permission denied'}, status=status.HTTP_403_FORBIDDEN)

    serializer = AuditLogSerializer(audit_log)
    return Response(serializer.data)
