from django.urls import path
from .views import (
    EmailTokenObtainPairView, CustomTokenRefreshView, register, user_me,
    user_list_create, user_detail,
    company_profile, company_profile_detail, company_logo_upload,
    api_keys_settings, payment_gateway_settings, payment_gateway_test,
    slack_settings, slack_test_connection,
    audit_log_list, audit_log_detail,
)

urlpatterns = [
    # Auth endpoints
    path('auth/register/', register, name='register'),
    path('auth/login/', EmailTokenObtainPairView.as_view(), name='token_obtain_pair'),
    path('auth/refresh/', CustomTokenRefreshView.as_view(), name='token_refresh'),
    path('auth/me/', user_me, name='user-me'),

    # User endpoints
    path('users/', user_list_create, name='user-list-create'),
    path('users/<int:pk>/', user_detail, name='user-detail'),

    # Settings endpoints
    path('settings/company/', company_profile, name='company-profile'),
    path('settings/company/logo/', company_logo_upload, name='company-logo-upload'),
    path('settings/company/<int:pk>/', company_profile_detail, name='company-profile-detail'),
    path('settings/api-keys/', api_keys_settings, name='api-keys-settings'),
    path('settings/payment-gateway/', payment_gateway_settings, name='payment-gateway-settings'),
    path('settings/payment-gateway/test/', payment_gateway_test, name='payment-gateway-test'),
    path('slack/settings/', slack_settings, name='slack-settings'),
    path('slack/test-connection/', slack_test_connection, name='slack-test-connection'),

    # AuditLog endpoints
    path('audit-logs/', audit_log_list, name='audit-log-list'),
    path('audit-logs/<int:pk>/', audit_log_detail, name='audit-log-detail'),
]
