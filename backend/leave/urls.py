from django.urls import path
from . import views

urlpatterns = [
    path('leave-types/', views.leave_type_list_create, name='leave-type-list-create'),
    path('leave-types/seed/', views.leave_type_seed, name='leave-type-seed'),
    path('leave-types/<int:pk>/', views.leave_type_detail, name='leave-type-detail'),

    path('leave-policies/', views.leave_policy_list_create, name='leave-policy-list-create'),
    path('leave-policies/seed/', views.leave_policy_seed, name='leave-policy-seed'),
    path('leave-policies/<int:pk>/', views.leave_policy_detail, name='leave-policy-detail'),

    path('leave-balances/', views.leave_balance_list, name='leave-balance-list'),
    path('leave-balances/initialize/<int:member_id>/', views.leave_balance_initialize, name='leave-balance-initialize'),
    path('leave-balances/reinitialize/<int:member_id>/', views.leave_balance_reinitialize, name='leave-balance-reinitialize'),
    path('leave-balances/reinitialize-all/', views.leave_balance_reinitialize_all, name='leave-balance-reinitialize-all'),

    path('leave-requests/', views.leave_request_list_create, name='leave-request-list-create'),
    path('leave-requests/check-availability/', views.leave_request_check_availability, name='leave-request-check-availability'),
    path('leave-requests/<int:pk>/', views.leave_request_detail, name='leave-request-detail'),
    path('leave-requests/<int:pk>/approve/', views.leave_request_approve, name='leave-request-approve'),
    path('leave-requests/<int:pk>/reject/', views.leave_request_reject, name='leave-request-reject'),
    path('leave-requests/<int:pk>/cancel/', views.leave_request_cancel, name='leave-request-cancel'),
]
