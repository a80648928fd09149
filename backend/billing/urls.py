from django.urls import path
from .views import (
    invoice_list_create, invoice_detail, invoice_status, invoice_upcoming, invoice_payments,
    dashboard_summary_view, dashboard_financial_view
)

urlpatterns = [
    path('invoices/', invoice_list_create, name='invoice-list-create'),
    path('invoices/upcoming/', invoice_upcoming, name='invoice-upcoming'),
    path('invoices/<int:pk>/', invoice_detail, name='invoice-detail'),
    path('invoices/<int:pk>/status/', invoice_status, name='invoice-status'),
    path('invoices/<int:pk>/payments/', invoice_payments, name='invoice-payments'),

    path('dashboard/summary/', dashboard_summary_view, name='dashboard-summary'),
    path('dashboard/financial/', dashboard_financial_view, name='dashboard-financial'),
]
