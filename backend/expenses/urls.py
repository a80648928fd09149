from django.urls import path
from .views import (
    vendor_list_create, vendor_detail, vendor_status,
    expense_category_list_create, expense_category_detail, expense_category_seed_defaults,
    expense_list_create, expense_detail, expense_mark_paid
)

urlpatterns = [
    path('vendors/', vendor_list_create, name='vendor-list-create'),
    path('vendors/<int:pk>/', vendor_detail, name='vendor-detail'),
    path('vendors/<int:pk>/status/', vendor_status, name='vendor-status'),

    path('expense-categories/', expense_category_list_create, name='expense-category-list-create'),
    path('expense-categories/seed-defaults/', expense_category_seed_defaults, name='expense-category-seed-defaults'),
    path('expense-categories/<int:pk>/', expense_category_detail, name='expense-category-detail'),

    path('expenses/', expense_list_create, name='expense-list-create'),
    path('expenses/<int:pk>/', expense_detail, name='expense-detail'),
    path('expenses/<int:pk>/mark-paid/', expense_mark_paid, name='expense-mark-paid'),
]
