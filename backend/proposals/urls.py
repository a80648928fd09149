from django.urls import path
from .views import (
    proposal_list_create, proposal_detail, proposal_status, proposal_preview_pricing,
    proposal_convert_to_contract, contract_list_create, contract_detail, contract_status
)

urlpatterns = [
    path('proposals/', proposal_list_create, name='proposal-list-create'),
    path('proposals/preview-pricing/', proposal_preview_pricing, name='proposal-preview-pricing'),
    path('proposals/<int:pk>/', proposal_detail, name='proposal-detail'),
    path('proposals/<int:pk>/status/', proposal_status, name='proposal-status'),
    path('proposals/<int:pk>/convert-to-contract/', proposal_convert_to_contract, name='proposal-convert-to-contract'),

    path('contracts/', contract_list_create, name='contract-list-create'),
    path('contracts/<int:pk>/', contract_detail, name='contract-detail'),
    path('contracts/<int:pk>/status/', contract_status, name='contract-status'),
]
