from django.urls import path
from .views import fixed_asset_list_create, fixed_asset_detail

urlpatterns = [
    path('fixed-assets/', fixed_asset_list_create, name='fixed-asset-list-create'),
    path('fixed-assets/<int:pk>/', fixed_asset_detail, name='fixed-asset-detail'),
]
