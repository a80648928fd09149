from django.urls import path
from .views import (
    client_list_create, client_detail, client_status, client_regenerate_token,
    public_onboarding, project_list_create, project_detail
)

urlpatterns = [
    path('clients/', client_list_create, name='client-list-create'),
    path('clients/<int:pk>/', client_detail, name='client-detail'),
    path('clients/<int:pk>/status/', client_status, name='client-status'),
    path('clients/<int:pk>/onboarding-token/', client_regenerate_token, name='client-onboarding-token'),
    path('public/onboarding/<str:token>/', public_onboarding, name='public-onboarding'),

    path('projects/', project_list_create, name='project-list-create'),
    path('projects/<int:pk>/', project_detail, name='project-detail'),
]
