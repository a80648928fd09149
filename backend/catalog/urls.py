from django.urls import path
from .views import service_list_create, service_detail

urlpatterns = [
    path('services/', service_list_create, name='service-list-create'),
    path('services/<int:pk>/', service_detail, name='service-detail'),
]
