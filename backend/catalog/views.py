from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from django.shortcuts import get_object_or_404

from backend.core.utils import create_audit_log
from .filters import ServiceFilter
from .models import Service
from .serializers import ServiceSerializer


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def service_list_create(request):
    """List services or create a new service"""
    if request.method == 'GET':
        services = ServiceFilter(request.query_params, queryset=Service.objects.all()).qs
        serializer = ServiceSerializer(services, many=True)
        return Response(serializer.data)
    else:
        serializer = ServiceSerializer(data=request.data)
        if serializer.is_valid():
            service = serializer.save()
            create_audit_log(request, 'create', 'Service', service.id, request.data, object_name=service.name)
            return Response(serializer.data, status=status.HTTP_201_CREATED)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def service_detail(request, pk):
    """Retrieve, update or delete a service"""
    service = get_object_or_404(Service, pk=pk)

    if request.method == 'GET':
        serializer = ServiceSerializer(service)
        return Response(serializer.data)
    elif request.method in ('PUT', 'PATCH'):
        serializer = ServiceSerializer(service, data=request.data, partial=request.method == 'PATCH')
        if serializer.is_valid():
            serializer.save()
            create_audit_log(request, 'update', 'Service', service.id, request.data, object_name=service.name)
            return Response(serializer.data)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    else:  # DELETE
        create_audit_log(request, 'delete', 'Service', service.id, object_name=service.name)
        service.delete()
        return Response(status=status.HTTP_204_NO_CONTENT)
