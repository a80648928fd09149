import logging
from decimal import Decimal

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated, AllowAny
from django.db.models import Count, DecimalField, OuterRef, Subquery, Sum, Value
from django.db.models.functions import Coalesce
from django.shortcuts import get_object_or_404
from django.utils import timezone

from backend.billing.models import Invoice
from backend.core.exceptions import BusinessRuleError
from backend.core.utils import create_audit_log
from .filters import ClientFilter, ProjectFilter
from .models import Client, Project
from .serializers import (
    ClientSerializer, ClientDetailSerializer, ClientStatusSerializer,
    ProjectSerializer, PublicOnboardingSerializer
)

logger = logging.getLogger('backend.clients')

MONEY = DecimalField(max_digits=14, decimal_places=2)


def clients_with_stats(queryset):
    """Annotate total invoiced, outstanding balance and project count"""
    invoiced = Invoice.objects.filter(client=OuterRef('pk')).values('client').annotate(
        total=Sum('total_amount')
    ).values('total')
    outstanding = Invoice.objects.filter(client=OuterRef('pk')).exclude(status='PAID').values('client').annotate(
        total=Sum('balance_due')
    ).values('total')
    return queryset.annotate(
        total_invoiced=Coalesce(Subquery(invoiced, output_field=MONEY), Value(Decimal('0.00')), output_field=MONEY),
        outstanding_amount=Coalesce(Subquery(outstanding, output_field=MONEY), Value(Decimal('0.00')), output_field=MONEY),
        project_count=Count('projects', distinct=True),
    )


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def client_list_create(request):
    """List clients with stats or create a client (quick-add or full form)"""
    if request.method == 'GET':
        queryset = ClientFilter(request.query_params, queryset=Client.objects.all()).qs
        serializer = ClientSerializer(clients_with_stats(queryset), many=True)
        return Response(serializer.data)
    else:
        serializer = ClientSerializer(data=request.data)
        if serializer.is_valid():
            client = serializer.save()
            create_audit_log(request, 'create', 'Client', client.id, request.data, object_name=client.name)
            return Response(ClientSerializer(client).data, status=status.HTTP_201_CREATED)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def client_detail(request, pk):
    """Retrieve, update or delete a client"""
    client = get_object_or_404(Client, pk=pk)

    if request.method == 'GET':
        serializer = ClientDetailSerializer(client)
        return Response(serializer.data)
    elif request.method in ('PUT', 'PATCH'):
        serializer = ClientSerializer(client, data=request.data, partial=request.method == 'PATCH')
        if serializer.is_valid():
            serializer.save()
            create_audit_log(request, 'update', 'Client', client.id, request.data, object_name=client.name)
            return Response(serializer.data)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    else:  # DELETE
        try:
            client.ensure_deletable()
        except BusinessRuleError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)
        create_audit_log(request, 'delete', 'Client', client.id, object_name=client.name)
        client.delete()
        return Response(status=status.HTTP_204_NO_CONTENT)


@api_view(['PUT'])
@permission_classes([IsAuthenticated])
def client_status(request, pk):
    """Change a client's status"""
    client = get_object_or_404(Client, pk=pk)
    if not request.data.get('status'):
        return Response({'error': 'Status is required'}, status=status.HTTP_400_BAD_REQUEST)
    serializer = ClientStatusSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    old_status = client.status
    client.status = serializer.validated_data['status']
    client.save(update_fields=['status', 'updated_at'])
    create_audit_log(request, 'status_change', 'Client', client.id,
                     {'status': {'old': old_status, 'new': client.status}}, object_name=client.name)
    return Response(ClientSerializer(client).data)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def client_regenerate_token(request, pk):
    client = get_object_or_404(Client, pk=pk)
    token = client.regenerate_onboarding_token()
    create_audit_log(request, 'token_regenerate', 'Client', client.id, object_name=client.name)
    return Response({'onboarding_token': token})


@api_view(['GET', 'POST'])
@permission_classes([AllowAny])
def public_onboarding(request, token):
    """Onboarding form reached through the link shared with the client"""
    client = get_object_or_404(Client, onboarding_token=token)

    if request.method == 'GET':
        return Response(PublicOnboardingSerializer(client).data)

    serializer = PublicOnboardingSerializer(client, data=request.data, partial=True)
    if serializer.is_valid():
        serializer.save(onboarding_completed_at=timezone.now())
        logger.info(f"Onboarding data submitted for client {client.id} ({client.name})")
        create_audit_log(request, 'update', 'Client', client.id, {'onboarding': 'submitted'},
                         object_name=client.name)
        return Response(serializer.data)
    return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


# Project views
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def project_list_create(request):
    """List projects or create a new project"""
    if request.method == 'GET':
        queryset = ProjectFilter(request.query_params, queryset=Project.objects.select_related('client')).qs
        serializer = ProjectSerializer(queryset, many=True)
        return Response(serializer.data)
    else:
        serializer = ProjectSerializer(data=request.data)
        if serializer.is_valid():
            project = serializer.save()
            create_audit_log(request, 'create', 'Project', project.id, request.data, object_name=project.name)
            return Response(serializer.data, status=status.HTTP_201_CREATED)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def project_detail(request, pk):
    """Retrieve, update or delete a project"""
    project = get_object_or_404(Project.objects.select_related('client'), pk=pk)

    if request.method == 'GET':
        serializer = ProjectSerializer(project)
        return Response(serializer.data)
    elif request.method in ('PUT', 'PATCH'):
        serializer = ProjectSerializer(project, data=request.data, partial=request.method == 'PATCH')
        if serializer.is_valid():
            serializer.save()
            create_audit_log(request, 'update', 'Project', project.id, request.data, object_name=project.name)
            return Response(serializer.data)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    else:  # DELETE
        try:
            project.ensure_deletable()
        except BusinessRuleError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)
        create_audit_log(request, 'delete', 'Project', project.id, object_name=project.name)
        project.delete()
        return Response(status=status.HTTP_204_NO_CONTENT)
