import logging

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from django.shortcuts import get_object_or_404

from backend.core.exceptions import BusinessRuleError
from backend.core.utils import create_audit_log
from .filters import ContractFilter, ProposalFilter
from .models import Contract, Proposal
from .pricing import calculate_pricing
from .serializers import (
    ContractSerializer, ContractStatusSerializer, PricingPreviewSerializer,
    ProposalSerializer, ProposalStatusSerializer
)
from .services import convert_proposal_to_contract, set_contract_status, set_proposal_status

logger = logging.getLogger('backend.proposals')


# Proposal views
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def proposal_list_create(request):
    """List proposals or create one (totals are computed server-side)"""
    if request.method == 'GET':
        queryset = Proposal.objects.select_related('client')
        proposals = ProposalFilter(request.query_params, queryset=queryset).qs
        return Response(ProposalSerializer(proposals, many=True).data)
    else:
        serializer = ProposalSerializer(data=request.data, context={'user': request.user})
        if serializer.is_valid():
            proposal = serializer.save()
            create_audit_log(request, 'create', 'Proposal', proposal.id, {'total_amount': proposal.total_amount},
                             object_name=proposal.title, object_reference=proposal.proposal_number)
            return Response(ProposalSerializer(proposal).data, status=status.HTTP_201_CREATED)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def proposal_detail(request, pk):
    proposal = get_object_or_404(Proposal.objects.select_related('client'), pk=pk)

    if request.method == 'GET':
        return Response(ProposalSerializer(proposal).data)
    elif request.method in ('PUT', 'PATCH'):
        serializer = ProposalSerializer(proposal, data=request.data, partial=request.method == 'PATCH')
        if serializer.is_valid():
            proposal = serializer.save()
            create_audit_log(request, 'update', 'Proposal', proposal.id, {'total_amount': proposal.total_amount},
                             object_name=proposal.title, object_reference=proposal.proposal_number)
            return Response(ProposalSerializer(proposal).data)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    else:  # DELETE
        create_audit_log(request, 'delete', 'Proposal', proposal.id,
                         object_name=proposal.title, object_reference=proposal.proposal_number)
        proposal.delete()
        return Response(status=status.HTTP_204_NO_CONTENT)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def proposal_status(request, pk):
    proposal = get_object_or_404(Proposal.objects.select_related('client'), pk=pk)
    serializer = ProposalStatusSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    old_status = proposal.status
    set_proposal_status(proposal, serializer.validated_data['status'])
    create_audit_log(request, 'status_change', 'Proposal', proposal.id,
                     {'status': {'old': old_status, 'new': proposal.status}},
                     object_name=proposal.title, object_reference=proposal.proposal_number)
    return Response(ProposalSerializer(proposal).data)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def proposal_preview_pricing(request):
    """Price an unsaved proposal"""
    serializer = PricingPreviewSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    data = serializer.validated_data
    pricing = calculate_pricing(data['services'], data['discount'], data['discount_type'],
                                data['tax_rate'], data['payment_schedule'])
    return Response(pricing)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def proposal_convert_to_contract(request, pk):
    proposal = get_object_or_404(Proposal.objects.select_related('client'), pk=pk)
    try:
        contract = convert_proposal_to_contract(proposal, user=request.user)
    except BusinessRuleError as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)
    create_audit_log(request, 'create', 'Contract', contract.id, {'proposal': proposal.proposal_number},
                     object_name=contract.title, object_reference=contract.contract_number)
    return Response(ContractSerializer(contract).data, status=status.HTTP_201_CREATED)


# Contract views
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def contract_list_create(request):
    if request.method == 'GET':
        queryset = Contract.objects.select_related('client', 'proposal')
        contracts = ContractFilter(request.query_params, queryset=queryset).qs
        return Response(ContractSerializer(contracts, many=True).data)
    else:
        serializer = ContractSerializer(data=request.data, context={'user': request.user})
        if serializer.is_valid():
            contract = serializer.save()
            create_audit_log(request, 'create', 'Contract', contract.id, {'contract_value': contract.contract_value},
                             object_name=contract.title, object_reference=contract.contract_number)
            return Response(ContractSerializer(contract).data, status=status.HTTP_201_CREATED)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def contract_detail(request, pk):
    contract = get_object_or_404(Contract.objects.select_related('client', 'proposal'), pk=pk)

    if request.method == 'GET':
        return Response(ContractSerializer(contract).data)
    elif request.method in ('PUT', 'PATCH'):
        serializer = ContractSerializer(contract, data=request.data, partial=request.method == 'PATCH')
        if serializer.is_valid():
            serializer.save()
            create_audit_log(request, 'update', 'Contract', contract.id, request.data,
                             object_name=contract.title, object_reference=contract.contract_number)
            return Response(serializer.data)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    else:  # DELETE
        create_audit_log(request, 'delete', 'Contract', contract.id,
                         object_name=contract.title, object_reference=contract.contract_number)
        contract.delete()
        return Response(status=status.HTTP_204_NO_CONTENT)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def contract_status(request, pk):
    contract = get_object_or_404(Contract.objects.select_related('client', 'proposal'), pk=pk)
    serializer = ContractStatusSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    old_status = contract.status
    set_contract_status(contract, serializer.validated_data['status'])
    create_audit_log(request, 'status_change', 'Contract', contract.id,
                     {'status': {'old': old_status, 'new': contract.status}},
                     object_name=contract.title, object_reference=contract.contract_number)
    return Response(ContractSerializer(contract).data)
