import logging

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from django.shortcuts import get_object_or_404

from backend.core.exceptions import BusinessRuleError
from backend.core.utils import create_audit_log
from backend.team.models import TeamMember
from .filters import LeaveBalanceFilter, LeavePolicyFilter, LeaveRequestFilter
from .models import LeaveBalance, LeavePolicy, LeaveRequest, LeaveType
from .serializers import (
    CheckAvailabilitySerializer, LeaveBalanceSerializer, LeavePolicySerializer,
    LeaveRequestSerializer, LeaveTypeSerializer, RejectLeaveSerializer
)
from . import services

logger = logging.getLogger('backend.leave')


# Leave type views
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def leave_type_list_create(request):
    if request.method == 'GET':
        return Response(LeaveTypeSerializer(LeaveType.objects.all(), many=True).data)
    else:
        serializer = LeaveTypeSerializer(data=request.data)
        if serializer.is_valid():
            leave_type = serializer.save()
            create_audit_log(request, 'create', 'LeaveType', leave_type.id, request.data, object_name=leave_type.name)
            return Response(serializer.data, status=status.HTTP_201_CREATED)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def leave_type_detail(request, pk):
    leave_type = get_object_or_404(LeaveType, pk=pk)

    if request.method == 'GET':
        return Response(LeaveTypeSerializer(leave_type).data)
    elif request.method in ('PUT', 'PATCH'):
        serializer = LeaveTypeSerializer(leave_type, data=request.data, partial=request.method == 'PATCH')
        if serializer.is_valid():
            serializer.save()
            create_audit_log(request, 'update', 'LeaveType', leave_type.id, request.data, object_name=leave_type.name)
            return Response(serializer.data)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    else:  # DELETE
        try:
            leave_type.ensure_deletable()
        except BusinessRuleError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)
        create_audit_log(request, 'delete', 'LeaveType', leave_type.id, object_name=leave_type.name)
        leave_type.delete()
        return Response(status=status.HTTP_204_NO_CONTENT)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def leave_type_seed(request):
    """Create Casual, Sick and Earned leave if missing"""
    result = services.seed_default_leave_types()
    return Response(result, status=status.HTTP_201_CREATED if result['created'] else status.HTTP_200_OK)


# Leave policy views
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def leave_policy_list_create(request):
    if request.method == 'GET':
        queryset = LeavePolicy.objects.select_related('job_role', 'leave_type')
        policies = LeavePolicyFilter(request.query_params, queryset=queryset).qs
        return Response(LeavePolicySerializer(policies, many=True).data)
    else:
        serializer = LeavePolicySerializer(data=request.data)
        if serializer.is_valid():
            policy = serializer.save()
            create_audit_log(request, 'create', 'LeavePolicy', policy.id, request.data, object_name=str(policy))
            return Response(serializer.data, status=status.HTTP_201_CREATED)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def leave_policy_detail(request, pk):
    policy = get_object_or_404(LeavePolicy.objects.select_related('job_role', 'leave_type'), pk=pk)

    if request.method == 'GET':
        return Response(LeavePolicySerializer(policy).data)
    elif request.method in ('PUT', 'PATCH'):
        serializer = LeavePolicySerializer(policy, data=request.data, partial=request.method == 'PATCH')
        if serializer.is_valid():
            serializer.save()
            create_audit_log(request, 'update', 'LeavePolicy', policy.id, request.data, object_name=str(policy))
            return Response(serializer.data)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    else:  # DELETE
        create_audit_log(request, 'delete', 'LeavePolicy', policy.id, object_name=str(policy))
        policy.delete()
        return Response(status=status.HTTP_204_NO_CONTENT)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def leave_policy_seed(request):
    result = services.seed_default_leave_policies()
    return Response(result, status=status.HTTP_201_CREATED if result['created'] else status.HTTP_200_OK)


# Leave balance views
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def leave_balance_list(request):
    queryset = LeaveBalance.objects.select_related('team_member', 'leave_type')
    balances = LeaveBalanceFilter(request.query_params, queryset=queryset).qs
    return Response(LeaveBalanceSerializer(balances, many=True).data)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def leave_balance_initialize(request, member_id):
    member = get_object_or_404(TeamMember, pk=member_id)
    created = services.initialize_leave_balances_for_member(member)
    return Response(LeaveBalanceSerializer(created, many=True).data, status=status.HTTP_201_CREATED)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def leave_balance_reinitialize(request, member_id):
    """Rebuild this year's balances from the current policies"""
    member = get_object_or_404(TeamMember, pk=member_id)
    balances = services.reinitialize_leave_balances_for_member(member)
    create_audit_log(request, 'update', 'LeaveBalance', member.id, {'reinitialized': len(balances)},
                     object_name=member.name)
    return Response(LeaveBalanceSerializer(balances, many=True).data)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def leave_balance_reinitialize_all(request):
    result = services.reinitialize_all_leave_balances()
    return Response(result)


# Leave request views
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def leave_request_list_create(request):
    if request.method == 'GET':
        queryset = LeaveRequest.objects.select_related('team_member', 'leave_type', 'approved_by')
        requests = LeaveRequestFilter(request.query_params, queryset=queryset).qs
        return Response(LeaveRequestSerializer(requests, many=True).data)
    else:
        serializer = LeaveRequestSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
        try:
            leave_request = services.create_leave_request(serializer.validated_data)
        except BusinessRuleError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)
        create_audit_log(request, 'create', 'LeaveRequest', leave_request.id,
                         {'total_days': leave_request.total_days, 'leave_type': leave_request.leave_type.code},
                         object_name=leave_request.team_member.name)
        return Response(LeaveRequestSerializer(leave_request).data, status=status.HTTP_201_CREATED)


@api_view(['GET', 'DELETE'])
@permission_classes([IsAuthenticated])
def leave_request_detail(request, pk):
    leave_request = get_object_or_404(LeaveRequest.objects.select_related('team_member', 'leave_type'), pk=pk)

    if request.method == 'GET':
        return Response(LeaveRequestSerializer(leave_request).data)
    create_audit_log(request, 'delete', 'LeaveRequest', leave_request.id,
                     {'status': leave_request.status}, object_name=leave_request.team_member.name)
    services.delete_leave_request(leave_request)
    return Response(status=status.HTTP_204_NO_CONTENT)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def leave_request_approve(request, pk):
    leave_request = get_object_or_404(LeaveRequest.objects.select_related('team_member', 'leave_type'), pk=pk)
    try:
        services.approve_leave_request(leave_request, request.user)
    except BusinessRuleError as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)
    create_audit_log(request, 'leave_approve', 'LeaveRequest', leave_request.id,
                     {'total_days': leave_request.total_days}, object_name=leave_request.team_member.name)
    return Response(LeaveRequestSerializer(leave_request).data)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def leave_request_reject(request, pk):
    leave_request = get_object_or_404(LeaveRequest.objects.select_related('team_member', 'leave_type'), pk=pk)
    serializer = RejectLeaveSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    try:
        services.reject_leave_request(leave_request, serializer.validated_data.get('reason', ''))
    except BusinessRuleError as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)
    create_audit_log(request, 'leave_reject', 'LeaveRequest', leave_request.id,
                     {'reason': leave_request.rejection_reason}, object_name=leave_request.team_member.name)
    return Response(LeaveRequestSerializer(leave_request).data)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def leave_request_cancel(request, pk):
    leave_request = get_object_or_404(LeaveRequest.objects.select_related('team_member', 'leave_type'), pk=pk)
    try:
        services.cancel_leave_request(leave_request)
    except BusinessRuleError as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)
    create_audit_log(request, 'leave_cancel', 'LeaveRequest', leave_request.id,
                     object_name=leave_request.team_member.name)
    return Response(LeaveRequestSerializer(leave_request).data)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def leave_request_check_availability(request):
    serializer = CheckAvailabilitySerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    data = serializer.validated_data
    result = services.check_availability(data['team_member'], data['leave_type'],
                                         data['requested_days'], data.get('year'))
    return Response(result)
