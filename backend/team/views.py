import logging

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated, AllowAny
from django.db import transaction
from django.shortcuts import get_object_or_404
from django.utils import timezone

from backend.core.exceptions import BusinessRuleError
from backend.core.utils import create_audit_log, today
from backend.expenses.serializers import MarkPaidSerializer
from backend.leave.services import initialize_leave_balances_for_member
from .filters import SalaryPaymentFilter, TeamMemberFilter
from .models import JobRole, SalaryPayment, TeamMember
from .serializers import (
    JobRoleSerializer, PublicTeamOnboardingSerializer, SalaryPaymentSerializer,
    TeamMemberSerializer, TeamMemberStatusSerializer
)
from .services import seed_default_job_roles

logger = logging.getLogger('backend.team')


# Job role views
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def job_role_list_create(request):
    if request.method == 'GET':
        roles = JobRole.objects.all()
        is_active = request.query_params.get('is_active')
        if is_active is not None:
            roles = roles.filter(is_active=is_active.lower() in ('1', 'true', 'yes'))
        return Response(JobRoleSerializer(roles, many=True).data)
    else:
        serializer = JobRoleSerializer(data=request.data)
        if serializer.is_valid():
            role = serializer.save()
            create_audit_log(request, 'create', 'JobRole', role.id, request.data, object_name=role.title)
            return Response(serializer.data, status=status.HTTP_201_CREATED)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def job_role_detail(request, pk):
    role = get_object_or_404(JobRole, pk=pk)

    if request.method == 'GET':
        return Response(JobRoleSerializer(role).data)
    elif request.method in ('PUT', 'PATCH'):
        serializer = JobRoleSerializer(role, data=request.data, partial=request.method == 'PATCH')
        if serializer.is_valid():
            serializer.save()
            create_audit_log(request, 'update', 'JobRole', role.id, request.data, object_name=role.title)
            return Response(serializer.data)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    else:  # DELETE
        create_audit_log(request, 'delete', 'JobRole', role.id, object_name=role.title)
        role.delete()
        return Response(status=status.HTTP_204_NO_CONTENT)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def job_role_seed_defaults(request):
    result = seed_default_job_roles()
    return Response(result, status=status.HTTP_201_CREATED if result['created'] else status.HTTP_200_OK)


# Team member views
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def team_member_list_create(request):
    """List team members or add one (leave balances are set up for the current year)"""
    if request.method == 'GET':
        members = TeamMemberFilter(request.query_params, queryset=TeamMember.objects.all()).qs
        return Response(TeamMemberSerializer(members, many=True).data)
    else:
        serializer = TeamMemberSerializer(data=request.data)
        if serializer.is_valid():
            with transaction.atomic():
                member = serializer.save()
                balances = initialize_leave_balances_for_member(member, today().year)
            logger.info(f"Team member {member.id} ({member.name}) added with {len(balances)} leave balance(s)")
            create_audit_log(request, 'create', 'TeamMember', member.id, request.data, object_name=member.name)
            return Response(TeamMemberSerializer(member).data, status=status.HTTP_201_CREATED)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def team_member_detail(request, pk):
    member = get_object_or_404(TeamMember, pk=pk)

    if request.method == 'GET':
        return Response(TeamMemberSerializer(member).data)
    elif request.method in ('PUT', 'PATCH'):
        serializer = TeamMemberSerializer(member, data=request.data, partial=request.method == 'PATCH')
        if serializer.is_valid():
            serializer.save()
            create_audit_log(request, 'update', 'TeamMember', member.id, request.data, object_name=member.name)
            return Response(serializer.data)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    else:  # DELETE
        try:
            member.ensure_deletable()
        except BusinessRuleError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)
        create_audit_log(request, 'delete', 'TeamMember', member.id, object_name=member.name)
        member.delete()
        return Response(status=status.HTTP_204_NO_CONTENT)


@api_view(['PUT'])
@permission_classes([IsAuthenticated])
def team_member_status(request, pk):
    member = get_object_or_404(TeamMember, pk=pk)
    serializer = TeamMemberStatusSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    old_status = member.status
    member.status = serializer.validated_data['status']
    member.save(update_fields=['status', 'updated_at'])
    create_audit_log(request, 'status_change', 'TeamMember', member.id,
                     {'status': {'old': old_status, 'new': member.status}}, object_name=member.name)
    return Response(TeamMemberSerializer(member).data)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def team_member_regenerate_token(request, pk):
    member = get_object_or_404(TeamMember, pk=pk)
    token = member.regenerate_onboarding_token()
    create_audit_log(request, 'token_regenerate', 'TeamMember', member.id, object_name=member.name)
    return Response({'onboarding_token': token})


@api_view(['GET', 'POST'])
@permission_classes([AllowAny])
def public_team_onboarding(request, token):
    """Employee onboarding form reached through a shared link"""
    member = get_object_or_404(TeamMember, onboarding_token=token)

    if request.method == 'GET':
        return Response(PublicTeamOnboardingSerializer(member).data)

    serializer = PublicTeamOnboardingSerializer(member, data=request.data, partial=True)
    if serializer.is_valid():
        serializer.save(onboarding_completed_at=timezone.now())
        logger.info(f"Onboarding data submitted for team member {member.id}")
        return Response(serializer.data)
    return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


# Salary views
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def salary_list_create(request):
    if request.method == 'GET':
        queryset = SalaryPayment.objects.select_related('team_member')
        salaries = SalaryPaymentFilter(request.query_params, queryset=queryset).qs
        return Response(SalaryPaymentSerializer(salaries, many=True).data)
    else:
        serializer = SalaryPaymentSerializer(data=request.data)
        if serializer.is_valid():
            salary = serializer.save()
            create_audit_log(request, 'create', 'SalaryPayment', salary.id,
                             {'month': salary.month, 'amount': salary.amount},
                             object_name=salary.team_member.name)
            return Response(serializer.data, status=status.HTTP_201_CREATED)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def salary_detail(request, pk):
    salary = get_object_or_404(SalaryPayment.objects.select_related('team_member'), pk=pk)

    if request.method == 'GET':
        return Response(SalaryPaymentSerializer(salary).data)
    elif request.method in ('PUT', 'PATCH'):
        serializer = SalaryPaymentSerializer(salary, data=request.data, partial=request.method == 'PATCH')
        if serializer.is_valid():
            serializer.save()
            create_audit_log(request, 'update', 'SalaryPayment', salary.id, request.data,
                             object_name=salary.team_member.name)
            return Response(serializer.data)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    else:  # DELETE
        create_audit_log(request, 'delete', 'SalaryPayment', salary.id,
                         {'month': salary.month, 'amount': salary.amount},
                         object_name=salary.team_member.name)
        salary.delete()
        return Response(status=status.HTTP_204_NO_CONTENT)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def salary_mark_paid(request, pk):
    salary = get_object_or_404(SalaryPayment.objects.select_related('team_member'), pk=pk)
    serializer = MarkPaidSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    data = serializer.validated_data
    try:
        salary.mark_paid(data['payment_date'], data['payment_method'], data.get('reference', ''))
    except BusinessRuleError as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

    create_audit_log(request, 'mark_paid', 'SalaryPayment', salary.id,
                     {'month': salary.month, 'payment_date': salary.payment_date},
                     object_name=salary.team_member.name)
    return Response(SalaryPaymentSerializer(salary).data)
