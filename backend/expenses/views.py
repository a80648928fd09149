import logging
from decimal import Decimal

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from django.db.models import Count, DecimalField, Q, Sum, Value
from django.db.models.functions import Coalesce
from django.shortcuts import get_object_or_404

from backend.core.exceptions import BusinessRuleError
from backend.core.utils import create_audit_log
from .filters import ExpenseFilter, VendorFilter
from .models import Expense, ExpenseCategory, Vendor
from .serializers import (
    ExpenseCategorySerializer, ExpenseSerializer, MarkPaidSerializer,
    VendorSerializer, VendorStatusSerializer
)
from .services import seed_default_categories

logger = logging.getLogger('backend.expenses')


def vendors_with_stats(queryset):
    return queryset.annotate(
        total_spend=Coalesce(
            Sum('expenses__amount', filter=Q(expenses__status='PAID')),
            Value(Decimal('0.00')),
            output_field=DecimalField(max_digits=14, decimal_places=2),
        ),
        expense_count=Count('expenses'),
    )


# Vendor views
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def vendor_list_create(request):
    """List vendors with total spend or create a vendor"""
    if request.method == 'GET':
        queryset = VendorFilter(request.query_params, queryset=Vendor.objects.all()).qs
        serializer = VendorSerializer(vendors_with_stats(queryset), many=True)
        return Response(serializer.data)
    else:
        serializer = VendorSerializer(data=request.data)
        if serializer.is_valid():
            vendor = serializer.save()
            create_audit_log(request, 'create', 'Vendor', vendor.id, request.data, object_name=vendor.name)
            return Response(serializer.data, status=status.HTTP_201_CREATED)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def vendor_detail(request, pk):
    vendor = get_object_or_404(Vendor, pk=pk)

    if request.method == 'GET':
        return Response(VendorSerializer(vendor).data)
    elif request.method in ('PUT', 'PATCH'):
        serializer = VendorSerializer(vendor, data=request.data, partial=request.method == 'PATCH')
        if serializer.is_valid():
            serializer.save()
            create_audit_log(request, 'update', 'Vendor', vendor.id, request.data, object_name=vendor.name)
            return Response(serializer.data)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    else:  # DELETE
        try:
            vendor.ensure_deletable()
        except BusinessRuleError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)
        create_audit_log(request, 'delete', 'Vendor', vendor.id, object_name=vendor.name)
        vendor.delete()
        return Response(status=status.HTTP_204_NO_CONTENT)


@api_view(['PUT'])
@permission_classes([IsAuthenticated])
def vendor_status(request, pk):
    vendor = get_object_or_404(Vendor, pk=pk)
    serializer = VendorStatusSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    old_status = vendor.status
    vendor.status = serializer.validated_data['status']
    vendor.save(update_fields=['status', 'updated_at'])
    create_audit_log(request, 'status_change', 'Vendor', vendor.id,
                     {'status': {'old': old_status, 'new': vendor.status}}, object_name=vendor.name)
    return Response(VendorSerializer(vendor).data)


# Expense category views
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def expense_category_list_create(request):
    if request.method == 'GET':
        queryset = ExpenseCategory.objects.annotate(expense_count=Count('expenses'))
        group = request.query_params.get('group')
        if group:
            queryset = queryset.filter(group=group)
        return Response(ExpenseCategorySerializer(queryset, many=True).data)
    else:
        serializer = ExpenseCategorySerializer(data=request.data)
        if serializer.is_valid():
            category = serializer.save()
            create_audit_log(request, 'create', 'ExpenseCategory', category.id, request.data,
                             object_name=category.name)
            return Response(serializer.data, status=status.HTTP_201_CREATED)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def expense_category_detail(request, pk):
    category = get_object_or_404(ExpenseCategory, pk=pk)

    if request.method == 'GET':
        return Response(ExpenseCategorySerializer(category).data)
    elif request.method in ('PUT', 'PATCH'):
        serializer = ExpenseCategorySerializer(category, data=request.data, partial=request.method == 'PATCH')
        if serializer.is_valid():
            serializer.save()
            create_audit_log(request, 'update', 'ExpenseCategory', category.id, request.data,
                             object_name=category.name)
            return Response(serializer.data)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    else:  # DELETE
        try:
            category.ensure_deletable()
        except BusinessRuleError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)
        create_audit_log(request, 'delete', 'ExpenseCategory', category.id, object_name=category.name)
        category.delete()
        return Response(status=status.HTTP_204_NO_CONTENT)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def expense_category_seed_defaults(request):
    """Create the standard agency categories that are missing"""
    result = seed_default_categories()
    return Response(result, status=status.HTTP_201_CREATED if result['created'] else status.HTTP_200_OK)


# Expense views
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def expense_list_create(request):
    if request.method == 'GET':
        queryset = Expense.objects.select_related('vendor', 'category')
        expenses = ExpenseFilter(request.query_params, queryset=queryset).qs
        return Response(ExpenseSerializer(expenses, many=True).data)
    else:
        serializer = ExpenseSerializer(data=request.data)
        if serializer.is_valid():
            expense = serializer.save()
            create_audit_log(request, 'create', 'Expense', expense.id, request.data,
                             object_name=expense.description)
            return Response(serializer.data, status=status.HTTP_201_CREATED)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def expense_detail(request, pk):
    expense = get_object_or_404(Expense.objects.select_related('vendor', 'category'), pk=pk)

    if request.method == 'GET':
        return Response(ExpenseSerializer(expense).data)
    elif request.method in ('PUT', 'PATCH'):
        serializer = ExpenseSerializer(expense, data=request.data, partial=request.method == 'PATCH')
        if serializer.is_valid():
            serializer.save()
            create_audit_log(request, 'update', 'Expense', expense.id, request.data,
                             object_name=expense.description)
            return Response(serializer.data)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    else:  # DELETE
        create_audit_log(request, 'delete', 'Expense', expense.id,
                         {'amount': expense.amount}, object_name=expense.description)
        expense.delete()
        return Response(status=status.HTTP_204_NO_CONTENT)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def expense_mark_paid(request, pk):
    """Settle a planned or due expense"""
    expense = get_object_or_404(Expense, pk=pk)
    serializer = MarkPaidSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    data = serializer.validated_data
    try:
        expense.mark_paid(data['payment_date'], data['payment_method'], data.get('reference', ''))
    except BusinessRuleError as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

    logger.info(f"Expense {expense.id} marked paid on {expense.paid_date}")
    create_audit_log(request, 'mark_paid', 'Expense', expense.id,
                     {'paid_date': expense.paid_date, 'payment_method': expense.payment_method},
                     object_name=expense.description)
    return Response(ExpenseSerializer(expense).data)
