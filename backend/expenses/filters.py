import django_filters
from django.db.models import Q

from .models import Expense, Vendor


class VendorFilter(django_filters.FilterSet):
    search = django_filters.CharFilter(method='filter_search')
    category = django_filters.ChoiceFilter(choices=Vendor.CATEGORY_CHOICES)
    status = django_filters.ChoiceFilter(choices=Vendor.STATUS_CHOICES)

    class Meta:
        model = Vendor
        fields = ['search', 'category', 'status']

    def filter_search(self, queryset, name, value):
        value = value.strip()
        if not value:
            return queryset
        return queryset.filter(
            Q(name__icontains=value) |
            Q(contact_name__icontains=value) |
            Q(email__icontains=value)
        )


class ExpenseFilter(django_filters.FilterSet):
    from_date = django_filters.DateFilter(field_name='expense_date', lookup_expr='gte')
    to_date = django_filters.DateFilter(field_name='expense_date', lookup_expr='lte')
    vendor = django_filters.NumberFilter(field_name='vendor_id')
    category = django_filters.NumberFilter(field_name='category_id')
    status = django_filters.ChoiceFilter(choices=Expense.STATUS_CHOICES)

    class Meta:
        model = Expense
        fields = ['from_date', 'to_date', 'vendor', 'category', 'status']
