import django_filters

from .models import Invoice


class InvoiceFilter(django_filters.FilterSet):
    client = django_filters.NumberFilter(field_name='client_id')
    project = django_filters.NumberFilter(field_name='project_id')
    status = django_filters.ChoiceFilter(choices=Invoice.STATUS_CHOICES)
    search = django_filters.CharFilter(field_name='invoice_number', lookup_expr='icontains')
    issue_date_from = django_filters.DateFilter(field_name='issue_date', lookup_expr='gte')
    issue_date_to = django_filters.DateFilter(field_name='issue_date', lookup_expr='lte')

    class Meta:
        model = Invoice
        fields = ['client', 'project', 'status', 'search', 'issue_date_from', 'issue_date_to']
