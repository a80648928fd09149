import django_filters
from django.db.models import Q

from .models import Contract, Proposal


class ProposalFilter(django_filters.FilterSet):
    client = django_filters.NumberFilter(field_name='client_id')
    status = django_filters.ChoiceFilter(choices=Proposal.STATUS_CHOICES)
    search = django_filters.CharFilter(method='filter_search')

    class Meta:
        model = Proposal
        fields = ['client', 'status', 'search']

    def filter_search(self, queryset, name, value):
        value = value.strip()
        if not value:
            return queryset
        return queryset.filter(Q(title__icontains=value) | Q(proposal_number__icontains=value))


class ContractFilter(django_filters.FilterSet):
    client = django_filters.NumberFilter(field_name='client_id')
    proposal = django_filters.NumberFilter(field_name='proposal_id')
    status = django_filters.ChoiceFilter(choices=Contract.STATUS_CHOICES)

    class Meta:
        model = Contract
        fields = ['client', 'proposal', 'status']
