import django_filters
from django.db.models import Q

from .models import SalaryPayment, TeamMember


class TeamMemberFilter(django_filters.FilterSet):
    status = django_filters.ChoiceFilter(choices=TeamMember.STATUS_CHOICES)
    employment_type = django_filters.ChoiceFilter(choices=TeamMember.EMPLOYMENT_TYPE_CHOICES)
    search = django_filters.CharFilter(method='filter_search')

    class Meta:
        model = TeamMember
        fields = ['status', 'employment_type', 'search']

    def filter_search(self, queryset, name, value):
        value = value.strip()
        if not value:
            return queryset
        return queryset.filter(Q(name__icontains=value) | Q(email__icontains=value) | Q(role_title__icontains=value))


class SalaryPaymentFilter(django_filters.FilterSet):
    team_member = django_filters.NumberFilter(field_name='team_member_id')
    month = django_filters.CharFilter(field_name='month')
    status = django_filters.ChoiceFilter(choices=SalaryPayment.STATUS_CHOICES)

    class Meta:
        model = SalaryPayment
        fields = ['team_member', 'month', 'status']
