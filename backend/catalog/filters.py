import django_filters
from django.db.models import Q

from .models import Service


class ServiceFilter(django_filters.FilterSet):
    category = django_filters.ChoiceFilter(choices=Service.CATEGORY_CHOICES)
    status = django_filters.ChoiceFilter(choices=Service.STATUS_CHOICES)
    search = django_filters.CharFilter(method='filter_search', label='Search')

    class Meta:
        model = Service
        fields = ['category', 'status', 'search']

    def filter_search(self, queryset, name, value):
        value = value.strip()
        if not value:
            return queryset
        return queryset.filter(
            Q(name__icontains=value) |
            Q(description__icontains=value) |
            Q(sac_code__iexact=value)
        )
