import django_filters
from django.db.models import Q

from .models import Client, Project


class ClientFilter(django_filters.FilterSet):
    search = django_filters.CharFilter(method='filter_search', label='Search')
    status = django_filters.ChoiceFilter(choices=Client.STATUS_CHOICES)

    class Meta:
        model = Client
        fields = ['search', 'status']

    def filter_search(self, queryset, name, value):
        value = value.strip()
        if not value:
            return queryset
        return queryset.filter(
            Q(name__icontains=value) |
            Q(contact_name__icontains=value) |
            Q(email__icontains=value)
        )


class ProjectFilter(django_filters.FilterSet):
    client = django_filters.NumberFilter(field_name='client_id')
    status = django_filters.ChoiceFilter(choices=Project.STATUS_CHOICES)

    class Meta:
        model = Project
        fields = ['client', 'status']
