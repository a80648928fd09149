import django_filters

from .models import LeaveBalance, LeavePolicy, LeaveRequest


class LeavePolicyFilter(django_filters.FilterSet):
    job_role = django_filters.NumberFilter(field_name='job_role_id')
    leave_type = django_filters.NumberFilter(field_name='leave_type_id')

    class Meta:
        model = LeavePolicy
        fields = ['job_role', 'leave_type']


class LeaveBalanceFilter(django_filters.FilterSet):
    team_member = django_filters.NumberFilter(field_name='team_member_id')
    year = django_filters.NumberFilter(field_name='year')

    class Meta:
        model = LeaveBalance
        fields = ['team_member', 'year']


class LeaveRequestFilter(django_filters.FilterSet):
    team_member = django_filters.NumberFilter(field_name='team_member_id')
    leave_type = django_filters.NumberFilter(field_name='leave_type_id')
    status = django_filters.ChoiceFilter(choices=LeaveRequest.STATUS_CHOICES)

    class Meta:
        model = LeaveRequest
        fields = ['team_member', 'leave_type', 'status']
