from django.contrib import admin
from .models import JobRole, SalaryPayment, TeamMember


@admin.register(JobRole)
class JobRoleAdmin(admin.ModelAdmin):
    list_display = ['title', 'department', 'is_active']
    list_filter = ['department', 'is_active']
    search_fields = ['title']


@admin.register(TeamMember)
class TeamMemberAdmin(admin.ModelAdmin):
    list_display = ['name', 'email', 'role_title', 'employment_type', 'status', 'joined_date']
    list_filter = ['status', 'employment_type']
    search_fields = ['name', 'email', 'role_title']
    readonly_fields = ['onboarding_token', 'onboarding_completed_at', 'created_at', 'updated_at']


@admin.register(SalaryPayment)
class SalaryPaymentAdmin(admin.ModelAdmin):
    list_display = ['team_member', 'month', 'amount', 'status', 'payment_date']
    list_filter = ['status', 'month']
    search_fields = ['team_member__name', 'reference']
