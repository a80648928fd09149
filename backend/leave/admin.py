from django.contrib import admin
from .models import LeaveBalance, LeavePolicy, LeaveRequest, LeaveType


@admin.register(LeaveType)
class LeaveTypeAdmin(admin.ModelAdmin):
    list_display = ['name', 'code', 'category', 'is_paid', 'is_active']
    list_filter = ['category', 'is_active']


@admin.register(LeavePolicy)
class LeavePolicyAdmin(admin.ModelAdmin):
    list_display = ['job_role', 'leave_type', 'annual_quota', 'carry_forward_limit', 'is_active']
    list_filter = ['leave_type', 'is_active']


@admin.register(LeaveBalance)
class LeaveBalanceAdmin(admin.ModelAdmin):
    list_display = ['team_member', 'leave_type', 'year', 'total_quota', 'used', 'pending', 'available']
    list_filter = ['year', 'leave_type']
    readonly_fields = ['used', 'pending', 'available']


@admin.register(LeaveRequest)
class LeaveRequestAdmin(admin.ModelAdmin):
    list_display = ['team_member', 'leave_type', 'start_date', 'end_date', 'total_days', 'status']
    list_filter = ['status', 'leave_type']
    search_fields = ['team_member__name', 'reason']
