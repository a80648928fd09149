from decimal import Decimal

from rest_framework import serializers

from .models import LeaveBalance, LeavePolicy, LeaveRequest, LeaveType


class LeaveTypeSerializer(serializers.ModelSerializer):
    class Meta:
        model = LeaveType
        fields = ['id', 'name', 'code', 'category', 'description', 'is_paid', 'is_active',
                  'created_at', 'updated_at']
        read_only_fields = ['created_at', 'updated_at']

    def validate_code(self, value):
        value = value.strip().upper()
        existing = LeaveType.objects.filter(code=value)
        if self.instance:
            existing = existing.exclude(pk=self.instance.pk)
        if existing.exists():
            raise serializers.ValidationError(f"Leave type code '{value}' already exists.")
        return value


class LeavePolicySerializer(serializers.ModelSerializer):
    job_role_title = serializers.CharField(source='job_role.title', read_only=True)
    leave_type_name = serializers.CharField(source='leave_type.name', read_only=True)
    leave_type_code = serializers.CharField(source='leave_type.code', read_only=True)

    class Meta:
        model = LeavePolicy
        fields = ['id', 'job_role', 'job_role_title', 'leave_type', 'leave_type_name', 'leave_type_code',
                  'annual_quota', 'carry_forward_limit', 'is_active', 'created_at', 'updated_at']
        read_only_fields = ['created_at', 'updated_at']


class LeaveBalanceSerializer(serializers.ModelSerializer):
    member_name = serializers.CharField(source='team_member.name', read_only=True)
    leave_type_name = serializers.CharField(source='leave_type.name', read_only=True)
    leave_type_code = serializers.CharField(source='leave_type.code', read_only=True)

    class Meta:
        model = LeaveBalance
        fields = ['id', 'team_member', 'member_name', 'leave_type', 'leave_type_name', 'leave_type_code',
                  'year', 'total_quota', 'carry_forward', 'used', 'pending', 'available', 'updated_at']
        read_only_fields = fields


class LeaveRequestSerializer(serializers.ModelSerializer):
    member_name = serializers.CharField(source='team_member.name', read_only=True)
    member_email = serializers.CharField(source='team_member.email', read_only=True)
    leave_type_name = serializers.CharField(source='leave_type.name', read_only=True)
    leave_type_code = serializers.CharField(source='leave_type.code', read_only=True)
    approver_name = serializers.CharField(source='approved_by.name', read_only=True, default=None)
    total_days = serializers.DecimalField(max_digits=6, decimal_places=2)

    class Meta:
        model = LeaveRequest
        fields = ['id', 'team_member', 'member_name', 'member_email', 'leave_type', 'leave_type_name',
                  'leave_type_code', 'start_date', 'end_date', 'total_days', 'reason', 'status',
                  'approved_by', 'approver_name', 'approved_at', 'rejection_reason', 'created_at', 'updated_at']
        read_only_fields = ['status', 'approved_by', 'approved_at', 'rejection_reason', 'created_at', 'updated_at']

    def validate_total_days(self, value):
        if value <= 0:
            raise serializers.ValidationError('Total days must be greater than zero.')
        return value

    def validate(self, attrs):
        if attrs['end_date'] < attrs['start_date']:
            raise serializers.ValidationError({'end_date': 'End date cannot be before the start date.'})
        return attrs


class RejectLeaveSerializer(serializers.Serializer):
    reason = serializers.CharField(required=False, allow_blank=True)


class CheckAvailabilitySerializer(serializers.Serializer):
    team_member = serializers.IntegerField()
    leave_type = serializers.IntegerField()
    requested_days = serializers.DecimalField(max_digits=6, decimal_places=2, min_value=Decimal('0.01'))
    year = serializers.IntegerField(required=False, min_value=2000, max_value=2100)
