from rest_framework import serializers

from .models import JobRole, SalaryPayment, TeamMember


class JobRoleSerializer(serializers.ModelSerializer):
    member_count = serializers.SerializerMethodField()

    class Meta:
        model = JobRole
        fields = ['id', 'title', 'department', 'description', 'is_active', 'member_count',
                  'created_at', 'updated_at']
        read_only_fields = ['created_at', 'updated_at']

    def get_member_count(self, obj):
        return TeamMember.objects.filter(role_title__iexact=obj.title).count()


class TeamMemberSerializer(serializers.ModelSerializer):
    class Meta:
        model = TeamMember
        fields = ['id', 'name', 'email', 'phone', 'role_title', 'employment_type', 'status',
                  'base_salary', 'joined_date', 'exit_date', 'notes', 'onboarding_token',
                  'onboarding_data', 'onboarding_completed_at', 'created_at', 'updated_at']
        read_only_fields = ['onboarding_token', 'onboarding_data', 'onboarding_completed_at',
                            'created_at', 'updated_at']

    def validate(self, attrs):
        joined = attrs.get('joined_date', getattr(self.instance, 'joined_date', None))
        exited = attrs.get('exit_date', getattr(self.instance, 'exit_date', None))
        if joined and exited and exited < joined:
            raise serializers.ValidationError({'exit_date': 'Exit date cannot be before the joining date.'})
        return attrs


class TeamMemberStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=TeamMember.STATUS_CHOICES)


class PublicTeamOnboardingSerializer(serializers.ModelSerializer):
    class Meta:
        model = TeamMember
        fields = ['name', 'role_title', 'onboarding_data', 'onboarding_completed_at']
        read_only_fields = ['name', 'role_title', 'onboarding_completed_at']

    def validate_onboarding_data(self, value):
        if not isinstance(value, dict):
            raise serializers.ValidationError('Onboarding data must be an object.')
        return value


class SalaryPaymentSerializer(serializers.ModelSerializer):
    team_member_name = serializers.CharField(source='team_member.name', read_only=True)
    role_title = serializers.CharField(source='team_member.role_title', read_only=True)

    class Meta:
        model = SalaryPayment
        fields = ['id', 'team_member', 'team_member_name', 'role_title', 'month', 'payment_date',
                  'amount', 'currency', 'status', 'payment_method', 'reference', 'notes',
                  'created_at', 'updated_at']
        read_only_fields = ['created_at', 'updated_at']

    def validate(self, attrs):
        status_value = attrs.get('status', getattr(self.instance, 'status', 'PENDING'))
        payment_date = attrs.get('payment_date', getattr(self.instance, 'payment_date', None))
        if status_value == 'PAID' and not payment_date:
            raise serializers.ValidationError({'payment_date': 'Payment date is required for a paid salary.'})
        return attrs
