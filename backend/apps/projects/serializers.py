"""
Project serializers.
"""
from django.conf import settings
from rest_framework import serializers
from apps.accounts.models import User
from apps.accounts.serializers import UserSummarySerializer
from apps.projects.models import Project

LIMITS = settings.GIG_LIMITS


class ProjectSerializer(serializers.ModelSerializer):
    """Read shape for projects."""
    client = UserSummarySerializer(read_only=True)
    application_count = serializers.IntegerField(source='applications.count', read_only=True)

    class Meta:
        model = Project
        fields = [
            'id', 'client', 'title', 'description', 'budget_type',
            'budget_min', 'budget_max', 'is_direct', 'target_creative',
            'status', 'deadline', 'application_count', 'created_at', 'updated_at'
        ]
        read_only_fields = fields


class CreateProjectSerializer(serializers.Serializer):
    """Input for posting a project."""
    title = serializers.CharField(min_length=3, max_length=LIMITS['PROJECT_TITLE_MAX'])
    description = serializers.CharField(min_length=10, max_length=LIMITS['PROJECT_DESCRIPTION_MAX'])
    budget_type = serializers.ChoiceField(choices=Project.BUDGET_TYPE_CHOICES, default=Project.FIXED)
    budget_min = serializers.DecimalField(
        max_digits=12, decimal_places=2, min_value=0, required=False, allow_null=True
    )
    budget_max = serializers.DecimalField(
        max_digits=12, decimal_places=2, min_value=0, required=False, allow_null=True
    )
    deadline = serializers.DateTimeField(required=False, allow_null=True)
    is_direct = serializers.BooleanField(default=False)
    target_creative_id = serializers.UUIDField(required=False, allow_null=True)

    def validate_target_creative_id(self, value):
        if value is None:
            return value
        try:
            self.context['target_creative'] = User.objects.get(id=value)
        except User.DoesNotExist:
            raise serializers.ValidationError("Target creative not found")
        return value
