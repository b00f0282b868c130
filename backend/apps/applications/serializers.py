"""
Application serializers.
"""
from django.conf import settings
from rest_framework import serializers
from apps.accounts.serializers import UserSummarySerializer
from apps.applications.models import Application
from apps.projects.models import Project

LIMITS = settings.GIG_LIMITS


class ApplicationProjectSerializer(serializers.ModelSerializer):
    """The project as seen from the creative's application list."""
    client = UserSummarySerializer(read_only=True)

    class Meta:
        model = Project
        fields = ['id', 'title', 'budget_type', 'budget_min', 'budget_max', 'status', 'deadline', 'client']
        read_only_fields = fields


class ApplicationSerializer(serializers.ModelSerializer):
    """Applications for a project, as the client reviews them."""
    creative = UserSummarySerializer(read_only=True)

    class Meta:
        model = Application
        fields = [
            'id', 'project', 'creative', 'cover_letter', 'proposed_rate',
            'timeline', 'status', 'created_at', 'updated_at'
        ]
        read_only_fields = fields


class MyApplicationSerializer(serializers.ModelSerializer):
    project = ApplicationProjectSerializer(read_only=True)

    class Meta:
        model = Application
        fields = [
            'id', 'project', 'cover_letter', 'proposed_rate',
            'timeline', 'status', 'created_at', 'updated_at'
        ]
        read_only_fields = fields


class SubmitApplicationSerializer(serializers.Serializer):
    project_id = serializers.UUIDField()
    cover_letter = serializers.CharField(
        min_length=LIMITS['APPLICATION_COVER_LETTER_MIN'],
        max_length=LIMITS['APPLICATION_COVER_LETTER_MAX']
    )
    proposed_rate = serializers.DecimalField(
        max_digits=12, decimal_places=2, min_value=0, required=False, allow_null=True
    )
    timeline = serializers.CharField(
        max_length=LIMITS['APPLICATION_TIMELINE_MAX'], required=False, allow_blank=True
    )
