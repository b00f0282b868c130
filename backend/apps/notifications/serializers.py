"""
Notification serializers.
"""
from rest_framework import serializers
from apps.accounts.serializers import UserSummarySerializer
from apps.notifications.models import Notification


class NotificationSerializer(serializers.ModelSerializer):
    actor = UserSummarySerializer(read_only=True)

    class Meta:
        model = Notification
        fields = ['id', 'type', 'actor', 'entity_id', 'entity_type', 'read', 'created_at']
        read_only_fields = fields
