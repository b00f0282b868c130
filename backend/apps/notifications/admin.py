"""
Notification admin configuration.
"""
from django.contrib import admin
from apps.notifications.models import Notification


@admin.register(Notification)
class NotificationAdmin(admin.ModelAdmin):
    list_display = ['id', 'type', 'user', 'actor', 'entity_type', 'read', 'created_at']
    list_filter = ['type', 'read', 'created_at']
    search_fields = ['user__email', 'actor__email']
    readonly_fields = ['id', 'type', 'user', 'actor', 'entity_id', 'entity_type', 'created_at']

    def has_add_permission(self, request):
        return False
