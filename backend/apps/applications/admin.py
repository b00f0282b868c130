"""
Application admin configuration.
"""
from django.contrib import admin
from apps.applications.models import Application


@admin.register(Application)
class ApplicationAdmin(admin.ModelAdmin):
    list_display = ['id', 'project', 'creative', 'proposed_rate', 'status', 'created_at']
    list_filter = ['status']
    search_fields = ['id', 'project__title', 'creative__email']
    readonly_fields = ['id', 'project', 'creative', 'status', 'created_at', 'updated_at']

    def has_add_permission(self, request):
        return False
