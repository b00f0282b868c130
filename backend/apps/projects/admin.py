"""
Project admin configuration.
"""
from django.contrib import admin
from apps.projects.models import Project


@admin.register(Project)
class ProjectAdmin(admin.ModelAdmin):
    list_display = ['id', 'title', 'client', 'budget_type', 'status', 'is_direct', 'created_at']
    list_filter = ['status', 'budget_type', 'is_direct']
    search_fields = ['id', 'title', 'client__email']
    readonly_fields = ['id', 'created_at', 'updated_at']
