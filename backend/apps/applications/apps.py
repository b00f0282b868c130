"""
Applications app configuration.
Creative proposals and the accept/decline decision.
"""
from django.apps import AppConfig


class ApplicationsConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'apps.applications'
    verbose_name = 'Applications'
