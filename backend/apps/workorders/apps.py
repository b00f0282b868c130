"""
Work orders app configuration.
Engagement state machine, escrow ledger, milestones and deliveries.
"""
from django.apps import AppConfig


class WorkOrdersConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'apps.workorders'
    verbose_name = 'Work Orders'
