"""
Notification models - counterpart notifications for gig activity.
"""
import uuid
from django.db import models
from apps.accounts.models import User


class Notification(models.Model):
    """
    A single event shown to one user.
    Written after the business transaction commits; never part of it.
    """

    class Type(models.TextChoices):
        WORK_REQUEST = 'WORK_REQUEST', 'Work Request'
        APPLICATION = 'APPLICATION', 'Application'
        WORK_ORDER_UPDATE = 'WORK_ORDER_UPDATE', 'Work Order Update'
        DELIVERY = 'DELIVERY', 'Delivery'
        MILESTONE_UPDATE = 'MILESTONE_UPDATE', 'Milestone Update'
        ESCROW_UPDATE = 'ESCROW_UPDATE', 'Escrow Update'

    class EntityType(models.TextChoices):
        PROJECT = 'project', 'Project'
        WORK_ORDER = 'workorder', 'Work Order'

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    type = models.CharField(max_length=30, choices=Type.choices, db_index=True)
    user = models.ForeignKey(
        User,
        on_delete=models.CASCADE,
        related_name='notifications',
        help_text="Recipient"
    )
    actor = models.ForeignKey(
        User,
        on_delete=models.CASCADE,
        related_name='notifications_sent',
        help_text="User whose action triggered the notification"
    )
    entity_id = models.UUIDField(null=True, blank=True)
    entity_type = models.CharField(max_length=20, choices=EntityType.choices, blank=True)
    read = models.BooleanField(default=False, db_index=True)
    created_at = models.DateTimeField(auto_now_add=True, db_index=True)

    class Meta:
        ordering = ['-created_at']
        verbose_name = 'Notification'
        verbose_name_plural = 'Notifications'
        indexes = [
            models.Index(fields=['user', 'read', '-created_at'], name='notification_inbox_idx'),
        ]

    def __str__(self):
        return f"{self.type} for {self.user_id}"
