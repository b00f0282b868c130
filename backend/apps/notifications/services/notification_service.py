"""
Notification service - fire-and-forget delivery of counterpart events.
A failed notification is logged and dropped; it never rolls back or
fails the business action that produced it.
"""
import logging
from typing import Optional
from uuid import UUID
from django.db import transaction
from apps.notifications.models import Notification
from apps.accounts.models import User

logger = logging.getLogger(__name__)


class NotificationService:
    """
    Emits and reads notifications.
    """

    @staticmethod
    def notify(
        notification_type: str,
        recipient: User,
        actor: User,
        entity_id: Optional[UUID] = None,
        entity_type: str = ""
    ) -> None:
        """
        Schedule a notification for after the current transaction commits.

        Self-notifications are suppressed. Outside a transaction the
        notification is written immediately.
        """
        if recipient is None or recipient.pk == actor.pk:
            return

        transaction.on_commit(
            lambda: NotificationService._deliver(
                notification_type, recipient, actor, entity_id, entity_type
            )
        )

    @staticmethod
    def _deliver(notification_type, recipient, actor, entity_id, entity_type):
        try:
            with transaction.atomic():
                Notification.objects.create(
                    type=notification_type,
                    user=recipient,
                    actor=actor,
                    entity_id=entity_id,
                    entity_type=entity_type
                )
        except Exception as e:
            logger.error(
                f"Failed to create {notification_type} notification "
                f"for {recipient.pk}: {str(e)}"
            )

    @staticmethod
    def get_for_user(user: User):
        return Notification.objects.filter(user=user).select_related(
            'actor', 'actor__profile'
        )

    @staticmethod
    def unread_count(user: User) -> int:
        return Notification.objects.filter(user=user, read=False).count()

    @staticmethod
    def mark_as_read(user: User, notification_id: UUID) -> int:
        """Mark one of the user's notifications read. Foreign ids are ignored."""
        return Notification.objects.filter(
            id=notification_id, user=user
        ).update(read=True)

    @staticmethod
    def mark_all_as_read(user: User) -> int:
        return Notification.objects.filter(user=user, read=False).update(read=True)
