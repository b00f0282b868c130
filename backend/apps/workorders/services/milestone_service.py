"""
Milestone service - priced checkpoints inside a work order.
Either participant may manage milestones.
"""
import logging
from decimal import Decimal
from typing import List
from django.db import transaction
from django.core.exceptions import ValidationError, PermissionDenied
from apps.workorders.models import WorkOrder, Milestone
from apps.accounts.models import User
from apps.notifications.models import Notification
from apps.notifications.services.notification_service import NotificationService

logger = logging.getLogger(__name__)


class MilestoneService:

    EDITABLE_FIELDS = ['title', 'description', 'amount', 'due_date']

    @staticmethod
    def _lock_editable(work_order: WorkOrder, user: User) -> WorkOrder:
        if not work_order.is_participant(user):
            raise PermissionDenied("Not a participant")

        locked = WorkOrder.objects.select_for_update().get(id=work_order.id)
        if locked.is_terminal():
            raise ValidationError("Milestones cannot be changed on a finalized work order")
        return locked

    @staticmethod
    def _notify(work_order: WorkOrder, user: User):
        NotificationService.notify(
            Notification.Type.MILESTONE_UPDATE,
            recipient=work_order.other_party(user),
            actor=user,
            entity_id=work_order.id,
            entity_type=Notification.EntityType.WORK_ORDER
        )

    @classmethod
    @transaction.atomic
    def add_milestone(
        cls,
        work_order: WorkOrder,
        user: User,
        title: str,
        amount: Decimal,
        description: str = "",
        due_date=None
    ) -> Milestone:
        """
        Append a milestone. Its order is the current milestone count.
        """
        locked = cls._lock_editable(work_order, user)

        milestone = Milestone.objects.create(
            work_order=locked,
            title=title,
            description=description,
            amount=amount,
            due_date=due_date,
            order=locked.milestones.count()
        )

        logger.info(f"Milestone {milestone.id} added to work order {locked.id} by {user.email}")

        cls._notify(locked, user)

        return milestone

    @classmethod
    @transaction.atomic
    def update_milestone(cls, milestone: Milestone, user: User, **changes) -> Milestone:
        """
        Edit title, description, amount or due date. Status and order are
        driven elsewhere.
        """
        if not changes:
            raise ValidationError("Nothing to update")

        cls._lock_editable(milestone.work_order, user)

        locked = Milestone.objects.select_for_update().get(id=milestone.id)

        unknown = set(changes) - set(cls.EDITABLE_FIELDS)
        if unknown:
            raise ValidationError(f"Cannot update fields: {', '.join(sorted(unknown))}")

        if locked.status == Milestone.APPROVED:
            raise ValidationError("Approved milestones cannot be edited")

        for field, value in changes.items():
            setattr(locked, field, value)

        locked.save(update_fields=list(changes) + ['updated_at'])

        logger.info(f"Milestone {locked.id} updated by {user.email}: {sorted(changes)}")

        cls._notify(locked.work_order, user)

        return locked

    @classmethod
    @transaction.atomic
    def reorder_milestones(
        cls,
        work_order: WorkOrder,
        user: User,
        milestone_ids: List
    ) -> List[Milestone]:
        """
        Set each milestone's order to its index in milestone_ids.
        Milestones not listed keep their current order.
        """
        locked = cls._lock_editable(work_order, user)

        if len(set(milestone_ids)) != len(milestone_ids):
            raise ValidationError("Milestone ids must not repeat")

        milestones = {
            m.id: m for m in Milestone.objects.select_for_update().filter(
                work_order=locked, id__in=milestone_ids
            )
        }
        if len(milestones) != len(milestone_ids):
            raise ValidationError("Some milestones do not belong to this work order")

        for index, milestone_id in enumerate(milestone_ids):
            milestones[milestone_id].order = index

        Milestone.objects.bulk_update(milestones.values(), ['order'])

        logger.info(f"Work order {locked.id}: {len(milestone_ids)} milestone(s) reordered by {user.email}")

        cls._notify(locked, user)

        return list(locked.milestones.all())

