"""
Direct request service.
A direct request is a project aimed at one creative; accepting it skips
applications and opens the work order straight away.
"""
import logging
from decimal import Decimal
from typing import Optional
from django.db import transaction
from django.core.exceptions import ValidationError, PermissionDenied
from apps.projects.models import Project
from apps.accounts.models import User
from apps.notifications.models import Notification
from apps.notifications.services.notification_service import NotificationService
from apps.workorders.models import WorkOrder
from apps.workorders.services.workorder_service import WorkOrderService

logger = logging.getLogger(__name__)


class DirectRequestService:

    @staticmethod
    def _lock_for_target(project: Project, creative: User) -> Project:
        locked = Project.objects.select_for_update().get(id=project.id)

        if not locked.is_direct:
            raise ValidationError("This project is not a direct request")

        if locked.target_creative_id != creative.pk:
            raise PermissionDenied("This request was not sent to you")

        if locked.status != Project.OPEN:
            raise ValidationError("This request is no longer open")

        return locked

    @classmethod
    @transaction.atomic
    def accept_direct_request(
        cls,
        project: Project,
        creative: User,
        ip_address: Optional[str] = None
    ) -> WorkOrder:
        """
        Target creative accepts: project ASSIGNED, work order and escrow
        created in the same transaction.
        """
        locked = cls._lock_for_target(project, creative)

        agreed_rate = locked.budget_min if locked.budget_min is not None else locked.budget_max
        total_amount = locked.budget_max if locked.budget_max is not None else locked.budget_min

        locked.status = Project.ASSIGNED
        locked.save(update_fields=['status', 'updated_at'])

        work_order = WorkOrderService.open_work_order(
            project=locked,
            creative=creative,
            agreed_rate=agreed_rate if agreed_rate is not None else Decimal('0.00'),
            total_amount=total_amount if total_amount is not None else Decimal('0.00'),
            user=creative,
            reason="Direct request accepted",
            ip_address=ip_address
        )

        logger.info(f"Direct request {locked.id} accepted by {creative.email}; work order {work_order.id} opened")

        NotificationService.notify(
            Notification.Type.WORK_ORDER_UPDATE,
            recipient=locked.client,
            actor=creative,
            entity_id=work_order.id,
            entity_type=Notification.EntityType.WORK_ORDER
        )

        return work_order

    @classmethod
    @transaction.atomic
    def decline_direct_request(cls, project: Project, creative: User) -> Project:
        """Target creative turns the request down. The project is cancelled."""
        locked = cls._lock_for_target(project, creative)

        locked.status = Project.CANCELLED
        locked.save(update_fields=['status', 'updated_at'])

        logger.info(f"Direct request {locked.id} declined by {creative.email}")

        NotificationService.notify(
            Notification.Type.WORK_REQUEST,
            recipient=locked.client,
            actor=creative,
            entity_id=locked.id,
            entity_type=Notification.EntityType.PROJECT
        )

        return locked
