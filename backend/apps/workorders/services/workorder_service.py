"""
Work order service - main business logic for accepted engagements.
Orchestrates the state machine, escrow ledger, milestones and deliveries.
Notifications are queued for after commit and never affect the outcome.
"""
import logging
from decimal import Decimal
from typing import Optional
from django.db import transaction
from django.db.models import Count, Q
from django.core.exceptions import ValidationError, PermissionDenied
from django.utils import timezone
from apps.workorders.models import WorkOrder, Escrow, Milestone, Delivery
from apps.workorders.services.state_machine import WorkOrderStateMachine
from apps.workorders.services.escrow_service import EscrowService
from apps.projects.models import Project
from apps.accounts.models import User
from apps.notifications.models import Notification
from apps.notifications.services.notification_service import NotificationService

logger = logging.getLogger(__name__)


class WorkOrderService:
    """
    Main service for work order operations.
    """

    @staticmethod
    def _notify(work_order: WorkOrder, notification_type: str, recipient: User, actor: User):
        NotificationService.notify(
            notification_type,
            recipient=recipient,
            actor=actor,
            entity_id=work_order.id,
            entity_type=Notification.EntityType.WORK_ORDER
        )

    @staticmethod
    def _lock(work_order: WorkOrder) -> WorkOrder:
        return WorkOrder.objects.select_for_update().get(id=work_order.id)

    @staticmethod
    @transaction.atomic
    def open_work_order(
        project: Project,
        creative: User,
        agreed_rate: Decimal,
        total_amount: Decimal,
        user: Optional[User] = None,
        reason: str = "",
        ip_address: Optional[str] = None
    ) -> WorkOrder:
        """
        Create a work order and its escrow for an assigned project.
        Callers own the surrounding transaction and project status change.
        """
        work_order = WorkOrder.objects.create(
            project=project,
            client=project.client,
            creative=creative,
            agreed_rate=agreed_rate,
            agreed_budget_type=project.budget_type,
            deadline=project.deadline,
            status=WorkOrder.PENDING
        )

        EscrowService.create_escrow(work_order, total_amount)

        WorkOrderStateMachine.log_creation(
            work_order, user=user, reason=reason, ip_address=ip_address
        )

        return work_order

    @classmethod
    @transaction.atomic
    def fund_escrow(cls, work_order: WorkOrder, client: User) -> Escrow:
        """
        Client funds the escrow in full.

        Raises:
            PermissionDenied: caller is not the client
            ValidationError: no escrow, already funded, or order finalized
        """
        if not work_order.is_client(client):
            raise PermissionDenied("Only the client can fund escrow")

        locked = cls._lock(work_order)

        if locked.is_terminal():
            raise ValidationError("Work order already finalized")

        escrow = Escrow.objects.filter(work_order=locked).first()
        if escrow is None:
            raise ValidationError("No escrow found")

        escrow = EscrowService.fund(escrow)

        logger.info(f"Work order {locked.id}: escrow funded by {client.email}")

        cls._notify(locked, Notification.Type.ESCROW_UPDATE, locked.creative, client)

        return escrow

    @classmethod
    @transaction.atomic
    def start(
        cls,
        work_order: WorkOrder,
        creative: User,
        ip_address: Optional[str] = None
    ) -> WorkOrder:
        """
        Creative starts work. Escrow must be funded.
        Transitions: PENDING → IN_PROGRESS
        """
        if not work_order.is_creative(creative):
            raise PermissionDenied("Only the creative can start work")

        locked = cls._lock(work_order)

        escrow = Escrow.objects.filter(work_order=locked).first()
        if escrow is None or escrow.status != Escrow.FUNDED:
            raise ValidationError("Escrow must be funded before starting work")

        updated = WorkOrderStateMachine.transition(
            locked,
            WorkOrder.IN_PROGRESS,
            user=creative,
            reason="Creative started work",
            ip_address=ip_address
        )

        logger.info(f"Work order {updated.id} started by {creative.email}")

        cls._notify(updated, Notification.Type.WORK_ORDER_UPDATE, updated.client, creative)

        return updated

    @classmethod
    @transaction.atomic
    def submit_delivery(
        cls,
        work_order: WorkOrder,
        creative: User,
        message: str,
        attachments: Optional[list] = None,
        milestone: Optional[Milestone] = None,
        ip_address: Optional[str] = None
    ) -> Delivery:
        """
        Creative submits work for review, for one milestone or the whole order.

        Only one delivery per milestone (or one whole-order delivery) can
        be awaiting review at a time. Milestone order is not enforced.
        Transitions: IN_PROGRESS / IN_REVISION → DELIVERED
        """
        if not work_order.is_creative(creative):
            raise PermissionDenied("Only the creative can submit deliveries")

        locked = cls._lock(work_order)

        pending = Delivery.objects.filter(
            work_order=locked,
            status=Delivery.PENDING_REVIEW
        )

        if milestone is not None:
            milestone = Milestone.objects.select_for_update().get(id=milestone.id)
            if milestone.work_order_id != locked.id:
                raise ValidationError("Milestone does not belong to this work order")
            if milestone.status == Milestone.APPROVED:
                raise ValidationError("This milestone has already been approved")
            if pending.filter(milestone=milestone).exists():
                raise ValidationError("A delivery for this milestone is already awaiting review")
        elif pending.filter(milestone__isnull=True).exists():
            raise ValidationError("A delivery for this work order is already awaiting review")

        if locked.status != WorkOrder.DELIVERED:
            WorkOrderStateMachine.ensure_can_transition(locked, WorkOrder.DELIVERED)

        delivery = Delivery.objects.create(
            work_order=locked,
            milestone=milestone,
            message=message,
            attachments=list(attachments or [])
        )

        WorkOrderStateMachine.move(
            locked,
            WorkOrder.DELIVERED,
            user=creative,
            reason="Creative submitted a delivery",
            ip_address=ip_address
        )

        if milestone is not None:
            milestone.status = Milestone.DELIVERED
            milestone.save(update_fields=['status', 'updated_at'])

        logger.info(
            f"Work order {locked.id}: delivery {delivery.id} submitted "
            f"(milestone={milestone.id if milestone else None})"
        )

        cls._notify(locked, Notification.Type.DELIVERY, locked.client, creative)

        return delivery

    @classmethod
    @transaction.atomic
    def approve_delivery(
        cls,
        delivery: Delivery,
        client: User,
        ip_address: Optional[str] = None
    ) -> WorkOrder:
        """
        Client approves a delivery.

        The work order completes, and the escrow is released in full, only
        when every milestone is APPROVED (or the order has no milestones).
        Otherwise it goes back to IN_PROGRESS for the next delivery.
        """
        work_order = delivery.work_order
        if not work_order.is_client(client):
            raise PermissionDenied("Only the client can approve deliveries")

        locked = cls._lock(work_order)
        locked_delivery = Delivery.objects.select_for_update().get(id=delivery.id)

        if locked_delivery.status != Delivery.PENDING_REVIEW:
            raise ValidationError("Delivery already processed")

        locked_delivery.status = Delivery.APPROVED
        locked_delivery.save(update_fields=['status', 'updated_at'])

        if locked_delivery.milestone_id:
            Milestone.objects.filter(id=locked_delivery.milestone_id).update(
                status=Milestone.APPROVED,
                updated_at=timezone.now()
            )

        all_approved = not locked.milestones.exclude(status=Milestone.APPROVED).exists()

        if all_approved:
            updated = WorkOrderStateMachine.transition(
                locked,
                WorkOrder.COMPLETED,
                user=client,
                reason="All deliverables approved",
                ip_address=ip_address
            )
            EscrowService.release_all(locked.escrow)
            logger.info(f"Work order {updated.id} completed; escrow released")
        else:
            updated = WorkOrderStateMachine.move(
                locked,
                WorkOrder.IN_PROGRESS,
                user=client,
                reason=f"Delivery {locked_delivery.id} approved",
                ip_address=ip_address
            )
            logger.info(f"Work order {updated.id}: delivery {locked_delivery.id} approved")

        cls._notify(updated, Notification.Type.WORK_ORDER_UPDATE, updated.creative, client)

        return updated

    @classmethod
    @transaction.atomic
    def request_revision(
        cls,
        delivery: Delivery,
        client: User,
        revision_note: str,
        ip_address: Optional[str] = None
    ) -> WorkOrder:
        """
        Client sends a delivery back. The creative resubmits to continue.
        Transitions: → IN_REVISION
        """
        work_order = delivery.work_order
        if not work_order.is_client(client):
            raise PermissionDenied("Only the client can request revisions")

        locked = cls._lock(work_order)
        locked_delivery = Delivery.objects.select_for_update().get(id=delivery.id)

        if locked_delivery.status != Delivery.PENDING_REVIEW:
            raise ValidationError("Delivery already processed")

        locked_delivery.status = Delivery.REVISION_REQUESTED
        locked_delivery.revision_note = revision_note
        locked_delivery.save(update_fields=['status', 'revision_note', 'updated_at'])

        updated = WorkOrderStateMachine.move(
            locked,
            WorkOrder.IN_REVISION,
            user=client,
            reason=f"Revision requested on delivery {locked_delivery.id}",
            ip_address=ip_address
        )

        if locked_delivery.milestone_id:
            Milestone.objects.filter(id=locked_delivery.milestone_id).update(
                status=Milestone.IN_REVISION,
                updated_at=timezone.now()
            )

        logger.info(f"Work order {updated.id}: revision requested on delivery {locked_delivery.id}")

        cls._notify(updated, Notification.Type.WORK_ORDER_UPDATE, updated.creative, client)

        return updated

    @classmethod
    @transaction.atomic
    def cancel(
        cls,
        work_order: WorkOrder,
        user: User,
        reason: str = "",
        ip_address: Optional[str] = None
    ) -> WorkOrder:
        """
        Either participant cancels. Funded escrow is refunded;
        unfunded escrow is left as it is.
        """
        if not work_order.is_participant(user):
            raise PermissionDenied("Not a participant")

        locked = cls._lock(work_order)

        if locked.is_terminal():
            raise ValidationError("Work order already finalized")

        updated = WorkOrderStateMachine.transition(
            locked,
            WorkOrder.CANCELLED,
            user=user,
            reason=reason or "Cancelled by participant",
            ip_address=ip_address
        )

        escrow = Escrow.objects.filter(work_order=updated).first()
        if escrow is not None and escrow.status in Escrow.REFUNDABLE_STATES:
            EscrowService.refund(escrow)

        logger.info(f"Work order {updated.id} cancelled by {user.email}")

        cls._notify(
            updated,
            Notification.Type.WORK_ORDER_UPDATE,
            updated.other_party(user),
            user
        )

        return updated

    @staticmethod
    def get_by_id(work_order: WorkOrder, user: User) -> WorkOrder:
        """Participant-only access to a work order."""
        if not work_order.is_participant(user):
            raise PermissionDenied("You are not a participant")
        return work_order

    @staticmethod
    def get_my_work_orders(user: User, status: Optional[str] = None):
        """Work orders where the user is client or creative."""
        queryset = WorkOrder.objects.filter(
            Q(client=user) | Q(creative=user)
        ).select_related(
            'project', 'escrow',
            'client', 'client__profile',
            'creative', 'creative__profile'
        ).annotate(
            milestone_count=Count('milestones', distinct=True),
            delivery_count=Count('deliveries', distinct=True)
        )

        if status:
            queryset = queryset.filter(status=status)

        return queryset
