"""
Work order state machine service.
Every status change of a WorkOrder goes through here.
"""
from typing import Optional
from django.db import transaction
from django.core.exceptions import ValidationError
from django.utils import timezone
from apps.workorders.models import WorkOrder, WorkOrderStateLog
from apps.accounts.models import User


class WorkOrderStateMachine:
    """
    Work order state machine with strict transition rules.
    """

    # Valid state transitions
    TRANSITIONS = {
        WorkOrder.PENDING: [WorkOrder.IN_PROGRESS, WorkOrder.CANCELLED],
        WorkOrder.IN_PROGRESS: [
            WorkOrder.DELIVERED, WorkOrder.IN_REVISION,
            WorkOrder.COMPLETED, WorkOrder.CANCELLED
        ],
        WorkOrder.DELIVERED: [
            WorkOrder.IN_PROGRESS, WorkOrder.IN_REVISION,
            WorkOrder.COMPLETED, WorkOrder.CANCELLED
        ],
        WorkOrder.IN_REVISION: [
            WorkOrder.DELIVERED, WorkOrder.IN_PROGRESS,
            WorkOrder.COMPLETED, WorkOrder.CANCELLED
        ],
        WorkOrder.COMPLETED: [],  # Terminal state
        WorkOrder.CANCELLED: [],  # Terminal state
    }

    @classmethod
    def can_transition(cls, from_state: str, to_state: str) -> bool:
        """Check if transition is valid."""
        return to_state in cls.TRANSITIONS.get(from_state, [])

    @classmethod
    def ensure_can_transition(cls, work_order: WorkOrder, to_state: str) -> None:
        """Raise ValidationError if the work order cannot move to to_state."""
        if not cls.can_transition(work_order.status, to_state):
            raise ValidationError(
                f"Cannot transition work order from {work_order.status} to {to_state}"
            )

    @classmethod
    @transaction.atomic
    def transition(
        cls,
        work_order: WorkOrder,
        to_state: str,
        user: Optional[User] = None,
        reason: str = "",
        ip_address: Optional[str] = None
    ) -> WorkOrder:
        """
        Transition work order to new state with validation.

        Security:
        - Validates state transition against the locked row
        - Uses select_for_update to prevent race conditions
        - Logs all transitions with audit trail

        Args:
            work_order: WorkOrder instance
            to_state: Target state
            user: User making the change (None for system)
            reason: Reason for transition
            ip_address: IP address of requester

        Returns:
            Updated work order

        Raises:
            ValidationError: If transition is invalid
        """
        locked = WorkOrder.objects.select_for_update().get(id=work_order.id)

        cls.ensure_can_transition(locked, to_state)

        old_state = locked.status
        locked.status = to_state

        if to_state == WorkOrder.IN_PROGRESS and locked.start_date is None:
            locked.start_date = timezone.now()
        elif to_state == WorkOrder.COMPLETED:
            locked.completed_at = timezone.now()

        locked.save()

        WorkOrderStateLog.objects.create(
            work_order=locked,
            from_status=old_state,
            to_status=to_state,
            changed_by=user,
            reason=reason,
            ip_address=ip_address
        )

        return locked

    @classmethod
    def move(
        cls,
        work_order: WorkOrder,
        to_state: str,
        user: Optional[User] = None,
        reason: str = "",
        ip_address: Optional[str] = None
    ) -> WorkOrder:
        """
        Like transition(), but staying in the current state is a no-op.
        Used where several deliveries can be under review at once.
        """
        if work_order.status == to_state:
            return work_order
        return cls.transition(work_order, to_state, user, reason, ip_address)

    @staticmethod
    def log_creation(
        work_order: WorkOrder,
        user: Optional[User] = None,
        reason: str = "",
        ip_address: Optional[str] = None
    ) -> WorkOrderStateLog:
        """Record the initial state of a freshly created work order."""
        return WorkOrderStateLog.objects.create(
            work_order=work_order,
            from_status="",
            to_status=work_order.status,
            changed_by=user,
            reason=reason,
            ip_address=ip_address
        )
