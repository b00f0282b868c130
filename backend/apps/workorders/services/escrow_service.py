"""
Escrow service - ledger rules for funds held against a work order.
No real money moves here; a payment processor integration would hang
off fund/release/refund.
"""
import logging
from decimal import Decimal
from django.db import transaction
from django.core.exceptions import ValidationError
from django.utils import timezone
from apps.workorders.models import WorkOrder, Escrow

logger = logging.getLogger(__name__)


class EscrowService:
    """
    Manages escrow rows for work orders.
    Each method locks the row and checks Escrow.TRANSITIONS first.
    """

    @staticmethod
    def _lock(escrow: Escrow) -> Escrow:
        return Escrow.objects.select_for_update().get(id=escrow.id)

    @staticmethod
    @transaction.atomic
    def create_escrow(work_order: WorkOrder, total_amount: Decimal) -> Escrow:
        """
        Create the escrow row for a new work order.
        total_amount is fixed from here on.
        """
        if Escrow.objects.filter(work_order=work_order).exists():
            raise ValidationError("Escrow already exists for this work order")

        if total_amount < 0:
            raise ValidationError("Escrow amount cannot be negative")

        return Escrow.objects.create(
            work_order=work_order,
            total_amount=total_amount,
            status=Escrow.PENDING
        )

    @staticmethod
    @transaction.atomic
    def fund(escrow: Escrow) -> Escrow:
        """
        Client deposits the full amount. Partial funding is not supported.
        """
        locked = EscrowService._lock(escrow)

        if locked.status != Escrow.PENDING:
            raise ValidationError("Escrow already funded")

        locked.funded_amount = locked.total_amount
        locked.status = Escrow.FUNDED
        locked.funded_at = timezone.now()
        locked.save()

        logger.info(f"Escrow {locked.id} funded with {locked.funded_amount}")

        return locked

    @staticmethod
    @transaction.atomic
    def release_all(escrow: Escrow) -> Escrow:
        """
        Release everything to the creative. Only on work order completion.
        """
        locked = EscrowService._lock(escrow)

        if not locked.can_transition(Escrow.RELEASED):
            raise ValidationError(
                f"Cannot release escrow in {locked.status} state"
            )

        locked.released_amount = locked.total_amount
        locked.status = Escrow.RELEASED
        locked.released_at = timezone.now()
        locked.save()

        logger.info(f"Escrow {locked.id} released {locked.released_amount}")

        return locked

    @staticmethod
    @transaction.atomic
    def refund(escrow: Escrow) -> Escrow:
        """
        Return held funds to the client. Only from FUNDED or PARTIALLY_RELEASED.
        """
        locked = EscrowService._lock(escrow)

        if locked.status not in Escrow.REFUNDABLE_STATES:
            raise ValidationError(
                f"Cannot refund escrow in {locked.status} state"
            )

        locked.status = Escrow.REFUNDED
        locked.refunded_at = timezone.now()
        locked.save()

        logger.info(f"Escrow {locked.id} refunded")

        return locked
