"""
Work order models - engagement state machine, escrow ledger,
milestones and deliveries.
"""
import uuid
from decimal import Decimal
from django.db import models
from django.core.validators import MinValueValidator
from apps.accounts.models import User
from apps.projects.models import Project


class WorkOrder(models.Model):
    """
    The contractual engagement created when a client accepts an
    application (or a creative accepts a direct request).
    Client and creative are both participants; each action is scoped
    to one side.
    """
    # Work order states
    PENDING = 'PENDING'
    IN_PROGRESS = 'IN_PROGRESS'
    DELIVERED = 'DELIVERED'
    IN_REVISION = 'IN_REVISION'
    COMPLETED = 'COMPLETED'
    CANCELLED = 'CANCELLED'

    STATUS_CHOICES = [
        (PENDING, 'Awaiting Funding'),
        (IN_PROGRESS, 'In Progress'),
        (DELIVERED, 'Delivered'),
        (IN_REVISION, 'In Revision'),
        (COMPLETED, 'Completed'),
        (CANCELLED, 'Cancelled'),
    ]

    TERMINAL_STATES = [COMPLETED, CANCELLED]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    # One work order per project
    project = models.OneToOneField(
        Project,
        on_delete=models.PROTECT,
        related_name='work_order'
    )
    client = models.ForeignKey(
        User,
        on_delete=models.PROTECT,
        related_name='client_work_orders'
    )
    creative = models.ForeignKey(
        User,
        on_delete=models.PROTECT,
        related_name='creative_work_orders'
    )

    # Agreed terms
    agreed_rate = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(0)]
    )
    agreed_budget_type = models.CharField(
        max_length=20,
        choices=Project.BUDGET_TYPE_CHOICES
    )

    status = models.CharField(
        max_length=20,
        choices=STATUS_CHOICES,
        default=PENDING,
        db_index=True
    )

    # Timestamps
    start_date = models.DateTimeField(null=True, blank=True)
    completed_at = models.DateTimeField(null=True, blank=True)
    deadline = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True, db_index=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-updated_at']
        verbose_name = 'Work Order'
        verbose_name_plural = 'Work Orders'
        indexes = [
            models.Index(fields=['client', 'status', '-updated_at'], name='workorder_client_idx'),
            models.Index(fields=['creative', 'status', '-updated_at'], name='workorder_creative_idx'),
        ]

    def __str__(self):
        return f"WorkOrder {self.id} - {self.status}"

    def is_client(self, user):
        """Check if user is the client."""
        return self.client_id == user.pk

    def is_creative(self, user):
        """Check if user is the creative."""
        return self.creative_id == user.pk

    def is_participant(self, user):
        """Check if user is client or creative."""
        return self.is_client(user) or self.is_creative(user)

    def other_party(self, user):
        """The participant on the other side of the engagement."""
        return self.creative if self.is_client(user) else self.client

    def is_terminal(self):
        return self.status in self.TERMINAL_STATES


class WorkOrderStateLog(models.Model):
    """
    Audit trail for work order status transitions.
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    work_order = models.ForeignKey(
        WorkOrder,
        on_delete=models.CASCADE,
        related_name='state_logs'
    )
    from_status = models.CharField(max_length=20, blank=True)
    to_status = models.CharField(max_length=20)
    changed_by = models.ForeignKey(
        User,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        help_text="User who triggered change (null for system)"
    )
    reason = models.TextField(blank=True)
    ip_address = models.GenericIPAddressField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True, db_index=True)

    class Meta:
        ordering = ['-created_at']
        verbose_name = 'Work Order State Log'
        verbose_name_plural = 'Work Order State Logs'
        indexes = [
            models.Index(fields=['work_order', '-created_at'], name='workorder_log_idx'),
        ]

    def __str__(self):
        return f"{self.work_order_id}: {self.from_status or '-'} -> {self.to_status}"


class Escrow(models.Model):
    """
    Ledger row tracking funds pledged, held and released for one work order.
    Never moves on its own: every change is driven by a work order event.
    """
    # Escrow status
    PENDING = 'PENDING'
    FUNDED = 'FUNDED'
    PARTIALLY_RELEASED = 'PARTIALLY_RELEASED'
    RELEASED = 'RELEASED'
    REFUNDED = 'REFUNDED'

    STATUS_CHOICES = [
        (PENDING, 'Awaiting Funds'),
        (FUNDED, 'Funded'),
        (PARTIALLY_RELEASED, 'Partially Released'),
        (RELEASED, 'Released to Creative'),
        (REFUNDED, 'Refunded to Client'),
    ]

    # Valid status transitions
    TRANSITIONS = {
        PENDING: [FUNDED],
        FUNDED: [PARTIALLY_RELEASED, RELEASED, REFUNDED],
        PARTIALLY_RELEASED: [RELEASED, REFUNDED],
        RELEASED: [],   # Terminal state
        REFUNDED: [],   # Terminal state
    }

    REFUNDABLE_STATES = [FUNDED, PARTIALLY_RELEASED]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    work_order = models.OneToOneField(
        WorkOrder,
        on_delete=models.PROTECT,
        related_name='escrow'
    )

    # Amounts
    total_amount = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(0)],
        help_text="Fixed at creation from the project budget"
    )
    funded_amount = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=Decimal('0.00'),
        help_text="Amount deposited by the client"
    )
    released_amount = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=Decimal('0.00'),
        help_text="Amount released to the creative"
    )

    # Status
    status = models.CharField(
        max_length=20,
        choices=STATUS_CHOICES,
        default=PENDING,
        db_index=True
    )

    # Timestamps
    created_at = models.DateTimeField(auto_now_add=True)
    funded_at = models.DateTimeField(null=True, blank=True)
    released_at = models.DateTimeField(null=True, blank=True)
    refunded_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        verbose_name = 'Escrow'
        verbose_name_plural = 'Escrows'
        constraints = [
            models.CheckConstraint(
                condition=models.Q(funded_amount__lte=models.F('total_amount')),
                name='escrow_funded_within_total'
            ),
            models.CheckConstraint(
                condition=models.Q(released_amount__lte=models.F('funded_amount')),
                name='escrow_released_within_funded'
            ),
        ]

    def __str__(self):
        return f"Escrow for WorkOrder {self.work_order_id} - {self.status}"

    def held_balance(self):
        """Funds currently sitting in escrow."""
        if self.status == self.REFUNDED:
            return Decimal('0.00')
        return self.funded_amount - self.released_amount

    def can_transition(self, to_status):
        return to_status in self.TRANSITIONS.get(self.status, [])


class Milestone(models.Model):
    """
    Ordered, priced checkpoint within a work order.
    `order` is display sequence only; any milestone can be delivered first.
    """
    # Milestone states
    PENDING = 'PENDING'
    DELIVERED = 'DELIVERED'
    IN_REVISION = 'IN_REVISION'
    APPROVED = 'APPROVED'

    STATUS_CHOICES = [
        (PENDING, 'Pending'),
        (DELIVERED, 'Delivered'),
        (IN_REVISION, 'In Revision'),
        (APPROVED, 'Approved'),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    work_order = models.ForeignKey(
        WorkOrder,
        on_delete=models.CASCADE,
        related_name='milestones'
    )
    title = models.CharField(max_length=100)
    description = models.TextField(max_length=500, blank=True)
    amount = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(0)]
    )
    due_date = models.DateTimeField(null=True, blank=True)
    order = models.PositiveIntegerField(default=0)
    status = models.CharField(
        max_length=20,
        choices=STATUS_CHOICES,
        default=PENDING,
        db_index=True
    )

    # Timestamps
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['order', 'created_at']
        verbose_name = 'Milestone'
        verbose_name_plural = 'Milestones'
        indexes = [
            models.Index(fields=['work_order', 'order'], name='milestone_order_idx'),
        ]

    def __str__(self):
        return f"Milestone {self.order}: {self.title} - {self.status}"


class Delivery(models.Model):
    """
    A creative's submission of work, for one milestone or (milestone=None)
    for the whole order.
    """
    # Delivery states
    PENDING_REVIEW = 'PENDING_REVIEW'
    APPROVED = 'APPROVED'
    REVISION_REQUESTED = 'REVISION_REQUESTED'

    STATUS_CHOICES = [
        (PENDING_REVIEW, 'Pending Review'),
        (APPROVED, 'Approved'),
        (REVISION_REQUESTED, 'Revision Requested'),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    work_order = models.ForeignKey(
        WorkOrder,
        on_delete=models.CASCADE,
        related_name='deliveries'
    )
    milestone = models.ForeignKey(
        Milestone,
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name='deliveries'
    )
    message = models.TextField(max_length=2000)
    attachments = models.JSONField(default=list, blank=True)
    status = models.CharField(
        max_length=20,
        choices=STATUS_CHOICES,
        default=PENDING_REVIEW,
        db_index=True
    )
    revision_note = models.TextField(blank=True)

    # Timestamps
    created_at = models.DateTimeField(auto_now_add=True, db_index=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-created_at']
        verbose_name = 'Delivery'
        verbose_name_plural = 'Deliveries'
        constraints = [
            models.UniqueConstraint(
                fields=['milestone'],
                condition=models.Q(status='PENDING_REVIEW'),
                name='single_pending_delivery_per_milestone'
            ),
        ]

    def __str__(self):
        return f"Delivery {self.id} - {self.status}"
