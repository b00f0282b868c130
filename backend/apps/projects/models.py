"""
Project models - gig postings and direct requests.
"""
import uuid
from django.db import models
from django.core.validators import MinValueValidator
from apps.accounts.models import User


class Project(models.Model):
    """
    A client's posted work request.
    Open projects collect applications; direct projects target one creative.
    Once ASSIGNED the project only changes through cancellation.
    """
    # Budget types
    FIXED = 'FIXED'
    HOURLY = 'HOURLY'
    MILESTONE = 'MILESTONE'

    BUDGET_TYPE_CHOICES = [
        (FIXED, 'Fixed Price'),
        (HOURLY, 'Hourly'),
        (MILESTONE, 'Milestone Based'),
    ]

    # Project states
    DRAFT = 'DRAFT'
    OPEN = 'OPEN'
    ASSIGNED = 'ASSIGNED'
    CANCELLED = 'CANCELLED'

    STATUS_CHOICES = [
        (DRAFT, 'Draft'),
        (OPEN, 'Open'),
        (ASSIGNED, 'Assigned'),
        (CANCELLED, 'Cancelled'),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    client = models.ForeignKey(
        User,
        on_delete=models.PROTECT,
        related_name='projects'
    )
    title = models.CharField(max_length=200)
    description = models.TextField(max_length=5000)

    # Budget
    budget_type = models.CharField(max_length=20, choices=BUDGET_TYPE_CHOICES, default=FIXED)
    budget_min = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        null=True,
        blank=True,
        validators=[MinValueValidator(0)]
    )
    budget_max = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        null=True,
        blank=True,
        validators=[MinValueValidator(0)]
    )

    # Direct requests bypass open applications
    is_direct = models.BooleanField(default=False, db_index=True)
    target_creative = models.ForeignKey(
        User,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='direct_requests'
    )

    status = models.CharField(
        max_length=20,
        choices=STATUS_CHOICES,
        default=OPEN,
        db_index=True
    )
    deadline = models.DateTimeField(null=True, blank=True)

    # Timestamps
    created_at = models.DateTimeField(auto_now_add=True, db_index=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-created_at']
        verbose_name = 'Project'
        verbose_name_plural = 'Projects'
        indexes = [
            models.Index(fields=['status', 'is_direct', '-created_at'], name='project_board_idx'),
            models.Index(fields=['client', '-created_at'], name='project_client_idx'),
        ]

    def __str__(self):
        return f"{self.title} ({self.status})"

    def is_owner(self, user):
        """Check if user posted this project."""
        return self.client_id == user.pk

    def is_open(self):
        return self.status == self.OPEN
