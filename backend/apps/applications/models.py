"""
Application models - creative proposals against open projects.
"""
import uuid
from django.db import models
from django.core.validators import MinValueValidator
from apps.accounts.models import User
from apps.projects.models import Project


class Application(models.Model):
    """
    A creative's proposal for a project.
    One per (project, creative); at most one per project is ever ACCEPTED.
    ACCEPTED and DECLINED are terminal.
    """
    # Application states
    PENDING = 'PENDING'
    VIEWED = 'VIEWED'
    SHORTLISTED = 'SHORTLISTED'
    ACCEPTED = 'ACCEPTED'
    DECLINED = 'DECLINED'

    STATUS_CHOICES = [
        (PENDING, 'Pending'),
        (VIEWED, 'Viewed'),
        (SHORTLISTED, 'Shortlisted'),
        (ACCEPTED, 'Accepted'),
        (DECLINED, 'Declined'),
    ]

    # States from which the client can still accept or decline
    OPEN_STATUSES = [PENDING, VIEWED, SHORTLISTED]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    project = models.ForeignKey(
        Project,
        on_delete=models.CASCADE,
        related_name='applications'
    )
    creative = models.ForeignKey(
        User,
        on_delete=models.CASCADE,
        related_name='applications'
    )

    cover_letter = models.TextField(max_length=1000)
    proposed_rate = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        null=True,
        blank=True,
        validators=[MinValueValidator(0)]
    )
    timeline = models.CharField(max_length=200, blank=True)

    status = models.CharField(
        max_length=20,
        choices=STATUS_CHOICES,
        default=PENDING,
        db_index=True
    )

    # Timestamps
    created_at = models.DateTimeField(auto_now_add=True, db_index=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-created_at']
        verbose_name = 'Application'
        verbose_name_plural = 'Applications'
        constraints = [
            models.UniqueConstraint(
                fields=['project', 'creative'],
                name='unique_application_per_creative'
            ),
            models.UniqueConstraint(
                fields=['project'],
                condition=models.Q(status='ACCEPTED'),
                name='single_accepted_application_per_project'
            ),
        ]
        indexes = [
            models.Index(fields=['creative', '-created_at'], name='application_creative_idx'),
            models.Index(fields=['project', 'status'], name='application_project_idx'),
        ]

    def __str__(self):
        return f"Application {self.id} - {self.status}"

    def is_open(self):
        """Still awaiting the client's decision."""
        return self.status in self.OPEN_STATUSES
