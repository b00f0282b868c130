"""
Project service - posting and cancelling gigs.
Projects are mostly plain records; the application and work order
services drive their status once creatives get involved.
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

logger = logging.getLogger(__name__)


class ProjectService:
    """
    Service for project postings.
    """

    @staticmethod
    @transaction.atomic
    def create_project(
        client: User,
        title: str,
        description: str,
        budget_type: str = Project.FIXED,
        budget_min: Optional[Decimal] = None,
        budget_max: Optional[Decimal] = None,
        deadline=None,
        is_direct: bool = False,
        target_creative: Optional[User] = None
    ) -> Project:
        """
        Post a new project.

        Direct requests must name the creative they target; that creative
        is notified with a WORK_REQUEST.
        """
        if not client.is_client:
            raise PermissionDenied("Only clients can create projects")

        if is_direct and target_creative is None:
            raise ValidationError("Direct requests must specify a target creative")

        if target_creative is not None and not target_creative.is_creative:
            raise ValidationError("Direct requests can only target creatives")

        if budget_min is not None and budget_max is not None and budget_min > budget_max:
            raise ValidationError("Minimum budget cannot exceed maximum budget")

        project = Project.objects.create(
            client=client,
            title=title,
            description=description,
            budget_type=budget_type,
            budget_min=budget_min,
            budget_max=budget_max,
            deadline=deadline,
            is_direct=is_direct,
            target_creative=target_creative if is_direct else None,
            status=Project.OPEN
        )

        logger.info(f"Project {project.id} created by {client.email} (direct={is_direct})")

        if is_direct:
            NotificationService.notify(
                Notification.Type.WORK_REQUEST,
                recipient=target_creative,
                actor=client,
                entity_id=project.id,
                entity_type=Notification.EntityType.PROJECT
            )

        return project

    @staticmethod
    @transaction.atomic
    def cancel_project(project: Project, client: User) -> Project:
        """
        Owner withdraws a project that has not been assigned yet.
        """
        locked = Project.objects.select_for_update().get(id=project.id)

        if not locked.is_owner(client):
            raise PermissionDenied("Not your project")

        if locked.status not in [Project.DRAFT, Project.OPEN]:
            raise ValidationError("Only draft or open projects can be cancelled")

        locked.status = Project.CANCELLED
        locked.save(update_fields=['status', 'updated_at'])

        logger.info(f"Project {locked.id} cancelled by {client.email}")

        return locked

    @staticmethod
    def get_open_projects(budget_type: Optional[str] = None):
        """Public gig board: open, non-direct projects."""
        queryset = Project.objects.filter(
            status=Project.OPEN,
            is_direct=False
        ).select_related('client', 'client__profile')

        if budget_type:
            queryset = queryset.filter(budget_type=budget_type)

        return queryset
