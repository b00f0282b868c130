"""
Application service - proposal submission and the accept/decline decision.
Accepting is the single entry point that turns a proposal into a
WorkOrder with its Escrow.
"""
import logging
from decimal import Decimal
from typing import Optional
from django.db import transaction, IntegrityError
from django.core.exceptions import ValidationError, PermissionDenied
from django.utils import timezone
from apps.applications.models import Application
from apps.projects.models import Project
from apps.accounts.models import User
from apps.notifications.models import Notification
from apps.notifications.services.notification_service import NotificationService
from apps.workorders.models import WorkOrder
from apps.workorders.services.workorder_service import WorkOrderService
from common.exceptions import Conflict

logger = logging.getLogger(__name__)


class ApplicationService:
    """
    Service for the application side of the gig marketplace.
    """

    @staticmethod
    @transaction.atomic
    def submit(
        project: Project,
        creative: User,
        cover_letter: str,
        proposed_rate: Optional[Decimal] = None,
        timeline: Optional[str] = None
    ) -> Application:
        """
        Creative applies to an open project.

        Raises:
            PermissionDenied: caller is not a creative
            ValidationError: project is not open or is a direct request
            Conflict: creative already applied
        """
        if not creative.is_creative:
            raise PermissionDenied("Only creatives can apply to projects")

        # Same lock accept takes, so a submit never lands after the project is assigned
        project = Project.objects.select_for_update().get(id=project.id)

        if project.status != Project.OPEN:
            raise ValidationError("This project is no longer accepting applications")

        if project.is_direct:
            raise ValidationError("Cannot apply to direct requests")

        if Application.objects.filter(project=project, creative=creative).exists():
            raise Conflict("You have already applied to this project")

        try:
            with transaction.atomic():
                application = Application.objects.create(
                    project=project,
                    creative=creative,
                    cover_letter=cover_letter,
                    proposed_rate=proposed_rate,
                    timeline=timeline or ""
                )
        except IntegrityError:
            # Lost a race against a parallel submit from the same creative
            raise Conflict("You have already applied to this project")

        logger.info(f"Application {application.id} submitted by {creative.email} for project {project.id}")

        NotificationService.notify(
            Notification.Type.APPLICATION,
            recipient=project.client,
            actor=creative,
            entity_id=project.id,
            entity_type=Notification.EntityType.PROJECT
        )

        return application

    @staticmethod
    @transaction.atomic
    def accept(
        application: Application,
        client: User,
        ip_address: Optional[str] = None
    ) -> WorkOrder:
        """
        Client accepts one application.

        In one transaction: the application is ACCEPTED, every other open
        sibling is DECLINED, the project becomes ASSIGNED and a WorkOrder
        with its Escrow is created.

        Security:
        - Project row is locked before the application row, so two accepts
          on sibling applications serialize and the second one sees the
          first one's ASSIGNED/DECLINED state.

        Returns:
            Created work order
        """
        if not application.project.is_owner(client):
            raise PermissionDenied("Not your project")

        # Lock order: project, then application
        project = Project.objects.select_for_update().get(id=application.project_id)
        locked_application = Application.objects.select_for_update().get(id=application.id)

        if not locked_application.is_open():
            raise ValidationError("This application has already been processed")

        if project.status != Project.OPEN:
            raise ValidationError("This project is no longer accepting applications")

        locked_application.status = Application.ACCEPTED
        locked_application.save(update_fields=['status', 'updated_at'])

        declined = Application.objects.filter(
            project=project,
            status__in=Application.OPEN_STATUSES
        ).exclude(
            id=locked_application.id
        ).update(
            status=Application.DECLINED,
            updated_at=timezone.now()
        )

        project.status = Project.ASSIGNED
        project.save(update_fields=['status', 'updated_at'])

        if locked_application.proposed_rate is not None:
            agreed_rate = locked_application.proposed_rate
        elif project.budget_min is not None:
            agreed_rate = project.budget_min
        else:
            agreed_rate = Decimal('0.00')

        if project.budget_max is not None:
            total_amount = project.budget_max
        elif project.budget_min is not None:
            total_amount = project.budget_min
        else:
            total_amount = agreed_rate

        work_order = WorkOrderService.open_work_order(
            project=project,
            creative=locked_application.creative,
            agreed_rate=agreed_rate,
            total_amount=total_amount,
            user=client,
            reason=f"Application {locked_application.id} accepted",
            ip_address=ip_address
        )

        logger.info(
            f"Application {locked_application.id} accepted by {client.email}; "
            f"{declined} sibling(s) declined, work order {work_order.id} opened"
        )

        NotificationService.notify(
            Notification.Type.WORK_ORDER_UPDATE,
            recipient=locked_application.creative,
            actor=client,
            entity_id=work_order.id,
            entity_type=Notification.EntityType.WORK_ORDER
        )

        return work_order

    @staticmethod
    @transaction.atomic
    def decline(application: Application, client: User) -> Application:
        """
        Client declines a single application that is still open.
        """
        if not application.project.is_owner(client):
            raise PermissionDenied("Not your project")

        locked_application = Application.objects.select_for_update().get(id=application.id)

        if not locked_application.is_open():
            raise ValidationError("This application has already been processed")

        locked_application.status = Application.DECLINED
        locked_application.save(update_fields=['status', 'updated_at'])

        logger.info(f"Application {locked_application.id} declined by {client.email}")

        NotificationService.notify(
            Notification.Type.APPLICATION,
            recipient=locked_application.creative,
            actor=client,
            entity_id=locked_application.project_id,
            entity_type=Notification.EntityType.PROJECT
        )

        return locked_application

    @staticmethod
    def get_for_project(project: Project, client: User):
        """All applications for a project, newest first. Owner only."""
        if not project.is_owner(client):
            raise PermissionDenied("Only the project owner can view applications")

        return Application.objects.filter(
            project=project
        ).select_related('creative', 'creative__profile').order_by('-created_at')

    @staticmethod
    def get_my_applications(creative: User):
        """The creative's own applications with their project summaries."""
        return Application.objects.filter(
            creative=creative
        ).select_related('project', 'project__client', 'project__client__profile')
