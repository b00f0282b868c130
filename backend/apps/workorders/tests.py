"""
Tests for the work order lifecycle.
Covers the state machine, escrow ledger, milestones, deliveries,
direct requests and the HTTP endpoints.
"""
import uuid
from datetime import timedelta
from decimal import Decimal
from django.core.exceptions import ValidationError, PermissionDenied
from django.test import TestCase
from django.urls import reverse
from django.utils import timezone
from rest_framework.test import APIClient
from rest_framework import status
from apps.accounts.models import User
from apps.applications.models import Application
from apps.applications.services.application_service import ApplicationService
from apps.notifications.models import Notification
from apps.projects.models import Project
from apps.workorders.models import WorkOrder, WorkOrderStateLog, Escrow, Milestone, Delivery
from apps.workorders.services.state_machine import WorkOrderStateMachine
from apps.workorders.services.escrow_service import EscrowService
from apps.workorders.services.workorder_service import WorkOrderService
from apps.workorders.services.milestone_service import MilestoneService
from apps.workorders.services.direct_request_service import DirectRequestService


class WorkOrderTestMixin:
    """Shared fixtures: a client, a creative and an accepted project."""

    def make_users(self):
        self.client_user = User.objects.create_client('client@test.com', 'testpass123')
        self.creative = User.objects.create_creative('creative@test.com', 'testpass123')
        self.outsider = User.objects.create_creative('outsider@test.com', 'testpass123')

    def make_project(self, **kwargs):
        defaults = dict(
            client=self.client_user,
            title='Brand identity',
            description='Logo, palette and type system',
            budget_type=Project.FIXED,
            budget_min=Decimal('500.00'),
            budget_max=Decimal('2000.00'),
        )
        defaults.update(kwargs)
        return Project.objects.create(**defaults)

    def make_work_order(self, total_amount=Decimal('2000.00')):
        project = self.make_project(status=Project.ASSIGNED)
        return WorkOrderService.open_work_order(
            project=project,
            creative=self.creative,
            agreed_rate=Decimal('800.00'),
            total_amount=total_amount,
            user=self.client_user,
            reason='test'
        )

    def make_started_work_order(self):
        work_order = self.make_work_order()
        WorkOrderService.fund_escrow(work_order, self.client_user)
        return WorkOrderService.start(work_order, self.creative)


class StateMachineTestCase(WorkOrderTestMixin, TestCase):

    def setUp(self):
        self.make_users()
        self.work_order = self.make_work_order()

    def test_terminal_states_have_no_exits(self):
        for terminal in WorkOrder.TERMINAL_STATES:
            self.assertEqual(WorkOrderStateMachine.TRANSITIONS[terminal], [])

    def test_pending_cannot_jump_to_delivered(self):
        with self.assertRaises(ValidationError):
            WorkOrderStateMachine.transition(self.work_order, WorkOrder.DELIVERED)

    def test_transition_writes_state_log(self):
        WorkOrderStateMachine.transition(
            self.work_order, WorkOrder.IN_PROGRESS, user=self.creative, reason='go'
        )

        log = WorkOrderStateLog.objects.filter(work_order=self.work_order).first()
        self.assertEqual(log.from_status, WorkOrder.PENDING)
        self.assertEqual(log.to_status, WorkOrder.IN_PROGRESS)
        self.assertEqual(log.changed_by, self.creative)

    def test_start_date_stamped_once(self):
        updated = WorkOrderStateMachine.transition(self.work_order, WorkOrder.IN_PROGRESS)
        first_start = updated.start_date
        updated = WorkOrderStateMachine.transition(updated, WorkOrder.DELIVERED)
        updated = WorkOrderStateMachine.transition(updated, WorkOrder.IN_PROGRESS)

        self.assertIsNotNone(first_start)
        self.assertEqual(updated.start_date, first_start)

    def test_move_to_current_state_is_noop(self):
        before = WorkOrderStateLog.objects.count()

        WorkOrderStateMachine.move(self.work_order, WorkOrder.PENDING)

        self.assertEqual(WorkOrderStateLog.objects.count(), before)

    def test_creation_is_logged(self):
        log = self.work_order.state_logs.get()
        self.assertEqual(log.from_status, '')
        self.assertEqual(log.to_status, WorkOrder.PENDING)


class EscrowServiceTestCase(WorkOrderTestMixin, TestCase):

    def setUp(self):
        self.make_users()
        self.work_order = self.make_work_order()
        self.escrow = self.work_order.escrow

    def test_escrow_created_pending(self):
        self.assertEqual(self.escrow.status, Escrow.PENDING)
        self.assertEqual(self.escrow.total_amount, Decimal('2000.00'))
        self.assertEqual(self.escrow.funded_amount, Decimal('0.00'))

    def test_second_escrow_rejected(self):
        with self.assertRaises(ValidationError):
            EscrowService.create_escrow(self.work_order, Decimal('10.00'))

    def test_fund_is_full_amount(self):
        escrow = EscrowService.fund(self.escrow)

        self.assertEqual(escrow.status, Escrow.FUNDED)
        self.assertEqual(escrow.funded_amount, escrow.total_amount)
        self.assertIsNotNone(escrow.funded_at)

    def test_cannot_release_unfunded(self):
        with self.assertRaises(ValidationError):
            EscrowService.release_all(self.escrow)

    def test_cannot_refund_unfunded(self):
        with self.assertRaises(ValidationError):
            EscrowService.refund(self.escrow)

    def test_refund_is_terminal(self):
        EscrowService.fund(self.escrow)
        escrow = EscrowService.refund(self.escrow)

        self.assertEqual(escrow.held_balance(), Decimal('0.00'))
        with self.assertRaises(ValidationError):
            EscrowService.release_all(escrow)


class FundAndStartTestCase(WorkOrderTestMixin, TestCase):

    def setUp(self):
        self.make_users()
        self.work_order = self.make_work_order()

    def test_fund_twice_is_rejected(self):
        WorkOrderService.fund_escrow(self.work_order, self.client_user)

        with self.assertRaisesMessage(ValidationError, 'Escrow already funded'):
            WorkOrderService.fund_escrow(self.work_order, self.client_user)

    def test_only_client_funds(self):
        with self.assertRaises(PermissionDenied):
            WorkOrderService.fund_escrow(self.work_order, self.creative)

    def test_fund_notifies_creative(self):
        with self.captureOnCommitCallbacks(execute=True):
            WorkOrderService.fund_escrow(self.work_order, self.client_user)

        notification = Notification.objects.get(user=self.creative)
        self.assertEqual(notification.type, Notification.Type.ESCROW_UPDATE)
        self.assertEqual(notification.entity_id, self.work_order.id)
        self.assertEqual(notification.entity_type, Notification.EntityType.WORK_ORDER)

    def test_start_requires_funded_escrow(self):
        with self.assertRaises(ValidationError):
            WorkOrderService.start(self.work_order, self.creative)

    def test_only_creative_starts(self):
        WorkOrderService.fund_escrow(self.work_order, self.client_user)

        with self.assertRaises(PermissionDenied):
            WorkOrderService.start(self.work_order, self.client_user)

    def test_start_moves_to_in_progress(self):
        WorkOrderService.fund_escrow(self.work_order, self.client_user)
        updated = WorkOrderService.start(self.work_order, self.creative)

        self.assertEqual(updated.status, WorkOrder.IN_PROGRESS)
        self.assertIsNotNone(updated.start_date)

    def test_get_by_id_for_participants_only(self):
        self.assertEqual(WorkOrderService.get_by_id(self.work_order, self.client_user), self.work_order)
        self.assertEqual(WorkOrderService.get_by_id(self.work_order, self.creative), self.work_order)

        with self.assertRaises(PermissionDenied):
            WorkOrderService.get_by_id(self.work_order, self.outsider)


class DeliveryFlowTestCase(WorkOrderTestMixin, TestCase):

    def setUp(self):
        self.make_users()
        self.work_order = self.make_started_work_order()

    def test_whole_order_delivery_completes_and_releases(self):
        delivery = WorkOrderService.submit_delivery(
            self.work_order, self.creative, 'Final files', ['https://files.example.com/a.zip']
        )
        self.work_order.refresh_from_db()
        self.assertEqual(self.work_order.status, WorkOrder.DELIVERED)

        updated = WorkOrderService.approve_delivery(delivery, self.client_user)

        escrow = Escrow.objects.get(work_order=self.work_order)
        self.assertEqual(updated.status, WorkOrder.COMPLETED)
        self.assertIsNotNone(updated.completed_at)
        self.assertEqual(escrow.status, Escrow.RELEASED)
        self.assertEqual(escrow.released_amount, Decimal('2000.00'))

    def test_approve_twice_is_rejected(self):
        delivery = WorkOrderService.submit_delivery(self.work_order, self.creative, 'Files')
        WorkOrderService.approve_delivery(delivery, self.client_user)

        with self.assertRaisesMessage(ValidationError, 'Delivery already processed'):
            WorkOrderService.approve_delivery(delivery, self.client_user)

    def test_only_creative_delivers(self):
        with self.assertRaises(PermissionDenied):
            WorkOrderService.submit_delivery(self.work_order, self.client_user, 'Files')

    def test_only_client_approves(self):
        delivery = WorkOrderService.submit_delivery(self.work_order, self.creative, 'Files')

        with self.assertRaises(PermissionDenied):
            WorkOrderService.approve_delivery(delivery, self.creative)

    def test_delivery_before_start_rejected(self):
        work_order = self.make_work_order()

        with self.assertRaises(ValidationError):
            WorkOrderService.submit_delivery(work_order, self.creative, 'Too early')

    def test_second_pending_whole_order_delivery_rejected(self):
        WorkOrderService.submit_delivery(self.work_order, self.creative, 'First')

        with self.assertRaises(ValidationError):
            WorkOrderService.submit_delivery(self.work_order, self.creative, 'Second')

    def test_revision_then_resubmit(self):
        delivery = WorkOrderService.submit_delivery(self.work_order, self.creative, 'v1')

        updated = WorkOrderService.request_revision(delivery, self.client_user, 'Bigger logo')

        delivery.refresh_from_db()
        self.assertEqual(updated.status, WorkOrder.IN_REVISION)
        self.assertEqual(delivery.status, Delivery.REVISION_REQUESTED)
        self.assertEqual(delivery.revision_note, 'Bigger logo')

        WorkOrderService.submit_delivery(self.work_order, self.creative, 'v2')
        self.work_order.refresh_from_db()
        self.assertEqual(self.work_order.status, WorkOrder.DELIVERED)

    def test_revision_on_processed_delivery_rejected(self):
        delivery = WorkOrderService.submit_delivery(self.work_order, self.creative, 'v1')
        WorkOrderService.request_revision(delivery, self.client_user, 'Again')

        with self.assertRaises(ValidationError):
            WorkOrderService.request_revision(delivery, self.client_user, 'And again')

    def test_delivery_notifies_client(self):
        with self.captureOnCommitCallbacks(execute=True):
            WorkOrderService.submit_delivery(self.work_order, self.creative, 'Files')

        self.assertTrue(
            Notification.objects.filter(
                user=self.client_user, type=Notification.Type.DELIVERY
            ).exists()
        )


class MilestoneFlowTestCase(WorkOrderTestMixin, TestCase):

    def setUp(self):
        self.make_users()
        self.work_order = self.make_started_work_order()
        self.m1 = MilestoneService.add_milestone(
            self.work_order, self.client_user, title='Concepts', amount=Decimal('800.00')
        )
        self.m2 = MilestoneService.add_milestone(
            self.work_order, self.creative, title='Final', amount=Decimal('1200.00')
        )

    def test_order_is_append_position(self):
        self.assertEqual(self.m1.order, 0)
        self.assertEqual(self.m2.order, 1)

    def test_completion_waits_for_all_milestones(self):
        d1 = WorkOrderService.submit_delivery(
            self.work_order, self.creative, 'Concepts', milestone=self.m1
        )
        updated = WorkOrderService.approve_delivery(d1, self.client_user)

        self.m1.refresh_from_db()
        self.assertEqual(self.m1.status, Milestone.APPROVED)
        self.assertEqual(updated.status, WorkOrder.IN_PROGRESS)
        self.assertEqual(updated.escrow.status, Escrow.FUNDED)

        d2 = WorkOrderService.submit_delivery(
            self.work_order, self.creative, 'Final', milestone=self.m2
        )
        updated = WorkOrderService.approve_delivery(d2, self.client_user)

        escrow = Escrow.objects.get(work_order=self.work_order)
        self.assertEqual(updated.status, WorkOrder.COMPLETED)
        self.assertEqual(escrow.status, Escrow.RELEASED)
        self.assertEqual(escrow.released_amount, escrow.total_amount)

    def test_milestones_can_be_delivered_out_of_order(self):
        d2 = WorkOrderService.submit_delivery(
            self.work_order, self.creative, 'Final first', milestone=self.m2
        )
        updated = WorkOrderService.approve_delivery(d2, self.client_user)

        self.assertEqual(updated.status, WorkOrder.IN_PROGRESS)

    def test_whole_order_delivery_does_not_complete_with_open_milestones(self):
        delivery = WorkOrderService.submit_delivery(self.work_order, self.creative, 'Everything')
        updated = WorkOrderService.approve_delivery(delivery, self.client_user)

        self.assertEqual(updated.status, WorkOrder.IN_PROGRESS)

    def test_duplicate_pending_delivery_for_milestone_rejected(self):
        WorkOrderService.submit_delivery(self.work_order, self.creative, 'One', milestone=self.m1)

        with self.assertRaises(ValidationError):
            WorkOrderService.submit_delivery(self.work_order, self.creative, 'Two', milestone=self.m1)

    def test_two_milestones_can_be_pending_together(self):
        WorkOrderService.submit_delivery(self.work_order, self.creative, 'One', milestone=self.m1)
        WorkOrderService.submit_delivery(self.work_order, self.creative, 'Two', milestone=self.m2)

        self.assertEqual(
            Delivery.objects.filter(status=Delivery.PENDING_REVIEW).count(), 2
        )

    def test_delivery_on_approved_milestone_rejected(self):
        d1 = WorkOrderService.submit_delivery(self.work_order, self.creative, 'One', milestone=self.m1)
        WorkOrderService.approve_delivery(d1, self.client_user)

        with self.assertRaises(ValidationError):
            WorkOrderService.submit_delivery(self.work_order, self.creative, 'Again', milestone=self.m1)

    def test_milestone_from_other_work_order_rejected(self):
        other = WorkOrderService.open_work_order(
            project=self.make_project(status=Project.ASSIGNED),
            creative=self.creative,
            agreed_rate=Decimal('1.00'),
            total_amount=Decimal('1.00')
        )
        foreign = MilestoneService.add_milestone(
            other, self.client_user, title='Elsewhere', amount=Decimal('1.00')
        )

        with self.assertRaises(ValidationError):
            WorkOrderService.submit_delivery(self.work_order, self.creative, 'x', milestone=foreign)

    def test_revision_marks_milestone(self):
        d1 = WorkOrderService.submit_delivery(self.work_order, self.creative, 'One', milestone=self.m1)
        WorkOrderService.request_revision(d1, self.client_user, 'Try again')

        self.m1.refresh_from_db()
        self.assertEqual(self.m1.status, Milestone.IN_REVISION)

    def test_update_milestone(self):
        updated = MilestoneService.update_milestone(
            self.m1, self.creative, title='Moodboards', amount=Decimal('900.00')
        )

        self.assertEqual(updated.title, 'Moodboards')
        self.assertEqual(updated.amount, Decimal('900.00'))

    def test_update_rejects_status_changes(self):
        with self.assertRaises(ValidationError):
            MilestoneService.update_milestone(self.m1, self.creative, status=Milestone.APPROVED)

    def test_empty_update_rejected_without_notification(self):
        with self.captureOnCommitCallbacks(execute=True):
            with self.assertRaises(ValidationError):
                MilestoneService.update_milestone(self.m1, self.client_user)

        self.assertFalse(
            Notification.objects.filter(type=Notification.Type.MILESTONE_UPDATE).exists()
        )

    def test_review_outcomes_touch_milestone_timestamp(self):
        stale = timezone.now() - timedelta(days=1)
        Milestone.objects.filter(id__in=[self.m1.id, self.m2.id]).update(updated_at=stale)

        d1 = WorkOrderService.submit_delivery(self.work_order, self.creative, 'One', milestone=self.m1)
        Milestone.objects.filter(id=self.m1.id).update(updated_at=stale)
        WorkOrderService.approve_delivery(d1, self.client_user)
        d2 = WorkOrderService.submit_delivery(self.work_order, self.creative, 'Two', milestone=self.m2)
        Milestone.objects.filter(id=self.m2.id).update(updated_at=stale)
        WorkOrderService.request_revision(d2, self.client_user, 'Brighter colours')

        self.m1.refresh_from_db()
        self.m2.refresh_from_db()
        self.assertGreater(self.m1.updated_at, stale)
        self.assertGreater(self.m2.updated_at, stale)

    def test_reorder(self):
        MilestoneService.reorder_milestones(self.work_order, self.client_user, [self.m2.id, self.m1.id])

        self.m1.refresh_from_db()
        self.m2.refresh_from_db()
        self.assertEqual(self.m2.order, 0)
        self.assertEqual(self.m1.order, 1)

    def test_reorder_rejects_foreign_ids(self):
        with self.assertRaises(ValidationError):
            MilestoneService.reorder_milestones(
                self.work_order, self.client_user, [self.m1.id, self.work_order.id]
            )

    def test_outsider_cannot_add_milestone(self):
        with self.assertRaises(PermissionDenied):
            MilestoneService.add_milestone(
                self.work_order, self.outsider, title='Sneaky', amount=Decimal('1.00')
            )

    def test_no_milestones_on_finalized_work_order(self):
        WorkOrderService.cancel(self.work_order, self.client_user)

        with self.assertRaises(ValidationError):
            MilestoneService.add_milestone(
                self.work_order, self.client_user, title='Late', amount=Decimal('1.00')
            )

    def test_milestone_update_notifies_other_party(self):
        with self.captureOnCommitCallbacks(execute=True):
            MilestoneService.update_milestone(self.m1, self.client_user, title='Renamed')

        notification = Notification.objects.get(
            user=self.creative, type=Notification.Type.MILESTONE_UPDATE
        )
        self.assertEqual(notification.actor, self.client_user)


class CancellationTestCase(WorkOrderTestMixin, TestCase):

    def setUp(self):
        self.make_users()
        self.work_order = self.make_work_order()

    def test_cancel_unfunded_leaves_escrow_pending(self):
        updated = WorkOrderService.cancel(self.work_order, self.creative, reason='Busy')

        escrow = Escrow.objects.get(work_order=self.work_order)
        self.assertEqual(updated.status, WorkOrder.CANCELLED)
        self.assertEqual(escrow.status, Escrow.PENDING)

    def test_cancel_funded_refunds(self):
        WorkOrderService.fund_escrow(self.work_order, self.client_user)
        WorkOrderService.cancel(self.work_order, self.client_user)

        escrow = Escrow.objects.get(work_order=self.work_order)
        self.assertEqual(escrow.status, Escrow.REFUNDED)
        self.assertIsNotNone(escrow.refunded_at)

    def test_cancel_twice_rejected(self):
        WorkOrderService.cancel(self.work_order, self.client_user)

        with self.assertRaisesMessage(ValidationError, 'Work order already finalized'):
            WorkOrderService.cancel(self.work_order, self.client_user)

    def test_outsider_cannot_cancel(self):
        with self.assertRaises(PermissionDenied):
            WorkOrderService.cancel(self.work_order, self.outsider)

    def test_cancel_notifies_other_party_only(self):
        with self.captureOnCommitCallbacks(execute=True):
            WorkOrderService.cancel(self.work_order, self.creative)

        self.assertTrue(Notification.objects.filter(user=self.client_user).exists())
        self.assertFalse(Notification.objects.filter(user=self.creative).exists())

    def test_completed_work_order_cannot_be_cancelled(self):
        WorkOrderService.fund_escrow(self.work_order, self.client_user)
        WorkOrderService.start(self.work_order, self.creative)
        delivery = WorkOrderService.submit_delivery(self.work_order, self.creative, 'Done')
        WorkOrderService.approve_delivery(delivery, self.client_user)

        with self.assertRaises(ValidationError):
            WorkOrderService.cancel(self.work_order, self.client_user)


class DirectRequestTestCase(WorkOrderTestMixin, TestCase):

    def setUp(self):
        self.make_users()
        self.project = self.make_project(
            is_direct=True,
            target_creative=self.creative,
            budget_min=Decimal('300.00'),
            budget_max=None
        )

    def test_accept_creates_work_order(self):
        work_order = DirectRequestService.accept_direct_request(self.project, self.creative)

        self.project.refresh_from_db()
        self.assertEqual(self.project.status, Project.ASSIGNED)
        self.assertEqual(work_order.agreed_rate, Decimal('300.00'))
        self.assertEqual(work_order.escrow.total_amount, Decimal('300.00'))
        self.assertEqual(work_order.status, WorkOrder.PENDING)

    def test_only_target_can_accept(self):
        with self.assertRaises(PermissionDenied):
            DirectRequestService.accept_direct_request(self.project, self.outsider)

    def test_accept_twice_rejected(self):
        DirectRequestService.accept_direct_request(self.project, self.creative)

        with self.assertRaises(ValidationError):
            DirectRequestService.accept_direct_request(self.project, self.creative)

    def test_open_project_is_not_a_direct_request(self):
        project = self.make_project()

        with self.assertRaises(ValidationError):
            DirectRequestService.accept_direct_request(project, self.creative)

    def test_decline_cancels_project_and_notifies_client(self):
        with self.captureOnCommitCallbacks(execute=True):
            DirectRequestService.decline_direct_request(self.project, self.creative)

        self.project.refresh_from_db()
        self.assertEqual(self.project.status, Project.CANCELLED)
        self.assertTrue(
            Notification.objects.filter(
                user=self.client_user, type=Notification.Type.WORK_REQUEST
            ).exists()
        )


class LifecycleScenarioTestCase(WorkOrderTestMixin, TestCase):
    """Accept → fund → start → deliver → approve, end to end."""

    def test_full_fixed_price_lifecycle(self):
        self.make_users()
        project = self.make_project()
        creative_b = User.objects.create_creative('b@test.com', 'testpass123')

        app_a = ApplicationService.submit(project, self.creative, 'I can do this well', Decimal('800.00'))
        app_b = ApplicationService.submit(project, creative_b, 'Pick me for this job', Decimal('600.00'))

        work_order = ApplicationService.accept(app_a, self.client_user)

        app_a.refresh_from_db()
        app_b.refresh_from_db()
        project.refresh_from_db()
        self.assertEqual(app_a.status, Application.ACCEPTED)
        self.assertEqual(app_b.status, Application.DECLINED)
        self.assertEqual(project.status, Project.ASSIGNED)
        self.assertEqual(work_order.agreed_rate, Decimal('800.00'))
        self.assertEqual(work_order.escrow.total_amount, Decimal('2000.00'))
        self.assertEqual(work_order.escrow.status, Escrow.PENDING)

        escrow = WorkOrderService.fund_escrow(work_order, self.client_user)
        self.assertEqual(escrow.status, Escrow.FUNDED)
        self.assertEqual(escrow.funded_amount, Decimal('2000.00'))

        work_order = WorkOrderService.start(work_order, self.creative)
        self.assertEqual(work_order.status, WorkOrder.IN_PROGRESS)

        delivery = WorkOrderService.submit_delivery(work_order, self.creative, 'All files')
        work_order.refresh_from_db()
        self.assertEqual(work_order.status, WorkOrder.DELIVERED)

        work_order = WorkOrderService.approve_delivery(delivery, self.client_user)
        escrow.refresh_from_db()
        self.assertEqual(work_order.status, WorkOrder.COMPLETED)
        self.assertEqual(escrow.status, Escrow.RELEASED)
        self.assertEqual(escrow.released_amount, Decimal('2000.00'))

        history = list(
            work_order.state_logs.order_by('created_at').values_list('to_status', flat=True)
        )
        self.assertEqual(
            history,
            [WorkOrder.PENDING, WorkOrder.IN_PROGRESS, WorkOrder.DELIVERED, WorkOrder.COMPLETED]
        )


class WorkOrderAPITestCase(WorkOrderTestMixin, TestCase):
    """HTTP surface for work orders."""

    def setUp(self):
        self.make_users()
        self.api = APIClient()
        self.work_order = self.make_work_order()

    def test_list_requires_auth(self):
        response = self.api.get(reverse('workorders:list'))

        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_list_only_my_work_orders(self):
        self.api.force_authenticate(user=self.creative)
        response = self.api.get(reverse('workorders:list'))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data['results']), 1)
        self.assertEqual(response.data['results'][0]['escrow_status'], Escrow.PENDING)

        self.api.force_authenticate(user=self.outsider)
        response = self.api.get(reverse('workorders:list'))
        self.assertEqual(len(response.data['results']), 0)

    def test_list_status_filter(self):
        self.api.force_authenticate(user=self.client_user)

        response = self.api.get(reverse('workorders:list'), {'status': WorkOrder.COMPLETED})

        self.assertEqual(len(response.data['results']), 0)

    def test_detail_for_participant(self):
        self.api.force_authenticate(user=self.client_user)

        response = self.api.get(reverse('workorders:detail', args=[self.work_order.id]))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['escrow']['status'], Escrow.PENDING)
        self.assertEqual(len(response.data['state_logs']), 1)

    def test_detail_forbidden_for_outsider(self):
        self.api.force_authenticate(user=self.outsider)

        response = self.api.get(reverse('workorders:detail', args=[self.work_order.id]))

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(response.data['code'], 'FORBIDDEN')

    def test_unknown_work_order_is_404(self):
        self.api.force_authenticate(user=self.client_user)

        response = self.api.post(reverse('workorders:fund-escrow', args=[uuid.uuid4()]))

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data['code'], 'NOT_FOUND')

    def test_fund_twice_returns_bad_request(self):
        self.api.force_authenticate(user=self.client_user)
        url = reverse('workorders:fund-escrow', args=[self.work_order.id])

        first = self.api.post(url)
        second = self.api.post(url)

        self.assertEqual(first.status_code, status.HTTP_200_OK)
        self.assertEqual(first.data['status'], Escrow.FUNDED)
        self.assertEqual(second.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(second.data, {'error': 'Escrow already funded', 'code': 'BAD_REQUEST'})

    def test_creative_cannot_fund(self):
        self.api.force_authenticate(user=self.creative)

        response = self.api.post(reverse('workorders:fund-escrow', args=[self.work_order.id]))

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_full_flow_over_http(self):
        self.api.force_authenticate(user=self.client_user)
        self.api.post(reverse('workorders:fund-escrow', args=[self.work_order.id]))

        self.api.force_authenticate(user=self.creative)
        response = self.api.post(reverse('workorders:start', args=[self.work_order.id]))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['status'], WorkOrder.IN_PROGRESS)

        response = self.api.post(
            reverse('workorders:delivery-submit', args=[self.work_order.id]),
            {'message': 'Final files', 'attachments': ['https://files.example.com/final.zip']},
            format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        delivery_id = response.data['id']

        self.api.force_authenticate(user=self.client_user)
        response = self.api.post(reverse('workorders:delivery-approve', args=[delivery_id]))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data, {'success': True})

        self.work_order.refresh_from_db()
        self.assertEqual(self.work_order.status, WorkOrder.COMPLETED)

    def test_request_revision_over_http(self):
        WorkOrderService.fund_escrow(self.work_order, self.client_user)
        WorkOrderService.start(self.work_order, self.creative)
        delivery = WorkOrderService.submit_delivery(self.work_order, self.creative, 'v1')

        self.api.force_authenticate(user=self.client_user)
        response = self.api.post(
            reverse('workorders:delivery-revision', args=[delivery.id]),
            {'revision_note': 'Use the darker palette'},
            format='json'
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data, {'success': True})

    def test_delivery_message_required(self):
        WorkOrderService.fund_escrow(self.work_order, self.client_user)
        WorkOrderService.start(self.work_order, self.creative)
        self.api.force_authenticate(user=self.creative)

        response = self.api.post(
            reverse('workorders:delivery-submit', args=[self.work_order.id]),
            {'attachments': []},
            format='json'
        )

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('message', response.data)

    def test_milestone_endpoints(self):
        self.api.force_authenticate(user=self.creative)
        url = reverse('workorders:milestone-add', args=[self.work_order.id])

        first = self.api.post(url, {'title': 'Concepts', 'amount': '500.00'}, format='json')
        second = self.api.post(url, {'title': 'Final', 'amount': '1500.00'}, format='json')
        self.assertEqual(first.status_code, status.HTTP_201_CREATED)
        self.assertEqual(second.data['order'], 1)

        response = self.api.post(
            reverse('workorders:milestone-reorder', args=[self.work_order.id]),
            {'milestone_ids': [second.data['id'], first.data['id']]},
            format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([m['title'] for m in response.data], ['Final', 'Concepts'])

        self.api.force_authenticate(user=self.client_user)
        response = self.api.patch(
            reverse('workorders:milestone-update', args=[first.data['id']]),
            {'amount': '650.00'},
            format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(Decimal(response.data['amount']), Decimal('650.00'))

    def test_cancel_over_http(self):
        self.api.force_authenticate(user=self.creative)

        response = self.api.post(
            reverse('workorders:cancel', args=[self.work_order.id]),
            {'reason': 'Schedule conflict'},
            format='json'
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data, {'success': True})
        log = self.work_order.state_logs.filter(to_status=WorkOrder.CANCELLED).get()
        self.assertEqual(log.reason, 'Schedule conflict')

    def test_decline_direct_request_returns_project(self):
        project = self.make_project(is_direct=True, target_creative=self.creative)
        self.api.force_authenticate(user=self.creative)

        response = self.api.post(reverse('workorders:direct-decline', args=[project.id]))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['id'], str(project.id))
        self.assertEqual(response.data['status'], Project.CANCELLED)

    def test_direct_request_endpoints(self):
        project = self.make_project(is_direct=True, target_creative=self.creative)
        self.api.force_authenticate(user=self.creative)

        response = self.api.post(reverse('workorders:direct-accept', args=[project.id]))

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['status'], WorkOrder.PENDING)
        self.assertEqual(Decimal(response.data['escrow']['total_amount']), Decimal('2000.00'))

        response = self.api.post(reverse('workorders:direct-decline', args=[project.id]))
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
