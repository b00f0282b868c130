"""
Tests for the application engine.
"""
from decimal import Decimal
from unittest import mock
from django.core.exceptions import ValidationError, PermissionDenied
from django.db import IntegrityError, transaction
from django.test import TestCase
from django.urls import reverse
from rest_framework.test import APIClient
from rest_framework import status
from apps.accounts.models import User
from apps.applications.models import Application
from apps.applications.services.application_service import ApplicationService
from apps.notifications.models import Notification
from apps.projects.models import Project
from apps.workorders.models import WorkOrder, Escrow
from apps.workorders.services.escrow_service import EscrowService
from common.exceptions import Conflict


class ApplicationServiceTestCase(TestCase):

    def setUp(self):
        self.client_user = User.objects.create_client('client@test.com', 'testpass123')
        self.creative_a = User.objects.create_creative('a@test.com', 'testpass123')
        self.creative_b = User.objects.create_creative('b@test.com', 'testpass123')
        self.project = Project.objects.create(
            client=self.client_user,
            title='Landing page',
            description='Design a landing page for our launch',
            budget_type=Project.FIXED,
            budget_min=Decimal('500.00'),
            budget_max=Decimal('2000.00')
        )

    def apply(self, creative, rate=None):
        return ApplicationService.submit(
            self.project, creative, 'I have shipped dozens of these', proposed_rate=rate
        )

    def test_submit_creates_pending(self):
        application = self.apply(self.creative_a, Decimal('800.00'))

        self.assertEqual(application.status, Application.PENDING)
        self.assertEqual(application.proposed_rate, Decimal('800.00'))

    def test_submit_notifies_client(self):
        with self.captureOnCommitCallbacks(execute=True):
            self.apply(self.creative_a)

        notification = Notification.objects.get(user=self.client_user)
        self.assertEqual(notification.type, Notification.Type.APPLICATION)
        self.assertEqual(notification.actor, self.creative_a)
        self.assertEqual(notification.entity_id, self.project.id)

    def test_client_cannot_apply(self):
        with self.assertRaises(PermissionDenied):
            ApplicationService.submit(self.project, self.client_user, 'Let me do it myself')

    def test_cannot_apply_twice(self):
        self.apply(self.creative_a)

        with self.assertRaises(Conflict):
            self.apply(self.creative_a)

    def test_cannot_apply_to_closed_project(self):
        self.project.status = Project.CANCELLED
        self.project.save()

        with self.assertRaises(ValidationError):
            self.apply(self.creative_a)

    def test_cannot_apply_to_direct_request(self):
        self.project.is_direct = True
        self.project.target_creative = self.creative_b
        self.project.save()

        with self.assertRaises(ValidationError):
            self.apply(self.creative_a)

    def test_accept_scenario(self):
        app_a = self.apply(self.creative_a, Decimal('800.00'))
        app_b = self.apply(self.creative_b, Decimal('600.00'))

        work_order = ApplicationService.accept(app_a, self.client_user)

        app_a.refresh_from_db()
        app_b.refresh_from_db()
        self.project.refresh_from_db()
        escrow = Escrow.objects.get(work_order=work_order)
        self.assertEqual(app_a.status, Application.ACCEPTED)
        self.assertEqual(app_b.status, Application.DECLINED)
        self.assertEqual(self.project.status, Project.ASSIGNED)
        self.assertEqual(work_order.status, WorkOrder.PENDING)
        self.assertEqual(work_order.creative, self.creative_a)
        self.assertEqual(work_order.client, self.client_user)
        self.assertEqual(work_order.agreed_rate, Decimal('800.00'))
        self.assertEqual(work_order.agreed_budget_type, Project.FIXED)
        self.assertEqual(escrow.total_amount, Decimal('2000.00'))
        self.assertEqual(escrow.status, Escrow.PENDING)

    def test_accept_without_rate_uses_budget_min(self):
        application = self.apply(self.creative_a)

        work_order = ApplicationService.accept(application, self.client_user)

        self.assertEqual(work_order.agreed_rate, Decimal('500.00'))

    def test_second_accept_on_sibling_fails(self):
        app_a = self.apply(self.creative_a)
        app_b = self.apply(self.creative_b)

        ApplicationService.accept(app_a, self.client_user)

        with self.assertRaises(ValidationError):
            ApplicationService.accept(app_b, self.client_user)

        self.assertEqual(WorkOrder.objects.filter(project=self.project).count(), 1)
        self.assertEqual(
            Application.objects.filter(project=self.project, status=Application.ACCEPTED).count(), 1
        )

    def test_submit_rechecks_project_after_accept(self):
        stale_project = Project.objects.get(id=self.project.id)
        application = self.apply(self.creative_a)
        ApplicationService.accept(application, self.client_user)

        with self.assertRaises(ValidationError):
            ApplicationService.submit(stale_project, self.creative_b, 'Still hoping to join')

        self.assertFalse(
            Application.objects.filter(project=self.project, creative=self.creative_b).exists()
        )

    def test_accept_rolls_back_when_escrow_fails(self):
        app_a = self.apply(self.creative_a)
        app_b = self.apply(self.creative_b)

        with mock.patch.object(EscrowService, 'create_escrow', side_effect=RuntimeError("ledger down")):
            with self.assertRaises(RuntimeError):
                ApplicationService.accept(app_a, self.client_user)

        app_a.refresh_from_db()
        app_b.refresh_from_db()
        self.project.refresh_from_db()
        self.assertEqual(app_a.status, Application.PENDING)
        self.assertEqual(app_b.status, Application.PENDING)
        self.assertEqual(self.project.status, Project.OPEN)
        self.assertFalse(WorkOrder.objects.filter(project=self.project).exists())

    def test_accept_requires_owner(self):
        other_client = User.objects.create_client('other@test.com', 'testpass123')
        application = self.apply(self.creative_a)

        with self.assertRaises(PermissionDenied):
            ApplicationService.accept(application, other_client)

        application.refresh_from_db()
        self.assertEqual(application.status, Application.PENDING)

    def test_accept_notifies_creative(self):
        application = self.apply(self.creative_a)

        with self.captureOnCommitCallbacks(execute=True):
            work_order = ApplicationService.accept(application, self.client_user)

        notification = Notification.objects.get(user=self.creative_a)
        self.assertEqual(notification.type, Notification.Type.WORK_ORDER_UPDATE)
        self.assertEqual(notification.entity_id, work_order.id)

    def test_decline(self):
        application = self.apply(self.creative_a)

        declined = ApplicationService.decline(application, self.client_user)

        self.assertEqual(declined.status, Application.DECLINED)
        with self.assertRaises(ValidationError):
            ApplicationService.decline(application, self.client_user)

    def test_declined_application_cannot_be_accepted(self):
        application = self.apply(self.creative_a)
        ApplicationService.decline(application, self.client_user)

        with self.assertRaises(ValidationError):
            ApplicationService.accept(application, self.client_user)

    def test_get_for_project_owner_only(self):
        self.apply(self.creative_a)
        self.apply(self.creative_b)

        self.assertEqual(ApplicationService.get_for_project(self.project, self.client_user).count(), 2)
        with self.assertRaises(PermissionDenied):
            ApplicationService.get_for_project(self.project, self.creative_a)

    def test_database_allows_one_accepted_per_project(self):
        app_a = self.apply(self.creative_a)
        app_b = self.apply(self.creative_b)
        Application.objects.filter(id=app_a.id).update(status=Application.ACCEPTED)

        with self.assertRaises(IntegrityError):
            with transaction.atomic():
                Application.objects.filter(id=app_b.id).update(status=Application.ACCEPTED)


class ApplicationAPITestCase(TestCase):

    def setUp(self):
        self.api = APIClient()
        self.client_user = User.objects.create_client('client@test.com', 'testpass123')
        self.creative = User.objects.create_creative('creative@test.com', 'testpass123')
        self.project = Project.objects.create(
            client=self.client_user,
            title='Podcast artwork',
            description='Cover art for a weekly podcast',
            budget_min=Decimal('100.00'),
            budget_max=Decimal('300.00')
        )

    def submit(self, **overrides):
        payload = {
            'project_id': str(self.project.id),
            'cover_letter': 'Here is my portfolio and plan',
            'proposed_rate': '250.00',
        }
        payload.update(overrides)
        return self.api.post(reverse('applications:submit'), payload, format='json')

    def test_submit(self):
        self.api.force_authenticate(user=self.creative)

        response = self.submit()

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['status'], Application.PENDING)

    def test_duplicate_submit_is_conflict(self):
        self.api.force_authenticate(user=self.creative)
        self.submit()

        response = self.submit()

        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(response.data['code'], 'CONFLICT')

    def test_client_cannot_submit(self):
        self.api.force_authenticate(user=self.client_user)

        response = self.submit()

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(response.data['code'], 'FORBIDDEN')

    def test_unknown_project_is_not_found(self):
        self.api.force_authenticate(user=self.creative)

        response = self.submit(project_id='00000000-0000-0000-0000-000000000000')

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data['code'], 'NOT_FOUND')

    def test_closed_project_is_bad_request(self):
        self.project.status = Project.ASSIGNED
        self.project.save()
        self.api.force_authenticate(user=self.creative)

        response = self.submit()

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['code'], 'BAD_REQUEST')

    def test_short_cover_letter_rejected(self):
        self.api.force_authenticate(user=self.creative)

        response = self.submit(cover_letter='hi')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('cover_letter', response.data)

    def test_mine_lists_own_applications(self):
        self.api.force_authenticate(user=self.creative)
        self.submit()

        response = self.api.get(reverse('applications:mine'))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data['results']), 1)
        self.assertEqual(response.data['results'][0]['project']['id'], str(self.project.id))

    def test_project_applications_for_owner(self):
        self.api.force_authenticate(user=self.creative)
        self.submit()

        self.api.force_authenticate(user=self.client_user)
        response = self.api.get(reverse('applications:for-project', args=[self.project.id]))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data), 1)

    def test_accept_returns_work_order(self):
        self.api.force_authenticate(user=self.creative)
        application_id = self.submit().data['id']

        self.api.force_authenticate(user=self.client_user)
        response = self.api.post(reverse('applications:accept', args=[application_id]))

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['status'], WorkOrder.PENDING)
        self.assertEqual(Decimal(response.data['agreed_rate']), Decimal('250.00'))
        self.assertEqual(Decimal(response.data['escrow']['total_amount']), Decimal('300.00'))

    def test_decline_over_http(self):
        self.api.force_authenticate(user=self.creative)
        application_id = self.submit().data['id']

        self.api.force_authenticate(user=self.client_user)
        response = self.api.post(reverse('applications:decline', args=[application_id]))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['status'], Application.DECLINED)
