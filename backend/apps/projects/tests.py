"""
Tests for project postings.
"""
from decimal import Decimal
from django.core.exceptions import ValidationError, PermissionDenied
from django.test import TestCase
from django.urls import reverse
from rest_framework.test import APIClient
from rest_framework import status
from apps.accounts.models import User
from apps.notifications.models import Notification
from apps.projects.models import Project
from apps.projects.services.project_service import ProjectService


class ProjectServiceTestCase(TestCase):

    def setUp(self):
        self.client_user = User.objects.create_client('client@test.com', 'testpass123')
        self.creative = User.objects.create_creative('creative@test.com', 'testpass123')

    def create(self, **kwargs):
        defaults = dict(
            client=self.client_user,
            title='Motion graphics',
            description='A 30 second explainer animation',
            budget_min=Decimal('400.00'),
            budget_max=Decimal('900.00')
        )
        defaults.update(kwargs)
        return ProjectService.create_project(**defaults)

    def test_create_open_project(self):
        project = self.create()

        self.assertEqual(project.status, Project.OPEN)
        self.assertFalse(project.is_direct)
        self.assertIsNone(project.target_creative)

    def test_creative_cannot_post(self):
        with self.assertRaises(PermissionDenied):
            self.create(client=self.creative)

    def test_direct_request_needs_target(self):
        with self.assertRaises(ValidationError):
            self.create(is_direct=True)

    def test_direct_request_target_must_be_creative(self):
        other_client = User.objects.create_client('other@test.com', 'testpass123')

        with self.assertRaises(ValidationError):
            self.create(is_direct=True, target_creative=other_client)

    def test_budget_range_checked(self):
        with self.assertRaises(ValidationError):
            self.create(budget_min=Decimal('1000.00'), budget_max=Decimal('10.00'))

    def test_direct_request_notifies_target(self):
        with self.captureOnCommitCallbacks(execute=True):
            project = self.create(is_direct=True, target_creative=self.creative)

        notification = Notification.objects.get(user=self.creative)
        self.assertEqual(notification.type, Notification.Type.WORK_REQUEST)
        self.assertEqual(notification.entity_id, project.id)
        self.assertEqual(notification.entity_type, Notification.EntityType.PROJECT)

    def test_cancel_open_project(self):
        project = self.create()

        cancelled = ProjectService.cancel_project(project, self.client_user)

        self.assertEqual(cancelled.status, Project.CANCELLED)

    def test_cannot_cancel_assigned_project(self):
        project = self.create()
        Project.objects.filter(id=project.id).update(status=Project.ASSIGNED)

        with self.assertRaises(ValidationError):
            ProjectService.cancel_project(project, self.client_user)

    def test_open_projects_exclude_direct_and_closed(self):
        visible = self.create()
        self.create(is_direct=True, target_creative=self.creative)
        closed = self.create()
        ProjectService.cancel_project(closed, self.client_user)

        self.assertEqual(list(ProjectService.get_open_projects()), [visible])


class ProjectAPITestCase(TestCase):

    def setUp(self):
        self.api = APIClient()
        self.client_user = User.objects.create_client('client@test.com', 'testpass123')
        self.creative = User.objects.create_creative('creative@test.com', 'testpass123')

    def test_client_posts_project(self):
        self.api.force_authenticate(user=self.client_user)

        response = self.api.post(reverse('projects:list-create'), {
            'title': 'Album cover',
            'description': 'Artwork for a debut album',
            'budget_type': Project.FIXED,
            'budget_min': '200.00',
            'budget_max': '600.00'
        }, format='json')

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['status'], Project.OPEN)

    def test_creative_cannot_post(self):
        self.api.force_authenticate(user=self.creative)

        response = self.api.post(reverse('projects:list-create'), {
            'title': 'Album cover',
            'description': 'Artwork for a debut album'
        }, format='json')

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_direct_request_over_http(self):
        self.api.force_authenticate(user=self.client_user)

        response = self.api.post(reverse('projects:list-create'), {
            'title': 'Portrait',
            'description': 'A commissioned portrait',
            'is_direct': True,
            'target_creative_id': str(self.creative.id)
        }, format='json')

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['target_creative'], self.creative.id)

    def test_list_open_gigs(self):
        Project.objects.create(client=self.client_user, title='Open gig', description='Visible on the board')
        Project.objects.create(
            client=self.client_user, title='Direct', description='Hidden from the board',
            is_direct=True, target_creative=self.creative
        )
        self.api.force_authenticate(user=self.creative)

        response = self.api.get(reverse('projects:list-create'))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([p['title'] for p in response.data['results']], ['Open gig'])

    def test_cancel_by_non_owner_forbidden(self):
        project = Project.objects.create(client=self.client_user, title='Gig', description='Something')
        self.api.force_authenticate(user=self.creative)

        response = self.api.post(reverse('projects:cancel', args=[project.id]))

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
