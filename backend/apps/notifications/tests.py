"""
Tests for notifications.
"""
from unittest import mock
from django.db import transaction
from django.test import TestCase
from django.urls import reverse
from rest_framework.test import APIClient
from rest_framework import status
from apps.accounts.models import User
from apps.notifications.models import Notification
from apps.notifications.services.notification_service import NotificationService


class NotificationServiceTestCase(TestCase):

    def setUp(self):
        self.client_user = User.objects.create_client('client@test.com', 'testpass123')
        self.creative = User.objects.create_creative('creative@test.com', 'testpass123')

    def notify(self, recipient=None, actor=None):
        NotificationService.notify(
            Notification.Type.DELIVERY,
            recipient=recipient or self.client_user,
            actor=actor or self.creative
        )

    def test_written_after_commit(self):
        with self.captureOnCommitCallbacks(execute=False) as callbacks:
            self.notify()

        self.assertEqual(len(callbacks), 1)
        self.assertFalse(Notification.objects.exists())

        callbacks[0]()
        self.assertEqual(Notification.objects.count(), 1)

    def test_not_written_on_rollback(self):
        with self.captureOnCommitCallbacks(execute=True):
            try:
                with transaction.atomic():
                    self.notify()
                    raise RuntimeError("business action failed")
            except RuntimeError:
                pass

        self.assertFalse(Notification.objects.exists())

    def test_self_notification_suppressed(self):
        with self.captureOnCommitCallbacks(execute=True) as callbacks:
            self.notify(recipient=self.creative, actor=self.creative)

        self.assertEqual(callbacks, [])
        self.assertFalse(Notification.objects.exists())

    def test_failure_is_swallowed_and_logged(self):
        with mock.patch.object(Notification.objects, 'create', side_effect=RuntimeError("db down")):
            with self.assertLogs('apps.notifications.services.notification_service', level='ERROR'):
                with self.captureOnCommitCallbacks(execute=True):
                    self.notify()

        self.assertFalse(Notification.objects.exists())

    def test_unread_count_and_mark_read(self):
        with self.captureOnCommitCallbacks(execute=True):
            self.notify()
            self.notify()

        self.assertEqual(NotificationService.unread_count(self.client_user), 2)

        first = Notification.objects.filter(user=self.client_user).first()
        NotificationService.mark_as_read(self.client_user, first.id)
        self.assertEqual(NotificationService.unread_count(self.client_user), 1)

        NotificationService.mark_all_as_read(self.client_user)
        self.assertEqual(NotificationService.unread_count(self.client_user), 0)

    def test_cannot_mark_someone_elses_notification(self):
        with self.captureOnCommitCallbacks(execute=True):
            self.notify()

        notification = Notification.objects.get()
        updated = NotificationService.mark_as_read(self.creative, notification.id)

        notification.refresh_from_db()
        self.assertEqual(updated, 0)
        self.assertFalse(notification.read)


class NotificationAPITestCase(TestCase):

    def setUp(self):
        self.api = APIClient()
        self.client_user = User.objects.create_client('client@test.com', 'testpass123')
        self.creative = User.objects.create_creative('creative@test.com', 'testpass123')
        self.notification = Notification.objects.create(
            type=Notification.Type.APPLICATION,
            user=self.client_user,
            actor=self.creative
        )
        self.api.force_authenticate(user=self.client_user)

    def test_list(self):
        response = self.api.get(reverse('notifications:list'))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data['results']), 1)
        self.assertEqual(response.data['results'][0]['type'], Notification.Type.APPLICATION)

    def test_unread_count(self):
        response = self.api.get(reverse('notifications:unread-count'))

        self.assertEqual(response.data, {'count': 1})

    def test_mark_read(self):
        response = self.api.post(reverse('notifications:read', args=[self.notification.id]))

        self.notification.refresh_from_db()
        self.assertEqual(response.data, {'success': True})
        self.assertTrue(self.notification.read)

    def test_mark_all_read(self):
        self.api.post(reverse('notifications:read-all'))

        response = self.api.get(reverse('notifications:unread-count'))
        self.assertEqual(response.data, {'count': 0})

    def test_other_user_sees_nothing(self):
        self.api.force_authenticate(user=self.creative)

        response = self.api.get(reverse('notifications:list'))

        self.assertEqual(len(response.data['results']), 0)
