from django.urls import reverse
from rest_framework.test import APITestCase
from rest_framework import status
from apps.accounts.models import User


class TestUserRoles(APITestCase):

    def test_create_client_sets_role(self):
        user = User.objects.create_client("client@test.com", "StrongPass123!")

        self.assertTrue(user.is_client)
        self.assertFalse(user.is_creative)

    def test_create_creative_sets_role(self):
        user = User.objects.create_creative("creative@test.com", "StrongPass123!")

        self.assertTrue(user.is_creative)
        self.assertFalse(user.is_client)

    def test_superuser_is_admin(self):
        user = User.objects.create_superuser("admin@test.com", "StrongPass123!")

        self.assertEqual(user.role, User.Role.ADMIN)
        self.assertTrue(user.is_staff)

    def test_email_required(self):
        with self.assertRaises(ValueError):
            User.objects.create_user("", "StrongPass123!")


class TestTokenAuth(APITestCase):

    def setUp(self):
        self.token_url = reverse("token-obtain")
        User.objects.create_client("client@test.com", "StrongPass123!")

    def test_obtain_token(self):
        response = self.client.post(
            self.token_url,
            {"email": "client@test.com", "password": "StrongPass123!"},
            format="json"
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIn("access", response.data)
        self.assertIn("refresh", response.data)

    def test_wrong_password_rejected(self):
        response = self.client.post(
            self.token_url,
            {"email": "client@test.com", "password": "nope"},
            format="json"
        )

        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_bearer_token_authenticates(self):
        response = self.client.post(
            self.token_url,
            {"email": "client@test.com", "password": "StrongPass123!"},
            format="json"
        )
        self.client.credentials(HTTP_AUTHORIZATION=f"Bearer {response.data['access']}")

        response = self.client.get(reverse("notifications:unread-count"))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
