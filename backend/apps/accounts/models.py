import uuid
from django.db import models
from django.contrib.auth.models import AbstractBaseUser, PermissionsMixin
from django.utils import timezone
from .managers import UserManager


# ============================
# User Model
# ============================

class User(AbstractBaseUser, PermissionsMixin):
    """
    Custom user model with email-based authentication.
    The role decides which side of a gig the user can act on.
    """

    class Role(models.TextChoices):
        CLIENT = "CLIENT", "Client"
        CREATIVE = "CREATIVE", "Creative"
        ADMIN = "ADMIN", "Admin"

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    # Core fields
    email = models.EmailField(unique=True, db_index=True)
    role = models.CharField(max_length=20, choices=Role.choices, default=Role.CREATIVE, db_index=True)

    # Account status
    is_active = models.BooleanField(default=True)
    is_staff = models.BooleanField(default=False)

    # Timestamps
    date_joined = models.DateTimeField(default=timezone.now)
    updated_at = models.DateTimeField(auto_now=True)

    USERNAME_FIELD = "email"
    REQUIRED_FIELDS = []

    objects = UserManager()

    def __str__(self):
        return self.email

    @property
    def is_client(self):
        return self.role == self.Role.CLIENT

    @property
    def is_creative(self):
        return self.role == self.Role.CREATIVE


# ============================
# Profile
# ============================

class Profile(models.Model):
    """
    Public-facing profile shown next to applications and work orders.
    """

    user = models.OneToOneField(User, on_delete=models.CASCADE, related_name="profile")

    username = models.CharField(max_length=30, unique=True, db_index=True)
    display_name = models.CharField(max_length=50)
    headline = models.CharField(max_length=280, blank=True)
    avatar_url = models.URLField(blank=True)

    # Creatives advertise a rate band; clients leave it empty
    hourly_rate_min = models.DecimalField(max_digits=10, decimal_places=2, null=True, blank=True)
    hourly_rate_max = models.DecimalField(max_digits=10, decimal_places=2, null=True, blank=True)

    # Timestamps
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return self.username
