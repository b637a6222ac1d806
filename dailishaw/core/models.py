from django.contrib.auth.models import AbstractUser, UserManager
from django.db import models


class Role(models.TextChoices):
    """The two consoles a user can be admitted to"""
    ADMIN = 'admin', 'Admin'
    USER = 'user', 'User'


class DailishawUserManager(UserManager):
    def create_superuser(self, username, email=None, password=None, **extra_fields):
        extra_fields.setdefault('role', Role.ADMIN)
        return super().create_superuser(username, email, password, **extra_fields)


class User(AbstractUser):
    """Login identity and profile in one row.

    For field users ``username`` is the user id handed out by the admin.
    """
    role = models.CharField(max_length=10, choices=Role.choices, default=Role.USER, db_index=True)
    display_name = models.CharField(max_length=150, blank=True)
    # Kept so admins can re-share credentials with field users
    shared_password = models.CharField(max_length=128, blank=True)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = DailishawUserManager()

    @property
    def is_admin(self):
        return self.role == Role.ADMIN

    @property
    def dashboard_path(self):
        return '/dashboard' if self.is_admin else '/user-dashboard'

    def __str__(self):
        return self.display_name or self.username

    class Meta:
        db_table = 'profiles'
        ordering = ['-created_at']
