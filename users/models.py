from django.contrib.auth.models import AbstractUser
from django.db import models
from core.constants import UserRole


class User(AbstractUser):
    """Custom User model - staff operating the equipment registry"""

    role = models.CharField(max_length=20, choices=UserRole.CHOICES, default=UserRole.USER)
    full_name = models.CharField(max_length=150, blank=True)
    department = models.CharField(max_length=100, blank=True)
    phone = models.CharField(max_length=15, blank=True)

    class Meta:
        verbose_name = "User"
        verbose_name_plural = "Users"

    def __str__(self):
        return f"{self.username} ({self.get_role_display()})"

    @property
    def display_name(self):
        """Name shown in audit history: full name, then email, then username"""
        return self.full_name or self.get_full_name() or self.email or self.username
