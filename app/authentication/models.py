"""
Authentication models.

This module defines the identity record consumed by the chat and
notification apps:
- UserRole: customer/admin role choices
- User: Custom user model with email-based authentication and a role

Related files:
    - managers.py: Custom user manager for email-based creation
    - services.py: IdentityService (user id -> Customer | Admin)

Security:
    - User passwords hashed with Django's PBKDF2
    - ``role`` is the support role; ``is_staff`` only controls Django admin access
"""

from django.contrib.auth.models import AbstractBaseUser, PermissionsMixin
from django.db import models

from authentication.managers import UserManager


class UserRole(models.TextChoices):
    """
    Support role of a user.

    CUSTOMER: Opens chat rooms and talks to support
    ADMIN: Picks up waiting rooms and answers customers
    """

    CUSTOMER = "customer", "Customer"
    ADMIN = "admin", "Admin"


class User(AbstractBaseUser, PermissionsMixin):
    """
    Custom User model using email as the primary identifier.

    Fields:
        email: Primary identifier, unique, used for login
        display_name: Name shown to the other party in chat and notifications
        role: Support role (customer or admin)
        is_active: Whether the user account is active
        is_staff: Whether the user can access Django admin
        date_joined: When the user account was created
        updated_at: When the user record was last modified

    Usage:
        customer = User.objects.create_user(
            email="customer@example.com",
            password="securepassword",
        )

        agent = User.objects.create_user(
            email="agent@example.com",
            password="securepassword",
            role=UserRole.ADMIN,
        )
    """

    email = models.EmailField(
        unique=True,
        db_index=True,
        max_length=254,
        help_text="User's email address (primary identifier)",
    )

    display_name = models.CharField(
        max_length=150,
        blank=True,
        default="",
        help_text="Name shown to other users; falls back to the email local part",
    )

    role = models.CharField(
        max_length=20,
        choices=UserRole.choices,
        default=UserRole.CUSTOMER,
        db_index=True,
        help_text="Support role used by the chat coordinator",
    )

    # Account status flags
    is_active = models.BooleanField(
        default=True,
        help_text="Whether this user account is active. Deselect instead of deleting.",
    )
    is_staff = models.BooleanField(
        default=False,
        help_text="Whether the user can access the admin site.",
    )

    # Timestamps
    date_joined = models.DateTimeField(
        auto_now_add=True,
        help_text="When the user account was created",
    )
    updated_at = models.DateTimeField(
        auto_now=True,
        help_text="When the user record was last modified",
    )

    USERNAME_FIELD = "email"
    REQUIRED_FIELDS = []

    objects = UserManager()

    class Meta:
        verbose_name = "user"
        verbose_name_plural = "users"
        ordering = ["-date_joined"]

    def __str__(self):
        return self.email

    def get_full_name(self):
        return self.display_name or self.email

    def get_short_name(self):
        return self.display_name or self.email.split("@")[0]

    @property
    def is_support_admin(self) -> bool:
        """Whether this user answers support chats."""
        return self.role == UserRole.ADMIN

    @property
    def is_customer(self) -> bool:
        return self.role == UserRole.CUSTOMER
