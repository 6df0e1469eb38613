"""
Identity service layer.

Resolves user ids into a tagged role variant for the chat coordinator and
notification fan-out. Callers branch on the variant type (Customer or Admin)
instead of inspecting flags on the User model.

Services:
    IdentityService: user id -> Customer | Admin

Usage:
    from authentication.services import Admin, Customer, IdentityService

    identity = IdentityService.get_user(user_id)
    match identity:
        case Admin():
            ...
        case Customer():
            ...

    customer = IdentityService.require_customer(user_id)
"""

from __future__ import annotations

from dataclasses import dataclass

from core.exceptions import AccessDeniedError, NotFoundError
from core.services import BaseService

from authentication.models import User, UserRole


@dataclass(frozen=True)
class Customer:
    """A user who opens support chats."""

    id: int
    display_name: str
    active: bool = True


@dataclass(frozen=True)
class Admin:
    """A support agent who can be assigned to chat rooms."""

    id: int
    display_name: str
    active: bool = True


Identity = Customer | Admin


class IdentityService(BaseService):
    """
    Read-only view of the user store.

    Methods:
        get_user: Resolve any user to its role variant
        require_customer: Resolve and insist on an active customer
        require_admin: Resolve and insist on an active admin
        display_name_for: Human-readable name for denormalized records
    """

    @classmethod
    def _to_identity(cls, user: User) -> Identity:
        name = user.get_short_name()
        if user.role == UserRole.ADMIN:
            return Admin(id=user.id, display_name=name, active=user.is_active)
        return Customer(id=user.id, display_name=name, active=user.is_active)

    @classmethod
    def get_user(cls, user_id: int) -> Identity:
        """
        Resolve a user id to Customer or Admin.

        Raises:
            NotFoundError: No user with this id
        """
        try:
            user = User.objects.get(id=user_id)
        except User.DoesNotExist:
            raise NotFoundError(
                f"User {user_id} not found",
                error_code="USER_NOT_FOUND",
                details={"user_id": user_id},
            )
        return cls._to_identity(user)

    @classmethod
    def require_customer(cls, user_id: int) -> Customer:
        """
        Resolve a user id that must belong to an active customer.

        Raises:
            NotFoundError: No user with this id
            AccessDeniedError: User is an admin or is deactivated
        """
        identity = cls.get_user(user_id)
        if not isinstance(identity, Customer):
            raise AccessDeniedError(
                "Only customers can perform this action",
                error_code="CUSTOMER_REQUIRED",
                details={"user_id": user_id},
            )
        cls._require_active(identity)
        return identity

    @classmethod
    def require_admin(cls, user_id: int) -> Admin:
        """
        Resolve a user id that must belong to an active support admin.

        Raises:
            NotFoundError: No user with this id
            AccessDeniedError: User is a customer or is deactivated
        """
        identity = cls.get_user(user_id)
        if not isinstance(identity, Admin):
            raise AccessDeniedError(
                "Only support admins can perform this action",
                error_code="ADMIN_REQUIRED",
                details={"user_id": user_id},
            )
        cls._require_active(identity)
        return identity

    @classmethod
    def display_name_for(cls, user_id: int | None) -> str:
        """Name used when denormalizing a user into a record; "" if unknown."""
        if user_id is None:
            return ""
        user = User.objects.filter(id=user_id).first()
        return user.get_short_name() if user else ""

    @classmethod
    def _require_active(cls, identity: Identity) -> None:
        if not identity.active:
            cls.get_logger().warning(f"Deactivated user {identity.id} attempted a chat action")
            raise AccessDeniedError(
                "This account is deactivated",
                error_code="ACCOUNT_INACTIVE",
                details={"user_id": identity.id},
            )
