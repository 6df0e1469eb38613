"""
Base exception classes for application-wide error handling.

Every deterministic, input-derived failure raised by the service layer is a
subclass of BaseApplicationError. Each kind carries a stable machine-readable
error code so HTTP and WebSocket clients can branch without matching on
message text.

Exception Hierarchy:
    BaseApplicationError (base)
    ├── ValidationError - Malformed input (blank content, bad page size)
    ├── NotFoundError - Referenced room, user or notification does not exist
    ├── PermissionDeniedError - Authorization failures
    │   └── AccessDeniedError - Requester is not a participant / lacks role
    ├── InvalidStateError - Operation forbidden in the room's current state
    └── ConflictError - Customer already has an open room

Propagation:
    None of these are retried internally. They propagate to the adapter
    (DRF view or Channels consumer), which renders them through
    core.exception_handler or an "error" frame.

Usage:
    from core.exceptions import NotFoundError, InvalidStateError

    raise NotFoundError(
        f"Chat room {room_id} not found",
        error_code="ROOM_NOT_FOUND",
        details={"room_id": room_id},
    )

    try:
        ...
    except BaseApplicationError as e:
        return Response(e.to_dict(), status=e.status_code)
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from typing import Any


class BaseApplicationError(Exception):
    """
    Base exception for all application-specific errors.

    Attributes:
        message: Human-readable error description
        error_code: Machine-readable code for client-side handling
        details: Additional error context (ids, current state, etc.)
        status_code: HTTP status the API layer renders this error with
    """

    default_error_code: str = "APPLICATION_ERROR"
    status_code: int = 400

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        self.message = message
        self.error_code = error_code or self.default_error_code
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        """
        Convert exception to dictionary for API response.

        Returns:
            Dict with error, error_code, and (when present) details keys

        Example:
            {
                "error": "Chat room 12 is closed",
                "error_code": "ROOM_CLOSED",
                "details": {"room_id": 12, "status": "CLOSED"}
            }
        """
        result: dict[str, Any] = {
            "error": self.message,
            "error_code": self.error_code,
        }
        if self.details:
            result["details"] = self.details
        return result

    def __str__(self) -> str:
        return f"[{self.error_code}] {self.message}"

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"error_code={self.error_code!r}, "
            f"details={self.details!r})"
        )


class ValidationError(BaseApplicationError):
    """
    Raised when service-layer input validation fails.

    For request body validation, use DRF serializers. Use this for rules
    the service enforces regardless of the calling adapter (for example a
    message sent over WebSocket with blank content).
    """

    default_error_code: str = "VALIDATION_ERROR"
    status_code: int = 400


class NotFoundError(BaseApplicationError):
    """
    Raised when a referenced room, user, or notification does not exist.

    Always surfaced to the caller; never retried.
    """

    default_error_code: str = "NOT_FOUND"
    status_code: int = 404


class PermissionDeniedError(BaseApplicationError):
    """
    Raised when user lacks permission for an operation.

    For authentication failures (missing/invalid token), use DRF's
    AuthenticationFailed. Use this for authorization failures.
    """

    default_error_code: str = "PERMISSION_DENIED"
    status_code: int = 403


class AccessDeniedError(PermissionDeniedError):
    """
    Raised when the requester is not a participant of a room.

    Also used when the caller's role (customer/admin) does not allow the
    operation, and when a user touches a notification they do not own.

    Example:
        if not RoomRegistry.has_access(room_id, user_id):
            raise AccessDeniedError(
                "You are not a participant in this chat room",
                error_code="NOT_PARTICIPANT",
                details={"room_id": room_id},
            )
    """

    default_error_code: str = "ACCESS_DENIED"


class InvalidStateError(BaseApplicationError):
    """
    Raised when an operation is attempted against a room whose state forbids it.

    Examples:
        - Sending a message into a WAITING or CLOSED room
        - Assigning an admin to a CLOSED room

    Note:
        Rendered as HTTP 422 so clients can tell it apart from input errors.
    """

    default_error_code: str = "INVALID_STATE"
    status_code: int = 422


class ConflictError(BaseApplicationError):
    """
    Raised when an operation conflicts with existing resources.

    The main case is a customer requesting a new chat room while one is
    still WAITING or ACTIVE; the caller is expected to reuse that room,
    whose id is included in details.
    """

    default_error_code: str = "CONFLICT"
    status_code: int = 409
