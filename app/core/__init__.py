"""
Core Application - Infrastructure & Base Classes

This app contains infrastructure code shared by the chat and notifications
apps. It holds no chat-specific rules:

- Generic, reusable base classes (no domain-specific logic)
- Clear extension points for domain apps
- Infrastructure concerns separated from business logic

Models (import from core.models):
    - BaseModel: Abstract model with timestamps (created_at, updated_at)

Services (import from core.services):
    - BaseService: Base class for service layer (logging, unit of work)

Exceptions (import from core.exceptions):
    - BaseApplicationError: Base exception with error codes
    - ValidationError: Input validation failures
    - NotFoundError: Resource not found
    - PermissionDeniedError / AccessDeniedError: Authorization failures
    - InvalidStateError: Operation forbidden in the current state
    - ConflictError: State conflicts (duplicate open room)

Protocols (import from core.protocols):
    - DeliveryChannel: Real-time publish/subscribe interface

Delivery (import from core.delivery):
    - ChannelLayerDelivery: DeliveryChannel over Django Channels
    - get_delivery_channel: Settings-driven adapter factory
    - publish: Publish without letting transport errors escape

Helpers (import from core.helpers):
    - PageSpec / Page / paginate: Offset pagination into projections
    - days_ago: Retention cutoff helper

Note:
    Models and the delivery module are NOT imported here because they
    depend on Django's app registry and settings being ready. Import them
    directly from their modules.
"""

# Services
from .services import BaseService

# Exceptions (no Django dependencies)
from .exceptions import (
    AccessDeniedError,
    BaseApplicationError,
    ConflictError,
    InvalidStateError,
    NotFoundError,
    PermissionDeniedError,
    ValidationError,
)

# Protocols (no Django dependencies)
from .protocols import DeliveryChannel

__all__ = [
    # Services
    "BaseService",
    # Exceptions
    "BaseApplicationError",
    "ValidationError",
    "NotFoundError",
    "PermissionDeniedError",
    "AccessDeniedError",
    "InvalidStateError",
    "ConflictError",
    # Protocols
    "DeliveryChannel",
]
