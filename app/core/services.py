"""
Base service layer patterns for business logic encapsulation.

Services encapsulate business logic separate from views and models.
Views and consumers handle transport concerns, models handle data, and
services handle the rules in between.

Unit of Work:
    A service operation that mutates state runs inside a single
    ``cls.atomic()`` block. Side effects that must only happen once the
    state is durable (live pushes, signals to other processes) are
    registered with ``cls.after_commit()``; they run after the outermost
    transaction commits and are discarded if it rolls back.

Error Handling:
    Services raise core.exceptions subclasses for expected failures.
    Unexpected failures (database errors, bugs) propagate unchanged and
    roll the transaction back.

Usage:
    from core.services import BaseService

    class RoomService(BaseService):
        @classmethod
        def close(cls, room_id: int) -> Room:
            with cls.atomic():
                room = Room.objects.select_for_update().get(id=room_id)
                room.status = Room.Status.CLOSED
                room.save(update_fields=["status"])
                cls.after_commit(publish_room_closed, room.id)

            cls.get_logger().info(f"Closed room {room.id}")
            return room
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from functools import partial
from typing import TYPE_CHECKING

from django.db import transaction

if TYPE_CHECKING:
    from collections.abc import Callable, Generator
    from typing import Any


class BaseService:
    """
    Base class for service layer classes.

    Design Notes:
        - Use @classmethod (no instance state)
        - Services are stateless
        - Raise core.exceptions for expected failures
    """

    @classmethod
    def get_logger(cls) -> logging.Logger:
        """
        Get logger for this service.

        Returns a logger named after the service class for
        easy filtering in logs.
        """
        return logging.getLogger(f"{cls.__module__}.{cls.__name__}")

    @classmethod
    @contextmanager
    def atomic(cls) -> Generator[None, None, None]:
        """
        Execute operations in a database transaction.

        Thin wrapper around Django's transaction.atomic() that makes
        transaction boundaries explicit in service code. Nested calls
        create savepoints.

        Example:
            with cls.atomic():
                room = RoomRegistry.lock_room(room_id)
                MessageLog.append(room, ...)
                # If append fails, the room mutation is rolled back too
        """
        with transaction.atomic():
            yield

    @classmethod
    def after_commit(cls, func: Callable[..., Any], *args: Any, **kwargs: Any) -> None:
        """
        Run ``func(*args, **kwargs)`` once the current transaction commits.

        Outside of a transaction Django runs the callback immediately.
        Callbacks registered inside a block that rolls back never run.

        Args:
            func: Callable to invoke after commit
            *args: Positional arguments bound now
            **kwargs: Keyword arguments bound now
        """
        transaction.on_commit(partial(func, *args, **kwargs))
