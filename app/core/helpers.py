"""
Helper types and functions for common infrastructure operations.

This module provides domain-agnostic utilities for:
- Offset pagination of querysets into plain data projections
- Timezone-aware age cutoffs for retention sweeps

These utilities have no knowledge of chat rooms or notifications.

Usage:
    from core.helpers import PageSpec, paginate, days_ago

    page = paginate(Message.objects.order_by("-id"), PageSpec(page=0, size=20), to_view)
    cutoff = days_ago(30)
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import timedelta
from typing import TYPE_CHECKING, Generic, TypeVar

from django.utils import timezone

if TYPE_CHECKING:
    from collections.abc import Callable
    from datetime import datetime

    from django.db.models import QuerySet

T = TypeVar("T")

DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100


@dataclass(frozen=True)
class PageSpec:
    """
    Zero-based page request.

    Attributes:
        page: Page index, starting at 0
        size: Items per page, clamped to 1..MAX_PAGE_SIZE
    """

    page: int = 0
    size: int = DEFAULT_PAGE_SIZE

    def __post_init__(self):
        object.__setattr__(self, "page", max(0, int(self.page)))
        object.__setattr__(self, "size", max(1, min(int(self.size), MAX_PAGE_SIZE)))

    @property
    def offset(self) -> int:
        return self.page * self.size


@dataclass(frozen=True)
class Page(Generic[T]):
    """
    One bounded page of results.

    Attributes:
        items: Projections on this page, in query order
        page: Zero-based page index
        size: Requested page size
        total: Total matching items across all pages
    """

    items: list[T]
    page: int
    size: int
    total: int

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.size) if self.size > 0 else 0

    @property
    def has_next(self) -> bool:
        return self.page + 1 < self.total_pages

    @property
    def has_previous(self) -> bool:
        return self.page > 0

    def to_dict(self, item_serializer: Callable[[T], dict] | None = None) -> dict:
        """
        Convert to an API response body.

        Example:
            {
                "results": [...],
                "page": 0,
                "size": 20,
                "total": 41,
                "total_pages": 3,
                "has_next": True,
                "has_previous": False
            }
        """
        serialize = item_serializer or (lambda item: item)
        return {
            "results": [serialize(item) for item in self.items],
            "page": self.page,
            "size": self.size,
            "total": self.total,
            "total_pages": self.total_pages,
            "has_next": self.has_next,
            "has_previous": self.has_previous,
        }


def paginate(queryset: QuerySet, spec: PageSpec, mapper: Callable[..., T]) -> Page[T]:
    """
    Slice an ordered queryset into a Page of projections.

    Args:
        queryset: Already-ordered queryset
        spec: Requested page
        mapper: Converts each model instance into its projection

    Returns:
        Page with mapped items and the total count
    """
    total = queryset.count()
    rows = queryset[spec.offset : spec.offset + spec.size]
    return Page(
        items=[mapper(row) for row in rows],
        page=spec.page,
        size=spec.size,
        total=total,
    )


def days_ago(days: int) -> datetime:
    """Return the aware datetime ``days`` days before now."""
    return timezone.now() - timedelta(days=days)
