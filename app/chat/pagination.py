"""
Pagination helpers for chat API.

Chat listings use zero-based offset pages expressed as ``?page=&size=``.
The service layer slices querysets itself (core.helpers.paginate) and
returns a Page projection, so the views only need to parse the request.

Query parameters:
    page: Zero-based page index (default 0)
    size: Items per page (default 20, capped at 100)
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from core.exceptions import ValidationError
from core.helpers import DEFAULT_PAGE_SIZE, PageSpec

if TYPE_CHECKING:
    from rest_framework.request import Request


def page_spec_from_request(request: Request, default_size: int = DEFAULT_PAGE_SIZE) -> PageSpec:
    """
    Build a PageSpec from ``page`` and ``size`` query parameters.

    Raises:
        ValidationError: A parameter is present but not an integer
    """
    params = request.query_params
    try:
        page = int(params.get("page", 0))
        size = int(params.get("size", default_size))
    except (TypeError, ValueError):
        raise ValidationError(
            "page and size must be integers",
            error_code="INVALID_PAGE",
            details={"page": params.get("page"), "size": params.get("size")},
        )
    return PageSpec(page=page, size=size)
