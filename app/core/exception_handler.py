"""
DRF exception handler for application errors.

Installed via REST_FRAMEWORK["EXCEPTION_HANDLER"]. Renders any
core.exceptions.BaseApplicationError with its ``to_dict()`` body and the
status code declared on its class:

    ValidationError     400
    AccessDeniedError   403
    NotFoundError       404
    ConflictError       409
    InvalidStateError   422

Everything else is delegated to DRF's default handler.
"""

from __future__ import annotations

import logging

from rest_framework.response import Response
from rest_framework.views import exception_handler

from core.exceptions import BaseApplicationError

logger = logging.getLogger(__name__)


def api_exception_handler(exc, context):
    """Translate application errors into stable HTTP responses."""
    if isinstance(exc, BaseApplicationError):
        view = context.get("view")
        logger.info(
            f"{view.__class__.__name__ if view else 'API'} rejected request: {exc}"
        )
        return Response(exc.to_dict(), status=exc.status_code)

    return exception_handler(exc, context)
