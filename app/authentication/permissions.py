"""
Role-based permission classes.

This module provides DRF permission classes keyed on the user's support role:
- IsSupportAdmin: Authenticated support admin

Room-level participation is checked by the chat services, not here, so that
HTTP and WebSocket callers get the same answer.

Usage:
    from authentication.permissions import IsSupportAdmin

    class WaitingRoomsView(APIView):
        permission_classes = [IsAuthenticated, IsSupportAdmin]
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from rest_framework import permissions

if TYPE_CHECKING:
    from rest_framework.request import Request
    from rest_framework.views import APIView


class IsSupportAdmin(permissions.BasePermission):
    """Allows access only to support admins."""

    message = "Only support admins can perform this action."

    def has_permission(self, request: Request, view: APIView) -> bool:
        user = request.user
        return bool(user and user.is_authenticated and user.is_support_admin)

