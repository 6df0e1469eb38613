"""
Views for authentication.

Token issuance and refresh are provided by SimpleJWT (see urls.py). This
module adds the current-user endpoint.

Endpoints:
    GET /api/v1/auth/me/ - Current user with role
"""

from drf_spectacular.utils import extend_schema
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from authentication.serializers import UserSerializer


class MeView(APIView):
    """Return the authenticated user."""

    permission_classes = [IsAuthenticated]

    @extend_schema(
        operation_id="get_current_user",
        summary="Get current user",
        responses=UserSerializer,
        tags=["Auth"],
    )
    def get(self, request):
        return Response(UserSerializer(request.user).data)
