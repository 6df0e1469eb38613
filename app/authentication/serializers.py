"""
Serializers for authentication models.

This module provides DRF serializers for:
- User model (read operations for the current user)

Related files:
    - models.py: User model
    - views.py: Views that use these serializers
"""

from rest_framework import serializers

from authentication.models import User


class UserSerializer(serializers.ModelSerializer):
    """
    Serializer for User model (read operations).

    Used by the /api/v1/auth/me/ endpoint so clients know which role
    console (customer widget or admin inbox) to render.
    """

    display_name = serializers.CharField(source="get_short_name", read_only=True)

    class Meta:
        model = User
        fields = [
            "id",
            "email",
            "display_name",
            "role",
            "is_active",
            "date_joined",
        ]
        read_only_fields = fields
