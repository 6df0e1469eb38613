"""
Authentication application.

This app is the identity store for the support chat: it owns the User
record with its support role and active flag, and issues JWTs.

Key components:
    - User model: Custom email-based user with a customer/admin role
    - IdentityService: Resolves user ids to Customer | Admin variants

Usage:
    from authentication.models import User, UserRole
    from authentication.services import IdentityService
"""
