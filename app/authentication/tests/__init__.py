"""
Tests for authentication app.

This package contains test modules for:
- test_managers.py: UserManager tests
- test_models.py: User model and role tests
- test_services.py: IdentityService tests
- test_views.py: Token and profile endpoint tests

Usage:
    pytest authentication/tests/
    pytest authentication/tests/test_services.py
"""
