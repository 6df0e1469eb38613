"""
Tests for notifications app.

This package contains test modules for:
- test_models.py: Notification model tests
- test_services.py: NotificationService tests
- test_handlers.py: Chat signal handler tests
- test_tasks.py: Retention and broadcast task tests
- test_consumers.py: WebSocket consumer tests
- test_views.py: API endpoint tests

Usage:
    pytest notifications/tests/
    pytest notifications/tests/test_services.py
"""
