"""
Tests for chat app.

This package contains test modules for:
- test_models.py: ChatRoom, ChatMessage model tests
- test_registry.py: RoomRegistry tests
- test_message_log.py: MessageLog tests
- test_services.py: ChatCoordinator tests
- test_consumers.py: WebSocket consumer tests
- test_middleware.py: JWT WebSocket middleware tests
- test_views.py: REST API endpoint tests

Usage:
    pytest chat/tests/
    pytest chat/tests/test_consumers.py
"""
