"""
WebSocket URL routing for the chat application.

This module defines the URL patterns for WebSocket connections,
mapping paths to their corresponding consumers.

URL Patterns:
    ws/chat/rooms/<room_id>/ - Connect to a specific support chat room

Authentication:
    JWT token should be passed as query parameter ?token=<jwt_access_token>
    or as the subprotocol pair "jwt, <jwt_access_token>". JWTAuthMiddleware
    validates the token and attaches the user to the consumer's scope.
"""

from django.urls import path

from chat import consumers

websocket_urlpatterns = [
    path(
        "ws/chat/rooms/<int:room_id>/",
        consumers.ChatConsumer.as_asgi(),
    ),
]
