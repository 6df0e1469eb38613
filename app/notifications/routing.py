"""
WebSocket URL routing for notifications.

URL Patterns:
    ws/notifications/ - Subscribe to the caller's notification stream
"""

from django.urls import path

from notifications import consumers

websocket_urlpatterns = [
    path("ws/notifications/", consumers.NotificationConsumer.as_asgi()),
]
