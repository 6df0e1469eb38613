"""
URL configuration for chat API.

URL Structure:
    Rooms:
        /rooms/                          GET, POST
        /rooms/waiting/                  GET
        /rooms/{id}/                     GET
        /rooms/{id}/assign/              POST
        /rooms/{id}/close/               POST

    Messages:
        /rooms/{id}/history/             GET
        /rooms/{id}/messages/            GET, POST
        /rooms/{id}/unread-count/        GET
        /rooms/{id}/read/                POST

All URLs are prefixed with /api/v1/chat/ in the main URL configuration.
"""

from django.urls import include, path
from rest_framework.routers import DefaultRouter

from chat.views import ChatRoomViewSet

router = DefaultRouter()
router.register(r"rooms", ChatRoomViewSet, basename="chat-room")

app_name = "chat"

urlpatterns = [
    path("", include(router.urls)),
]
