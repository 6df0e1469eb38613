"""
URL configuration for the helpdesk chat service.

The `urlpatterns` list routes URLs to views. This is the root URL configuration
that includes all app-specific routes.

URL Structure:
    /                              - ReDoc API documentation
    /admin/                        - Django admin interface
    /health/                       - Health check endpoint (for load balancers, Docker)
    /schema/                       - OpenAPI schema (YAML)
    /api/v1/auth/                  - Authentication endpoints
        token/                     - Obtain JWT pair (email/password)
        token/refresh/             - Refresh access token
        me/                        - Current user
    /api/v1/chat/                  - Support chat endpoints
        rooms/                     - Room list/create
        rooms/waiting/             - Waiting queue (admins)
        rooms/{id}/                - Room detail
        rooms/{id}/assign/         - Assign admin (admins)
        rooms/{id}/close/          - Close room
        rooms/{id}/history/        - Full transcript
        rooms/{id}/messages/       - Paged transcript / send message
        rooms/{id}/unread-count/   - Unread count
        rooms/{id}/read/           - Mark read
    /api/v1/notifications/         - Notification endpoints
        unread/                    - Unread notifications
        unread-count/              - Unread count
        {id}/                      - Delete notification
        {id}/read/                 - Mark read
        read-all/                  - Mark all read
        system-notice/             - Broadcast system notice (admins)

WebSocket routes are declared in config/asgi.py.

For more information, see:
https://docs.djangoproject.com/en/5.2/topics/http/urls/
"""

from django.contrib import admin
from django.urls import include, path
from drf_spectacular.views import SpectacularAPIView, SpectacularRedocView

from core.views import health_check

# =============================================================================
# API v1 Routes
# =============================================================================
# All routes here are prefixed with /api/v1/ automatically
api_v1_patterns = [
    # Authentication (simplejwt)
    path("auth/", include("authentication.urls")),
    # Support chat
    path("chat/", include("chat.urls")),
    # Notifications
    path("notifications/", include("notifications.urls")),
]

urlpatterns = [
    # Documentation
    path("", SpectacularRedocView.as_view(url_name="schema"), name="redoc"),
    path("schema/", SpectacularAPIView.as_view(), name="schema"),
    # Admin
    path("admin/", admin.site.urls),
    # Health check (Docker, Kubernetes, load balancers)
    path("health/", health_check, name="health_check"),
    # API v1
    path("api/v1/", include(api_v1_patterns)),
]

# =============================================================================
# Admin Site Customization
# =============================================================================
admin.site.site_header = "Helpdesk Admin"
admin.site.site_title = "Helpdesk Admin Portal"
admin.site.index_title = "Support chat administration"
