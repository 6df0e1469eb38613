"""
URL configuration for authentication app.

URL structure:
    /api/v1/auth/token/          - Obtain JWT access/refresh pair (POST)
    /api/v1/auth/token/refresh/  - Refresh access token (POST)
    /api/v1/auth/me/             - Current user (GET)

The access token is also what WebSocket clients pass as ?token=.
"""

from django.urls import path
from rest_framework_simplejwt.views import TokenObtainPairView, TokenRefreshView

from authentication.views import MeView

app_name = "authentication"

urlpatterns = [
    path("token/", TokenObtainPairView.as_view(), name="token-obtain"),
    path("token/refresh/", TokenRefreshView.as_view(), name="token-refresh"),
    path("me/", MeView.as_view(), name="me"),
]
