"""
URL configuration for the Django application.

The `urlpatterns` list routes URLs to views. This is the root URL configuration
that includes all app-specific routes.

URL Structure:
    /                              - ReDoc API documentation
    /admin/                        - Django admin interface
    /health/                       - Health check endpoint (for load balancers, Docker)
    /schema/                       - OpenAPI schema (YAML)
    /api/v1/auth/                  - Token endpoints (SimpleJWT)
        token/                     - Obtain access/refresh pair
        token/refresh/             - Refresh access token
    /api/v1/chat/                  - Support chat endpoints
        user/conversations/current/             - Get or create my conversation
        user/conversations/{id}/messages/       - My conversation's messages
        user/conversations/{id}/read/           - Mark my conversation read
        admin/conversations/                    - All active conversations
        admin/conversations/open/               - Open a user's conversation
        admin/conversations/{id}/assign/        - Assign myself
        admin/conversations/{id}/messages/      - Conversation messages
        admin/conversations/{id}/read/          - Mark read (admin side)
        admin/conversations/{id}/deactivate/    - Close conversation

WebSocket routes are declared in chat/routing.py (ws/chat/).

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
    # Authentication (SimpleJWT)
    path("auth/", include("authentication.urls")),
    # Chat
    path("chat/", include("chat.urls")),
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
admin.site.site_header = "Support Chat Admin"
admin.site.site_title = "Support Chat"
admin.site.index_title = "Conversations and users"
