"""
URL configuration for the chat API.

URL Structure:
    Customer:
        /user/conversations/current/                GET
        /user/conversations/{id}/messages/          GET
        /user/conversations/{id}/read/              POST

    Support admin:
        /admin/conversations/                       GET
        /admin/conversations/open/                  POST
        /admin/conversations/{id}/assign/           POST
        /admin/conversations/{id}/messages/         GET
        /admin/conversations/{id}/read/             POST
        /admin/conversations/{id}/deactivate/       POST

All URLs are prefixed with /api/v1/chat/ in the main URL configuration.
The realtime surface lives in routing.py.
"""

from django.urls import include, path
from rest_framework.routers import DefaultRouter

from chat.views import AdminConversationViewSet, UserConversationViewSet

router = DefaultRouter()
router.include_root_view = False
router.register(r"user/conversations", UserConversationViewSet, basename="user-conversation")
router.register(r"admin/conversations", AdminConversationViewSet, basename="admin-conversation")

app_name = "chat"

urlpatterns = [
    path("", include(router.urls)),
]
