"""
WebSocket URL routing for the chat application.

URL Patterns:
    ws/chat/ - The single realtime connection of a session. Conversations
               are joined and left with events on that connection.

Authentication:
    JWT token passed as ?token=<jwt_access_token> or as the
    ["jwt", <token>] subprotocol pair. JWTAuthMiddleware validates it and
    attaches the user to the consumer's scope.
"""

from django.urls import path

from chat import consumers

websocket_urlpatterns = [
    path("ws/chat/", consumers.SupportChatConsumer.as_asgi()),
]
