"""
Factory Boy factories for chat models.

Provides realistic test data generation for:
- Conversation: A customer's support conversation
- Message: A chat line in a conversation

Usage:
    from chat.tests.factories import ConversationFactory, MessageFactory

    conversation = ConversationFactory()
    conversation = ConversationFactory(admin=AdminFactory())
    message = MessageFactory(conversation=conversation, sender=conversation.user)

Note:
    Factories write rows directly and do not touch counters or
    last_message. Use ConversationService / MessageService when a test
    depends on those.
"""

import factory

from authentication.tests.factories import UserFactory
from chat.models import Conversation, Message, MessageType


class ConversationFactory(factory.django.DjangoModelFactory):
    """
    Factory for Conversation model.

    Examples:
        conversation = ConversationFactory()
        conversation = ConversationFactory(user=customer, admin=support)
        conversation = ConversationFactory(is_active=False)
    """

    class Meta:
        model = Conversation

    user = factory.SubFactory(UserFactory)
    admin = None
    is_active = True


class MessageFactory(factory.django.DjangoModelFactory):
    """
    Factory for Message model.

    The sender defaults to the conversation's customer.
    """

    class Meta:
        model = Message

    conversation = factory.SubFactory(ConversationFactory)
    sender = factory.LazyAttribute(lambda o: o.conversation.user)
    message_type = MessageType.TEXT
    body = factory.Faker("sentence")
