"""
Factory Boy factories for chat models.

Provides realistic test data generation for:
- ChatRoom: Waiting, active and closed support rooms
- ChatMessage: Participant and system messages

Factories write rows directly and skip RoomRegistry/MessageLog, so use
them to arrange state, and the services to exercise behavior.

Usage:
    from chat.tests.factories import (
        ActiveChatRoomFactory,
        ChatMessageFactory,
        ChatRoomFactory,
    )

    room = ChatRoomFactory()  # WAITING
    room = ActiveChatRoomFactory(customer=customer, admin=agent)
    message = ChatMessageFactory(room=room, sender=room.customer)
"""

import json

import factory
from django.utils import timezone

from authentication.tests.factories import AdminFactory, CustomerFactory
from chat.models import ChatMessage, ChatRoom, ChatRoomStatus, MessageType


class ChatRoomFactory(factory.django.DjangoModelFactory):
    """
    Factory for a WAITING ChatRoom.

    Examples:
        room = ChatRoomFactory(customer=customer)
    """

    class Meta:
        model = ChatRoom

    customer = factory.SubFactory(CustomerFactory)
    admin = None
    status = ChatRoomStatus.WAITING
    closed_at = None


class ActiveChatRoomFactory(ChatRoomFactory):
    admin = factory.SubFactory(AdminFactory)
    status = ChatRoomStatus.ACTIVE


class ClosedChatRoomFactory(ActiveChatRoomFactory):
    status = ChatRoomStatus.CLOSED
    closed_at = factory.LazyFunction(timezone.now)


class ChatMessageFactory(factory.django.DjangoModelFactory):
    """
    Factory for a TEXT ChatMessage sent by the room's customer.

    Examples:
        ChatMessageFactory(room=room)
        ChatMessageFactory(room=room, sender=room.admin, read_by_recipient=True)
    """

    class Meta:
        model = ChatMessage

    room = factory.SubFactory(ActiveChatRoomFactory)
    sender = factory.LazyAttribute(lambda o: o.room.customer)
    message_type = MessageType.TEXT
    content = factory.Faker("sentence")
    sent_at = factory.LazyFunction(timezone.now)
    read_by_recipient = False


class SystemMessageFactory(ChatMessageFactory):
    sender = None
    message_type = MessageType.SYSTEM
    content = factory.LazyFunction(
        lambda: json.dumps({"event": "room_closed", "data": {"closed_by_id": None}})
    )
