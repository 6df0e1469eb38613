"""
Test configuration and fixtures for chat tests.

This module provides:
- Rooms in each lifecycle state, owned by the shared customer/admin fixtures
- A third user who participates in nothing

Usage:
    def test_example(active_room, customer_client):
        response = customer_client.get(f"/api/v1/chat/rooms/{active_room.id}/")
        assert response.status_code == 200
"""

import pytest

from authentication.tests.factories import CustomerFactory
from chat.tests.factories import ActiveChatRoomFactory, ChatRoomFactory, ClosedChatRoomFactory


@pytest.fixture
def outsider(db):
    """A customer with no relation to the rooms under test."""
    return CustomerFactory(display_name="Outsider")


@pytest.fixture
def waiting_room(customer):
    return ChatRoomFactory(customer=customer)


@pytest.fixture
def active_room(customer, admin):
    return ActiveChatRoomFactory(customer=customer, admin=admin)


@pytest.fixture
def closed_room(customer, admin):
    return ClosedChatRoomFactory(customer=customer, admin=admin)
