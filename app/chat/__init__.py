"""
Chat app for live customer support.

This app handles:
- Chat rooms: one open engagement per customer, picked up by support admins
- Message log: ordered transcript and unread accounting
- WebSocket real-time updates

Components:
    registry.py: RoomRegistry (room state machine, access checks)
    message_log.py: MessageLog (append, history, paging, read state)
    services.py: ChatCoordinator (public operations, publish after commit)

Related apps:
    - authentication: User model and Customer/Admin identities
    - notifications: Chat message notifications for the counterpart

WebSocket Support:
    Uses Django Channels for real-time communication.
    See consumers.py for WebSocket handlers.
    See routing.py for WebSocket URL patterns.

Usage:
    from chat.services import ChatCoordinator

    room = ChatCoordinator.create_chat_room(customer.id)
    room = ChatCoordinator.assign_admin_to_chat_room(room.id, agent.id)
    message = ChatCoordinator.send_message(room.id, customer.id, "Hello!")
"""
