"""
Signals emitted by the support chat.

Other apps subscribe to these instead of importing chat services, which
keeps the dependency pointing from notifications to chat and not back.

Signals:
    chat_message_sent: A participant message was appended to a room.
        Sent inside the sending transaction, so receivers that write to
        the database commit or roll back together with the message.

        kwargs:
            message: The persisted ChatMessage
            room: The ChatRoom it belongs to
            recipient_id: The counterpart's user id (None while unassigned)
            sender_name: Display name of the sender
"""

from django.dispatch import Signal

chat_message_sent = Signal()
