"""
Factory Boy factories for notification models.

Usage:
    from notifications.tests.factories import NotificationFactory

    notification = NotificationFactory(recipient=user)
    read = NotificationFactory(recipient=user, is_read=True)
"""

import factory

from authentication.tests.factories import UserFactory
from notifications.models import Notification, NotificationType


class NotificationFactory(factory.django.DjangoModelFactory):
    """
    Factory for an unread ACCOUNT_UPDATE notification.

    Examples:
        NotificationFactory(recipient=user, notification_type=NotificationType.CHAT_MESSAGE)
    """

    class Meta:
        model = Notification

    recipient = factory.SubFactory(UserFactory)
    notification_type = NotificationType.ACCOUNT_UPDATE
    title = factory.Faker("sentence", nb_words=4)
    body = factory.Faker("sentence")
    related_entity_id = None
    actor_name = ""
    is_read = False
