"""
Initial schema for notifications.
"""

import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):
    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Notification",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True,
                        primary_key=True,
                        serialize=False,
                        verbose_name="ID",
                    ),
                ),
                (
                    "created_at",
                    models.DateTimeField(
                        auto_now_add=True,
                        db_index=True,
                        help_text="Timestamp when this record was created",
                    ),
                ),
                (
                    "updated_at",
                    models.DateTimeField(
                        auto_now=True,
                        help_text="Timestamp when this record was last modified",
                    ),
                ),
                (
                    "notification_type",
                    models.CharField(
                        choices=[
                            ("comment_on_post", "Comment on post"),
                            ("reply_to_comment", "Reply to comment"),
                            ("chat_message", "Chat message"),
                            ("system_notice", "System notice"),
                            ("account_update", "Account update"),
                        ],
                        db_index=True,
                        help_text="Kind of notification",
                        max_length=30,
                    ),
                ),
                (
                    "title",
                    models.CharField(help_text="Rendered notification title", max_length=255),
                ),
                (
                    "body",
                    models.TextField(
                        blank=True,
                        default="",
                        help_text="Rendered notification body",
                    ),
                ),
                (
                    "related_entity_id",
                    models.CharField(
                        blank=True,
                        help_text="Id of the entity that triggered this notification",
                        max_length=64,
                        null=True,
                    ),
                ),
                (
                    "actor_name",
                    models.CharField(
                        blank=True,
                        default="",
                        help_text="Display name of the user who triggered this notification",
                        max_length=150,
                    ),
                ),
                (
                    "is_read",
                    models.BooleanField(
                        db_index=True,
                        default=False,
                        help_text="Whether recipient has read this notification",
                    ),
                ),
                (
                    "recipient",
                    models.ForeignKey(
                        help_text="User receiving this notification",
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="notifications",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "db_table": "notifications_notification",
                "ordering": ["-created_at", "-id"],
                "indexes": [
                    models.Index(
                        fields=["recipient", "is_read", "-created_at"],
                        name="notif_recipient_unread_idx",
                    ),
                    models.Index(
                        fields=["recipient", "notification_type"],
                        name="notif_recipient_type_idx",
                    ),
                    models.Index(
                        fields=["is_read", "created_at"],
                        name="notif_read_created_idx",
                    ),
                ],
            },
        ),
    ]
