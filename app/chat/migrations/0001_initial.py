"""
Initial schema for support chat.

Creates ChatRoom and ChatMessage with:
    - Partial unique constraint allowing one open room per customer
    - Check constraints tying closed_at and admin to the room status
    - Indexes for the waiting queue, per-user room lists and transcripts
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
            name="ChatRoom",
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
                    "status",
                    models.CharField(
                        choices=[
                            ("waiting", "Waiting"),
                            ("active", "Active"),
                            ("closed", "Closed"),
                        ],
                        db_index=True,
                        default="waiting",
                        help_text="Lifecycle state of the room",
                        max_length=10,
                    ),
                ),
                (
                    "closed_at",
                    models.DateTimeField(
                        blank=True,
                        help_text="When the room was closed",
                        null=True,
                    ),
                ),
                (
                    "admin",
                    models.ForeignKey(
                        blank=True,
                        help_text="Support admin currently assigned (null until assigned)",
                        null=True,
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="assigned_chat_rooms",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    "customer",
                    models.ForeignKey(
                        help_text="Customer who opened this room",
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="customer_chat_rooms",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "db_table": "chat_room",
                "ordering": ["-created_at", "-id"],
                "indexes": [
                    models.Index(
                        fields=["customer", "-created_at"],
                        name="chat_room_customer_idx",
                    ),
                    models.Index(
                        fields=["status", "created_at"],
                        name="chat_room_status_queue_idx",
                    ),
                    models.Index(
                        condition=models.Q(admin__isnull=False),
                        fields=["admin", "status"],
                        name="chat_room_admin_status_idx",
                    ),
                ],
                "constraints": [
                    models.UniqueConstraint(
                        condition=models.Q(status__in=["waiting", "active"]),
                        fields=("customer",),
                        name="chat_room_one_open_per_customer",
                    ),
                    models.CheckConstraint(
                        condition=(
                            models.Q(status="closed", closed_at__isnull=False)
                            | (~models.Q(status="closed") & models.Q(closed_at__isnull=True))
                        ),
                        name="chat_room_closed_at_iff_closed",
                    ),
                    models.CheckConstraint(
                        condition=(
                            models.Q(status="waiting", admin__isnull=True)
                            | models.Q(status="active", admin__isnull=False)
                            | models.Q(status="closed")
                        ),
                        name="chat_room_admin_matches_status",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="ChatMessage",
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
                    "message_type",
                    models.CharField(
                        choices=[
                            ("text", "Text"),
                            ("image", "Image"),
                            ("file", "File"),
                            ("system", "System"),
                        ],
                        default="text",
                        help_text="Type of message content",
                        max_length=10,
                    ),
                ),
                (
                    "content",
                    models.TextField(
                        help_text="Message text, attachment reference, or system event JSON",
                    ),
                ),
                (
                    "sent_at",
                    models.DateTimeField(help_text="Send time; non-decreasing within a room"),
                ),
                (
                    "read_by_recipient",
                    models.BooleanField(
                        default=False,
                        help_text="Whether the recipient has read this message",
                    ),
                ),
                (
                    "room",
                    models.ForeignKey(
                        help_text="Room this message belongs to",
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="messages",
                        to="chat.chatroom",
                    ),
                ),
                (
                    "sender",
                    models.ForeignKey(
                        blank=True,
                        help_text="User who sent this message (null for system messages)",
                        null=True,
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="sent_chat_messages",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "db_table": "chat_message",
                "ordering": ["sent_at", "id"],
                "indexes": [
                    models.Index(
                        fields=["room", "sent_at", "id"],
                        name="chat_msg_room_order_idx",
                    ),
                    models.Index(
                        condition=models.Q(read_by_recipient=False),
                        fields=["room", "read_by_recipient"],
                        name="chat_msg_room_unread_idx",
                    ),
                ],
            },
        ),
    ]
