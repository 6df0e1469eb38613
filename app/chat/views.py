"""
ViewSets for chat API.

This module provides REST API endpoints for the support chat:
- ChatRoomViewSet: Room lifecycle, transcript and read-state actions

URL Structure:
    /api/v1/chat/rooms/                      GET, POST
    /api/v1/chat/rooms/waiting/              GET (admins)
    /api/v1/chat/rooms/{id}/                 GET
    /api/v1/chat/rooms/{id}/assign/          POST (admins)
    /api/v1/chat/rooms/{id}/close/           POST
    /api/v1/chat/rooms/{id}/history/         GET
    /api/v1/chat/rooms/{id}/messages/        GET, POST
    /api/v1/chat/rooms/{id}/unread-count/    GET
    /api/v1/chat/rooms/{id}/read/            POST

Design Decisions:
    - Views only translate HTTP to ChatCoordinator calls
    - Participation and state checks live in the coordinator; failures
      surface as core.exceptions and are rendered by the API exception
      handler
    - Role gates that are pure HTTP concerns (waiting queue, assign) use
      permission classes
"""

from __future__ import annotations

from drf_spectacular.utils import (
    OpenApiParameter,
    OpenApiResponse,
    extend_schema,
    extend_schema_view,
)
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from authentication.permissions import IsSupportAdmin
from chat.constants import MESSAGE_CONFIG
from chat.models import ChatRoomStatus
from chat.pagination import page_spec_from_request
from chat.serializers import (
    AssignAdminSerializer,
    ChatMessagePageSerializer,
    ChatMessageSerializer,
    ChatRoomPageSerializer,
    ChatRoomSerializer,
    MarkReadResponseSerializer,
    MessageCreateSerializer,
    UnreadCountSerializer,
)
from chat.services import ChatCoordinator

PAGE_PARAMETERS = [
    OpenApiParameter(
        name="page",
        type=int,
        location=OpenApiParameter.QUERY,
        description="Zero-based page index",
        required=False,
    ),
    OpenApiParameter(
        name="size",
        type=int,
        location=OpenApiParameter.QUERY,
        description="Items per page (max 100)",
        required=False,
    ),
]


def _room_serializer(view) -> dict:
    return ChatRoomSerializer(view).data


def _message_serializer(view) -> dict:
    return ChatMessageSerializer(view).data


@extend_schema_view(
    list=extend_schema(
        operation_id="list_chat_rooms",
        summary="List chat rooms",
        description=(
            "Customers get their own rooms; support admins get the rooms "
            "assigned to them (optionally filtered by status). Newest first."
        ),
        parameters=[
            *PAGE_PARAMETERS,
            OpenApiParameter(
                name="status",
                type=str,
                location=OpenApiParameter.QUERY,
                description="Admins only: waiting, active or closed",
                required=False,
            ),
        ],
        responses={200: ChatRoomPageSerializer},
        tags=["Chat - Rooms"],
    ),
    create=extend_schema(
        operation_id="create_chat_room",
        summary="Open a support chat",
        request=None,
        responses={
            201: ChatRoomSerializer,
            403: OpenApiResponse(description="Caller is not a customer"),
            409: OpenApiResponse(description="Customer already has an open room"),
        },
        tags=["Chat - Rooms"],
    ),
    retrieve=extend_schema(
        operation_id="get_chat_room",
        summary="Get chat room",
        responses={200: ChatRoomSerializer},
        tags=["Chat - Rooms"],
    ),
)
class ChatRoomViewSet(viewsets.ViewSet):
    """
    ViewSet for support chat rooms.

    list:
        Rooms visible to the caller, paginated with ?page=&size=.

    create:
        Open a WAITING room for the calling customer.

    retrieve:
        Room snapshot; participants only.
    """

    permission_classes = [IsAuthenticated]
    lookup_value_regex = r"\d+"

    def list(self, request):
        spec = page_spec_from_request(request)
        if request.user.is_support_admin:
            room_status = request.query_params.get("status") or None
            if room_status is not None and room_status not in ChatRoomStatus.values:
                room_status = None
            page = ChatCoordinator.list_admin_rooms(request.user.id, room_status, spec)
        else:
            page = ChatCoordinator.list_customer_rooms(request.user.id, spec)
        return Response(page.to_dict(_room_serializer))

    def create(self, request):
        room = ChatCoordinator.create_chat_room(request.user.id)
        return Response(_room_serializer(room), status=status.HTTP_201_CREATED)

    def retrieve(self, request, pk=None):
        room = ChatCoordinator.get_chat_room(int(pk), request.user.id)
        return Response(_room_serializer(room))

    # =========================================================================
    # Admin actions
    # =========================================================================

    @extend_schema(
        operation_id="list_waiting_chat_rooms",
        summary="List waiting chat rooms",
        description="Rooms waiting for an agent, oldest first.",
        responses={200: ChatRoomSerializer(many=True)},
        tags=["Chat - Admin"],
    )
    @action(
        detail=False,
        methods=["get"],
        permission_classes=[IsAuthenticated, IsSupportAdmin],
    )
    def waiting(self, request):
        rooms = ChatCoordinator.list_waiting_rooms()
        return Response([_room_serializer(room) for room in rooms])

    @extend_schema(
        operation_id="assign_chat_room",
        summary="Assign an admin to a chat room",
        description=(
            "Assign the calling admin (or admin_id, if given) to the room. "
            "Reassigning an active room hands it over to the new admin."
        ),
        request=AssignAdminSerializer,
        responses={
            200: ChatRoomSerializer,
            404: OpenApiResponse(description="Room or admin not found"),
            422: OpenApiResponse(description="Room is closed"),
        },
        tags=["Chat - Admin"],
    )
    @action(
        detail=True,
        methods=["post"],
        permission_classes=[IsAuthenticated, IsSupportAdmin],
    )
    def assign(self, request, pk=None):
        serializer = AssignAdminSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        admin_id = serializer.validated_data.get("admin_id", request.user.id)

        room = ChatCoordinator.assign_admin_to_chat_room(int(pk), admin_id)
        return Response(_room_serializer(room))

    # =========================================================================
    # Participant actions
    # =========================================================================

    @extend_schema(
        operation_id="close_chat_room",
        summary="Close a chat room",
        description="Close the room. Closing an already closed room is a no-op.",
        request=None,
        responses={200: ChatRoomSerializer},
        tags=["Chat - Rooms"],
    )
    @action(detail=True, methods=["post"])
    def close(self, request, pk=None):
        room = ChatCoordinator.close_chat_room(int(pk), request.user.id)
        return Response(_room_serializer(room))

    @extend_schema(
        operation_id="get_chat_history",
        summary="Get full chat transcript",
        description="Every message in the room, oldest first.",
        responses={200: ChatMessageSerializer(many=True)},
        tags=["Chat - Messages"],
    )
    @action(detail=True, methods=["get"])
    def history(self, request, pk=None):
        messages = ChatCoordinator.get_chat_history(int(pk), request.user.id)
        return Response([_message_serializer(message) for message in messages])

    @extend_schema(
        methods=["GET"],
        operation_id="list_chat_messages",
        summary="List chat messages",
        description="Paginated transcript, most recent first.",
        parameters=PAGE_PARAMETERS,
        responses={200: ChatMessagePageSerializer},
        tags=["Chat - Messages"],
    )
    @extend_schema(
        methods=["POST"],
        operation_id="send_chat_message",
        summary="Send a chat message",
        request=MessageCreateSerializer,
        responses={
            201: ChatMessageSerializer,
            400: OpenApiResponse(description="Blank or oversized content"),
            403: OpenApiResponse(description="Not a participant"),
            422: OpenApiResponse(description="Room is not active"),
        },
        tags=["Chat - Messages"],
    )
    @action(detail=True, methods=["get", "post"])
    def messages(self, request, pk=None):
        if request.method == "POST":
            serializer = MessageCreateSerializer(data=request.data)
            serializer.is_valid(raise_exception=True)
            message = ChatCoordinator.send_message(
                int(pk),
                request.user.id,
                serializer.validated_data["content"],
                serializer.validated_data["message_type"],
            )
            return Response(_message_serializer(message), status=status.HTTP_201_CREATED)

        spec = page_spec_from_request(request, MESSAGE_CONFIG.DEFAULT_PAGE_SIZE)
        page = ChatCoordinator.get_chat_messages(int(pk), request.user.id, spec)
        return Response(page.to_dict(_message_serializer))

    @extend_schema(
        operation_id="get_chat_unread_count",
        summary="Get unread message count",
        responses={200: UnreadCountSerializer},
        tags=["Chat - Messages"],
    )
    @action(detail=True, methods=["get"], url_path="unread-count")
    def unread_count(self, request, pk=None):
        count = ChatCoordinator.get_unread_message_count(int(pk), request.user.id)
        return Response(UnreadCountSerializer({"unread_count": count}).data)

    @extend_schema(
        operation_id="mark_chat_read",
        summary="Mark chat messages as read",
        description="Mark every message from the other participant as read.",
        request=None,
        responses={200: MarkReadResponseSerializer},
        tags=["Chat - Messages"],
    )
    @action(detail=True, methods=["post"])
    def read(self, request, pk=None):
        count = ChatCoordinator.mark_read(int(pk), request.user.id)
        return Response(MarkReadResponseSerializer({"marked_count": count}).data)
