"""Controller for the Chats feature."""
from datetime import datetime
from typing import Callable, List, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import structlog

from ai.orchestrator import AIOrchestrator, NotRequested, Replied, ReplyFailed
from api.features.chats.dtos import (
    ChatDTO,
    ChatMessageDTO,
    CreateChatRequest,
    CreateMessageRequest,
    CreateMessageResponse,
    GroupedChatsResponse,
    MessagesResponse,
    NotRequestedResponse,
    PopulatedChatDTO,
    RepliedResponse,
    ReplyFailedResponse,
    UpdateChatRequest,
)
from api.features.chats.entities import Role
from api.features.chats.exceptions import ChatNotFoundError
from api.features.chats.repository import ChatRepository
from api.shared.exceptions import ValidationError
from core.recency import RecencyBucket, group_by_recency, utc_now

logger = structlog.get_logger("chat.chats")


def _is_blank(value: Optional[str]) -> bool:
    return value is None or not value.strip()


class ChatController:
    """Validates chat requests, delegates to the repository or orchestrator."""

    def __init__(
        self,
        chat_repository: ChatRepository,
        orchestrator: AIOrchestrator,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self.chat_repository = chat_repository
        self.orchestrator = orchestrator
        self._clock = clock

    async def list_chats(self) -> List[ChatDTO]:
        chats = await self.chat_repository.get_all_chats()
        return [ChatDTO.model_validate(c) for c in chats]

    async def list_chats_grouped(self, tz: Optional[str] = None) -> GroupedChatsResponse:
        """Group chats by recency as seen from ``tz`` (an IANA zone name).

        "Today" is the calendar day in that zone; without ``tz`` it is the UTC day.
        """
        now = self._clock()
        if tz:
            try:
                now = now.astimezone(ZoneInfo(tz))
            except (ZoneInfoNotFoundError, ValueError, OSError):
                raise ValidationError(f"Unknown time zone '{tz}'", {"field": "tz"})
        chats = await self.chat_repository.get_all_chats()
        groups = group_by_recency(chats, key=lambda c: c.updated_at, now=now)
        return GroupedChatsResponse(
            today=[ChatDTO.model_validate(c) for c in groups[RecencyBucket.TODAY]],
            previous_7_days=[
                ChatDTO.model_validate(c) for c in groups[RecencyBucket.PREVIOUS_7_DAYS]
            ],
            previous_30_days=[
                ChatDTO.model_validate(c) for c in groups[RecencyBucket.PREVIOUS_30_DAYS]
            ],
            older=[ChatDTO.model_validate(c) for c in groups[RecencyBucket.OLDER]],
        )

    async def create_chat(self, request: Optional[CreateChatRequest]) -> PopulatedChatDTO:
        request = request or CreateChatRequest()
        if _is_blank(request.title) or _is_blank(request.project_id):
            raise ValidationError("Missing required fields: title and projectId")
        chat = await self.chat_repository.create_chat(
            title=request.title, project_id=request.project_id
        )
        return PopulatedChatDTO.model_validate(chat)

    async def get_chat(self, chat_id: str) -> Optional[PopulatedChatDTO]:
        chat = await self.chat_repository.get_chat_by_id(chat_id)
        return PopulatedChatDTO.model_validate(chat) if chat else None

    async def update_chat(self, chat_id: str, request: UpdateChatRequest) -> ChatDTO:
        provided = request.model_fields_set
        if not provided & {"title", "project_id"}:
            raise ValidationError("At least one field must be provided for update")
        if "title" in provided and _is_blank(request.title):
            raise ValidationError("Title cannot be empty", {"field": "title"})

        changes = {}
        if "title" in provided:
            changes["title"] = request.title
        if "project_id" in provided:
            changes["project_id"] = request.project_id

        chat = await self.chat_repository.update_chat(chat_id, **changes)
        if chat is None:
            raise ChatNotFoundError(chat_id)
        return ChatDTO.model_validate(chat)

    async def delete_chat(self, chat_id: str) -> None:
        if not await self.chat_repository.delete_chat(chat_id):
            raise ChatNotFoundError(chat_id)

    async def generate_title(self, chat_id: str) -> ChatDTO:
        chat = await self.orchestrator.retitle_chat(chat_id)
        if chat is None:
            raise ChatNotFoundError(chat_id)
        return ChatDTO.model_validate(chat)

    async def get_messages(self, chat_id: str) -> MessagesResponse:
        messages = await self.chat_repository.get_all_messages_in_chat(chat_id)
        if messages is None:
            raise ChatNotFoundError(chat_id)
        return MessagesResponse(
            messages=[ChatMessageDTO.model_validate(m) for m in messages]
        )

    async def create_message(
        self, chat_id: str, request: CreateMessageRequest
    ) -> CreateMessageResponse:
        if _is_blank(request.role) or _is_blank(request.content):
            raise ValidationError("Missing required fields: role and content")
        try:
            role = Role(request.role)
        except ValueError:
            raise ValidationError(
                f"Invalid role '{request.role}'",
                {"allowed": [r.value for r in Role]},
            )

        outcome = await self.orchestrator.respond_to_new_message(
            chat_id, role, request.content
        )
        if outcome is None:
            raise ChatNotFoundError(chat_id)

        if isinstance(outcome, Replied):
            return RepliedResponse(
                user_message=ChatMessageDTO.model_validate(outcome.user_message),
                ai_message=ChatMessageDTO.model_validate(outcome.ai_message),
            )
        if isinstance(outcome, ReplyFailed):
            return ReplyFailedResponse(
                user_message=ChatMessageDTO.model_validate(outcome.user_message),
                error=outcome.error.message,
            )
        if isinstance(outcome, NotRequested):
            return NotRequestedResponse(
                message=ChatMessageDTO.model_validate(outcome.message)
            )
        raise TypeError(f"Unhandled reply outcome: {outcome!r}")

    async def generate_message(self, chat_id: str) -> ChatMessageDTO:
        message = await self.orchestrator.generate_reply(chat_id)
        if message is None:
            raise ChatNotFoundError(chat_id)
        return ChatMessageDTO.model_validate(message)

    async def clear_messages(self, chat_id: str) -> None:
        if not await self.chat_repository.delete_all_messages_in_chat(chat_id):
            raise ChatNotFoundError(chat_id)
        logger.info("chat_messages_cleared", chat_id=chat_id)
