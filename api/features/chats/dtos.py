"""DTOs for the Chats feature."""
from typing import List, Literal, Optional, Union

from pydantic import Field

from api.features.chats.entities import Role
from api.features.projects.dtos import ProjectDTO
from api.shared.dtos import BaseDTO, TimestampedDTO


class ChatMessageDTO(TimestampedDTO):
    """Chat message DTO."""

    id: str = Field(description="Message identifier")
    content: str = Field(description="Message content")
    role: Role = Field(description="Message role: user or assistant")


class ChatDTO(TimestampedDTO):
    """Chat DTO. In listings ``messages`` holds only the last message."""

    id: str = Field(description="Chat identifier")
    title: str = Field(description="Chat title")
    messages: List[ChatMessageDTO] = Field(default_factory=list, description="Messages in creation order")
    project_id: Optional[str] = Field(default=None, description="Referenced project, if any")


class PopulatedChatDTO(ChatDTO):
    """Chat with its project resolved."""

    project: Optional[ProjectDTO] = Field(default=None, description="Resolved project")


class CreateChatRequest(BaseDTO):
    """Request to create a chat."""

    title: Optional[str] = Field(default=None, description="Chat title")
    project_id: Optional[str] = Field(default=None, description="Project identifier")


class UpdateChatRequest(BaseDTO):
    """Partial chat update. An explicit ``projectId: null`` detaches the chat."""

    title: Optional[str] = Field(default=None, description="New chat title")
    project_id: Optional[str] = Field(default=None, description="New project identifier")


class CreateMessageRequest(BaseDTO):
    """Append a message to a chat."""

    role: Optional[str] = Field(default=None, description="Message role: user or assistant")
    content: Optional[str] = Field(default=None, description="Message content")


class MessagesResponse(BaseDTO):
    """Full chat history."""

    messages: List[ChatMessageDTO] = Field(description="Messages in creation order")


class RepliedResponse(BaseDTO):
    """User message stored and answered."""

    outcome: Literal["replied"] = "replied"
    user_message: ChatMessageDTO
    ai_message: ChatMessageDTO


class ReplyFailedResponse(BaseDTO):
    """User message stored; the assistant reply could not be produced."""

    outcome: Literal["reply_failed"] = "reply_failed"
    user_message: ChatMessageDTO
    error: str = Field(description="Why no reply was stored")


class NotRequestedResponse(BaseDTO):
    """Non-user message stored without asking for a reply."""

    outcome: Literal["not_requested"] = "not_requested"
    message: ChatMessageDTO


CreateMessageResponse = Union[RepliedResponse, ReplyFailedResponse, NotRequestedResponse]


class GroupedChatsResponse(BaseDTO):
    """Chat listing split into recency groups, each ordered by latest activity."""

    today: List[ChatDTO] = Field(default_factory=list)
    previous_7_days: List[ChatDTO] = Field(default_factory=list)
    previous_30_days: List[ChatDTO] = Field(default_factory=list)
    older: List[ChatDTO] = Field(default_factory=list)
