"""Chat entity and its populated read-side view."""
from dataclasses import dataclass, field, replace
from typing import List, Optional

from api.features.chats.entities.message import ChatMessage
from api.features.projects.entities import Project
from api.shared.entities.base import BaseEntity


@dataclass(repr=False)
class Chat(BaseEntity):
    """A titled conversation; ``messages`` is append-only, in creation order."""

    title: str = "New Chat"
    messages: List[ChatMessage] = field(default_factory=list)
    # Not checked on write; a dangling id resolves to no project on read
    project_id: Optional[str] = None

    @property
    def last_message(self) -> Optional[ChatMessage]:
        return self.messages[-1] if self.messages else None

    def snapshot(self, messages: Optional[List[ChatMessage]] = None) -> "Chat":
        """Copy of the chat; ``messages`` replaces the history when given."""
        source = self.messages if messages is None else messages
        return replace(self, messages=[m.snapshot() for m in source])


@dataclass(repr=False)
class PopulatedChat(Chat):
    """Chat plus its resolved project. Built on read, never stored."""

    project: Optional[Project] = None

    @classmethod
    def from_chat(cls, chat: Chat, project: Optional[Project]) -> "PopulatedChat":
        return cls(
            id=chat.id,
            created_at=chat.created_at,
            updated_at=chat.updated_at,
            title=chat.title,
            messages=chat.messages,
            project_id=chat.project_id,
            project=project,
        )
