"""Chat message entity."""
from dataclasses import dataclass, replace
from enum import Enum

from api.shared.entities.base import BaseEntity


class Role(str, Enum):
    """Author of a chat message."""

    USER = "user"
    ASSISTANT = "assistant"


@dataclass(repr=False)
class ChatMessage(BaseEntity):
    """One turn in a chat. Never edited after creation."""

    content: str = ""
    role: Role = Role.USER

    def snapshot(self) -> "ChatMessage":
        return replace(self)
