"""In-memory chat store.

Chats own their messages; a single ``asyncio.Lock`` serializes access to the
collection so concurrent appends to the same chat cannot interleave. Every
method returns snapshots, never the stored objects.

Project snapshots for ``PopulatedChat`` are looked up through the project
store after the chat lock has been released; a ``project_id`` whose project no
longer exists resolves to ``project=None``.
"""
from __future__ import annotations

import asyncio
import uuid
from datetime import datetime
from typing import Callable, Dict, List, Optional

import structlog

from api.features.chats.entities import Chat, ChatMessage, PopulatedChat, Role
from api.features.projects.repository import ProjectRepository
from core.recency import utc_now

logger = structlog.get_logger("chat.chats")

DEFAULT_CHAT_TITLE = "New Chat"

_UNSET = object()


class ChatRepository:
    """Owns ``Chat`` and nested ``ChatMessage`` entities."""

    def __init__(
        self,
        project_repository: ProjectRepository,
        clock: Callable[[], datetime] = utc_now,
    ):
        self._project_repository = project_repository
        self._clock = clock
        # dicts keep insertion order, so ties on updated_at stay stable
        self._chats: Dict[str, Chat] = {}
        self._lock = asyncio.Lock()

    def _now(self) -> datetime:
        return self._clock()

    async def _populate(self, chat: Chat) -> PopulatedChat:
        project = None
        if chat.project_id:
            project = await self._project_repository.get_project_by_id(chat.project_id)
        return PopulatedChat.from_chat(chat, project)

    async def create_chat(
        self, title: Optional[str] = None, project_id: Optional[str] = None
    ) -> PopulatedChat:
        now = self._now()
        chat = Chat(
            id=str(uuid.uuid4()),
            created_at=now,
            updated_at=now,
            title=title or DEFAULT_CHAT_TITLE,
            messages=[],
            project_id=project_id,
        )
        async with self._lock:
            self._chats[chat.id] = chat
            snapshot = chat.snapshot()
        logger.info("chat_created", chat_id=chat.id, project_id=project_id)
        return await self._populate(snapshot)

    async def get_chat_by_id(self, chat_id: str) -> Optional[PopulatedChat]:
        async with self._lock:
            chat = self._chats.get(chat_id)
            snapshot = chat.snapshot() if chat else None
        if snapshot is None:
            return None
        return await self._populate(snapshot)

    async def get_all_chats(self) -> List[Chat]:
        """Chats by most recent activity, each carrying only its last message.

        The listing view never needs full histories, so ``messages`` holds at
        most one entry: the newest message of the chat.
        """
        async with self._lock:
            ordered = sorted(
                self._chats.values(), key=lambda c: c.updated_at, reverse=True
            )
            return [
                chat.snapshot(messages=[chat.last_message] if chat.last_message else [])
                for chat in ordered
            ]

    async def update_chat(
        self,
        chat_id: str,
        *,
        title: Optional[str] = None,
        project_id=_UNSET,
    ) -> Optional[Chat]:
        """Partial update of ``title`` and/or ``project_id``.

        ``project_id=None`` detaches the chat from its project; leaving the
        argument out keeps the current one.
        """
        async with self._lock:
            chat = self._chats.get(chat_id)
            if chat is None:
                return None
            if title is not None:
                chat.title = title
            if project_id is not _UNSET:
                chat.project_id = project_id
            chat.touch(self._now())
            return chat.snapshot()

    async def delete_chat(self, chat_id: str) -> bool:
        async with self._lock:
            chat = self._chats.pop(chat_id, None)
            if chat is None:
                return False
            chat.messages.clear()
        logger.info("chat_deleted", chat_id=chat_id)
        return True

    async def get_all_messages_in_chat(self, chat_id: str) -> Optional[List[ChatMessage]]:
        """Full history in creation order, or None when the chat is unknown."""
        async with self._lock:
            chat = self._chats.get(chat_id)
            if chat is None:
                return None
            return [m.snapshot() for m in chat.messages]

    async def create_message_in_chat(
        self, chat_id: str, *, role: Role, content: str
    ) -> Optional[ChatMessage]:
        async with self._lock:
            chat = self._chats.get(chat_id)
            if chat is None:
                return None
            now = self._now()
            message = ChatMessage(
                id=str(uuid.uuid4()),
                created_at=now,
                updated_at=now,
                content=content,
                role=Role(role),
            )
            chat.messages.append(message)
            chat.touch(now)
            return message.snapshot()

    async def delete_all_messages_in_chat(self, chat_id: str) -> bool:
        async with self._lock:
            chat = self._chats.get(chat_id)
            if chat is None:
                return False
            chat.messages = []
            chat.touch(self._now())
            return True
