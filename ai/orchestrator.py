"""Chat orchestration: persist messages, ask the model, persist the reply.

Store locks are only held inside individual repository calls. The model call
sits between two such calls, so a slow provider never blocks other requests
on the store.
"""
from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Optional, Sequence, Union

import structlog

from ai.prompts.title import build_title_instruction, clean_title
from ai.providers import ModelProvider
from api.features.chats.entities import Chat, ChatMessage, Role
from api.features.chats.repository import DEFAULT_CHAT_TITLE, ChatRepository
from api.shared.exceptions import ChatServiceException, GenerationError, NoInputError

logger = structlog.get_logger("chat.ai")


@dataclass(frozen=True)
class Replied:
    """The user message was stored and an assistant reply was generated and stored."""

    user_message: ChatMessage
    ai_message: ChatMessage


@dataclass(frozen=True)
class ReplyFailed:
    """The user message was stored; generating or storing the reply failed."""

    user_message: ChatMessage
    error: ChatServiceException


@dataclass(frozen=True)
class NotRequested:
    """A non-user message was stored; no reply is generated for those."""

    message: ChatMessage


ReplyOutcome = Union[Replied, ReplyFailed, NotRequested]


class AIOrchestrator:
    def __init__(
        self,
        chat_repository: ChatRepository,
        model_provider: ModelProvider,
        *,
        model: Optional[str] = None,
        timeout_seconds: float = 30.0,
    ):
        self.chat_repository = chat_repository
        self.model_provider = model_provider
        self.model = model or None
        self.timeout_seconds = timeout_seconds

    async def _call_provider(
        self, history: Sequence[ChatMessage], *, instruction: Optional[str] = None
    ) -> str:
        model = self.model_provider.resolve_model(self.model)
        try:
            text = await asyncio.wait_for(
                self.model_provider.generate_text(
                    model, list(history), instruction=instruction
                ),
                timeout=self.timeout_seconds,
            )
        except asyncio.TimeoutError:
            logger.warning(
                "provider_timeout", model=model, timeout_seconds=self.timeout_seconds
            )
            raise GenerationError(
                f"Model '{model}' did not answer within {self.timeout_seconds}s",
                {"model": model, "timeout_seconds": self.timeout_seconds},
            )
        except Exception as e:
            logger.error("provider_failed", model=model, error=str(e))
            raise GenerationError(
                f"Model '{model}' request failed: {e}", {"model": model}
            ) from e
        return (text or "").strip()

    async def generate_response(self, history: Sequence[ChatMessage]) -> str:
        """Assistant reply to ``history``.

        An empty history means the caller has nothing to respond to, which is
        a bug on their side, so it raises ``NoInputError`` instead of asking
        the model for a reply to nothing.
        """
        if not history:
            raise NoInputError()
        text = await self._call_provider(history)
        if not text:
            raise GenerationError("Empty response from model")
        return text

    async def generate_title(self, history: Sequence[ChatMessage]) -> str:
        """Short title summarizing ``history``; the default title when it is empty."""
        if not history:
            return DEFAULT_CHAT_TITLE
        raw = await self._call_provider(history, instruction=build_title_instruction())
        return clean_title(raw, DEFAULT_CHAT_TITLE)

    async def respond_to_new_message(
        self, chat_id: str, role: Role, content: str
    ) -> Optional[ReplyOutcome]:
        """Store an inbound message and, for user messages, answer it.

        Returns None when the chat does not exist. A failed reply never undoes
        the stored user message; it comes back as ``ReplyFailed``.
        """
        role = Role(role)
        message = await self.chat_repository.create_message_in_chat(
            chat_id, role=role, content=content
        )
        if message is None:
            return None
        if role is not Role.USER:
            return NotRequested(message=message)

        try:
            history = await self.chat_repository.get_all_messages_in_chat(chat_id) or []
            reply = await self.generate_response(history)
        except GenerationError as e:
            logger.error(
                "reply_generation_failed",
                chat_id=chat_id,
                user_message_id=message.id,
                error=e.message,
            )
            return ReplyFailed(user_message=message, error=e)

        ai_message = await self.chat_repository.create_message_in_chat(
            chat_id, role=Role.ASSISTANT, content=reply
        )
        if ai_message is None:
            logger.warning("chat_removed_before_reply", chat_id=chat_id)
            return ReplyFailed(
                user_message=message,
                error=ChatServiceException(
                    "Chat was deleted before the reply could be stored",
                    "CHAT_REMOVED",
                    {"chat_id": chat_id},
                ),
            )
        return Replied(user_message=message, ai_message=ai_message)

    async def generate_reply(self, chat_id: str) -> Optional[ChatMessage]:
        """Generate and store an assistant message from the chat's current history."""
        history = await self.chat_repository.get_all_messages_in_chat(chat_id)
        if history is None:
            return None
        if not history:
            raise NoInputError(chat_id)
        reply = await self.generate_response(history)
        return await self.chat_repository.create_message_in_chat(
            chat_id, role=Role.ASSISTANT, content=reply
        )

    async def retitle_chat(self, chat_id: str) -> Optional[Chat]:
        """Replace the chat's title with one generated from its history."""
        history = await self.chat_repository.get_all_messages_in_chat(chat_id)
        if history is None:
            return None
        title = await self.generate_title(history)
        logger.info("chat_retitled", chat_id=chat_id, title=title)
        return await self.chat_repository.update_chat(chat_id, title=title)
