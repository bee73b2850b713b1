"""Exceptions for the Chats feature."""
from api.shared.exceptions import NotFoundError


class ChatNotFoundError(NotFoundError):
    """Raised when a chat is not found."""

    def __init__(self, chat_id: str):
        super().__init__("Chat", chat_id)
