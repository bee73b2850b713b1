"""Chat entities module."""
from .chat import Chat, PopulatedChat
from .message import ChatMessage, Role

__all__ = ["Chat", "ChatMessage", "PopulatedChat", "Role"]
