"""Shared exceptions for the chat API."""
from typing import Any, Dict, Optional


class ChatServiceException(Exception):
    """Base exception for the chat API."""

    status_code: int = 500

    def __init__(
        self,
        message: str,
        error_code: str = "INTERNAL_ERROR",
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        super().__init__(self.message)


class ValidationError(ChatServiceException):
    """Raised when input validation fails."""

    status_code = 400

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, "VALIDATION_ERROR", details)


class NotFoundError(ChatServiceException):
    """Raised when a resource is not found."""

    status_code = 404

    def __init__(self, resource: str, identifier: str):
        message = f"{resource} with identifier '{identifier}' not found"
        super().__init__(message, "NOT_FOUND", {"resource": resource, "identifier": identifier})


class GenerationError(ChatServiceException):
    """Raised when the language model provider fails to produce text."""

    status_code = 502

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        error_code: str = "GENERATION_ERROR",
    ):
        super().__init__(message, error_code, details)


class NoInputError(GenerationError):
    """Raised when a reply is requested for a conversation with no messages."""

    status_code = 400

    def __init__(self, chat_id: Optional[str] = None):
        details = {"chat_id": chat_id} if chat_id else None
        super().__init__(
            "Cannot generate a response without any messages", details, "NO_INPUT"
        )
