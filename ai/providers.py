"""Language-model backends.

Each provider turns an ordered chat history into one block of assistant text.
Both variants talk to an OpenAI-compatible chat completions API through
LangChain's ``ChatOpenAI``: the hosted OpenAI service, or a local Ollama
server on its ``/v1`` endpoint. Which one is used comes from configuration
(``AI_PROVIDER``), never from inspecting the model name.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from enum import Enum
from typing import Dict, List, Optional, Sequence, Union

from langchain_core.messages import AIMessage, BaseMessage, HumanMessage, SystemMessage
from langchain_openai import ChatOpenAI
from pydantic import SecretStr

from api.features.chats.entities import ChatMessage, Role


class ModelProviderKind(str, Enum):
    OPENAI = "openai"
    OLLAMA = "ollama"


def to_langchain_messages(
    messages: Sequence[ChatMessage], instruction: Optional[str] = None
) -> List[BaseMessage]:
    """Map chat history onto LangChain message types, keeping order."""
    converted: List[BaseMessage] = []
    if instruction:
        converted.append(SystemMessage(content=instruction))
    for message in messages:
        if message.role == Role.ASSISTANT:
            converted.append(AIMessage(content=message.content))
        else:
            converted.append(HumanMessage(content=message.content))
    return converted


class ModelProvider(ABC):
    """Capability shared by every backend: generate text from a history."""

    kind: ModelProviderKind
    default_model: str

    @abstractmethod
    async def generate_text(
        self,
        model: Optional[str],
        messages: Sequence[ChatMessage],
        *,
        instruction: Optional[str] = None,
    ) -> str:
        """Return the raw reply text for ``messages``."""

    def resolve_model(self, model: Optional[str]) -> str:
        return model or self.default_model


class ChatOpenAIModelProvider(ModelProvider):
    """Provider backed by ``ChatOpenAI`` against some OpenAI-compatible URL."""

    def __init__(
        self,
        *,
        api_key: Union[str, SecretStr, None],
        base_url: Optional[str],
        default_model: str,
        temperature: float = 0.7,
        timeout: Optional[float] = None,
    ):
        if isinstance(api_key, SecretStr):
            api_key = api_key.get_secret_value()
        self.api_key = api_key
        self.base_url = base_url
        self.default_model = default_model
        self.temperature = temperature
        self.timeout = timeout
        self._llms: Dict[str, ChatOpenAI] = {}

    def build_llm(self, model: str) -> ChatOpenAI:
        return ChatOpenAI(
            model=model,
            temperature=self.temperature,
            api_key=self.api_key,
            base_url=self.base_url,
            timeout=self.timeout,
            max_retries=0,
        )

    def get_llm(self, model: str) -> ChatOpenAI:
        """One client per model name, built on first use."""
        llm = self._llms.get(model)
        if llm is None:
            llm = self._llms[model] = self.build_llm(model)
        return llm

    async def generate_text(
        self,
        model: Optional[str],
        messages: Sequence[ChatMessage],
        *,
        instruction: Optional[str] = None,
    ) -> str:
        llm = self.get_llm(self.resolve_model(model))
        result = await llm.ainvoke(to_langchain_messages(messages, instruction))
        content = result.content
        if isinstance(content, list):
            # multi-part content: keep the text parts only
            content = "".join(
                part if isinstance(part, str) else str(part.get("text", ""))
                for part in content
            )
        return content or ""


class OpenAIModelProvider(ChatOpenAIModelProvider):
    """Hosted OpenAI models."""

    kind = ModelProviderKind.OPENAI

    def __init__(
        self,
        *,
        api_key: Union[str, SecretStr],
        base_url: Optional[str] = None,
        default_model: str = "gpt-4o-mini",
        temperature: float = 0.7,
        timeout: Optional[float] = None,
    ):
        super().__init__(
            api_key=api_key,
            base_url=base_url,
            default_model=default_model,
            temperature=temperature,
            timeout=timeout,
        )


class OllamaModelProvider(ChatOpenAIModelProvider):
    """Locally hosted models served by Ollama."""

    kind = ModelProviderKind.OLLAMA

    def __init__(
        self,
        *,
        base_url: str = "http://localhost:11434/v1",
        default_model: str = "llama3.2",
        temperature: float = 0.7,
        timeout: Optional[float] = None,
    ):
        # Ollama ignores the key, but the OpenAI client refuses to start without one
        super().__init__(
            api_key="ollama",
            base_url=base_url,
            default_model=default_model,
            temperature=temperature,
            timeout=timeout,
        )
