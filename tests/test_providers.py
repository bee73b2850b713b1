from datetime import datetime, timezone

import pytest
from langchain_core.messages import AIMessage, HumanMessage, SystemMessage
from langchain_openai import ChatOpenAI
from pydantic import SecretStr

from ai.providers import (
    ModelProviderKind,
    OllamaModelProvider,
    OpenAIModelProvider,
    to_langchain_messages,
)
from api.features.chats.entities import ChatMessage, Role
from core.settings import SETTINGS
from di.container import ApplicationContainer

NOW = datetime(2025, 9, 12, 14, 0, tzinfo=timezone.utc)


def _message(role: Role, content: str) -> ChatMessage:
    return ChatMessage(id=content, created_at=NOW, updated_at=NOW, content=content, role=role)


def test_to_langchain_messages_keeps_order_and_roles():
    history = [
        _message(Role.USER, "hi"),
        _message(Role.ASSISTANT, "hello"),
        _message(Role.USER, "bye"),
    ]

    converted = to_langchain_messages(history, instruction="Be brief")

    assert [type(m) for m in converted] == [
        SystemMessage,
        HumanMessage,
        AIMessage,
        HumanMessage,
    ]
    assert [m.content for m in converted] == ["Be brief", "hi", "hello", "bye"]


def test_to_langchain_messages_without_instruction():
    converted = to_langchain_messages([_message(Role.USER, "hi")])
    assert len(converted) == 1
    assert isinstance(converted[0], HumanMessage)


def test_default_models():
    openai = OpenAIModelProvider(api_key="test-key")
    ollama = OllamaModelProvider()

    assert openai.kind is ModelProviderKind.OPENAI
    assert openai.resolve_model(None) == "gpt-4o-mini"
    assert openai.resolve_model("gpt-4o") == "gpt-4o"
    assert ollama.kind is ModelProviderKind.OLLAMA
    assert ollama.resolve_model(None) == "llama3.2"


def test_ollama_talks_to_its_local_endpoint():
    provider = OllamaModelProvider(base_url="http://ollama:11434/v1")

    llm = provider.build_llm("mistral")

    assert llm.model_name == "mistral"
    assert llm.openai_api_base == "http://ollama:11434/v1"


@pytest.mark.parametrize(
    "kind, provider_class",
    [("openai", OpenAIModelProvider), ("ollama", OllamaModelProvider)],
)
def test_container_selects_provider_from_config(kind, provider_class):
    container = ApplicationContainer()
    config = SETTINGS.model_dump()
    config["AI"]["PROVIDER"] = kind
    container.infrastructure.config.from_dict(config)

    provider = container.infrastructure.model_provider()

    assert isinstance(provider, provider_class)


async def test_generate_text_flattens_multipart_content(monkeypatch):
    seen = {}

    async def fake_ainvoke(self, input, config=None, **kwargs):
        seen["model"] = self.model_name
        seen["messages"] = input
        return AIMessage(content=["Hello", {"type": "text", "text": " world"}])

    monkeypatch.setattr(ChatOpenAI, "ainvoke", fake_ainvoke)
    provider = OpenAIModelProvider(api_key="test-key", default_model="gpt-4o")

    text = await provider.generate_text(
        None, [_message(Role.USER, "hi")], instruction="Title please"
    )

    assert text == "Hello world"
    assert seen["model"] == "gpt-4o"
    assert isinstance(seen["messages"][0], SystemMessage)


def test_container_reads_backend_parameters_from_config():
    container = ApplicationContainer()
    config = SETTINGS.model_dump()
    config["AI"].update(
        PROVIDER="ollama", MODEL="qwen2.5", TIMEOUT_SECONDS=5.0, TEMPERATURE=0.1
    )
    config["OLLAMA"]["OLLAMA_BASE_URL"] = "http://gpu-box:11434/v1"
    container.infrastructure.config.from_dict(config)

    provider = container.infrastructure.model_provider()
    orchestrator = container.services.orchestrator()

    assert provider.base_url == "http://gpu-box:11434/v1"
    assert provider.temperature == 0.1
    assert provider.timeout == 5.0
    assert orchestrator.model == "qwen2.5"
    assert orchestrator.timeout_seconds == 5.0
    assert orchestrator.model_provider is provider


def test_openai_key_from_config_is_unwrapped():
    provider = OpenAIModelProvider(api_key=SecretStr("sk-test"))
    assert provider.api_key == "sk-test"


def test_clients_are_reused_per_model():
    provider = OllamaModelProvider()

    first = provider.get_llm("llama3.2")

    assert provider.get_llm("llama3.2") is first
    assert provider.get_llm("mistral") is not first


async def test_generate_text_builds_one_client_per_model(monkeypatch):
    built = []
    original_build_llm = OllamaModelProvider.build_llm

    def counting_build_llm(self, model):
        built.append(model)
        return original_build_llm(self, model)

    async def fake_ainvoke(self, input, config=None, **kwargs):
        return AIMessage(content="ok")

    monkeypatch.setattr(OllamaModelProvider, "build_llm", counting_build_llm)
    monkeypatch.setattr(ChatOpenAI, "ainvoke", fake_ainvoke)
    provider = OllamaModelProvider()

    for _ in range(3):
        await provider.generate_text(None, [_message(Role.USER, "hi")])

    assert built == ["llama3.2"]
