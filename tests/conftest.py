import asyncio
from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient

from ai.orchestrator import AIOrchestrator
from ai.providers import ModelProvider, ModelProviderKind
from api.features.chats.repository import ChatRepository
from api.features.projects.repository import ProjectRepository

NOW = datetime(2025, 9, 12, 14, 0, tzinfo=timezone.utc)


class TickingClock:
    """Returns a strictly increasing time on every call."""

    def __init__(self, start: datetime = NOW, step: timedelta = timedelta(seconds=1)):
        self.current = start
        self.step = step

    def __call__(self) -> datetime:
        value = self.current
        self.current = self.current + self.step
        return value


class FakeModelProvider(ModelProvider):
    """Records calls; replies with ``reply`` or raises ``error``."""

    kind = ModelProviderKind.OPENAI
    default_model = "fake-model"

    def __init__(self, reply: str = "Hi there!"):
        self.reply = reply
        self.error = None
        self.delay = 0.0
        self.gate = None
        self.started = asyncio.Event()
        self.calls = []

    async def generate_text(self, model, messages, *, instruction=None):
        self.calls.append(
            {"model": model, "messages": list(messages), "instruction": instruction}
        )
        self.started.set()
        if self.gate is not None:
            await self.gate.wait()
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return self.reply


@pytest.fixture
def clock():
    return TickingClock()


@pytest.fixture
def project_repository(clock):
    return ProjectRepository(clock=clock)


@pytest.fixture
def chat_repository(project_repository, clock):
    return ChatRepository(project_repository, clock=clock)


@pytest.fixture
def fake_provider():
    return FakeModelProvider()


@pytest.fixture
def orchestrator(chat_repository, fake_provider):
    return AIOrchestrator(chat_repository, fake_provider, timeout_seconds=1.0)


@pytest.fixture
def client(fake_provider):
    """API client whose container answers with the fake provider."""
    from api.main import create_fastapi_app

    app = create_fastapi_app()
    app.container.infrastructure.model_provider.override(fake_provider)
    with TestClient(app) as test_client:
        yield test_client
    app.container.infrastructure.model_provider.reset_override()
