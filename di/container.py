"""Centralized dependency injection container."""
from __future__ import annotations

import structlog
from dependency_injector import containers, providers

from ai.providers import OllamaModelProvider, OpenAIModelProvider
from core.settings import SETTINGS


logger = structlog.get_logger("chat")


class InfrastructureContainer(containers.DeclarativeContainer):
    """Configuration and the language-model backends.

    ``config`` is filled from ``SETTINGS.model_dump()`` at startup; every
    backend parameter is read from it, so overriding the config switches both
    the backend and its settings.
    """

    config = providers.Configuration()
    settings = providers.Object(SETTINGS)
    logger = providers.Object(logger)

    openai_provider = providers.Singleton(
        OpenAIModelProvider,
        api_key=config.OPENAI.OPENAI_API_KEY,
        base_url=config.OPENAI.OPENAI_BASE_URL,
        default_model=config.OPENAI.OPENAI_DEFAULT_MODEL,
        temperature=config.AI.TEMPERATURE,
        timeout=config.AI.TIMEOUT_SECONDS,
    )

    ollama_provider = providers.Singleton(
        OllamaModelProvider,
        base_url=config.OLLAMA.OLLAMA_BASE_URL,
        default_model=config.OLLAMA.OLLAMA_DEFAULT_MODEL,
        temperature=config.AI.TEMPERATURE,
        timeout=config.AI.TIMEOUT_SECONDS,
    )

    # Chosen by AI_PROVIDER; there is no fallback between backends
    model_provider = providers.Selector(
        config.AI.PROVIDER,
        openai=openai_provider,
        ollama=ollama_provider,
    )


class ServiceContainer(containers.DeclarativeContainer):
    """Stores and orchestration - depends on infrastructure."""

    config = providers.Configuration()
    infrastructure = providers.DependenciesContainer()

    # One instance per application: the stores are the process state
    project_repository = providers.Singleton(
        "api.features.projects.repository.ProjectRepository",
    )

    chat_repository = providers.Singleton(
        "api.features.chats.repository.ChatRepository",
        project_repository=project_repository,
    )

    orchestrator = providers.Factory(
        "ai.orchestrator.AIOrchestrator",
        chat_repository=chat_repository,
        model_provider=infrastructure.model_provider,
        model=config.AI.MODEL,
        timeout_seconds=config.AI.TIMEOUT_SECONDS,
    )


class ControllerContainer(containers.DeclarativeContainer):
    """Controller-specific dependencies."""

    services = providers.DependenciesContainer()

    chat_controller = providers.Factory(
        "api.features.chats.controller.ChatController",
        chat_repository=services.chat_repository,
        orchestrator=services.orchestrator,
    )

    project_controller = providers.Factory(
        "api.features.projects.controller.ProjectController",
        project_repository=services.project_repository,
    )


class ApplicationContainer(containers.DeclarativeContainer):
    """Main application container composing all sub-containers."""

    wiring_config = containers.WiringConfiguration(
        modules=[
            "api.features.chats.router",
            "api.features.projects.router",
        ]
    )

    infrastructure = providers.Container(InfrastructureContainer)
    services = providers.Container(
        ServiceContainer,
        config=infrastructure.config,
        infrastructure=infrastructure,
    )
    controllers = providers.Container(ControllerContainer, services=services)
