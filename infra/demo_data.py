"""Demo records for local development (enabled with SEED_DEMO_DATA)."""
import structlog

from api.features.chats.entities import PopulatedChat, Role
from api.features.chats.repository import ChatRepository
from api.features.projects.repository import ProjectRepository

logger = structlog.get_logger("chat.seed")


async def seed_demo_data(
    project_repository: ProjectRepository, chat_repository: ChatRepository
) -> PopulatedChat:
    """Create one project holding a welcome chat with a two-message exchange."""
    project = await project_repository.create_project("Project 1")
    chat = await chat_repository.create_chat(
        title="Welcome to the chat!", project_id=project.id
    )
    await chat_repository.create_message_in_chat(chat.id, role=Role.USER, content="Hello!")
    await chat_repository.create_message_in_chat(
        chat.id, role=Role.ASSISTANT, content="Hello! How can I help you today?"
    )
    logger.info("demo_data_seeded", project_id=project.id, chat_id=chat.id)
    return chat
