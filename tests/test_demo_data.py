from api.features.chats.entities import Role
from infra.demo_data import seed_demo_data


async def test_seed_demo_data(project_repository, chat_repository):
    chat = await seed_demo_data(project_repository, chat_repository)

    projects = await project_repository.get_all_projects()
    assert [p.name for p in projects] == ["Project 1"]
    assert chat.project_id == projects[0].id

    messages = await chat_repository.get_all_messages_in_chat(chat.id)
    assert [(m.role, m.content) for m in messages] == [
        (Role.USER, "Hello!"),
        (Role.ASSISTANT, "Hello! How can I help you today?"),
    ]
