import asyncio

from api.features.chats.entities import Role
from api.features.chats.repository import DEFAULT_CHAT_TITLE


async def test_create_chat_defaults(chat_repository):
    chat = await chat_repository.create_chat()

    assert chat.title == DEFAULT_CHAT_TITLE
    assert chat.messages == []
    assert chat.project_id is None
    assert chat.project is None
    assert chat.created_at == chat.updated_at


async def test_create_chat_populates_project(chat_repository, project_repository):
    project = await project_repository.create_project("Work")

    chat = await chat_repository.create_chat("Plans", project.id)

    assert chat.project_id == project.id
    assert chat.project.name == "Work"


async def test_dangling_project_id_resolves_to_no_project(chat_repository):
    chat = await chat_repository.create_chat("Orphan", "no-such-project")

    fetched = await chat_repository.get_chat_by_id(chat.id)
    assert fetched.project_id == "no-such-project"
    assert fetched.project is None


async def test_deleting_a_project_does_not_touch_its_chats(
    chat_repository, project_repository
):
    project = await project_repository.create_project("Gone soon")
    chat = await chat_repository.create_chat("Stays", project.id)

    await project_repository.delete_project(project.id)

    fetched = await chat_repository.get_chat_by_id(chat.id)
    assert fetched.project_id == project.id
    assert fetched.project is None


async def test_ids_are_unique(chat_repository):
    chats = [await chat_repository.create_chat() for _ in range(20)]
    assert len({c.id for c in chats}) == 20


async def test_messages_keep_creation_order(chat_repository):
    chat = await chat_repository.create_chat()
    for i in range(5):
        await chat_repository.create_message_in_chat(
            chat.id, role=Role.USER, content=f"message {i}"
        )

    messages = await chat_repository.get_all_messages_in_chat(chat.id)
    assert [m.content for m in messages] == [f"message {i}" for i in range(5)]


async def test_create_message_touches_the_chat(chat_repository):
    chat = await chat_repository.create_chat()

    message = await chat_repository.create_message_in_chat(
        chat.id, role=Role.USER, content="hello"
    )

    fetched = await chat_repository.get_chat_by_id(chat.id)
    assert fetched.updated_at == message.created_at
    assert fetched.updated_at > chat.updated_at


async def test_create_message_in_unknown_chat(chat_repository):
    message = await chat_repository.create_message_in_chat(
        "missing", role=Role.USER, content="hello"
    )
    assert message is None


async def test_get_all_chats_orders_by_activity_and_keeps_last_message(chat_repository):
    first = await chat_repository.create_chat("first")
    second = await chat_repository.create_chat("second")
    await chat_repository.create_message_in_chat(first.id, role=Role.USER, content="q")
    await chat_repository.create_message_in_chat(
        first.id, role=Role.ASSISTANT, content="a"
    )

    chats = await chat_repository.get_all_chats()

    assert [c.id for c in chats] == [first.id, second.id]
    assert [m.content for m in chats[0].messages] == ["a"]
    assert chats[1].messages == []


async def test_update_chat_is_partial(chat_repository, project_repository):
    project = await project_repository.create_project("P")
    chat = await chat_repository.create_chat("Before", project.id)

    renamed = await chat_repository.update_chat(chat.id, title="After")
    assert renamed.title == "After"
    assert renamed.project_id == project.id
    assert renamed.updated_at > chat.updated_at

    detached = await chat_repository.update_chat(chat.id, project_id=None)
    assert detached.title == "After"
    assert detached.project_id is None


async def test_update_unknown_chat(chat_repository):
    assert await chat_repository.update_chat("missing", title="x") is None


async def test_delete_chat_removes_its_messages(chat_repository):
    chat = await chat_repository.create_chat()
    await chat_repository.create_message_in_chat(chat.id, role=Role.USER, content="hi")

    assert await chat_repository.delete_chat(chat.id) is True

    assert await chat_repository.get_chat_by_id(chat.id) is None
    assert await chat_repository.get_all_messages_in_chat(chat.id) is None
    assert await chat_repository.delete_chat(chat.id) is False


async def test_delete_all_messages(chat_repository):
    chat = await chat_repository.create_chat()
    await chat_repository.create_message_in_chat(chat.id, role=Role.USER, content="hi")

    assert await chat_repository.delete_all_messages_in_chat(chat.id) is True
    assert await chat_repository.get_all_messages_in_chat(chat.id) == []
    assert await chat_repository.delete_all_messages_in_chat("missing") is False


async def test_delete_all_messages_touches_the_chat(chat_repository):
    chat = await chat_repository.create_chat()
    await chat_repository.create_message_in_chat(chat.id, role=Role.USER, content="hi")
    before = await chat_repository.get_chat_by_id(chat.id)

    await chat_repository.delete_all_messages_in_chat(chat.id)

    after = await chat_repository.get_chat_by_id(chat.id)
    assert after.updated_at > before.updated_at
    assert after.created_at == before.created_at


async def test_returned_chats_are_snapshots(chat_repository):
    chat = await chat_repository.create_chat()
    await chat_repository.create_message_in_chat(chat.id, role=Role.USER, content="hi")

    fetched = await chat_repository.get_chat_by_id(chat.id)
    fetched.messages.clear()
    fetched.title = "tampered"
    messages = await chat_repository.get_all_messages_in_chat(chat.id)
    messages[0].content = "tampered"

    again = await chat_repository.get_chat_by_id(chat.id)
    assert again.title == DEFAULT_CHAT_TITLE
    assert [m.content for m in again.messages] == ["hi"]


async def test_concurrent_appends_are_all_kept(chat_repository):
    chat = await chat_repository.create_chat()

    created = await asyncio.gather(
        *(
            chat_repository.create_message_in_chat(
                chat.id, role=Role.USER, content=str(i)
            )
            for i in range(50)
        )
    )

    messages = await chat_repository.get_all_messages_in_chat(chat.id)
    assert len(messages) == 50
    assert len({m.id for m in messages}) == 50
    assert [m.id for m in messages] == [m.id for m in created]
