"""Router for the Chats feature."""
from typing import List, Optional

from dependency_injector.wiring import Provide, inject
from fastapi import APIRouter, Depends, Response, status

from api.features.chats.controller import ChatController
from api.features.chats.dtos import (
    ChatDTO,
    ChatMessageDTO,
    CreateChatRequest,
    CreateMessageRequest,
    CreateMessageResponse,
    GroupedChatsResponse,
    MessagesResponse,
    PopulatedChatDTO,
    UpdateChatRequest,
)
from di.container import ApplicationContainer

router = APIRouter()


@router.get("", response_model=List[ChatDTO])
@inject
async def list_chats(
    controller: ChatController = Depends(
        Provide[ApplicationContainer.controllers.chat_controller]
    ),
):
    """Chats by latest activity, each with only its last message."""
    return await controller.list_chats()


@router.get("/grouped", response_model=GroupedChatsResponse)
@inject
async def list_chats_grouped(
    tz: Optional[str] = None,
    controller: ChatController = Depends(
        Provide[ApplicationContainer.controllers.chat_controller]
    ),
):
    """Chats split into recency groups; ``tz`` sets the zone that decides "today"."""
    return await controller.list_chats_grouped(tz)


@router.post("", response_model=PopulatedChatDTO, status_code=status.HTTP_201_CREATED)
@inject
async def create_chat(
    request: Optional[CreateChatRequest] = None,
    controller: ChatController = Depends(
        Provide[ApplicationContainer.controllers.chat_controller]
    ),
):
    return await controller.create_chat(request)


@router.get("/{chat_id}", response_model=Optional[PopulatedChatDTO])
@inject
async def get_chat(
    chat_id: str,
    controller: ChatController = Depends(
        Provide[ApplicationContainer.controllers.chat_controller]
    ),
):
    """The chat with its project, or ``null`` when it does not exist."""
    return await controller.get_chat(chat_id)


@router.patch("/{chat_id}", response_model=ChatDTO)
@inject
async def update_chat(
    chat_id: str,
    request: UpdateChatRequest,
    controller: ChatController = Depends(
        Provide[ApplicationContainer.controllers.chat_controller]
    ),
):
    return await controller.update_chat(chat_id, request)


@router.delete("/{chat_id}", status_code=status.HTTP_204_NO_CONTENT)
@inject
async def delete_chat(
    chat_id: str,
    controller: ChatController = Depends(
        Provide[ApplicationContainer.controllers.chat_controller]
    ),
):
    await controller.delete_chat(chat_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{chat_id}/title", response_model=ChatDTO)
@inject
async def generate_title(
    chat_id: str,
    controller: ChatController = Depends(
        Provide[ApplicationContainer.controllers.chat_controller]
    ),
):
    """Replace the chat title with one summarizing its messages."""
    return await controller.generate_title(chat_id)


@router.get("/{chat_id}/messages", response_model=MessagesResponse)
@inject
async def get_messages(
    chat_id: str,
    controller: ChatController = Depends(
        Provide[ApplicationContainer.controllers.chat_controller]
    ),
):
    return await controller.get_messages(chat_id)


@router.post(
    "/{chat_id}/messages",
    response_model=CreateMessageResponse,
    status_code=status.HTTP_201_CREATED,
)
@inject
async def create_message(
    chat_id: str,
    request: CreateMessageRequest,
    controller: ChatController = Depends(
        Provide[ApplicationContainer.controllers.chat_controller]
    ),
):
    """Store a message; user messages also get an assistant reply when possible."""
    return await controller.create_message(chat_id, request)


@router.delete("/{chat_id}/messages", status_code=status.HTTP_204_NO_CONTENT)
@inject
async def clear_messages(
    chat_id: str,
    controller: ChatController = Depends(
        Provide[ApplicationContainer.controllers.chat_controller]
    ),
):
    await controller.clear_messages(chat_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post(
    "/{chat_id}/messages/generate",
    response_model=ChatMessageDTO,
    status_code=status.HTTP_201_CREATED,
)
@inject
async def generate_message(
    chat_id: str,
    controller: ChatController = Depends(
        Provide[ApplicationContainer.controllers.chat_controller]
    ),
):
    """Generate an assistant message from the existing history."""
    return await controller.generate_message(chat_id)
