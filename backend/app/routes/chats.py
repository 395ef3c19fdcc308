"""
Chat Routes
"""
import logging
from fastapi import APIRouter, HTTPException, Depends
from typing import List

from app.models.chat import (
    ChatCreate, ChatUpdate, ChatResponse, ChatSummaryResponse,
    SendMessageRequest, SendMessageResponse, ChatMessage
)
from app.models.summary import MessageResponse
from app.services.chat_service import ChatService, get_chat_service
from app.services.generation_service import GenerationFailed
from app.services.storage_service import StorageService, get_storage_service
from app.routes.auth import get_current_user_id

logger = logging.getLogger(__name__)

router = APIRouter()


def _summary(chat: dict) -> ChatSummaryResponse:
    return ChatSummaryResponse(
        id=chat["id"],
        title=chat["title"],
        starred=chat["starred"],
        message_count=len(chat["messages"]),
        created_at=chat["created_at"],
        updated_at=chat["updated_at"]
    )


@router.post("", response_model=ChatResponse)
async def create_chat(
    request: ChatCreate,
    user_id: str = Depends(get_current_user_id),
    chat_service: ChatService = Depends(get_chat_service)
):
    """Start a new chat thread."""
    result = await chat_service.create_chat(user_id, request.title)

    if not result.get("success"):
        raise HTTPException(status_code=503, detail=result.get("error"))

    return ChatResponse(**result["chat"])


@router.get("", response_model=List[ChatSummaryResponse])
async def list_chats(
    user_id: str = Depends(get_current_user_id),
    db: StorageService = Depends(get_storage_service)
):
    """List the user's chats, most recently active first."""
    chats = await db.list_chats(user_id)
    return [_summary(c) for c in chats]


@router.get("/{chat_id}", response_model=ChatResponse)
async def get_chat(
    chat_id: str,
    user_id: str = Depends(get_current_user_id),
    db: StorageService = Depends(get_storage_service)
):
    """Get a chat with all of its messages."""
    chat = await db.get_chat(chat_id, user_id)
    if not chat:
        raise HTTPException(status_code=404, detail="Chat not found")

    return ChatResponse(**chat)


@router.patch("/{chat_id}", response_model=ChatResponse)
async def update_chat(
    chat_id: str,
    request: ChatUpdate,
    user_id: str = Depends(get_current_user_id),
    db: StorageService = Depends(get_storage_service)
):
    """Rename a chat or toggle its star."""
    chat = await db.update_chat(chat_id, user_id, title=request.title, starred=request.starred)
    if not chat:
        raise HTTPException(status_code=404, detail="Chat not found")

    return ChatResponse(**chat)


@router.delete("/{chat_id}", response_model=MessageResponse)
async def delete_chat(
    chat_id: str,
    user_id: str = Depends(get_current_user_id),
    db: StorageService = Depends(get_storage_service)
):
    """Delete a chat thread."""
    deleted = await db.delete_chat(chat_id, user_id)
    if not deleted:
        raise HTTPException(status_code=404, detail="Chat not found")

    return MessageResponse(message="Chat deleted successfully")


@router.post("/{chat_id}/messages", response_model=SendMessageResponse)
async def send_message(
    chat_id: str,
    request: SendMessageRequest,
    user_id: str = Depends(get_current_user_id),
    chat_service: ChatService = Depends(get_chat_service)
):
    """
    Send a message to the tutor.

    Attachments are described to the tutor by name, type and size only.
    The first message of an untitled chat also names the chat.
    """
    try:
        result = await chat_service.send_message(
            user_id=user_id,
            chat_id=chat_id,
            content=request.content,
            attachments=request.attachments
        )
    except GenerationFailed as e:
        logger.error(f"Chat reply failed for chat {chat_id}: {e}")
        raise HTTPException(status_code=502, detail=str(e))

    if not result.get("success"):
        status_code = 404 if result.get("not_found") else 503
        raise HTTPException(status_code=status_code, detail=result.get("error"))

    return SendMessageResponse(
        chat=ChatResponse(**result["chat"]),
        reply=ChatMessage(**result["reply"])
    )
