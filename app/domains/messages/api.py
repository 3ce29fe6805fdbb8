# app/domains/messages/api.py
from fastapi import APIRouter, Depends

from app.domains.auth.dependencies import get_current_user
from app.domains.auth.models import User
from app.shared.schemas.responses import PageParams, ok
from .schemas import EditMessageRequest, SendMessageRequest
from .service import message_service

router = APIRouter()


@router.post("/send/{user_id}", status_code=201)
async def send_message(
    user_id: str, request: SendMessageRequest, user: User = Depends(get_current_user)
):
    data = await message_service.send_message(user, user_id, request)
    return ok(data, message="Message sent")


@router.get("/conversations")
async def list_conversations(page: PageParams = Depends(), user: User = Depends(get_current_user)):
    """Latest message and unread count per peer"""
    conversations, total = await message_service.conversations(user, page.limit, page.offset)
    return ok(conversations, page=page, total=total)


@router.patch("/edit/{message_id}")
async def edit_message(
    message_id: str, request: EditMessageRequest, user: User = Depends(get_current_user)
):
    data = await message_service.edit_message(user, message_id, request.content)
    return ok(data, message="Message updated")


@router.get("/{user_id}")
async def get_messages(
    user_id: str, page: PageParams = Depends(), user: User = Depends(get_current_user)
):
    """Conversation with a user, oldest first within the page"""
    messages, total = await message_service.get_messages(user, user_id, page.limit, page.offset)
    return ok(messages, page=page, total=total)


@router.patch("/{user_id}/read")
async def mark_conversation_read(user_id: str, user: User = Depends(get_current_user)):
    updated = await message_service.mark_read(user, user_id)
    return ok({"updated": updated}, message="Messages marked as read")


@router.delete("/{message_id}")
async def delete_message(message_id: str, user: User = Depends(get_current_user)):
    await message_service.delete_message(user, message_id)
    return ok(message="Message deleted")
