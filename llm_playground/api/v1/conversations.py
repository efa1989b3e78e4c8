"""Conversation history endpoints."""

from fastapi import APIRouter, Depends

from llm_playground.core.config import settings
from llm_playground.core.dependencies import get_conversation_store, get_current_user_id
from llm_playground.core.exceptions import NotFoundError
from llm_playground.schemas.chat import (
    ConversationItem,
    ConversationListResponse,
    MessageItem,
    MessageListResponse,
)
from llm_playground.services.conversation_store import ConversationStore

router = APIRouter(prefix="/conversations", tags=["conversations"])


@router.get("/", response_model=ConversationListResponse)
async def list_conversations(
    owner_id: str = Depends(get_current_user_id),
    store: ConversationStore = Depends(get_conversation_store),
):
    """Most recently active conversations first."""
    conversations = await store.list_conversations(owner_id, limit=settings.conversation_list_limit)
    return ConversationListResponse(conversations=[ConversationItem.model_validate(c) for c in conversations])


@router.get("/{conversation_id}/messages", response_model=MessageListResponse)
async def list_messages(
    conversation_id: str,
    owner_id: str = Depends(get_current_user_id),
    store: ConversationStore = Depends(get_conversation_store),
):
    conversation = await store.get_conversation(owner_id, conversation_id)
    if not conversation:
        raise NotFoundError("Conversation not found")

    messages = await store.list_messages(conversation)
    return MessageListResponse(messages=[MessageItem.model_validate(m) for m in messages])
