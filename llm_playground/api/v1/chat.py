"""Chat endpoint — send one prompt to several LLMs at once."""

from fastapi import APIRouter, Depends

from llm_playground.core.config import settings
from llm_playground.core.dependencies import (
    get_chat_service,
    get_config_store,
    get_conversation_store,
    get_current_user_id,
)
from llm_playground.core.exceptions import BadRequestError, NotFoundError
from llm_playground.gateway.types import CompletionRequest
from llm_playground.schemas.chat import ChatRequest, ChatResponse, MessageItem
from llm_playground.services.chat_service import ChatService
from llm_playground.services.config_store import ConfigStore
from llm_playground.services.conversation_store import ConversationStore

router = APIRouter(prefix="/chat", tags=["chat"])


@router.post("/", response_model=ChatResponse)
async def send_chat(
    body: ChatRequest,
    owner_id: str = Depends(get_current_user_id),
    config_store: ConfigStore = Depends(get_config_store),
    conversation_store: ConversationStore = Depends(get_conversation_store),
    chat_service: ChatService = Depends(get_chat_service),
):
    """Dispatch the prompt to every selected LLM and record the responses.

    Individual LLM failures do not fail the request; they come back as
    responses with `error` set.
    """
    if not body.prompt.strip() or not body.llm_config_ids:
        raise BadRequestError("Prompt and LLM configs are required")

    if len(body.llm_config_ids) > settings.max_llms_per_request:
        raise BadRequestError(f"Maximum {settings.max_llms_per_request} LLMs can be selected")

    if len(set(body.llm_config_ids)) != len(body.llm_config_ids):
        raise BadRequestError("Duplicate LLM configs selected")

    configs = await config_store.get_many(owner_id, body.llm_config_ids)
    if len(configs) != len(body.llm_config_ids):
        raise NotFoundError("Some LLM configurations not found")

    conversation = None
    if body.conversation_id:
        conversation = await conversation_store.get_conversation(owner_id, body.conversation_id)
        if conversation is None:
            raise NotFoundError("Conversation not found")

    request = CompletionRequest(
        prompt=body.prompt,
        system_prompt=body.system_prompt,
        temperature=body.temperature,
        max_tokens=body.max_tokens,
    )
    exchange = await chat_service.send(owner_id, request, configs, conversation)

    return ChatResponse(
        conversation_id=exchange.conversation.id,
        user_message=MessageItem.model_validate(exchange.user_message),
        assistant_message=MessageItem.model_validate(exchange.assistant_message),
    )
