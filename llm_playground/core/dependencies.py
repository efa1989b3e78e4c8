from fastapi import Depends

from llm_playground.core.config import settings
from llm_playground.core.exceptions import UnauthorizedError
from llm_playground.gateway.dispatcher import LlmDispatcher
from llm_playground.services.chat_service import ChatService
from llm_playground.services.config_store import ConfigStore
from llm_playground.services.conversation_store import ConversationStore

_config_store = ConfigStore()
_conversation_store = ConversationStore()
_dispatcher = LlmDispatcher()


async def get_current_user_id() -> str:
    """Principal for ownership scoping.

    Only demo mode is built in; an auth layer replaces this through
    `app.dependency_overrides[get_current_user_id]`.
    """
    if not settings.demo_mode:
        raise UnauthorizedError("Authentication is not configured")
    return settings.demo_user_id


def get_config_store() -> ConfigStore:
    return _config_store


def get_conversation_store() -> ConversationStore:
    return _conversation_store


def get_dispatcher() -> LlmDispatcher:
    return _dispatcher


def get_chat_service(
    conversations: ConversationStore = Depends(get_conversation_store),
    dispatcher: LlmDispatcher = Depends(get_dispatcher),
) -> ChatService:
    return ChatService(conversations, dispatcher)
