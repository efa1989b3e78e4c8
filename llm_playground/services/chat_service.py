"""Chat service — one prompt, many LLMs, recorded into a conversation."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from llm_playground.gateway.dispatcher import LlmDispatcher
from llm_playground.gateway.types import CompletionRequest, DispatchOutcome
from llm_playground.services.config_store import StoredConfig
from llm_playground.services.conversation_store import Conversation, ConversationStore, Message

logger = logging.getLogger(__name__)

TITLE_MAX_CHARS = 50


def conversation_title(prompt: str) -> str:
    """First 50 characters of the prompt, with an ellipsis when cut."""
    if len(prompt) > TITLE_MAX_CHARS:
        return prompt[:TITLE_MAX_CHARS] + "..."
    return prompt


@dataclass
class ChatExchange:
    conversation: Conversation
    user_message: Message
    assistant_message: Message


class ChatService:
    def __init__(self, conversations: ConversationStore, dispatcher: LlmDispatcher | None = None):
        self.conversations = conversations
        self.dispatcher = dispatcher or LlmDispatcher()

    async def send(
        self,
        owner_id: str,
        request: CompletionRequest,
        configs: list[StoredConfig],
        conversation: Conversation | None = None,
    ) -> ChatExchange:
        """Dispatch the prompt to every config and store the exchange.

        `configs` must already be validated and owned by `owner_id`.
        """
        if conversation is None:
            conversation = await self.conversations.create_conversation(owner_id, conversation_title(request.prompt))

        user_message = await self.conversations.add_message(
            conversation,
            role="user",
            content=request.prompt,
            selected_models=[c.id for c in configs],
        )

        outcomes = await self.dispatcher.call_many([c.to_provider_config() for c in configs], request)

        # Assistant content lives in the per-LLM responses
        assistant_message = await self.conversations.add_message(conversation, role="assistant", content="")
        names = {c.id: c.name for c in configs}
        for outcome in outcomes:
            await self._record_outcome(assistant_message, outcome, names.get(outcome.config_id, "Unknown"))

        await self.conversations.touch(conversation)
        logger.info(
            "Conversation %s: prompt sent to %d LLMs for owner %s",
            conversation.id,
            len(outcomes),
            owner_id,
        )
        return ChatExchange(conversation, user_message, assistant_message)

    async def _record_outcome(self, message: Message, outcome: DispatchOutcome, llm_name: str) -> None:
        result = outcome.result
        await self.conversations.add_response(
            message,
            llm_config_id=outcome.config_id,
            llm_name=llm_name,
            content=result.content,
            tokens_used=result.tokens_used.to_dict() if result.tokens_used else None,
            response_time=f"{result.elapsed_ms}ms",
            error=result.error,
        )
