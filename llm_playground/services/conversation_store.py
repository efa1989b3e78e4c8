"""Conversation history store — conversations, messages and per-LLM responses.

In-memory implementation of the history persistence collaborator.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _new_id() -> str:
    return str(uuid.uuid4())


@dataclass
class LlmResponseRecord:
    message_id: str
    llm_config_id: str
    llm_name: str
    content: str
    response_time: str
    tokens_used: dict[str, Any] | None = None
    error: str | None = None
    id: str = field(default_factory=_new_id)
    created_at: datetime = field(default_factory=_now)


@dataclass
class Message:
    conversation_id: str
    role: str  # "user" or "assistant"
    content: str
    selected_models: list[str] | None = None
    responses: list[LlmResponseRecord] = field(default_factory=list)
    id: str = field(default_factory=_new_id)
    created_at: datetime = field(default_factory=_now)


@dataclass
class Conversation:
    owner_id: str
    title: str
    id: str = field(default_factory=_new_id)
    created_at: datetime = field(default_factory=_now)
    updated_at: datetime = field(default_factory=_now)


class ConversationStore:
    def __init__(self) -> None:
        self._conversations: dict[str, Conversation] = {}
        self._messages: dict[str, list[Message]] = {}

    async def create_conversation(self, owner_id: str, title: str) -> Conversation:
        conversation = Conversation(owner_id=owner_id, title=title)
        self._conversations[conversation.id] = conversation
        self._messages[conversation.id] = []
        return conversation

    async def get_conversation(self, owner_id: str, conversation_id: str) -> Conversation | None:
        conversation = self._conversations.get(conversation_id)
        if conversation is None or conversation.owner_id != owner_id:
            return None
        return conversation

    async def list_conversations(self, owner_id: str, limit: int = 50) -> list[Conversation]:
        """Most recently updated first."""
        owned = [c for c in self._conversations.values() if c.owner_id == owner_id]
        owned.sort(key=lambda c: c.updated_at, reverse=True)
        return owned[:limit]

    async def add_message(
        self,
        conversation: Conversation,
        role: str,
        content: str,
        selected_models: list[str] | None = None,
    ) -> Message:
        message = Message(
            conversation_id=conversation.id,
            role=role,
            content=content,
            selected_models=selected_models,
        )
        self._messages.setdefault(conversation.id, []).append(message)
        return message

    async def add_response(self, message: Message, **fields: Any) -> LlmResponseRecord:
        record = LlmResponseRecord(message_id=message.id, **fields)
        message.responses.append(record)
        return record

    async def list_messages(self, conversation: Conversation) -> list[Message]:
        """Oldest first."""
        return sorted(self._messages.get(conversation.id, []), key=lambda m: m.created_at)

    async def touch(self, conversation: Conversation) -> None:
        conversation.updated_at = _now()
