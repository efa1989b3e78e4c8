"""Chat and conversation history schemas."""

from datetime import datetime

from pydantic import BaseModel, Field


class ChatRequest(BaseModel):
    prompt: str = Field("", max_length=100_000)
    llm_config_ids: list[str] = Field(default_factory=list)
    conversation_id: str | None = None
    system_prompt: str | None = Field(None, max_length=100_000)
    temperature: float | None = Field(None, ge=0, le=2)
    max_tokens: int | None = Field(None, ge=1, le=200_000)


class TokenUsageItem(BaseModel):
    prompt: int
    completion: int
    total: int | None


class LlmResponseItem(BaseModel):
    id: str
    llm_config_id: str
    llm_name: str
    content: str
    tokens_used: TokenUsageItem | None = None
    response_time: str  # e.g. "532ms"
    error: str | None = None

    model_config = {"from_attributes": True}


class MessageItem(BaseModel):
    id: str
    role: str
    content: str
    selected_models: list[str] | None = None
    responses: list[LlmResponseItem] = []
    created_at: datetime

    model_config = {"from_attributes": True}


class ChatResponse(BaseModel):
    conversation_id: str
    user_message: MessageItem
    assistant_message: MessageItem


class ConversationItem(BaseModel):
    id: str
    title: str
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class ConversationListResponse(BaseModel):
    conversations: list[ConversationItem]


class MessageListResponse(BaseModel):
    messages: list[MessageItem]
