"""LLM provider config schemas."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from llm_playground.gateway.types import ProviderKind


class LlmConfigCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    provider: ProviderKind
    model: str = Field(..., min_length=1, max_length=200)
    api_key: str = Field(..., min_length=1)
    api_endpoint: str | None = Field(None, max_length=2000)
    config: dict[str, Any] | None = None  # merged into every request body for this config


class LlmConfigItem(BaseModel):
    id: str
    name: str
    provider: str
    model: str
    api_key_prefix: str  # first 4 chars + "..."
    api_endpoint: str | None
    config: dict[str, Any] | None
    is_active: bool
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class LlmConfigListResponse(BaseModel):
    configs: list[LlmConfigItem]


class LlmConfigCreateResponse(BaseModel):
    config: LlmConfigItem
