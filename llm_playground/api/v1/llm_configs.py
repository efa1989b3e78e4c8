"""LLM config endpoints — register, list and remove provider endpoints."""

from fastapi import APIRouter, Depends

from llm_playground.core.dependencies import get_config_store, get_current_user_id
from llm_playground.core.exceptions import BadRequestError, NotFoundError
from llm_playground.gateway.types import ProviderKind
from llm_playground.schemas.common import MessageResponse
from llm_playground.schemas.llm_config import (
    LlmConfigCreate,
    LlmConfigCreateResponse,
    LlmConfigItem,
    LlmConfigListResponse,
)
from llm_playground.services.config_store import ConfigStore

router = APIRouter(prefix="/llm-configs", tags=["llm-configs"])


@router.get("/", response_model=LlmConfigListResponse)
async def list_llm_configs(
    owner_id: str = Depends(get_current_user_id),
    store: ConfigStore = Depends(get_config_store),
):
    """List the caller's registered LLMs. Credentials are masked."""
    configs = await store.list_for_owner(owner_id)
    return LlmConfigListResponse(configs=[LlmConfigItem.model_validate(c) for c in configs])


@router.post("/", response_model=LlmConfigCreateResponse, status_code=201)
async def create_llm_config(
    body: LlmConfigCreate,
    owner_id: str = Depends(get_current_user_id),
    store: ConfigStore = Depends(get_config_store),
):
    if body.provider == ProviderKind.CUSTOM and not body.api_endpoint:
        raise BadRequestError("API endpoint is required for custom providers")

    stored = await store.create(
        owner_id,
        name=body.name,
        provider=body.provider,
        model=body.model,
        api_key=body.api_key,
        api_endpoint=body.api_endpoint,
        config=body.config,
    )
    return LlmConfigCreateResponse(config=LlmConfigItem.model_validate(stored))


@router.delete("/{config_id}", response_model=MessageResponse)
async def delete_llm_config(
    config_id: str,
    owner_id: str = Depends(get_current_user_id),
    store: ConfigStore = Depends(get_config_store),
):
    if not await store.delete(owner_id, config_id):
        raise NotFoundError("LLM config not found")
    return MessageResponse(message="LLM config deleted")
