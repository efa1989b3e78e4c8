"""Tests for LLM config registration endpoints."""

import pytest
from httpx import AsyncClient

from llm_playground.core.config import settings


@pytest.mark.asyncio
async def test_create_llm_config(client: AsyncClient, config_store):
    response = await client.post(
        "/api/v1/llm-configs/",
        json={"name": "GPT-4o", "provider": "openai", "model": "gpt-4o", "api_key": "sk-secret-value"},
    )
    assert response.status_code == 201
    data = response.json()["config"]
    assert data["name"] == "GPT-4o"
    assert data["provider"] == "openai"
    assert data["api_key_prefix"] == "sk-s..."
    assert data["is_active"] is True
    # Full credential never leaves the server
    assert "sk-secret-value" not in response.text

    stored = await config_store.get(settings.demo_user_id, data["id"])
    assert stored is not None
    assert stored.to_provider_config().credential == "sk-secret-value"


@pytest.mark.asyncio
async def test_create_custom_requires_endpoint(client: AsyncClient):
    response = await client.post(
        "/api/v1/llm-configs/",
        json={"name": "Local", "provider": "custom", "model": "llama3", "api_key": "x"},
    )
    assert response.status_code == 400
    assert response.json()["detail"] == "API endpoint is required for custom providers"


@pytest.mark.asyncio
async def test_create_custom_with_endpoint_and_params(client: AsyncClient):
    response = await client.post(
        "/api/v1/llm-configs/",
        json={
            "name": "Local",
            "provider": "custom",
            "model": "llama3",
            "api_key": "x",
            "api_endpoint": "http://localhost:11434/api/generate",
            "config": {"headers": {"X-Token": "t"}, "top_k": 20},
        },
    )
    assert response.status_code == 201
    data = response.json()["config"]
    assert data["api_endpoint"] == "http://localhost:11434/api/generate"
    assert data["config"]["top_k"] == 20


@pytest.mark.asyncio
async def test_create_unknown_provider_rejected(client: AsyncClient):
    response = await client.post(
        "/api/v1/llm-configs/",
        json={"name": "Gemini", "provider": "gemini", "model": "gemini-2.0-flash", "api_key": "x"},
    )
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_create_missing_fields_rejected(client: AsyncClient):
    response = await client.post("/api/v1/llm-configs/", json={"name": "No key", "provider": "openai", "model": "m"})
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_list_llm_configs(client: AsyncClient, openai_config, anthropic_config):
    response = await client.get("/api/v1/llm-configs/")
    assert response.status_code == 200
    configs = response.json()["configs"]
    assert {c["id"] for c in configs} == {openai_config.id, anthropic_config.id}
    assert all(c["api_key_prefix"].endswith("...") for c in configs)


@pytest.mark.asyncio
async def test_list_only_own_configs(client: AsyncClient, config_store, openai_config):
    await config_store.create("someone-else", name="Theirs", provider="openai", model="gpt-4o", api_key="sk-other")

    response = await client.get("/api/v1/llm-configs/")
    ids = [c["id"] for c in response.json()["configs"]]
    assert ids == [openai_config.id]


@pytest.mark.asyncio
async def test_delete_llm_config(client: AsyncClient, openai_config):
    response = await client.delete(f"/api/v1/llm-configs/{openai_config.id}")
    assert response.status_code == 200
    assert response.json()["message"] == "LLM config deleted"

    response = await client.get("/api/v1/llm-configs/")
    assert response.json()["configs"] == []


@pytest.mark.asyncio
async def test_delete_unknown_config(client: AsyncClient):
    response = await client.delete("/api/v1/llm-configs/does-not-exist")
    assert response.status_code == 404
