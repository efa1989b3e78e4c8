"""Tests for conversation history endpoints."""

import pytest
from httpx import AsyncClient

from llm_playground.core.config import settings


@pytest.mark.asyncio
async def test_list_conversations_newest_first(client: AsyncClient, conversation_store):
    old = await conversation_store.create_conversation(settings.demo_user_id, "Old")
    new = await conversation_store.create_conversation(settings.demo_user_id, "New")
    await conversation_store.touch(old)

    response = await client.get("/api/v1/conversations/")
    assert response.status_code == 200
    assert [c["id"] for c in response.json()["conversations"]] == [old.id, new.id]


@pytest.mark.asyncio
async def test_list_conversations_limit(client: AsyncClient, conversation_store):
    for i in range(settings.conversation_list_limit + 5):
        await conversation_store.create_conversation(settings.demo_user_id, f"c{i}")

    response = await client.get("/api/v1/conversations/")
    assert len(response.json()["conversations"]) == settings.conversation_list_limit


@pytest.mark.asyncio
async def test_list_conversations_scoped_to_owner(client: AsyncClient, conversation_store):
    await conversation_store.create_conversation("someone-else", "Theirs")
    response = await client.get("/api/v1/conversations/")
    assert response.json()["conversations"] == []


@pytest.mark.asyncio
async def test_list_messages_with_responses(client: AsyncClient, conversation_store):
    conversation = await conversation_store.create_conversation(settings.demo_user_id, "Chat")
    await conversation_store.add_message(conversation, "user", "Hi", selected_models=["cfg-1"])
    assistant = await conversation_store.add_message(conversation, "assistant", "")
    await conversation_store.add_response(
        assistant,
        llm_config_id="cfg-1",
        llm_name="GPT-4o",
        content="Hello!",
        tokens_used={"prompt": 1, "completion": 2, "total": 3},
        response_time="120ms",
    )

    response = await client.get(f"/api/v1/conversations/{conversation.id}/messages")
    assert response.status_code == 200
    messages = response.json()["messages"]
    assert [m["role"] for m in messages] == ["user", "assistant"]
    assert messages[0]["selected_models"] == ["cfg-1"]
    assert messages[1]["responses"][0]["llm_name"] == "GPT-4o"
    assert messages[1]["responses"][0]["tokens_used"]["total"] == 3
    assert messages[1]["responses"][0]["response_time"] == "120ms"


@pytest.mark.asyncio
async def test_list_messages_unknown_conversation(client: AsyncClient):
    response = await client.get("/api/v1/conversations/nope/messages")
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_list_messages_foreign_conversation(client: AsyncClient, conversation_store):
    conversation = await conversation_store.create_conversation("someone-else", "Theirs")
    response = await client.get(f"/api/v1/conversations/{conversation.id}/messages")
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_health_and_metrics(client: AsyncClient):
    assert (await client.get("/health")).json() == {"status": "ok"}

    response = await client.get("/metrics")
    assert response.status_code == 200
    assert "llm_calls_total" in response.text
