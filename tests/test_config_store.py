"""Tests for the provider config store and credential encryption."""

import pytest

from llm_playground.core.encryption import decrypt_value, encrypt_value, mask_secret
from llm_playground.gateway.types import ProviderKind
from llm_playground.services.chat_service import conversation_title
from llm_playground.services.config_store import ConfigStore


class TestEncryption:
    def test_roundtrip(self):
        token = encrypt_value("sk-live-123")
        assert b"sk-live-123" not in token
        assert decrypt_value(token) == "sk-live-123"

    def test_decrypt_garbage_returns_empty(self):
        assert decrypt_value(b"not-a-fernet-token") == ""

    def test_decrypt_empty(self):
        assert decrypt_value(b"") == ""

    def test_mask_secret(self):
        assert mask_secret("sk-abcdef") == "sk-a..."
        assert mask_secret("abc") == "..."


class TestConfigStore:
    @pytest.fixture
    def store(self):
        return ConfigStore()

    @pytest.mark.asyncio
    async def test_credential_encrypted_at_rest(self, store):
        stored = await store.create("u1", name="GPT", provider=ProviderKind.OPENAI, model="gpt-4o", api_key="sk-123456")
        assert stored.provider == "openai"
        assert b"sk-123456" not in stored.encrypted_api_key

        config = stored.to_provider_config()
        assert config.credential == "sk-123456"
        assert config.provider_kind == "openai"
        assert config.endpoint_override is None
        assert config.extra_params == {}

    @pytest.mark.asyncio
    async def test_to_provider_config_copies_params(self, store):
        stored = await store.create(
            "u1",
            name="Local",
            provider="custom",
            model="llama3",
            api_key="k",
            api_endpoint="http://localhost:8080/v1",
            config={"top_k": 3},
        )
        config = stored.to_provider_config()
        assert config.endpoint_override == "http://localhost:8080/v1"
        assert config.extra_params == {"top_k": 3}
        assert config.extra_params is not stored.config

    @pytest.mark.asyncio
    async def test_provider_config_does_not_share_nested_params(self, store):
        stored = await store.create(
            "u1",
            name="Local",
            provider="custom",
            model="llama3",
            api_key="k",
            api_endpoint="http://localhost:8080/v1",
            config={"headers": {"X-Token": "t"}},
        )
        config = stored.to_provider_config()

        stored.config["headers"]["X-Token"] = "rotated"
        assert config.extra_params["headers"] == {"X-Token": "t"}

    @pytest.mark.asyncio
    async def test_get_many_keeps_request_order(self, store):
        a = await store.create("u1", name="A", provider="openai", model="m", api_key="k")
        b = await store.create("u1", name="B", provider="anthropic", model="m", api_key="k")
        c = await store.create("u1", name="C", provider="openai", model="m", api_key="k")

        found = await store.get_many("u1", [c.id, a.id, b.id])
        assert [s.id for s in found] == [c.id, a.id, b.id]

    @pytest.mark.asyncio
    async def test_get_many_skips_missing_and_foreign(self, store):
        mine = await store.create("u1", name="A", provider="openai", model="m", api_key="k")
        theirs = await store.create("u2", name="B", provider="openai", model="m", api_key="k")

        found = await store.get_many("u1", [mine.id, theirs.id, "missing"])
        assert [s.id for s in found] == [mine.id]

    @pytest.mark.asyncio
    async def test_delete_scoped_to_owner(self, store):
        stored = await store.create("u1", name="A", provider="openai", model="m", api_key="k")
        assert await store.delete("u2", stored.id) is False
        assert await store.delete("u1", stored.id) is True
        assert await store.get("u1", stored.id) is None


class TestConversationTitle:
    def test_short_prompt_unchanged(self):
        assert conversation_title("Hello") == "Hello"

    def test_exactly_fifty_chars_unchanged(self):
        assert conversation_title("a" * 50) == "a" * 50

    def test_long_prompt_truncated(self):
        assert conversation_title("b" * 51) == "b" * 50 + "..."
