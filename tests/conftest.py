from collections.abc import AsyncGenerator

import pytest
from httpx import ASGITransport, AsyncClient

from llm_playground.core.config import settings

# Override settings for tests
settings.fernet_key = "KxJCocbnA3KD20pkgSN3uUZybasKP1X9lAJDX4oLxoQ="  # test-only Fernet key
settings.app_env = "development"
settings.demo_mode = True
settings.demo_user_id = "test-user"

from llm_playground.core.dependencies import get_config_store, get_conversation_store  # noqa: E402
from llm_playground.main import app  # noqa: E402
from llm_playground.services.config_store import ConfigStore  # noqa: E402
from llm_playground.services.conversation_store import ConversationStore  # noqa: E402


@pytest.fixture
def config_store() -> ConfigStore:
    return ConfigStore()


@pytest.fixture
def conversation_store() -> ConversationStore:
    return ConversationStore()


@pytest.fixture(autouse=True)
def fresh_stores(config_store: ConfigStore, conversation_store: ConversationStore):
    """Give every test empty stores."""
    app.dependency_overrides[get_config_store] = lambda: config_store
    app.dependency_overrides[get_conversation_store] = lambda: conversation_store
    yield
    app.dependency_overrides.pop(get_config_store, None)
    app.dependency_overrides.pop(get_conversation_store, None)


@pytest.fixture
async def client() -> AsyncGenerator[AsyncClient, None]:
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


@pytest.fixture
async def openai_config(config_store: ConfigStore):
    return await config_store.create(
        settings.demo_user_id,
        name="GPT-4o",
        provider="openai",
        model="gpt-4o",
        api_key="sk-openai-test",
    )


@pytest.fixture
async def anthropic_config(config_store: ConfigStore):
    return await config_store.create(
        settings.demo_user_id,
        name="Claude",
        provider="anthropic",
        model="claude-3-5-sonnet-20241022",
        api_key="sk-ant-test",
    )
