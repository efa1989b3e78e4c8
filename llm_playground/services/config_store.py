"""Provider config store — registered LLM endpoints, scoped per owner.

In-memory implementation of the config persistence collaborator. Credentials
are Fernet-encrypted at rest and only decrypted when a ProviderConfig is
built for dispatch.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from llm_playground.core.encryption import decrypt_value, encrypt_value, mask_secret
from llm_playground.gateway.types import ProviderConfig, ProviderKind

logger = logging.getLogger(__name__)


def _now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class StoredConfig:
    owner_id: str
    name: str
    provider: str
    model: str
    encrypted_api_key: bytes
    api_key_prefix: str
    api_endpoint: str | None = None
    config: dict[str, Any] | None = None
    is_active: bool = True
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    created_at: datetime = field(default_factory=_now)
    updated_at: datetime = field(default_factory=_now)

    def to_provider_config(self) -> ProviderConfig:
        return ProviderConfig(
            id=self.id,
            name=self.name,
            provider_kind=self.provider,
            model=self.model,
            credential=decrypt_value(self.encrypted_api_key),
            endpoint_override=self.api_endpoint or None,
            extra_params=self.config or {},
        )


class ConfigStore:
    def __init__(self) -> None:
        self._configs: dict[str, StoredConfig] = {}

    async def create(
        self,
        owner_id: str,
        *,
        name: str,
        provider: ProviderKind | str,
        model: str,
        api_key: str,
        api_endpoint: str | None = None,
        config: dict[str, Any] | None = None,
    ) -> StoredConfig:
        stored = StoredConfig(
            owner_id=owner_id,
            name=name,
            provider=provider.value if isinstance(provider, ProviderKind) else provider,
            model=model,
            encrypted_api_key=encrypt_value(api_key),
            api_key_prefix=mask_secret(api_key),
            api_endpoint=api_endpoint,
            config=config,
        )
        self._configs[stored.id] = stored
        logger.info("Registered %s config %s (%s) for owner %s", stored.provider, stored.id, model, owner_id)
        return stored

    async def get(self, owner_id: str, config_id: str) -> StoredConfig | None:
        stored = self._configs.get(config_id)
        if stored is None or stored.owner_id != owner_id:
            return None
        return stored

    async def list_for_owner(self, owner_id: str) -> list[StoredConfig]:
        return [c for c in self._configs.values() if c.owner_id == owner_id]

    async def get_many(self, owner_id: str, config_ids: list[str]) -> list[StoredConfig]:
        """Fetch configs in the order requested; unknown or foreign ids are skipped."""
        found = []
        for config_id in config_ids:
            stored = await self.get(owner_id, config_id)
            if stored is not None and stored.is_active:
                found.append(stored)
        return found

    async def delete(self, owner_id: str, config_id: str) -> bool:
        if await self.get(owner_id, config_id) is None:
            return False
        del self._configs[config_id]
        return True
