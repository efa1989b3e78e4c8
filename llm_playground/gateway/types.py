"""Core value types for the LLM dispatch layer."""

from __future__ import annotations

import copy
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any

DEFAULT_TEMPERATURE = 0.7
DEFAULT_MAX_TOKENS = 2000


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------


class ProviderKind(str, Enum):
    """Supported backend families."""

    OPENAI = "openai"
    ANTHROPIC = "anthropic"
    CUSTOM = "custom"


# ---------------------------------------------------------------------------
# Provider config: one registered backend
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ProviderConfig:
    """A user-registered LLM endpoint.

    `extra_params` is merged last into the outgoing JSON body, so it can
    shadow `model`, `temperature` and `max_tokens`. For custom providers a
    `headers` mapping inside it is sent as HTTP headers instead.
    """

    id: str
    provider_kind: ProviderKind | str
    model: str
    credential: str
    name: str = ""
    endpoint_override: str | None = None
    extra_params: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        # Own a private deep copy, read-only at the top level
        object.__setattr__(self, "extra_params", MappingProxyType(copy.deepcopy(dict(self.extra_params))))


# ---------------------------------------------------------------------------
# Completion request / result
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class CompletionRequest:
    """One prompt to send to every selected provider."""

    prompt: str
    system_prompt: str | None = None
    temperature: float | None = None  # DEFAULT_TEMPERATURE when unset
    max_tokens: int | None = None  # DEFAULT_MAX_TOKENS when unset

    @property
    def effective_temperature(self) -> float:
        return DEFAULT_TEMPERATURE if self.temperature is None else self.temperature

    @property
    def effective_max_tokens(self) -> int:
        return DEFAULT_MAX_TOKENS if self.max_tokens is None else self.max_tokens


@dataclass(frozen=True)
class TokenUsage:
    prompt: int = 0
    completion: int = 0
    total: int | None = 0

    def to_dict(self) -> dict:
        return {"prompt": self.prompt, "completion": self.completion, "total": self.total}


@dataclass(frozen=True)
class CompletionResult:
    """Unified result of one provider call.

    `content` and `error` are always present; on failure `content` is empty
    and `error` holds a human-readable description.
    """

    content: str = ""
    elapsed_ms: int = 0
    tokens_used: TokenUsage | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def failure(cls, error: str, elapsed_ms: int = 0) -> CompletionResult:
        return cls(content="", elapsed_ms=elapsed_ms, error=error)

    def to_dict(self) -> dict:
        return {
            "content": self.content,
            "tokens_used": self.tokens_used.to_dict() if self.tokens_used else None,
            "elapsed_ms": self.elapsed_ms,
            "error": self.error,
        }


@dataclass(frozen=True)
class DispatchOutcome:
    """Pairs a ProviderConfig id with the result of calling it."""

    config_id: str
    result: CompletionResult

    def to_dict(self) -> dict:
        return {"config_id": self.config_id, **self.result.to_dict()}
