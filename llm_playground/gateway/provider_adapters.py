"""Provider Adapters — wire-format handling for each LLM backend family.

Each adapter turns a (ProviderConfig, CompletionRequest) pair into the
backend's HTTP request, sends it, and returns a CompletionResult. Adapters
never raise: transport errors, non-2xx statuses and unexpected bodies all
come back as a result with `error` set.

Family-specific behaviors:
  - OpenAI: chat completions, bearer auth, choices[0].message.content
  - Anthropic: messages API, x-api-key + anthropic-version headers,
    content[0].text, total tokens computed from input + output
  - Custom: OpenAI-shaped request to a user-supplied endpoint, optional
    extra headers, format-tolerant response parsing
"""

from __future__ import annotations

import json
import logging
import time
from abc import ABC, abstractmethod
from collections.abc import Callable, Mapping
from types import MappingProxyType
from typing import Any

import httpx

from llm_playground.core.config import settings
from llm_playground.gateway.types import (
    CompletionRequest,
    CompletionResult,
    ProviderConfig,
    ProviderKind,
    TokenUsage,
)

logger = logging.getLogger(__name__)

# Parse failures on a 2xx body for providers with a fixed response schema
_MALFORMED_BODY_ERRORS = (KeyError, IndexError, TypeError, AttributeError, ValueError)


class ProviderConfigError(Exception):
    """Raised when a config cannot be used to build a request."""


def _elapsed_ms(start: float) -> int:
    return max(0, int((time.monotonic() - start) * 1000))


def _chat_messages(request: CompletionRequest) -> list[dict[str, str]]:
    messages = []
    if request.system_prompt:
        messages.append({"role": "system", "content": request.system_prompt})
    messages.append({"role": "user", "content": request.prompt})
    return messages


def _require_text(value: Any, field_path: str) -> str:
    if not isinstance(value, str):
        raise TypeError(f"{field_path} is {type(value).__name__}, expected str")
    return value


def _merge_extra_params(
    body: dict[str, Any],
    extra_params: Mapping[str, Any],
    skip: tuple[str, ...] = (),
) -> dict[str, Any]:
    """Shallow-merge extra params into the body; they win over explicit fields except `messages`."""
    for key, value in extra_params.items():
        if key == "messages" or key in skip:
            continue
        body[key] = value
    return body


class BaseProviderAdapter(ABC):
    """Base class for all provider adapters."""

    kind: ProviderKind
    provider_name: str
    default_url: str | None = None

    def __init__(
        self,
        timeout: float | None = 120.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.timeout = timeout
        self.transport = transport

    async def call(self, config: ProviderConfig, request: CompletionRequest) -> CompletionResult:
        """Send one completion request and return a normalized result."""
        start = time.monotonic()

        try:
            url = self._url(config)
            headers = self._headers(config)
            payload = self._body(config, request)

            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                resp = await client.post(url, json=payload, headers=headers)

            elapsed_ms = _elapsed_ms(start)

            if not resp.is_success:
                return CompletionResult.failure(
                    f"{self.provider_name} API error: {resp.status_code} - {resp.text}",
                    elapsed_ms,
                )

            try:
                return self._parse(resp, elapsed_ms)
            except _MALFORMED_BODY_ERRORS as e:
                logger.warning("Malformed %s response for config %s: %r", self.provider_name, config.id, e)
                return CompletionResult.failure(f"Malformed {self.provider_name} response: {e!r}", elapsed_ms)

        except ProviderConfigError as e:
            return CompletionResult.failure(str(e), _elapsed_ms(start))
        except httpx.HTTPError as e:
            return CompletionResult.failure(str(e) or type(e).__name__, _elapsed_ms(start))
        except Exception as e:
            logger.exception("Unexpected error calling %s for config %s", self.provider_name, config.id)
            return CompletionResult.failure(str(e) or "Unknown error", _elapsed_ms(start))

    def _url(self, config: ProviderConfig) -> str:
        url = config.endpoint_override or self.default_url
        if not url:
            raise ProviderConfigError(f"{self.provider_name} provider requires an API endpoint")
        return url

    @abstractmethod
    def _headers(self, config: ProviderConfig) -> dict[str, str]: ...

    @abstractmethod
    def _body(self, config: ProviderConfig, request: CompletionRequest) -> dict[str, Any]: ...

    @abstractmethod
    def _parse(self, resp: httpx.Response, elapsed_ms: int) -> CompletionResult: ...


# ---------------------------------------------------------------------------
# OpenAI Adapter
# ---------------------------------------------------------------------------


class OpenAIAdapter(BaseProviderAdapter):
    """OpenAI Chat Completions adapter."""

    kind = ProviderKind.OPENAI
    provider_name = "OpenAI"
    default_url = "https://api.openai.com/v1/chat/completions"

    def _headers(self, config: ProviderConfig) -> dict[str, str]:
        return {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {config.credential}",
        }

    def _body(self, config: ProviderConfig, request: CompletionRequest) -> dict[str, Any]:
        body = {
            "model": config.model,
            "messages": _chat_messages(request),
            "temperature": request.effective_temperature,
            "max_tokens": request.effective_max_tokens,
        }
        return _merge_extra_params(body, config.extra_params)

    def _parse(self, resp: httpx.Response, elapsed_ms: int) -> CompletionResult:
        data = resp.json()
        content = _require_text(data["choices"][0]["message"]["content"] or "", "choices[0].message.content")

        usage = data.get("usage") or {}
        return CompletionResult(
            content=content,
            elapsed_ms=elapsed_ms,
            tokens_used=TokenUsage(
                prompt=usage.get("prompt_tokens") or 0,
                completion=usage.get("completion_tokens") or 0,
                total=usage.get("total_tokens") or 0,
            ),
        )


# ---------------------------------------------------------------------------
# Anthropic Adapter
# ---------------------------------------------------------------------------


class AnthropicAdapter(BaseProviderAdapter):
    """Anthropic Messages API adapter."""

    kind = ProviderKind.ANTHROPIC
    provider_name = "Anthropic"
    default_url = "https://api.anthropic.com/v1/messages"
    api_version = "2023-06-01"

    def _headers(self, config: ProviderConfig) -> dict[str, str]:
        return {
            "Content-Type": "application/json",
            "x-api-key": config.credential,
            "anthropic-version": self.api_version,
        }

    def _body(self, config: ProviderConfig, request: CompletionRequest) -> dict[str, Any]:
        body: dict[str, Any] = {
            "model": config.model,
            "messages": [{"role": "user", "content": request.prompt}],
        }
        # System prompt is a top-level field, not a message
        if request.system_prompt:
            body["system"] = request.system_prompt
        body["temperature"] = request.effective_temperature
        body["max_tokens"] = request.effective_max_tokens
        return _merge_extra_params(body, config.extra_params)

    def _parse(self, resp: httpx.Response, elapsed_ms: int) -> CompletionResult:
        data = resp.json()
        content = _require_text(data["content"][0]["text"], "content[0].text")

        usage = data.get("usage") or {}
        input_tokens = usage.get("input_tokens") or 0
        output_tokens = usage.get("output_tokens") or 0
        return CompletionResult(
            content=content,
            elapsed_ms=elapsed_ms,
            tokens_used=TokenUsage(
                prompt=input_tokens,
                completion=output_tokens,
                total=input_tokens + output_tokens,
            ),
        )


# ---------------------------------------------------------------------------
# Custom Adapter (user-supplied endpoint, unknown response shape)
# ---------------------------------------------------------------------------


def _dig(data: Any, *path: str | int) -> Any:
    """Follow a key/index path through decoded JSON, None on any miss."""
    for key in path:
        if isinstance(key, int):
            if not isinstance(data, list) or key >= len(data):
                return None
        elif not isinstance(data, dict):
            return None
        data = data[key] if isinstance(key, int) else data.get(key)
        if data is None:
            return None
    return data


# Tried in order; the first non-empty string wins
_CUSTOM_CONTENT_STRATEGIES: tuple[Callable[[Any], Any], ...] = (
    lambda data: _dig(data, "choices", 0, "message", "content"),  # OpenAI-like
    lambda data: _dig(data, "content", 0, "text"),  # Anthropic-like
    lambda data: _dig(data, "response"),
    lambda data: _dig(data, "text"),
)


def extract_custom_content(data: Any) -> str:
    """Pull displayable text out of an arbitrary JSON body.

    Falls back to the whole body serialized as compact JSON when no known
    field holds text, so the caller always has something to show.
    """
    for strategy in _CUSTOM_CONTENT_STRATEGIES:
        value = strategy(data)
        if isinstance(value, str) and value:
            return value
    return json.dumps(data, ensure_ascii=False, separators=(",", ":"))


def extract_custom_usage(data: Any) -> TokenUsage | None:
    usage = _dig(data, "usage")
    if not isinstance(usage, dict):
        return None
    return TokenUsage(
        prompt=usage.get("prompt_tokens") or usage.get("input_tokens") or 0,
        completion=usage.get("completion_tokens") or usage.get("output_tokens") or 0,
        total=usage.get("total_tokens"),
    )


class CustomAdapter(BaseProviderAdapter):
    """Adapter for arbitrary OpenAI-compatible (or roughly compatible) endpoints.

    `extra_params["headers"]` lets a backend require its own auth scheme;
    those headers are sent on the request and kept out of the JSON body.
    """

    kind = ProviderKind.CUSTOM
    provider_name = "Custom"
    default_url = None

    def _headers(self, config: ProviderConfig) -> dict[str, str]:
        headers = {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {config.credential}",
        }
        extra_headers = config.extra_params.get("headers")
        if isinstance(extra_headers, Mapping):
            headers.update({str(k): v for k, v in extra_headers.items() if isinstance(v, str)})
        return headers

    def _body(self, config: ProviderConfig, request: CompletionRequest) -> dict[str, Any]:
        body = {
            "model": config.model,
            "messages": _chat_messages(request),
            "temperature": request.effective_temperature,
            "max_tokens": request.effective_max_tokens,
        }
        return _merge_extra_params(body, config.extra_params, skip=("headers",))

    def _parse(self, resp: httpx.Response, elapsed_ms: int) -> CompletionResult:
        try:
            data = resp.json()
        except ValueError:
            # Not JSON at all: the raw body is the answer
            return CompletionResult(content=resp.text, elapsed_ms=elapsed_ms)

        return CompletionResult(
            content=extract_custom_content(data),
            elapsed_ms=elapsed_ms,
            tokens_used=extract_custom_usage(data),
        )


# ---------------------------------------------------------------------------
# Adapter registry
# ---------------------------------------------------------------------------


def build_adapter_registry(
    timeout: float | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> Mapping[ProviderKind, BaseProviderAdapter]:
    """Build a read-only {kind -> adapter} mapping sharing one transport config."""
    return MappingProxyType(
        {
            cls.kind: cls(timeout=timeout, transport=transport)
            for cls in (OpenAIAdapter, AnthropicAdapter, CustomAdapter)
        }
    )


PROVIDER_ADAPTERS: Mapping[ProviderKind, BaseProviderAdapter] = build_adapter_registry(
    timeout=settings.llm_request_timeout_seconds,
)


def resolve_kind(kind: ProviderKind | str) -> ProviderKind | None:
    """Map a raw kind string to a ProviderKind, None when unsupported."""
    try:
        return ProviderKind(kind)
    except ValueError:
        return None


def get_adapter(
    kind: ProviderKind | str,
    adapters: Mapping[ProviderKind, BaseProviderAdapter] = PROVIDER_ADAPTERS,
) -> BaseProviderAdapter | None:
    """Look up the adapter for a provider kind."""
    resolved = resolve_kind(kind)
    if resolved is None:
        return None
    return adapters.get(resolved)
