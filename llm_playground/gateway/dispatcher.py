"""LLM Dispatcher — fan one prompt out to many providers and join the results.

Usage:
    outcomes = await call_many(configs, CompletionRequest(prompt="Hello"))
    for outcome in outcomes:
        print(outcome.config_id, outcome.result.content or outcome.result.error)

Every config gets exactly one outcome, in input order. Calls run concurrently
and independently: no retries, no timeout of its own, no cancellation once
started, so a batch takes as long as its slowest call.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Mapping, Sequence

from llm_playground.core.metrics import DISPATCH_BATCH_SIZE, record_llm_call
from llm_playground.gateway.provider_adapters import PROVIDER_ADAPTERS, BaseProviderAdapter, get_adapter
from llm_playground.gateway.types import (
    CompletionRequest,
    CompletionResult,
    DispatchOutcome,
    ProviderConfig,
    ProviderKind,
)

logger = logging.getLogger(__name__)


def _kind_label(kind: ProviderKind | str) -> str:
    return kind.value if isinstance(kind, ProviderKind) else str(kind)


class LlmDispatcher:
    """Resolves each config to its adapter and runs all calls concurrently."""

    def __init__(self, adapters: Mapping[ProviderKind, BaseProviderAdapter] | None = None):
        self.adapters = adapters if adapters is not None else PROVIDER_ADAPTERS

    async def call_one(self, config: ProviderConfig, request: CompletionRequest) -> CompletionResult:
        """Call a single provider. Never raises."""
        kind = _kind_label(config.provider_kind)
        adapter = get_adapter(config.provider_kind, self.adapters)
        if adapter is None:
            logger.warning("Unknown provider %r for config %s", kind, config.id)
            return CompletionResult.failure(f"Unknown provider: {kind}", elapsed_ms=0)

        start = time.monotonic()
        try:
            result = await adapter.call(config, request)
        except Exception as e:
            # Adapters promise not to raise; keep the batch whole if one does
            logger.exception("Adapter %s raised for config %s", kind, config.id)
            result = CompletionResult.failure(
                str(e) or "Unknown error",
                elapsed_ms=int((time.monotonic() - start) * 1000),
            )

        record_llm_call(kind, result.ok, result.elapsed_ms)
        if result.ok:
            logger.debug("LLM call %s (%s) finished in %dms", config.id, kind, result.elapsed_ms)
        else:
            logger.warning(
                "LLM call %s (%s) failed after %dms: %s",
                config.id,
                kind,
                result.elapsed_ms,
                result.error,
                extra={"config_id": config.id, "provider": kind, "elapsed_ms": result.elapsed_ms},
            )
        return result

    async def call_many(
        self,
        configs: Sequence[ProviderConfig],
        request: CompletionRequest,
    ) -> list[DispatchOutcome]:
        """Call every config concurrently; one outcome per config, same order."""
        if not configs:
            return []

        DISPATCH_BATCH_SIZE.observe(len(configs))
        start = time.monotonic()

        results = await asyncio.gather(
            *(self.call_one(config, request) for config in configs),
            return_exceptions=True,
        )

        outcomes: list[DispatchOutcome] = []
        for config, result in zip(configs, results):
            if isinstance(result, BaseException):
                # Only reachable for failures outside call_one's guard (e.g. metrics/logging)
                logger.error("Dispatch branch for config %s failed: %r", config.id, result)
                result = CompletionResult.failure(str(result) or "Unknown error")
            outcomes.append(DispatchOutcome(config_id=config.id, result=result))

        failed = sum(1 for o in outcomes if not o.result.ok)
        logger.info(
            "Dispatched prompt to %d providers in %dms (%d failed)",
            len(outcomes),
            int((time.monotonic() - start) * 1000),
            failed,
        )
        return outcomes


_default_dispatcher = LlmDispatcher()


async def call_llm(config: ProviderConfig, request: CompletionRequest) -> CompletionResult:
    """Call one provider through the process-wide dispatcher."""
    return await _default_dispatcher.call_one(config, request)


async def call_many(configs: Sequence[ProviderConfig], request: CompletionRequest) -> list[DispatchOutcome]:
    """Fan a request out to many providers through the process-wide dispatcher."""
    return await _default_dispatcher.call_many(configs, request)
