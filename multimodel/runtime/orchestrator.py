"""Query orchestration: credential -> adapter -> normalized result.

This is the router's "application brain". It is responsible for:
- filling catalog defaults (model) into a request
- resolving the provider credential
- choosing the adapter for the requested model
- fanning one prompt out to several providers and collecting every outcome

Failure containment:
- query_single propagates errors unchanged.
- query_parallel never fails because a leg failed; each leg's error is recorded
  at that leg's key.
"""

from __future__ import annotations

import asyncio
from collections.abc import Mapping
from dataclasses import dataclass, replace
from typing import Any

from multimodel.core.errors import MalformedRequest
from multimodel.credentials.store import CredentialStore
from multimodel.llm.base import (
    EmbeddingRequest,
    EmbeddingResult,
    ProviderId,
    QueryRequest,
    QueryResult,
)
from multimodel.llm.catalog import ModelCatalog
from multimodel.llm.registry import AdapterRegistry
from multimodel.observability.tracing import Span, log_event, new_trace_id

PARALLEL_PROVIDERS: tuple[ProviderId, ...] = (ProviderId.OPENAI, ProviderId.GOOGLE)


@dataclass(frozen=True)
class LegFailure:
    """Outcome of a parallel leg that did not produce a result."""

    error: str

    def to_payload(self) -> dict[str, Any]:
        return {'error': self.error}


@dataclass(frozen=True)
class BatchResult:
    """Per-provider outcomes of a parallel query. Keys are exactly the selected providers."""

    outcomes: dict[str, QueryResult | LegFailure]

    @property
    def succeeded(self) -> dict[str, QueryResult]:
        return {k: v for k, v in self.outcomes.items() if isinstance(v, QueryResult)}

    @property
    def failed(self) -> dict[str, LegFailure]:
        return {k: v for k, v in self.outcomes.items() if isinstance(v, LegFailure)}

    def to_payload(self) -> dict[str, Any]:
        return {name: outcome.to_payload() for name, outcome in self.outcomes.items()}


class QueryOrchestrator:
    """Coordinates credential resolution, adapter dispatch and fan-out."""

    def __init__(self, *, credentials: CredentialStore, adapters: AdapterRegistry) -> None:
        self._credentials = credentials
        self._adapters = adapters

    @property
    def catalog(self) -> ModelCatalog:
        return self._adapters.catalog

    async def query_single(self, provider: ProviderId, request: QueryRequest) -> QueryResult:
        """Query one provider.

        Returns:
            The normalized result.

        Raises:
            MalformedRequest: If the prompt is blank (no network call is made).
            CredentialsUnavailable: If no key can be found for the provider.
            ProviderCallFailed: If the provider call fails.
        """
        _require_text(request.prompt, 'prompt')
        model = self.catalog.resolve_model(provider, request.model)
        request = replace(request, model=model)

        credential = await self._credentials.resolve(provider)
        adapter = self._adapters.query_adapter(provider, model)
        return await adapter.query(request, credential)

    async def query_parallel(
        self,
        prompt: str,
        system_instruction: str | None = None,
        selections: Mapping[ProviderId, str | None] | None = None,
        *,
        max_output_tokens: int | None = None,
    ) -> BatchResult:
        """Query several providers concurrently and wait for every leg to settle.

        Args:
            prompt: Prompt sent to every provider.
            system_instruction: Optional system prompt sent to every provider.
            selections: Provider -> model override (None for the catalog default).
                Defaults to every provider in PARALLEL_PROVIDERS.
            max_output_tokens: Optional token limit applied to every leg.

        Returns:
            BatchResult with one entry per selected provider.

        Raises:
            MalformedRequest: If the prompt is blank or no provider is selected. This is
                the only way the batch as a whole fails.
        """
        _require_text(prompt, 'prompt')
        if selections is None:
            selections = {provider: None for provider in PARALLEL_PROVIDERS}
        if not selections:
            raise MalformedRequest('At least one provider must be selected')

        trace_id = new_trace_id()
        providers = list(selections)
        log_event('query.parallel.start', trace_id=trace_id, providers=[p.value for p in providers])

        legs = [
            self._run_leg(
                trace_id,
                provider,
                QueryRequest(
                    prompt=prompt,
                    system_instruction=system_instruction,
                    model=selections[provider],
                    max_output_tokens=max_output_tokens,
                ),
            )
            for provider in providers
        ]
        # gather returns results in submission order, whatever order the legs finish in.
        outcomes = await asyncio.gather(*legs)

        batch = BatchResult(outcomes={p.value: o for p, o in zip(providers, outcomes)})
        log_event(
            'query.parallel.end',
            trace_id=trace_id,
            succeeded=sorted(batch.succeeded),
            failed=sorted(batch.failed),
        )
        return batch

    async def embed(self, request: EmbeddingRequest) -> EmbeddingResult:
        """Embed one text with Voyage.

        Raises:
            MalformedRequest: If the text is blank.
            CredentialsUnavailable: If no Voyage key can be found.
            ProviderCallFailed: If the provider call fails.
        """
        _require_text(request.text, 'text')
        provider = ProviderId.VOYAGE
        model = self.catalog.resolve_model(provider, request.model)
        request = replace(request, model=model)

        credential = await self._credentials.resolve(provider)
        adapter = self._adapters.embedding_adapter(provider, model)
        return await adapter.embed(request, credential)

    async def _run_leg(
        self, trace_id: str, provider: ProviderId, request: QueryRequest
    ) -> QueryResult | LegFailure:
        span = Span(name=f'provider.{provider.value}', trace_id=trace_id)
        try:
            result = await self.query_single(provider, request)
            span.attributes['model'] = result.model
            span.attributes['ok'] = True
            return result
        except Exception as exc:  # noqa: BLE001 - a leg's failure stays in its own slot
            span.attributes['ok'] = False
            span.attributes['error'] = str(exc)
            return LegFailure(error=str(exc) or type(exc).__name__)
        finally:
            span.end()
            log_event('span.end', trace_id=trace_id, span=span)


def _require_text(value: Any, field: str) -> None:
    if not isinstance(value, str) or not value.strip():
        raise MalformedRequest(f'{field} is required')
