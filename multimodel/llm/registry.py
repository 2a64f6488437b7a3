"""Adapter registry: one shared HTTP client, one adapter per (provider, shape)."""

from __future__ import annotations

import httpx

from multimodel.config import Settings
from multimodel.llm.base import (
    EmbeddingAdapter,
    ProviderAdapter,
    ProviderId,
    QueryAdapter,
    RequestShape,
)
from multimodel.llm.catalog import DEFAULT_CATALOG, ModelCatalog
from multimodel.llm.gemini import GeminiAdapter
from multimodel.llm.openai_chat import OpenAIChatAdapter
from multimodel.llm.openai_responses import OpenAIResponsesAdapter
from multimodel.llm.voyage import VoyageEmbeddingAdapter


class AdapterRegistry:
    """Builds adapters lazily and hands them out by model id.

    Dispatch is a static catalog lookup: the model id's RequestShape plus the provider
    pick the adapter class. Adding a model means adding a catalog entry.
    """

    def __init__(
        self,
        settings: Settings,
        *,
        catalog: ModelCatalog = DEFAULT_CATALOG,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """Create a registry.

        Args:
            settings: Provides base URLs, the request timeout and the default token limit.
            catalog: Model catalog used for shape dispatch.
            client: Optional injected httpx client for testing / transport control. A
                client injected here is never closed by the registry.
        """
        self._settings = settings
        self._catalog = catalog
        self._client = client
        self._owns_client = client is None
        self._adapters: dict[tuple[ProviderId, RequestShape], ProviderAdapter] = {}

    @property
    def catalog(self) -> ModelCatalog:
        return self._catalog

    @property
    def http_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self._settings.request_timeout)
        return self._client

    def query_adapter(self, provider: ProviderId, model: str) -> QueryAdapter:
        adapter = self._adapter(provider, self._catalog.shape_for(provider, model))
        if not isinstance(adapter, QueryAdapter):
            raise ValueError(f'Model {model!r} of {provider.value} does not answer prompts')
        return adapter

    def embedding_adapter(self, provider: ProviderId, model: str) -> EmbeddingAdapter:
        adapter = self._adapter(provider, self._catalog.shape_for(provider, model))
        if not isinstance(adapter, EmbeddingAdapter):
            raise ValueError(f'Model {model!r} of {provider.value} does not produce embeddings')
        return adapter

    async def aclose(self) -> None:
        if self._owns_client and self._client is not None:
            await self._client.aclose()
            self._client = None
        self._adapters.clear()

    def _adapter(self, provider: ProviderId, shape: RequestShape) -> ProviderAdapter:
        key = (provider, shape)
        adapter = self._adapters.get(key)
        if adapter is None:
            adapter = self._build(provider, shape)
            self._adapters[key] = adapter
        return adapter

    def _build(self, provider: ProviderId, shape: RequestShape) -> ProviderAdapter:
        s = self._settings
        if provider == ProviderId.OPENAI and shape == RequestShape.RESPONSES:
            return OpenAIResponsesAdapter(
                self.http_client, base_url=s.openai_base_url, default_max_tokens=s.default_max_tokens
            )
        if provider == ProviderId.OPENAI and shape == RequestShape.CHAT:
            return OpenAIChatAdapter(
                self.http_client, base_url=s.openai_base_url, default_max_tokens=s.default_max_tokens
            )
        if provider == ProviderId.GOOGLE and shape == RequestShape.CHAT:
            return GeminiAdapter(self.http_client, base_url=s.gemini_base_url)
        if provider == ProviderId.VOYAGE and shape == RequestShape.EMBEDDING:
            return VoyageEmbeddingAdapter(self.http_client, base_url=s.voyage_base_url)
        raise ValueError(f'No adapter for {provider.value} with {shape.value} requests')
