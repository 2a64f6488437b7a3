"""Voyage AI embeddings adapter."""

from __future__ import annotations

from typing import Any

from multimodel.core.errors import ProviderCallFailed
from multimodel.llm.base import (
    Credential,
    EmbeddingAdapter,
    EmbeddingRequest,
    EmbeddingResult,
    ProviderId,
    RequestShape,
)


class VoyageEmbeddingAdapter(EmbeddingAdapter):
    provider = ProviderId.VOYAGE
    shape = RequestShape.EMBEDDING
    label = 'Voyage'

    async def embed(self, request: EmbeddingRequest, credential: Credential) -> EmbeddingResult:
        body: dict[str, Any] = {
            'model': request.model,
            'input': [request.text],
            'input_type': request.input_type.value,
        }

        data = await self._post('/embeddings', body, credential)
        embedding = _first_embedding(data)
        if embedding is None:
            raise ProviderCallFailed(self.provider.value, 'Voyage response contained no embedding')

        return EmbeddingResult(
            embedding=embedding,
            model=data.get('model') or request.model,
            usage=data.get('usage'),
            credential_source=credential.source,
        )


def _first_embedding(payload: dict[str, Any]) -> list[float] | None:
    items = payload.get('data')
    if not isinstance(items, list) or not items or not isinstance(items[0], dict):
        return None
    embedding = items[0].get('embedding')
    if not isinstance(embedding, list):
        return None
    try:
        return [float(v) for v in embedding]
    except (TypeError, ValueError) as exc:
        raise ProviderCallFailed(ProviderId.VOYAGE.value, 'Voyage returned a malformed embedding') from exc
