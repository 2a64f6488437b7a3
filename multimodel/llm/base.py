"""Provider adapter interface.

This module defines the narrow contract used by orchestration code. An adapter is:
- one provider, one request shape
- one outbound HTTP call per request (no retries)
- normalizing (every provider reply becomes the same result envelope)
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

import httpx

from multimodel.core.errors import ProviderCallFailed


class ProviderId(str, Enum):
    """Credential namespace and adapter family."""

    OPENAI = 'openai'
    GOOGLE = 'google'
    VOYAGE = 'voyage'


class RequestShape(str, Enum):
    """Native protocol a model is called with."""

    CHAT = 'chat'
    RESPONSES = 'responses'
    EMBEDDING = 'embedding'


class CredentialSource(str, Enum):
    VAULT = 'vault'
    ENVIRONMENT = 'environment'


class InputType(str, Enum):
    DOCUMENT = 'document'
    QUERY = 'query'


@dataclass(frozen=True)
class Credential:
    """A resolved provider secret. Owned by the CredentialStore; adapters only borrow it."""

    provider: ProviderId
    secret: str = field(repr=False)
    source: CredentialSource


@dataclass(frozen=True)
class QueryRequest:
    """
    A request to generate model output.

    Attributes:
        prompt: User prompt. Must be non-blank.
        system_instruction: Optional system prompt.
        model: Model id. None means the catalog default; unknown ids are passed through.
        max_output_tokens: Token limit. None means the provider-specific default.
    """

    prompt: str
    system_instruction: str | None = None
    model: str | None = None
    max_output_tokens: int | None = None


@dataclass(frozen=True)
class QueryResult:
    """Normalized answer from any chat or responses provider.

    Attributes:
        content: Output text, never None.
        model: Model identifier the provider reports having used.
        usage: Provider usage metrics, passed through verbatim.
        credential_source: Tier the key was resolved from.
    """

    content: str
    model: str
    usage: Any
    credential_source: CredentialSource

    def to_payload(self) -> dict[str, Any]:
        return {
            'content': self.content,
            'model': self.model,
            'usage': self.usage,
            'key_source': self.credential_source.value,
        }


@dataclass(frozen=True)
class EmbeddingRequest:
    text: str
    input_type: InputType = InputType.DOCUMENT
    model: str | None = None


@dataclass(frozen=True)
class EmbeddingResult:
    """A single embedding vector. `dimensions` is always derived from the vector itself."""

    embedding: list[float]
    model: str
    usage: Any
    credential_source: CredentialSource

    @property
    def dimensions(self) -> int:
        return len(self.embedding)

    def to_payload(self) -> dict[str, Any]:
        return {
            'embedding': self.embedding,
            'dimensions': self.dimensions,
            'model': self.model,
            'usage': self.usage,
            'key_source': self.credential_source.value,
        }


class ProviderAdapter(ABC):
    """Base for every provider adapter.

    Subclasses set `provider`, `shape` and `label` and build their request body; the shared
    `_post` helper turns transport failures and non-2xx replies into ProviderCallFailed.
    """

    provider: ProviderId
    shape: RequestShape
    label: str

    def __init__(self, client: httpx.AsyncClient, *, base_url: str) -> None:
        self._client = client
        self._base_url = base_url.rstrip('/')

    def _headers(self, credential: Credential) -> dict[str, str]:
        return {
            'Authorization': f'Bearer {credential.secret}',
            'Content-Type': 'application/json',
        }

    async def _post(self, path: str, body: dict[str, Any], credential: Credential) -> dict[str, Any]:
        url = f'{self._base_url}{path}'
        try:
            resp = await self._client.post(url, json=body, headers=self._headers(credential))
        except httpx.HTTPError as exc:
            raise ProviderCallFailed(self.provider.value, f'{self.label} request failed: {exc}') from exc

        if not resp.is_success:
            raise ProviderCallFailed(
                self.provider.value,
                _error_message(resp) or f'{self.label} API error: {resp.status_code}',
                status_code=resp.status_code,
            )

        try:
            data = resp.json()
        except ValueError as exc:
            raise ProviderCallFailed(self.provider.value, f'{self.label} returned invalid JSON') from exc
        if not isinstance(data, dict):
            raise ProviderCallFailed(self.provider.value, f'{self.label} returned an unexpected payload')
        return data


class QueryAdapter(ProviderAdapter):
    """Adapter for providers that answer a prompt with text."""

    @abstractmethod
    async def query(self, request: QueryRequest, credential: Credential) -> QueryResult:
        """Issue one call for `request` and normalize the reply.

        `request.model` is always set by the time an adapter sees it.
        """
        raise NotImplementedError


class EmbeddingAdapter(ProviderAdapter):
    """Adapter for providers that turn text into a vector."""

    @abstractmethod
    async def embed(self, request: EmbeddingRequest, credential: Credential) -> EmbeddingResult:
        raise NotImplementedError


def _error_message(resp: httpx.Response) -> str | None:
    """Best-effort extraction of the provider's error text from a failed response."""
    try:
        body = resp.json()
    except ValueError:
        return None
    if not isinstance(body, dict):
        return None

    error = body.get('error')
    if isinstance(error, dict):
        message = error.get('message')
        if isinstance(message, str) and message:
            return message
    if isinstance(error, str) and error:
        return error

    # Voyage reports failures as {"detail": "..."}
    detail = body.get('detail')
    if isinstance(detail, str) and detail:
        return detail
    return None
