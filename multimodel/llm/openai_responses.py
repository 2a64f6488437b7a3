"""OpenAI Responses API adapter (HTTP-based).

Why HTTP directly?
- Keeps the adapter isolated and explicit.
- Avoids SDK drift across providers.
- Makes it easier to mock with httpx transports.

Only models the catalog tags with RequestShape.RESPONSES are routed here.
"""

from __future__ import annotations

from typing import Any

import httpx

from multimodel.llm.base import (
    Credential,
    ProviderId,
    QueryAdapter,
    QueryRequest,
    QueryResult,
    RequestShape,
)


class OpenAIResponsesAdapter(QueryAdapter):
    """Adapter that calls OpenAI's Responses API."""

    provider = ProviderId.OPENAI
    shape = RequestShape.RESPONSES
    label = 'Responses'

    def __init__(self, client: httpx.AsyncClient, *, base_url: str, default_max_tokens: int = 4096) -> None:
        super().__init__(client, base_url=base_url)
        self._default_max_tokens = default_max_tokens

    async def query(self, request: QueryRequest, credential: Credential) -> QueryResult:
        body: dict[str, Any] = {
            'model': request.model,
            'input': _build_input(request),
            'max_output_tokens': request.max_output_tokens or self._default_max_tokens,
        }

        data = await self._post('/responses', body, credential)
        return QueryResult(
            content=extract_output_text(data),
            model=data.get('model') or request.model,
            usage=data.get('usage'),
            credential_source=credential.source,
        )


def _build_input(request: QueryRequest) -> str | list[dict[str, str]]:
    if not request.system_instruction:
        return request.prompt
    return [
        {'role': 'system', 'content': request.system_instruction},
        {'role': 'user', 'content': request.prompt},
    ]


def extract_output_text(payload: dict[str, Any]) -> str:
    """Concatenate every output_text fragment of every message item, in emission order.

    Reasoning items and other non-message output are skipped. A reply with no text
    yields an empty string.
    """
    output = payload.get('output')
    if not isinstance(output, list):
        return ''

    parts: list[str] = []
    for item in output:
        if not isinstance(item, dict) or item.get('type') != 'message':
            continue
        content = item.get('content')
        if not isinstance(content, list):
            continue
        for c in content:
            if isinstance(c, dict) and c.get('type') == 'output_text':
                text = c.get('text')
                if isinstance(text, str):
                    parts.append(text)
    return ''.join(parts)
