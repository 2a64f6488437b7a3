"""OpenAI Chat Completions adapter."""

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


class OpenAIChatAdapter(QueryAdapter):
    """Adapter for chat-shaped OpenAI models (ordered, role-tagged message list)."""

    provider = ProviderId.OPENAI
    shape = RequestShape.CHAT
    label = 'OpenAI'

    def __init__(self, client: httpx.AsyncClient, *, base_url: str, default_max_tokens: int = 4096) -> None:
        super().__init__(client, base_url=base_url)
        self._default_max_tokens = default_max_tokens

    async def query(self, request: QueryRequest, credential: Credential) -> QueryResult:
        messages: list[dict[str, str]] = []
        if request.system_instruction:
            messages.append({'role': 'system', 'content': request.system_instruction})
        messages.append({'role': 'user', 'content': request.prompt})

        body: dict[str, Any] = {
            'model': request.model,
            'messages': messages,
            'max_completion_tokens': request.max_output_tokens or self._default_max_tokens,
        }

        data = await self._post('/chat/completions', body, credential)
        return QueryResult(
            content=_first_choice_text(data),
            model=data.get('model') or request.model,
            usage=data.get('usage'),
            credential_source=credential.source,
        )


def _first_choice_text(payload: dict[str, Any]) -> str:
    choices = payload.get('choices')
    if not isinstance(choices, list) or not choices:
        return ''
    message = choices[0].get('message') if isinstance(choices[0], dict) else None
    if not isinstance(message, dict):
        return ''
    content = message.get('content')
    return content if isinstance(content, str) else ''
