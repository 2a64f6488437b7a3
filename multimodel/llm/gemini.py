"""Google Gemini adapter (generateContent REST endpoint)."""

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


class GeminiAdapter(QueryAdapter):
    """Chat-style adapter for Gemini models.

    The system instruction travels in `systemInstruction` rather than as a message, and the
    token limit is `generationConfig.maxOutputTokens`. When no limit is requested the
    field is omitted and the model's own default applies.
    """

    provider = ProviderId.GOOGLE
    shape = RequestShape.CHAT
    label = 'Gemini'

    def _headers(self, credential: Credential) -> dict[str, str]:
        return {
            'x-goog-api-key': credential.secret,
            'Content-Type': 'application/json',
        }

    async def query(self, request: QueryRequest, credential: Credential) -> QueryResult:
        body: dict[str, Any] = {
            'contents': [{'role': 'user', 'parts': [{'text': request.prompt}]}],
        }
        if request.system_instruction:
            body['systemInstruction'] = {'parts': [{'text': request.system_instruction}]}
        if request.max_output_tokens:
            body['generationConfig'] = {'maxOutputTokens': request.max_output_tokens}

        data = await self._post(f'/models/{request.model}:generateContent', body, credential)
        return QueryResult(
            content=_candidate_text(data),
            model=data.get('modelVersion') or request.model,
            usage=data.get('usageMetadata'),
            credential_source=credential.source,
        )


def _candidate_text(payload: dict[str, Any]) -> str:
    """Join the text parts of the first candidate."""
    candidates = payload.get('candidates')
    if not isinstance(candidates, list) or not candidates or not isinstance(candidates[0], dict):
        return ''
    content = candidates[0].get('content')
    if not isinstance(content, dict):
        return ''
    parts = content.get('parts')
    if not isinstance(parts, list):
        return ''
    return ''.join(p['text'] for p in parts if isinstance(p, dict) and isinstance(p.get('text'), str))
