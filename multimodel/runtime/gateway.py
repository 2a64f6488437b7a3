"""
The tool-call boundary:
- Validates the tool name and arguments (schema validation) before any network call
- Dispatches to the QueryOrchestrator
- Renders exactly one payload per call: the tool result, or {"isError": true, "error": ...}

Nothing raised below this layer escapes it; the process never dies on a provider failure.
"""

from __future__ import annotations

from typing import Any

from pydantic import ValidationError

from multimodel.core.errors import MalformedRequest, UnknownTool
from multimodel.llm.base import EmbeddingRequest, ProviderId, QueryRequest
from multimodel.observability.tracing import log_event
from multimodel.runtime.orchestrator import PARALLEL_PROVIDERS, QueryOrchestrator
from multimodel.schemas import (
    EmbedVoyageArgs,
    ParallelQueryArgs,
    QueryArgs,
    ToolName,
    validate_tool_args,
)
from multimodel.tools.registry import list_tools


def error_payload(message: str) -> dict[str, Any]:
    return {'isError': True, 'error': message}


class ToolGateway:
    """Turns structured tool calls into orchestrator operations."""

    def __init__(self, orchestrator: QueryOrchestrator) -> None:
        self._orchestrator = orchestrator

    def list_tools(self) -> list[dict[str, Any]]:
        return list_tools(self._orchestrator.catalog)

    async def call_tool(self, name: str, arguments: dict[str, Any] | None = None) -> dict[str, Any]:
        """Validate and execute a tool call.

        Args:
            name: Tool name.
            arguments: Raw argument object (e.g., from an agent's tool call).

        Returns:
            The tool's success payload, or an error payload with `isError` set.
        """
        try:
            tool = _tool_name(name)
            args = validate_tool_args(tool, arguments or {})
        except ValidationError as exc:
            return self._error(name, MalformedRequest(_first_error(exc)))
        except MalformedRequest as exc:
            return self._error(name, exc)

        try:
            return await self._dispatch(tool, args)
        except Exception as exc:  # noqa: BLE001 - boundary wrapper for tool failures
            return self._error(name, exc)

    async def _dispatch(self, tool: ToolName, args: Any) -> dict[str, Any]:
        if tool == ToolName.QUERY_OPENAI:
            return await self._query(ProviderId.OPENAI, args)
        if tool == ToolName.QUERY_GEMINI:
            return await self._query(ProviderId.GOOGLE, args)
        if tool == ToolName.EMBED_VOYAGE:
            return await self._embed(args)
        if tool == ToolName.PARALLEL_QUERY:
            return await self._parallel(args)
        raise UnknownTool(tool.value)

    async def _query(self, provider: ProviderId, args: QueryArgs) -> dict[str, Any]:
        result = await self._orchestrator.query_single(
            provider,
            QueryRequest(
                prompt=args.prompt,
                system_instruction=args.system_prompt,
                model=args.model,
                max_output_tokens=args.max_tokens,
            ),
        )
        return result.to_payload()

    async def _embed(self, args: EmbedVoyageArgs) -> dict[str, Any]:
        result = await self._orchestrator.embed(EmbeddingRequest(text=args.text, input_type=args.input_type))
        return result.to_payload()

    async def _parallel(self, args: ParallelQueryArgs) -> dict[str, Any]:
        overrides = {ProviderId.OPENAI: args.openai_model, ProviderId.GOOGLE: args.gemini_model}
        providers = args.providers or list(PARALLEL_PROVIDERS)
        batch = await self._orchestrator.query_parallel(
            args.prompt,
            args.system_prompt,
            {provider: overrides.get(provider) for provider in providers},
            max_output_tokens=args.max_tokens,
        )
        return batch.to_payload()

    @staticmethod
    def _error(name: str, exc: Exception) -> dict[str, Any]:
        message = str(exc) or type(exc).__name__
        log_event('tool.error', tool=name, kind=type(exc).__name__, error=message)
        return error_payload(message)


def _tool_name(name: str) -> ToolName:
    try:
        return ToolName(name)
    except ValueError:
        raise UnknownTool(name) from None


def _first_error(exc: ValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return str(exc)
    first = errors[0]
    loc = '.'.join(str(part) for part in first.get('loc', ())) or 'arguments'
    return f'Invalid argument {loc}: {first.get("msg", "invalid value")}'
