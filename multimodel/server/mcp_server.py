"""
FastMCP server exposing the query router over the Model Context Protocol.

Entry points:
    python -m multimodel         # stdio transport (for agent integration)
    create_mcp_server()          # programmatic use (for testing)

Architecture:
    FastMCP server (4 tools)
    +-- query_openai()    -> QueryOrchestrator.query_single(openai)
    +-- query_gemini()    -> QueryOrchestrator.query_single(google)
    +-- embed_voyage()    -> QueryOrchestrator.embed()
    +-- parallel_query()  -> QueryOrchestrator.query_parallel()

Every tool goes through ToolGateway, so argument validation and error rendering are
identical to the HTTP surface. Gateway error payloads are raised as ToolError, which
FastMCP reports as an `isError` tool result.
"""

from __future__ import annotations

from typing import Any, Awaitable, Callable, Literal

from fastmcp import FastMCP
from fastmcp.exceptions import ToolError
from fastmcp.tools import Tool

from multimodel.runtime.gateway import ToolGateway
from multimodel.schemas import ToolName

ToolFunction = Callable[..., Awaitable[dict[str, Any]]]


def build_tool_functions(gateway: ToolGateway) -> dict[str, ToolFunction]:
    """Typed MCP tool functions bound to `gateway`, keyed by tool name."""

    async def _call(name: ToolName, arguments: dict[str, Any]) -> dict[str, Any]:
        # Drop unset optionals so the gateway's defaults apply.
        payload = await gateway.call_tool(name.value, {k: v for k, v in arguments.items() if v is not None})
        if payload.get('isError'):
            raise ToolError(payload['error'])
        return payload

    async def query_openai(
        prompt: str,
        system_prompt: str | None = None,
        model: str | None = None,
        max_tokens: int | None = None,
    ) -> dict[str, Any]:
        return await _call(
            ToolName.QUERY_OPENAI,
            {'prompt': prompt, 'system_prompt': system_prompt, 'model': model, 'max_tokens': max_tokens},
        )

    async def query_gemini(
        prompt: str,
        system_prompt: str | None = None,
        model: str | None = None,
        max_tokens: int | None = None,
    ) -> dict[str, Any]:
        return await _call(
            ToolName.QUERY_GEMINI,
            {'prompt': prompt, 'system_prompt': system_prompt, 'model': model, 'max_tokens': max_tokens},
        )

    async def embed_voyage(
        text: str,
        input_type: Literal['document', 'query'] = 'document',
    ) -> dict[str, Any]:
        return await _call(ToolName.EMBED_VOYAGE, {'text': text, 'input_type': input_type})

    async def parallel_query(
        prompt: str,
        system_prompt: str | None = None,
        openai_model: str | None = None,
        gemini_model: str | None = None,
        max_tokens: int | None = None,
        providers: list[Literal['openai', 'google']] | None = None,
    ) -> dict[str, Any]:
        return await _call(
            ToolName.PARALLEL_QUERY,
            {
                'prompt': prompt,
                'system_prompt': system_prompt,
                'openai_model': openai_model,
                'gemini_model': gemini_model,
                'max_tokens': max_tokens,
                'providers': providers,
            },
        )

    return {
        ToolName.QUERY_OPENAI.value: query_openai,
        ToolName.QUERY_GEMINI.value: query_gemini,
        ToolName.EMBED_VOYAGE.value: embed_voyage,
        ToolName.PARALLEL_QUERY.value: parallel_query,
    }


def create_mcp_server(gateway: ToolGateway, name: str = 'multimodel-mcp') -> FastMCP:
    """
    Create and configure the FastMCP server with all tools registered.

    Args:
        gateway: Tool gateway every tool dispatches through.
        name: Server name for MCP protocol handshake.

    Returns:
        Configured FastMCP server instance.
    """
    mcp = FastMCP(name)
    descriptions = {tool['name']: tool['description'] for tool in gateway.list_tools()}
    for tool_name, fn in build_tool_functions(gateway).items():
        mcp.add_tool(Tool.from_function(fn, name=tool_name, description=descriptions[tool_name]))
    return mcp
