from typing import Any

from fastapi import APIRouter, Body, Depends

from multimodel.server.container import get_container

router = APIRouter(prefix="/tools", tags=["Tools"])


@router.get("", summary="List available tools")
async def list_tools(container=Depends(get_container)) -> list[dict[str, Any]]:
    return container.gateway.list_tools()


@router.post("/{tool_name}", summary="Invoke a tool")
async def call_tool(
    tool_name: str,
    arguments: dict[str, Any] | None = Body(default=None),
    container=Depends(get_container),
) -> dict[str, Any]:
    # Error outcomes are payloads too (isError), so the status stays 200.
    return await container.gateway.call_tool(tool_name, arguments)
