"""
CLI entry point for running the MCP server.

Usage:
    python -m multimodel

This starts the FastMCP server with stdio transport. The agent connects to the
server's stdin/stdout pipes; diagnostics go to stderr.
"""

from multimodel.observability.tracing import log_event
from multimodel.server.container import get_container
from multimodel.server.mcp_server import create_mcp_server


def main() -> None:
    """Start the MCP server."""
    server = create_mcp_server(get_container().gateway)
    log_event('server.start', server='multimodel-mcp', transport='stdio')
    server.run()


if __name__ == "__main__":
    main()
