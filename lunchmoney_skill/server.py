"""MCP server exposing the Lunch Money tools over stdio.

Usage:
    lunchmoney-mcp
    python -m lunchmoney_skill.server
"""

from __future__ import annotations

import asyncio
import logging
import sys
from typing import Any

from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.types import TextContent, Tool

from . import __version__
from .client import LunchMoneyClient
from .config import ConfigError, configure_logging, load_config
from .tools import TOOL_DOCS, ToolContext, input_schema, run_tool

logger = logging.getLogger(__name__)

SERVER_NAME = "lunchmoney-mcp"


def build_server(ctx: ToolContext) -> Server:
    server = Server(SERVER_NAME, version=__version__)

    @server.list_tools()
    async def list_tools() -> list[Tool]:
        return [
            Tool(name=name, description=doc["desc"], inputSchema=input_schema(name))
            for name, doc in TOOL_DOCS.items()
        ]

    @server.call_tool()
    async def call_tool(name: str, arguments: dict[str, Any] | None) -> list[TextContent]:
        result = await run_tool(ctx, name, arguments)
        if result.is_error:
            # the SDK turns raised exceptions into isError results
            raise RuntimeError(result.text)
        return [TextContent(type="text", text=result.text)]

    return server


async def serve() -> None:
    config = load_config()
    configure_logging(config.log_level)
    token = config.require_token()

    async with LunchMoneyClient(token, config.base_url, config.timeout) as client:
        ctx = ToolContext(client)
        await ctx.start()
        server = build_server(ctx)
        logger.info("%s %s running on stdio", SERVER_NAME, __version__)
        async with stdio_server() as (read_stream, write_stream):
            await server.run(read_stream, write_stream, server.create_initialization_options())


def main() -> None:
    try:
        asyncio.run(serve())
    except ConfigError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
