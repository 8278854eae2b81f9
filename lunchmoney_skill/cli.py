"""Lunch Money CLI: standalone executor for the same tools the MCP server offers.

Usage:
  lunchmoney-skill --list
  lunchmoney-skill --describe list_transactions
  lunchmoney-skill --call '{"tool":"list_transactions","arguments":{"limit":10}}'
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys

from .client import LunchMoneyClient
from .config import Config, ConfigError, configure_logging, load_config
from .tools import TOOL_DOCS, ToolContext, ToolResult, input_schema, run_tool


async def _run_tool(config: Config, name: str, args: dict) -> ToolResult:
    async with LunchMoneyClient(config.require_token(), config.base_url, config.timeout) as client:
        ctx = ToolContext(client)
        await ctx.start()
        return await run_tool(ctx, name, args)


def _fail(message: str) -> None:
    print(json.dumps({"error": message}, ensure_ascii=False), file=sys.stderr)
    sys.exit(1)


def main(argv: list[str] | None = None) -> None:
    if hasattr(sys.stdout, "reconfigure"):
        sys.stdout.reconfigure(encoding="utf-8")

    parser = argparse.ArgumentParser(description="Lunch Money CLI executor")
    group = parser.add_mutually_exclusive_group(required=True)
    group.add_argument("--list", action="store_true", help="List all tools")
    group.add_argument("--describe", type=str, metavar="TOOL", help="Describe a tool")
    group.add_argument("--call", type=str, metavar="JSON", help='Call: {"tool":"name","arguments":{...}}')
    parsed = parser.parse_args(argv)

    if parsed.list:
        tools = [{"name": n, "description": d["desc"]} for n, d in TOOL_DOCS.items()]
        print(json.dumps(tools, ensure_ascii=False, indent=2))
        return

    if parsed.describe:
        if parsed.describe not in TOOL_DOCS:
            _fail(f"Unknown tool: {parsed.describe}")
        print(json.dumps(
            {
                "name": parsed.describe,
                "description": TOOL_DOCS[parsed.describe]["desc"],
                "inputSchema": input_schema(parsed.describe),
            },
            ensure_ascii=False, indent=2,
        ))
        return

    try:
        config = load_config()
        config.require_token()
    except ConfigError as e:
        _fail(str(e))

    try:
        payload = json.loads(parsed.call)
    except json.JSONDecodeError as e:
        _fail(f"Invalid JSON: {e}")
    if not isinstance(payload, dict):
        _fail("Call payload must be a JSON object")

    tool_name = payload.get("tool", "")
    arguments = payload.get("arguments") or {}
    if tool_name not in TOOL_DOCS:
        _fail(f"Unknown tool: {tool_name}. Use --list to see available tools.")

    configure_logging(config.log_level)
    try:
        result = asyncio.run(_run_tool(config, tool_name, arguments))
    except Exception as e:
        _fail(str(e))
    if result.is_error:
        _fail(result.text)
    print(result.text)


if __name__ == "__main__":
    main()
