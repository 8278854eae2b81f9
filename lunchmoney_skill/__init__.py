"""Lunch Money tools for MCP clients and the command line.

Tool calls are translated into Lunch Money v2 REST requests and answered
with plain text. Category, tag and account IDs in the responses are
hydrated into names from an in-memory reference cache.
"""

__version__ = "0.1.0"
