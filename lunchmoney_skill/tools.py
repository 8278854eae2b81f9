"""Tool catalogue and implementations.

Each tool takes a plain ``args`` dict (as received from MCP or ``--call``),
issues REST calls through :class:`LunchMoneyClient` and returns text.
Writes to categories, tags and manual accounts refresh the matching cache
table afterwards.
"""

from __future__ import annotations

import asyncio
import datetime
import logging
import re
from dataclasses import dataclass
from typing import Any, Awaitable, Callable

import httpx

from .cache import CacheInitError, PlaceholderResolver, ReferenceCache, Resolver, SnapshotError
from .client import ApiError, LunchMoneyClient
from .formatting import (
    format_account,
    format_accounts,
    format_bulk_update_result,
    format_categories,
    format_category,
    format_counts,
    format_delete_result,
    format_recurring,
    format_summary,
    format_tag,
    format_tags,
    format_transaction,
    format_transactions,
    format_user,
)
from .models import Category, ManualAccount, ResourceType, SyncedAccount, Tag

logger = logging.getLogger(__name__)


class ToolInputError(ValueError):
    """Bad or missing tool arguments."""


class ToolError(RuntimeError):
    """Tool failed with a message meant for the caller as-is."""


@dataclass
class ToolResult:
    text: str
    is_error: bool = False


# ---------------------------------------------------------------------------
# Context
# ---------------------------------------------------------------------------

_PLACEHOLDERS = PlaceholderResolver()


class ToolContext:
    """Everything a tool needs: the API client and the reference cache."""

    def __init__(self, client: LunchMoneyClient, cache: ReferenceCache | None = None) -> None:
        self.client = client
        self.cache = cache if cache is not None else ReferenceCache(client)

    @property
    def resolver(self) -> Resolver:
        if self.cache.ready:
            return self.cache
        return _PLACEHOLDERS

    async def start(self) -> bool:
        """Populate the cache; on failure keep going with placeholder names."""
        try:
            await self.cache.initialize()
        except CacheInitError as e:
            logger.warning("%s", e)
            logger.warning("Continuing without cache, some output will show IDs instead of names.")
            return False
        return True

    async def refresh_after_write(self, resource: ResourceType) -> str:
        """Refresh one table after a successful write.

        Returns an empty string, or a warning line to append to the tool
        output. The write already happened, so failures are never raised.
        """
        try:
            if self.cache.ready:
                await self.cache.refresh(resource)
            else:
                await self.cache.initialize()
        except (ApiError, httpx.HTTPError, CacheInitError, SnapshotError) as e:
            logger.warning("Cache refresh for %s failed: %s", resource.value, e)
            return f"\n\nWarning: could not refresh cached {resource.value} ({e}); names may be stale."
        return ""


# ---------------------------------------------------------------------------
# Tool metadata (for list_tools / --list / --describe)
# ---------------------------------------------------------------------------

_DATE = {"type": "string", "description": "Date (YYYY-MM-DD)"}
_ID = {"type": "integer"}
_NULLABLE_ID = {"type": ["integer", "null"]}
_AMOUNT = {"type": ["number", "string"], "description": "Amount without currency symbol"}

TOOL_DOCS: dict[str, dict] = {
    # -- Read tools --
    "get_user": {
        "desc": "Get the current Lunch Money user's account info: name, email, budget name, and primary currency.",
        "params": {},
    },
    "list_transactions": {
        "desc": (
            "List or look up Lunch Money transactions. Without an id, returns filtered transactions "
            "(defaults to last 30 days if no dates given). With an id, returns that single transaction. "
            "Output shows category, tag, and account names instead of raw IDs."
        ),
        "params": {
            "id": {**_ID, "description": "Look up a single transaction by ID"},
            "start_date": {**_DATE, "description": "Start of date range (YYYY-MM-DD)"},
            "end_date": {**_DATE, "description": "End of date range (YYYY-MM-DD)"},
            "category_id": {**_ID, "description": "Filter by category ID (0 = uncategorized)"},
            "tag_id": {**_ID, "description": "Filter by tag ID"},
            "status": {"type": "string", "enum": ["reviewed", "unreviewed"]},
            "manual_account_id": {**_ID, "description": "Filter by manual account ID"},
            "plaid_account_id": {**_ID, "description": "Filter by synced account ID"},
            "limit": {"type": "integer", "minimum": 1, "maximum": 500, "description": "Max results (default 50)"},
            "offset": {"type": "integer", "minimum": 0},
        },
    },
    "list_categories": {
        "desc": "List all categories. format=nested shows groups with their children; format=flat (default) is a flat list.",
        "params": {"format": {"type": "string", "enum": ["nested", "flat"]}},
    },
    "list_tags": {
        "desc": "List all tags. Tags can be assigned to transactions for organization beyond categories.",
        "params": {},
    },
    "get_accounts": {
        "desc": "Get all accounts, both manual and synced (Plaid), with balances, types, and status.",
        "params": {},
    },
    "get_summary": {
        "desc": (
            "Budget summary for a date range: income, spending, and per-category breakdown with budget vs actual. "
            "Use the first and last day of a month for a monthly overview."
        ),
        "params": {
            "start_date": {**_DATE, "description": "Start date (YYYY-MM-DD)"},
            "end_date": {**_DATE, "description": "End date (YYYY-MM-DD)"},
            "include_totals": {"type": "boolean", "description": "Include income/spending totals (default true)"},
        },
        "required": ["start_date", "end_date"],
    },
    "get_recurring": {
        "desc": "Get recurring items (subscriptions, bills, income) with expected amounts, frequency, and match status. Defaults to the current month.",
        "params": {
            "start_date": {**_DATE, "description": "Start of period (YYYY-MM-DD)"},
            "end_date": {**_DATE, "description": "End of period (YYYY-MM-DD)"},
        },
    },
    "refresh_references": {
        "desc": "Re-fetch cached categories, tags, and accounts used to show names. Without resource, reloads all four.",
        "params": {"resource": {"type": "string", "enum": [rt.value for rt in ResourceType]}},
    },
    # -- Write tools --
    "manage_transaction": {
        "desc": (
            "Create, update, or delete a single transaction. create needs date and amount "
            "(positive=debit, negative=credit); update needs id plus fields to change; delete needs id."
        ),
        "params": {
            "action": {"type": "string", "enum": ["create", "update", "delete"]},
            "id": {**_ID, "description": "Transaction ID (update/delete)"},
            "date": _DATE,
            "amount": _AMOUNT,
            "payee": {"type": "string"},
            "category_id": {**_NULLABLE_ID, "description": "Category ID (null to clear)"},
            "notes": {"type": ["string", "null"]},
            "currency": {"type": "string", "description": "Three-letter currency code"},
            "manual_account_id": _NULLABLE_ID,
            "tag_ids": {"type": "array", "items": _ID},
            "status": {"type": "string", "enum": ["reviewed", "unreviewed"]},
        },
        "required": ["action"],
    },
    "bulk_update_transactions": {
        "desc": "Update up to 500 transactions at once. Each item needs an id plus the fields to change.",
        "params": {
            "transactions": {
                "type": "array",
                "minItems": 1,
                "maxItems": 500,
                "items": {
                    "type": "object",
                    "properties": {
                        "id": _ID,
                        "category_id": _NULLABLE_ID,
                        "payee": {"type": "string"},
                        "notes": {"type": ["string", "null"]},
                        "tag_ids": {"type": "array", "items": _ID},
                        "status": {"type": "string", "enum": ["reviewed", "unreviewed"]},
                        "date": _DATE,
                        "amount": _AMOUNT,
                        "currency": {"type": "string"},
                    },
                    "required": ["id"],
                },
            },
        },
        "required": ["transactions"],
    },
    "split_transaction": {
        "desc": "Split a transaction into at least 2 parts whose amounts sum to the parent, or unsplit a split parent.",
        "params": {
            "action": {"type": "string", "enum": ["split", "unsplit"]},
            "id": {**_ID, "description": "Transaction ID (parent ID for unsplit)"},
            "splits": {
                "type": "array",
                "items": {
                    "type": "object",
                    "properties": {
                        "amount": _AMOUNT,
                        "payee": {"type": "string"},
                        "date": _DATE,
                        "category_id": _ID,
                        "notes": {"type": "string"},
                    },
                    "required": ["amount"],
                },
            },
        },
        "required": ["action", "id"],
    },
    "group_transactions": {
        "desc": "Group transactions into one (needs ids, date, payee) or ungroup a group parent (needs id).",
        "params": {
            "action": {"type": "string", "enum": ["group", "ungroup"]},
            "id": {**_ID, "description": "Group parent ID (ungroup)"},
            "ids": {"type": "array", "items": _ID},
            "date": _DATE,
            "payee": {"type": "string"},
            "category_id": _NULLABLE_ID,
            "notes": {"type": ["string", "null"]},
            "tag_ids": {"type": "array", "items": _ID},
        },
        "required": ["action"],
    },
    "manage_category": {
        "desc": "Create, update, or delete a category. Use force=true to delete a category that is still in use.",
        "params": {
            "action": {"type": "string", "enum": ["create", "update", "delete"]},
            "id": _ID,
            "name": {"type": "string"},
            "description": {"type": ["string", "null"]},
            "is_income": {"type": "boolean"},
            "exclude_from_budget": {"type": "boolean"},
            "exclude_from_totals": {"type": "boolean"},
            "is_group": {"type": "boolean", "description": "Create as category group (create only)"},
            "group_id": _NULLABLE_ID,
            "archived": {"type": "boolean", "description": "Archive/unarchive (update only)"},
            "force": {"type": "boolean"},
        },
        "required": ["action"],
    },
    "manage_tag": {
        "desc": "Create, update, or delete a tag. Use force=true to delete a tag that is still in use.",
        "params": {
            "action": {"type": "string", "enum": ["create", "update", "delete"]},
            "id": _ID,
            "name": {"type": "string"},
            "description": {"type": ["string", "null"]},
            "archived": {"type": "boolean", "description": "Archive/unarchive (update only)"},
            "force": {"type": "boolean"},
        },
        "required": ["action"],
    },
    "manage_account": {
        "desc": "Create, update, or delete a manual account. create needs name and type.",
        "params": {
            "action": {"type": "string", "enum": ["create", "update", "delete"]},
            "id": _ID,
            "name": {"type": "string"},
            "display_name": {"type": ["string", "null"]},
            "type": {"type": "string", "description": "e.g. cash, credit, investment, real estate"},
            "subtype": {"type": ["string", "null"]},
            "balance": _AMOUNT,
            "currency": {"type": "string"},
            "institution_name": {"type": ["string", "null"]},
            "status": {"type": "string", "enum": ["active", "closed"]},
        },
        "required": ["action"],
    },
}


def input_schema(name: str) -> dict:
    doc = TOOL_DOCS[name]
    schema: dict[str, Any] = {"type": "object", "properties": doc["params"]}
    if doc.get("required"):
        schema["required"] = list(doc["required"])
    return schema


# ---------------------------------------------------------------------------
# Argument helpers
# ---------------------------------------------------------------------------

_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def _today() -> datetime.date:
    return datetime.date.today()


def _validate_date(val: Any, field: str) -> str:
    if not isinstance(val, str) or not _DATE_RE.match(val):
        raise ToolInputError(f"Invalid date for {field}: {val}. Expected YYYY-MM-DD")
    return val


def _int(args: dict, key: str, required: bool = False) -> int | None:
    val = args.get(key)
    if val is None:
        if required:
            raise ToolInputError(f"{key} is required.")
        return None
    if isinstance(val, bool):
        raise ToolInputError(f"{key} must be an integer, got {val!r}")
    try:
        return int(val)
    except (TypeError, ValueError):
        raise ToolInputError(f"{key} must be an integer, got {val!r}") from None


def _int_list(val: Any, field: str) -> list[int]:
    if not isinstance(val, list):
        raise ToolInputError(f"{field} must be a list of IDs")
    return [_int({field: v}, field, required=True) for v in val]


def _action(args: dict, allowed: tuple[str, ...]) -> str:
    action = args.get("action")
    if action not in allowed:
        raise ToolInputError(f"action must be one of: {', '.join(allowed)}")
    return action


def _pick(args: dict, keys: tuple[str, ...]) -> dict[str, Any]:
    """Copy only the keys the caller actually passed (null included)."""
    body = {k: args[k] for k in keys if k in args}
    for k in ("category_id", "group_id", "manual_account_id"):
        if body.get(k) is not None:
            body[k] = _int(body, k)
    if "tag_ids" in body and body["tag_ids"] is not None:
        body["tag_ids"] = _int_list(body["tag_ids"], "tag_ids")
    for k in ("date", "start_date", "end_date"):
        if k in body:
            _validate_date(body[k], k)
    return body


async def _delete(ctx: ToolContext, kind: str, path: str, record_id: int, force: bool) -> None:
    """DELETE that turns a 422 "has dependents" answer into a readable error."""
    try:
        await ctx.client.delete(path, {"force": True} if force else None)
    except ApiError as e:
        dependents = e.body.get("dependents") if isinstance(e.body, dict) else None
        if e.status == 422 and isinstance(dependents, dict):
            raise ToolError(format_delete_result(kind, record_id, dependents)) from e
        raise


# ---------------------------------------------------------------------------
# Read tools
# ---------------------------------------------------------------------------

async def tool_get_user(ctx: ToolContext, args: dict) -> str:
    return format_user(await ctx.client.get("/me"))


async def tool_list_transactions(ctx: ToolContext, args: dict) -> str:
    tid = _int(args, "id")
    if tid is not None:
        data = await ctx.client.get(f"/transactions/{tid}")
        return format_transaction(data, ctx.resolver)

    start_date = args.get("start_date")
    end_date = args.get("end_date")
    if start_date:
        _validate_date(start_date, "start_date")
    if end_date:
        _validate_date(end_date, "end_date")
    if not start_date and not end_date:
        today = _today()
        end_date = today.isoformat()
        start_date = (today - datetime.timedelta(days=30)).isoformat()

    limit = _int(args, "limit")
    limit = 50 if limit is None else limit
    if not 1 <= limit <= 500:
        raise ToolInputError(f"limit must be between 1 and 500, got {limit}")
    offset = _int(args, "offset")
    if offset is not None and offset < 0:
        raise ToolInputError(f"offset must be non-negative, got {offset}")
    status = args.get("status")
    if status is not None and status not in ("reviewed", "unreviewed"):
        raise ToolInputError("status must be reviewed or unreviewed")

    data = await ctx.client.get("/transactions", {
        "start_date": start_date,
        "end_date": end_date,
        "category_id": _int(args, "category_id"),
        "tag_id": _int(args, "tag_id"),
        "status": status,
        "manual_account_id": _int(args, "manual_account_id"),
        "plaid_account_id": _int(args, "plaid_account_id"),
        "limit": limit,
        "offset": offset,
    })
    return format_transactions(data.get("transactions") or [], bool(data.get("has_more")), ctx.resolver)


async def tool_list_categories(ctx: ToolContext, args: dict) -> str:
    mode = args.get("format") or "flat"
    if mode not in ("nested", "flat"):
        raise ToolInputError("format must be nested or flat")
    data = await ctx.client.get(
        "/categories", {"format": "nested" if mode == "nested" else "flattened"}
    )
    categories = [Category.from_api(c) for c in data.get("categories") or []]
    return format_categories(categories, mode, ctx.resolver)


async def tool_list_tags(ctx: ToolContext, args: dict) -> str:
    data = await ctx.client.get("/tags")
    return format_tags([Tag.from_api(t) for t in data.get("tags") or []])


async def tool_get_accounts(ctx: ToolContext, args: dict) -> str:
    manual, plaid = await asyncio.gather(
        ctx.client.get("/manual_accounts"),
        ctx.client.get("/plaid_accounts"),
    )
    return format_accounts(
        [ManualAccount.from_api(a) for a in manual.get("manual_accounts") or []],
        [SyncedAccount.from_api(a) for a in plaid.get("plaid_accounts") or []],
    )


async def tool_get_summary(ctx: ToolContext, args: dict) -> str:
    start_date = _validate_date(args.get("start_date"), "start_date")
    end_date = _validate_date(args.get("end_date"), "end_date")
    include_totals = args.get("include_totals")
    data = await ctx.client.get("/summary", {
        "start_date": start_date,
        "end_date": end_date,
        "include_totals": True if include_totals is None else bool(include_totals),
    })
    return format_summary(data, start_date, end_date, ctx.resolver)


async def tool_get_recurring(ctx: ToolContext, args: dict) -> str:
    params = _pick(args, ("start_date", "end_date"))
    data = await ctx.client.get("/recurring_items", params)
    return format_recurring(data.get("recurring_items") or [], ctx.resolver)


async def tool_refresh_references(ctx: ToolContext, args: dict) -> str:
    resource = args.get("resource")
    if resource is not None:
        try:
            resource = ResourceType(resource)
        except ValueError:
            raise ToolInputError(
                f"resource must be one of: {', '.join(rt.value for rt in ResourceType)}"
            ) from None

    if resource is None or not ctx.cache.ready:
        try:
            await ctx.cache.initialize()
        except CacheInitError as e:
            raise ToolError(str(e)) from e
        names = [rt.value for rt in ResourceType]
    else:
        try:
            await ctx.cache.refresh(resource)
        except SnapshotError as e:
            raise ToolError(f"Error: {e}") from e
        names = [resource.value]
    return "Reference cache refreshed.\n" + format_counts(ctx.cache.counts(), names)


# ---------------------------------------------------------------------------
# Write tools
# ---------------------------------------------------------------------------

_TX_FIELDS = ("date", "amount", "payee", "category_id", "notes", "currency", "tag_ids", "status")


async def tool_manage_transaction(ctx: ToolContext, args: dict) -> str:
    action = _action(args, ("create", "update", "delete"))

    if action == "create":
        if not args.get("date") or args.get("amount") is None:
            raise ToolInputError("date and amount are required for create.")
        tx = {k: v for k, v in _pick(args, _TX_FIELDS + ("manual_account_id",)).items() if v is not None}
        data = await ctx.client.post("/transactions", {"transactions": [tx]})
        created = (data.get("transactions") or [{}])[0]
        return f"Transaction created successfully.\n\n{format_transaction(created, ctx.resolver)}"

    tid = _int(args, "id")
    if tid is None:
        raise ToolInputError(f"id is required for {action}.")

    if action == "update":
        data = await ctx.client.put(f"/transactions/{tid}", _pick(args, _TX_FIELDS))
        return f"Transaction updated successfully.\n\n{format_transaction(data, ctx.resolver)}"

    await ctx.client.delete(f"/transactions/{tid}")
    return f"Transaction {tid} deleted successfully."


async def tool_bulk_update_transactions(ctx: ToolContext, args: dict) -> str:
    items = args.get("transactions")
    if not isinstance(items, list) or not 1 <= len(items) <= 500:
        raise ToolInputError("transactions must be a list of 1 to 500 items.")
    body = []
    for i, item in enumerate(items):
        if not isinstance(item, dict):
            raise ToolInputError(f"transactions[{i}] must be an object")
        entry = {"id": _int(item, "id", required=True)}
        entry.update(_pick(item, _TX_FIELDS))
        body.append(entry)
    data = await ctx.client.put("/transactions", {"transactions": body})
    return format_bulk_update_result(data.get("transactions") or [], ctx.resolver)


async def tool_split_transaction(ctx: ToolContext, args: dict) -> str:
    action = _action(args, ("split", "unsplit"))
    tid = _int(args, "id", required=True)

    if action == "unsplit":
        await ctx.client.delete(f"/transactions/split/{tid}")
        return f"Transaction {tid} unsplit successfully. Original transaction restored."

    splits = args.get("splits")
    if not isinstance(splits, list) or len(splits) < 2:
        raise ToolInputError("at least 2 splits are required.")
    children = []
    for i, s in enumerate(splits):
        if not isinstance(s, dict) or s.get("amount") is None:
            raise ToolInputError(f"splits[{i}] needs an amount")
        children.append(
            {k: v for k, v in _pick(s, ("amount", "payee", "date", "category_id", "notes")).items() if v is not None}
        )
    parent = await ctx.client.post(f"/transactions/split/{tid}", {"child_transactions": children})
    count = len(parent.get("children") or []) or len(children)
    return f"Transaction split into {count} parts.\n\n{format_transaction(parent, ctx.resolver)}"


async def tool_group_transactions(ctx: ToolContext, args: dict) -> str:
    action = _action(args, ("group", "ungroup"))

    if action == "ungroup":
        gid = _int(args, "id")
        if gid is None:
            raise ToolInputError("id is required for ungroup.")
        await ctx.client.delete(f"/transactions/group/{gid}")
        return f"Transaction group {gid} removed. Original transactions restored."

    ids = args.get("ids")
    if not isinstance(ids, list) or len(ids) < 2 or not args.get("date") or not args.get("payee"):
        raise ToolInputError("ids (min 2), date, and payee are required for group.")
    body = _pick(args, ("date", "payee", "category_id", "notes", "tag_ids"))
    body["ids"] = _int_list(ids, "ids")
    data = await ctx.client.post("/transactions/group", body)
    return f"{len(ids)} transactions grouped.\n\n{format_transaction(data, ctx.resolver)}"


_CATEGORY_FIELDS = (
    "name", "description", "is_income", "exclude_from_budget", "exclude_from_totals", "group_id",
)


async def tool_manage_category(ctx: ToolContext, args: dict) -> str:
    action = _action(args, ("create", "update", "delete"))

    if action == "create":
        if not args.get("name"):
            raise ToolInputError("name is required for create.")
        data = await ctx.client.post("/categories", _pick(args, _CATEGORY_FIELDS + ("is_group",)))
        warning = await ctx.refresh_after_write(ResourceType.CATEGORIES)
        return f"Category created.\n\n{format_category(Category.from_api(data), ctx.resolver)}{warning}"

    cid = _int(args, "id")
    if cid is None:
        raise ToolInputError(f"id is required for {action}.")

    if action == "update":
        data = await ctx.client.put(f"/categories/{cid}", _pick(args, _CATEGORY_FIELDS + ("archived",)))
        warning = await ctx.refresh_after_write(ResourceType.CATEGORIES)
        return f"Category updated.\n\n{format_category(Category.from_api(data), ctx.resolver)}{warning}"

    await _delete(ctx, "Category", f"/categories/{cid}", cid, bool(args.get("force")))
    warning = await ctx.refresh_after_write(ResourceType.CATEGORIES)
    return format_delete_result("Category", cid) + warning


async def tool_manage_tag(ctx: ToolContext, args: dict) -> str:
    action = _action(args, ("create", "update", "delete"))

    if action == "create":
        if not args.get("name"):
            raise ToolInputError("name is required for create.")
        data = await ctx.client.post("/tags", _pick(args, ("name", "description")))
        warning = await ctx.refresh_after_write(ResourceType.TAGS)
        return f"Tag created.\n\n{format_tag(Tag.from_api(data))}{warning}"

    tag_id = _int(args, "id")
    if tag_id is None:
        raise ToolInputError(f"id is required for {action}.")

    if action == "update":
        data = await ctx.client.put(f"/tags/{tag_id}", _pick(args, ("name", "description", "archived")))
        warning = await ctx.refresh_after_write(ResourceType.TAGS)
        return f"Tag updated.\n\n{format_tag(Tag.from_api(data))}{warning}"

    await _delete(ctx, "Tag", f"/tags/{tag_id}", tag_id, bool(args.get("force")))
    warning = await ctx.refresh_after_write(ResourceType.TAGS)
    return format_delete_result("Tag", tag_id) + warning


_ACCOUNT_FIELDS = (
    "name", "display_name", "type", "subtype", "balance", "currency", "institution_name",
)


async def tool_manage_account(ctx: ToolContext, args: dict) -> str:
    action = _action(args, ("create", "update", "delete"))

    if action == "create":
        if not args.get("name") or not args.get("type"):
            raise ToolInputError("name and type are required for create.")
        data = await ctx.client.post("/manual_accounts", _pick(args, _ACCOUNT_FIELDS))
        warning = await ctx.refresh_after_write(ResourceType.MANUAL_ACCOUNTS)
        return f"Account created.\n\n{format_account(ManualAccount.from_api(data))}{warning}"

    aid = _int(args, "id")
    if aid is None:
        raise ToolInputError(f"id is required for {action}.")

    if action == "update":
        data = await ctx.client.put(f"/manual_accounts/{aid}", _pick(args, _ACCOUNT_FIELDS + ("status",)))
        warning = await ctx.refresh_after_write(ResourceType.MANUAL_ACCOUNTS)
        return f"Account updated.\n\n{format_account(ManualAccount.from_api(data))}{warning}"

    await _delete(ctx, "Account", f"/manual_accounts/{aid}", aid, False)
    warning = await ctx.refresh_after_write(ResourceType.MANUAL_ACCOUNTS)
    return format_delete_result("Account", aid) + warning


# ---------------------------------------------------------------------------
# Dispatch table
# ---------------------------------------------------------------------------

Handler = Callable[[ToolContext, dict], Awaitable[str]]

HANDLERS: dict[str, Handler] = {
    "get_user": tool_get_user,
    "list_transactions": tool_list_transactions,
    "list_categories": tool_list_categories,
    "list_tags": tool_list_tags,
    "get_accounts": tool_get_accounts,
    "get_summary": tool_get_summary,
    "get_recurring": tool_get_recurring,
    "refresh_references": tool_refresh_references,
    "manage_transaction": tool_manage_transaction,
    "bulk_update_transactions": tool_bulk_update_transactions,
    "split_transaction": tool_split_transaction,
    "group_transactions": tool_group_transactions,
    "manage_category": tool_manage_category,
    "manage_tag": tool_manage_tag,
    "manage_account": tool_manage_account,
}


async def run_tool(ctx: ToolContext, name: str, args: dict | None) -> ToolResult:
    handler = HANDLERS.get(name)
    if not handler:
        return ToolResult(f"Unknown tool: {name}. Use --list to see available tools.", is_error=True)
    try:
        return ToolResult(await handler(ctx, args or {}))
    except (ToolInputError, ApiError) as e:
        return ToolResult(f"Error: {e}", is_error=True)
    except ToolError as e:
        return ToolResult(str(e), is_error=True)
