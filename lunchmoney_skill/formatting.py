"""Text rendering for tool responses.

Every function here is pure: given a record and a resolver (the reference
cache, or the placeholder resolver in degraded mode) it returns text.
Placeholders such as ``Category #42`` are rendered as-is.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any, Iterable, Mapping, Sequence

from .cache import UNCATEGORIZED, Resolver
from .models import Category, ManualAccount, SyncedAccount, Tag

_CURRENCY_SYMBOLS = {
    "usd": "$",
    "eur": "€",
    "gbp": "£",
    "jpy": "¥",
    "cad": "CA$",
    "aud": "A$",
    "chf": "CHF ",
}

_CENTS = Decimal("0.01")


def _to_decimal(amount: Any) -> Decimal:
    try:
        d = Decimal(str(amount))
    except (InvalidOperation, ValueError):
        return Decimal("0")
    return d if d.is_finite() else Decimal("0")


def _signed(num: Decimal, sym: str) -> str:
    abs_str = str(abs(num).quantize(_CENTS, rounding=ROUND_HALF_UP))
    return f"-{sym}{abs_str}" if num < 0 else f"{sym}{abs_str}"


def currency_symbol(code: str) -> str:
    return _CURRENCY_SYMBOLS.get(code.lower(), f"{code.upper()} ")


def format_amount(amount: Any, currency: str | None) -> str:
    return _signed(_to_decimal(amount), currency_symbol(currency or "usd"))


def format_currency(amount: Any) -> str:
    return _signed(_to_decimal(amount), "$")


def _plural(n: int, word: str) -> str:
    return f"{n} {word}{'' if n == 1 else 's'}"


# ---------------------------------------------------------------------------
# Transactions
# ---------------------------------------------------------------------------

def format_transaction(t: Mapping[str, Any], resolver: Resolver) -> str:
    tag_ids = t.get("tag_ids") or []
    tags = f" [{', '.join(resolver.tag_names(tag_ids))}]" if tag_ids else ""
    account = resolver.account_name(t.get("manual_account_id"), t.get("plaid_account_id"))
    category = resolver.category_name(t.get("category_id"))
    status = " (unreviewed)" if t.get("status") == "unreviewed" else ""

    lines = [
        f"{t.get('date', '')}  {format_amount(t.get('amount', 0), t.get('currency'))}  {t.get('payee') or ''}",
        f"  Category: {category} | Account: {account}{status}{tags}",
        f"  ID: {t.get('id')}",
    ]
    if t.get("notes"):
        lines.append(f"  Notes: {t['notes']}")
    return "\n".join(lines)


def format_transactions(
    transactions: Sequence[Mapping[str, Any]], has_more: bool, resolver: Resolver
) -> str:
    if not transactions:
        return "No transactions found for this period. Try adjusting the date range or filters."

    summary = f"Showing {_plural(len(transactions), 'transaction')}"
    more = " (more available, increase limit or use offset)" if has_more else ""
    body = "\n\n".join(format_transaction(t, resolver) for t in transactions)
    return f"{summary}{more}\n\n{body}"


def format_bulk_update_result(transactions: Sequence[Mapping[str, Any]], resolver: Resolver) -> str:
    count = len(transactions)
    preview = "\n\n".join(format_transaction(t, resolver) for t in transactions[:3])
    more = f"\n\n... and {count - 3} more" if count > 3 else ""
    return f"{_plural(count, 'transaction')} updated.\n\n{preview}{more}"


# ---------------------------------------------------------------------------
# Categories / tags
# ---------------------------------------------------------------------------

def _category_flags(cat: Category) -> str:
    flags = []
    if cat.is_income:
        flags.append("income")
    if cat.exclude_from_budget:
        flags.append("excl. budget")
    if cat.exclude_from_totals:
        flags.append("excl. totals")
    if cat.archived:
        flags.append("archived")
    return f" ({', '.join(flags)})" if flags else ""


def _group_suffix(cat: Category, resolver: Resolver) -> str:
    return f" [group: {resolver.category_name(cat.group_id)}]" if cat.group_id else ""


def format_categories(categories: Sequence[Category], mode: str, resolver: Resolver) -> str:
    """Render a category list; ``mode`` is "nested" (groups with children) or "flat"."""
    if not categories:
        return "No categories found."

    lines = []
    if mode == "nested":
        for cat in categories:
            lines.append(f"{cat.name}{_category_flags(cat)} (ID: {cat.id})")
            if cat.is_group and cat.children:
                lines.extend(f"  - {c.name} (ID: {c.id})" for c in cat.children)
        return "\n".join(lines)

    for cat in categories:
        lines.append(f"{cat.name}{_category_flags(cat)}{_group_suffix(cat, resolver)} (ID: {cat.id})")
    return "\n".join(lines)


def format_category(cat: Category, resolver: Resolver) -> str:
    desc = f"\n  Description: {cat.description}" if cat.description else ""
    return f"{cat.name}{_category_flags(cat)}{_group_suffix(cat, resolver)} (ID: {cat.id}){desc}"


def format_tag(tag: Tag) -> str:
    desc = f": {tag.description}" if tag.description else ""
    archived = " (archived)" if tag.archived else ""
    return f"{tag.name}{desc}{archived} (ID: {tag.id})"


def format_tags(tags: Sequence[Tag]) -> str:
    if not tags:
        return "No tags found. Create tags in Lunch Money to organize transactions."
    return "\n".join(format_tag(t) for t in tags)


# ---------------------------------------------------------------------------
# Accounts
# ---------------------------------------------------------------------------

def format_account(a: ManualAccount) -> str:
    inst = f" @ {a.institution_name}" if a.institution_name else ""
    closed = " (closed)" if a.status == "closed" else ""
    return (
        f"{a.label}{inst}{closed}\n"
        f"  Balance: {format_amount(a.balance, a.currency)} | Type: {a.type} | ID: {a.id}"
    )


def _format_synced_account(a: SyncedAccount) -> str:
    status = f" ({a.status})" if a.status != "active" else ""
    kind = f"{a.type}/{a.subtype}" if a.subtype else a.type
    return (
        f"{a.label} @ {a.institution_name}{status}\n"
        f"  Balance: {format_amount(a.balance, a.currency)} | Type: {kind} | ID: {a.id}"
    )


def format_accounts(manual: Sequence[ManualAccount], synced: Sequence[SyncedAccount]) -> str:
    lines: list[str] = []
    if manual:
        lines.append("## Manual Accounts\n")
        lines.extend(format_account(a) for a in manual)
    if synced:
        if lines:
            lines.append("")
        lines.append("## Synced Accounts\n")
        lines.extend(_format_synced_account(a) for a in synced)
    if not lines:
        return "No accounts found."
    return "\n".join(lines)


# ---------------------------------------------------------------------------
# Summary / recurring / user
# ---------------------------------------------------------------------------

def _activity(totals: Mapping[str, Any] | None) -> Decimal:
    totals = totals or {}
    return _to_decimal(totals.get("other_activity") or 0) + _to_decimal(
        totals.get("recurring_activity") or 0
    )


def format_summary(data: Mapping[str, Any], start_date: str, end_date: str, resolver: Resolver) -> str:
    lines = [f"Budget Summary: {start_date} to {end_date}\n"]

    totals = data.get("totals")
    if totals:
        inflow = _activity(totals.get("inflow"))
        outflow = _activity(totals.get("outflow"))
        lines.append(f"Income: {format_currency(inflow)}")
        lines.append(f"Spending: {format_currency(outflow)}")
        lines.append(f"Net: {format_currency(inflow - outflow)}")
        uncategorized = (totals.get("outflow") or {}).get("uncategorized")
        if uncategorized:
            lines.append(f"Uncategorized spending: {format_currency(uncategorized)}")
        lines.append("")

    categories = data.get("categories") or []
    if categories:
        lines.append("Category Breakdown:")
        ranked = sorted(categories, key=lambda c: _activity(c.get("totals")), reverse=True)
        for cat in ranked:
            cat_totals = cat.get("totals") or {}
            total = _activity(cat_totals)
            if total == 0:
                continue
            name = resolver.category_name(cat.get("category_id"))
            budget = ""
            if cat_totals.get("budgeted") is not None:
                budget = (
                    f" (budget: {format_currency(cat_totals['budgeted'])}, "
                    f"avail: {format_currency(cat_totals.get('available') or 0)})"
                )
            lines.append(f"  {name}: {format_currency(total)}{budget}")

    return "\n".join(lines)


def _frequency(quantity: int, granularity: str) -> str:
    if quantity > 1:
        return f"every {quantity} {granularity}s"
    return f"every {granularity}"


def format_recurring(items: Sequence[Mapping[str, Any]], resolver: Resolver) -> str:
    if not items:
        return "No recurring items found for this period."

    blocks = []
    for r in items:
        criteria = r.get("transaction_criteria") or {}
        overrides = r.get("overrides") or {}
        payee = overrides.get("payee") or criteria.get("payee") or "Unknown"
        category_id = overrides.get("category_id")
        category = resolver.category_name(category_id) if category_id else UNCATEGORIZED
        account = resolver.account_name(
            criteria.get("manual_account_id"), criteria.get("plaid_account_id")
        )
        freq = _frequency(int(criteria.get("quantity") or 1), criteria.get("granularity") or "month")
        desc = f": {r['description']}" if r.get("description") else ""

        match_info = ""
        matches = r.get("matches")
        if matches:
            found = len(matches.get("found_transactions") or [])
            missing = len(matches.get("missing_transaction_dates") or [])
            match_info = f" | Found: {found}, Missing: {missing}"

        amount = format_amount(criteria.get("amount", 0), criteria.get("currency"))
        blocks.append(
            f"{payee}{desc}\n"
            f"  {amount} {freq} | {category} | {account}{match_info}\n"
            f"  ID: {r.get('id')}"
        )
    return "\n\n".join(blocks)


def format_user(user: Mapping[str, Any]) -> str:
    return "\n".join([
        f"Name: {user.get('name')}",
        f"Email: {user.get('email')}",
        f"Budget: {user.get('budget_name')}",
        f"Currency: {str(user.get('primary_currency') or '').upper()}",
        f"ID: {user.get('id')}",
    ])


def format_delete_result(kind: str, record_id: int, dependents: Mapping[str, int] | None = None) -> str:
    if dependents is not None:
        dep_lines = "\n".join(f"  {k}: {v}" for k, v in dependents.items() if v > 0)
        return (
            f"Cannot delete {kind} {record_id}, it has dependencies:\n{dep_lines}\n\n"
            "Use force=true to delete anyway."
        )
    return f"{kind} {record_id} deleted successfully."


def format_counts(counts: Mapping[str, int], names: Iterable[str]) -> str:
    return "\n".join(f"  {name}: {counts[name]}" for name in names)
