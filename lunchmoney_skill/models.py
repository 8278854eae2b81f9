"""Reference record types held by the cache."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Any


class ResourceType(str, enum.Enum):
    """Reference tables; the value is both the REST path and the response key."""

    CATEGORIES = "categories"
    TAGS = "tags"
    MANUAL_ACCOUNTS = "manual_accounts"
    PLAID_ACCOUNTS = "plaid_accounts"


def _decimal(val: Any) -> Decimal:
    if val is None or val == "":
        return Decimal("0")
    try:
        return Decimal(str(val))
    except InvalidOperation:
        return Decimal("0")


@dataclass(frozen=True)
class Category:
    id: int
    name: str
    description: str | None = None
    group_id: int | None = None
    is_income: bool = False
    exclude_from_budget: bool = False
    exclude_from_totals: bool = False
    archived: bool = False
    is_group: bool = False
    children: tuple["Category", ...] | None = None

    @classmethod
    def from_api(cls, d: dict) -> "Category":
        children = d.get("children")
        return cls(
            id=int(d["id"]),
            name=d.get("name", ""),
            description=d.get("description"),
            group_id=d.get("group_id"),
            is_income=bool(d.get("is_income")),
            exclude_from_budget=bool(d.get("exclude_from_budget")),
            exclude_from_totals=bool(d.get("exclude_from_totals")),
            archived=bool(d.get("archived")),
            is_group=bool(d.get("is_group")),
            children=tuple(cls.from_api(c) for c in children) if children is not None else None,
        )


@dataclass(frozen=True)
class Tag:
    id: int
    name: str
    description: str | None = None
    archived: bool = False

    @classmethod
    def from_api(cls, d: dict) -> "Tag":
        return cls(
            id=int(d["id"]),
            name=d.get("name", ""),
            description=d.get("description"),
            archived=bool(d.get("archived")),
        )


@dataclass(frozen=True)
class ManualAccount:
    id: int
    name: str
    display_name: str | None = None
    balance: Decimal = Decimal("0")
    currency: str = "usd"
    institution_name: str | None = None
    status: str = "active"
    type: str = ""
    subtype: str | None = None

    @property
    def label(self) -> str:
        return self.display_name or self.name

    @classmethod
    def from_api(cls, d: dict) -> "ManualAccount":
        return cls(
            id=int(d["id"]),
            name=d.get("name", ""),
            display_name=d.get("display_name"),
            balance=_decimal(d.get("balance")),
            currency=d.get("currency") or "usd",
            institution_name=d.get("institution_name"),
            status=d.get("status") or "active",
            type=d.get("type") or "",
            subtype=d.get("subtype"),
        )


@dataclass(frozen=True)
class SyncedAccount:
    """Account imported through Plaid; read-only on our side."""

    id: int
    name: str
    institution_name: str
    display_name: str | None = None
    balance: Decimal = Decimal("0")
    currency: str = "usd"
    status: str = "active"
    type: str = ""
    subtype: str | None = None
    mask: str | None = None

    @property
    def label(self) -> str:
        return self.display_name or self.name

    @classmethod
    def from_api(cls, d: dict) -> "SyncedAccount":
        return cls(
            id=int(d["id"]),
            name=d.get("name", ""),
            institution_name=d.get("institution_name") or "",
            display_name=d.get("display_name"),
            balance=_decimal(d.get("balance")),
            currency=d.get("currency") or "usd",
            status=d.get("status") or "active",
            type=d.get("type") or "",
            subtype=d.get("subtype"),
            mask=d.get("mask"),
        )


RECORD_TYPES: dict[ResourceType, Any] = {
    ResourceType.CATEGORIES: Category,
    ResourceType.TAGS: Tag,
    ResourceType.MANUAL_ACCOUNTS: ManualAccount,
    ResourceType.PLAID_ACCOUNTS: SyncedAccount,
}
