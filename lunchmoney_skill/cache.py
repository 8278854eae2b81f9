"""In-memory reference cache: categories, tags, manual and synced accounts.

Transactions, summaries and recurring items only carry numeric IDs; the
cache turns them into names for display. Each of the four tables is a
complete snapshot of one Lunch Money collection and is replaced wholesale,
never merged.

Lifecycle::

    cache = ReferenceCache(client)
    await cache.initialize()              # all four tables or nothing
    cache.category_name(12)               # -> "Groceries"
    await cache.refresh(ResourceType.TAGS)  # after a tag write

Lookups of unknown IDs never raise; they return a ``"Category #42"`` style
placeholder. Lookups before a successful ``initialize()`` do raise
:class:`CacheNotInitializedError`; callers that want to keep going use
:class:`PlaceholderResolver` instead.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
from types import MappingProxyType
from typing import Any, Iterable, Mapping, Protocol

from .models import RECORD_TYPES, ResourceType

logger = logging.getLogger(__name__)

UNCATEGORIZED = "Uncategorized"
CASH = "Cash"

Table = Mapping[int, Any]


class CacheNotInitializedError(RuntimeError):
    def __init__(self) -> None:
        super().__init__("Reference cache not initialized. Call initialize() first.")


class CacheInitError(RuntimeError):
    """One or more of the startup fetches failed; nothing was published."""

    def __init__(self, failures: Mapping[ResourceType, BaseException]) -> None:
        self.failures = dict(failures)
        parts = [f"{rt.value}: {err}" for rt, err in self.failures.items()]
        super().__init__("Reference cache initialization failed (" + "; ".join(parts) + ")")


class SnapshotError(ValueError):
    """A fetched snapshot held a record that could not be parsed."""

    def __init__(self, resource: ResourceType, item: Any, cause: Exception) -> None:
        self.resource = resource
        self.item = item
        super().__init__(f"malformed {resource.value} record {item!r}: {cause!r}")


class SnapshotSource(Protocol):
    async def fetch_snapshot(self, resource: ResourceType) -> list[dict]: ...


class Resolver(Protocol):
    def category_name(self, category_id: int | None) -> str: ...

    def tag_names(self, tag_ids: Iterable[int]) -> list[str]: ...

    def account_name(self, manual_id: int | None, plaid_id: int | None) -> str: ...


def _category_fallback(category_id: int) -> str:
    return f"Category #{category_id}"


def _tag_fallback(tag_id: int) -> str:
    return f"Tag #{tag_id}"


def _manual_fallback(account_id: int) -> str:
    return f"Manual #{account_id}"


def _plaid_fallback(account_id: int) -> str:
    return f"Plaid #{account_id}"


class PlaceholderResolver:
    """Resolver for degraded mode: every ID renders as its placeholder."""

    def category_name(self, category_id: int | None) -> str:
        if category_id is None:
            return UNCATEGORIZED
        return _category_fallback(category_id)

    def tag_names(self, tag_ids: Iterable[int]) -> list[str]:
        return [_tag_fallback(tid) for tid in tag_ids]

    def account_name(self, manual_id: int | None, plaid_id: int | None) -> str:
        if manual_id is not None:
            return _manual_fallback(manual_id)
        if plaid_id is not None:
            return _plaid_fallback(plaid_id)
        return CASH


class ReferenceCache:
    def __init__(self, source: SnapshotSource) -> None:
        self._source = source
        # Swapped as a whole on every publish; readers grab it once per lookup.
        self._tables: Mapping[ResourceType, Table] | None = None
        self._locks = {rt: asyncio.Lock() for rt in ResourceType}

    # -- lifecycle ----------------------------------------------------------

    @property
    def ready(self) -> bool:
        return self._tables is not None

    async def _fetch_table(self, resource: ResourceType) -> Table:
        items = await self._source.fetch_snapshot(resource)
        record_type = RECORD_TYPES[resource]
        table: dict[int, Any] = {}
        for item in items:
            try:
                record = record_type.from_api(item)
            except (KeyError, ValueError, TypeError, AttributeError) as e:
                raise SnapshotError(resource, item, e) from e
            table[record.id] = record
        return MappingProxyType(table)

    async def initialize(self) -> None:
        """Fetch all four tables concurrently and publish them together.

        Holds every table lock (in ``ResourceType`` order) for the whole
        fetch-and-publish, so a refresh that lands first is never overwritten
        by an older snapshot.
        """
        resources = list(ResourceType)
        async with contextlib.AsyncExitStack() as stack:
            for rt in resources:
                await stack.enter_async_context(self._locks[rt])
            results = await asyncio.gather(
                *(self._fetch_table(rt) for rt in resources),
                return_exceptions=True,
            )
            failures = {
                rt: res for rt, res in zip(resources, results) if isinstance(res, BaseException)
            }
            if failures:
                raise CacheInitError(failures)

            self._tables = MappingProxyType(dict(zip(resources, results)))
        logger.info(
            "Cache initialized: %d categories, %d tags, %d manual accounts, %d plaid accounts",
            *(len(self._tables[rt]) for rt in resources),
        )

    async def refresh(self, resource: ResourceType) -> None:
        """Re-fetch one table and swap it in; the other three are untouched.

        Fetch errors propagate unchanged (a bad record as
        :class:`SnapshotError`) and leave the old table in place.
        """
        self._require()
        async with self._locks[resource]:
            table = await self._fetch_table(resource)
            tables = dict(self._require())
            tables[resource] = table
            self._tables = MappingProxyType(tables)
        logger.debug("Refreshed %s (%d records)", resource.value, len(table))

    # -- reads --------------------------------------------------------------

    def _require(self) -> Mapping[ResourceType, Table]:
        tables = self._tables
        if tables is None:
            raise CacheNotInitializedError()
        return tables

    def table(self, resource: ResourceType) -> Table:
        return self._require()[resource]

    def counts(self) -> dict[str, int]:
        tables = self._require()
        return {rt.value: len(tables[rt]) for rt in ResourceType}

    def category_name(self, category_id: int | None) -> str:
        if category_id is None:
            return UNCATEGORIZED
        category = self.table(ResourceType.CATEGORIES).get(category_id)
        return category.name if category else _category_fallback(category_id)

    def tag_names(self, tag_ids: Iterable[int]) -> list[str]:
        tags = self.table(ResourceType.TAGS)
        names = []
        for tid in tag_ids:
            tag = tags.get(tid)
            names.append(tag.name if tag else _tag_fallback(tid))
        return names

    def account_name(self, manual_id: int | None, plaid_id: int | None) -> str:
        tables = self._require()
        if manual_id is not None:
            acct = tables[ResourceType.MANUAL_ACCOUNTS].get(manual_id)
            return acct.label if acct else _manual_fallback(manual_id)
        if plaid_id is not None:
            acct = tables[ResourceType.PLAID_ACCOUNTS].get(plaid_id)
            return acct.label if acct else _plaid_fallback(plaid_id)
        return CASH
