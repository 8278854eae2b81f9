"""Async HTTP client for the Lunch Money v2 REST API."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from .config import DEFAULT_BASE_URL, DEFAULT_TIMEOUT
from .models import ResourceType

logger = logging.getLogger(__name__)


class ApiError(RuntimeError):
    """Non-2xx response from Lunch Money. ``body`` is the decoded error payload."""

    def __init__(self, status: int, message: str, body: Any = None) -> None:
        super().__init__(message)
        self.status = status
        self.message = message
        self.body = body


def _detail(body: Any) -> str | None:
    if not isinstance(body, dict):
        return None
    errors = body.get("errors")
    if isinstance(errors, list) and errors:
        msgs = [str(e.get("errMsg", "")) for e in errors if isinstance(e, dict)]
        msgs = [m for m in msgs if m]
        if msgs:
            return "; ".join(msgs)
    message = body.get("message")
    return str(message) if message else None


def error_for(status: int, body: Any) -> ApiError:
    detail = _detail(body)
    if status == 401:
        return ApiError(401, "API token invalid or expired. Check LUNCHMONEY_TOKEN.", body)
    if status == 429:
        return ApiError(429, "Rate limit reached. Try again in a moment.", body)
    if status == 404:
        return ApiError(404, detail or "Resource not found.", body)
    if status >= 500:
        return ApiError(status, "Lunch Money API error. Try again later.", body)
    return ApiError(status, detail or f"Request failed ({status}).", body)


def _decode(resp: httpx.Response) -> Any:
    if not resp.content:
        return {}
    try:
        return resp.json()
    except ValueError:
        return {"message": resp.text}


class LunchMoneyClient:
    """Thin wrapper over ``httpx.AsyncClient``; one instance per process.

    No retries: HTTP failures surface as :class:`ApiError`, transport
    failures as ``httpx.HTTPError``.
    """

    def __init__(
        self,
        token: str,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._client = httpx.AsyncClient(
            base_url=base_url,
            timeout=timeout,
            transport=transport,
            headers={
                "Authorization": f"Bearer {token}",
                "Content-Type": "application/json",
            },
        )

    async def __aenter__(self) -> "LunchMoneyClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if not self._client.is_closed:
            await self._client.aclose()

    async def request(
        self,
        method: str,
        path: str,
        params: dict[str, Any] | None = None,
        body: Any = None,
    ) -> Any:
        if params:
            params = {k: v for k, v in params.items() if v is not None}
            for k, v in params.items():
                if isinstance(v, bool):
                    params[k] = "true" if v else "false"
        logger.debug("%s %s %s", method, path, params or "")
        resp = await self._client.request(method, path, params=params or None, json=body)
        data = _decode(resp)
        if resp.is_error:
            raise error_for(resp.status_code, data)
        return data

    async def get(self, path: str, params: dict[str, Any] | None = None) -> Any:
        return await self.request("GET", path, params=params)

    async def post(self, path: str, body: Any, params: dict[str, Any] | None = None) -> Any:
        return await self.request("POST", path, params=params, body=body)

    async def put(self, path: str, body: Any, params: dict[str, Any] | None = None) -> Any:
        return await self.request("PUT", path, params=params, body=body)

    async def delete(self, path: str, params: dict[str, Any] | None = None) -> Any:
        return await self.request("DELETE", path, params=params)

    async def fetch_snapshot(self, resource: ResourceType) -> list[dict]:
        """Fetch the complete current record list for one reference table."""
        params = {"format": "flattened"} if resource is ResourceType.CATEGORIES else None
        data = await self.get(f"/{resource.value}", params)
        items = data.get(resource.value) if isinstance(data, dict) else None
        return list(items or [])
