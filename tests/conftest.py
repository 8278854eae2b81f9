import json

import httpx
import pytest
import pytest_asyncio

from lunchmoney_skill.client import ApiError, LunchMoneyClient
from lunchmoney_skill.models import ResourceType

BASE_URL = "https://api.test/v2"


class FakeSource:
    """In-memory stand-in for the API client's snapshot fetch."""

    def __init__(self, data=None):
        self.data = {rt: [] for rt in ResourceType}
        self.data.update(data or {})
        self.fail = set()
        self.calls = []

    async def fetch_snapshot(self, resource):
        self.calls.append(resource)
        if resource in self.fail:
            raise ApiError(500, "Lunch Money API error. Try again later.")
        return [dict(item) if isinstance(item, dict) else item for item in self.data[resource]]


class FakeApi:
    """Routes httpx requests to canned JSON responses keyed by (method, path).

    A route whose payload is an exception raises it instead, as a failing
    transport would.
    """

    def __init__(self):
        self.routes = {}
        self.requests = []

    def add(self, method, path, payload=None, status=200):
        self.routes[(method, path)] = (status, payload)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path.removeprefix("/v2")
        if (request.method, path) not in self.routes:
            return httpx.Response(404, json={"message": f"no route for {request.method} {path}"})
        status, payload = self.routes[(request.method, path)]
        if isinstance(payload, Exception):
            raise payload
        if payload is None:
            return httpx.Response(status)
        return httpx.Response(status, json=payload)

    def last(self, method, path):
        for req in reversed(self.requests):
            if req.method == method and req.url.path.removeprefix("/v2") == path:
                return req
        raise AssertionError(f"no {method} {path} request made")

    def body(self, method, path):
        return json.loads(self.last(method, path).content)


REFERENCE_DATA = {
    "categories": [
        {"id": 1, "name": "Food", "is_group": True},
        {"id": 2, "name": "Rent"},
        {"id": 3, "name": "Groceries", "group_id": 1},
        {"id": 4, "name": "Salary", "is_income": True},
    ],
    "tags": [{"id": 10, "name": "work"}, {"id": 11, "name": "travel"}],
    "manual_accounts": [
        {"id": 3, "name": "Checking", "display_name": None, "balance": "1200.50", "currency": "usd",
         "type": "cash", "status": "active"},
    ],
    "plaid_accounts": [
        {"id": 7, "name": "Chase Sapphire", "display_name": "Sapphire", "balance": "-45.10",
         "currency": "usd", "institution_name": "Chase", "type": "credit", "subtype": "credit card",
         "status": "active"},
    ],
}


@pytest.fixture
def source():
    return FakeSource({ResourceType(k): v for k, v in REFERENCE_DATA.items()})


@pytest.fixture
def api():
    fake = FakeApi()
    for key, items in REFERENCE_DATA.items():
        fake.add("GET", f"/{key}", {key: items})
    return fake


@pytest_asyncio.fixture
async def client(api):
    c = LunchMoneyClient("test-token", BASE_URL, transport=httpx.MockTransport(api.handler))
    yield c
    await c.aclose()
