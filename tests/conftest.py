"""
Pytest configuration and fixtures.

The Mangopay API is replaced by an ``httpx.MockTransport`` serving canned
responses per (method, path).
"""
import json
from typing import Any, Callable, Dict, List, Tuple, Union

import httpx
import pytest

from mangopay_connect.mangopay.connection import MangopayConnection
from mangopay_connect.settings import MangopayCredentials

CLIENT_ID = "test-client"
API_PREFIX = f"/v2.01/{CLIENT_ID}"

Route = Union[httpx.Response, Callable[[httpx.Request], httpx.Response]]


class FakeMangopay:
    """Records requests and answers them from a route table."""

    def __init__(self):
        self.routes: Dict[Tuple[str, str], Route] = {}
        self.requests: List[httpx.Request] = []
        self.token_requests = 0

    def add(self, method: str, path: str, json_body: Any = None, status_code: int = 200,
            headers: Dict[str, str] = None):
        self.routes[(method, API_PREFIX + path)] = httpx.Response(status_code, json=json_body, headers=headers)

    def add_handler(self, method: str, path: str, handler: Callable[[httpx.Request], httpx.Response]):
        self.routes[(method, API_PREFIX + path)] = handler

    def handler(self, request: httpx.Request) -> httpx.Response:
        if request.url.path == "/v2.01/oauth/token":
            self.token_requests += 1
            return httpx.Response(200, json={
                "access_token": f"token-{self.token_requests}",
                "token_type": "Bearer",
                "expires_in": 3600,
            })

        self.requests.append(request)
        route = self.routes.get((request.method, request.url.path))
        if route is None:
            return httpx.Response(404, json={"Message": "Not found", "Type": "ressource_not_found"})
        if callable(route):
            return route(request)
        return route

    def last_json(self) -> Dict[str, Any]:
        return json.loads(self.requests[-1].content)


@pytest.fixture
def fake_mangopay() -> FakeMangopay:
    return FakeMangopay()


@pytest.fixture
def token_db(tmp_path) -> str:
    return str(tmp_path / "tokens.sqlite3")


@pytest.fixture
def connection(fake_mangopay, token_db) -> MangopayConnection:
    return MangopayConnection(
        MangopayCredentials(client_id=CLIENT_ID, password="secret", sandbox=True),
        token_db_file=token_db,
        retry_max=1,
        transport=httpx.MockTransport(fake_mangopay.handler),
    )


@pytest.fixture
def funds() -> Dict[str, Any]:
    return {"amount": 1000, "currency": "EUR"}


@pytest.fixture
def fees() -> Dict[str, Any]:
    return {"amount": 10, "currency": "EUR"}
