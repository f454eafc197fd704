from __future__ import annotations

import json
from typing import Any, Callable

import httpx
import pytest

from hass_rest.core.config import ConnectionSettings
from hass_rest.services.ha_api import HomeAssistantAPI

BASE_URL = "http://ha.local:8123"
TOKEN = "secret-token"


@pytest.fixture(autouse=True)
def _no_dotenv(monkeypatch):
    monkeypatch.setattr("hass_rest.core.config.load_dotenv", lambda *a, **k: False)


@pytest.fixture
def anyio_backend():
    return "asyncio"


class MockServer:
    """Records outgoing requests and answers them with a canned response."""

    def __init__(self, handler: Callable[[httpx.Request], httpx.Response]) -> None:
        self._handler = handler
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self._handler(request)

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]


def make_api(
    handler: Callable[[httpx.Request], httpx.Response],
) -> tuple[HomeAssistantAPI, MockServer]:
    server = MockServer(handler)
    settings = ConnectionSettings(url=BASE_URL, token=TOKEN)
    api = HomeAssistantAPI(settings, transport=httpx.MockTransport(server))
    return api, server


def json_response(payload: Any, status_code: int = 200) -> Callable[[httpx.Request], httpx.Response]:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(status_code, json=payload)

    return handler


def raw_response(body: str | bytes, status_code: int = 200) -> Callable[[httpx.Request], httpx.Response]:
    content = body.encode() if isinstance(body, str) else body

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(status_code, content=content)

    return handler


def request_json(request: httpx.Request) -> Any:
    return json.loads(request.content or b"null")
