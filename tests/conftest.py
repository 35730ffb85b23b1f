"""Shared test fixtures for snoots tests."""

from typing import Any, Callable, Dict, List
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest

from snoots.gateway.types import Credentials


class RecordingTransport(httpx.MockTransport):
    """MockTransport that remembers every request it served."""

    def __init__(self, handler: Callable[[httpx.Request], httpx.Response]) -> None:
        self.requests: List[httpx.Request] = []

        def record(request: httpx.Request) -> httpx.Response:
            self.requests.append(request)
            return handler(request)

        super().__init__(record)


@pytest.fixture
def creds():
    """App credentials used throughout the gateway tests."""
    return Credentials(client_id="cId", client_secret="cSecret")


@pytest.fixture
def make_http_client():
    """Build an httpx.AsyncClient answering with the given handler."""

    def factory(handler: Callable[[httpx.Request], httpx.Response]):
        transport = RecordingTransport(handler)
        return httpx.AsyncClient(transport=transport), transport

    return factory


@pytest.fixture
def mock_client():
    """A stand-in Client whose gateway.get is an AsyncMock."""
    client = MagicMock()
    client.gateway.get = AsyncMock()
    return client


@pytest.fixture
def make_comment():
    """Build a raw t1 comment object."""

    def factory(
        comment_id: str,
        parent: str = "t3_post1",
        replies: Any = "",
        link_id: str = "t3_post1",
        **extra: Any,
    ) -> Dict[str, Any]:
        data = {
            "id": comment_id,
            "name": f"t1_{comment_id}",
            "parent_id": parent,
            "link_id": link_id,
            "body": f"body of {comment_id}",
            "author": "someone",
            "replies": replies,
            **extra,
        }
        return {"kind": "t1", "data": data}

    return factory


@pytest.fixture
def make_listing():
    """Build a raw Listing object."""

    def factory(children: List[Dict[str, Any]], after: Any = None) -> Dict[str, Any]:
        return {"kind": "Listing", "data": {"children": children, "after": after}}

    return factory
