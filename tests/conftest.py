"""Shared pytest fixtures for Bobuild client tests.

The API server is simulated with httpx.MockTransport injected through the
client's ``transport`` argument, so every test runs without network access.

Fixture Organization:
    - Client fixtures: BobuildClient wired to a recording mock server
    - Handler fixtures: canned server behaviours (paged lists, echo)
    - Environment fixtures: isolation from BOBUILD_* variables and .env files
"""

import json
import logging
import os
from collections.abc import Callable

import httpx
import pytest

from bobuild import BobuildClient, reset_config

TEST_HOST = "api.example.com"
TEST_API_KEY = "test-api-key"


class RecordingServer:
    """Mock server handler that records every request it receives."""

    def __init__(self, handler: Callable[[httpx.Request], httpx.Response]):
        self.handler = handler
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.handler(request)

    @property
    def pages(self) -> list[int]:
        """Page numbers requested, in order."""
        return [int(r.url.params["page"]) for r in self.requests]


# =============================================================================
# Client Fixtures
# =============================================================================


@pytest.fixture
def make_client():
    """Factory: build a BobuildClient backed by a RecordingServer.

    Usage:
        client, server = make_client(handler, use_tls=False)
    """
    clients: list[BobuildClient] = []

    def _make(handler, host: str = TEST_HOST, api_key: str = TEST_API_KEY, **kwargs):
        server = RecordingServer(handler)
        client = BobuildClient(
            host,
            api_key,
            transport=httpx.MockTransport(server),
            **kwargs,
        )
        clients.append(client)
        return client, server

    yield _make

    for client in clients:
        client.close()


# =============================================================================
# Handler Fixtures
# =============================================================================


@pytest.fixture
def paged_handler():
    """Factory: handler serving ``items`` as {"items", "total"} pages of ``page_size``."""

    def _handler(items: list, page_size: int):
        def handle(request: httpx.Request) -> httpx.Response:
            page = int(request.url.params["page"])
            chunk = items[page * page_size : (page + 1) * page_size]
            return httpx.Response(200, json={"items": chunk, "total": len(items)})

        return handle

    return _handler


@pytest.fixture
def echo_handler():
    """Handler that answers POSTs by echoing the JSON request body."""

    def handle(request: httpx.Request) -> httpx.Response:
        if request.method != "POST":
            return httpx.Response(404)
        return httpx.Response(200, json=json.loads(request.content))

    return handle


# =============================================================================
# Environment Fixtures
# =============================================================================


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    """Remove BOBUILD_* variables, run from an empty directory, reset config."""
    for key in list(os.environ.keys()):
        if key.upper().startswith("BOBUILD_"):
            monkeypatch.delenv(key, raising=False)
    monkeypatch.chdir(tmp_path)
    reset_config()
    yield
    reset_config()


@pytest.fixture
def restore_bobuild_logger():
    """Restore the bobuild logger after tests that call configure_logging()."""
    logger = logging.getLogger("bobuild")
    saved = (list(logger.handlers), logger.level, logger.propagate)
    yield logger
    logger.handlers[:] = saved[0]
    logger.setLevel(saved[1])
    logger.propagate = saved[2]
