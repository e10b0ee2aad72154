"""
pytest configuration and fixtures.

HTTP round trips go through `httpx.MockTransport`; the echo handler plays
the part of a test server and reports back what it received as JSON.
"""

from typing import Callable, Generator

import httpx
import pytest

from restclient.client import RestClient
from restclient.http_client import HttpxRestClientTransport

TEST_SERVER_URL = "http://localhost:8888"

Handler = Callable[[httpx.Request], httpx.Response]


def echo_handler(request: httpx.Request) -> httpx.Response:
    """Describe the incoming request as JSON."""
    return httpx.Response(
        200,
        json={
            "method": request.method,
            "path": request.url.path,
            "query": request.url.query.decode("ascii"),
            "body": request.content.decode("utf-8"),
            "headers": dict(request.headers),
        },
    )


@pytest.fixture
def server_url() -> str:
    return TEST_SERVER_URL


@pytest.fixture
def make_transport() -> Callable[..., HttpxRestClientTransport]:
    """Factory for transports backed by a handler function."""

    def factory(handler: Handler = echo_handler, **kwargs) -> HttpxRestClientTransport:
        return HttpxRestClientTransport(transport=httpx.MockTransport(handler), **kwargs)

    return factory


@pytest.fixture
def make_client(make_transport) -> Generator[Callable[..., RestClient], None, None]:
    """Factory for clients talking to a handler; closed after the test."""
    clients = []

    def factory(*args, handler: Handler = echo_handler, **kwargs) -> RestClient:
        client = RestClient(*args, transport=make_transport(handler), **kwargs)
        clients.append(client)
        return client

    yield factory

    for client in clients:
        client.close()


@pytest.fixture
def api(make_client) -> RestClient:
    """Client with default options against the echo handler."""
    return make_client()


@pytest.fixture
def multiheader_response() -> str:
    return "HTTP/1.1 200 OK\r\nContent-type: text/json\r\nContent-Type: application/json\r\n\r\nbody"


@pytest.fixture
def multistatus_response() -> str:
    return (
        "HTTP/1.1 100 Continue\r\n\r\n"
        "HTTP/1.1 200 OK\r\n"
        "Cache-Control: no-cache\r\n"
        "Content-Type: application/json\r\n"
        "\r\n"
        "body"
    )
