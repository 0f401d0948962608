"""Shared fixtures for the test suite."""

import asyncio
import socket
import threading
import time
from collections.abc import Callable, Generator
from contextlib import closing

import pytest
from aiohttp import web

from tests.mock_server import MockPage, QuoteSite


def find_free_port() -> int:
    """Find a free port on localhost.

    Returns:
        An available port number.
    """
    with closing(socket.socket(socket.AF_INET, socket.SOCK_STREAM)) as s:
        s.bind(("", 0))
        s.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        return s.getsockname()[1]


class AioHttpTestServer:
    """Wrapper to run aiohttp server in a background thread."""

    def __init__(self, app: web.Application, port: int) -> None:
        self.app = app
        self.port = port
        self.host = "127.0.0.1"
        self._loop: asyncio.AbstractEventLoop | None = None
        self._runner: web.AppRunner | None = None
        self._thread: threading.Thread | None = None
        self._started = threading.Event()

    @property
    def url(self) -> str:
        """Get the base URL of the server."""
        return f"http://{self.host}:{self.port}"

    def start(self) -> None:
        """Start the server in a background thread."""
        self._thread = threading.Thread(target=self._run_server, daemon=True)
        self._thread.start()
        self._started.wait(timeout=5.0)
        # Give the listener a moment to accept connections
        time.sleep(0.05)

    def _run_server(self) -> None:
        """Run the server in an asyncio event loop."""
        self._loop = asyncio.new_event_loop()
        asyncio.set_event_loop(self._loop)

        async def start() -> None:
            self._runner = web.AppRunner(self.app)
            await self._runner.setup()
            site = web.TCPSite(self._runner, self.host, self.port)
            await site.start()

        self._loop.run_until_complete(start())
        self._started.set()
        self._loop.run_forever()

    def stop(self) -> None:
        """Stop the server and clean up resources."""
        if self._loop and self._runner:
            runner = self._runner
            future = asyncio.run_coroutine_threadsafe(
                runner.cleanup(), self._loop
            )
            try:
                future.result(timeout=2.0)
            except Exception:
                pass  # Best effort cleanup

        if self._loop:
            self._loop.call_soon_threadsafe(self._loop.stop)

        if self._thread:
            self._thread.join(timeout=2.0)


@pytest.fixture
def serve_site() -> Generator[Callable[[QuoteSite], str], None, None]:
    """Start a server for any QuoteSite and return its base URL.

    All servers started through this fixture are stopped at teardown.
    """
    servers: list[AioHttpTestServer] = []

    def _serve(site: QuoteSite) -> str:
        server = AioHttpTestServer(site.create_app(), find_free_port())
        server.start()
        servers.append(server)
        return server.url

    yield _serve

    for server in servers:
        server.stop()


@pytest.fixture
def quote_site() -> QuoteSite:
    """A three-page site with two quotes per page."""
    return QuoteSite(
        {
            1: MockPage(
                quotes=[("“A”", "X"), ("“B”", "Y")],
                has_next=True,
            ),
            2: MockPage(
                quotes=[("“C”", "Z"), ("“D”", "X")],
                has_next=True,
            ),
            3: MockPage(
                quotes=[("“E”", "Y"), ("“F”", "Z")],
            ),
        }
    )


@pytest.fixture
def server_url(
    quote_site: QuoteSite, serve_site: Callable[[QuoteSite], str]
) -> str:
    """Base URL of a running server for the ``quote_site`` fixture."""
    return serve_site(quote_site)
