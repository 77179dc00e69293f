"""Shared pytest fixtures for integration tests.

Provides canned definitions-page transports so the full auditor
pipeline runs without network access.
"""

import httpx
import pytest

DEFINITIONS_PAGE = """<html><body><pre>
{
  "Known Cheats": {"x1": "Phantom", "aim": "Aim Helper"},
  "Known Mods": {"hud": "HUD Mod", "cosmetic": "Cosmetic Pack"}
}
</pre></body></html>"""


@pytest.fixture()
def definitions_transport() -> httpx.MockTransport:
    """Transport answering every request with :data:`DEFINITIONS_PAGE`."""

    def _handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, text=DEFINITIONS_PAGE)

    return httpx.MockTransport(_handler)


@pytest.fixture()
def failing_transport() -> httpx.MockTransport:
    """Transport that fails every request at the connection level."""

    def _handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("unreachable", request=request)

    return httpx.MockTransport(_handler)
