"""Shared fixtures for auditor service tests."""

from __future__ import annotations

from collections.abc import Callable

import httpx
import pytest

from ms_common.models import ParticipantRecord

from auditor.classifier import ModClassifier
from auditor.dataset_store import DatasetStore
from auditor.session_provider import InMemorySessionProvider

SAMPLE_DOCUMENT = '{"Known Cheats":{"x1":"Phantom"},"Known Mods":{"hud":"HUD Mod"}}'


@pytest.fixture()
def store() -> DatasetStore:
    """Store loaded with the one-cheat / one-mod sample tables."""
    s = DatasetStore()
    s.replace_all({"x1": "Phantom"}, {"hud": "HUD Mod"})
    return s


@pytest.fixture()
def provider() -> InMemorySessionProvider:
    p = InMemorySessionProvider()
    p.join("ROOM-A")
    return p


@pytest.fixture()
def classifier(store: DatasetStore, provider: InMemorySessionProvider) -> ModClassifier:
    c = ModClassifier(store, provider, check_interval_s=5.0, auto_check_enabled=True)
    provider.on_participant_left.subscribe(c.on_participant_left)
    return c


@pytest.fixture()
def make_participant() -> Callable[..., ParticipantRecord]:
    """Factory for roster records with sensible defaults."""

    def _make(
        handle: str = "rig-1",
        user_id: str | None = "user-1",
        metadata: dict | None = None,
        display_name: str | None = "Player1",
        actor_number: int | None = 1,
        in_session: bool = True,
    ) -> ParticipantRecord:
        return ParticipantRecord(
            handle=handle,
            user_id=user_id,
            display_name=display_name,
            actor_number=actor_number,
            metadata={} if metadata is None else metadata,
            in_session=in_session,
        )

    return _make


@pytest.fixture()
def static_transport() -> Callable[..., httpx.MockTransport]:
    """Build an ``httpx.MockTransport`` answering every request the same way."""

    def _make(status_code: int = 200, text: str = SAMPLE_DOCUMENT) -> httpx.MockTransport:
        def _handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(status_code, text=text)

        return httpx.MockTransport(_handler)

    return _make


@pytest.fixture()
def runtime():
    """Wired runtime with no delivery channels and the sample tables loaded."""
    from ms_common.config import Settings

    from auditor.runtime import build_runtime

    rt = build_runtime(Settings(_env_file=None), channels=[])
    rt.store.replace_all({"x1": "Phantom"}, {"hud": "HUD Mod"})
    return rt


@pytest.fixture()
def client(runtime):
    """``TestClient`` over the auditor app; the lifespan is not entered."""
    from fastapi.testclient import TestClient

    from auditor.main import create_app

    return TestClient(create_app(runtime))
