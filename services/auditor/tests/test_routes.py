"""
Tests for the auditor API router.

Covers dataset status, classification queries, detections history, and
the session feed used by the host to publish its roster.
"""

from __future__ import annotations

from unittest.mock import MagicMock

from fastapi.testclient import TestClient


def _join_with_roster(client: TestClient) -> None:
    assert client.put("/api/v1/session", json={"session_name": "ROOM-A"}).status_code == 200
    client.put(
        "/api/v1/roster/rig-1",
        json={"user_id": "user-1", "display_name": "Player1", "actor_number": 1, "metadata": {"x1": "1", "hud": "1"}},
    )
    client.put(
        "/api/v1/roster/rig-2",
        json={"user_id": "user-2", "display_name": "Player2", "actor_number": 2, "metadata": {"zz": "1"}},
    )


# ── dataset ──


class TestDataset:
    def test_status(self, client: TestClient):
        data = client.get("/api/v1/dataset").json()
        assert data["loaded"] is True
        assert data["disallowed_count"] == 1
        assert data["permitted_count"] == 1

    def test_refresh_starts_fetch(self, client: TestClient, runtime):
        runtime.loader.fetch_data = MagicMock(return_value=object())
        resp = client.post("/api/v1/dataset/refresh")
        assert resp.status_code == 202
        assert resp.json() == {"started": True}
        runtime.loader.fetch_data.assert_called_once_with()

    def test_refresh_while_fetching(self, client: TestClient, runtime):
        runtime.loader.fetch_data = MagicMock(return_value=None)
        assert client.post("/api/v1/dataset/refresh").json() == {"started": False}


# ── session feed ──


class TestSessionFeed:
    def test_initially_not_in_session(self, client: TestClient):
        data = client.get("/api/v1/session").json()
        assert data == {"in_session": False, "session_name": None, "participant_count": 0}

    def test_join_and_publish_roster(self, client: TestClient, runtime):
        _join_with_roster(client)
        data = client.get("/api/v1/session").json()
        assert data["session_name"] == "ROOM-A"
        assert data["participant_count"] == 2
        assert runtime.provider.get_user_id("rig-2") == "user-2"

    def test_roster_requires_session(self, client: TestClient):
        resp = client.put("/api/v1/roster/rig-1", json={"user_id": "user-1"})
        assert resp.status_code == 409

    def test_empty_session_name_rejected(self, client: TestClient):
        assert client.put("/api/v1/session", json={"session_name": ""}).status_code == 422

    def test_remove_participant(self, client: TestClient, runtime):
        _join_with_roster(client)
        client.post("/api/v1/classify")
        assert client.delete("/api/v1/roster/rig-1").status_code == 204
        assert client.delete("/api/v1/roster/rig-1").status_code == 404
        assert runtime.classifier.get_cached_result("rig-1") is None

    def test_leave(self, client: TestClient):
        _join_with_roster(client)
        data = client.delete("/api/v1/session").json()
        assert data["in_session"] is False
        assert data["participant_count"] == 0


# ── classification queries ──


class TestClassification:
    def test_classify_and_query(self, client: TestClient):
        _join_with_roster(client)
        resp = client.post("/api/v1/classify")
        assert resp.json() == {"classified": 2, "flagged": 1}

        results = client.get("/api/v1/participants").json()
        assert {r["participant_handle"] for r in results} == {"rig-1", "rig-2"}

        flagged = client.get("/api/v1/participants/flagged").json()
        assert [r["participant_handle"] for r in flagged] == ["rig-1"]
        assert flagged[0]["disallowed"] == ["Phantom"]
        assert flagged[0]["permitted"] == ["HUD Mod"]
        assert flagged[0]["status"] == "disallowed"

        by_actor = client.get("/api/v1/participants/by-actor/2").json()
        assert by_actor["unrecognized"] == ["zz"]

        one = client.get("/api/v1/participants/rig-2").json()
        assert one["display_name"] == "Player2"

    def test_unknown_participant_404(self, client: TestClient):
        assert client.get("/api/v1/participants/nobody").status_code == 404
        assert client.get("/api/v1/participants/by-actor/99").status_code == 404

    def test_summary(self, client: TestClient):
        data = client.get("/api/v1/summary").json()
        assert data["summary"] == "Not in a session"

        _join_with_roster(client)
        client.post("/api/v1/classify")
        data = client.get("/api/v1/summary").json()
        assert data["session_name"] == "ROOM-A"
        assert data["summary"] == "Participants: 2 | With Entries: 2 | Disallowed: 1"


# ── detections ──


class TestDetections:
    async def test_detection_history(self, client: TestClient, runtime):
        _join_with_roster(client)
        client.post("/api/v1/classify")
        assert runtime.dispatcher.pending == 1
        await runtime.dispatcher.drain()

        data = client.get("/api/v1/detections").json()
        assert len(data) == 1
        assert data[0]["user_id"] == "user-1"
        assert data[0]["session_name"] == "ROOM-A"
        assert data[0]["result"]["disallowed"] == ["Phantom"]

    def test_limit_validated(self, client: TestClient):
        assert client.get("/api/v1/detections?limit=0").status_code == 422
