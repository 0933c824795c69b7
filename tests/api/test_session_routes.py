"""Tests for session API routes."""

import pytest
from fastapi.testclient import TestClient

from diablock.api.dependencies import get_session_service
from diablock.api.main import app
from diablock.api.services.save_store import FileSnapshotStore

client = TestClient(app)


def create_session(seed: int = 42) -> str:
    """Create a session and return its id."""
    response = client.post("/api/sessions", json={"seed": seed})
    assert response.status_code == 200
    return response.json()["session_id"]


class TestRootEndpoints:
    """Tests for root endpoints."""

    def test_root(self):
        """Test root endpoint."""
        response = client.get("/")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "ok"
        assert data["name"] == "Diablock API"

    def test_health(self):
        """Test health check endpoint."""
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"


class TestSessionRoutes:
    """Tests for session lifecycle and ticking."""

    def test_create_session(self):
        """Test session creation."""
        response = client.post("/api/sessions", json={"seed": 7})
        assert response.status_code == 200
        data = response.json()
        assert data["seed"] == 7
        assert data["state"]["tick"] == 0
        assert len(data["state"]["shop"]) == 6

    def test_create_session_without_body(self):
        response = client.post("/api/sessions")
        assert response.status_code == 200
        assert "session_id" in response.json()

    def test_get_session(self):
        session_id = create_session()

        response = client.get(f"/api/sessions/{session_id}")
        assert response.status_code == 200
        assert response.json()["session_id"] == session_id

    def test_get_nonexistent_session(self):
        response = client.get("/api/sessions/nonexistent")
        assert response.status_code == 404

    def test_delete_session(self):
        session_id = create_session()

        assert client.delete(f"/api/sessions/{session_id}").status_code == 200
        assert client.get(f"/api/sessions/{session_id}").status_code == 404
        assert client.delete(f"/api/sessions/{session_id}").status_code == 404

    def test_tick(self):
        session_id = create_session()

        response = client.post(f"/api/sessions/{session_id}/tick", json={"count": 5})
        assert response.status_code == 200
        data = response.json()
        assert data["tick"] == 5
        assert data["ticks_run"] == 5
        assert any(e["type"] == "wave_spawned" for e in data["events"])

    def test_tick_invalid_count(self):
        session_id = create_session()

        response = client.post(f"/api/sessions/{session_id}/tick", json={"count": 0})
        assert response.status_code == 422

    def test_drain_events(self):
        session_id = create_session()
        client.post(f"/api/sessions/{session_id}/tick", json={"count": 3})

        first = client.get(f"/api/sessions/{session_id}/events").json()
        second = client.get(f"/api/sessions/{session_id}/events").json()

        assert first["battle_log"]
        assert second["battle_log"] == []


class TestCommandRoutes:
    """Tests for player commands."""

    def test_learn_skill_rejected(self):
        session_id = create_session()

        response = client.post(
            f"/api/sessions/{session_id}/skills/learn", json={"skill_id": "strength_training"}
        )
        assert response.status_code == 400
        assert "skill points" in response.json()["detail"]

    def test_unequip_empty_slot(self):
        session_id = create_session()

        response = client.post(f"/api/sessions/{session_id}/unequip", json={"slot": "weapon"})
        assert response.status_code == 400

    def test_unequip_invalid_slot(self):
        session_id = create_session()

        response = client.post(f"/api/sessions/{session_id}/unequip", json={"slot": "tail"})
        assert response.status_code == 422

    def test_buy_without_gold(self):
        session_id = create_session()

        response = client.post(f"/api/sessions/{session_id}/shop/buy", json={"shop_index": 0})
        assert response.status_code == 400

    def test_automation(self):
        session_id = create_session()

        response = client.post(
            f"/api/sessions/{session_id}/automation", json={"auto_equip": False}
        )
        assert response.status_code == 200

        state = client.get(f"/api/sessions/{session_id}").json()
        assert state["auto_equip_enabled"] is False
        assert state["auto_learn_skill_enabled"] is True

    def test_restart_while_alive(self):
        session_id = create_session()

        response = client.post(f"/api/sessions/{session_id}/restart")
        assert response.status_code == 400

    def test_upgrade_without_essence(self):
        session_id = create_session()

        response = client.post(f"/api/sessions/{session_id}/upgrades", json={"key": "attack"})
        assert response.status_code == 400

    def test_hard_reset(self):
        session_id = create_session()
        client.post(f"/api/sessions/{session_id}/tick", json={"count": 3})

        response = client.post(f"/api/sessions/{session_id}/hard-reset")
        assert response.status_code == 200
        assert client.get(f"/api/sessions/{session_id}").json()["tick"] == 0

    def test_command_on_missing_session(self):
        response = client.post("/api/sessions/nonexistent/shop/refresh")
        assert response.status_code == 404


class TestPersistenceRoutes:
    """Tests for snapshot save and load."""

    @pytest.fixture
    def store(self, tmp_path):
        service = get_session_service()
        original = service.store
        service.store = FileSnapshotStore(tmp_path)
        yield service.store
        service.store = original

    def test_save_snapshot(self):
        session_id = create_session()

        response = client.get(f"/api/sessions/{session_id}/save")
        assert response.status_code == 200
        data = response.json()
        assert data["wave"] == 1
        assert len(data["inventory"]) == 20

    def test_load_partial_snapshot(self):
        session_id = create_session()

        response = client.post(
            f"/api/sessions/{session_id}/load",
            json={"wave": 4, "player": {"gold": "lots", "level": 2}},
        )
        assert response.status_code == 200

        state = client.get(f"/api/sessions/{session_id}").json()
        assert state["wave"]["number"] == 4
        assert state["player"]["level"] == 2
        assert state["player"]["gold"] == 0

    def test_save_and_load_file(self, store):
        session_id = create_session()
        client.post(f"/api/sessions/{session_id}/load", json={"wave": 3})

        saved = client.post(f"/api/sessions/{session_id}/save-file", json={"name": "slot_1"})
        assert saved.status_code == 200
        assert (store.save_dir / "slot_1.json").exists()

        other_id = create_session()
        loaded = client.post(f"/api/sessions/{other_id}/load-file", json={"name": "slot_1"})
        assert loaded.status_code == 200
        assert client.get(f"/api/sessions/{other_id}").json()["wave"]["number"] == 3

    def test_load_missing_file(self, store):
        session_id = create_session()

        response = client.post(f"/api/sessions/{session_id}/load-file", json={"name": "empty"})
        assert response.status_code == 404

    def test_invalid_slot_name(self, store):
        session_id = create_session()

        response = client.post(f"/api/sessions/{session_id}/save-file", json={"name": "../escape"})
        assert response.status_code == 422


class TestDataRoutes:
    """Tests for static data routes."""

    def test_monsters(self):
        response = client.get("/api/data/monsters")
        assert response.status_code == 200
        assert len(response.json()) > 0

    def test_boss_filter(self):
        response = client.get("/api/data/monsters", params={"is_boss": True})
        assert response.status_code == 200
        assert all(m["is_boss"] for m in response.json())
        assert len(response.json()) == 3

    def test_monster_by_id(self):
        assert client.get("/api/data/monsters/goblin").status_code == 200
        assert client.get("/api/data/monsters/nonexistent").status_code == 404

    def test_skills(self):
        response = client.get("/api/data/skills")
        assert response.status_code == 200
        assert any(s["id"] == "power_strike" for s in response.json())
        assert client.get("/api/data/skills/nonexistent").status_code == 404

    def test_upgrades(self):
        response = client.get("/api/data/upgrades")
        assert response.status_code == 200
        assert len(response.json()) == 4


class TestSimulateRoutes:
    """Tests for Monte Carlo simulation."""

    def test_simulate(self):
        response = client.post(
            "/api/simulate", json={"num_runs": 2, "max_ticks": 30, "seed": 1}
        )
        assert response.status_code == 200
        data = response.json()
        assert data["runs"] == 2
        assert "outcomes" not in data

    def test_simulate_with_outcomes(self):
        response = client.post(
            "/api/simulate",
            json={"num_runs": 1, "max_ticks": 10, "seed": 1, "include_outcomes": True},
        )
        assert response.status_code == 200
        assert len(response.json()["outcomes"]) == 1

    def test_simulate_over_limit(self):
        response = client.post("/api/simulate", json={"num_runs": 1000, "max_ticks": 10})
        assert response.status_code == 400
