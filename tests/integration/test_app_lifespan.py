"""Integration tests for the composition root (real lifespan, file store)."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from reelproxy.infrastructure.config import load_config
from reelproxy.interfaces.app import create_app

pytestmark = pytest.mark.integration


def _config(tmp_path: Path, **auth: str):
    return load_config(
        cli_overrides={
            "store": {"backend": "file", "dir": str(tmp_path / "data")},
            "auth": dict(auth),
        }
    )


class TestLifespan:
    def test_health_after_startup(self, tmp_path: Path) -> None:
        app = create_app(_config(tmp_path))

        with TestClient(app) as client:
            resp = client.get("/health")

        assert resp.status_code == 200
        assert resp.json() == {
            "status": "ok",
            "provider": "rapidapi",
            "cacheItems": 0,
            "database": "file",
        }

    def test_login_and_moderation_round_trip(self, tmp_path: Path) -> None:
        app = create_app(_config(tmp_path, admin_password="pw", admin_token="tok"))

        with TestClient(app) as client:
            token = client.post("/api/auth/login", json={"password": "pw"}).json()["token"]
            assert token == "tok"
            headers = {"Authorization": f"Bearer {token}"}

            sub = client.post(
                "/api/submissions",
                json={"title": "Reel", "url": "https://www.instagram.com/reel/C1/"},
            ).json()["submission"]
            approved = client.post(
                "/api/submissions/approve", json={"id": sub["id"]}, headers=headers
            )
            assert approved.status_code == 200

        stored = json.loads((tmp_path / "data" / "playlists.json").read_text("utf-8"))
        assert [i["id"] for i in stored] == [sub["id"]]
        assert json.loads((tmp_path / "data" / "submissions.json").read_text("utf-8")) == []

    def test_generated_token_when_unset(self, tmp_path: Path) -> None:
        app = create_app(_config(tmp_path, admin_password="pw"))

        with TestClient(app) as client:
            token = client.post("/api/auth/login", json={"password": "pw"}).json()["token"]
            resp = client.get(
                "/api/submissions", headers={"Authorization": f"Bearer {token}"}
            )

        assert len(token) >= 32
        assert resp.status_code == 200

    def test_data_survives_restart(self, tmp_path: Path) -> None:
        config = _config(tmp_path, admin_password="pw", admin_token="tok")
        headers = {"Authorization": "Bearer tok"}

        with TestClient(create_app(config)) as client:
            client.post(
                "/api/playlists",
                json=[{"id": "a", "title": "A", "url": "https://example.com/a"}],
                headers=headers,
            )

        with TestClient(create_app(config)) as client:
            assert client.get("/api/playlists").json() == [
                {"id": "a", "title": "A", "url": "https://example.com/a", "tags": []}
            ]
