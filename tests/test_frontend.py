"""Tests for serving the built SPA from dist/."""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from portfolio_service.main import mount_frontend


@pytest.fixture
def spa(tmp_path):
    dist = tmp_path / "dist"
    (dist / "assets").mkdir(parents=True)
    (dist / "index.html").write_text("<html>shell</html>")
    (dist / "favicon.ico").write_text("icon")
    (dist / "assets" / "app.js").write_text("console.log(1)")
    (tmp_path / "secret.env").write_text("SECRET=1\n")

    app = FastAPI()

    @app.get("/api/system/health")
    def health():
        return {"status": "ok"}

    mount_frontend(app, dist)
    return TestClient(app)


def test_root_serves_index(spa):
    resp = spa.get("/")
    assert resp.status_code == 200
    assert resp.text == "<html>shell</html>"


def test_client_route_falls_back_to_index(spa):
    assert spa.get("/portfolio/holdings").text == "<html>shell</html>"


def test_existing_file_served(spa):
    assert spa.get("/favicon.ico").text == "icon"
    assert spa.get("/assets/app.js").text == "console.log(1)"


def test_unknown_api_path_is_404(spa):
    assert spa.get("/api/nope").status_code == 404
    assert spa.get("/api/system/health").json() == {"status": "ok"}


@pytest.mark.parametrize("path", ["/..%2Fsecret.env", "/assets%2F..%2F..%2Fsecret.env"])
def test_paths_outside_dist_not_served(spa, path):
    resp = spa.get(path)
    assert "SECRET" not in resp.text
