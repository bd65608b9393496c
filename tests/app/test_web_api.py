from __future__ import annotations

import json
from collections.abc import Callable
from pathlib import Path

from fastapi.testclient import TestClient

from app.config import AppSettings
from app.web_main import create_app
from tests.helpers.scene_fixtures import load_scene_payload, scene, shape, text


def _client(settings: AppSettings) -> TestClient:
    return TestClient(create_app(settings))


def test_health(app_settings: AppSettings) -> None:
    response = _client(app_settings).get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_layout_returns_scene_and_report(app_settings: AppSettings) -> None:
    response = _client(app_settings).post(
        "/api/layout", json=load_scene_payload("sentence_graph.excalidraw")
    )

    assert response.status_code == 200
    body = response.json()
    by_id = {element["id"]: element for element in body["scene"]["elements"]}
    assert by_id["caption"]["y"] == 47.5
    assert body["scene"]["type"] == "excalidraw"
    report = body["report"]
    assert report["normalized_connector_ids"] == ["verb"]
    assert set(report["container_shifts"]) == {"subject", "object"}
    assert report["collision"]["element_id"] == "caption"
    assert report["collision"]["depth"] == 12.5


def test_layout_rejects_malformed_scene(app_settings: AppSettings) -> None:
    client = _client(app_settings)
    assert client.post("/api/layout", json={"elements": 3}).status_code == 400
    assert client.post("/api/layout", json=[1, 2]).status_code == 400


def test_layout_url(app_settings: AppSettings) -> None:
    payload = scene(shape("a"), text("a-text", "hello", container_id="a"))
    response = _client(app_settings).post("/api/layout/url", json=payload)
    assert response.status_code == 200
    assert response.json()["url"].startswith("https://excalidraw.com/#json=")


def test_layout_url_too_long(app_settings_factory: Callable[..., AppSettings]) -> None:
    settings = app_settings_factory(excalidraw_max_url_length=50)
    payload = load_scene_payload("sentence_graph.excalidraw")
    response = _client(settings).post("/api/layout/url", json=payload)
    assert response.status_code == 413


def test_upload_stores_corrected_scene(app_settings: AppSettings) -> None:
    raw = json.dumps(load_scene_payload("sentence_graph.excalidraw")).encode("utf-8")
    response = _client(app_settings).post(
        "/api/scenes/upload",
        files={"file": ("sentence.excalidraw", raw, "application/json")},
    )

    assert response.status_code == 200
    body = response.json()
    stored_path = Path(body["stored_path"])
    assert stored_path == app_settings.io.output_dir / "sentence.excalidraw"
    stored = json.loads(stored_path.read_text(encoding="utf-8"))
    assert stored["elements"][4]["points"][0] == [0, 0]


def test_upload_rejects_empty_and_invalid_files(app_settings: AppSettings) -> None:
    client = _client(app_settings)
    empty = client.post("/api/scenes/upload", files={"file": ("empty.json", b"", "application/json")})
    invalid = client.post(
        "/api/scenes/upload", files={"file": ("bad.json", b"{not json", "application/json")}
    )
    assert empty.status_code == 400
    assert invalid.status_code == 400
