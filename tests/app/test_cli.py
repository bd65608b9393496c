from __future__ import annotations

import json
from pathlib import Path

from typer.testing import CliRunner

from app.cli import app
from tests.helpers.scene_fixtures import load_scene_payload, scene, shape, text

runner = CliRunner()


def _write_scene(path: Path, payload: dict) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(payload), encoding="utf-8")
    return path


def test_fix_writes_corrected_scene(tmp_path: Path) -> None:
    source = _write_scene(tmp_path / "graph.excalidraw", load_scene_payload("sentence_graph.excalidraw"))
    target = tmp_path / "fixed.excalidraw"

    result = runner.invoke(app, ["fix", str(source), "--output", str(target)])

    assert result.exit_code == 0, result.output
    assert "Wrote" in result.output
    stored = json.loads(target.read_text(encoding="utf-8"))
    by_id = {element["id"]: element for element in stored["elements"]}
    assert by_id["subject-text"]["text"] == "GoogleDeepMind"
    assert by_id["verb"]["points"][0] == [0, 0]
    assert json.loads(source.read_text(encoding="utf-8"))["elements"][1]["text"] == "Google\nDeepMind"


def test_fix_prints_share_link(tmp_path: Path) -> None:
    source = _write_scene(tmp_path / "small.excalidraw", scene(shape("a"), text("a-text", "hi", container_id="a")))

    result = runner.invoke(app, ["fix", str(source), "--url"])

    assert result.exit_code == 0, result.output
    assert "https://excalidraw.com/#json=" in result.output


def test_relayout_directory(tmp_path: Path) -> None:
    input_dir = tmp_path / "in"
    output_dir = tmp_path / "out"
    _write_scene(input_dir / "one.excalidraw", scene(shape("a"), text("a-text", "hello", container_id="a")))
    _write_scene(input_dir / "two.json", scene(shape("b", "ellipse")))

    result = runner.invoke(
        app, ["relayout", "--input-dir", str(input_dir), "--output-dir", str(output_dir)]
    )

    assert result.exit_code == 0, result.output
    assert sorted(path.name for path in output_dir.glob("*.excalidraw")) == [
        "one.excalidraw",
        "two.excalidraw",
    ]
    stored = json.loads((output_dir / "one.excalidraw").read_text(encoding="utf-8"))
    assert stored["elements"][0]["width"] == 100


def test_relayout_uses_configured_directories(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.setenv("AUTOFIT_IO__INPUT_DIR", str(tmp_path / "in"))
    monkeypatch.setenv("AUTOFIT_IO__OUTPUT_DIR", str(tmp_path / "out"))
    (tmp_path / "in").mkdir()

    result = runner.invoke(app, ["relayout"])

    assert result.exit_code == 0
    assert "No Excalidraw files found" in result.output


def test_relayout_missing_directory(tmp_path: Path) -> None:
    result = runner.invoke(app, ["relayout", "--input-dir", str(tmp_path / "absent")])
    assert result.exit_code == 1


def test_validate_reports_counts(tmp_path: Path) -> None:
    source = _write_scene(tmp_path / "graph.excalidraw", load_scene_payload("sentence_graph.excalidraw"))

    result = runner.invoke(app, ["validate", str(source)])

    assert result.exit_code == 0, result.output
    assert "2 containers" in result.output
    assert "3 labels" in result.output
    assert "1 connectors" in result.output


def test_validate_rejects_non_scene(tmp_path: Path) -> None:
    source = _write_scene(tmp_path / "markup.json", {"procedures": []})
    result = runner.invoke(app, ["validate", str(source)])
    assert result.exit_code == 1
    assert "Validation failed" in result.output


def test_missing_config_file_exits(tmp_path: Path) -> None:
    result = runner.invoke(app, ["--config", str(tmp_path / "absent.yaml"), "validate", "x"])
    assert result.exit_code == 1
