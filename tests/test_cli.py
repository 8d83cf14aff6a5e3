"""
Tests for the command line interface
"""

import json
import logging

import pytest

from wpml_viewer.main import main


@pytest.fixture
def run(tmp_path, monkeypatch):
    """Run the CLI with built-in defaults and a temporary mission store"""
    import os
    for key in list(os.environ):
        if key.startswith("WPVIEW_"):
            monkeypatch.delenv(key)
    monkeypatch.setenv("WPVIEW_STORE_MISSIONS_DIR", str(tmp_path / "store"))
    no_config = str(tmp_path / "no-config.yaml")

    def _run(*args):
        return main(["-c", no_config, *args])

    # main() reconfigures the root logger
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield _run
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)


class TestShow:
    """show command"""

    def test_text_output(self, run, scenario_file, capsys):
        assert run("show", str(scenario_file)) == 0

        out = capsys.readouterr().out
        assert "DJI Mini 3 Pro" in out
        assert "Waypoints (3)" in out
        assert "POIs (1)" in out
        assert "takePhoto" in out

    def test_json_output(self, run, scenario_file, capsys):
        assert run("show", str(scenario_file), "--json") == 0

        payload = json.loads(capsys.readouterr().out)
        assert len(payload["waypoints"]) == 3
        assert len(payload["pois"]) == 1
        assert "segments" not in payload

    def test_log_file(self, run, scenario_file, tmp_path):
        log_file = tmp_path / "logs" / "viewer.log"

        assert run("--log-file", str(log_file), "show", str(scenario_file)) == 0
        for handler in logging.getLogger().handlers:
            handler.flush()

        assert "Mission parsed: 3 waypoints" in log_file.read_text()

    def test_missing_file(self, run, tmp_path, capsys):
        assert run("show", str(tmp_path / "missing.wpml")) == 1

        assert "Error" in capsys.readouterr().err

    def test_malformed_file(self, run, tmp_path, capsys):
        path = tmp_path / "broken.wpml"
        path.write_text("<kml>")

        assert run("show", str(path)) == 1

    def test_demo_fallback(self, run, tmp_path, wpml_document, capsys):
        path = tmp_path / "empty.wpml"
        path.write_text(wpml_document())

        assert run("show", str(path), "--json", "--demo-fallback") == 0

        out = capsys.readouterr().out
        payload = json.loads(out[out.index("{"):])
        assert [wp["index"] for wp in payload["waypoints"]] == [1, 2, 3]


class TestPath:
    """path command"""

    def test_json_output(self, run, scenario_file, capsys):
        assert run("path", str(scenario_file), "--json") == 0

        payload = json.loads(capsys.readouterr().out)
        assert [s["style"] for s in payload["segments"]] == ["curved", "straight"]

    def test_knot_matcher(self, run, scenario_file, capsys):
        assert run("path", str(scenario_file), "--json", "--matcher", "knot") == 0

        payload = json.loads(capsys.readouterr().out)
        curved = payload["segments"][0]
        assert curved["points"][0] == [52.3676, 4.9041]
        assert curved["points"][-1] == [52.3686, 4.9051]

    def test_text_output(self, run, scenario_file, capsys):
        assert run("path", str(scenario_file)) == 0

        out = capsys.readouterr().out
        assert "Flight path (2 segments)" in out
        assert "Total:" in out


class TestStoreCommands:
    """export, list and delete commands"""

    def test_export_list_delete(self, run, scenario_file, tmp_path, capsys):
        assert run("export", str(scenario_file), "Amsterdam") == 0
        assert (tmp_path / "store" / "Amsterdam.json").exists()

        capsys.readouterr()
        assert run("list") == 0
        assert "Amsterdam" in capsys.readouterr().out

        assert run("delete", "Amsterdam") == 0
        assert not (tmp_path / "store" / "Amsterdam.json").exists()
        assert run("delete", "Amsterdam") == 1

    def test_explicit_store(self, run, scenario_file, tmp_path):
        other = tmp_path / "other"

        assert run("export", str(scenario_file), "x", "--store", str(other)) == 0
        assert (other / "x.json").exists()

    def test_list_with_corrupt_file(self, run, scenario_file, tmp_path, capsys):
        assert run("export", str(scenario_file), "good") == 0
        (tmp_path / "store" / "broken.json").write_text('{"waypoints": null}')
        capsys.readouterr()

        assert run("list") == 0

        out = capsys.readouterr().out
        assert "good" in out
        assert "broken" not in out

    def test_bad_env_value(self, run, scenario_file, monkeypatch):
        monkeypatch.setenv("WPVIEW_PATH_SAMPLES_PER_LEG", "many")

        assert run("path", str(scenario_file), "--json") == 0

    def test_list_empty(self, run, capsys):
        assert run("list") == 0

        assert "No stored missions" in capsys.readouterr().out
