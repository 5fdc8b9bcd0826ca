"""Tests for the command-line interface."""
import json

import pytest
from typer.testing import CliRunner

from bipv import cli


runner = CliRunner()


@pytest.fixture(autouse=True)
def no_logging_setup(monkeypatch):
    """Keep the CLI from replacing pytest's log handlers."""
    monkeypatch.setattr(cli, "ensure_logging", lambda **kwargs: None)


@pytest.fixture
def buildings_file(tmp_path):
    collection = {
        "type": "FeatureCollection",
        "features": [
            {
                "type": "Feature",
                "id": "way/10",
                "geometry": {"type": "Point", "coordinates": [-75.1644, 39.9534]},
                "properties": {"height": 25},
            },
            {
                "type": "Feature",
                "id": "way/11",
                "geometry": {"type": "Point", "coordinates": [-75.1600, 39.9500]},
                "properties": {},
            },
        ],
    }
    path = tmp_path / "buildings.geojson"
    path.write_text(json.dumps(collection), encoding="utf-8")
    return path


class TestCli:

    def test_sun(self):
        result = runner.invoke(cli.app, ["sun", "--at", "2024-06-20T12:00:00"])
        assert result.exit_code == 0
        assert "Azimuth" in result.output
        assert "Elevation" in result.output

    def test_sun_unsupported_epoch(self):
        result = runner.invoke(cli.app, ["sun", "--at", "1800-01-01"])
        assert result.exit_code == 1
        assert "Error" in result.output

    def test_score_high(self):
        result = runner.invoke(cli.app, ["score", "--elevation", "60", "--ghi", "1000"])
        assert result.exit_code == 0
        assert "866.03" in result.output
        assert "high" in result.output

    def test_score_below_horizon(self):
        result = runner.invoke(cli.app, ["score", "--elevation=-10", "--ghi", "1000"])
        assert result.exit_code == 0
        assert "-173.65" in result.output
        assert "low" in result.output

    def test_score_negative_irradiance(self):
        result = runner.invoke(cli.app, ["score", "--elevation", "60", "--ghi=-1"])
        assert result.exit_code == 1

    def test_style(self):
        result = runner.invoke(cli.app, ["style"])
        assert result.exit_code == 0
        document = json.loads(result.output)
        assert document["color"]["conditions"][0] == ["${bipvPotential} >= 100", "color('green')"]

    def test_run(self, buildings_file):
        result = runner.invoke(
            cli.app, ["run", str(buildings_file), "--at", "2024-06-20T17:00:00", "--ghi", "800"]
        )
        assert result.exit_code == 0
        assert "Scored 1 buildings" in result.output
        assert "1 features skipped" in result.output

    def test_run_skips_non_numeric_coordinates(self, tmp_path):
        """Test bad coordinate values are reported as skipped, not a traceback."""
        path = tmp_path / "bad.geojson"
        path.write_text(json.dumps({
            "type": "FeatureCollection",
            "features": [
                {"type": "Feature", "properties": {"cesium#longitude": "abc", "cesium#latitude": 39.9, "height": 10}},
                {"type": "Feature", "geometry": {"type": "Polygon", "coordinates": [[[1.0]]]}, "properties": {}},
            ],
        }), encoding="utf-8")

        result = runner.invoke(cli.app, ["run", str(path), "--at", "2024-06-20T17:00:00"])

        assert result.exit_code == 0
        assert "Scored 0 buildings" in result.output
        assert "2 features skipped" in result.output

    @pytest.mark.parametrize("content", ["[1, 2]", "{not json", '{"type": "FeatureCollection", "features": [3]}'])
    def test_run_malformed_input(self, tmp_path, content):
        path = tmp_path / "bad.geojson"
        path.write_text(content, encoding="utf-8")

        result = runner.invoke(cli.app, ["run", str(path)])

        assert result.exit_code == 1
        assert "Error:" in result.output

    def test_logging_options_passed_through(self, tmp_path, monkeypatch):
        calls = []
        monkeypatch.setattr(cli, "ensure_logging", lambda **kwargs: calls.append(kwargs))
        log_path = tmp_path / "bipv.log"

        result = runner.invoke(cli.app, ["--log-level", "debug", "--log-file", str(log_path), "version"])

        assert result.exit_code == 0
        assert calls == [{"level": "debug", "log_file": log_path}]

    def test_version(self):
        result = runner.invoke(cli.app, ["version"])
        assert result.exit_code == 0
        assert "0.1.0" in result.output
