"""Command-line driver smoke tests."""

import csv
import json
import logging

import pytest

import main
from geomanalyzer.application import configure_logging, create_analyzer
from geomanalyzer.core.geom_analyzer import GeomAnalyzer
from geomanalyzer.core.point_analyzer import PointGeomAnalyzer


@pytest.fixture
def sphere_json(tmp_path):
    path = tmp_path / "sphere.json"
    assert main.main(["template", "sphere", "-o", str(path)]) == 0
    return path


class TestCreateAnalyzer:
    def test_template(self):
        assert isinstance(create_analyzer("template:sphere"), GeomAnalyzer)

    def test_file(self, sphere_json):
        a = create_analyzer(str(sphere_json))
        assert isinstance(a, GeomAnalyzer)
        assert a.service.top_volume_name == "World"

    def test_target_mix(self):
        assert isinstance(create_analyzer("1000080160[0.95],1000010010[0.05]"), PointGeomAnalyzer)

    def test_bad_mix(self):
        with pytest.raises(ValueError, match="target mix"):
            create_analyzer("1000080160[0.95],oxygen")

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError, match="not found"):
            create_analyzer(str(tmp_path / "sphere.json"))

    def test_missing_file_without_directory(self):
        with pytest.raises(FileNotFoundError):
            create_analyzer("detector.json")


class TestConfigureLogging:
    def test_levels(self, monkeypatch):
        calls = []
        monkeypatch.setattr(logging, "basicConfig", lambda **kw: calls.append(kw["level"]))
        for v in (0, 1, 2):
            configure_logging(v)
        assert calls == [logging.WARNING, logging.INFO, logging.DEBUG]


class TestCommands:
    def test_template_written(self, sphere_json):
        data = json.loads(sphere_json.read_text(encoding="utf-8"))
        assert data["top_volume"] == "World"

    def test_pathlengths(self, sphere_json, capsys, tmp_path):
        out_csv = tmp_path / "pl.csv"
        rc = main.main([
            "pathlengths", str(sphere_json),
            "--origin", "0", "0", "-80", "--direction", "0", "0", "1",
            "--csv", str(out_csv),
        ])
        assert rc == 0
        assert "1000260550  20 cm" in capsys.readouterr().out
        with open(out_csv, newline="", encoding="utf-8-sig") as f:
            assert len(list(csv.reader(f))) == 4

    def test_pathlengths_mm(self, sphere_json, capsys):
        rc = main.main([
            "pathlengths", str(sphere_json), "-L", "mm",
            "--origin", "0", "0", "-80", "--direction", "0", "0", "1",
        ])
        assert rc == 0
        assert "1000260550  2 cm" in capsys.readouterr().out

    def test_maxpl(self, sphere_json, tmp_path):
        out = tmp_path / "maxpl.json"
        rc = main.main([
            "maxpl", str(sphere_json), "--points", "3", "--rays", "5",
            "--seed", "1", "-o", str(out),
        ])
        assert rc == 0
        data = json.loads(out.read_text(encoding="utf-8"))
        assert {e["pdg"] for e in data["entries"]} == {1000070140, 1000080150, 1000260550}

    def test_vertex(self, sphere_json, capsys):
        rc = main.main([
            "vertex", str(sphere_json), "--target", "1000260550", "-n", "3", "--seed", "2",
            "--origin", "0", "0", "-40", "--direction", "0", "0", "1",
        ])
        assert rc == 0
        lines = capsys.readouterr().out.strip().splitlines()
        assert len(lines) == 3
        for line in lines:
            x, y, z = map(float, line.split())
            assert -10.0 <= z <= 10.0

    def test_vertex_missing_target_fails(self, sphere_json):
        rc = main.main([
            "vertex", str(sphere_json), "--target", "1000260550",
            "--origin", "0", "30", "-40", "--direction", "0", "0", "1",
        ])
        assert rc == 1

    def test_target_mix_maxpl(self, capsys):
        rc = main.main(["maxpl", "1000080160[0.95],1000010010[0.05]"])
        assert rc == 0
        assert "1000080160  0.95 cm" in capsys.readouterr().out

    def test_bad_geometry_argument(self):
        assert main.main(["maxpl", "not-a-mix"]) == 2

    def test_missing_geometry_file(self, tmp_path, caplog):
        with caplog.at_level(logging.ERROR):
            rc = main.main(["maxpl", str(tmp_path / "nope.json")])
        assert rc == 2
        assert "not found" in caplog.text

    @pytest.mark.parametrize("option", [["--points", "0"], ["--rays", "0"]])
    def test_zero_sampling_counts_rejected(self, option):
        assert main.main(["maxpl", "template:sphere", *option]) == 2

    def test_zero_vertex_step_rejected(self):
        rc = main.main([
            "vertex", "template:sphere", "--target", "1000260550", "--step", "0",
            "--origin", "0", "0", "-40", "--direction", "0", "0", "1",
        ])
        assert rc == 2

    def test_unknown_template_rejected_by_parser(self):
        with pytest.raises(SystemExit):
            main.main(["template", "torus", "-o", "x.json"])
