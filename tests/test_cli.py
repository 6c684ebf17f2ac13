"""Tests for settings and the level checking CLI."""

import json

import pytest

from connex.cli import check_file, main
from connex.config import Settings


class TestSettings:
    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("CONNEX_INCREMENTAL_EVALUATION", raising=False)
        s = Settings(_env_file=None)
        assert s.default_topology == "square"
        assert s.incremental_evaluation is True
        assert s.verify_incremental is False

    def test_env_overrides(self, monkeypatch):
        monkeypatch.setenv("CONNEX_INCREMENTAL_EVALUATION", "false")
        monkeypatch.setenv("CONNEX_DEFAULT_TOPOLOGY", "hex")
        s = Settings(_env_file=None)
        assert s.incremental_evaluation is False
        assert s.default_topology == "hex"


class TestCheckFile:
    def test_text_level(self, tmp_path):
        path = tmp_path / "ring.txt"
        path.write_text("2,4\n7--9\n1--3\n")
        result = check_file(path)
        assert result["ok"]
        assert result["name"] == "ring"
        assert result["solved"] is True

    def test_json_level(self, tmp_path):
        path = tmp_path / "pair.json"
        path.write_text(json.dumps({
            "width": 2, "height": 1, "shapes": ["endpoint", "endpoint"], "rotations": [0, 0],
        }))
        result = check_file(path)
        assert result["ok"]
        assert result["name"] == "pair"
        assert result["solved"] is False
        assert result["dangling"] == 2

    def test_malformed_level(self, tmp_path):
        path = tmp_path / "bad.txt"
        path.write_text("2,2\n--\n")
        result = check_file(path)
        assert not result["ok"]
        assert result["reason"] == "dimension_mismatch"

    def test_file_not_utf8(self, tmp_path):
        path = tmp_path / "binary.txt"
        path.write_bytes(b"1,1\n\xff")
        result = check_file(path)
        assert not result["ok"]
        assert result["reason"] == "parse_error"

    def test_unreadable_path(self, tmp_path):
        result = check_file(tmp_path)
        assert not result["ok"]
        assert result["reason"] == "unreadable_file"


class TestMain:
    def test_reports_levels(self, tmp_path, capsys):
        path = tmp_path / "plus.txt"
        path.write_text("3,3\n v \n>5<\n ^ \n")
        main([str(path)])
        out = capsys.readouterr().out
        assert "3x3 square, solved" in out

    def test_json_report(self, tmp_path, capsys):
        path = tmp_path / "rings.txt"
        path.write_text("2,4\n7979\n1313\n")
        main(["--json", str(path)])
        report = json.loads(capsys.readouterr().out)
        assert report[0]["solved"] is False
        assert report[0]["components"] == 2

    def test_exit_code_on_malformed(self, tmp_path, capsys):
        good = tmp_path / "good.txt"
        good.write_text("1,2\n><\n")
        with pytest.raises(SystemExit) as exc:
            main([str(good), str(tmp_path / "missing.txt")])
        assert exc.value.code == 1
        assert "missing_file" in capsys.readouterr().err

    def test_exit_code_on_undecodable_file(self, tmp_path, capsys):
        path = tmp_path / "binary.json"
        path.write_bytes(b'{"width": 1, "height": 1, "shapes": ["\xff"]}')
        with pytest.raises(SystemExit) as exc:
            main([str(path)])
        assert exc.value.code == 1
        assert "parse_error" in capsys.readouterr().err
