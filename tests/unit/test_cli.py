"""Tests for the dana command-line interface."""

import json
from pathlib import Path

import pytest

from dana.cli import Colors, main


@pytest.fixture(autouse=True)
def plain_output() -> None:
    Colors.disable()


@pytest.fixture
def write_program(tmp_path: Path):
    """Fixture to write a Dana source file and return its path."""

    def _write(source: str, name: str = "program.dana") -> Path:
        path = tmp_path / name
        path.write_text(source, encoding="utf-8")
        return path

    return _write


class TestCheckCommand:
    """Test suite for `dana check`."""

    def test_clean_file(self, write_program, sample_program, capsys) -> None:
        path = write_program(sample_program)

        assert main(["check", str(path)]) == 0
        assert f"OK: {path} (no problems)" in capsys.readouterr().out

    def test_error_fails(self, write_program, capsys) -> None:
        path = write_program("var x = 5\n")

        assert main(["check", str(path)]) == 1

        out = capsys.readouterr().out
        assert "error: Variable declaration must specify a type (var name is type)" in out
        assert f"--> {path}:1:1" in out
        assert "  1 | var x = 5" in out
        assert "^^^^^^^^^" in out
        assert "2 problem(s), 1 error(s)" in out

    def test_warning_only_passes(self, write_program, capsys) -> None:
        path = write_program("x = 5\n")

        assert main(["check", str(path)]) == 0
        assert "warning: Did you mean ':=' for assignment instead of '='?" in capsys.readouterr().out

    def test_missing_file(self, tmp_path: Path, capsys) -> None:
        missing = tmp_path / "missing.dana"

        assert main(["check", str(missing)]) == 1
        assert "File not found" in capsys.readouterr().err

    def test_max_problems(self, write_program, capsys) -> None:
        path = write_program("(\n(\n(\n")

        assert main(["check", "--max-problems", "1", "--json", str(path)]) == 1

        report = json.loads(capsys.readouterr().out)
        assert len(report[0]["diagnostics"]) == 1

    def test_negative_max_problems(self, write_program, capsys) -> None:
        path = write_program("x := 1\n")

        assert main(["check", "--max-problems", "-1", str(path)]) == 1
        assert "Error:" in capsys.readouterr().err

    def test_json_output(self, write_program, capsys) -> None:
        clean = write_program("x := 1\n", name="clean.dana")
        typo = write_program("retrun\n", name="typo.dana")

        assert main(["check", "--json", str(clean), str(typo)]) == 0

        report = json.loads(capsys.readouterr().out)
        assert [entry["file"] for entry in report] == [str(clean), str(typo)]
        assert report[0]["diagnostics"] == []
        assert report[1]["diagnostics"] == [
            {
                "severity": "info",
                "range": {"startLine": 0, "startChar": 0, "endLine": 0, "endChar": 6},
                "message": "Unknown token 'retrun'. Did you mean 'return'?",
                "source": "dana-language-server",
            }
        ]


class TestLexiconCommands:
    """Test suite for `dana keywords` and `dana hover`."""

    def test_keywords_lists_each_name_once(self, capsys) -> None:
        assert main(["keywords"]) == 0

        out = capsys.readouterr().out
        assert out.count("Boolean true value") == 1
        assert "writeInteger(value as int): void" in out
        assert ":=  =  <>" in out

    def test_hover_keyword(self, capsys) -> None:
        assert main(["hover", "def"]) == 0
        assert capsys.readouterr().out.startswith("**def** (keyword)")

    def test_hover_unknown_symbol(self, capsys) -> None:
        assert main(["hover", "strln"]) == 1

        captured = capsys.readouterr()
        assert captured.err.strip() == "Unknown symbol: strln"
        assert captured.out == ""

    def test_no_command_prints_help(self, capsys) -> None:
        assert main([]) == 0
        assert "usage: dana" in capsys.readouterr().out
