"""Tests for the command-line interface."""

import io
import json

import pytest
from sudoku_logic import __version__
from sudoku_logic.cli import EXIT_BAD_INPUT, main


TEST_PUZZLE = (
    "530070000"
    "600195000"
    "098000060"
    "800060003"
    "400803001"
    "700020006"
    "060000280"
    "000419005"
    "000080079"
)


def run(argv):
    """Run the CLI, returning its exit status."""
    with pytest.raises(SystemExit) as exc_info:
        main(argv)
    return exc_info.value.code


class TestSolveCommand:
    """Tests for the exit status and output of the solve command."""

    def test_elimination(self, capsys):
        assert run(["solve", TEST_PUZZLE]) == 1
        out = capsys.readouterr().out
        assert "Method : elimination of candidates." in out
        assert "Searching all solutions." in out
        assert "Display mode : NONE." in out
        assert f"Grid is: {TEST_PUZZLE.replace('0', '.')}" in out

    def test_backtracking(self):
        assert run(["solve", "-q", "-B", TEST_PUZZLE]) == 2

    def test_exact_cover(self, capsys):
        assert run(["solve", "-E", "-f", TEST_PUZZLE]) == 3
        out = capsys.readouterr().out
        assert "Method : exact cover search (-E)." in out
        assert "Searching first solution only (-f)." in out

    def test_methods_are_exclusive(self):
        assert run(["solve", "-B", "-E", TEST_PUZZLE]) == 2

    def test_quiet(self, capsys):
        run(["solve", "-q", TEST_PUZZLE])
        assert capsys.readouterr().out == ""

    def test_no_solution(self):
        assert run(["solve", "-q", "-E", "-T", "8"]) == 0

    def test_sample_grid(self, capsys):
        assert run(["solve", "-E", "-T", "1", "ignored"]) == 3
        assert "Solving test grid #1 (-T1, command line arguments ignored)." in capsys.readouterr().out

    def test_bad_sample_number(self, capsys):
        assert run(["solve", "-T", "99"]) == EXIT_BAD_INPUT
        assert "valid values between 1 and 9" in capsys.readouterr().err

    def test_incomplete_grid(self, capsys):
        assert run(["solve", "-q", "123"]) == EXIT_BAD_INPUT
        assert "Incomplete grid (3 values provided" in capsys.readouterr().err

    def test_extra_values_ignored(self, capsys):
        assert run(["solve", "-q", TEST_PUZZLE + "12"]) == 1
        assert "Warning: 2 values ignored from input stream." in capsys.readouterr().err

    def test_standard_input(self, monkeypatch):
        monkeypatch.setattr("sys.stdin", io.StringIO(TEST_PUZZLE))
        assert run(["solve", "-q"]) == 1

    def test_4x4_grid(self):
        assert run(["solve", "-q", "-E", "-s", "2", "1234 4.2. .4.. 2..3"]) == 3

    def test_rules_displayed(self, capsys):
        run(["solve", "-r", TEST_PUZZLE])
        out = capsys.readouterr().out
        assert "Display mode : RULES." in out
        assert "must contain" in out


class TestOtherCommands:
    """Tests for the version and benchmark commands."""

    def test_no_command(self):
        assert run([]) == 1

    def test_version(self, capsys):
        main(["version"])
        assert capsys.readouterr().out.strip() == f"sudoku-logic {__version__}"

    def test_benchmark(self, tmp_path, capsys):
        main(["benchmark", "-s", "2", "-o", str(tmp_path)])

        out = capsys.readouterr().out
        assert "Grids: 1 (4x4)" in out
        assert "Benchmark complete!" in out

        with open(tmp_path / "benchmark_summary.json") as f:
            summary = json.load(f)
        assert summary["total_puzzles"] == 1
        assert set(summary["results_by_algorithm"]) == {"elimination", "backtracking", "exact-cover"}


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
