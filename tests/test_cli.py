"""Basic tests of the command line interface"""

from __future__ import annotations

# Standard Imports
import json
import sys

# Third-Party Imports
from click.testing import CliRunner
import pytest

# Culprit Imports
import culprit
from culprit import cli

BUG_CHECKER = """
import sys
with open(sys.argv[1]) as handle:
    sys.exit(1 if "bug" in handle.read() else 0)
"""

XYZ_CHECKER = """
import sys
with open(sys.argv[1]) as handle:
    sys.exit(1 if "xyz" in handle.read() else 0)
"""

COMMIT_CHECKER = """
import sys
sys.exit(1 if int(sys.argv[1][1:]) >= 12 else 0)
"""


@pytest.fixture
def commits_file(tmp_path):
    path = tmp_path / "commits.txt"
    path.write_text(
        "# oldest first\n" + "".join(f"c{i:02d} change {i}\n" for i in range(20))
    )
    return str(path)


def test_version():
    runner = CliRunner()
    result = runner.invoke(cli.cli, ["--version"])
    assert result.exit_code == 0
    assert culprit.__version__ in result.output


def test_score():
    runner = CliRunner()
    result = runner.invoke(cli.cli, ["score", "fuzzing", "always", "strong", "likely"])
    assert result.exit_code == 0
    assert "Confidence Score:" in result.output
    assert "(CRITICAL)" in result.output

    result = runner.invoke(
        cli.cli, ["score", "fuzzing", "always", "strong", "likely", "-f", "json"]
    )
    assert result.exit_code == 0
    record = json.loads(result.stdout)
    assert record["priority"] == "critical"
    assert record["overall"] == pytest.approx(0.885)
    assert record["needs_human_validation"] is True

    result = runner.invoke(
        cli.cli, ["score", "user-report", "rarely", "weak", "unclear", "-f", "markdown"]
    )
    assert result.exit_code == 0
    assert "## Confidence assessment" in result.output
    assert "(LOW)" in result.output


def test_score_weights():
    runner = CliRunner()
    result = runner.invoke(
        cli.cli,
        ["-c", "confidence.weights=equal", "score", "fuzzing", "always", "strong", "likely"],
        catch_exceptions=False,
    )
    assert result.exit_code == 0
    assert "0.25*0.85" in result.output

    result = runner.invoke(
        cli.cli, ["score", "manual", "often", "weak", "unclear", "-w", "1,0,0,0", "-f", "json"]
    )
    assert result.exit_code == 0
    assert json.loads(result.stdout)["overall"] == pytest.approx(0.7)

    result = runner.invoke(cli.cli, ["score", "manual", "often", "weak", "unclear", "-w", "bad"])
    assert result.exit_code == 1

    result = runner.invoke(cli.cli, ["score", "guessing", "often", "weak", "unclear"])
    assert result.exit_code == 2


def test_invalid_config_option():
    runner = CliRunner()
    result = runner.invoke(
        cli.cli, ["-c", "novalue", "score", "manual", "often", "weak", "unclear"]
    )
    assert result.exit_code == 2


def test_minimize(tmp_path, script_factory):
    runner = CliRunner()
    checker = script_factory("checker.py", BUG_CHECKER)
    input_file = tmp_path / "input.txt"
    input_file.write_text("line1\nline2 bug\nline3\n")
    output_dir = tmp_path / "out"

    result = runner.invoke(
        cli.cli,
        ["minimize", f"{checker} {{}}", str(input_file), "-o", str(output_dir), "-t", "30"],
    )
    assert result.exit_code == 0
    assert "line2 bug" in result.output
    assert "3 -> 1 lines" in result.output
    assert (output_dir / "delta_debugging" / "input.txt").read_text() == "line2 bug"


def test_minimize_literal_input(script_factory):
    runner = CliRunner()
    checker = script_factory("checker.py", XYZ_CHECKER)

    result = runner.invoke(
        cli.cli, ["minimize", checker, "abcxyzdef", "-u", "character", "-f", "json"]
    )
    assert result.exit_code == 0
    record = json.loads(result.stdout)
    assert record["minimized"] == "xyz"
    assert record["unit_kind"] == "character"
    assert record["confidence"]["priority"] == "critical"

    result = runner.invoke(
        cli.cli, ["minimize", checker, "abcxyzdef", "-u", "character", "-f", "markdown"]
    )
    assert result.exit_code == 0
    assert "## Minimized reproducer" in result.output
    assert "```\nxyz\n```" in result.output


def test_minimize_fail_code(script_factory):
    """With explicit fail code, only that exit code is considered a failure"""
    runner = CliRunner()
    checker = script_factory("checker.py", BUG_CHECKER)

    result = runner.invoke(
        cli.cli, ["minimize", checker, "a\nbug\nb", "--fail-code", "3", "-f", "json"]
    )
    assert result.exit_code == 0
    assert '"minimized": "a\\nbug\\nb"' in result.output


def test_minimize_invalid_unit_from_config(script_factory):
    runner = CliRunner()
    checker = script_factory("checker.py", BUG_CHECKER)
    result = runner.invoke(
        cli.cli, ["-c", "deltadebugging.unit_kind=paragraph", "minimize", checker, "bug"]
    )
    assert result.exit_code == 1


def test_bisect(commits_file, script_factory):
    runner = CliRunner()
    checker = script_factory("bisect.py", COMMIT_CHECKER)

    result = runner.invoke(cli.cli, ["bisect", commits_file, "c00", "c19", checker])
    assert result.exit_code == 0
    assert 'Regression introduced in commit c12 ("change 12")' in result.output
    assert "Commits tested: 7" in result.output

    result = runner.invoke(
        cli.cli, ["bisect", commits_file, "c00", "c19", checker, "-f", "markdown"]
    )
    assert result.exit_code == 0
    assert "**First bad commit:** `c12` change 12" in result.output


def test_bisect_inconsistent_seeds(commits_file, script_factory):
    runner = CliRunner()
    checker = script_factory("bisect.py", COMMIT_CHECKER)
    result = runner.invoke(cli.cli, ["bisect", commits_file, "c13", "c19", checker])
    assert result.exit_code == 1


def test_compare(script_factory):
    runner = CliRunner()
    passing = f'"{sys.executable}" -c pass'
    crashing = f'"{sys.executable}" -c "import sys; sys.exit(3)"'

    result = runner.invoke(cli.cli, ["compare", passing, passing, "-n", "3", "--tau", "100"])
    assert result.exit_code == 0
    assert "no regression detected" in result.output

    result = runner.invoke(
        cli.cli, ["compare", passing, crashing, "-n", "3", "--functional", "-f", "json"]
    )
    assert result.exit_code == 0
    regressions = json.loads(result.stdout)
    assert len(regressions) == 1
    assert regressions[0]["kind"] == "functional"
    assert regressions[0]["functional"]["failure_mode"] == "crash"

    result = runner.invoke(
        cli.cli, ["compare", passing, crashing, "-n", "3", "--functional", "-f", "markdown"]
    )
    assert result.exit_code == 0
    assert "### Functional regression" in result.output
    assert "**Failure mode:** Crash" in result.output


def test_compare_requires_two_commands():
    runner = CliRunner()
    result = runner.invoke(cli.cli, ["compare", "true"])
    assert result.exit_code == 2


def test_minimize_hierarchical_rejects_unit(script_factory):
    runner = CliRunner()
    checker = script_factory("checker.py", BUG_CHECKER)
    result = runner.invoke(cli.cli, ["minimize", checker, "bug", "-H", "-u", "token"])
    assert result.exit_code == 2
    assert "--unit" in result.output


def test_compare_invalid_config():
    runner = CliRunner()
    passing = f'"{sys.executable}" -c pass'
    result = runner.invoke(
        cli.cli, ["-c", "differential.samples=abc", "compare", passing, passing]
    )
    assert result.exit_code == 1
    assert "differential.samples" in result.output
    assert not isinstance(result.exception, ValueError)
