"""Command line interface of culprit.

The interface wraps the algorithms into four commands:

  1. ``minimize``: shrinks the failing input to the minimal reproducer,
  2. ``bisect``: finds the first bad commit in the linear history,
  3. ``compare``: tests the ordered variants for functional and performance regressions,
  4. ``score``: computes the confidence of a manually assessed finding.

The oracles are external commands; see :mod:`culprit.utils.external.oracles` for how their
exit codes are interpreted. Every command can print its result as text, json or markdown.
"""

from __future__ import annotations

# Standard Imports
from pathlib import Path
from typing import Any, Optional

# Third-Party Imports
import click

# Culprit Imports
import culprit
from culprit.bisect import factory as bisect_factory
from culprit.check import factory as check_factory
from culprit.confidence import factory as confidence
from culprit.deltadebugging import factory as dd_factory
from culprit.deltadebugging import units as dd_units
from culprit.logic import config
from culprit.utils import log
from culprit.utils.common import cli_kit
from culprit.utils.exceptions import CulpritException
from culprit.utils.external import oracles
from culprit.utils.structs.bisect_structs import BisectionResult
from culprit.utils.structs.check_structs import Regression
from culprit.utils.structs.confidence_structs import (
    ConfidenceScore,
    DiscoveryMethod,
    EvidenceStrength,
    Reproducibility,
    RootCauseClarity,
)
from culprit.utils.structs.dd_structs import MinimizationResult, UnitKind

format_option = click.option(
    "--format",
    "-f",
    "output_format",
    type=click.Choice(cli_kit.OUTPUT_FORMATS),
    default="text",
    show_default=True,
    help="Format in which the result is printed.",
)
timeout_option = click.option(
    "--timeout",
    "-t",
    type=click.FloatRange(min=0.0, min_open=True),
    default=None,
    help="Timeout of one run of the command in seconds.",
)
discovery_option = click.option(
    "--discovery",
    "-d",
    type=click.Choice(DiscoveryMethod.supported()),
    default=None,
    help="How the finding was discovered (defaults to confidence.discovery_method).",
)


def print_confidence(confidence_score: Optional[ConfidenceScore]) -> None:
    if confidence_score is None:
        return
    log.minor_info("Confidence")
    log.increase_indent()
    for line in confidence_score.explain().splitlines():
        log.write(line)
    action = confidence_score.recommended_action
    log.minor_status("Recommended action", status=log.highlight(action))
    log.decrease_indent()


def print_minimization(result: MinimizationResult) -> None:
    log.major_info("Minimization")
    log.minor_info(result.summary())
    log.minor_info("Minimized input")
    log.cprintln(result.minimized, "white", ["bold"])
    print_confidence(result.confidence)


def print_bisection(result: BisectionResult) -> None:
    log.major_info("Bisection")
    for line in result.summary().splitlines():
        log.minor_info(line)
    print_confidence(result.confidence)


def print_regressions(regressions: list[Regression]) -> None:
    log.major_info("Regressions")
    if not regressions:
        log.minor_success("regression check", "no regression detected")
        return
    for regression in regressions:
        log.minor_fail(regression.summary(), regression.kind.value)
        print_confidence(regression.confidence)


def resolve_discovery(discovery: Optional[str]) -> DiscoveryMethod:
    return DiscoveryMethod(discovery) if discovery else confidence.discovery_from_config()


@click.group()
@click.option(
    "--verbose",
    "-v",
    count=True,
    default=0,
    callback=cli_kit.set_verbosity_callback,
    help="Increases the verbosity of the messages (-v for info, -vv for debug).",
)
@click.option(
    "--config-option",
    "-c",
    "config_options",
    nargs=1,
    multiple=True,
    is_eager=True,
    callback=cli_kit.config_options_callback,
    help="Sets the runtime configuration key, e.g. ``-c differential.samples=10``.",
)
@click.version_option(version=culprit.__version__, prog_name="culprit")
def cli(**_: Any) -> None:
    """Culprit: finds minimal reproducers, regression-introducing commits and regressions.

    Every finding is accompanied by the confidence score; the findings are automated and
    should always be validated by a human.
    """


@cli.command()
@click.argument("cmd", type=str)
@click.argument("input_sample", type=str)
@click.option(
    "--unit",
    "-u",
    type=click.Choice(UnitKind.supported()),
    default=None,
    help="Units into which the input is split (defaults to deltadebugging.unit_kind or line).",
)
@click.option(
    "--hierarchical",
    "-H",
    is_flag=True,
    default=False,
    help="Minimizes first by top-level blocks, then by lines.",
)
@timeout_option
@click.option(
    "--fail-code",
    "fail_codes",
    type=int,
    multiple=True,
    help="Exit code signaling the failure; by default any non-zero exit code is a failure.",
)
@click.option(
    "--fail-on-timeout",
    is_flag=True,
    default=False,
    help="Considers the timeout of the command to be the failure (e.g. when looking for hangs).",
)
@click.option(
    "--output-dir",
    "-o",
    type=click.Path(file_okay=False, writable=True),
    default=None,
    help="Directory, where the minimized input is stored (into delta_debugging subdirectory).",
)
@discovery_option
@format_option
def minimize(
    cmd: str,
    input_sample: str,
    unit: Optional[str],
    hierarchical: bool,
    timeout: Optional[float],
    fail_codes: tuple[int, ...],
    fail_on_timeout: bool,
    output_dir: Optional[str],
    discovery: Optional[str],
    output_format: str,
) -> None:
    """Minimizes the INPUT_SAMPLE (file or literal) failing the CMD.

    The candidate is stored into temporary file, whose path is substituted for {} in CMD (or
    appended to CMD).
    """
    if hierarchical and unit is not None:
        raise click.BadParameter(
            "the hierarchical minimization always uses blocks and lines", param_hint="--unit"
        )
    candidate = cli_kit.read_input(input_sample)
    suffix = Path(input_sample).suffix if Path(input_sample).is_file() else ""
    oracle = oracles.candidate_oracle(cmd, timeout, fail_codes, fail_on_timeout, suffix)
    options: dict[str, Any] = {
        "discovery": resolve_discovery(discovery),
        "weights": confidence.weights_from_config(),
    }
    try:
        if hierarchical:
            result = dd_factory.minimize_hierarchical(candidate, oracle, **options)
        else:
            configured_unit = config.lookup_key_recursively(
                "deltadebugging.unit_kind", UnitKind.default()
            )
            unit_kind = dd_units.to_unit_kind(unit or configured_unit)
            result = dd_factory.minimize(candidate, oracle, unit_kind, **options)
    except CulpritException as exc:
        log.error(str(exc), raised_exception=exc)
        return

    if result.confidence is None:
        log.warn("the input does not fail, it was left unchanged")
    target_dir = Path(output_dir) if output_dir else cli_kit.default_output_dir()
    if target_dir is not None:
        stored = cli_kit.create_debugging_file(target_dir, input_sample, result.minimized)
        log.minor_status("Minimized input stored", status=log.path_style(str(stored)))
    cli_kit.emit_result(
        result, output_format, "minimization.md.jinja2", print_minimization, result=result
    )


@cli.command()
@click.argument("commits_file", type=click.Path(exists=True, dir_okay=False))
@click.argument("good", type=str)
@click.argument("bad", type=str)
@click.argument("cmd", type=str)
@timeout_option
@discovery_option
@format_option
def bisect(
    commits_file: str,
    good: str,
    bad: str,
    cmd: str,
    timeout: Optional[float],
    discovery: Optional[str],
    output_format: str,
) -> None:
    """Finds the first commit between GOOD and BAD, for which the CMD fails.

    COMMITS_FILE lists the linear history from the oldest commit, one commit per line (e.g.
    ``git log --reverse --format='%H %s'``). The commit id is substituted for {} in CMD (or
    appended). Exit code 0 marks the commit good, 125 skips it, anything else marks it bad.
    """
    commits = cli_kit.read_commits(commits_file)
    try:
        result = bisect_factory.bisect(
            commits,
            good,
            bad,
            oracles.commit_oracle(cmd, timeout),
            discovery=resolve_discovery(discovery),
            weights=confidence.weights_from_config(),
        )
    except CulpritException as exc:
        log.error(str(exc), raised_exception=exc)
        return
    if result is None:
        log.error("the first bad commit could not be determined")
        return
    cli_kit.emit_result(
        result, output_format, "bisection.md.jinja2", print_bisection, result=result
    )


@cli.command()
@click.argument("variant_cmds", nargs=-1, required=True, type=str)
@click.option(
    "--samples",
    "-n",
    type=click.IntRange(min=2),
    default=None,
    help="Number of runs per variant (defaults to differential.samples or 30).",
)
@click.option(
    "--alpha",
    type=click.FloatRange(min=0.0, max=1.0, min_open=True, max_open=True),
    default=None,
    help="Significance level of the t-test (defaults to differential.significance or 0.05).",
)
@click.option(
    "--tau",
    type=float,
    default=None,
    help="Minimal slowdown considered as regression (defaults to differential.min_slowdown).",
)
@click.option(
    "--functional",
    is_flag=True,
    default=False,
    help="Checks the variants for hangs, crashes and wrong outputs before timing them.",
)
@click.option(
    "--expected-output",
    type=click.Path(exists=True, dir_okay=False),
    default=None,
    help="File with the expected standard output of the variants (implies --functional).",
)
@timeout_option
@discovery_option
@format_option
def compare(
    variant_cmds: tuple[str, ...],
    samples: Optional[int],
    alpha: Optional[float],
    tau: Optional[float],
    functional: bool,
    expected_output: Optional[str],
    timeout: Optional[float],
    discovery: Optional[str],
    output_format: str,
) -> None:
    """Compares the ordered VARIANT_CMDS (baseline first) for regressions.

    Each consecutive pair of commands is compared; the wall-clock time of the runs is sampled
    in milliseconds and the failed runs yield no sample.
    """
    if len(variant_cmds) < 2:
        raise click.BadParameter("at least two commands are required", param_hint="VARIANT_CMDS")
    variants = {f"v{index}: {cmd}": cmd for index, cmd in enumerate(variant_cmds)}
    try:
        analyzer = check_factory.DifferentialAnalyzer.from_config(
            samples=samples,
            significance=alpha,
            min_slowdown=tau,
            discovery=resolve_discovery(discovery),
            weights=confidence.weights_from_config(),
        )
        outcome_fn = None
        if functional or expected_output:
            expected = Path(expected_output).read_bytes() if expected_output else None
            outcome_fn = oracles.status_oracle(variants, timeout, expected)
        regressions = analyzer.find_regressions(
            list(variants), oracles.timing_sampler(variants, timeout), outcome_fn
        )
    except CulpritException as exc:
        log.error(str(exc), raised_exception=exc)
        return
    cli_kit.emit_result(
        regressions,
        output_format,
        "regressions.md.jinja2",
        print_regressions,
        regressions=regressions,
    )


@cli.command()
@click.argument("discovery", type=click.Choice(DiscoveryMethod.supported()))
@click.argument("reproducibility", type=click.Choice(Reproducibility.supported()))
@click.argument("evidence", type=click.Choice(EvidenceStrength.supported()))
@click.argument("clarity", type=click.Choice(RootCauseClarity.supported()))
@click.option(
    "--weights",
    "-w",
    type=str,
    default=None,
    help="Weight scheme (weighted, equal) or four comma separated weights.",
)
@format_option
def score(
    discovery: str,
    reproducibility: str,
    evidence: str,
    clarity: str,
    weights: Optional[str],
    output_format: str,
) -> None:
    """Computes the confidence of the finding assessed along the four axes."""
    try:
        weight_vector = (
            confidence.parse_weights(weights) if weights else confidence.weights_from_config()
        )
    except CulpritException as exc:
        log.error(str(exc), raised_exception=exc)
        return
    result = confidence.score(
        DiscoveryMethod(discovery),
        Reproducibility(reproducibility),
        EvidenceStrength(evidence),
        RootCauseClarity(clarity),
        weight_vector,
    )
    cli_kit.emit_result(
        result,
        output_format,
        "confidence.md.jinja2",
        lambda score_result: click.echo(score_result.explain()),
        score=result,
        standalone=True,
    )


def launch() -> None:
    """Runs the command line interface"""
    cli()  # pylint: disable=no-value-for-parameter


if __name__ == "__main__":
    launch()
