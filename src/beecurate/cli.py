import logging
import math
from collections import Counter
from datetime import date
from pathlib import Path
from typing import Annotated

import typer
from pydantic import BaseModel, Field, ValidationError

from beecurate.core.validate import Severity, validate_schedule
from beecurate.curation.pipeline import build_schedule, quota_report
from beecurate.curation.quotas import DEFAULT_PUZZLE_COUNT
from beecurate.io import (
    DictionaryError,
    FrequencyTableError,
    load_dictionary,
    load_frequency_table,
    read_schedule,
    write_schedule,
)

app = typer.Typer(help="Curate a dictionary into a daily puzzle schedule.")

DEFAULT_DICTIONARY = Path("data/dictionary-v1.json")
DEFAULT_FREQUENCY = Path("data/raw/sources/wordfreq.tsv")
DEFAULT_OUTPUT = Path("data/puzzles-v1.json")


class BuildSettings(BaseModel):
    start: date = Field(default_factory=date.today)
    count: int = Field(default=DEFAULT_PUZZLE_COUNT, gt=0)
    dictionary: Path = DEFAULT_DICTIONARY
    frequency: Path = DEFAULT_FREQUENCY
    output: Path = DEFAULT_OUTPUT


def _parse_start(value: str | None) -> date | None:
    """ISO date, or None (use today) when missing or malformed."""
    if value is None:
        return None
    try:
        return date.fromisoformat(value.strip())
    except ValueError:
        typer.echo(
            f"Warning: ignoring invalid --start '{value}', using today",
            err=True,
        )
        return None


def _parse_count(value: str | None) -> int | None:
    """Positive count (fractions floored), or None for the default."""
    if value is None:
        return None
    try:
        parsed = float(value.strip())
    except ValueError:
        parsed = math.nan
    if not math.isfinite(parsed) or parsed < 1:
        typer.echo(
            f"Warning: ignoring invalid --count '{value}', "
            f"using {DEFAULT_PUZZLE_COUNT}",
            err=True,
        )
        return None
    return int(parsed)


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


@app.command()
def build(
    start: Annotated[
        str | None,
        typer.Option("--start", help="First puzzle date (YYYY-MM-DD)"),
    ] = None,
    count: Annotated[
        str | None,
        typer.Option("--count", "-n", help="Number of puzzles"),
    ] = None,
    dictionary: Annotated[
        Path, typer.Option("--dictionary", "-d", help="Dictionary JSON")
    ] = DEFAULT_DICTIONARY,
    frequency: Annotated[
        Path,
        typer.Option("--frequency", help="Optional word/zipf TSV"),
    ] = DEFAULT_FREQUENCY,
    output: Annotated[
        Path, typer.Option("--output", "-o", help="Schedule JSON output")
    ] = DEFAULT_OUTPUT,
    verbose: Annotated[
        bool, typer.Option("--verbose", "-v", help="Debug logging")
    ] = False,
) -> None:
    """Build the puzzle schedule and publish it if anything changed."""
    _configure_logging(verbose)

    overrides: dict[str, object] = {}
    parsed_start = _parse_start(start)
    if parsed_start is not None:
        overrides["start"] = parsed_start
    parsed_count = _parse_count(count)
    if parsed_count is not None:
        overrides["count"] = parsed_count
    settings = BuildSettings(
        dictionary=dictionary,
        frequency=frequency,
        output=output,
        **overrides,
    )

    try:
        source = load_dictionary(settings.dictionary)
        frequency_table = load_frequency_table(settings.frequency)
    except (DictionaryError, FrequencyTableError) as err:
        typer.echo(f"Error: {err}", err=True)
        raise typer.Exit(1) from err

    schedule, stats = build_schedule(
        source,
        start=settings.start,
        count=settings.count,
        frequency=frequency_table,
    )
    written = write_schedule(settings.output, schedule)
    if written:
        typer.echo(
            f"Wrote {len(schedule.puzzles)} puzzles to {settings.output}"
        )
    else:
        typer.echo("Puzzle build skipped write (no content changes).")

    mix = stats.difficulty_counts
    typer.echo(
        f"Puzzle build complete. baseCandidates={stats.base_candidates} "
        f"eligible={stats.eligible} published={stats.published}"
    )
    typer.echo(
        "Difficulty mix "
        + " ".join(f"{d.value}={n}" for d, n in mix.items())
    )
    typer.echo(f"Frequency rows loaded={stats.frequency_rows}")

    typer.echo(f"\n{'Difficulty':<12} {'Target':>6} {'Got':>6} Status")
    typer.echo("-" * 36)
    for difficulty, target, achieved, status in quota_report(
        schedule.puzzles, settings.count
    ):
        marker = "  " if status == "OK" else "!!"
        typer.echo(
            f"{marker}{difficulty:<10} {target:>6} {achieved:>6} {status}"
        )


@app.command()
def info(
    input_file: Annotated[Path, typer.Argument(help="Schedule JSON file")],
) -> None:
    """Show info about a schedule file."""
    try:
        schedule = read_schedule(input_file)
    except (ValueError, ValidationError) as err:
        typer.echo(f"Error: cannot read {input_file}: {err}", err=True)
        raise typer.Exit(1) from err

    puzzles = schedule.puzzles
    typer.echo(
        f"{input_file}: {len(puzzles)} puzzles "
        f"(dictionary {schedule.source_dictionary_version}, "
        f"generated {schedule.generated_at})"
    )
    if puzzles:
        typer.echo(f"  dates: {puzzles[0].date} .. {puzzles[-1].date}")
    by_difficulty = Counter(p.difficulty.value for p in puzzles)
    for difficulty, cnt in sorted(by_difficulty.items()):
        typer.echo(f"  {difficulty}: {cnt}")


@app.command()
def validate(
    input_file: Annotated[Path, typer.Argument(help="Schedule JSON file")],
    dictionary: Annotated[
        Path, typer.Option("--dictionary", "-d", help="Dictionary JSON")
    ] = DEFAULT_DICTIONARY,
) -> None:
    """Check a schedule's puzzles against the source dictionary."""
    try:
        schedule = read_schedule(input_file)
        source = load_dictionary(dictionary)
    except (ValueError, ValidationError) as err:
        typer.echo(f"Error: {err}", err=True)
        raise typer.Exit(1) from err

    issues = validate_schedule(schedule, source)
    for issue in issues:
        typer.echo(
            f"{issue.severity.value.upper()} {issue.code} "
            f"{issue.location}: {issue.message}",
            err=True,
        )
    errors = sum(1 for issue in issues if issue.severity == Severity.ERROR)
    typer.echo(
        f"{len(schedule.puzzles)} puzzles checked, "
        f"{errors} errors, {len(issues) - errors} warnings"
    )
    if errors:
        raise typer.Exit(1)
