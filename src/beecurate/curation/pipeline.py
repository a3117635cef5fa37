"""End-to-end curation: dictionary in, dated puzzle schedule out."""

import logging
from datetime import UTC, date, datetime

from pydantic import BaseModel, Field

from beecurate.core.models import (
    DIFFICULTY_ORDER,
    AssignedCandidate,
    Dictionary,
    Difficulty,
    FrequencyTable,
    Puzzle,
    PuzzleSchedule,
)
from beecurate.curation.annotate import annotate_candidates
from beecurate.curation.assign import assign_difficulties
from beecurate.curation.candidates import build_candidates
from beecurate.curation.quotas import compute_difficulty_targets
from beecurate.curation.schedule import (
    interleave_for_schedule,
    schedule_dates,
)
from beecurate.curation.select import SelectionStats, select_with_stats

logger = logging.getLogger(__name__)

SCHEDULE_VERSION = "v1"


class BuildStats(BaseModel):
    base_candidates: int = 0
    annotated: int = 0
    eligible: int = 0
    published: int = 0
    difficulty_counts: dict[Difficulty, int] = Field(default_factory=dict)
    frequency_rows: int = 0
    selection: SelectionStats = Field(default_factory=SelectionStats)


def utc_timestamp(now: datetime | None = None) -> str:
    moment = now or datetime.now(UTC)
    return (
        moment.astimezone(UTC)
        .isoformat(timespec="milliseconds")
        .replace("+00:00", "Z")
    )


def to_puzzle(
    candidate: AssignedCandidate, day: date, dictionary_version: str
) -> Puzzle:
    iso_day = day.isoformat()
    return Puzzle(
        id=iso_day,
        date=iso_day,
        center_letter=candidate.center_letter,
        outer_letters=list(candidate.outer_letters),
        dictionary_version=dictionary_version,
        valid_words=list(candidate.valid_words),
        pangrams=list(candidate.pangrams),
        difficulty=candidate.difficulty,
        max_score=candidate.max_score,
        rank_thresholds=dict(candidate.rank_thresholds),
    )


def curate(
    words: list[str],
    frequency: FrequencyTable,
    count: int,
    seed: str,
) -> tuple[list[AssignedCandidate], BuildStats]:
    """Run the five curation stages and return the day-ordered selection."""
    raw = build_candidates(words)
    annotated = annotate_candidates(raw, words, frequency)
    assigned = assign_difficulties(annotated)
    selected, selection = select_with_stats(assigned, count, seed)
    ordered = interleave_for_schedule(selected)

    stats = BuildStats(
        base_candidates=len(raw),
        annotated=len(annotated),
        eligible=len(assigned),
        published=len(ordered),
        difficulty_counts={
            difficulty: sum(1 for c in ordered if c.difficulty == difficulty)
            for difficulty in DIFFICULTY_ORDER
        },
        frequency_rows=frequency.rows_loaded,
        selection=selection,
    )
    return ordered, stats


def build_schedule(
    dictionary: Dictionary,
    start: date,
    count: int,
    frequency: FrequencyTable | None = None,
    generated_at: datetime | None = None,
) -> tuple[PuzzleSchedule, BuildStats]:
    """Build a schedule of ``count`` puzzles starting on ``start``.

    The start date's ISO form seeds every ordering decision, so the same
    dictionary, start and count always give the same puzzles.
    """
    if frequency is None:
        frequency = FrequencyTable()

    ordered, stats = curate(
        dictionary.words, frequency, count, seed=start.isoformat()
    )
    days = schedule_dates(start, len(ordered))
    puzzles = [
        to_puzzle(candidate, day, dictionary.version)
        for candidate, day in zip(ordered, days, strict=True)
    ]

    logger.debug(
        "build: start=%s count=%d published=%d",
        start.isoformat(), count, len(puzzles),
    )
    schedule = PuzzleSchedule(
        version=SCHEDULE_VERSION,
        generated_at=utc_timestamp(generated_at),
        source_dictionary_version=dictionary.version,
        puzzles=puzzles,
    )
    return schedule, stats


def quota_report(
    puzzles: list[Puzzle],
    count: int,
) -> list[tuple[str, int, int, str]]:
    """Generate a quota satisfaction report.

    Returns list of (difficulty, target, achieved, status) tuples.
    """
    targets = compute_difficulty_targets(count)
    rows: list[tuple[str, int, int, str]] = []
    for difficulty in DIFFICULTY_ORDER:
        achieved = sum(1 for p in puzzles if p.difficulty == difficulty)
        target = targets[difficulty]
        status = "OK" if achieved >= target else "UNDER"
        rows.append((difficulty.value, target, achieved, status))
    return rows
