"""Seeded, quota-driven selection of assigned candidates."""

import logging
from collections.abc import Sequence

from pydantic import BaseModel, Field

from beecurate.core.hashing import seeded_order_key
from beecurate.core.models import (
    DIFFICULTY_ORDER,
    AssignedCandidate,
    Difficulty,
)
from beecurate.curation.quotas import BORROW_ORDER, compute_difficulty_targets

logger = logging.getLogger(__name__)

_FALLBACK_SCOPE = "fallback"


class SelectionStats(BaseModel):
    targets: dict[Difficulty, int] = Field(default_factory=dict)
    borrowed: dict[Difficulty, int] = Field(default_factory=dict)
    shortages: dict[Difficulty, int] = Field(default_factory=dict)
    fallback: int = 0
    selected: int = 0


def _bucket(
    candidates: Sequence[AssignedCandidate], seed: str
) -> dict[Difficulty, list[AssignedCandidate]]:
    buckets: dict[Difficulty, list[AssignedCandidate]] = {
        difficulty: [] for difficulty in DIFFICULTY_ORDER
    }
    for candidate in candidates:
        buckets[candidate.difficulty].append(candidate)
    for difficulty, bucket in buckets.items():
        bucket.sort(
            key=lambda c, d=difficulty: seeded_order_key(
                seed, d.value, c.core_key
            )
        )
    return buckets


def _take_borrowable(
    pool: list[AssignedCandidate], needed: Difficulty
) -> AssignedCandidate | None:
    """Remove and return the first pool entry allowed at ``needed``."""
    for idx, candidate in enumerate(pool):
        if needed in candidate.metrics.guardrail_matches:
            return pool.pop(idx)
    return None


def select_with_stats(
    candidates: Sequence[AssignedCandidate],
    count: int,
    seed: str,
) -> tuple[list[AssignedCandidate], SelectionStats]:
    """Pick ``min(count, len(candidates))`` candidates for a 30/50/20 mix.

    Each difficulty bucket is ordered by a hash of
    ``seed:difficulty:core_key`` and its first ``target`` entries are taken.
    Shortfalls borrow from other buckets' leftovers (relabeling the borrowed
    candidate) when the candidate's guardrails allow it; whatever is still
    missing is filled from all leftovers in ``seed:fallback`` hash order.
    """
    if count < 0:
        raise ValueError(f"count must be >= 0, got {count}")

    targets = compute_difficulty_targets(count)
    stats = SelectionStats(targets=targets)
    buckets = _bucket(candidates, seed)

    selected = {
        difficulty: buckets[difficulty][: targets[difficulty]]
        for difficulty in DIFFICULTY_ORDER
    }
    leftovers = {
        difficulty: buckets[difficulty][targets[difficulty]:]
        for difficulty in DIFFICULTY_ORDER
    }

    for difficulty in DIFFICULTY_ORDER:
        shortage = targets[difficulty] - len(selected[difficulty])
        borrowed = 0
        while shortage > 0:
            found: AssignedCandidate | None = None
            for source in BORROW_ORDER[difficulty]:
                found = _take_borrowable(leftovers[source], difficulty)
                if found is not None:
                    break
            if found is None:
                break
            selected[difficulty].append(
                found.model_copy(update={"difficulty": difficulty})
            )
            borrowed += 1
            shortage -= 1
        stats.borrowed[difficulty] = borrowed
        stats.shortages[difficulty] = max(0, shortage)

    for difficulty in DIFFICULTY_ORDER:
        if stats.shortages[difficulty] > 0:
            logger.warning(
                "Unable to fully satisfy %s quota. missing=%d",
                difficulty.value,
                stats.shortages[difficulty],
            )

    final = [
        candidate
        for difficulty in DIFFICULTY_ORDER
        for candidate in selected[difficulty]
    ]
    if len(final) < count:
        remaining = sorted(
            (
                candidate
                for difficulty in DIFFICULTY_ORDER
                for candidate in leftovers[difficulty]
            ),
            key=lambda c: seeded_order_key(seed, _FALLBACK_SCOPE, c.core_key),
        )
        fill = remaining[: count - len(final)]
        stats.fallback = len(fill)
        final.extend(fill)

    final = final[:count]
    stats.selected = len(final)
    if stats.selected < count:
        logger.warning(
            "Only %d of %d requested puzzles could be selected",
            stats.selected, count,
        )
    logger.debug(
        "select: targets=%s borrowed=%s fallback=%d selected=%d",
        {d.value: n for d, n in targets.items()},
        {d.value: n for d, n in stats.borrowed.items()},
        stats.fallback,
        stats.selected,
    )
    return final, stats


def select_by_quota(
    candidates: Sequence[AssignedCandidate],
    count: int,
    seed: str,
) -> list[AssignedCandidate]:
    selected, _ = select_with_stats(candidates, count, seed)
    return selected
