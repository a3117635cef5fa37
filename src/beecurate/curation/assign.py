import logging
import math
from collections.abc import Sequence

from beecurate.core.models import (
    AnnotatedCandidate,
    AssignedCandidate,
    Difficulty,
)
from beecurate.curation.quotas import DIFFICULTY_CENTERS, TARGET_RATIO

logger = logging.getLogger(__name__)


def choose_nearest_difficulty(
    score: float, allowed: Sequence[Difficulty]
) -> Difficulty:
    """Allowed difficulty whose reference point is closest to ``score``.

    Ties keep the earlier entry of ``allowed``.
    """
    if not allowed:
        raise ValueError("allowed must contain at least one difficulty")
    best = allowed[0]
    best_distance = math.inf
    for difficulty in allowed:
        distance = abs(score - DIFFICULTY_CENTERS[difficulty])
        if distance < best_distance:
            best = difficulty
            best_distance = distance
    return best


def _quantile_label(
    rank: int, simple_cutoff: int, medium_cutoff: int
) -> Difficulty:
    if rank < simple_cutoff:
        return Difficulty.SIMPLE
    if rank < medium_cutoff:
        return Difficulty.MEDIUM
    return Difficulty.HARD


def assign_difficulties(
    candidates: Sequence[AnnotatedCandidate],
) -> list[AssignedCandidate]:
    """Label candidates by score rank: lowest 30% simple, next 50% medium.

    A rank label outside the candidate's guardrails is replaced by the
    nearest allowed difficulty. Returned in ascending score order.
    """
    ranked = sorted(
        candidates,
        key=lambda c: (c.metrics.difficulty_score, c.core_key),
    )
    total = len(ranked)
    simple_cutoff = math.floor(total * TARGET_RATIO[Difficulty.SIMPLE])
    medium_cutoff = math.floor(
        total
        * (TARGET_RATIO[Difficulty.SIMPLE] + TARGET_RATIO[Difficulty.MEDIUM])
    )

    assigned: list[AssignedCandidate] = []
    overridden = 0
    for rank, candidate in enumerate(ranked):
        label = _quantile_label(rank, simple_cutoff, medium_cutoff)
        allowed = candidate.metrics.guardrail_matches
        if label not in allowed:
            label = choose_nearest_difficulty(
                candidate.metrics.difficulty_score, allowed
            )
            overridden += 1
        assigned.append(AssignedCandidate(
            **candidate.model_dump(), difficulty=label
        ))

    logger.debug(
        "assign: %d candidates, cutoffs=(%d, %d), %d guardrail overrides",
        total, simple_cutoff, medium_cutoff, overridden,
    )
    return assigned
