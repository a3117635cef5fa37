from collections import deque
from collections.abc import Sequence
from datetime import date, timedelta
from typing import TypeVar

from beecurate.core.models import (
    DIFFICULTY_ORDER,
    AssignedCandidate,
    Difficulty,
)
from beecurate.curation.quotas import CADENCE

C = TypeVar("C", bound=AssignedCandidate)


def interleave_for_schedule(candidates: Sequence[C]) -> list[C]:
    """Order candidates by the repeating medium/simple/medium/hard cadence.

    Each difficulty keeps its incoming relative order. When the cadence asks
    for an exhausted difficulty, the first non-empty one in simple, medium,
    hard order is used instead; the cadence still advances.
    """
    groups: dict[Difficulty, deque[C]] = {
        difficulty: deque() for difficulty in DIFFICULTY_ORDER
    }
    for candidate in candidates:
        groups[candidate.difficulty].append(candidate)

    ordered: list[C] = []
    step = 0
    while len(ordered) < len(candidates):
        preferred = CADENCE[step % len(CADENCE)]
        step += 1
        if groups[preferred]:
            ordered.append(groups[preferred].popleft())
            continue
        fallback = next(
            (d for d in DIFFICULTY_ORDER if groups[d]),
            None,
        )
        if fallback is None:
            break
        ordered.append(groups[fallback].popleft())
    return ordered


def schedule_dates(start: date, count: int) -> list[date]:
    return [start + timedelta(days=offset) for offset in range(count)]
