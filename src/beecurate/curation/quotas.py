"""Quota, guardrail and cadence tables for schedule curation."""

import math
from dataclasses import dataclass

from beecurate.core.models import Difficulty

MIN_WORDS = 12
MIN_PANGRAMS = 1
DEFAULT_PUZZLE_COUNT = 60
COMMON_WORD_ZIPF = 4.5


@dataclass(frozen=True)
class Guardrail:
    min_word_count: int
    max_word_count: int
    min_max_score: int
    max_max_score: int
    min_average_zipf: float | None = None
    max_average_zipf: float | None = None

    def admits(
        self, word_count: int, max_score: int, average_zipf: float
    ) -> bool:
        if not self.min_word_count <= word_count <= self.max_word_count:
            return False
        if not self.min_max_score <= max_score <= self.max_max_score:
            return False
        if (
            self.min_average_zipf is not None
            and average_zipf < self.min_average_zipf
        ):
            return False
        if (
            self.max_average_zipf is not None
            and average_zipf > self.max_average_zipf
        ):
            return False
        return True


# ── Target mix ───────────────────────────────────────────────────────────

TARGET_RATIO: dict[Difficulty, float] = {
    Difficulty.SIMPLE: 0.3,
    Difficulty.MEDIUM: 0.5,
    Difficulty.HARD: 0.2,
}

# ── Guardrails ───────────────────────────────────────────────────────────
# Tiers overlap, so a candidate can match more than one.

GUARDRAILS: dict[Difficulty, Guardrail] = {
    Difficulty.SIMPLE: Guardrail(
        min_word_count=35,
        max_word_count=85,
        min_max_score=170,
        max_max_score=250,
        min_average_zipf=4.2,
    ),
    Difficulty.MEDIUM: Guardrail(
        min_word_count=24,
        max_word_count=65,
        min_max_score=120,
        max_max_score=210,
        min_average_zipf=3.8,
        max_average_zipf=4.4,
    ),
    Difficulty.HARD: Guardrail(
        min_word_count=16,
        max_word_count=45,
        min_max_score=90,
        max_max_score=170,
        max_average_zipf=4.0,
    ),
}

# Reference points used when a quantile label is outside the guardrails.
DIFFICULTY_CENTERS: dict[Difficulty, float] = {
    Difficulty.SIMPLE: 0.2,
    Difficulty.MEDIUM: 0.55,
    Difficulty.HARD: 0.85,
}

# ── Difficulty score weights ─────────────────────────────────────────────

DIFFICULTY_WEIGHTS = {
    "letter_rarity": 0.30,
    "zipf": 0.30,
    "score": 0.20,
    "count": 0.15,
    "obviousness": 0.05,
}

# ── Selection + schedule ordering ────────────────────────────────────────

BORROW_ORDER: dict[Difficulty, tuple[Difficulty, ...]] = {
    Difficulty.SIMPLE: (Difficulty.MEDIUM, Difficulty.HARD),
    Difficulty.MEDIUM: (Difficulty.SIMPLE, Difficulty.HARD),
    Difficulty.HARD: (Difficulty.MEDIUM, Difficulty.SIMPLE),
}

CADENCE: tuple[Difficulty, ...] = (
    Difficulty.MEDIUM,
    Difficulty.SIMPLE,
    Difficulty.MEDIUM,
    Difficulty.HARD,
)


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def compute_difficulty_targets(total: int) -> dict[Difficulty, int]:
    """Split ``total`` 30/50/20; hard absorbs rounding so the sum is exact."""
    if total < 0:
        raise ValueError(f"total must be >= 0, got {total}")
    simple = _round_half_up(total * TARGET_RATIO[Difficulty.SIMPLE])
    medium = _round_half_up(total * TARGET_RATIO[Difficulty.MEDIUM])
    return {
        Difficulty.SIMPLE: simple,
        Difficulty.MEDIUM: medium,
        Difficulty.HARD: total - simple - medium,
    }
