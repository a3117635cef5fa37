"""Difficulty metrics and guardrail matching for raw candidates.

Scoring (all normalized with min-max across the whole candidate pool):
- Letter rarity (30%): mean of (1 - share of dictionary words containing
  the letter) over the 7 letters
- Zipf hardness (30%): 1 - normalized mean zipf of the words
- Score hardness (20%): 1 - normalized max score
- Count hardness (15%): 1 - normalized word count
- Obviousness hardness (5%): 1 - normalized share of common words
"""

import logging
import math
from collections import Counter
from collections.abc import Sequence
from dataclasses import dataclass

from beecurate.core.models import (
    DIFFICULTY_ORDER,
    AnnotatedCandidate,
    CandidateMetrics,
    Difficulty,
    FrequencyTable,
    RawCandidate,
)
from beecurate.curation.quotas import (
    COMMON_WORD_ZIPF,
    DIFFICULTY_WEIGHTS,
    GUARDRAILS,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class _RawMetrics:
    word_count: int
    max_score: int
    average_zipf: float
    common_word_share: float
    letter_rarity_raw: float


@dataclass(frozen=True)
class _Bounds:
    low: float
    high: float


def build_letter_frequency(words: Sequence[str]) -> dict[str, float]:
    """Share of words containing each letter at least once."""
    counts: Counter[str] = Counter()
    for word in words:
        counts.update(set(word))
    total = len(words) or 1
    return {letter: count / total for letter, count in counts.items()}


def normalize01(value: float, low: float, high: float) -> float:
    if not math.isfinite(value):
        return 0.5
    if not math.isfinite(low) or not math.isfinite(high) or high <= low:
        return 0.5
    return min(1.0, max(0.0, (value - low) / (high - low)))


def matching_guardrails(
    word_count: int, max_score: int, average_zipf: float
) -> tuple[Difficulty, ...]:
    return tuple(
        difficulty
        for difficulty in DIFFICULTY_ORDER
        if GUARDRAILS[difficulty].admits(word_count, max_score, average_zipf)
    )


def _raw_metrics(
    candidate: RawCandidate,
    letter_frequency: dict[str, float],
    frequency: FrequencyTable,
) -> _RawMetrics:
    letters = (candidate.center_letter, *candidate.outer_letters)
    letter_rarity_raw = sum(
        1.0 - letter_frequency.get(letter, 0.0) for letter in letters
    ) / len(letters)

    zipf_total = 0.0
    zipf_count = 0
    common_count = 0
    for word in candidate.valid_words:
        zipf = frequency.zipf_by_word.get(word)
        if zipf is None or not math.isfinite(zipf):
            continue
        zipf_total += zipf
        zipf_count += 1
        if zipf >= COMMON_WORD_ZIPF:
            common_count += 1

    word_count = len(candidate.valid_words)
    return _RawMetrics(
        word_count=word_count,
        max_score=candidate.max_score,
        average_zipf=(
            zipf_total / zipf_count if zipf_count else frequency.min_zipf
        ),
        common_word_share=common_count / word_count if word_count else 0.0,
        letter_rarity_raw=letter_rarity_raw,
    )


def _bounds(values: Sequence[float]) -> _Bounds:
    return _Bounds(low=min(values), high=max(values))


def annotate_candidates(
    candidates: Sequence[RawCandidate],
    words: Sequence[str],
    frequency: FrequencyTable | None = None,
) -> list[AnnotatedCandidate]:
    """Attach difficulty metrics; drop candidates matching no guardrail.

    Normalization bounds come from the full candidate list, so the result
    for one candidate depends on every other candidate passed in.
    """
    if not candidates:
        return []
    if frequency is None:
        frequency = FrequencyTable()

    letter_frequency = build_letter_frequency(words)
    raw = [_raw_metrics(c, letter_frequency, frequency) for c in candidates]

    rarity_bounds = _bounds([m.letter_rarity_raw for m in raw])
    zipf_bounds = _bounds([m.average_zipf for m in raw])
    score_bounds = _bounds([m.max_score for m in raw])
    count_bounds = _bounds([m.word_count for m in raw])
    common_bounds = _bounds([m.common_word_share for m in raw])

    w = DIFFICULTY_WEIGHTS
    annotated: list[AnnotatedCandidate] = []
    for candidate, metrics in zip(candidates, raw, strict=True):
        letter_rarity = normalize01(
            metrics.letter_rarity_raw, rarity_bounds.low, rarity_bounds.high
        )
        zipf_hardness = 1 - normalize01(
            metrics.average_zipf, zipf_bounds.low, zipf_bounds.high
        )
        score_hardness = 1 - normalize01(
            metrics.max_score, score_bounds.low, score_bounds.high
        )
        count_hardness = 1 - normalize01(
            metrics.word_count, count_bounds.low, count_bounds.high
        )
        obviousness_hardness = 1 - normalize01(
            metrics.common_word_share, common_bounds.low, common_bounds.high
        )
        difficulty_score = (
            letter_rarity * w["letter_rarity"]
            + zipf_hardness * w["zipf"]
            + score_hardness * w["score"]
            + count_hardness * w["count"]
            + obviousness_hardness * w["obviousness"]
        )

        matches = matching_guardrails(
            metrics.word_count, metrics.max_score, metrics.average_zipf
        )
        if not matches:
            continue

        annotated.append(AnnotatedCandidate(
            **candidate.model_dump(),
            metrics=CandidateMetrics(
                word_count=metrics.word_count,
                max_score=metrics.max_score,
                average_zipf=metrics.average_zipf,
                common_word_share=metrics.common_word_share,
                letter_rarity=letter_rarity,
                difficulty_score=difficulty_score,
                guardrail_matches=matches,
            ),
        ))

    logger.debug(
        "annotate: %d candidates, %d within guardrails, %d dropped",
        len(candidates), len(annotated), len(candidates) - len(annotated),
    )
    return annotated
