import itertools
from collections.abc import Sequence

from beecurate.core.models import (
    DIFFICULTY_ORDER,
    AnnotatedCandidate,
    AssignedCandidate,
    CandidateMetrics,
    Difficulty,
)
from beecurate.core.scoring import rank_thresholds


def make_annotated(
    key: str,
    score: float = 0.5,
    guardrail_matches: Sequence[Difficulty] = DIFFICULTY_ORDER,
) -> AnnotatedCandidate:
    """Minimal annotated candidate whose core key is ``f"{key}:a"``."""
    return AnnotatedCandidate(
        signature=key,
        center_letter="a",
        outer_letters=("b", "c", "d", "e", "f", "g"),
        valid_words=("abcdefg",),
        pangrams=("abcdefg",),
        max_score=14,
        rank_thresholds=rank_thresholds(14),
        quality=27,
        metrics=CandidateMetrics(
            word_count=1,
            max_score=14,
            average_zipf=0.0,
            common_word_share=0.0,
            letter_rarity=0.5,
            difficulty_score=score,
            guardrail_matches=tuple(guardrail_matches),
        ),
    )


def make_assigned(
    key: str,
    difficulty: Difficulty,
    guardrail_matches: Sequence[Difficulty] = DIFFICULTY_ORDER,
    score: float = 0.5,
) -> AssignedCandidate:
    annotated = make_annotated(key, score, guardrail_matches)
    return AssignedCandidate(**annotated.model_dump(), difficulty=difficulty)


def permutation_words(letters: str, length: int, count: int) -> list[str]:
    """First ``count`` ``length``-letter permutations of ``letters``."""
    return [
        "".join(p)
        for p in itertools.islice(
            itertools.permutations(letters, length), count
        )
    ]
