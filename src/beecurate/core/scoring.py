import math
from collections.abc import Iterable

MIN_WORD_LENGTH = 4
PANGRAM_BONUS = 7

# Fraction of max score needed for each rank, lowest first.
RANK_PERCENTAGES: dict[str, float] = {
    "beginner": 0.0,
    "goodStart": 0.02,
    "movingUp": 0.05,
    "good": 0.08,
    "solid": 0.15,
    "nice": 0.25,
    "great": 0.4,
    "amazing": 0.5,
    "genius": 0.7,
    "queenBee": 1.0,
}


def compute_word_score(word: str, is_pangram: bool) -> int:
    """Score one word: 4 letters = 1, longer = length, pangrams +7."""
    if len(word) < MIN_WORD_LENGTH:
        return 0
    base = 1 if len(word) == MIN_WORD_LENGTH else len(word)
    return base + PANGRAM_BONUS if is_pangram else base


def compute_max_score(
    valid_words: Iterable[str], pangrams: Iterable[str]
) -> int:
    pangram_set = set(pangrams)
    return sum(
        compute_word_score(word, word in pangram_set) for word in valid_words
    )


def rank_thresholds(max_score: int) -> dict[str, int]:
    return {
        rank: math.floor(max_score * pct)
        for rank, pct in RANK_PERCENTAGES.items()
    }
