"""Enumerate (signature, center letter) puzzle candidates from a word list."""

import logging
from collections.abc import Sequence

from beecurate.core.models import RawCandidate
from beecurate.core.scoring import compute_max_score, rank_thresholds
from beecurate.curation.quotas import MIN_PANGRAMS, MIN_WORDS

logger = logging.getLogger(__name__)

SIGNATURE_SIZE = 7


def letter_mask(letters: str) -> int:
    mask = 0
    for char in letters:
        mask |= 1 << (ord(char) - ord("a"))
    return mask


def _signatures(words: Sequence[str]) -> list[str]:
    """Distinct 7-letter sets, in order of first appearance."""
    seen: dict[str, None] = {}
    for word in words:
        if len(word) < SIGNATURE_SIZE:
            continue
        letters = set(word)
        if len(letters) != SIGNATURE_SIZE:
            continue
        seen.setdefault("".join(sorted(letters)), None)
    return list(seen)


def _words_by_mask(words: Sequence[str]) -> dict[int, list[str]]:
    grouped: dict[int, list[str]] = {}
    for word in words:
        grouped.setdefault(letter_mask(word), []).append(word)
    return grouped


def build_candidates(words: Sequence[str]) -> list[RawCandidate]:
    """Build one candidate per eligible (signature, center letter) pair.

    Every dictionary word, not only the 7-letter ones, is checked against
    each signature. Output is ordered by quality (descending) and carries a
    single candidate per core key.
    """
    by_mask = _words_by_mask(words)
    signatures = _signatures(words)
    built: list[RawCandidate] = []
    ineligible = 0

    for signature in signatures:
        signature_mask = letter_mask(signature)
        subset_masks = [
            mask for mask in by_mask if mask & ~signature_mask == 0
        ]

        for center_letter in signature:
            center_bit = letter_mask(center_letter)
            valid_words = sorted({
                word
                for mask in subset_masks
                if mask & center_bit
                for word in by_mask[mask]
            })
            pangrams = sorted(set(by_mask.get(signature_mask, [])))

            if len(valid_words) < MIN_WORDS or len(pangrams) < MIN_PANGRAMS:
                ineligible += 1
                continue

            max_score = compute_max_score(valid_words, pangrams)
            built.append(RawCandidate(
                signature=signature,
                center_letter=center_letter,
                outer_letters=tuple(
                    letter for letter in signature if letter != center_letter
                ),
                valid_words=tuple(valid_words),
                pangrams=tuple(pangrams),
                max_score=max_score,
                rank_thresholds=rank_thresholds(max_score),
                quality=(
                    max_score + 3 * len(valid_words) + 10 * len(pangrams)
                ),
            ))

    built.sort(key=lambda candidate: candidate.quality, reverse=True)

    unique: dict[str, RawCandidate] = {}
    for candidate in built:
        unique.setdefault(candidate.core_key, candidate)

    logger.debug(
        "candidates: %d signatures, %d eligible, %d ineligible, %d duplicates",
        len(signatures), len(unique), ineligible, len(built) - len(unique),
    )
    return list(unique.values())
