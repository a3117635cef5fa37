from datetime import UTC, date, datetime

import pytest

from beecurate.core.models import Difficulty, Dictionary, FrequencyTable
from beecurate.core.validate import Severity, validate_schedule
from beecurate.curation.pipeline import (
    build_schedule,
    quota_report,
    utc_timestamp,
)
from helpers import permutation_words

START = date(2026, 3, 1)
FIXED_NOW = datetime(2026, 2, 27, 8, 30, 0, tzinfo=UTC)


def _errors(issues):
    return [issue for issue in issues if issue.severity == Severity.ERROR]


# (letters, five-letter words, zipf). Each family's surviving candidates
# fit exactly one guardrail tier: 2 simple, 2 medium and 3 hard apiece.
_TIER_FAMILIES = (
    ("abcdefg", 40, 4.6),
    ("hijklmn", 40, 4.6),
    ("opqrstu", 30, 4.1),
    ("vwxyzab", 30, 4.1),
    ("cdehijo", 20, 3.0),
    ("fgklmpq", 20, 3.0),
)


def _tiered_dictionary() -> tuple[Dictionary, FrequencyTable]:
    words: list[str] = []
    scores: dict[str, float] = {}
    for letters, count, zipf in _TIER_FAMILIES:
        family = permutation_words(letters, 5, count) + [letters]
        words += family
        scores.update({word: zipf for word in family})
    dictionary = Dictionary(version="tiers-v1", words=sorted(words))
    return dictionary, FrequencyTable.from_scores(scores)


class TestUtcTimestamp:
    def test_millisecond_precision_with_z_suffix(self) -> None:
        assert utc_timestamp(FIXED_NOW) == "2026-02-27T08:30:00.000Z"

    def test_defaults_to_now(self) -> None:
        stamp = utc_timestamp()
        assert stamp.endswith("Z")
        assert len(stamp) == len("2026-02-27T08:30:00.000Z")


class TestBuildSchedule:
    def test_publishes_min_of_request_and_supply(
        self, small_dictionary
    ) -> None:
        schedule, stats = build_schedule(small_dictionary, START, 4)
        assert stats.eligible >= 4
        assert stats.published == len(schedule.puzzles) == 4

        schedule, stats = build_schedule(small_dictionary, START, 500)
        assert len(schedule.puzzles) == stats.eligible

    def test_schedule_metadata(self, small_dictionary) -> None:
        schedule, _ = build_schedule(
            small_dictionary, START, 3, generated_at=FIXED_NOW
        )
        assert schedule.version == "v1"
        assert schedule.generated_at == "2026-02-27T08:30:00.000Z"
        assert schedule.source_dictionary_version == "test-v1"
        for puzzle in schedule.puzzles:
            assert puzzle.dictionary_version == "test-v1"
            assert puzzle.id == puzzle.date

    def test_dates_are_consecutive_from_start(self, small_dictionary) -> None:
        schedule, _ = build_schedule(small_dictionary, START, 5)
        assert [p.date for p in schedule.puzzles] == [
            "2026-03-01",
            "2026-03-02",
            "2026-03-03",
            "2026-03-04",
            "2026-03-05",
        ]

    def test_deterministic_for_same_inputs(self, small_dictionary) -> None:
        first, _ = build_schedule(
            small_dictionary, START, 6, generated_at=FIXED_NOW
        )
        second, _ = build_schedule(
            small_dictionary, START, 6, generated_at=FIXED_NOW
        )
        assert first.to_payload() == second.to_payload()

    def test_no_duplicate_letter_sets(self, small_dictionary) -> None:
        schedule, _ = build_schedule(small_dictionary, START, 500)
        keys = [
            (p.center_letter, "".join(sorted(p.outer_letters)))
            for p in schedule.puzzles
        ]
        assert len(keys) == len(set(keys))

    def test_output_passes_validation(self, small_dictionary) -> None:
        schedule, _ = build_schedule(small_dictionary, START, 500)
        assert _errors(validate_schedule(schedule, small_dictionary)) == []

    def test_without_frequency_everything_is_hard(
        self, small_dictionary
    ) -> None:
        schedule, stats = build_schedule(small_dictionary, START, 4)
        assert {p.difficulty for p in schedule.puzzles} == {Difficulty.HARD}
        assert stats.difficulty_counts == {
            Difficulty.SIMPLE: 0,
            Difficulty.MEDIUM: 0,
            Difficulty.HARD: 4,
        }
        assert stats.frequency_rows == 0
        assert stats.selection.fallback == 3

    def test_frequency_rows_reported(self, small_dictionary) -> None:
        table = FrequencyTable.from_scores(
            {word: 4.0 for word in small_dictionary.words}
        )
        _, stats = build_schedule(small_dictionary, START, 4, table)
        assert stats.frequency_rows == len(small_dictionary.words)

    def test_empty_dictionary(self) -> None:
        schedule, stats = build_schedule(
            Dictionary(version="empty", words=[]), START, 10
        )
        assert schedule.puzzles == []
        assert stats.base_candidates == 0
        assert stats.published == 0

    def test_mixed_tiers_follow_cadence_and_quota(self) -> None:
        dictionary, table = _tiered_dictionary()

        schedule, stats = build_schedule(dictionary, START, 8, table)

        assert stats.eligible == 14
        assert stats.selection.fallback == 0
        assert [p.difficulty for p in schedule.puzzles] == [
            Difficulty.MEDIUM,
            Difficulty.SIMPLE,
            Difficulty.MEDIUM,
            Difficulty.HARD,
        ] * 2
        assert all(
            status == "OK"
            for *_, status in quota_report(schedule.puzzles, 8)
        )
        assert _errors(validate_schedule(schedule, dictionary)) == []

    @pytest.mark.slow
    def test_larger_dictionary_with_frequency(self) -> None:
        words: list[str] = []
        for letters in ("abcdefg", "hijklmn", "opqrstu", "vwxyzab"):
            words += permutation_words(letters, 5, 80)
            words += permutation_words(letters, 4, 40)
            words.append(letters)
        words = sorted(set(words))
        table = FrequencyTable.from_scores(
            {word: 3.0 + (idx % 20) / 10 for idx, word in enumerate(words)}
        )
        dictionary = Dictionary(version="big-v1", words=words)

        schedule, stats = build_schedule(dictionary, START, 30, table)

        assert len(schedule.puzzles) == min(30, stats.eligible)
        assert _errors(validate_schedule(schedule, dictionary)) == []
        again, _ = build_schedule(dictionary, START, 30, table)
        assert [p.model_dump() for p in again.puzzles] == [
            p.model_dump() for p in schedule.puzzles
        ]


class TestQuotaReport:
    def test_rows_per_difficulty(self, small_dictionary) -> None:
        schedule, _ = build_schedule(small_dictionary, START, 4)
        assert quota_report(schedule.puzzles, 4) == [
            ("simple", 1, 0, "UNDER"),
            ("medium", 2, 0, "UNDER"),
            ("hard", 1, 4, "OK"),
        ]
