import pytest

from beecurate.core.models import Difficulty
from beecurate.curation.assign import (
    assign_difficulties,
    choose_nearest_difficulty,
)
from helpers import make_annotated

S, M, H = Difficulty.SIMPLE, Difficulty.MEDIUM, Difficulty.HARD


class TestChooseNearestDifficulty:
    def test_picks_closest_reference_point(self) -> None:
        assert choose_nearest_difficulty(0.9, [S, M, H]) == H
        assert choose_nearest_difficulty(0.5, [S, M, H]) == M
        assert choose_nearest_difficulty(0.0, [M, H]) == M

    def test_requires_an_option(self) -> None:
        with pytest.raises(ValueError, match="at least one"):
            choose_nearest_difficulty(0.5, [])


class TestAssignDifficulties:
    def test_quantiles_respect_guardrails(self) -> None:
        candidates = [
            make_annotated("a", 0.1, [S]),
            make_annotated("b", 0.2, [S, M]),
            make_annotated("c", 0.6, [M]),
            make_annotated("d", 0.9, [H]),
            make_annotated("e", 0.95, [H]),
        ]

        assigned = assign_difficulties(candidates)

        assert [c.difficulty for c in assigned] == [S, M, M, H, H]

    def test_sorted_by_score_then_core_key(self) -> None:
        candidates = [
            make_annotated("z", 0.4),
            make_annotated("b", 0.1),
            make_annotated("y", 0.4),
            make_annotated("a", 0.9),
        ]
        assigned = assign_difficulties(candidates)
        assert [c.signature for c in assigned] == ["b", "y", "z", "a"]

    def test_input_order_does_not_matter(self) -> None:
        candidates = [
            make_annotated(f"k{i:02d}", (i * 7 % 10) / 10) for i in range(10)
        ]
        forward = assign_difficulties(candidates)
        backward = assign_difficulties(list(reversed(candidates)))
        assert [(c.core_key, c.difficulty) for c in forward] == [
            (c.core_key, c.difficulty) for c in backward
        ]

    def test_cutoffs_use_floor_of_count(self) -> None:
        candidates = [make_annotated(f"k{i:02d}", i / 10) for i in range(10)]
        labels = [c.difficulty for c in assign_difficulties(candidates)]
        assert labels == [S] * 3 + [M] * 5 + [H] * 2

    def test_out_of_guardrail_label_uses_nearest_allowed(self) -> None:
        candidates = [
            make_annotated("a", 0.05, [H]),
            make_annotated("b", 0.3, [S, M]),
        ]
        assigned = {
            c.signature: c.difficulty for c in assign_difficulties(candidates)
        }
        assert assigned == {"a": H, "b": S}

    def test_empty(self) -> None:
        assert assign_difficulties([]) == []
