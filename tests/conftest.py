from __future__ import annotations

import pytest

from beecurate.core.models import Dictionary
from helpers import permutation_words


def pytest_addoption(parser: pytest.Parser) -> None:
    parser.addoption(
        "--verification-level",
        action="store",
        default="standard",
        choices=("fast", "standard", "full"),
        help=(
            "Select test verification level: "
            "fast (skip slow+full), "
            "standard (skip full), "
            "full (run all)."
        ),
    )


def pytest_collection_modifyitems(
    config: pytest.Config, items: list[pytest.Item]
) -> None:
    level = config.getoption("--verification-level")

    if level == "full":
        return

    skip_full = pytest.mark.skip(reason="requires --verification-level=full")
    skip_slow = pytest.mark.skip(reason="skipped in fast verification level")

    for item in items:
        if "full" in item.keywords:
            item.add_marker(skip_full)
            continue
        if level == "fast" and "slow" in item.keywords:
            item.add_marker(skip_slow)


@pytest.fixture
def small_dictionary() -> Dictionary:
    """Two seven-letter families whose candidates all land in the hard tier.

    Every five-letter word starts with the family's first letter, so that
    letter as center gets 30 words plus the pangram (max score 164).
    """
    words = (
        permutation_words("abcdefg", 5, 30)
        + ["abcdefg"]
        + permutation_words("hijklmn", 5, 30)
        + ["hijklmn"]
    )
    return Dictionary(version="test-v1", words=words)
