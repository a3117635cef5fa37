from datetime import date, timedelta
from enum import Enum

from pydantic import BaseModel, Field

from beecurate.core.models import Dictionary, Puzzle, PuzzleSchedule
from beecurate.core.scoring import compute_max_score, rank_thresholds

CODE_DICTIONARY_VERSION = "DICTIONARY_VERSION"
CODE_WORD_OUTSIDE_LETTERS = "WORD_OUTSIDE_LETTERS"
CODE_WORD_MISSING_CENTER = "WORD_MISSING_CENTER"
CODE_WORD_NOT_IN_DICTIONARY = "WORD_NOT_IN_DICTIONARY"
CODE_BAD_LETTERS = "BAD_LETTERS"
CODE_PANGRAM_MISMATCH = "PANGRAM_MISMATCH"
CODE_MAX_SCORE_MISMATCH = "MAX_SCORE_MISMATCH"
CODE_THRESHOLD_MISMATCH = "THRESHOLD_MISMATCH"
CODE_BAD_DATE = "BAD_DATE"
CODE_DUPLICATE_DATE = "DUPLICATE_DATE"
CODE_DATE_GAP = "DATE_GAP"


class Severity(str, Enum):
    ERROR = "error"
    WARNING = "warning"


class Issue(BaseModel):
    code: str = Field(description="Issue code, e.g. WORD_OUTSIDE_LETTERS")
    severity: Severity = Field(description="Error or warning")
    message: str = Field(description="Human-readable description")
    location: str = Field(description="Path to issue, e.g. puzzles[3]")
    puzzle_id: str | None = Field(
        default=None, description="Puzzle ID for schedule-scale aggregation"
    )


def _error(code: str, message: str, location: str, puzzle_id: str) -> Issue:
    return Issue(
        code=code,
        severity=Severity.ERROR,
        message=message,
        location=location,
        puzzle_id=puzzle_id,
    )


def _validate_letters(puzzle: Puzzle, location: str) -> list[Issue]:
    letters = [puzzle.center_letter, *puzzle.outer_letters]
    if len(letters) == 7 and len(set(letters)) == 7:
        return []
    return [_error(
        CODE_BAD_LETTERS,
        f"expected 7 distinct letters, got {''.join(letters)!r}",
        location,
        puzzle.id,
    )]


def _validate_words(
    puzzle: Puzzle, location: str, known_words: set[str]
) -> list[Issue]:
    issues: list[Issue] = []
    letter_set = {puzzle.center_letter, *puzzle.outer_letters}
    for idx, word in enumerate(puzzle.valid_words):
        word_location = f"{location}.validWords[{idx}]"
        if not set(word) <= letter_set:
            issues.append(_error(
                CODE_WORD_OUTSIDE_LETTERS,
                f"{word!r} uses letters outside the puzzle",
                word_location,
                puzzle.id,
            ))
        if puzzle.center_letter not in word:
            issues.append(_error(
                CODE_WORD_MISSING_CENTER,
                f"{word!r} lacks center letter {puzzle.center_letter!r}",
                word_location,
                puzzle.id,
            ))
        if word not in known_words:
            issues.append(_error(
                CODE_WORD_NOT_IN_DICTIONARY,
                f"{word!r} is not in the source dictionary",
                word_location,
                puzzle.id,
            ))

    expected_pangrams = sorted(
        word for word in puzzle.valid_words if set(word) == letter_set
    )
    if sorted(puzzle.pangrams) != expected_pangrams:
        issues.append(_error(
            CODE_PANGRAM_MISMATCH,
            f"pangrams {puzzle.pangrams} != {expected_pangrams}",
            f"{location}.pangrams",
            puzzle.id,
        ))
    return issues


def _validate_scoring(puzzle: Puzzle, location: str) -> list[Issue]:
    issues: list[Issue] = []
    expected = compute_max_score(puzzle.valid_words, puzzle.pangrams)
    if puzzle.max_score != expected:
        issues.append(_error(
            CODE_MAX_SCORE_MISMATCH,
            f"maxScore {puzzle.max_score} != recomputed {expected}",
            f"{location}.maxScore",
            puzzle.id,
        ))
    if puzzle.rank_thresholds != rank_thresholds(puzzle.max_score):
        issues.append(_error(
            CODE_THRESHOLD_MISMATCH,
            "rankThresholds do not match maxScore",
            f"{location}.rankThresholds",
            puzzle.id,
        ))
    return issues


def _validate_dates(schedule: PuzzleSchedule) -> list[Issue]:
    issues: list[Issue] = []
    seen: set[str] = set()
    previous: date | None = None
    for idx, puzzle in enumerate(schedule.puzzles):
        location = f"puzzles[{idx}].date"
        try:
            current = date.fromisoformat(puzzle.date)
        except ValueError:
            issues.append(_error(
                CODE_BAD_DATE,
                f"{puzzle.date!r} is not an ISO date",
                location,
                puzzle.id,
            ))
            previous = None
            continue
        if puzzle.date in seen:
            issues.append(_error(
                CODE_DUPLICATE_DATE,
                f"{puzzle.date} is scheduled more than once",
                location,
                puzzle.id,
            ))
        seen.add(puzzle.date)
        if previous is not None and current != previous + timedelta(days=1):
            issues.append(Issue(
                code=CODE_DATE_GAP,
                severity=Severity.WARNING,
                message=(
                    f"{puzzle.date} does not follow {previous.isoformat()}"
                ),
                location=location,
                puzzle_id=puzzle.id,
            ))
        previous = current
    return issues


def validate_schedule(
    schedule: PuzzleSchedule, dictionary: Dictionary
) -> list[Issue]:
    """Check every puzzle against the dictionary it claims to come from."""
    issues: list[Issue] = []
    known_words = set(dictionary.words)

    if schedule.source_dictionary_version != dictionary.version:
        issues.append(Issue(
            code=CODE_DICTIONARY_VERSION,
            severity=Severity.ERROR,
            message=(
                f"schedule built from {schedule.source_dictionary_version!r}, "
                f"dictionary is {dictionary.version!r}"
            ),
            location="sourceDictionaryVersion",
        ))

    for idx, puzzle in enumerate(schedule.puzzles):
        location = f"puzzles[{idx}]"
        if puzzle.dictionary_version != dictionary.version:
            issues.append(_error(
                CODE_DICTIONARY_VERSION,
                f"puzzle references dictionary {puzzle.dictionary_version!r}",
                f"{location}.dictionaryVersion",
                puzzle.id,
            ))
        issues.extend(_validate_letters(puzzle, location))
        issues.extend(_validate_words(puzzle, location, known_words))
        issues.extend(_validate_scoring(puzzle, location))

    issues.extend(_validate_dates(schedule))
    return issues
