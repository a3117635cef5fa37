from enum import Enum
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, StringConstraints
from pydantic.alias_generators import to_camel


class Difficulty(str, Enum):
    SIMPLE = "simple"
    MEDIUM = "medium"
    HARD = "hard"


# Declaration order doubles as the tie-break order for every stage.
DIFFICULTY_ORDER: tuple[Difficulty, ...] = tuple(Difficulty)

LowercaseWord = Annotated[str, StringConstraints(pattern=r"^[a-z]+$")]


class Dictionary(BaseModel):
    version: str = Field(description="Dictionary build identifier")
    words: list[LowercaseWord] = Field(
        description="Unique lowercase alphabetic words, length >= 4"
    )


class FrequencyTable(BaseModel):
    """Lexical frequency (zipf) scores keyed by lowercase word."""

    zipf_by_word: dict[str, float] = Field(default_factory=dict)
    min_zipf: float = 0.0
    max_zipf: float = 0.0
    rows_loaded: int = 0

    @classmethod
    def from_scores(cls, scores: dict[str, float]) -> "FrequencyTable":
        if not scores:
            return cls()
        return cls(
            zipf_by_word=dict(scores),
            min_zipf=min(scores.values()),
            max_zipf=max(scores.values()),
            rows_loaded=len(scores),
        )


class RawCandidate(BaseModel):
    """One (signature, center letter) pair with its word list."""

    model_config = ConfigDict(frozen=True)

    signature: str = Field(description="Seven distinct letters, sorted")
    center_letter: str = Field(description="Mandatory letter")
    outer_letters: tuple[str, ...] = Field(description="Other six, sorted")
    valid_words: tuple[str, ...] = Field(description="Sorted valid words")
    pangrams: tuple[str, ...] = Field(description="Words using all 7 letters")
    max_score: int = Field(description="Sum of word scores")
    rank_thresholds: dict[str, int] = Field(
        description="Score needed for each named rank, in rank order"
    )
    quality: int = Field(
        description="Collision tie-break: max_score + 3*words + 10*pangrams"
    )

    @property
    def core_key(self) -> str:
        return f"{self.signature}:{self.center_letter}"


class CandidateMetrics(BaseModel):
    model_config = ConfigDict(frozen=True)

    word_count: int
    max_score: int
    average_zipf: float
    common_word_share: float
    letter_rarity: float = Field(ge=0.0, le=1.0)
    difficulty_score: float
    guardrail_matches: tuple[Difficulty, ...] = Field(
        description="Tiers whose guardrails hold, in declaration order"
    )


class AnnotatedCandidate(RawCandidate):
    metrics: CandidateMetrics


class AssignedCandidate(AnnotatedCandidate):
    difficulty: Difficulty


class Puzzle(BaseModel):
    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    id: str = Field(description="Same as date")
    date: str = Field(description="ISO calendar date the puzzle is played")
    center_letter: str
    outer_letters: list[str]
    dictionary_version: str
    valid_words: list[str]
    pangrams: list[str]
    difficulty: Difficulty
    max_score: int
    rank_thresholds: dict[str, int]


class PuzzleSchedule(BaseModel):
    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    version: str = "v1"
    generated_at: str = Field(description="ISO-8601 UTC build timestamp")
    source_dictionary_version: str
    puzzles: list[Puzzle] = Field(default_factory=list)

    def to_payload(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)
