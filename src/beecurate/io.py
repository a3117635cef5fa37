"""Reading dictionaries and frequency tables; publishing schedules."""

import logging
import math
import os
import tempfile
from pathlib import Path
from typing import Any

import srsly
from pydantic import ValidationError

from beecurate.core.models import Dictionary, FrequencyTable, PuzzleSchedule

logger = logging.getLogger(__name__)

REQUIRED_FREQUENCY_COLUMNS = ("word", "zipf")


class DictionaryError(ValueError):
    pass


class FrequencyTableError(ValueError):
    pass


def load_dictionary(path: Path) -> Dictionary:
    if not path.is_file():
        raise DictionaryError(f"{path}: dictionary file not found")
    try:
        raw = srsly.read_json(path)
    except ValueError as err:
        raise DictionaryError(f"{path}: malformed JSON ({err})") from err
    try:
        return Dictionary.model_validate(raw)
    except ValidationError as err:
        first_error = err.errors(include_url=False)[0]
        loc = ".".join(str(item) for item in first_error["loc"])
        raise DictionaryError(
            f"{path}: invalid dictionary at '{loc}': {first_error['msg']}"
        ) from err


def parse_frequency_table(text: str) -> FrequencyTable:
    """Parse tab-separated rows with ``word`` and ``zipf`` header columns.

    Rows with an empty word or a non-numeric zipf are skipped. A header
    lacking either column raises ``FrequencyTableError``.
    """
    lines = [line.strip() for line in text.splitlines()]
    lines = [line for line in lines if line]
    if not lines:
        return FrequencyTable()

    header = lines[0].split("\t")
    missing = [c for c in REQUIRED_FREQUENCY_COLUMNS if c not in header]
    if missing:
        raise FrequencyTableError(
            'Frequency file must include "word" and "zipf" columns '
            f"(missing: {', '.join(missing)})"
        )
    word_idx = header.index("word")
    zipf_idx = header.index("zipf")

    scores: dict[str, float] = {}
    min_zipf = math.inf
    max_zipf = -math.inf
    rows_loaded = 0
    for line in lines[1:]:
        cols = line.split("\t")
        if max(word_idx, zipf_idx) >= len(cols):
            continue
        word = cols[word_idx].strip().lower()
        try:
            zipf = float(cols[zipf_idx])
        except ValueError:
            continue
        if not word or not math.isfinite(zipf):
            continue
        scores[word] = zipf
        min_zipf = min(min_zipf, zipf)
        max_zipf = max(max_zipf, zipf)
        rows_loaded += 1

    if not rows_loaded:
        return FrequencyTable()
    return FrequencyTable(
        zipf_by_word=scores,
        min_zipf=min_zipf,
        max_zipf=max_zipf,
        rows_loaded=rows_loaded,
    )


def load_frequency_table(path: Path | None) -> FrequencyTable:
    """Load the optional frequency table; a missing file gives an empty one."""
    if path is None:
        return FrequencyTable()
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        logger.info("No frequency table at %s; using default scores", path)
        return FrequencyTable()
    return parse_frequency_table(text)


def comparable_payload(payload: dict[str, Any]) -> dict[str, Any]:
    """Payload fields that matter for change detection (no timestamp)."""
    return {
        "version": payload.get("version"),
        "sourceDictionaryVersion": payload.get("sourceDictionaryVersion"),
        "puzzles": payload.get("puzzles"),
    }


def _safe_unlink(path: Path) -> None:
    try:
        path.unlink()
    except FileNotFoundError:
        return


def _atomic_write_text(path: Path, text: str) -> None:
    fd, tmp_name = tempfile.mkstemp(
        prefix=f".{path.name}.",
        suffix=".tmp",
        dir=path.parent,
    )
    tmp = Path(tmp_name)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as handle:
            handle.write(text)
        os.replace(tmp, path)
    except Exception:
        _safe_unlink(tmp)
        raise


def write_schedule(path: Path, schedule: PuzzleSchedule) -> bool:
    """Write ``schedule`` unless ``path`` already holds the same content.

    Returns True when the file was written. ``generatedAt`` is ignored when
    comparing, so an unchanged rebuild leaves the file untouched.
    """
    payload = schedule.to_payload()
    if path.exists():
        try:
            existing = srsly.read_json(path)
        except ValueError:
            logger.warning(
                "Existing schedule %s is not valid JSON; replacing", path
            )
        else:
            if isinstance(existing, dict) and comparable_payload(
                existing
            ) == comparable_payload(payload):
                logger.info("Skipped write of %s (no content changes)", path)
                return False

    path.parent.mkdir(parents=True, exist_ok=True)
    _atomic_write_text(path, srsly.json_dumps(payload, indent=2) + "\n")
    return True


def read_schedule(path: Path) -> PuzzleSchedule:
    return PuzzleSchedule.model_validate(srsly.read_json(path))
