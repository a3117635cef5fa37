"""curation: candidate building, difficulty scoring, selection, scheduling."""

from beecurate.curation.annotate import annotate_candidates
from beecurate.curation.assign import assign_difficulties
from beecurate.curation.candidates import build_candidates
from beecurate.curation.pipeline import build_schedule, quota_report
from beecurate.curation.quotas import compute_difficulty_targets
from beecurate.curation.schedule import interleave_for_schedule
from beecurate.curation.select import select_by_quota, select_with_stats

__all__ = [
    "annotate_candidates",
    "assign_difficulties",
    "build_candidates",
    "build_schedule",
    "compute_difficulty_targets",
    "interleave_for_schedule",
    "quota_report",
    "select_by_quota",
    "select_with_stats",
]
