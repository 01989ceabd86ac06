from __future__ import annotations

"""Aggregations over a list of study records.

Everything here is a pure function of the record list and is recomputed on
each call; the lists involved are one user's local history.
"""

from dataclasses import dataclass
from typing import Iterable, Sequence

from .models import STUDY_TYPES, StudyRecord


@dataclass(frozen=True, slots=True)
class StudyStats:
    sessions: int
    total_time: int


@dataclass(frozen=True, slots=True)
class SubjectShare:
    subject: str
    duration: int
    percentage: int


def total_time(records: Iterable[StudyRecord]) -> int:
    return sum(r.duration for r in records)


def session_count(records: Sequence[StudyRecord]) -> int:
    return len(records)


def study_stats(records: Sequence[StudyRecord]) -> StudyStats:
    return StudyStats(sessions=session_count(records), total_time=total_time(records))


def stats_by_type(records: Sequence[StudyRecord]) -> dict[str, StudyStats]:
    return {
        t: study_stats([r for r in records if r.type == t])
        for t in STUDY_TYPES
    }


def _percent(part: int, whole: int) -> int:
    if whole <= 0:
        return 0
    # half-up, 12.5 -> 13
    return (part * 200 + whole) // (2 * whole)


def subject_breakdown(records: Sequence[StudyRecord]) -> list[SubjectShare]:
    """Per-subject totals in order of first appearance, with share of the total."""
    per_subject: dict[str, int] = {}
    for r in records:
        per_subject[r.subject] = per_subject.get(r.subject, 0) + r.duration
    grand_total = sum(per_subject.values())
    return [
        SubjectShare(subject=s, duration=d, percentage=_percent(d, grand_total))
        for s, d in per_subject.items()
    ]


def daily_totals(records: Iterable[StudyRecord]) -> list[tuple[str, int]]:
    """Seconds per calendar day (ISO date of start), oldest first."""
    per_day: dict[str, int] = {}
    for r in records:
        day = r.start_time.date().isoformat()
        per_day[day] = per_day.get(day, 0) + r.duration
    return sorted(per_day.items())


__all__ = [
    "StudyStats",
    "SubjectShare",
    "total_time",
    "session_count",
    "study_stats",
    "stats_by_type",
    "subject_breakdown",
    "daily_totals",
]
