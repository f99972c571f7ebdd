from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from models.quiz import QuizStatus
from models.schedule import DerivedStatus, ScheduleEntry, ScheduleStatus
from utils.schedule import as_utc, classify, derive_quiz_status


@dataclass(frozen=True)
class PerformancePoint:
    date: datetime
    score: int
    quiz_set: int
    index: int

    @property
    def label(self) -> str:
        return f"Q{self.index}"

    @property
    def display_name(self) -> str:
        return f"Quiz {self.index} - Set {self.quiz_set}"


@dataclass(frozen=True)
class Summary:
    total: int
    completed: int
    ready: int
    upcoming: int
    performance_series: List[PerformancePoint] = field(default_factory=list)

    @property
    def completion_percent(self) -> int:
        return completion_percent(self.completed, self.total)


def completion_percent(completed: int, total: int) -> int:
    if total <= 0:
        return 0
    # half up, not banker's rounding
    return int(completed * 100 / total + 0.5)


def performance_series(
    entries: Iterable[ScheduleEntry],
    set_numbers: Optional[Mapping[int, int]] = None,
) -> List[PerformancePoint]:
    """Completed scores in date order, numbered Q1..Qn.

    Entries missing either completed_date or score are skipped. The sort is
    stable so entries finished at the same instant keep their input order.
    """
    set_numbers = set_numbers or {}
    scored = [
        entry for entry in entries
        if entry.completed_date is not None and entry.score is not None
    ]
    scored.sort(key=lambda entry: as_utc(entry.completed_date))
    return [
        PerformancePoint(
            date=as_utc(entry.completed_date),
            score=entry.score,
            quiz_set=set_numbers.get(entry.quiz_set_id, 0),
            index=position,
        )
        for position, entry in enumerate(scored, start=1)
    ]


def aggregate(
    entries: Sequence[ScheduleEntry],
    now: datetime,
    set_numbers: Optional[Mapping[int, int]] = None,
) -> Summary:
    entries = list(entries)
    completed = 0
    ready = 0
    upcoming = 0
    for entry in entries:
        view = classify(entry, now)
        if view.status == DerivedStatus.COMPLETED:
            completed += 1
        elif view.status == DerivedStatus.READY:
            ready += 1
        else:
            upcoming += 1
    return Summary(
        total=len(entries),
        completed=completed,
        ready=ready,
        upcoming=upcoming,
        performance_series=performance_series(entries, set_numbers),
    )


def group_by_quiz(entries: Iterable[ScheduleEntry]) -> Dict[int, List[ScheduleEntry]]:
    grouped: Dict[int, List[ScheduleEntry]] = {}
    for entry in entries:
        grouped.setdefault(entry.quiz_id, []).append(entry)
    return grouped


def summarize_quizzes(quiz_ids: Iterable[int], entries: Iterable[ScheduleEntry]) -> Dict[str, int]:
    grouped = group_by_quiz(entries)
    total = 0
    done = 0
    for quiz_id in quiz_ids:
        total += 1
        if derive_quiz_status(grouped.get(quiz_id, [])) == QuizStatus.COMPLETED:
            done += 1
    return {
        "total_quizzes": total,
        "active_quizzes": total - done,
        "completed_quizzes": done,
    }


def quiz_progress(entries: Sequence[ScheduleEntry]) -> Tuple[int, int, Optional[datetime]]:
    """Completed sets, total sets, and the next pending review for one quiz."""
    completed = sum(1 for entry in entries if entry.status == ScheduleStatus.COMPLETED)
    pending = [as_utc(entry.scheduled_date) for entry in entries if entry.status == ScheduleStatus.PENDING]
    return completed, len(entries), min(pending) if pending else None
