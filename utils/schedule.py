from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, timezone
from typing import Iterable, List, Optional, Sequence, Tuple
from zoneinfo import ZoneInfo

from models.quiz import QuizStatus
from models.schedule import DerivedStatus, ScheduleEntry, ScheduleStatus

REVIEW_INTERVAL_DAYS: Tuple[int, ...] = (0, 1, 5, 15, 30, 60, 120, 180)


class ScheduleError(ValueError):
    """Raised when a schedule entry is asked to make an illegal transition."""


@dataclass(frozen=True)
class StatusView:
    status: DerivedStatus
    remaining: Optional[timedelta] = None

    @property
    def label(self) -> str:
        if self.status == DerivedStatus.COMPLETED:
            return "Completed"
        if self.status == DerivedStatus.READY:
            return "Ready to take"
        return f"Available in {format_available_in(self.remaining)}"


def as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def classify(entry: ScheduleEntry, now: datetime) -> StatusView:
    """Classify an entry as completed, ready-to-take, or upcoming at `now`."""
    if entry.status == ScheduleStatus.COMPLETED:
        return StatusView(DerivedStatus.COMPLETED)
    now = as_utc(now)
    scheduled = as_utc(entry.scheduled_date)
    if scheduled <= now:
        return StatusView(DerivedStatus.READY)
    return StatusView(DerivedStatus.UPCOMING, scheduled - now)


def _plural(count: int, unit: str) -> str:
    return f"{count} {unit}{'' if count == 1 else 's'}"


def format_time_remaining(delta: Optional[timedelta]) -> str:
    """Coarse remaining-time label: days past 24h, else hours, else minutes."""
    if delta is None or delta.total_seconds() <= 0:
        return "Now"
    total_minutes = int(delta.total_seconds() // 60)
    hours, minutes = divmod(total_minutes, 60)
    if hours > 24:
        return _plural(hours // 24, "day")
    if hours > 0:
        return _plural(hours, "hour")
    return _plural(minutes, "minute")


def format_available_in(delta: Optional[timedelta]) -> str:
    if delta is None or delta.total_seconds() <= 0:
        return "0h 0m"
    total_minutes = int(delta.total_seconds() // 60)
    hours, minutes = divmod(total_minutes, 60)
    return f"{hours}h {minutes}m"


def build_review_dates(start: datetime, intervals: Sequence[int] = REVIEW_INTERVAL_DAYS) -> List[datetime]:
    start = as_utc(start)
    return [start + timedelta(days=days) for days in intervals]


def retention_stage(days_passed: int, intervals: Sequence[int] = REVIEW_INTERVAL_DAYS) -> int:
    for index, days in enumerate(intervals):
        if days_passed <= days:
            return index
    return len(intervals) - 1


def complete_entry(entry: ScheduleEntry, score: int, completed_at: datetime) -> ScheduleEntry:
    """Apply the one-way pending -> completed transition.

    Returns a new entry; scheduled_date and ids are carried over untouched.
    Retakes are not supported by resetting an entry, so completing twice
    raises ScheduleError.
    """
    if entry.status == ScheduleStatus.COMPLETED:
        raise ScheduleError(f"Schedule entry {entry.id} is already completed")
    if not 0 <= score <= 100:
        raise ScheduleError("Score must be between 0 and 100")
    return entry.model_copy(
        update={
            "status": ScheduleStatus.COMPLETED,
            "completed_date": as_utc(completed_at),
            "score": score,
        }
    )


def derive_quiz_status(entries: Iterable[ScheduleEntry]) -> QuizStatus:
    entries = list(entries)
    if entries and all(entry.status == ScheduleStatus.COMPLETED for entry in entries):
        return QuizStatus.COMPLETED
    return QuizStatus.ACTIVE


def day_bounds(now: datetime, tz_name: str = "UTC") -> Tuple[datetime, datetime]:
    """Return the UTC [start, end) instants of the local day containing `now`."""
    tz = ZoneInfo(tz_name)
    local_day: date = as_utc(now).astimezone(tz).date()
    start = datetime.combine(local_day, time.min, tzinfo=tz)
    end = start + timedelta(days=1)
    return start.astimezone(timezone.utc), end.astimezone(timezone.utc)


def is_due_today(entry: ScheduleEntry, now: datetime, tz_name: str = "UTC") -> bool:
    if entry.status != ScheduleStatus.PENDING:
        return False
    start, end = day_bounds(now, tz_name)
    return start <= as_utc(entry.scheduled_date) < end


def is_upcoming(entry: ScheduleEntry, now: datetime) -> bool:
    return entry.status == ScheduleStatus.PENDING and as_utc(entry.scheduled_date) > as_utc(now)


def utc_now() -> datetime:
    """Current instant; routes depend on this so tests can pin the clock."""
    return datetime.now(timezone.utc)
