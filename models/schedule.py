from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, field_validator


class ScheduleStatus(str, Enum):
    PENDING = "pending"
    COMPLETED = "completed"


class DerivedStatus(str, Enum):
    """Display-only status computed from a schedule entry and the current time."""

    COMPLETED = "completed"
    READY = "ready-to-take"
    UPCOMING = "upcoming"


class ScheduleEntry(BaseModel):
    id: int
    quiz_id: int
    quiz_set_id: int
    user_id: Optional[int] = None
    scheduled_date: datetime
    completed_date: Optional[datetime] = None
    score: Optional[int] = None
    status: ScheduleStatus = ScheduleStatus.PENDING

    class Config:
        from_attributes = True

    @field_validator("scheduled_date", "completed_date")
    @classmethod
    def assume_utc(cls, v):
        # Stored timestamps without an offset are UTC.
        if v is not None and v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v

    @property
    def is_completed(self) -> bool:
        return self.status == ScheduleStatus.COMPLETED


class ScheduleCompletion(BaseModel):
    score: int = Field(ge=0, le=100)
