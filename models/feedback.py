from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class FeedbackType(str, Enum):
    SUBJECT_CONTENT = "subject_content"
    QUIZ_ERROR = "quiz_error"
    DOUBT_ANSWER = "doubt_answer"
    GENERAL_EXPERIENCE = "general_experience"
    TECHNICAL_BUG = "technical_bug"
    FEATURE_SUGGESTION = "feature_suggestion"


class FeedbackStatus(str, Enum):
    PENDING = "pending"
    REVIEWED = "reviewed"
    RESOLVED = "resolved"


class FeedbackCreate(BaseModel):
    user_id: int
    type: FeedbackType
    feedback_text: Optional[str] = None


class FeedbackResponse(BaseModel):
    admin_response: str = Field(min_length=1)
    status: FeedbackStatus = FeedbackStatus.REVIEWED


class Feedback(FeedbackCreate):
    id: int
    status: FeedbackStatus = FeedbackStatus.PENDING
    admin_response: Optional[str] = None
    created_at: Optional[datetime] = None
    reviewed_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class DoubtStatus(str, Enum):
    PENDING = "pending"
    ANSWERED = "answered"


class DoubtCreate(BaseModel):
    user_id: int
    question: str = Field(min_length=1)
    subject_id: Optional[int] = None


class DoubtAnswer(BaseModel):
    answer: str = Field(min_length=1)


class DoubtQuery(DoubtCreate):
    id: int
    answer: Optional[str] = None
    status: DoubtStatus = DoubtStatus.PENDING
    created_at: Optional[datetime] = None
    answered_at: Optional[datetime] = None

    class Config:
        from_attributes = True
