from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class QuizStatus(str, Enum):
    ACTIVE = "active"
    COMPLETED = "completed"


class QuizBase(BaseModel):
    user_id: int
    subject_id: int
    chapter_id: int
    title: str = Field(min_length=3)


class QuizCreate(QuizBase):
    # One list of questions per quiz set, in set order.
    question_sets: List[List[Dict[str, Any]]] = Field(min_length=1)


class Quiz(QuizBase):
    id: int
    created_at: Optional[datetime] = None
    status: QuizStatus = QuizStatus.ACTIVE
    subject: Optional[Dict[str, Any]] = None
    chapter: Optional[Dict[str, Any]] = None

    class Config:
        from_attributes = True


class QuizSet(BaseModel):
    id: int
    quiz_id: int
    set_number: int
    questions: List[Dict[str, Any]]

    class Config:
        from_attributes = True
