from .user import Board, User, UserCreate, Tier
from .subject import Subject, Chapter
from .quiz import Quiz, QuizCreate, QuizSet, QuizStatus
from .schedule import ScheduleEntry, ScheduleCompletion, ScheduleStatus, DerivedStatus
from .feedback import (
    Feedback,
    FeedbackCreate,
    FeedbackResponse,
    FeedbackStatus,
    FeedbackType,
    DoubtQuery,
    DoubtCreate,
    DoubtAnswer,
    DoubtStatus,
)

__all__ = [
    'Board', 'User', 'UserCreate', 'Tier',
    'Subject', 'Chapter',
    'Quiz', 'QuizCreate', 'QuizSet', 'QuizStatus',
    'ScheduleEntry', 'ScheduleCompletion', 'ScheduleStatus', 'DerivedStatus',
    'Feedback', 'FeedbackCreate', 'FeedbackResponse', 'FeedbackStatus', 'FeedbackType',
    'DoubtQuery', 'DoubtCreate', 'DoubtAnswer', 'DoubtStatus',
]
