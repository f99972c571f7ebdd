# Routes package __init__.py - re-exports routers for main.py convenience
from .quizzes import router as quizzes_router
from .schedules import router as schedules_router
from .subjects import router as subjects_router
from .dashboard import router as dashboard_router
from .feedback import router as feedback_router

__all__ = ['quizzes_router', 'schedules_router', 'subjects_router', 'dashboard_router', 'feedback_router']
