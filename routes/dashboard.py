from datetime import datetime
from pathlib import Path
from typing import Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates

from config import get_config_value
from db.database import get_db
from models.quiz import QuizStatus
from routes.schedules import build_today_list, build_upcoming_list
from utils.filters import FilterCriteria, filter_items
from utils.quizzes import fetch_quizzes, fetch_schedule_entries, fetch_set_numbers, fetch_user
from utils.schedule import as_utc, day_bounds, utc_now
from utils.summary import aggregate, completion_percent, quiz_progress, summarize_quizzes

router = APIRouter()
base_dir = Path(__file__).resolve().parent.parent
templates = Jinja2Templates(directory=str(base_dir / "templates"))

HISTORY_SEARCH_FIELDS = ("title", "subject.name", "chapter.name")


def _require_user(conn, user_id: int) -> Dict:
    user = fetch_user(conn, user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return user


def build_summary(conn, user_id: int, now: datetime) -> Dict:
    entries = fetch_schedule_entries(conn, user_id)
    summary = aggregate(entries, now, fetch_set_numbers(conn, user_id))
    quizzes = fetch_quizzes(conn, user_id)
    start, end = day_bounds(now, get_config_value("schedule", "timezone", "UTC"))
    scheduled_today = [entry for entry in entries if start <= as_utc(entry.scheduled_date) < end]
    today = aggregate(scheduled_today, now)
    return {
        "total": summary.total,
        "completed": summary.completed,
        "ready": summary.ready,
        "upcoming": summary.upcoming,
        "completion_percent": summary.completion_percent,
        "today_total": today.total,
        "today_completed": today.completed,
        "today_percent": today.completion_percent,
        "performance_series": [
            {
                "date": point.date,
                "score": point.score,
                "quiz_set": point.quiz_set,
                "index": point.index,
                "label": point.label,
                "display_name": point.display_name,
            }
            for point in summary.performance_series
        ],
        **summarize_quizzes([quiz["id"] for quiz in quizzes], entries),
    }


def build_history(
    conn,
    user_id: int,
    q: Optional[str] = None,
    status: Optional[str] = None,
    subject_id: Optional[str] = None,
) -> List[Dict]:
    quizzes = fetch_quizzes(conn, user_id)
    criteria = FilterCriteria(
        search=q,
        search_fields=HISTORY_SEARCH_FIELDS,
        exact={"status": status, "subject_id": subject_id},
        allowed={"status": [choice.value for choice in QuizStatus]},
    )
    history = []
    for quiz in filter_items(quizzes, criteria):
        completed_sets, total_sets, next_date = quiz_progress(quiz.pop("schedules"))
        history.append(
            {
                **quiz,
                "completed_sets": completed_sets,
                "total_sets": total_sets,
                "progress_percent": completion_percent(completed_sets, total_sets),
                "next_quiz_date": next_date,
            }
        )
    return history


def fetch_subjects(conn) -> List[Dict]:
    cursor = conn.cursor()
    cursor.execute("SELECT id, name FROM subjects ORDER BY name")
    return [dict(row) for row in cursor.fetchall()]


@router.get("/api/users/{user_id}/summary")
async def user_summary(user_id: int, conn=Depends(get_db), now: datetime = Depends(utc_now)):
    _require_user(conn, user_id)
    return build_summary(conn, user_id, now)


@router.get("/api/users/{user_id}/history")
async def user_history(
    user_id: int,
    q: Optional[str] = None,
    status: Optional[str] = None,
    subject_id: Optional[str] = None,
    conn=Depends(get_db),
):
    _require_user(conn, user_id)
    return build_history(conn, user_id, q, status, subject_id)


@router.get("/dashboard/{user_id}", response_class=HTMLResponse)
async def dashboard_view(user_id: int, request: Request, conn=Depends(get_db), now: datetime = Depends(utc_now)):
    """Dashboard: quiz counts, today's progress, and the score chart data."""
    user = _require_user(conn, user_id)
    summary = build_summary(conn, user_id, now)
    return templates.TemplateResponse(
        request,
        "dashboard.html",
        {"user": user, "summary": summary},
    )


@router.get("/dashboard/{user_id}/today", response_class=HTMLResponse)
async def today_view(user_id: int, request: Request, conn=Depends(get_db), now: datetime = Depends(utc_now)):
    user = _require_user(conn, user_id)
    return templates.TemplateResponse(
        request,
        "today.html",
        {
            "user": user,
            "today": build_today_list(conn, user_id, now),
            "upcoming": build_upcoming_list(conn, user_id, now),
        },
    )


@router.get("/dashboard/{user_id}/history", response_class=HTMLResponse)
async def history_view(
    user_id: int,
    request: Request,
    q: Optional[str] = None,
    status: Optional[str] = None,
    subject_id: Optional[str] = None,
    conn=Depends(get_db),
    now: datetime = Depends(utc_now),
):
    user = _require_user(conn, user_id)
    history = build_history(conn, user_id, q, status, subject_id)
    summary = build_summary(conn, user_id, now)
    filtered = bool((q or "").strip()) or status not in (None, "", "all") or subject_id not in (None, "", "all")
    return templates.TemplateResponse(
        request,
        "history.html",
        {
            "user": user,
            "quizzes": history,
            "subjects": fetch_subjects(conn),
            "performance": summary["performance_series"],
            "q": q or "",
            "status": status or "all",
            "subject_id": subject_id or "all",
            "filtered": filtered,
        },
    )
