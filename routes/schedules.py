import logging
from datetime import datetime
from typing import Dict, List

from fastapi import APIRouter, Depends, HTTPException

from config import get_config_value
from db.database import get_db
from models.schedule import ScheduleCompletion, ScheduleEntry
from utils.quizzes import (
    fetch_quiz_sets,
    fetch_quizzes,
    fetch_schedule_entries,
    fetch_schedule_entry,
    fetch_user,
    save_completion,
)
from utils.schedule import (
    ScheduleError,
    classify,
    complete_entry,
    format_time_remaining,
    is_due_today,
    is_upcoming,
    utc_now,
)

logger = logging.getLogger(__name__)

router = APIRouter()


def enrich_entries(conn, user_id: int, entries: List[ScheduleEntry], now: datetime) -> List[Dict]:
    """Attach quiz, quiz set, and derived status to each entry for display."""
    quizzes = {quiz["id"]: quiz for quiz in fetch_quizzes(conn, user_id)}
    sets: Dict[int, Dict] = {}
    loaded = set()
    enriched = []
    for entry in entries:
        if entry.quiz_id not in loaded:
            loaded.add(entry.quiz_id)
            for quiz_set in fetch_quiz_sets(conn, entry.quiz_id):
                sets[quiz_set["id"]] = quiz_set
        quiz = dict(quizzes.get(entry.quiz_id) or {})
        quiz.pop("schedules", None)
        quiz_set = sets.get(entry.quiz_set_id) or {}
        view = classify(entry, now)
        enriched.append(
            {
                **entry.model_dump(),
                "derived_status": view.status.value,
                "label": view.label,
                "time_remaining": format_time_remaining(view.remaining),
                "quiz": quiz,
                "quiz_set": {
                    "id": quiz_set.get("id"),
                    "set_number": quiz_set.get("set_number", 0),
                    "question_count": len(quiz_set.get("questions") or []),
                },
            }
        )
    return enriched


def build_today_list(conn, user_id: int, now: datetime) -> List[Dict]:
    tz_name = get_config_value("schedule", "timezone", "UTC")
    entries = [entry for entry in fetch_schedule_entries(conn, user_id) if is_due_today(entry, now, tz_name)]
    return enrich_entries(conn, user_id, entries, now)


def build_upcoming_list(conn, user_id: int, now: datetime) -> List[Dict]:
    entries = [entry for entry in fetch_schedule_entries(conn, user_id) if is_upcoming(entry, now)]
    return enrich_entries(conn, user_id, entries, now)


def _require_user(conn, user_id: int) -> Dict:
    user = fetch_user(conn, user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return user


@router.get("/users/{user_id}/today")
async def today_quizzes(user_id: int, conn=Depends(get_db), now: datetime = Depends(utc_now)):
    _require_user(conn, user_id)
    return build_today_list(conn, user_id, now)


@router.get("/users/{user_id}/upcoming")
async def upcoming_quizzes(user_id: int, conn=Depends(get_db), now: datetime = Depends(utc_now)):
    _require_user(conn, user_id)
    return build_upcoming_list(conn, user_id, now)


@router.post("/schedules/{schedule_id}/complete")
async def complete_schedule(
    schedule_id: int,
    payload: ScheduleCompletion,
    conn=Depends(get_db),
    now: datetime = Depends(utc_now),
):
    """Record a quiz attempt: pending -> completed with score and completion time."""
    entry = fetch_schedule_entry(conn, schedule_id)
    if not entry:
        raise HTTPException(status_code=404, detail="Quiz schedule not found")
    try:
        updated = complete_entry(entry, payload.score, now)
    except ScheduleError as e:
        raise HTTPException(status_code=409, detail=str(e))
    if save_completion(conn, updated) == 0:
        conn.rollback()
        raise HTTPException(status_code=409, detail=f"Schedule entry {schedule_id} is already completed")
    conn.commit()
    logger.info("Completed schedule %s with score %s", schedule_id, payload.score)
    view = classify(updated, now)
    return {**updated.model_dump(), "derived_status": view.status.value, "label": view.label}
