import logging
from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, status

from config import load_config
from db.database import get_db
from models.quiz import Quiz, QuizCreate, QuizSet, QuizStatus
from utils.filters import FilterCriteria, filter_items
from utils.limits import limit_reached, quiz_limit_for_tier
from utils.quizzes import (
    create_quiz_with_schedule,
    fetch_quiz_sets,
    fetch_quizzes,
    fetch_user,
)
from utils.schedule import classify, utc_now

logger = logging.getLogger(__name__)

router = APIRouter()


def _require_subject_chapter(conn, subject_id: int, chapter_id: int) -> None:
    cursor = conn.cursor()
    cursor.execute(
        "SELECT 1 FROM chapters WHERE id = ? AND subject_id = ?",
        (chapter_id, subject_id),
    )
    if not cursor.fetchone():
        raise HTTPException(status_code=404, detail="Subject or chapter not found")


def _quiz_sets(conn, quiz_id: int) -> List[QuizSet]:
    return [QuizSet.model_validate(quiz_set) for quiz_set in fetch_quiz_sets(conn, quiz_id)]


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_quiz(payload: QuizCreate, conn=Depends(get_db), now: datetime = Depends(utc_now)):
    """Create a quiz from supplied question sets and schedule one review per set."""
    config = load_config()
    user = fetch_user(conn, payload.user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    _require_subject_chapter(conn, payload.subject_id, payload.chapter_id)

    tier = user["subscription_tier"]
    limit = quiz_limit_for_tier(tier, config)
    active_for_subject = [
        quiz for quiz in fetch_quizzes(conn, payload.user_id)
        if quiz["subject_id"] == payload.subject_id and quiz["status"] == QuizStatus.ACTIVE.value
    ]
    if limit_reached(len(active_for_subject), limit):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail={
                "message": "Quiz limit reached for your subscription tier",
                "current_tier": tier,
                "limit": limit,
            },
        )
    try:
        quiz_id = create_quiz_with_schedule(
            conn,
            user_id=payload.user_id,
            subject_id=payload.subject_id,
            chapter_id=payload.chapter_id,
            title=payload.title.strip(),
            question_sets=payload.question_sets,
            start=now,
            intervals=config["schedule"]["intervals"],
        )
    except ValueError as e:
        conn.rollback()
        raise HTTPException(status_code=400, detail=str(e))
    conn.commit()
    quiz = fetch_quizzes(conn, payload.user_id, quiz_id)[0]
    schedules = quiz.pop("schedules")
    return {"quiz": Quiz.model_validate(quiz), "quiz_sets": _quiz_sets(conn, quiz_id), "schedules": schedules}


@router.get("", response_model=List[Quiz])
async def list_quizzes(user_id: int, status_filter: Optional[str] = None, conn=Depends(get_db)):
    criteria = FilterCriteria(
        exact={"status": status_filter},
        allowed={"status": list(QuizStatus)},
    )
    return filter_items(fetch_quizzes(conn, user_id), criteria)


@router.get("/{quiz_id}")
async def get_quiz(quiz_id: int, user_id: int, conn=Depends(get_db), now: datetime = Depends(utc_now)):
    quizzes = fetch_quizzes(conn, user_id, quiz_id)
    if not quizzes:
        cursor = conn.cursor()
        cursor.execute("SELECT 1 FROM quizzes WHERE id = ?", (quiz_id,))
        if cursor.fetchone():
            raise HTTPException(status_code=403, detail="Unauthorized access to quiz")
        raise HTTPException(status_code=404, detail="Quiz not found")
    quiz = quizzes[0]
    schedules = []
    for entry in quiz.pop("schedules"):
        view = classify(entry, now)
        schedules.append({**entry.model_dump(), "derived_status": view.status.value, "label": view.label})
    return {"quiz": Quiz.model_validate(quiz), "quiz_sets": _quiz_sets(conn, quiz_id), "schedules": schedules}


@router.delete("/{quiz_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_quiz(quiz_id: int, user_id: int, conn=Depends(get_db)):
    """Delete a quiz; its sets and schedule entries go with it."""
    cursor = conn.cursor()
    cursor.execute("DELETE FROM quizzes WHERE id = ? AND user_id = ?", (quiz_id, user_id))
    if cursor.rowcount == 0:
        raise HTTPException(status_code=404, detail="Quiz not found")
    conn.commit()
    logger.info("Deleted quiz %s for user %s", quiz_id, user_id)
