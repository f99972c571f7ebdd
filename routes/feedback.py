import logging
from datetime import datetime
from typing import Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException, status

from config import load_config
from db.database import get_db
from models.feedback import (
    DoubtAnswer,
    DoubtCreate,
    DoubtQuery,
    DoubtStatus,
    Feedback,
    FeedbackCreate,
    FeedbackResponse,
    FeedbackStatus,
    FeedbackType,
)
from utils.filters import FilterCriteria, count_by, filter_items
from utils.limits import doubt_limit_for_tier, limit_reached
from utils.quizzes import fetch_user
from utils.schedule import as_utc, day_bounds, utc_now

logger = logging.getLogger(__name__)

router = APIRouter()

FEEDBACK_SEARCH_FIELDS = ("user_name", "user_email", "feedback_text")
DOUBT_SEARCH_FIELDS = ("question", "answer", "subject_name")


def fetch_feedbacks(conn) -> List[Dict]:
    cursor = conn.cursor()
    cursor.execute(
        """
        SELECT
            f.*,
            TRIM(COALESCE(u.first_name, '') || ' ' || COALESCE(u.last_name, '')) AS full_name,
            u.username,
            u.email AS user_email
        FROM feedbacks f
        JOIN users u ON u.id = f.user_id
        ORDER BY f.created_at DESC, f.id DESC
        """
    )
    feedbacks = []
    for row in cursor.fetchall():
        feedback = dict(row)
        feedback["user_name"] = feedback.pop("full_name") or feedback["username"]
        feedbacks.append(feedback)
    return feedbacks


def fetch_doubts(conn, user_id: Optional[int] = None) -> List[Dict]:
    cursor = conn.cursor()
    params: List[object] = []
    user_clause = ""
    if user_id is not None:
        user_clause = "WHERE d.user_id = ?"
        params.append(user_id)
    cursor.execute(
        f"""
        SELECT d.*, s.name AS subject_name
        FROM doubt_queries d
        LEFT JOIN subjects s ON s.id = d.subject_id
        {user_clause}
        ORDER BY d.created_at DESC, d.id DESC
        """,
        params,
    )
    return [dict(row) for row in cursor.fetchall()]


def _fetch_one(conn, table: str, row_id: int) -> Optional[Dict]:
    cursor = conn.cursor()
    cursor.execute(f"SELECT * FROM {table} WHERE id = ?", (row_id,))
    row = cursor.fetchone()
    return dict(row) if row else None


@router.post("/feedback", response_model=Feedback, status_code=status.HTTP_201_CREATED)
async def submit_feedback(payload: FeedbackCreate, conn=Depends(get_db), now: datetime = Depends(utc_now)):
    if not fetch_user(conn, payload.user_id):
        raise HTTPException(status_code=404, detail="User not found")
    cursor = conn.cursor()
    cursor.execute(
        "INSERT INTO feedbacks (user_id, type, feedback_text, created_at) VALUES (?, ?, ?, ?)",
        (payload.user_id, payload.type.value, payload.feedback_text, now.isoformat()),
    )
    feedback_id = cursor.lastrowid
    conn.commit()
    return _fetch_one(conn, "feedbacks", feedback_id)


@router.get("/admin/feedback")
async def list_feedback(
    q: Optional[str] = None,
    type: Optional[str] = None,
    status: Optional[str] = None,
    conn=Depends(get_db),
):
    """Admin feedback list: search, type and status filters plus per-type counts."""
    feedbacks = fetch_feedbacks(conn)
    criteria = FilterCriteria(
        search=q,
        search_fields=FEEDBACK_SEARCH_FIELDS,
        exact={"type": type, "status": status},
        allowed={"type": list(FeedbackType), "status": list(FeedbackStatus)},
    )
    by_status = count_by(feedbacks, "status", FeedbackStatus)
    return {
        "stats": {
            "total": len(feedbacks),
            "by_type": count_by(feedbacks, "type", FeedbackType),
            "resolved": by_status[FeedbackStatus.RESOLVED.value],
        },
        "feedbacks": filter_items(feedbacks, criteria),
    }


@router.post("/feedback/{feedback_id}/respond", response_model=Feedback)
async def respond_to_feedback(
    feedback_id: int,
    payload: FeedbackResponse,
    conn=Depends(get_db),
    now: datetime = Depends(utc_now),
):
    if payload.status == FeedbackStatus.PENDING:
        raise HTTPException(status_code=400, detail="A response must mark feedback reviewed or resolved")
    cursor = conn.cursor()
    cursor.execute(
        "UPDATE feedbacks SET admin_response = ?, status = ?, reviewed_at = ? WHERE id = ?",
        (payload.admin_response, payload.status.value, now.isoformat(), feedback_id),
    )
    if cursor.rowcount == 0:
        raise HTTPException(status_code=404, detail="Feedback not found")
    conn.commit()
    return _fetch_one(conn, "feedbacks", feedback_id)


@router.post("/doubts", response_model=DoubtQuery, status_code=status.HTTP_201_CREATED)
async def submit_doubt(payload: DoubtCreate, conn=Depends(get_db), now: datetime = Depends(utc_now)):
    config = load_config()
    user = fetch_user(conn, payload.user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    if payload.subject_id is not None and not _fetch_one(conn, "subjects", payload.subject_id):
        raise HTTPException(status_code=404, detail="Subject not found")
    tier = user["subscription_tier"]
    limit = doubt_limit_for_tier(tier, config)
    start, end = day_bounds(now, config["schedule"]["timezone"])
    asked_today = [
        doubt for doubt in fetch_doubts(conn, payload.user_id)
        if start <= as_utc(datetime.fromisoformat(doubt["created_at"])) < end
    ]
    if limit_reached(len(asked_today), limit):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail={
                "message": "Doubt query limit reached for your subscription tier",
                "current_tier": tier,
                "limit": limit,
            },
        )
    cursor = conn.cursor()
    cursor.execute(
        "INSERT INTO doubt_queries (user_id, subject_id, question, status, created_at) VALUES (?, ?, ?, ?, ?)",
        (payload.user_id, payload.subject_id, payload.question.strip(), DoubtStatus.PENDING.value, now.isoformat()),
    )
    doubt_id = cursor.lastrowid
    conn.commit()
    return _fetch_one(conn, "doubt_queries", doubt_id)


@router.get("/doubts")
async def list_doubts(
    user_id: Optional[int] = None,
    q: Optional[str] = None,
    status: Optional[str] = None,
    subject_id: Optional[str] = None,
    conn=Depends(get_db),
):
    criteria = FilterCriteria(
        search=q,
        search_fields=DOUBT_SEARCH_FIELDS,
        exact={"status": status, "subject_id": subject_id},
        allowed={"status": list(DoubtStatus)},
    )
    return filter_items(fetch_doubts(conn, user_id), criteria)


@router.post("/admin/doubts/{doubt_id}/answer", response_model=DoubtQuery)
async def answer_doubt(
    doubt_id: int,
    payload: DoubtAnswer,
    conn=Depends(get_db),
    now: datetime = Depends(utc_now),
):
    """Answer a pending doubt; answered doubts are not reopened."""
    doubt = _fetch_one(conn, "doubt_queries", doubt_id)
    if not doubt:
        raise HTTPException(status_code=404, detail="Doubt query not found")
    if doubt["status"] == DoubtStatus.ANSWERED.value:
        raise HTTPException(status_code=409, detail="Doubt query already answered")
    cursor = conn.cursor()
    cursor.execute(
        "UPDATE doubt_queries SET answer = ?, status = ?, answered_at = ? WHERE id = ? AND status = ?",
        (payload.answer.strip(), DoubtStatus.ANSWERED.value, now.isoformat(), doubt_id, DoubtStatus.PENDING.value),
    )
    conn.commit()
    logger.info("Answered doubt query %s", doubt_id)
    return _fetch_one(conn, "doubt_queries", doubt_id)
