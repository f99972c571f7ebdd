from __future__ import annotations

import json
import logging
from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence

from models.schedule import ScheduleEntry, ScheduleStatus
from utils.schedule import as_utc, build_review_dates, derive_quiz_status

logger = logging.getLogger(__name__)


def fetch_user(conn, user_id: int) -> Optional[Dict]:
    cursor = conn.cursor()
    cursor.execute(
        "SELECT id, username, email, first_name, last_name, grade, board, subscription_tier FROM users WHERE id = ?",
        (user_id,),
    )
    row = cursor.fetchone()
    return dict(row) if row else None


def fetch_schedule_entries(conn, user_id: int, quiz_id: Optional[int] = None) -> List[ScheduleEntry]:
    cursor = conn.cursor()
    params: List[object] = [user_id]
    quiz_clause = ""
    if quiz_id is not None:
        quiz_clause = "AND quiz_id = ?"
        params.append(quiz_id)
    cursor.execute(
        f"""
        SELECT id, quiz_id, quiz_set_id, user_id, scheduled_date, completed_date, score, status
        FROM quiz_schedules
        WHERE user_id = ? {quiz_clause}
        ORDER BY scheduled_date ASC, id ASC
        """,
        params,
    )
    return [ScheduleEntry.model_validate(dict(row)) for row in cursor.fetchall()]


def fetch_schedule_entry(conn, schedule_id: int) -> Optional[ScheduleEntry]:
    cursor = conn.cursor()
    cursor.execute(
        """
        SELECT id, quiz_id, quiz_set_id, user_id, scheduled_date, completed_date, score, status
        FROM quiz_schedules
        WHERE id = ?
        """,
        (schedule_id,),
    )
    row = cursor.fetchone()
    return ScheduleEntry.model_validate(dict(row)) if row else None


def fetch_set_numbers(conn, user_id: int) -> Dict[int, int]:
    cursor = conn.cursor()
    cursor.execute(
        """
        SELECT qs.id, qs.set_number
        FROM quiz_sets qs
        JOIN quizzes q ON q.id = qs.quiz_id
        WHERE q.user_id = ?
        """,
        (user_id,),
    )
    return {row["id"]: row["set_number"] for row in cursor.fetchall()}


def fetch_quiz_sets(conn, quiz_id: int) -> List[Dict]:
    cursor = conn.cursor()
    cursor.execute(
        "SELECT id, quiz_id, set_number, questions FROM quiz_sets WHERE quiz_id = ? ORDER BY set_number",
        (quiz_id,),
    )
    sets = []
    for row in cursor.fetchall():
        quiz_set = dict(row)
        quiz_set["questions"] = json.loads(quiz_set["questions"] or "[]")
        sets.append(quiz_set)
    return sets


def fetch_quizzes(conn, user_id: int, quiz_id: Optional[int] = None) -> List[Dict]:
    """Quizzes with subject/chapter names and status derived from their schedule."""
    cursor = conn.cursor()
    params: List[object] = [user_id]
    quiz_clause = ""
    if quiz_id is not None:
        quiz_clause = "AND q.id = ?"
        params.append(quiz_id)
    cursor.execute(
        f"""
        SELECT
            q.id,
            q.user_id,
            q.subject_id,
            q.chapter_id,
            q.title,
            q.created_at,
            s.name AS subject_name,
            c.name AS chapter_name
        FROM quizzes q
        LEFT JOIN subjects s ON s.id = q.subject_id
        LEFT JOIN chapters c ON c.id = q.chapter_id
        WHERE q.user_id = ? {quiz_clause}
        ORDER BY q.created_at DESC, q.id DESC
        """,
        params,
    )
    quizzes = [dict(row) for row in cursor.fetchall()]
    entries = fetch_schedule_entries(conn, user_id, quiz_id)
    for quiz in quizzes:
        quiz_entries = [entry for entry in entries if entry.quiz_id == quiz["id"]]
        quiz["status"] = derive_quiz_status(quiz_entries).value
        quiz["subject"] = {"id": quiz["subject_id"], "name": quiz.pop("subject_name") or ""}
        quiz["chapter"] = {"id": quiz["chapter_id"], "name": quiz.pop("chapter_name") or ""}
        quiz["schedules"] = quiz_entries
    return quizzes


def create_quiz_with_schedule(
    conn,
    *,
    user_id: int,
    subject_id: int,
    chapter_id: int,
    title: str,
    question_sets: Sequence[List[Dict[str, Any]]],
    start: datetime,
    intervals: Sequence[int],
) -> int:
    """Insert a quiz, its sets, and one pending schedule entry per set.

    Set i is due at start + intervals[i - 1]. The caller commits.
    """
    if len(question_sets) > len(intervals):
        raise ValueError(
            f"{len(question_sets)} quiz sets but only {len(intervals)} review intervals configured"
        )
    cursor = conn.cursor()
    cursor.execute(
        "INSERT INTO quizzes (user_id, subject_id, chapter_id, title, created_at) VALUES (?, ?, ?, ?, ?)",
        (user_id, subject_id, chapter_id, title, as_utc(start).isoformat()),
    )
    quiz_id = cursor.lastrowid
    dates = build_review_dates(start, intervals)
    for set_number, (questions, due) in enumerate(zip(question_sets, dates), start=1):
        cursor.execute(
            "INSERT INTO quiz_sets (quiz_id, set_number, questions) VALUES (?, ?, ?)",
            (quiz_id, set_number, json.dumps(questions)),
        )
        quiz_set_id = cursor.lastrowid
        cursor.execute(
            """
            INSERT INTO quiz_schedules (quiz_id, quiz_set_id, user_id, scheduled_date, status)
            VALUES (?, ?, ?, ?, ?)
            """,
            (quiz_id, quiz_set_id, user_id, due.isoformat(), ScheduleStatus.PENDING.value),
        )
    logger.info("Created quiz %s with %s scheduled sets for user %s", quiz_id, len(question_sets), user_id)
    return quiz_id


def save_completion(conn, entry: ScheduleEntry) -> int:
    """Persist the completion fields of an entry; scheduled_date is never written."""
    cursor = conn.cursor()
    cursor.execute(
        """
        UPDATE quiz_schedules
        SET status = ?, completed_date = ?, score = ?
        WHERE id = ? AND status = ?
        """,
        (
            entry.status.value,
            entry.completed_date.isoformat() if entry.completed_date else None,
            entry.score,
            entry.id,
            ScheduleStatus.PENDING.value,
        ),
    )
    return cursor.rowcount
