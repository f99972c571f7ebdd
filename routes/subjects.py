import logging
import sqlite3
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, status

from db.database import get_db
from models.subject import Chapter, Subject
from models.user import Tier, User, UserCreate
from utils.filters import FilterCriteria, filter_items
from utils.quizzes import fetch_user

logger = logging.getLogger(__name__)

router = APIRouter()

USER_SEARCH_FIELDS = ("username", "email", "first_name", "last_name")


@router.get("/subjects", response_model=List[Subject])
async def list_subjects(board: Optional[str] = None, grade: Optional[int] = None, conn=Depends(get_db)):
    """Subjects, optionally narrowed by board and/or grade level."""
    cursor = conn.cursor()
    filters = []
    params: List[object] = []
    if board:
        filters.append("board = ?")
        params.append(board)
    if grade is not None:
        filters.append("grade_level = ?")
        params.append(grade)
    where_clause = f"WHERE {' AND '.join(filters)}" if filters else ""
    cursor.execute(f"SELECT id, name, grade_level, board FROM subjects {where_clause} ORDER BY name", params)
    return [Subject.model_validate(dict(row)) for row in cursor.fetchall()]


@router.get("/subjects/{subject_id}/chapters", response_model=List[Chapter])
async def list_chapters(subject_id: int, conn=Depends(get_db)):
    cursor = conn.cursor()
    cursor.execute(
        "SELECT id, subject_id, name, description FROM chapters WHERE subject_id = ? ORDER BY id",
        (subject_id,),
    )
    return [Chapter.model_validate(dict(row)) for row in cursor.fetchall()]


@router.post("/users", response_model=User, status_code=status.HTTP_201_CREATED)
async def create_user(payload: UserCreate, conn=Depends(get_db)):
    cursor = conn.cursor()
    try:
        cursor.execute(
            """
            INSERT INTO users (username, email, first_name, last_name, grade, board, subscription_tier)
            VALUES (?, ?, ?, ?, ?, ?, ?)
            """,
            (
                payload.username.strip(),
                payload.email.strip(),
                payload.first_name,
                payload.last_name,
                payload.grade,
                payload.board.value if payload.board else None,
                payload.subscription_tier.value,
            ),
        )
    except sqlite3.IntegrityError as e:
        conn.rollback()
        if "UNIQUE" not in str(e):
            raise
        raise HTTPException(status_code=409, detail="Username or email already registered")
    user_id = cursor.lastrowid
    conn.commit()
    logger.info("Registered user %s", user_id)
    return User.model_validate(fetch_user(conn, user_id))


@router.get("/users/{user_id}", response_model=User)
async def get_user(user_id: int, conn=Depends(get_db)):
    user = fetch_user(conn, user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return User.model_validate(user)


@router.get("/admin/users", response_model=List[User])
async def list_users(
    q: Optional[str] = None,
    tier: Optional[str] = None,
    conn=Depends(get_db),
):
    """Admin user list: search on name/email plus a subscription tier filter."""
    cursor = conn.cursor()
    cursor.execute(
        """
        SELECT id, username, email, first_name, last_name, grade, board, subscription_tier
        FROM users
        ORDER BY username
        """
    )
    users = [dict(row) for row in cursor.fetchall()]
    criteria = FilterCriteria(
        search=q,
        search_fields=USER_SEARCH_FIELDS,
        exact={"subscription_tier": tier},
        allowed={"subscription_tier": list(Tier)},
    )
    return [User.model_validate(user) for user in filter_items(users, criteria)]
