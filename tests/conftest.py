from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient

import config
from db import database
from main import app
from utils.schedule import utc_now

NOW = datetime(2024, 6, 1, 9, 0, tzinfo=timezone.utc)

TEST_CONFIG = "\n".join(
    [
        "[schedule]",
        "intervals = [0, 1, 5, 15, 30, 60, 120, 180]",
        'timezone = "UTC"',
        "",
        "[limits]",
        "quizzes_per_subject = { free = 1, standard = 1, premium = 3 }",
        "doubts_per_day = { free = 2, standard = -1, premium = -1 }",
    ]
)


@pytest.fixture
def app_env(tmp_path, monkeypatch):
    """Point config and database at a temporary ~/.quickrevise."""
    config_dir = tmp_path / ".quickrevise"
    config_dir.mkdir()
    config_path = config_dir / "config.toml"
    config_path.write_text(TEST_CONFIG, encoding="utf-8")

    monkeypatch.setattr(config, "CONFIG_DIR", config_dir)
    monkeypatch.setattr(config, "CONFIG_PATH", config_path)
    monkeypatch.setattr(database, "CONFIG_DIR", config_dir)
    monkeypatch.setattr(database, "DB_PATH", config_dir / "quickrevise.db")
    for var in ("QUICKREVISE_INTERVALS", "QUICKREVISE_TIMEZONE"):
        monkeypatch.delenv(var, raising=False)

    database.init_db()
    return config_dir


@pytest.fixture
def client(app_env):
    app.dependency_overrides[utc_now] = lambda: NOW
    yield TestClient(app)
    app.dependency_overrides.clear()


def seed_user(username="asha", tier="free", first_name=None, email=None):
    with database.get_conn() as conn:
        cursor = conn.cursor()
        cursor.execute(
            "INSERT INTO users (username, email, first_name, subscription_tier) VALUES (?, ?, ?, ?)",
            (username, email or f"{username}@example.com", first_name, tier),
        )
        user_id = cursor.lastrowid
        conn.commit()
    return user_id


def seed_subject(name="Mathematics", chapter="Algebra"):
    with database.get_conn() as conn:
        cursor = conn.cursor()
        cursor.execute(
            "INSERT INTO subjects (name, grade_level, board) VALUES (?, 10, 'CBSE')",
            (name,),
        )
        subject_id = cursor.lastrowid
        cursor.execute(
            "INSERT INTO chapters (subject_id, name) VALUES (?, ?)",
            (subject_id, chapter),
        )
        chapter_id = cursor.lastrowid
        conn.commit()
    return subject_id, chapter_id
