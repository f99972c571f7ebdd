# SQL schema for QuickRevise database

SCHEMA_VERSION = 3

SCHEMA_SQL = """
-- Students and admins
CREATE TABLE IF NOT EXISTS users (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    username TEXT UNIQUE NOT NULL,
    email TEXT UNIQUE NOT NULL,
    first_name TEXT,
    last_name TEXT,
    grade INTEGER,
    board TEXT CHECK(board IS NULL OR board IN ('CBSE', 'ICSE', 'ISC')),
    subscription_tier TEXT NOT NULL DEFAULT 'free' CHECK(subscription_tier IN ('free', 'standard', 'premium')),
    created_at TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%S+00:00', 'now'))
);

-- Subjects
CREATE TABLE IF NOT EXISTS subjects (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    name TEXT NOT NULL,
    grade_level INTEGER NOT NULL,
    board TEXT NOT NULL
);

-- Chapters
CREATE TABLE IF NOT EXISTS chapters (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    subject_id INTEGER NOT NULL,
    name TEXT NOT NULL,
    description TEXT,
    FOREIGN KEY (subject_id) REFERENCES subjects (id) ON DELETE CASCADE
);

-- Quizzes (status is derived from quiz_schedules, never stored)
CREATE TABLE IF NOT EXISTS quizzes (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    user_id INTEGER NOT NULL,
    subject_id INTEGER NOT NULL,
    chapter_id INTEGER NOT NULL,
    title TEXT NOT NULL,
    created_at TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%S+00:00', 'now')),
    FOREIGN KEY (user_id) REFERENCES users (id) ON DELETE CASCADE,
    FOREIGN KEY (subject_id) REFERENCES subjects (id),
    FOREIGN KEY (chapter_id) REFERENCES chapters (id)
);

-- Quiz sets (one per review interval)
CREATE TABLE IF NOT EXISTS quiz_sets (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    quiz_id INTEGER NOT NULL,
    set_number INTEGER NOT NULL,
    questions TEXT NOT NULL,
    created_at TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%S+00:00', 'now')),
    UNIQUE (quiz_id, set_number),
    FOREIGN KEY (quiz_id) REFERENCES quizzes (id) ON DELETE CASCADE
);

-- Spaced repetition schedule
CREATE TABLE IF NOT EXISTS quiz_schedules (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    quiz_id INTEGER NOT NULL,
    quiz_set_id INTEGER NOT NULL,
    user_id INTEGER NOT NULL,
    scheduled_date TEXT NOT NULL,
    completed_date TEXT,
    score INTEGER CHECK(score IS NULL OR (score >= 0 AND score <= 100)),
    status TEXT NOT NULL DEFAULT 'pending' CHECK(status IN ('pending', 'completed')),
    FOREIGN KEY (quiz_id) REFERENCES quizzes (id) ON DELETE CASCADE,
    FOREIGN KEY (quiz_set_id) REFERENCES quiz_sets (id) ON DELETE CASCADE,
    FOREIGN KEY (user_id) REFERENCES users (id) ON DELETE CASCADE
);

-- Doubt queries
CREATE TABLE IF NOT EXISTS doubt_queries (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    user_id INTEGER NOT NULL,
    subject_id INTEGER,
    question TEXT NOT NULL,
    answer TEXT,
    status TEXT NOT NULL DEFAULT 'pending' CHECK(status IN ('pending', 'answered')),
    created_at TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%S+00:00', 'now')),
    answered_at TEXT,
    FOREIGN KEY (user_id) REFERENCES users (id) ON DELETE CASCADE,
    FOREIGN KEY (subject_id) REFERENCES subjects (id) ON DELETE SET NULL
);

-- Student feedback
CREATE TABLE IF NOT EXISTS feedbacks (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    user_id INTEGER NOT NULL,
    type TEXT NOT NULL CHECK(type IN (
        'subject_content', 'quiz_error', 'doubt_answer',
        'general_experience', 'technical_bug', 'feature_suggestion'
    )),
    feedback_text TEXT,
    status TEXT NOT NULL DEFAULT 'pending' CHECK(status IN ('pending', 'reviewed', 'resolved')),
    admin_response TEXT,
    created_at TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%S+00:00', 'now')),
    reviewed_at TEXT,
    FOREIGN KEY (user_id) REFERENCES users (id) ON DELETE CASCADE
);
"""

# Indexes for performance
INDEXES_SQL = """
CREATE INDEX IF NOT EXISTS idx_chapters_subject ON chapters (subject_id);
CREATE INDEX IF NOT EXISTS idx_quizzes_user ON quizzes (user_id);
CREATE INDEX IF NOT EXISTS idx_quizzes_subject ON quizzes (subject_id);
CREATE INDEX IF NOT EXISTS idx_quiz_sets_quiz ON quiz_sets (quiz_id, set_number);
CREATE INDEX IF NOT EXISTS idx_schedules_user_date ON quiz_schedules (user_id, scheduled_date);
CREATE INDEX IF NOT EXISTS idx_schedules_quiz ON quiz_schedules (quiz_id);
CREATE INDEX IF NOT EXISTS idx_schedules_status ON quiz_schedules (status);
CREATE INDEX IF NOT EXISTS idx_doubts_user ON doubt_queries (user_id, created_at);
CREATE INDEX IF NOT EXISTS idx_feedbacks_status ON feedbacks (status);
"""
