from __future__ import annotations
import sqlite3
from contextlib import closing
from .config import DB_PATH


def connect(db_path: str = DB_PATH) -> sqlite3.Connection:
    conn = sqlite3.connect(db_path, check_same_thread=False)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON")
    return conn


def migrate(db_path: str = DB_PATH) -> None:
    with closing(connect(db_path)) as conn, conn:
        conn.executescript("""
        CREATE TABLE IF NOT EXISTS profiles(
            id TEXT PRIMARY KEY,
            email TEXT NOT NULL UNIQUE COLLATE NOCASE,
            password_hash TEXT NOT NULL,
            role TEXT NOT NULL CHECK(role IN ('developer','evaluator')),
            created_at INTEGER NOT NULL
        );
        CREATE TABLE IF NOT EXISTS submissions(
            id TEXT PRIMARY KEY,
            user_id TEXT NOT NULL UNIQUE,
            full_name TEXT NOT NULL,
            phone_number TEXT NOT NULL,
            location TEXT NOT NULL,
            email TEXT NOT NULL,
            hobbies TEXT NOT NULL,
            profile_picture_ref TEXT NOT NULL,
            source_code_ref TEXT NOT NULL,
            status TEXT NOT NULL DEFAULT 'pending'
                CHECK(status IN ('pending','accepted','rejected')),
            feedback TEXT,
            created_at INTEGER NOT NULL
        );
        CREATE INDEX IF NOT EXISTS submissions_created_idx ON submissions(created_at DESC);
        """)
