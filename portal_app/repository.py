from __future__ import annotations
from typing import List, Optional
from contextlib import closing
import logging
import sqlite3

from .config import DB_PATH
from .db import connect, migrate
from .errors import DuplicateSubmission, PersistenceError, ValidationError
from .models import Status, Submission
from .ports import SubmissionStore
from .services.changes import ChangeFeed, ChangeSubscription, default_feed

logger = logging.getLogger(__name__)

TABLE = "submissions"
COLUMNS = (
    "id", "user_id", "full_name", "phone_number", "location", "email", "hobbies",
    "profile_picture_ref", "source_code_ref", "status", "feedback", "created_at",
)
_SELECT = f"SELECT {', '.join(COLUMNS)} FROM submissions"


def _row_to_submission(row: sqlite3.Row) -> Submission:
    data = dict(row)
    data["status"] = Status(data["status"])
    return Submission(**data)


class SqliteSubmissionStore(SubmissionStore):
    def __init__(self, db_path: str = DB_PATH, feed: Optional[ChangeFeed] = None):
        self.db_path = db_path
        self.feed = feed or default_feed
        migrate(db_path)

    def get_for_user(self, user_id: str) -> Optional[Submission]:
        return self._fetch_one(f"{_SELECT} WHERE user_id=?", (user_id,))

    def get(self, submission_id: str) -> Optional[Submission]:
        return self._fetch_one(f"{_SELECT} WHERE id=?", (submission_id,))

    def list_all(self) -> List[Submission]:
        try:
            with closing(connect(self.db_path)) as conn:
                cur = conn.execute(f"{_SELECT} ORDER BY created_at DESC, rowid DESC")
                return [_row_to_submission(r) for r in cur.fetchall()]
        except sqlite3.Error as e:
            raise PersistenceError("Failed to load submissions") from e

    def insert(self, submission: Submission) -> Submission:
        row = submission.to_row()
        placeholders = ", ".join("?" for _ in COLUMNS)
        try:
            with closing(connect(self.db_path)) as conn, conn:
                conn.execute(
                    f"INSERT INTO submissions({', '.join(COLUMNS)}) VALUES({placeholders})",
                    tuple(row[c] for c in COLUMNS),
                )
        except sqlite3.IntegrityError as e:
            if "submissions.user_id" in str(e):
                raise DuplicateSubmission() from e
            raise PersistenceError("Failed to save submission") from e
        except sqlite3.Error as e:
            raise PersistenceError("Failed to save submission") from e
        self.feed.publish(TABLE, "INSERT", submission.id)
        return submission

    def update_decision(self, submission_id: str, status: Status, feedback: str,
                        only_if_pending: bool = False) -> Submission:
        sql = "UPDATE submissions SET status=?, feedback=? WHERE id=?"
        if only_if_pending:
            sql += " AND status='pending'"
        try:
            with closing(connect(self.db_path)) as conn, conn:
                cur = conn.execute(sql, (status.value, feedback, submission_id))
                updated = cur.rowcount
        except sqlite3.Error as e:
            raise PersistenceError("Failed to update submission") from e

        current = self.get(submission_id)
        if current is None:
            raise PersistenceError("Failed to update submission")
        if not updated:
            logger.info("Decision on %s lost to a concurrent review (now %s)",
                        submission_id, current.status.value)
            raise ValidationError({"status": "This submission has already been reviewed"})
        self.feed.publish(TABLE, "UPDATE", submission_id)
        return current

    def subscribe(self) -> ChangeSubscription:
        return self.feed.subscribe(TABLE)

    def _fetch_one(self, sql: str, params: tuple) -> Optional[Submission]:
        try:
            with closing(connect(self.db_path)) as conn:
                row = conn.execute(sql, params).fetchone()
        except sqlite3.Error as e:
            raise PersistenceError("Failed to load submission") from e
        return _row_to_submission(row) if row else None
