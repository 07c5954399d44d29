"""Email/password accounts kept in the portal's own sqlite database.

One ``LocalAuth`` instance holds one session; the UI keeps it in the
Streamlit session state so each browser tab signs in separately.
"""
from __future__ import annotations
from contextlib import closing
from typing import Optional
import logging
import sqlite3
import time
import uuid

from ..config import DB_PATH
from ..db import connect, migrate
from ..errors import AuthError, PersistenceError
from ..models import Identity, Role
from ..ports import AuthProvider, ProfileDirectory
from .security import hash_password, verify_password

logger = logging.getLogger(__name__)


class LocalAuth(AuthProvider, ProfileDirectory):
    def __init__(self, db_path: str = DB_PATH):
        self.db_path = db_path
        self._current: Optional[Identity] = None
        migrate(db_path)

    def get_current_actor(self) -> Optional[Identity]:
        return self._current

    def sign_in(self, email: str, password: str) -> Identity:
        email = (email or "").strip()
        with closing(connect(self.db_path)) as conn:
            row = conn.execute(
                "SELECT id, email, password_hash FROM profiles WHERE email=?", (email,)
            ).fetchone()
        if row is None or not verify_password(password or "", row["password_hash"]):
            logger.info("Failed sign-in for %s", email)
            raise AuthError()
        self._current = Identity(user_id=row["id"], email=row["email"])
        return self._current

    def sign_out(self) -> None:
        self._current = None

    def get_role(self, user_id: str) -> Optional[Role]:
        with closing(connect(self.db_path)) as conn:
            row = conn.execute("SELECT role FROM profiles WHERE id=?", (user_id,)).fetchone()
        if row is None:
            return None
        try:
            return Role(row["role"])
        except ValueError:
            return None

    def create_profile(self, email: str, password: str, role: Role) -> Identity:
        user_id = uuid.uuid4().hex
        email = email.strip()
        try:
            with closing(connect(self.db_path)) as conn, conn:
                conn.execute(
                    "INSERT INTO profiles(id, email, password_hash, role, created_at) VALUES(?,?,?,?,?)",
                    (user_id, email, hash_password(password), Role(role).value, int(time.time())),
                )
        except sqlite3.IntegrityError as e:
            raise PersistenceError(f"A profile for {email} already exists") from e
        logger.info("Created %s profile for %s", Role(role).value, email)
        return Identity(user_id=user_id, email=email)
