from __future__ import annotations
import logging
import os

APP_TITLE = "MoonDev Internship Portal"

DB_PATH = os.getenv("APP_DB_PATH", "portal_state.db")
UPLOAD_DIR = os.getenv("APP_UPLOAD_DIR", "uploads")
REQUEST_TIMEOUT = int(os.getenv("REQUEST_TIMEOUT", "60"))

PUBLIC_STORAGE_BASE = os.getenv("PUBLIC_STORAGE_BASE", "http://localhost:8008")
FILE_SERVER_PORT = int(os.getenv("FILE_SERVER_PORT", "8008"))
NOTIFY_API_URL = os.getenv("NOTIFY_API_URL", "http://localhost:8080/api/send-email")

# compare-and-swap on status='pending' when recording a decision
REVIEW_REQUIRE_PENDING = os.getenv("REVIEW_REQUIRE_PENDING", "false").lower() == "true"
REFRESH_SECONDS = int(os.getenv("REFRESH_SECONDS", "5"))

PROFILE_BUCKET = "profile-pictures"
SOURCE_BUCKET = "source-code"

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(level: str | None = None) -> None:
    root = logging.getLogger()
    if not root.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root.addHandler(handler)
    root.setLevel((level or LOG_LEVEL).upper())
