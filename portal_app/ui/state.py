from __future__ import annotations
import streamlit as st
from ..config import DB_PATH, REVIEW_REQUIRE_PENDING, UPLOAD_DIR, PUBLIC_STORAGE_BASE
from ..repository import SqliteSubmissionStore
from ..services.auth import LocalAuth
from ..services.blob_storage import LocalBlobStorage
from ..services.notifier import HttpNotifier
from ..workflows import ReviewWorkflow, SubmissionWorkflow


@st.cache_resource
def shared_store() -> SqliteSubmissionStore:
    return SqliteSubmissionStore(DB_PATH)


@st.cache_resource
def shared_blobs() -> LocalBlobStorage:
    return LocalBlobStorage(UPLOAD_DIR, PUBLIC_STORAGE_BASE)


def init_session_state() -> None:
    if "auth" not in st.session_state:
        auth = LocalAuth(DB_PATH)
        store = shared_store()
        st.session_state.auth = auth
        st.session_state.submit_flow = SubmissionWorkflow(auth, auth, store, shared_blobs())
        st.session_state.review_flow = ReviewWorkflow(
            auth, auth, store, HttpNotifier(), require_pending=REVIEW_REQUIRE_PENDING,
        )
        st.session_state.review_subscription = None

    st.session_state.setdefault("page", "login")
    st.session_state.setdefault("flash", None)


def go_to(page: str, flash: tuple[str, str] | None = None) -> None:
    st.session_state.page = page
    st.session_state.flash = flash
    st.rerun()


def sign_out() -> None:
    sub = st.session_state.get("review_subscription")
    if sub is not None:
        sub.close()
        st.session_state.review_subscription = None
    st.session_state.auth.sign_out()
    for key in ("auth", "submit_flow", "review_flow"):
        st.session_state.pop(key, None)
    go_to("login")


def review_subscription():
    sub = st.session_state.get("review_subscription")
    if sub is None or sub.closed:
        sub = st.session_state.review_flow.subscribe()
        st.session_state.review_subscription = sub
    return sub


def show_flash() -> None:
    flash = st.session_state.get("flash")
    if not flash:
        return
    kind, msg = flash
    getattr(st, kind, st.info)(msg)
    st.session_state.flash = None
