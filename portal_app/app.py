from __future__ import annotations
import streamlit as st
from .config import APP_TITLE, configure_logging
from .services.file_server import start_once as start_file_server
from .ui.sections import evaluate_page, login_page, submit_page
from .ui.state import init_session_state

PAGES = {"login": login_page, "submit": submit_page, "evaluate": evaluate_page}


def main() -> None:
    st.set_page_config(page_title=APP_TITLE, layout="wide")
    st.title(APP_TITLE)

    configure_logging()
    start_file_server()
    init_session_state()

    PAGES.get(st.session_state.page, login_page)()
