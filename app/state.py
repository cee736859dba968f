"""
Streamlit session state and database initialization helpers.
"""

from __future__ import annotations

import logging

import streamlit as st

from app.session_controller import SessionController
from core import srs
from core.settings import get_log_level, load_settings


def init_database() -> None:
    """
    Initialize logging and the database schema (cached per Streamlit server).
    """
    @st.cache_resource
    def _init_database() -> None:
        logging.basicConfig(
            level=get_log_level(),
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )
        srs.init_db()

    _init_database()


def ensure_session_state() -> None:
    """
    Populate Streamlit session_state with defaults.

    The SessionController instance owns all review state; Streamlit only
    keeps it alive between reruns.
    """
    if "settings" not in st.session_state:
        st.session_state.settings = load_settings()
    if "controller" not in st.session_state:
        st.session_state.controller = SessionController(
            srs.SqlCardStore(),
            settings=st.session_state.settings,
        )
    if "save_error" not in st.session_state:
        st.session_state.save_error = None
