"""
Study page rendering.
"""

from __future__ import annotations

import streamlit as st

from app.session_controller import SessionController
from app.session_types import SessionState
from app.ui import (
    BACK_FLASHCARD_STYLE,
    render_feedback_buttons,
    render_flashcard,
    render_session_complete,
    render_session_stats,
)
from core import srs
from core.session_builders import summarize_day
from core.srs import CardWriteError, dates


def render_study_page() -> None:
    """
    Render the study flow (intro or active session).
    """
    controller: SessionController = st.session_state.controller

    if st.session_state.save_error:
        st.error(st.session_state.save_error)
        if st.button("Retry saving", type="primary"):
            _retry_save(controller)
            st.rerun()

    if controller.current_card is None:
        _render_intro_screen(controller)
    else:
        _render_active_session(controller)


def _render_intro_screen(controller: SessionController) -> None:
    st.title("🇳🇱 Dutch Flashcards")
    if srs.is_test_mode():
        st.warning("⚠️ **TEST MODE** - Using the test database (set TEST_MODE=false in .env for production)")

    if controller.last_summary is not None:
        render_session_complete(controller.last_summary)

    today = dates.today()
    summary = summarize_day(
        controller.store.load_cards(),
        today,
        st.session_state.settings.max_new_per_day,
    )
    col1, col2 = st.columns(2)
    with col1:
        st.metric("Today", f"New {summary.new_today}, Review {summary.review_today}")
    with col2:
        st.metric("Tomorrow", f"New {summary.new_tomorrow}, Review {summary.review_tomorrow}")

    if controller.state == SessionState.FLUSHING:
        # Previous session still has unsaved grades; retry above first
        return

    if st.button("Start review", type="primary", use_container_width=True):
        controller.settings = st.session_state.settings
        controller.start(today)
        if controller.nothing_due:
            st.info("Nothing due. Come back tomorrow!")
        else:
            st.rerun()


def _render_active_session(controller: SessionController) -> None:
    if render_session_stats(controller):
        _finish(controller)
        st.rerun()

    card = controller.current_card
    status = "NEW" if card.is_new else "REVIEW"
    render_flashcard(card.front, corner_text=status)

    if card.image_url:
        with st.expander("Hint"):
            st.image(card.image_url)

    if not controller.revealed:
        if st.button("Show answer", use_container_width=True):
            controller.reveal()
            st.rerun()
        return

    render_flashcard(card.back, corner_text=status, style=BACK_FLASHCARD_STYLE)

    rating = render_feedback_buttons()
    if rating is not None:
        try:
            controller.grade(rating)
            st.session_state.save_error = None
        except CardWriteError as exc:
            st.session_state.save_error = f"Your answers may not be saved: {exc}"
        st.session_state.pop("answer_choice", None)
        st.rerun()


def _finish(controller: SessionController) -> None:
    try:
        controller.finish()
        st.session_state.save_error = None
    except CardWriteError as exc:
        st.session_state.save_error = f"Your answers may not be saved: {exc}"


def _retry_save(controller: SessionController) -> None:
    try:
        if controller.state == SessionState.FLUSHING:
            controller.finish()
        else:
            controller.flush()
        st.session_state.save_error = None
    except CardWriteError as exc:
        st.session_state.save_error = f"Still unable to save: {exc}"
