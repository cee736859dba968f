"""
Settings page rendering.
"""

from __future__ import annotations

import streamlit as st

from core.settings import StudySettings, save_settings

MAX_NEW_OPTIONS = [0, 5, 10, 15, 20, 30, 50]


def render_settings_page() -> None:
    """
    Render study preferences (daily new-card cap, review ahead).
    """
    settings: StudySettings = st.session_state.settings

    options = sorted(set(MAX_NEW_OPTIONS) | {settings.max_new_per_day})
    max_new = st.selectbox(
        "New cards per day",
        options,
        index=options.index(settings.max_new_per_day),
    )
    review_ahead = st.checkbox(
        "Also review cards due tomorrow",
        value=settings.review_ahead,
    )

    if st.button("Save settings", type="primary"):
        updated = settings.model_copy(update={
            "max_new_per_day": int(max_new),
            "review_ahead": bool(review_ahead),
        })
        save_settings(updated)
        st.session_state.settings = updated
        st.success("Settings saved")
