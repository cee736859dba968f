"""
Feedback Button UI

Renders grading buttons for user feedback.
"""

from __future__ import annotations

from typing import Optional

import streamlit as st
from core.srs import Rating

RATING_LABELS = {
    "❌ Again": Rating.AGAIN,
    "😰 Hard": Rating.HARD,
    "👍 Good": Rating.GOOD,
    "✨ Easy": Rating.EASY,
}


def render_feedback_buttons() -> Optional[Rating]:
    """
    Render rating choices.

    Returns:
        Rating selected by user, or None if nothing selected yet
    """
    st.markdown("**How well did you remember this card?**")

    choice = st.radio(
        "Answer",
        list(RATING_LABELS),
        index=None,
        key="answer_choice",
        horizontal=True,
        label_visibility="collapsed"
    )
    if choice is None:
        return None
    return RATING_LABELS[choice]
