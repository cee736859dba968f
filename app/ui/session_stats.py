"""
Session Statistics UI

Renders progress metrics and controls.
"""

import streamlit as st

from app.session_types import SessionSummary


def render_session_stats(controller) -> bool:
    """
    Render session progress metrics and exit button.

    Returns:
        True if quit button was clicked, False otherwise
    """
    position, total = controller.progress
    if not total:
        return False

    col1, col2, col3 = st.columns([2, 2, 1])

    with col1:
        st.metric("Progress", f"{position}/{total}")

    with col2:
        st.metric("Reviewed", controller.graded)

    with col3:
        st.markdown("<br>", unsafe_allow_html=True)  # Align with metrics
        if st.button("❌", help="Quit session", use_container_width=True):
            return True

    st.progress(position / total)
    st.divider()
    return False


def render_session_complete(summary: SessionSummary) -> None:
    """Render session completion message."""
    if summary.graded == 0:
        return
    st.success(
        f"🎉 Session complete! You reviewed {summary.graded} cards "
        f"({summary.new_count} new, {summary.review_count} review)."
    )
    if summary.accuracy is not None:
        st.info(f"Accuracy: {summary.accuracy:.0%}")
    if summary.events_unsaved:
        st.warning(f"{summary.events_unsaved} history entries could not be saved.")
