"""
Dutch Flashcards - Main App

Thin Streamlit UI over the spaced-repetition session controller.

Run with:
    streamlit run app/streamlit_app.py
"""

import streamlit as st

from app.router import PAGES
from app.state import ensure_session_state, init_database


# ---- Page Setup ----

st.set_page_config(
    page_title="Dutch Flashcards",
    page_icon="🇳🇱",
    layout="centered"
)

init_database()
ensure_session_state()


# ---- Pages ----

tabs = st.tabs([page.title for page in PAGES])
for tab, page in zip(tabs, PAGES):
    with tab:
        page.render()
