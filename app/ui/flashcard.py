"""
Flashcard UI Component

Renders one side of a card.
"""

from __future__ import annotations

import html

import streamlit as st
from app.ui.flashcard_style import (
    CARD_MIN_HEIGHT,
    CARD_PADDING,
    FRONT_FLASHCARD_STYLE,
    FlashcardStyle,
)


def render_flashcard(
    text: str,
    corner_text: str = "",
    style: FlashcardStyle | None = None,
) -> None:
    """
    Render a flashcard side.

    Args:
        text: Card text (escaped before rendering)
        corner_text: Optional status label in the top-right corner
        style: Style preset (front style by default)
    """
    style = style or FRONT_FLASHCARD_STYLE

    corner_html = ""
    if corner_text:
        corner_html = (
            f'<div style="position: absolute; top: 12px; right: 18px; '
            f'font-size: {style.corner_font_size}; color: {style.corner_color};">'
            f"{html.escape(corner_text)}</div>"
        )

    main_html = (
        f'<h1 style="font-size: {style.font_size}; color: {style.color}; margin: 0; '
        'text-align: center; line-height: 1.4; overflow-wrap: anywhere;">'
        f"{html.escape(text)}</h1>"
    )

    card_html = (
        f'<div style="background-color: {style.bg_color}; padding: {CARD_PADDING}; '
        'border-radius: 15px; box-shadow: 0 4px 6px rgba(0, 0, 0, 0.1); '
        f'min-height: {CARD_MIN_HEIGHT}; display: flex; align-items: center; '
        f'justify-content: center; position: relative;">{corner_html}{main_html}</div>'
    )

    st.markdown(card_html, unsafe_allow_html=True)
