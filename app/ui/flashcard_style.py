"""
Flashcard style presets and constants.
"""

from __future__ import annotations

from dataclasses import dataclass, replace


# ---- Shared Card Layout ----

CARD_PADDING = "35px 24px"
CARD_MIN_HEIGHT = "180px"
FRONT_BG_COLOR = "#f0f2f6"
BACK_BG_COLOR = "#e8f4f8"


@dataclass(frozen=True)
class FlashcardStyle:
    """
    Visual style preset for flashcards.
    """
    font_size: str = "2.6em"
    color: str = "#1f1f1f"
    corner_font_size: str = "0.8em"
    corner_color: str = "#666"
    bg_color: str = FRONT_BG_COLOR


FRONT_FLASHCARD_STYLE = FlashcardStyle()
BACK_FLASHCARD_STYLE = replace(FRONT_FLASHCARD_STYLE, font_size="2em", bg_color=BACK_BG_COLOR)
