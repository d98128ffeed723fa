"""Hebrew script detection and final-letter normalization."""

from __future__ import annotations

import re
from typing import Optional

# Hebrew block plus the Alphabetic Presentation Forms used for Hebrew.
_HEBREW_RE = re.compile(r"[\u0590-\u05FF\uFB1D-\uFB4F]")

FINAL_FORMS = {
    "ך": "כ",  # final kaf -> kaf
    "ם": "מ",  # final mem -> mem
    "ן": "נ",  # final nun -> nun
    "ף": "פ",  # final pe -> pe
    "ץ": "צ",  # final tsadi -> tsadi
}

_FINALS_TABLE = str.maketrans(FINAL_FORMS)


def classify(text: Optional[str]) -> bool:
    """Return True if the text contains any Hebrew codepoint.

    The whole string is classified at once; mixed-direction runs inside a
    string are not detected.
    """
    if not text:
        return False
    return bool(_HEBREW_RE.search(text))


def normalize_finals(text: Optional[str]) -> str:
    """Replace the five Hebrew final-letter forms with their base letters.

    Fixed-width display fonts ship no glyphs for the final forms, so they
    are mapped before rendering. Every mapping is one codepoint to one
    codepoint, so the length of the text is preserved.
    """
    if not text:
        return ""
    return text.translate(_FINALS_TABLE)
