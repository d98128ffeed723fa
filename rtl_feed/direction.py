"""Directional decisions for text shown on a left-to-right only surface."""

from __future__ import annotations

import logging
from typing import Optional

from .models import ALIGN_LEFT, ALIGN_RIGHT, DirectionalDecision, DirectionalMode
from .script import classify, normalize_finals

logger = logging.getLogger(__name__)

DEBUG_MARKER = "[RTL] "


def reverse_text(value: str) -> str:
    """Reverse the codepoint sequence of a string.

    Combining marks (niqqud) are not kept attached to their base letters.
    """
    return value[::-1]


def resolve(text: Optional[str], mode: DirectionalMode) -> DirectionalDecision:
    """Decide alignment and display text for a single string.

    Right-to-left handling applies when the mode forces it or when the text
    contains Hebrew. With reversal enabled the final letters are normalized
    and the string is reversed for visual order; otherwise the logical order
    is kept and only the alignment changes.
    """
    cleaned = (text or "").strip()
    is_hebrew = classify(cleaned)
    is_rtl = mode.force_rtl or is_hebrew

    transformed = cleaned
    if is_rtl and mode.reverse_enabled:
        transformed = reverse_text(normalize_finals(cleaned))

    if is_rtl and mode.debug_marker:
        transformed = DEBUG_MARKER + transformed

    logger.debug(
        "Resolved %r (hebrew=%s, forced=%s, reversed=%s)",
        cleaned,
        is_hebrew,
        mode.force_rtl,
        is_rtl and mode.reverse_enabled,
    )
    return DirectionalDecision(
        is_rtl=is_rtl,
        alignment=ALIGN_RIGHT if is_rtl else ALIGN_LEFT,
        transformed_text=transformed,
    )
