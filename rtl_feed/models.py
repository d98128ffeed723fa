"""Shared data models for rtl_feed."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

ALIGN_LEFT = "left"
ALIGN_RIGHT = "right"


@dataclass(frozen=True)
class FeedItem:
    """Title and body of a single feed entry, in feed order."""

    title: str
    body: str


@dataclass(frozen=True)
class DirectionalMode:
    """Flags that steer how a single string is prepared for display."""

    force_rtl: bool = False
    reverse_enabled: bool = True
    debug_marker: bool = False


@dataclass(frozen=True)
class DirectionalDecision:
    is_rtl: bool
    alignment: str
    transformed_text: str


@dataclass(frozen=True)
class HeaderBlock:
    text: str
    align: str
    fg: str
    bg: str


@dataclass(frozen=True)
class TextBlock:
    text: str
    align: str
    fg: str


@dataclass(frozen=True)
class SpacerBlock:
    height: int
    color: str


DisplayBlock = Union[HeaderBlock, TextBlock, SpacerBlock]
