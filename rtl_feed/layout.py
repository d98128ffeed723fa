"""Composition of the display block sequence for one render pass."""

from __future__ import annotations

import logging
from typing import List, Sequence

from .config import DisplayConfig
from .direction import resolve
from .models import DisplayBlock, FeedItem, HeaderBlock, SpacerBlock, TextBlock

logger = logging.getLogger(__name__)

SPACER_HEIGHT = 4
NO_ITEMS_MESSAGE = "No items"


def _header(config: DisplayConfig) -> HeaderBlock:
    decision = resolve(config.feed_name, config.header_mode())
    return HeaderBlock(
        text=decision.transformed_text,
        align=decision.alignment,
        fg=config.colors.header_fg,
        bg=config.colors.header_bg,
    )


def compose(config: DisplayConfig, items: Sequence[FeedItem]) -> List[DisplayBlock]:
    """Build the header followed by title, optional body and spacer per item."""
    mode = config.article_mode()
    blocks: List[DisplayBlock] = [_header(config)]

    for item in items[: config.article_count]:
        title = resolve(item.title, mode)
        blocks.append(
            TextBlock(
                text=title.transformed_text,
                align=title.alignment,
                fg=config.colors.title,
            )
        )
        if config.show_content:
            body = resolve(item.body, mode)
            blocks.append(
                TextBlock(
                    text=body.transformed_text,
                    align=body.alignment,
                    fg=config.colors.body,
                )
            )
        blocks.append(SpacerBlock(height=SPACER_HEIGHT, color=config.colors.spacer))

    logger.debug("Composed %d blocks", len(blocks))
    return blocks


def compose_fallback(
    config: DisplayConfig, message: str = NO_ITEMS_MESSAGE
) -> List[DisplayBlock]:
    """Header plus a single message line, shown when there is nothing to list."""
    decision = resolve(message, config.header_mode())
    return [
        _header(config),
        TextBlock(
            text=decision.transformed_text,
            align=decision.alignment,
            fg=config.colors.body,
        ),
    ]
