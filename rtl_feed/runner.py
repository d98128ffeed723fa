"""High-level orchestration of a single render pass."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional

from . import cache
from .config import AppConfig, DisplayConfig
from .feeds import FeedSource, FetchError, extract_items, parse_document
from .layout import compose, compose_fallback
from .models import DisplayBlock

logger = logging.getLogger(__name__)


@dataclass
class RunResult:
    """Blocks produced by a render pass, ready for the renderer."""

    blocks: List[DisplayBlock]
    font: str
    is_fallback: bool = False


def build_source(app_config: AppConfig) -> FeedSource:
    """Create a FeedSource backed by the configured cache database."""
    engine = cache.init_engine(app_config.cache.connection_string)
    feed_cache = cache.FeedCache(
        cache.get_session_factory(engine), ttl_seconds=app_config.cache.ttl_seconds
    )
    return FeedSource(feed_cache)


def execute(
    config: DisplayConfig, source: FeedSource, fallback_on_error: bool = False
) -> RunResult:
    """Fetch, extract and compose the display blocks for ``config``.

    A failed fetch aborts the pass with FetchError. With
    ``fallback_on_error`` the fallback screen is returned instead.
    """
    try:
        content = source.fetch(config.feed_url)
    except FetchError as exc:
        if not fallback_on_error:
            raise
        logger.error("Could not fetch %s: %s", config.feed_url, exc)
        return RunResult(
            blocks=compose_fallback(config), font=config.font, is_fallback=True
        )

    items = extract_items(parse_document(content), config.article_count)
    if not items:
        logger.info("No items in %s; showing fallback", config.feed_url)
        return RunResult(
            blocks=compose_fallback(config), font=config.font, is_fallback=True
        )

    blocks = compose(config, items)
    logger.info("Rendered %d items into %d blocks", len(items), len(blocks))
    return RunResult(blocks=blocks, font=config.font)


def run(
    app_config: AppConfig,
    source: Optional[FeedSource] = None,
    fallback_on_error: bool = False,
) -> RunResult:
    """Run one pass with a source built from ``app_config`` unless given."""
    if source is None:
        source = build_source(app_config)
    return execute(app_config.display, source, fallback_on_error=fallback_on_error)
