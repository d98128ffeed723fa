"""Feed fetching and item extraction."""

from __future__ import annotations

import logging
import re
from typing import Any, List, Optional

import feedparser
import requests
from bs4 import BeautifulSoup

from .cache import FeedCache
from .models import FeedItem

logger = logging.getLogger(__name__)

USER_AGENT = "rtl-feed/1.0 (+https://github.com/rtl-feed)"


class FetchError(RuntimeError):
    """Raised when the feed could not be downloaded successfully."""

    def __init__(self, status: Optional[int], body: str):
        super().__init__(f"Feed fetch failed with status {status}: {body[:200]}")
        self.status = status
        self.body = body


class FeedSource:
    """Downloads feed documents through a time-bounded cache."""

    def __init__(
        self,
        cache: FeedCache,
        session: Optional[requests.Session] = None,
        timeout: float = 10.0,
    ):
        self.cache = cache
        self.timeout = timeout
        if session is None:
            session = requests.Session()
            session.headers.update({"User-Agent": USER_AGENT})
        self.session = session

    def fetch(self, url: str) -> bytes:
        """Return the feed body, from cache when still fresh."""
        return self.cache.get_or_fetch(url, self._download)

    def _download(self, url: str) -> bytes:
        logger.info("Fetching feed %s", url)
        try:
            response = self.session.get(url, timeout=self.timeout)
        except requests.RequestException as exc:
            logger.warning("Failed to fetch feed %s: %s", url, exc)
            raise FetchError(None, str(exc)) from exc

        if response.status_code != 200:
            logger.warning(
                "Feed %s returned status %d", url, response.status_code
            )
            raise FetchError(response.status_code, response.text)

        logger.info("Fetched %d bytes from %s", len(response.content), url)
        return response.content


def parse_document(content: bytes) -> Any:
    """Parse raw feed markup; parser warnings are logged and tolerated."""
    parsed = feedparser.parse(content)
    if getattr(parsed, "bozo", False):
        logger.warning(
            "Feed parsing warning: %s", getattr(parsed, "bozo_exception", "unknown")
        )
    return parsed


def _strip_html(raw_value: str) -> str:
    """Return text content extracted from HTML fragments."""
    soup = BeautifulSoup(raw_value, "html.parser")
    text = soup.get_text(separator=" ", strip=True)
    text = re.sub(r"\s+([.,;:!?])", r"\1", text)
    text = re.sub(r"\s{2,}", " ", text)
    return text.strip()


def _entry_title(entry: Any) -> Optional[str]:
    return getattr(entry, "title", None) or None


def _entry_body(entry: Any) -> Optional[str]:
    """Read the body, trying summary, summary_detail and content in turn."""
    body = getattr(entry, "summary", None)
    if not body:
        summary_detail = getattr(entry, "summary_detail", None)
        if summary_detail:
            body = summary_detail.get("value")
    if not body:
        content = getattr(entry, "content", None)
        if content:
            try:
                body = content[0].get("value")
            except (TypeError, KeyError, IndexError, AttributeError):
                body = None
    return body or None


def _as_text(value: Optional[str]) -> str:
    if value is None:
        return ""
    return _strip_html(value)


def extract_items(parsed: Any, count: int) -> List[FeedItem]:
    """Return title and body for the first ``count`` entries of a parsed feed."""
    entries = list(getattr(parsed, "entries", None) or [])
    if not entries:
        logger.info("Feed contains no items")
        return []

    items: List[FeedItem] = []
    for position, entry in enumerate(entries[:count], start=1):
        title = _entry_title(entry)
        body = _entry_body(entry)
        if title is None:
            logger.debug("Item %d has no title", position)
        if body is None:
            logger.debug("Item %d has no body", position)
        items.append(FeedItem(title=_as_text(title), body=_as_text(body)))

    logger.info("Extracted %d of %d items (requested %d)", len(items), len(entries), count)
    return items
