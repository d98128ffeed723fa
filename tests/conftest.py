import types

import pytest

from rtl_feed import cache

RSS_TEMPLATE = """<?xml version="1.0" encoding="UTF-8"?>
<rss version="2.0">
  <channel>
    <title>Test feed</title>
    <link>https://example.com</link>
    <description>Test</description>
{items}
  </channel>
</rss>
"""


def make_rss(items):
    """Build RSS bytes from (title, description) pairs; None omits the element."""
    rendered = []
    for title, description in items:
        parts = ["    <item>"]
        if title is not None:
            parts.append(f"      <title>{title}</title>")
        if description is not None:
            parts.append(f"      <description>{description}</description>")
        parts.append("    </item>")
        rendered.append("\n".join(parts))
    return RSS_TEMPLATE.format(items="\n".join(rendered)).encode("utf-8")


class FakeClock:
    def __init__(self, start=1_000_000.0):
        self.now = start

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


class FakeSession:
    """Stands in for requests.Session, replaying canned responses."""

    def __init__(self, status_code=200, content=b"", text=None):
        self.status_code = status_code
        self.content = content
        self.text = text if text is not None else content.decode("utf-8", "replace")
        self.calls = []
        self.headers = {}

    def get(self, url, timeout=None):
        self.calls.append(url)
        return types.SimpleNamespace(
            status_code=self.status_code, content=self.content, text=self.text
        )


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def session_factory():
    engine = cache.init_engine("sqlite:///:memory:")
    return cache.get_session_factory(engine)


@pytest.fixture
def feed_cache(session_factory, clock):
    return cache.FeedCache(session_factory, ttl_seconds=900, clock=clock)
