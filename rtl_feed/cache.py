"""Database-backed cache for fetched feed documents."""

from __future__ import annotations

import logging
import threading
import time
import weakref
from typing import Callable, Optional

from sqlalchemy import Column, Float, LargeBinary, String, create_engine, select
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker
from sqlalchemy.pool import StaticPool

logger = logging.getLogger(__name__)

IN_MEMORY = "sqlite://"


class Base(DeclarativeBase):
    pass


class FeedDocumentModel(Base):
    """Raw feed body as last fetched from its URL."""

    __tablename__ = "feed_documents"

    url = Column(String, primary_key=True)
    body = Column(LargeBinary, nullable=False)
    fetched_at = Column(Float, nullable=False)


def init_engine(connection_string: Optional[str]) -> Engine:
    """Initialize the database engine, using in-memory SQLite by default."""
    connection_string = connection_string or IN_MEMORY
    logger.info("Initializing feed cache database: %s", connection_string)
    kwargs: dict = {}
    if connection_string.startswith("sqlite"):
        kwargs["connect_args"] = {"check_same_thread": False}
        if connection_string in (IN_MEMORY, "sqlite:///:memory:"):
            # Every session must see the same in-memory database.
            kwargs["poolclass"] = StaticPool
    engine = create_engine(connection_string, **kwargs)
    Base.metadata.create_all(engine)
    return engine


def get_session_factory(engine: Engine) -> sessionmaker[Session]:
    """Return a session factory for the given engine."""
    return sessionmaker(bind=engine)


def get_document(session: Session, url: str) -> Optional[FeedDocumentModel]:
    stmt = select(FeedDocumentModel).where(FeedDocumentModel.url == url)
    return session.execute(stmt).scalar_one_or_none()


def upsert_document(session: Session, url: str, body: bytes, fetched_at: float) -> None:
    """Insert or replace the cached body for a URL."""
    existing = get_document(session, url)
    if existing:
        existing.body = body
        existing.fetched_at = fetched_at
    else:
        session.add(FeedDocumentModel(url=url, body=body, fetched_at=fetched_at))

    try:
        session.commit()
    except Exception:
        session.rollback()
        raise


class FeedCache:
    """URL-keyed cache with a freshness window and one fetch in flight per URL."""

    def __init__(
        self,
        session_factory: sessionmaker[Session],
        ttl_seconds: float = 900,
        clock: Callable[[], float] = time.time,
    ):
        self.session_factory = session_factory
        self.ttl_seconds = ttl_seconds
        self.clock = clock
        # Locks live only while a fetch for their URL holds them.
        self._locks: weakref.WeakValueDictionary = weakref.WeakValueDictionary()
        self._locks_guard = threading.Lock()

    def _lock_for(self, url: str) -> threading.Lock:
        with self._locks_guard:
            lock = self._locks.get(url)
            if lock is None:
                lock = threading.Lock()
                self._locks[url] = lock
            return lock

    def get(self, url: str) -> Optional[bytes]:
        """Return the cached body if it is still fresh."""
        with self.session_factory() as session:
            entry = get_document(session, url)
            if entry is None:
                return None
            age = self.clock() - entry.fetched_at
            if age >= self.ttl_seconds:
                logger.debug("Cache entry for %s expired (%.0fs old)", url, age)
                return None
            return entry.body

    def put(self, url: str, body: bytes) -> None:
        with self.session_factory() as session:
            upsert_document(session, url, body, self.clock())

    def get_or_fetch(self, url: str, fetcher: Callable[[str], bytes]) -> bytes:
        """Serve a fresh entry or call ``fetcher`` and store its result.

        Errors raised by ``fetcher`` propagate and nothing is stored, so the
        next call retries the fetch.
        """
        with self._lock_for(url):
            cached = self.get(url)
            if cached is not None:
                logger.debug("Cache hit for %s", url)
                return cached

            logger.debug("Cache miss for %s", url)
            body = fetcher(url)
            self.put(url, body)
            return body
