"""Configuration loading for rtl_feed."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional
from xml.etree import ElementTree as ET

from .models import DirectionalMode

logger = logging.getLogger(__name__)

DEFAULT_FEED_URL = "https://www.ynet.co.il/Integration/StoryRss2.xml"
DEFAULT_FEED_NAME = "ynet"
DEFAULT_ARTICLE_COUNT = 3
MIN_ARTICLE_COUNT = 1
MAX_ARTICLE_COUNT = 5
DEFAULT_CACHE_TTL = 900
DEFAULT_FONT = "tb-8"
FONTS = ("tb-8", "tom-thumb", "5x8", "6x13", "Dina_r400-6", "10x20")


class ConfigError(ValueError):
    """Raised when a configuration value cannot be interpreted."""


@dataclass(frozen=True)
class ColorScheme:
    header_fg: str = "#FFFFFF"
    header_bg: str = "#0038B8"
    title: str = "#FFD700"
    body: str = "#CCCCCC"
    spacer: str = "#000000"


@dataclass(frozen=True)
class DisplayConfig:
    """Immutable settings for one render pass."""

    feed_url: str = DEFAULT_FEED_URL
    feed_name: str = DEFAULT_FEED_NAME
    article_count: int = DEFAULT_ARTICLE_COUNT
    show_content: bool = False
    force_rtl: bool = False
    reverse_enabled: bool = True
    debug_marker: bool = False
    colors: ColorScheme = field(default_factory=ColorScheme)
    font: str = DEFAULT_FONT

    def article_mode(self) -> DirectionalMode:
        """Mode applied to article titles and bodies."""
        return DirectionalMode(
            force_rtl=self.force_rtl,
            reverse_enabled=self.reverse_enabled,
            debug_marker=self.debug_marker,
        )

    def header_mode(self) -> DirectionalMode:
        """Mode applied to the feed name; direction comes from detection only."""
        return DirectionalMode(
            force_rtl=False,
            reverse_enabled=self.reverse_enabled,
            debug_marker=False,
        )


@dataclass(frozen=True)
class CacheConfig:
    connection_string: Optional[str] = None
    ttl_seconds: int = DEFAULT_CACHE_TTL


@dataclass(frozen=True)
class LoggingConfig:
    level: str = "INFO"
    file: Optional[str] = None


@dataclass(frozen=True)
class AppConfig:
    display: DisplayConfig = field(default_factory=DisplayConfig)
    cache: CacheConfig = field(default_factory=CacheConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def build_display_config(
    feed_url: Optional[str] = None,
    feed_name: Optional[str] = None,
    article_count: int = DEFAULT_ARTICLE_COUNT,
    show_content: bool = False,
    force_rtl: bool = False,
    reverse_enabled: bool = True,
    debug_marker: bool = False,
    colors: Optional[ColorScheme] = None,
    font: Optional[str] = None,
) -> DisplayConfig:
    """Return a DisplayConfig with defaults applied to missing or bad values."""
    feed_url = (feed_url or "").strip() or DEFAULT_FEED_URL
    feed_name = (feed_name or "").strip() or DEFAULT_FEED_NAME

    clamped = max(MIN_ARTICLE_COUNT, min(MAX_ARTICLE_COUNT, article_count))
    if clamped != article_count:
        logger.warning(
            "Article count %d out of range [%d, %d]; using %d",
            article_count,
            MIN_ARTICLE_COUNT,
            MAX_ARTICLE_COUNT,
            clamped,
        )

    if font and font not in FONTS:
        logger.warning("Unknown font '%s'; falling back to %s", font, DEFAULT_FONT)
        font = None

    return DisplayConfig(
        feed_url=feed_url,
        feed_name=feed_name,
        article_count=clamped,
        show_content=show_content,
        force_rtl=force_rtl,
        reverse_enabled=reverse_enabled,
        debug_marker=debug_marker,
        colors=colors or ColorScheme(),
        font=font or DEFAULT_FONT,
    )


def _parse_bool(node: ET.Element, tag: str, default: bool) -> bool:
    value = node.findtext(tag)
    if value is None or not value.strip():
        return default
    value = value.strip().lower()
    if value in ("true", "yes", "1"):
        return True
    if value in ("false", "no", "0"):
        return False
    raise ConfigError(f"<{tag}> must be true or false, got '{value}'")


def _parse_int(node: ET.Element, tag: str, default: int) -> int:
    value = node.findtext(tag)
    if value is None or not value.strip():
        return default
    try:
        return int(value.strip())
    except ValueError:
        raise ConfigError(f"<{tag}> must be an integer, got '{value.strip()}'")


def _resolve_sqlite_path(base_path: Path, connection_string: str) -> str:
    """Anchor relative sqlite database paths at the config file directory."""
    prefix = "sqlite:///"
    if not connection_string.startswith(prefix):
        return connection_string
    target = connection_string[len(prefix):]
    if not target or target == ":memory:" or Path(target).is_absolute():
        return connection_string
    return prefix + str((base_path.parent / target).resolve())


def parse_app_config(path: str) -> AppConfig:
    """Parse the main application configuration XML."""
    config_path = Path(path).resolve()
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    logger.info("Loading application configuration from %s", config_path)
    try:
        root = ET.parse(config_path).getroot()
    except ET.ParseError as exc:
        raise ConfigError(f"Config file is not valid XML: {exc}")

    colors = ColorScheme()
    colors_node = root.find("colors")
    if colors_node is not None:

        def color(tag: str, default: str) -> str:
            return (colors_node.findtext(tag) or "").strip() or default

        colors = ColorScheme(
            header_fg=color("header-fg", colors.header_fg),
            header_bg=color("header-bg", colors.header_bg),
            title=color("title", colors.title),
            body=color("body", colors.body),
            spacer=color("spacer", colors.spacer),
        )

    display = build_display_config(
        feed_url=root.findtext("feed-url"),
        feed_name=root.findtext("feed-name"),
        article_count=_parse_int(root, "article-count", DEFAULT_ARTICLE_COUNT),
        show_content=_parse_bool(root, "show-content", False),
        force_rtl=_parse_bool(root, "force-rtl", False),
        reverse_enabled=_parse_bool(root, "reverse", True),
        debug_marker=_parse_bool(root, "debug-marker", False),
        colors=colors,
        font=(root.findtext("font") or "").strip() or None,
    )

    cache = CacheConfig()
    cache_node = root.find("cache")
    if cache_node is not None:
        connection_string = (cache_node.findtext("connection-string") or "").strip()
        ttl = _parse_int(cache_node, "ttl-seconds", DEFAULT_CACHE_TTL)
        if ttl <= 0:
            raise ConfigError("<ttl-seconds> must be positive.")
        cache = CacheConfig(
            connection_string=(
                _resolve_sqlite_path(config_path, connection_string)
                if connection_string
                else None
            ),
            ttl_seconds=ttl,
        )

    logging_config = LoggingConfig()
    log_node = root.find("logging")
    if log_node is not None:
        log_file = (log_node.findtext("file") or "").strip()
        if log_file and not Path(log_file).is_absolute():
            log_file = str((config_path.parent / log_file).resolve())
        logging_config = LoggingConfig(
            level=(log_node.findtext("level") or "INFO").strip(),
            file=log_file or None,
        )

    return AppConfig(display=display, cache=cache, logging=logging_config)
