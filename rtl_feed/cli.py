"""Command-line interface for the rtl_feed application."""

from __future__ import annotations

import argparse
import dataclasses
import logging
import pprint
from pathlib import Path
from typing import List, Optional

from .config import AppConfig, DisplayConfig, build_display_config, parse_app_config
from .feeds import FetchError
from .renderers import build_html_preview, build_json, build_text_preview
from .runner import run

logger = logging.getLogger(__name__)

FORMATS = {
    "json": build_json,
    "text": build_text_preview,
    "html": build_html_preview,
}


def build_parser() -> argparse.ArgumentParser:
    """Create the CLI argument parser."""
    parser = argparse.ArgumentParser(
        description="Prepare Hebrew feed headlines for a left-to-right display."
    )
    parser.add_argument(
        "--config",
        default=None,
        help="Path to the configuration XML file. Defaults are used when omitted.",
    )
    parser.add_argument(
        "--format",
        choices=sorted(FORMATS),
        default="json",
        help="Output format for the composed blocks.",
    )
    parser.add_argument(
        "--fallback",
        action="store_true",
        help="Show the fallback screen instead of failing when the fetch fails.",
    )

    # Overrides for the display settings
    parser.add_argument("--feed-url", default=None, help="Feed URL. Overrides config.")
    parser.add_argument(
        "--feed-name", default=None, help="Header label. Overrides config."
    )
    parser.add_argument(
        "--count", type=int, default=None, help="Number of articles (1-5)."
    )
    parser.add_argument(
        "--show-content",
        action="store_true",
        default=None,
        help="Show article bodies under their titles.",
    )
    parser.add_argument(
        "--force-rtl",
        action="store_true",
        default=None,
        help="Treat every article string as right-to-left.",
    )
    parser.add_argument(
        "--no-reverse",
        dest="reverse",
        action="store_false",
        default=None,
        help="Right-align RTL text without reversing it.",
    )
    parser.add_argument(
        "--debug-marker",
        action="store_true",
        default=None,
        help="Prefix RTL strings with a diagnostic marker.",
    )

    parser.add_argument(
        "--log-level",
        default=None,
        help="Logging level (e.g. DEBUG, INFO, WARNING). Overrides config.",
    )
    parser.add_argument(
        "--log-file",
        default=None,
        help="Optional path to a log file. Overrides config.",
    )
    return parser


def configure_logging(level_name: str, log_file: Optional[str] = None) -> None:
    """Initialise logging according to options."""
    log_level = getattr(logging, level_name.upper(), None)
    if not isinstance(log_level, int):
        raise ValueError(f"Unsupported log level: {level_name}")

    formatter = logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")

    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
        handler.close()

    root_logger.setLevel(log_level)

    stream_handler = logging.StreamHandler()
    stream_handler.setFormatter(formatter)
    root_logger.addHandler(stream_handler)

    if log_file:
        log_path = Path(log_file)
        if log_path.parent and not log_path.parent.exists():
            log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path, encoding="utf-8")
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)
        logger.debug(
            "Logger initialised with level %s and file output to %s",
            level_name.upper(),
            log_path,
        )
    else:
        logger.debug(
            "Logger initialised with console output at level %s", level_name.upper()
        )


def apply_overrides(display: DisplayConfig, args: argparse.Namespace) -> DisplayConfig:
    """Return a new DisplayConfig with command-line values taking precedence."""

    def pick(value, fallback):
        return fallback if value is None else value

    return build_display_config(
        feed_url=pick(args.feed_url, display.feed_url),
        feed_name=pick(args.feed_name, display.feed_name),
        article_count=pick(args.count, display.article_count),
        show_content=pick(args.show_content, display.show_content),
        force_rtl=pick(args.force_rtl, display.force_rtl),
        reverse_enabled=pick(args.reverse, display.reverse_enabled),
        debug_marker=pick(args.debug_marker, display.debug_marker),
        colors=display.colors,
        font=display.font,
    )


def main(argv: Optional[List[str]] = None) -> int:
    """CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        app_config = parse_app_config(args.config) if args.config else AppConfig()

        log_level = args.log_level or app_config.logging.level
        log_file = args.log_file or app_config.logging.file
        configure_logging(log_level, log_file)

        app_config = dataclasses.replace(
            app_config, display=apply_overrides(app_config.display, args)
        )
        config_dict = dataclasses.asdict(app_config)
        if config_dict["cache"].get("connection_string"):
            config_dict["cache"]["connection_string"] = "***MASKED***"

        logger.info("Active Configuration:\n%s", pprint.pformat(config_dict))

        result = run(app_config, fallback_on_error=args.fallback)
    except ValueError as exc:
        parser.error(str(exc))
    except (FetchError, FileNotFoundError) as exc:
        logger.error("%s", exc)
        return 1
    except Exception:  # noqa: BLE001
        logger.exception("Unexpected error during execution.")
        return 1

    print(FORMATS[args.format](result))
    return 0
