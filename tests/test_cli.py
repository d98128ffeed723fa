import json
import logging

from rtl_feed import cli
from rtl_feed.config import AppConfig, CacheConfig, LoggingConfig, build_display_config
from rtl_feed.layout import NO_ITEMS_MESSAGE
from rtl_feed.models import TextBlock
from rtl_feed.runner import RunResult

from conftest import FakeSession


def _restore_handlers(original_handlers):
    for handler in logging.getLogger().handlers[:]:
        logging.getLogger().removeHandler(handler)
        handler.close()
    for handler in original_handlers:
        logging.getLogger().addHandler(handler)


def test_configure_logging_defaults_to_console_only():
    original_handlers = list(logging.getLogger().handlers)
    try:
        cli.configure_logging("INFO")

        handlers = logging.getLogger().handlers
        assert any(isinstance(handler, logging.StreamHandler) for handler in handlers)
        assert not any(isinstance(handler, logging.FileHandler) for handler in handlers)
    finally:
        _restore_handlers(original_handlers)


def test_configure_logging_with_log_file_creates_file_handler(tmp_path):
    original_handlers = list(logging.getLogger().handlers)
    try:
        log_path = tmp_path / "logs" / "custom.log"
        cli.configure_logging("INFO", str(log_path))

        assert log_path.exists()
        handlers = logging.getLogger().handlers
        assert any(isinstance(handler, logging.FileHandler) for handler in handlers)
    finally:
        _restore_handlers(original_handlers)


def test_main_applies_overrides_and_prints_json(monkeypatch, capsys):
    captured = {}

    def fake_run(app_config, fallback_on_error=False):
        captured["config"] = app_config
        captured["fallback"] = fallback_on_error
        return RunResult(
            blocks=[TextBlock(text="x", align="left", fg="#FFFFFF")], font="tb-8"
        )

    monkeypatch.setattr(cli, "configure_logging", lambda level, log_file=None: None)
    monkeypatch.setattr(cli, "run", fake_run)

    exit_code = cli.main(
        ["--feed-name", "חדשות", "--count", "2", "--no-reverse", "--force-rtl", "--fallback"]
    )

    assert exit_code == 0
    display = captured["config"].display
    assert display.feed_name == "חדשות"
    assert display.article_count == 2
    assert not display.reverse_enabled
    assert display.force_rtl
    assert not display.show_content
    assert captured["fallback"] is True
    payload = json.loads(capsys.readouterr().out)
    assert payload["blocks"][0]["text"] == "x"


def test_main_loads_config_file(monkeypatch):
    captured = {}
    app_config = AppConfig(
        display=build_display_config(feed_name="From file", show_content=True),
        logging=LoggingConfig(level="WARNING"),
    )

    monkeypatch.setattr(cli, "parse_app_config", lambda path: app_config)
    monkeypatch.setattr(
        cli,
        "configure_logging",
        lambda level, log_file=None: captured.update(level=level),
    )
    monkeypatch.setattr(
        cli,
        "run",
        lambda config, fallback_on_error=False: captured.update(config=config)
        or RunResult(blocks=[], font="tb-8"),
    )

    assert cli.main(["--config", "config.xml", "--format", "text"]) == 0
    assert captured["level"] == "WARNING"
    assert captured["config"].display.feed_name == "From file"
    assert captured["config"].display.show_content


def test_main_fetch_failure_exits_with_error_and_prints_nothing(monkeypatch, capsys):
    monkeypatch.setattr(cli, "configure_logging", lambda level, log_file=None: None)
    monkeypatch.setattr(
        "rtl_feed.feeds.requests.Session",
        lambda: FakeSession(status_code=404, content=b"Not Found"),
    )

    assert cli.main(["--feed-url", "https://example.com/missing.xml"]) == 1
    assert capsys.readouterr().out == ""


def test_main_fallback_flag_prints_fallback_on_fetch_failure(monkeypatch, capsys):
    monkeypatch.setattr(cli, "configure_logging", lambda level, log_file=None: None)
    monkeypatch.setattr(
        "rtl_feed.feeds.requests.Session",
        lambda: FakeSession(status_code=404, content=b"Not Found"),
    )

    assert cli.main(["--fallback"]) == 0
    payload = json.loads(capsys.readouterr().out)
    assert payload["fallback"] is True
    assert payload["blocks"][1]["text"] == NO_ITEMS_MESSAGE


def test_main_masks_cache_connection_string(monkeypatch, caplog):
    app_config = AppConfig(
        cache=CacheConfig(connection_string="postgresql://user:secret@db/feeds"),
    )

    monkeypatch.setattr(cli, "parse_app_config", lambda path: app_config)
    monkeypatch.setattr(cli, "configure_logging", lambda level, log_file=None: None)
    monkeypatch.setattr(
        cli, "run", lambda config, fallback_on_error=False: RunResult(blocks=[], font="tb-8")
    )

    with caplog.at_level(logging.INFO, logger="rtl_feed.cli"):
        assert cli.main(["--config", "config.xml"]) == 0

    assert "secret" not in caplog.text
    assert "***MASKED***" in caplog.text
