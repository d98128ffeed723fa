"""Jinja2 environment for rtl_feed templates."""

from __future__ import annotations

from importlib import resources

from jinja2 import Environment, FileSystemLoader, select_autoescape

from .models import HeaderBlock, SpacerBlock, TextBlock

_ENV: Environment | None = None


def block_type(block: object) -> str:
    if isinstance(block, HeaderBlock):
        return "header"
    if isinstance(block, TextBlock):
        return "text"
    if isinstance(block, SpacerBlock):
        return "spacer"
    raise TypeError(f"Unknown display block: {block!r}")


def _fit(value: str, width: int, align: str) -> str:
    """Pad or cut text to a fixed width using its alignment."""
    if len(value) > width:
        return value[:width]
    if align == "right":
        return value.rjust(width)
    return value.ljust(width)


def get_environment() -> Environment:
    """Return a cached Jinja environment configured for package templates."""
    global _ENV
    if _ENV is None:
        template_dir = resources.files(__package__) / "templates"
        loader = FileSystemLoader(str(template_dir))
        _ENV = Environment(
            loader=loader,
            autoescape=select_autoescape(["html", "xml", "html.j2"]),
            trim_blocks=True,
            lstrip_blocks=True,
        )
        _ENV.filters["block_type"] = block_type
        _ENV.filters["fit"] = _fit
    return _ENV
