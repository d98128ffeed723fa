"""Output helpers for rendered block sequences."""

from __future__ import annotations

import dataclasses
import json
from typing import Any, Dict, List

from .runner import RunResult
from .templating import block_type, get_environment

PREVIEW_WIDTH = 32


def block_to_dict(block: Any) -> Dict[str, Any]:
    """Serialise a display block, tagging it with its type."""
    data = {"type": block_type(block)}
    data.update(dataclasses.asdict(block))
    return data


def build_json(result: RunResult) -> str:
    blocks: List[Dict[str, Any]] = [block_to_dict(block) for block in result.blocks]
    payload = {"font": result.font, "fallback": result.is_fallback, "blocks": blocks}
    return json.dumps(payload, indent=2, ensure_ascii=False)


def build_text_preview(result: RunResult, width: int = PREVIEW_WIDTH) -> str:
    """Render a fixed-width plain-text preview of the blocks."""
    template = get_environment().get_template("preview.txt.j2")
    return template.render(result=result, width=width)


def build_html_preview(result: RunResult) -> str:
    """Render an HTML preview laid out left to right, as the display is."""
    template = get_environment().get_template("preview.html.j2")
    return template.render(result=result)
