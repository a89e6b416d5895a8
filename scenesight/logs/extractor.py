"""Pull scenes out of free-form debug logs.

Producers print scenes as ``{graphics: {...}}`` or ``:graphics {...}``,
often in relaxed JSON (bare keys, single quotes, trailing commas).
Fragments that cannot be repaired or validated are skipped with a warning.
"""

from __future__ import annotations

import json
import logging
import re
from typing import Any

from pydantic import ValidationError

from scenesight.models.options import RenderOptions
from scenesight.models.scene import Scene
from scenesight.svg.renderer import get_svg_from_scene

logger = logging.getLogger(__name__)

DEFAULT_TITLE = "Untitled Graphic"
MARKDOWN_HEADING = "# Debug Graphics"

# Braces nest up to three levels inside the graphics payload; Python's re has
# no recursion, so the nesting is spelled out.
_NESTED = r"\{(?:[^{}]|\{(?:[^{}]|\{[^{}]*\})*\})*\}"
_GRAPHICS_RE = re.compile(
    r"(?:\{\s*(?:\"graphics\"|graphics)\s*:\s*" + _NESTED + r"\s*\})"
    r"|(?::graphics\s+" + _NESTED + r")"
)

_BARE_KEY_RE = re.compile(r"(\b\w+)(?=\s*:)")
_TRAILING_COMMA_RE = re.compile(r",(\s*[}\]])")
_SINGLE_QUOTED_RE = re.compile(r":\s*'([^']*)'")


def _repair_relaxed_json(fragment: str) -> str:
    fixed = _BARE_KEY_RE.sub(r'"\1"', fragment)
    fixed = _TRAILING_COMMA_RE.sub(r"\1", fixed)
    return _SINGLE_QUOTED_RE.sub(r':"\1"', fixed)


def _parse_fragment(fragment: str) -> dict[str, Any] | None:
    payload = fragment[fragment.index("{"):] if fragment.startswith(":graphics") else fragment
    try:
        return json.loads(payload)
    except json.JSONDecodeError:
        pass
    try:
        return json.loads(_repair_relaxed_json(payload))
    except json.JSONDecodeError as e:
        logger.warning("Failed to parse graphics fragment %.80r: %s", fragment, e)
        return None


def get_scenes_from_log_string(log_string: str) -> list[Scene]:
    """Every valid scene in ``log_string``, in order of appearance."""
    scenes: list[Scene] = []
    for match in _GRAPHICS_RE.finditer(log_string):
        parsed = _parse_fragment(match.group(0))
        if not isinstance(parsed, dict):
            continue
        try:
            scenes.append(Scene.model_validate(parsed))
        except ValidationError as e:
            logger.warning(
                "Skipping graphics fragment with invalid scene (%d errors)", e.error_count()
            )
    logger.debug("Extracted %d scenes from %d chars of log", len(scenes), len(log_string))
    return scenes


def get_svg_from_log_string(log_string: str, options: RenderOptions | None = None) -> str:
    """SVG of the first scene in the log, or an empty string when there is none."""
    scenes = get_scenes_from_log_string(log_string)
    if not scenes:
        return ""
    return get_svg_from_scene(scenes[0], options)


def get_svgs_from_log_string(
    log_string: str, options: RenderOptions | None = None
) -> list[dict[str, str]]:
    return [
        {"title": scene.title or DEFAULT_TITLE, "svg": get_svg_from_scene(scene, options)}
        for scene in get_scenes_from_log_string(log_string)
    ]


def get_markdown_from_log_string(log_string: str, options: RenderOptions | None = None) -> str:
    svg = get_svg_from_log_string(log_string, options)
    if not svg:
        return ""
    return f"{MARKDOWN_HEADING}\n\n{svg}"
