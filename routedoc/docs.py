"""Markdown and JSON assembly for extracted route definitions."""

from __future__ import annotations

import json
import logging
import textwrap
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

from . import config
from .errors import SourceError
from .models import ParsedFile, RouteFile, SyntaxNode
from .query import search

logger = logging.getLogger(__name__)


QUOTED_KEY_CRITERIA = {"type": "pair", "key": {"type": "string"}}


def _identifier_key_criteria(name: str) -> dict:
    return {
        "type": "pair",
        "key": {"type": "property_identifier", "name": name},
    }


def _string_value(node: Optional[SyntaxNode], parsed: Optional[ParsedFile]) -> Optional[str]:
    if node is None:
        return None
    if node.type == "string":
        return "".join(str(fragment.field("value", "")) for fragment in node.field("children", ()))
    if parsed is not None:
        return parsed.snippet(node)
    return None


def _property_value(properties: Sequence[SyntaxNode], name: str) -> Optional[SyntaxNode]:
    pairs = search(properties, _identifier_key_criteria(name), array=True)
    if pairs:
        return pairs[0].field("value")

    # The loose matcher also accepts a string *value*, so check the key itself.
    for pair in search(properties, QUOTED_KEY_CRITERIA, array=True):
        key = pair.field("key")
        if key.type == "string" and _string_value(key, None) == name:
            return pair.field("value")
    return None


def route_summary(route: SyntaxNode, parsed: Optional[ParsedFile] = None) -> Tuple[Optional[str], Optional[str]]:
    """Return the ``(method, path)`` declared by a route object literal."""
    properties = route.field("properties", ())
    method, path = (
        _string_value(_property_value(properties, name), parsed)
        for name in ("method", "path")
    )
    return (method.upper() if method else None), path


def _route_source(route: SyntaxNode, parsed: ParsedFile) -> str:
    # Pad the first line so dedent sees the original indentation.
    text = " " * route.loc.column + parsed.snippet(route)
    return textwrap.dedent(text).strip("\n")


def render_markdown(route_files: Sequence[RouteFile], title: str = config.DEFAULT_TITLE) -> str:
    lines: List[str] = [f"# {title}", ""]

    for route_file in route_files:
        lines.append(f"## {route_file.name}")
        lines.append("")
        if not route_file.routes:
            lines.append("_No routes defined._")
            lines.append("")
            continue

        for index, route in enumerate(route_file.routes, 1):
            method, path = route_summary(route, route_file.parsed)
            heading = " ".join(part for part in (method, path) if part) or f"Route {index}"
            lines.append(f"### {heading}")
            lines.append("")
            lines.append(f"Defined in `{route_file.name}` at line {route.loc.line}.")
            lines.append("")
            if route_file.parsed is not None:
                lines.append("```js")
                lines.append(_route_source(route, route_file.parsed))
                lines.append("```")
                lines.append("")

    return "\n".join(lines)


def render_json(route_files: Sequence[RouteFile], title: str = config.DEFAULT_TITLE) -> str:
    """Render the route syntax trees as JSON, one entry per file."""
    payload = {
        "title": title,
        "files": [
            {
                "file": route_file.name,
                "routes": [route.to_dict() for route in route_file.routes],
            }
            for route_file in route_files
        ],
    }
    return json.dumps(payload, indent=2) + "\n"


RENDERERS = {
    "markdown": render_markdown,
    "json": render_json,
}


def write_output(text: str, output_path: Path) -> Path:
    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(text, encoding="utf-8")
        output_path.chmod(config.OUTPUT_MODE)
    except OSError as exc:
        raise SourceError(f"Could not write output {output_path}: {exc}") from exc
    logger.info("Wrote %s", output_path)
    return output_path
