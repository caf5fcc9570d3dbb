"""Core data models shared by the parser, query engine and extractor."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterator, Optional, Tuple, Union

Primitive = Union[str, int, float, bool, None]
FieldValue = Union["SyntaxNode", Tuple["SyntaxNode", ...], Primitive]


@dataclass(frozen=True)
class Location:
    line: int
    column: int


@dataclass(frozen=True)
class SyntaxNode:
    """One tagged construct of a parsed source file.

    ``fields`` keeps the grammar's child order.  ``loc`` and ``span`` are
    position metadata and are not visible through :meth:`items`, so they
    never take part in matching or searching.
    """

    type: str
    loc: Location
    fields: Tuple[Tuple[str, FieldValue], ...] = ()
    span: Tuple[int, int] = (0, 0)

    def field(self, name: str, default: Any = None) -> Any:
        for key, value in self.fields:
            if key == name:
                return value
        return default

    def items(self) -> Iterator[Tuple[str, Any]]:
        yield "type", self.type
        yield from self.fields

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "type": self.type,
            "loc": {"start": {"line": self.loc.line, "column": self.loc.column}},
        }
        for key, value in self.fields:
            data[key] = _plain(value)
        return data


def _plain(value: FieldValue) -> Any:
    if isinstance(value, SyntaxNode):
        return value.to_dict()
    if isinstance(value, tuple):
        return [_plain(item) for item in value]
    return value


@dataclass(frozen=True)
class ParsedFile:
    path: Path
    source: str
    tree: SyntaxNode

    def snippet(self, node: SyntaxNode) -> str:
        start, end = node.span
        return self.source.encode("utf-8")[start:end].decode("utf-8")


@dataclass(frozen=True)
class RouteFile:
    """Route definitions extracted from one file, in declaration order."""

    path: Path
    routes: Tuple[SyntaxNode, ...]
    parsed: Optional[ParsedFile] = None

    @property
    def name(self) -> str:
        return self.path.name
