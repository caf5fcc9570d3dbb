"""Error taxonomy for route documentation runs.

Every error here is fatal for the whole run: the CLI prints ``str(exc)``
to stderr and exits with status 1 without writing an artifact.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Sequence, Sized, Union

from .models import SyntaxNode

PathLike = Union[str, Path]


class RouteDocError(Exception):
    """Base class carrying an optional file path and source position."""

    def __init__(
        self,
        message: str,
        file_path: Optional[PathLike] = None,
        line: Optional[int] = None,
        column: Optional[int] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.file_path = str(file_path) if file_path is not None else None
        self.line = line
        self.column = column

    def __str__(self) -> str:
        if not self.file_path:
            return self.message
        where = f'Error parsing "{self.file_path}"'
        if self.line:
            where += f" at line {self.line}"
        return f"{where}: {self.message}"


class UsageError(RouteDocError):
    """Invalid invocation of the command line tool."""


class ConfigError(RouteDocError):
    """Unreadable or malformed configuration file."""


class SourceError(RouteDocError):
    """A source file could not be read or parsed."""


class StructuralError(RouteDocError):
    """A cardinality or type assertion in the extraction pipeline failed."""


def assert_count(
    found: Sized,
    what: str,
    file_path: PathLike,
    node: Optional[SyntaxNode] = None,
) -> None:
    """Require exactly one match; *node* supplies the reported position."""
    if len(found) != 1:
        line = node.loc.line if node is not None else None
        column = node.loc.column if node is not None else None
        raise StructuralError(
            f"Expected 1 {what}, found {len(found)}", file_path, line, column
        )


def assert_type(
    node: Optional[SyntaxNode],
    types: Sequence[str],
    file_path: PathLike,
) -> SyntaxNode:
    expected = ",".join(types)
    if node is None:
        raise StructuralError(f"Expected type [{expected}], found nothing", file_path)

    if node.type not in types:
        raise StructuralError(
            f'Expected type [{expected}], found "{node.type}" at column "{node.loc.column}"',
            file_path,
            node.loc.line,
            node.loc.column,
        )
    return node
