"""Route definition extraction from parsed route modules.

A route module exports a function returning an array literal of route
definitions.  Supported shapes::

    module.exports = function (log, db) { return [ ... ] }
    module.exports = function (log, db) { var routes = [ ... ]; return routes }
    module.exports = (log, db) => [ ... ]

Any other shape is a fatal :class:`~routedoc.errors.StructuralError`.
"""

from __future__ import annotations

import logging
from concurrent.futures import FIRST_EXCEPTION, ThreadPoolExecutor, wait
from pathlib import Path
from typing import Iterable, List, Optional, Sequence, Tuple

from . import config
from .errors import SourceError, assert_count, assert_type
from .models import ParsedFile, RouteFile, SyntaxNode
from .parser import JavaScriptParser
from .query import search

logger = logging.getLogger(__name__)

# ``function`` is the pre-0.21 tree-sitter-javascript name of function_expression.
FUNCTION_EXPRESSION_TYPES = ("function_expression", "function", "arrow_function")
ROUTE_DEFINITION_TYPES = ("array",)
RETURN_TYPES = ("return_statement",)
BLOCK_TYPE = "statement_block"

EXPORT_CRITERIA = {
    "type": "expression_statement",
    "expression": {
        "type": "assignment_expression",
        "left": {
            "type": "member_expression",
            "object": {"type": "identifier", "name": "module"},
            "property": {"type": "property_identifier", "name": "exports"},
        },
    },
}


# ---------------------------------------------------------------------------
# Pipeline steps
# ---------------------------------------------------------------------------

def find_exported_function(tree: SyntaxNode, file_path: Path) -> SyntaxNode:
    """Return the body of the function assigned to ``module.exports``."""
    exported = search(tree, EXPORT_CRITERIA, recursive=True)
    assert_count(exported, "export", file_path)

    assignment = exported[0].field("expression")
    exported_function = assert_type(
        assignment.field("right"), FUNCTION_EXPRESSION_TYPES, file_path
    )
    return exported_function.field("body")


def find_returned_data(function_body: SyntaxNode, file_path: Path) -> Tuple[SyntaxNode, ...]:
    """Return the route definition nodes the exported function returns."""
    if function_body.type == BLOCK_TYPE:
        returned = search(
            function_body.field("body", ()), {"type": "return_statement"}, array=True
        )
        assert_count(returned, "return statement", file_path, function_body)
        returned_data = assert_type(returned[0], RETURN_TYPES, file_path).field("argument")
    else:
        returned_data = _unwrap_parentheses(function_body)

    if returned_data is not None and returned_data.type == "identifier":
        returned_data = _resolve_identifier(function_body, returned_data, file_path)

    routes = assert_type(returned_data, ROUTE_DEFINITION_TYPES, file_path)
    return routes.field("elements", ())


def _resolve_identifier(scope: SyntaxNode, identifier: SyntaxNode, file_path: Path) -> Optional[SyntaxNode]:
    name = identifier.field("name")
    declarators = search(scope, {
        "type": "variable_declarator",
        "name": {"type": "identifier", "name": name},
    }, recursive=True)
    assert_count(declarators, "set of route definitions", file_path, scope)
    logger.debug("Resolved '%s' to its declaration at line %d", name, declarators[0].loc.line)
    return declarators[0].field("value")


def _unwrap_parentheses(node: SyntaxNode) -> SyntaxNode:
    while node.type == "parenthesized_expression":
        node = node.field("expression")
    return node


def extract_routes(parsed: ParsedFile) -> RouteFile:
    body = find_exported_function(parsed.tree, parsed.path)
    routes = find_returned_data(body, parsed.path)
    logger.info("Found %d route(s) in %s", len(routes), parsed.path.name)
    return RouteFile(path=parsed.path, routes=tuple(routes), parsed=parsed)


# ---------------------------------------------------------------------------
# Run orchestration
# ---------------------------------------------------------------------------

def discover_route_files(routes_dir: Path, ignore: Iterable[str] = config.IGNORE_FILES) -> List[Path]:
    """List candidate route modules directly inside *routes_dir*, by name."""
    if not routes_dir.is_dir():
        raise SourceError(f"Routes directory not found: {routes_dir}")

    ignored = set(ignore)
    return [
        path
        for path in sorted(routes_dir.iterdir(), key=lambda p: p.name)
        if path.suffix in config.SOURCE_EXTENSIONS
        and path.name not in ignored
        and path.is_file()
    ]


def load_sources(
    paths: Sequence[Path],
    parser: JavaScriptParser,
    max_workers: int = config.DEFAULT_WORKERS,
) -> List[ParsedFile]:
    """Read and parse *paths* concurrently, keeping the order of *paths*.

    Raises as soon as any file fails: queued work is cancelled without
    waiting for files still being parsed, and the earliest-listed failure
    among the finished files is raised.
    """
    if not paths:
        return []

    executor = ThreadPoolExecutor(max_workers=max(1, max_workers))
    try:
        futures = [executor.submit(parser.parse_file, path) for path in paths]
        wait(futures, return_when=FIRST_EXCEPTION)
        for future in futures:
            if future.done() and future.exception() is not None:
                raise future.exception()
        return [future.result() for future in futures]
    finally:
        executor.shutdown(wait=False, cancel_futures=True)


def collect_routes(
    routes_dir: Path,
    ignore: Iterable[str] = config.IGNORE_FILES,
    max_workers: int = config.DEFAULT_WORKERS,
    parser: Optional[JavaScriptParser] = None,
) -> List[RouteFile]:
    paths = discover_route_files(routes_dir, ignore)
    logger.info("Parsing %d route file(s) from %s", len(paths), routes_dir)
    parsed_files = load_sources(paths, parser or JavaScriptParser(), max_workers)
    return [extract_routes(parsed) for parsed in parsed_files]
