"""JavaScript parsing with Tree-sitter.

Tree-sitter produces a concrete syntax tree with anonymous tokens, comments
and grammar-specific child layouts.  :class:`JavaScriptParser` folds it into
immutable :class:`~routedoc.models.SyntaxNode` records:

- named children reached through a grammar field keep the field name
  (``left``, ``right``, ``object``, ``property``, ``body``, ...);
- anonymous tokens reached through a field (``kind: "const"``) become
  primitive strings;
- other named children are stored under an ESTree-like name chosen per
  node type (``body``, ``elements``, ``argument``, ...);
- token leaves carry their text as ``name`` (identifiers) or ``value``.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import tree_sitter_javascript
from tree_sitter import Language, Parser as TSParser

from .errors import SourceError
from .models import FieldValue, Location, ParsedFile, Primitive, SyntaxNode

logger = logging.getLogger(__name__)

# node type -> (field name for unnamed children, always a sequence)
UNNAMED_CHILD_FIELDS: Dict[str, Tuple[str, bool]] = {
    "program": ("body", True),
    "statement_block": ("body", True),
    "class_body": ("body", True),
    "switch_body": ("cases", True),
    "expression_statement": ("expression", False),
    "parenthesized_expression": ("expression", False),
    "return_statement": ("argument", False),
    "throw_statement": ("argument", False),
    "await_expression": ("argument", False),
    "spread_element": ("argument", False),
    "variable_declaration": ("declarations", True),
    "lexical_declaration": ("declarations", True),
    "array": ("elements", True),
    "object": ("properties", True),
    "arguments": ("arguments", True),
    "formal_parameters": ("parameters", True),
    "template_string": ("quasis", True),
}

IDENTIFIER_TYPES = frozenset({
    "identifier",
    "property_identifier",
    "shorthand_property_identifier",
    "shorthand_property_identifier_pattern",
    "private_property_identifier",
    "statement_identifier",
})

SKIPPED_TYPES = frozenset({"comment", "html_comment"})


class JavaScriptParser:
    """Parse JavaScript source into :class:`SyntaxNode` trees.

    The grammar is loaded once; a fresh tree-sitter parser is created for
    every call so that one instance can be shared across worker threads.
    """

    def __init__(self) -> None:
        self._language = Language(tree_sitter_javascript.language())

    def parse_file(self, file_path: Path) -> ParsedFile:
        try:
            source = file_path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise SourceError(f"Could not read source: {exc}", file_path) from exc

        tree = self.parse(source, file_path)
        logger.debug("Parsed %s", file_path)
        return ParsedFile(path=file_path, source=source, tree=tree)

    def parse(self, source: str, file_path: Optional[Path] = None) -> SyntaxNode:
        parser = TSParser(self._language)
        ts_tree = parser.parse(source.encode("utf-8"))
        root = ts_tree.root_node

        if root.has_error:
            bad = _first_error(root)
            line = bad.start_point[0] + 1 if bad is not None else None
            column = bad.start_point[1] if bad is not None else None
            raise SourceError("Syntax error in JavaScript source", file_path, line, column)

        return _convert(root)


def _first_error(ts_node: Any) -> Optional[Any]:
    if ts_node.type == "ERROR" or ts_node.is_missing:
        return ts_node
    for child in ts_node.children:
        if child.has_error or child.is_missing:
            found = _first_error(child)
            if found is not None:
                return found
    return None


def _convert(ts_node: Any) -> SyntaxNode:
    loc = Location(line=ts_node.start_point[0] + 1, column=ts_node.start_point[1])
    span = (ts_node.start_byte, ts_node.end_byte)

    if ts_node.child_count == 0:
        key = "name" if ts_node.type in IDENTIFIER_TYPES else "value"
        text = ts_node.text.decode("utf-8")
        return SyntaxNode(ts_node.type, loc, ((key, _leaf_value(ts_node.type, text)),), span)

    unnamed_key, unnamed_is_sequence = UNNAMED_CHILD_FIELDS.get(ts_node.type, ("children", True))
    collected: Dict[str, List[Any]] = {}
    if unnamed_is_sequence and ts_node.type in UNNAMED_CHILD_FIELDS:
        collected[unnamed_key] = []

    cursor = ts_node.walk()
    has_child = cursor.goto_first_child()
    while has_child:
        child = cursor.node
        field_name = cursor.field_name
        if child.type not in SKIPPED_TYPES:
            if child.is_named:
                key = field_name or unnamed_key
                collected.setdefault(key, []).append(_convert(child))
            elif field_name:
                collected.setdefault(field_name, []).append(child.text.decode("utf-8"))
        has_child = cursor.goto_next_sibling()

    fields: List[Tuple[str, FieldValue]] = []
    for key, values in collected.items():
        if key == unnamed_key and unnamed_is_sequence:
            fields.append((key, tuple(values)))
        elif len(values) == 1:
            fields.append((key, values[0]))
        else:
            fields.append((key, tuple(values)))

    return SyntaxNode(ts_node.type, loc, tuple(fields), span)


def _leaf_value(node_type: str, text: str) -> Primitive:
    if node_type == "number":
        try:
            return int(text, 0)
        except ValueError:
            pass
        try:
            return float(text)
        except ValueError:
            return text
    if node_type == "true":
        return True
    if node_type == "false":
        return False
    if node_type == "null":
        return None
    return text
