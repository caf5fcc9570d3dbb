"""Structural matching and search over syntax trees.

Criteria are partial patterns written as plain dicts, e.g.::

    {"type": "variable_declarator", "name": {"type": "identifier", "name": "routes"}}

A record matches when every criteria value can be found in *some* field of
the node, whatever that field is called.  This keeps criteria short and lets
one pattern cover several syntactic variants of the same construct.
"""

from __future__ import annotations

from typing import Any, Iterable, List, Mapping, Optional, Tuple

from .models import SyntaxNode


def _record_items(value: Any) -> Optional[List[Tuple[str, Any]]]:
    if isinstance(value, SyntaxNode):
        return list(value.items())
    if isinstance(value, Mapping):
        return list(value.items())
    return None


def _is_sequence(value: Any) -> bool:
    return isinstance(value, (list, tuple))


def matches(node: Any, criteria: Any) -> bool:
    """Return True if *node* satisfies the partial pattern *criteria*."""
    node_items = _record_items(node)
    if node_items is None:
        if _is_sequence(node) or _record_items(criteria) is not None:
            return False
        # Strict equality: 1 must not match True or 1.0.
        return type(node) is type(criteria) and node == criteria

    criteria_items = _record_items(criteria)
    if criteria_items is None:
        return False

    return all(
        any(matches(node_value, criteria_value) for _, node_value in node_items)
        for _, criteria_value in criteria_items
    )


def search(
    node: Any,
    criteria: Any,
    *,
    recursive: bool = False,
    array: bool = False,
) -> List[Any]:
    """Collect every node under *node* that matches *criteria*, pre-order.

    A matching node is returned as-is and not descended into.  With *array*
    the elements of a sequence are searched; with *recursive* the fields of
    a record are searched, and sequences found among them are walked too.
    """
    if matches(node, criteria):
        return [node]

    if _is_sequence(node):
        if not (array or recursive):
            return []
        return _search_all(node, criteria, recursive, array)

    node_items = _record_items(node)
    if node_items is not None and recursive:
        return _search_all((value for _, value in node_items), criteria, recursive, array)

    return []


def _search_all(values: Iterable[Any], criteria: Any, recursive: bool, array: bool) -> List[Any]:
    results: List[Any] = []
    for value in values:
        results.extend(search(value, criteria, recursive=recursive, array=array))
    return results
