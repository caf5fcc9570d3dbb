"""Tests for structural matching and tree search."""

import pytest

from routedoc.models import Location, SyntaxNode
from routedoc.query import matches, search


def _node(type_, *fields, line=1):
    return SyntaxNode(type_, Location(line, 0), tuple(fields))


class TestMatches:
    """Tests for matches()."""

    def test_primitive_equality(self):
        assert matches("module", "module")
        assert matches(3, 3)
        assert not matches("module", "exports")

    @pytest.mark.parametrize("node, criteria", [
        (1, True),
        (True, 1),
        (1, 1.0),
        ("1", 1),
        (None, 0),
    ])
    def test_primitive_equality_is_strict(self, node, criteria):
        assert not matches(node, criteria)

    def test_primitive_never_matches_record(self):
        assert not matches("identifier", {"type": "identifier"})
        assert not matches({"type": "identifier"}, "identifier")

    def test_partial_record(self):
        node = {"type": "identifier", "name": "routes", "extra": 1}
        assert matches(node, {"type": "identifier"})
        assert matches(node, {"type": "identifier", "name": "routes"})
        assert not matches(node, {"type": "identifier", "name": "other"})

    def test_field_names_need_not_correspond(self):
        node = {"left": {"name": "module"}}
        assert matches(node, {"right": {"name": "module"}})

    def test_value_may_sit_in_any_field(self):
        node = {
            "type": "member_expression",
            "object": {"type": "identifier", "name": "module"},
            "property": {"type": "property_identifier", "name": "exports"},
        }
        assert matches(node, {"type": "member_expression", "a": {"name": "exports"}, "b": {"name": "module"}})

    def test_empty_criteria_matches_any_record(self):
        assert matches({"type": "x"}, {})
        assert not matches(5, {})

    def test_sequences_are_not_records(self):
        assert not matches([{"type": "x"}], {"type": "x"})
        assert not matches([1], 1)

    def test_syntax_node_fields(self):
        node = _node(
            "variable_declarator",
            ("name", _node("identifier", ("name", "routes"))),
            ("value", _node("array", ("elements", ()))),
        )
        assert matches(node, {"type": "variable_declarator", "name": {"name": "routes"}})
        assert not matches(node, {"type": "variable_declarator", "name": {"name": "other"}})

    def test_location_is_not_matched(self):
        node = _node("identifier", ("name", "x"), line=7)
        assert not matches(node, {"line": 7})


class TestSearch:
    """Tests for search()."""

    def test_matching_root_is_returned_alone(self):
        tree = {"type": "call", "args": [{"type": "call", "args": []}]}
        assert search(tree, {"type": "call"}, recursive=True) == [tree]

    def test_no_descent_without_options(self):
        tree = {"type": "program", "body": {"type": "return_statement"}}
        assert search(tree, {"type": "return_statement"}) == []

    def test_recursive_finds_nested_records(self):
        target = {"type": "return_statement", "argument": None}
        tree = {"type": "program", "body": {"type": "block", "inner": target}}
        assert search(tree, {"type": "return_statement"}, recursive=True) == [target]

    def test_recursive_walks_sequences_in_order(self):
        first = {"type": "t", "id": 1}
        second = {"type": "t", "id": 2}
        third = {"type": "t", "id": 3}
        tree = {
            "type": "program",
            "body": [first, {"type": "block", "body": [second]}],
            "tail": third,
        }
        assert search(tree, {"type": "t"}, recursive=True) == [first, second, third]

    def test_matches_are_not_double_reported(self):
        inner = {"type": "t", "id": 2}
        outer = {"type": "t", "id": 1, "child": inner}
        tree = {"type": "program", "body": [outer]}
        results = search(tree, {"type": "t"}, recursive=True)
        assert results == [outer]

    def test_array_searches_direct_elements_only(self):
        direct = {"type": "return_statement", "id": 1}
        nested = {"type": "if", "consequence": {"type": "return_statement", "id": 2}}
        results = search([nested, direct], {"type": "return_statement"}, array=True)
        assert results == [direct]

    def test_array_option_ignored_for_records(self):
        tree = {"type": "program", "body": [{"type": "t"}]}
        assert search(tree, {"type": "t"}, array=True) == []

    def test_sequence_without_options(self):
        assert search([{"type": "t"}], {"type": "t"}) == []

    def test_primitive_root(self):
        assert search("t", "t") == ["t"]
        assert search("t", {"type": "t"}, recursive=True) == []

    def test_search_over_syntax_nodes(self):
        first = _node("return_statement", line=2)
        second = _node("return_statement", line=5)
        block = _node(
            "statement_block",
            ("body", (first, _node("if_statement", ("consequence", second)))),
        )
        assert search(block, {"type": "return_statement"}, recursive=True) == [first, second]
        assert search(block.field("body"), {"type": "return_statement"}, array=True) == [first]
