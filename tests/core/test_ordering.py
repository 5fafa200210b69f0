"""
Unit tests for order_index resolution.

Tests dense renumbering, explicit versus positional ordering and ties.
"""

from lms.core.ordering import resolve_order


class TestResolveOrder:
    """Test suite for resolve_order."""

    def test_positions_used_when_order_missing(self):
        items = [{"title": "a"}, {"title": "b"}, {"title": "c"}]

        result = resolve_order(items)

        assert [item["title"] for item in result] == ["a", "b", "c"]
        assert [item["order_index"] for item in result] == [0, 1, 2]

    def test_explicit_order_sorted_and_renumbered_densely(self):
        items = [
            {"title": "late", "order_index": 40},
            {"title": "early", "order_index": 5},
            {"title": "middle", "order_index": 10},
        ]

        result = resolve_order(items)

        assert [item["title"] for item in result] == ["early", "middle", "late"]
        assert [item["order_index"] for item in result] == [0, 1, 2]

    def test_ties_keep_payload_order(self):
        items = [
            {"title": "first", "order_index": 1},
            {"title": "second", "order_index": 1},
            {"title": "zero", "order_index": 0},
        ]

        result = resolve_order(items)

        assert [item["title"] for item in result] == ["zero", "first", "second"]

    def test_input_not_mutated(self):
        items = [{"title": "a", "order_index": 7}]

        resolve_order(items)

        assert items[0]["order_index"] == 7

    def test_empty(self):
        assert resolve_order([]) == []
