"""Tests for pathform.binding.tree: folding flat keys into a nested tree."""

import logging

import pytest

from pathform.binding.tree import MultiValueForm, NestedFormTreeBuilder, build_tree, iter_pairs
from pathform.errors import FormKeyError
from pathform.forms import FormData


class TestNestedFormTreeBuilder:
    def test_scalar(self) -> None:
        builder = NestedFormTreeBuilder()
        builder.add("firstName", "Ada")
        assert builder.tree == {"firstName": "Ada"}

    def test_nested_object(self) -> None:
        builder = NestedFormTreeBuilder()
        builder.add("home.city", "Oslo")
        builder.add("home.country", "Norway")
        assert builder.tree == {"home": {"city": "Oslo", "country": "Norway"}}

    def test_list_element(self) -> None:
        builder = NestedFormTreeBuilder()
        builder.add("addresses[0].city", "Oslo")
        assert builder.tree == {"addresses": [{"city": "Oslo"}]}

    def test_gap_filled_with_empty_objects(self) -> None:
        builder = NestedFormTreeBuilder()
        builder.add("addresses[2].city", "Bergen")
        assert builder.tree == {"addresses": [{}, {}, {"city": "Bergen"}]}

    def test_index_stable_regardless_of_key_order(self) -> None:
        forward = build_tree(
            [("addresses[0].city", "Oslo"), ("addresses[1].city", "Bergen")]
        )
        backward = build_tree(
            [("addresses[1].city", "Bergen"), ("addresses[0].city", "Oslo")]
        )
        assert forward == backward
        assert forward["addresses"] == [{"city": "Oslo"}, {"city": "Bergen"}]

    def test_nested_lists(self) -> None:
        builder = NestedFormTreeBuilder()
        builder.add("orders[1].lines[0].sku", "A-1")
        assert builder.tree == {"orders": [{}, {"lines": [{"sku": "A-1"}]}]}

    def test_empty_value_is_kept(self) -> None:
        builder = NestedFormTreeBuilder()
        builder.add("firstName", "")
        assert builder.tree == {"firstName": ""}

    def test_add_all_chains(self) -> None:
        builder = NestedFormTreeBuilder()
        assert builder.add_all({"a": "1"}) is builder


# ---------------------------------------------------------------------------
# Duplicates and conflicts
# ---------------------------------------------------------------------------


class TestDuplicateKeys:
    def test_first_value_wins(self) -> None:
        tree = build_tree([("firstName", "Ada"), ("firstName", "Grace")])
        assert tree == {"firstName": "Ada"}

    def test_first_value_wins_for_indexed_key(self) -> None:
        tree = build_tree([("addresses[0].city", "Oslo"), ("addresses[0].city", "Bergen")])
        assert tree == {"addresses": [{"city": "Oslo"}]}

    def test_first_empty_value_still_wins(self) -> None:
        tree = build_tree([("firstName", ""), ("firstName", "Ada")])
        assert tree == {"firstName": ""}

    def test_duplicate_is_logged(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.DEBUG, logger="pathform.binding"):
            build_tree([("firstName", "Ada"), ("firstName", "Grace")])
        assert "firstName" in caplog.text


class TestConflicts:
    def test_scalar_then_nested(self) -> None:
        builder = NestedFormTreeBuilder()
        builder.add("home", "x")
        with pytest.raises(FormKeyError, match="must be an object"):
            builder.add("home.city", "Oslo")

    def test_nested_then_scalar(self) -> None:
        builder = NestedFormTreeBuilder()
        builder.add("home.city", "Oslo")
        with pytest.raises(FormKeyError, match="already holds nested fields"):
            builder.add("home", "x")

    def test_object_then_list(self) -> None:
        builder = NestedFormTreeBuilder()
        builder.add("addresses.city", "Oslo")
        with pytest.raises(FormKeyError, match="must be a list"):
            builder.add("addresses[0].city", "Oslo")

    def test_malformed_key(self) -> None:
        with pytest.raises(FormKeyError):
            NestedFormTreeBuilder().add("addresses[x].city", "Oslo")

    def test_key_ending_in_index(self) -> None:
        builder = NestedFormTreeBuilder()
        with pytest.raises(FormKeyError, match="not a list index"):
            builder.add("addresses[0]", "Oslo")
        assert builder.tree == {}


# ---------------------------------------------------------------------------
# Form sources
# ---------------------------------------------------------------------------


class TestIterPairs:
    def test_multi_value_mapping_uses_first_value(self) -> None:
        form = FormData([("tag", "a"), ("tag", "b"), ("name", "x")])
        assert list(iter_pairs(form)) == [("tag", "a"), ("name", "x")]

    def test_plain_mapping(self) -> None:
        assert list(iter_pairs({"a": "1", "b": "2"})) == [("a", "1"), ("b", "2")]

    def test_mapping_with_list_values(self) -> None:
        assert list(iter_pairs({"a": ["1", "2"], "b": []})) == [("a", "1"), ("b", "")]

    def test_pairs_in_order(self) -> None:
        pairs = [("b", "2"), ("a", "1"), ("b", "3")]
        assert list(iter_pairs(pairs)) == pairs

    def test_any_object_with_get_list(self) -> None:
        class MultiDict:
            def __init__(self, data: dict[str, list[str]]) -> None:
                self._data = data

            def __iter__(self):
                return iter(self._data)

            def get_list(self, key: str) -> list[str]:
                return self._data[key]

        form = MultiDict({"tag": ["a", "b"], "name": ["x"]})
        assert isinstance(form, MultiValueForm)
        assert list(iter_pairs(form)) == [("tag", "a"), ("name", "x")]
        assert build_tree(form) == {"tag": "a", "name": "x"}
