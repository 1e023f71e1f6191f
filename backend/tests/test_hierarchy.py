"""Tests for hierarchy normalization, flat-to-tree building and roll-up."""

import pytest

from hierarchy import (
    ROOT_LABEL,
    ROOT_NAME,
    build_hierarchy,
    build_nested_hierarchy,
    calculate_total_value,
    normalize_hierarchy,
)
from shared.errors import InvalidHierarchy


def _leaves(node):
    if node.get("children"):
        for child in node["children"]:
            yield from _leaves(child)
    else:
        yield node


class TestNormalize:
    def test_rejects_non_object_root(self):
        for bad in (None, [], "root", 3):
            with pytest.raises(InvalidHierarchy):
                normalize_hierarchy(bad)

    def test_rejects_non_object_child(self):
        with pytest.raises(InvalidHierarchy, match="root.1"):
            normalize_hierarchy({"name": "r", "children": [{"name": "a", "value": 1}, "oops"]})

    def test_defaults_and_coercion(self):
        tree = normalize_hierarchy({
            "children": [
                {"name": "a", "value": "5"},
                {"value": 3},
                {"name": "b", "children": [{"name": "b1", "value": None}]},
            ]
        })
        assert tree["name"] == "Unnamed"
        a, unnamed, b = tree["children"]
        assert a["value"] == 5
        assert unnamed["name"] == "Unnamed"
        assert b["children"][0]["value"] == 0
        assert calculate_total_value(tree) == 8

    def test_empty_children_is_leaf(self):
        node = normalize_hierarchy({"name": "x", "children": [], "value": 2})
        assert "children" not in node
        assert node["value"] == 2

    def test_data_defaults_to_node_fields(self):
        node = normalize_hierarchy({"name": "x", "value": 1, "owner": "kim"})
        assert node["data"] == {"name": "x", "value": 1, "owner": "kim"}


class TestBuildHierarchy:
    def test_single_level(self, sales_records):
        root = build_hierarchy(sales_records, "Region", "Amount", "Sum")
        assert root["name"] == ROOT_NAME
        assert root["data"]["label"] == ROOT_LABEL
        assert [(c["name"], c["value"]) for c in root["children"]] == [
            ("East", 250),
            ("West", 150),
            ("Null", 0),
        ]

    def test_nested_sorting(self):
        data = [
            {"p": "X", "s": "a", "v": 1},
            {"p": "X", "s": "b", "v": 2},
            {"p": "Y", "s": "a", "v": 10},
            {"p": "X", "s": "c", "v": 3},
        ]
        root = build_hierarchy(data, "p", "v", "Sum", secondary_group_field="s")
        assert [p["name"] for p in root["children"]] == ["Y", "X"]
        x = root["children"][1]
        assert [(c["name"], c["value"]) for c in x["children"]] == [("c", 3), ("b", 2), ("a", 1)]
        assert x["children"][0]["data"] == {"primaryGroup": "X", "secondaryGroup": "c", "value": 3}

    def test_nested_count(self):
        data = [{"p": "X", "s": "a"}, {"p": "X", "s": "a"}, {"p": "X", "s": None}]
        root = build_nested_hierarchy(data, "p", "s")
        assert [(c["name"], c["value"]) for c in root["children"][0]["children"]] == [("a", 2), ("Null", 1)]

    def test_parent_ties_broken_by_name(self):
        data = [{"p": "B", "s": "x"}, {"p": "A", "s": "x"}]
        root = build_nested_hierarchy(data, "p", "s")
        assert [p["name"] for p in root["children"]] == ["A", "B"]


class TestTotalValue:
    def test_equals_leaf_sum_and_idempotent(self, sales_records):
        root = build_hierarchy(sales_records, "Region", "Stage", "Count", secondary_group_field="Stage")
        expected = sum(leaf.get("value") or 0 for leaf in _leaves(root))
        assert calculate_total_value(root) == expected
        assert calculate_total_value(root) == calculate_total_value(root)
        assert expected == len(sales_records)

    def test_empty_nodes(self):
        assert calculate_total_value(None) == 0
        assert calculate_total_value({"name": "x"}) == 0
        assert calculate_total_value({"name": "x", "children": []}) == 0
