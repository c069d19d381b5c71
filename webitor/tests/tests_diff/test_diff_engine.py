"""
Webitor Diff -- Engine Tests

The diff walks the working value's own keys only:
  - arrays compared whole, one "array" record on any difference
  - mappings recursed into, never reported themselves
  - scalars compared with JSON strict equality, one "value" record

Keys that exist only in the original are not reported.
Records follow the working value's key insertion order.
"""

import copy

from webitor.diff import deep_equal, diff, strict_equal
from webitor.paths import assign
from webitor.types import UNDEFINED, ChangeRecord


def make_data():
    return {
        "site": {"title": "Webitor", "tagline": "Edit in place", "footer": None},
        "articles": [
            {"id": "a1", "headline": "First"},
            {"id": "a2", "headline": "Second"},
        ],
        "count": 2,
    }


# ============================================================================
# Identity
# ============================================================================


def test_same_value_has_no_changes():
    data = make_data()
    assert diff(data, data) == []


def test_structurally_equal_copy_has_no_changes():
    data = make_data()
    assert diff(data, copy.deepcopy(data)) == []


def test_scalar_roots_have_no_keys():
    assert diff("a", "b") == []


# ============================================================================
# Value records
# ============================================================================


def test_nested_value_change():
    original = make_data()
    working = copy.deepcopy(original)
    working["site"]["title"] = "Hello"

    assert diff(original, working) == [ChangeRecord("site.title", "Webitor", "Hello", "value")]


def test_added_key_has_undefined_old_value():
    original = make_data()
    working = copy.deepcopy(original)
    working["site"]["subtitle"] = "New"

    changes = diff(original, working)

    assert len(changes) == 1
    assert changes[0].path == "site.subtitle"
    assert changes[0].old_value is UNDEFINED
    assert changes[0].new_value == "New"
    assert changes[0].kind == "value"


def test_removed_key_is_not_reported():
    original = make_data()
    working = copy.deepcopy(original)
    del working["site"]["tagline"]

    assert diff(original, working) == []


def test_null_to_string_is_a_change():
    original = make_data()
    working = copy.deepcopy(original)
    working["site"]["footer"] = "(c) 2025"

    assert diff(original, working) == [ChangeRecord("site.footer", None, "(c) 2025", "value")]


def test_strict_equality_does_not_coerce():
    original = {"a": 1, "b": 1, "c": 1, "d": True}
    working = {"a": "1", "b": True, "c": 1.0, "d": True}

    changes = diff(original, working)

    assert [c.path for c in changes] == ["a", "b"]


def test_new_mapping_reports_each_leaf():
    original = {"site": "flat"}
    working = {"site": {"title": "T", "meta": {"lang": "en"}}}

    changes = diff(original, working)

    assert [(c.path, c.old_value, c.new_value) for c in changes] == [
        ("site.title", UNDEFINED, "T"),
        ("site.meta.lang", UNDEFINED, "en"),
    ]


def test_records_follow_working_key_order():
    original = {"b": 1, "a": 1, "c": {"z": 1, "y": 1}}
    working = {"c": {"y": 2, "z": 2}, "a": 2, "b": 2}

    assert [c.path for c in diff(original, working)] == ["c.y", "c.z", "a", "b"]


# ============================================================================
# Array records
# ============================================================================


def test_array_replace_yields_single_array_record():
    original = {"a": [1, 2, 3]}
    working = copy.deepcopy(original)
    assign(working, "a", [1, 2])

    assert diff(original, working) == [ChangeRecord("a", [1, 2, 3], [1, 2], "array")]


def test_array_element_edit_reports_whole_array():
    original = make_data()
    working = copy.deepcopy(original)
    working["articles"][1]["headline"] = "Changed"

    changes = diff(original, working)

    assert len(changes) == 1
    assert changes[0].path == "articles"
    assert changes[0].kind == "array"
    assert changes[0].old_value == original["articles"]
    assert changes[0].new_value == working["articles"]


def test_reordered_array_is_a_change():
    original = {"tags": ["x", "y"]}
    working = {"tags": ["y", "x"]}

    assert diff(original, working)[0].kind == "array"


def test_array_items_key_order_is_irrelevant():
    original = {"items": [{"id": 1, "name": "n"}]}
    working = {"items": [{"name": "n", "id": 1}]}

    assert diff(original, working) == []


def test_new_array_key_has_undefined_old_value():
    changes = diff({}, {"tags": []})

    assert changes == [ChangeRecord("tags", UNDEFINED, [], "array")]


def test_array_root_is_walked_by_index():
    original = [{"title": "a"}, {"title": "b"}]
    working = [{"title": "a"}, {"title": "B"}]

    assert diff(original, working) == [ChangeRecord("1.title", "b", "B", "value")]


# ============================================================================
# Serialization
# ============================================================================


def test_to_dict_drops_undefined_old_value():
    record = ChangeRecord("site.subtitle", UNDEFINED, "New", "value")

    assert record.to_dict() == {"path": "site.subtitle", "newValue": "New", "kind": "value"}


def test_to_dict_keeps_null_old_value():
    record = ChangeRecord("site.footer", None, "x", "value")

    assert record.to_dict() == {"path": "site.footer", "oldValue": None, "newValue": "x", "kind": "value"}


# ============================================================================
# Equality helpers
# ============================================================================


def test_strict_equal():
    assert strict_equal(1, 1.0)
    assert strict_equal(None, None)
    assert strict_equal(UNDEFINED, UNDEFINED)
    assert not strict_equal(None, UNDEFINED)
    assert not strict_equal(True, 1)
    assert not strict_equal(0, False)
    assert not strict_equal("1", 1)


def test_deep_equal():
    assert deep_equal({"a": [1, {"b": 2}]}, {"a": [1, {"b": 2}]})
    assert not deep_equal([1, 2], [2, 1])
    assert not deep_equal([1], {"0": 1})
    assert not deep_equal([True], [1])
    assert not deep_equal(UNDEFINED, [])
