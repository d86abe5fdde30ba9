"""Tests for format-preserving document patches."""

import json

import pytest

from jnode._jsonpath import resolve_path
from jnode._scanner import ScanError, find_node_at_path, parse_tree
from jnode.patch import (
    FormattingOptions,
    PatchError,
    TextEdit,
    apply_edits,
    compute_edits,
    patch_document,
)

DOC = '{\n  "a": 1,\n  "b": {\n    "c": true\n  }\n}\n'
USER_DOC = '{"user":{"name":"Al","age":1,"tags":["x"]}}'


class TestScanner:
    """offset 트리 파싱."""

    def test_node_offsets(self):
        root = parse_tree('{"a": [1, "x"]}')
        node = find_node_at_path(root, ("a", 1))
        assert node.type == "string"
        assert (node.offset, node.length, node.value) == (10, 3, "x")

    def test_missing_path(self):
        root = parse_tree('{"a": [1]}')
        assert find_node_at_path(root, ("a", 1)) is None
        assert find_node_at_path(root, ("b",)) is None
        assert find_node_at_path(root, ("a", 0, "x")) is None

    def test_invalid_documents(self):
        for text in ["", "{", "[1,]", '{"a" 1}', "01", "NaN", '{"a": 1} x', "{'a': 1}"]:
            with pytest.raises(ScanError):
                parse_tree(text)

    def test_whitespace_around_root(self):
        root = parse_tree('  \n[true, null]  \n')
        assert root.type == "array"
        assert root.offset == 3
        assert [c.value for c in root.children] == [True, None]


class TestReplace:
    """기존 값 교체."""

    def test_replace_scalar_keeps_layout(self):
        result = patch_document(DOC, ("a",), 2)
        assert result == '{\n  "a": 2,\n  "b": {\n    "c": true\n  }\n}\n'

    def test_replace_object_reindents(self):
        result = patch_document(DOC, ("b",), {"c": False, "d": [1]})
        assert result == (
            '{\n  "a": 1,\n  "b": {\n    "c": false,\n    "d": [\n      1\n    ]\n  }\n}\n'
        )

    def test_single_edit_span(self):
        edits = compute_edits('{"a": 1}', ("a",), 2)
        assert edits == [TextEdit(6, 1, "2")]

    def test_untouched_formatting(self):
        doc = '{"a" :  [1,2],\n "b":{"c":1}}'
        assert patch_document(doc, ("b", "c"), 2) == '{"a" :  [1,2],\n "b":{"c":2}}'

    def test_root_keeps_surrounding_whitespace(self):
        assert patch_document('  {"a": 1}\n', (), 5) == "  5\n"

    def test_array_element(self):
        assert patch_document("[1, 2]", (0,), "a") == '["a", 2]'

    def test_duplicate_key_uses_last(self):
        assert patch_document('{"a": 1, "a": 2}', ("a",), 3) == '{"a": 1, "a": 3}'

    def test_compact_document_stays_single_line(self):
        merged = {"name": "Al", "age": 2, "tags": ["x"]}
        result = patch_document(USER_DOC, ("user",), merged)
        assert "\n" not in result
        assert json.loads(result) == {"user": merged}


class TestInsert:
    """새 멤버 추가."""

    def test_new_key_after_last_member(self):
        result = patch_document(DOC, ("z",), "new")
        assert result == '{\n  "a": 1,\n  "b": {\n    "c": true\n  },\n  "z": "new"\n}\n'

    def test_creates_missing_parents(self):
        result = patch_document('{\n  "a": 1\n}', ("x", "y"), 5)
        assert result == '{\n  "a": 1,\n  "x": {\n    "y": 5\n  }\n}'

    def test_empty_object(self):
        result = patch_document('{\n  "a": {}\n}', ("a", "k"), 1)
        assert result == '{\n  "a": {\n    "k": 1\n  }\n}'

    def test_empty_object_compact(self):
        assert patch_document('{"a": { }}', ("a", "k"), 1) == '{"a": {"k": 1}}'

    def test_array_append(self):
        assert patch_document("[1, 2]", (2,), 3) == "[1, 2, 3]"
        assert patch_document("[1, 2]", (-1,), 3) == "[1, 2, 3]"
        assert patch_document("[1, 2]", (9,), 3) == "[1, 2, 3]"

    def test_crlf_document(self):
        result = patch_document('{\r\n  "a": 1\r\n}', ("b",), [1])
        assert result == '{\r\n  "a": 1,\r\n  "b": [\r\n    1\r\n  ]\r\n}'

    def test_tab_indent(self):
        options = FormattingOptions(insert_spaces=False)
        result = patch_document('{\n\t"a": 1\n}', ("b",), {"c": 1}, options)
        assert result == '{\n\t"a": 1,\n\t"b": {\n\t\t"c": 1\n\t}\n}'

    def test_indent_width(self):
        options = FormattingOptions(tab_size=4)
        result = patch_document('{\n    "a": 1\n}', ("b",), {"c": 1}, options)
        assert result == '{\n    "a": 1,\n    "b": {\n        "c": 1\n    }\n}'


class TestRoundTrip:

    def test_value_at_path_and_siblings(self):
        doc = json.dumps(
            {"a": {"b": [1, 2, {"c": "x"}], "d": None}, "e": "keep"}, indent=4
        )
        path = ("a", "b", 2, "c")
        value = {"new": [True, None]}
        result = json.loads(patch_document(doc, path, value))
        original = json.loads(doc)
        assert resolve_path(result, path) == (True, value)
        assert result["e"] == original["e"]
        assert result["a"]["d"] == original["a"]["d"]
        assert result["a"]["b"][:2] == original["a"]["b"][:2]

    def test_user_scenario(self):
        merged = {"name": "Al", "age": 2, "tags": ["x"]}
        result = patch_document(USER_DOC, ("user",), merged)
        assert json.loads(result) == {"user": {"name": "Al", "age": 2, "tags": ["x"]}}

    def test_root_scenario(self):
        assert json.loads(patch_document(USER_DOC, (), 5)) == 5


class TestPatchErrors:

    def test_invalid_document(self):
        with pytest.raises(PatchError):
            patch_document("{not json", ("a",), 1)

    def test_property_on_scalar(self):
        with pytest.raises(PatchError):
            patch_document('{"a": 5}', ("a", "b"), 1)

    def test_index_on_object(self):
        with pytest.raises(PatchError):
            patch_document('{"a": 1}', (0,), 1)

    def test_key_on_array(self):
        with pytest.raises(PatchError):
            patch_document("[1]", ("k",), 1)

    def test_negative_index(self):
        with pytest.raises(PatchError):
            patch_document("[1, 2]", (-2,), 1)

    def test_unserializable_value(self):
        with pytest.raises(PatchError):
            patch_document('{"a": 1}', ("a",), float("nan"))

    def test_oversized_number_in_document(self):
        doc = '{"a": ' + "1" * 5000 + ', "b": 1}'
        with pytest.raises(PatchError):
            patch_document(doc, ("b",), 2)

    def test_oversized_number_scan_error(self):
        with pytest.raises(ScanError):
            parse_tree("[" + "1" * 5000 + "]")

    def test_is_value_error(self):
        assert issubclass(PatchError, ValueError)


class TestApplyEdits:

    def test_multiple_edits(self):
        edits = [TextEdit(0, 1, "X"), TextEdit(4, 2, "YZ")]
        assert apply_edits("abcdef", edits) == "XbcdYZ"

    def test_order_independent(self):
        edits = [TextEdit(4, 2, "YZ"), TextEdit(0, 1, "X")]
        assert apply_edits("abcdef", edits) == "XbcdYZ"

    def test_inserts_at_same_offset_keep_order(self):
        edits = [TextEdit(1, 0, "1"), TextEdit(1, 0, "2")]
        assert apply_edits("abcdef", edits) == "a12bcdef"

    def test_overlapping_edits(self):
        with pytest.raises(PatchError):
            apply_edits("abcdef", [TextEdit(0, 3, ""), TextEdit(2, 1, "")])

    def test_out_of_range(self):
        with pytest.raises(PatchError):
            apply_edits("abc", [TextEdit(2, 5, "")])

    def test_no_edits(self):
        assert apply_edits("abc", []) == "abc"
