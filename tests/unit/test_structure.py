import sys

import pytest

import json_parser as jp
from elements import (
    ArrayElement,
    BooleanElement,
    NullElement,
    NumberElement,
    ObjectElement,
    Pair,
    StringElement,
)
from renderers import dump_tree, pretty
from scanner import Scanner


@pytest.mark.parametrize("text", ["", "   ", "\n\t\r "])
def test_no_value_rejected(text):
    with pytest.raises(SyntaxError) as ei:
        jp.parse(text)
    assert "unexpected token: 'eof'" in str(ei.value)


def test_parse_builds_full_tree():
    tree = jp.parse('{"a": [1, "x", true, false, null], "b": {}}')
    assert tree == ObjectElement(
        (
            Pair(
                b"a",
                ArrayElement(
                    (
                        NumberElement("1"),
                        StringElement(b"x"),
                        BooleanElement(True),
                        BooleanElement(False),
                        NullElement(),
                    )
                ),
            ),
            Pair(b"b", ObjectElement()),
        )
    )


@pytest.mark.parametrize("text", ["true", "false", "null", '"s"', " 3 "])
def test_scalar_root_accepted(text):
    jp.parse(text)


def test_whitespace_around_members_accepted():
    tree = jp.parse(' {\n  "a" :\t1 ,\r\n "b":[ 2 , 3 ] \n} ')
    assert [pair.key for pair in tree.members] == [b"a", b"b"]


def test_parse_root_consumes_all_input():
    s = Scanner(b' {"a": [1, 2]} \n')
    jp.parse_root(s)
    assert s.at_end()


def test_duplicate_keys_preserved_in_order():
    tree = jp.parse('{"a":1,"a":2}')
    assert tree.members == (
        Pair(b"a", NumberElement("1")),
        Pair(b"a", NumberElement("2")),
    )


def test_trailing_comma_in_object_rejected():
    with pytest.raises(SyntaxError) as ei:
        jp.parse('{"a":1,}')
    assert "expected object member" in str(ei.value)


def test_trailing_comma_in_array_rejected():
    with pytest.raises(SyntaxError) as ei:
        jp.parse("[1,]")
    assert "unexpected token: ']'" in str(ei.value)


def test_missing_comma_in_object_reports_expected():
    with pytest.raises(SyntaxError) as ei:
        jp.parse('{"a":1 "b":2}')
    assert 'expected: ","' in str(ei.value)


def test_missing_comma_in_array_reports_expected():
    with pytest.raises(SyntaxError) as ei:
        jp.parse("[1 2]")
    assert 'expected: ",", but got: "2"' in str(ei.value)


def test_missing_colon_reports_expected():
    with pytest.raises(SyntaxError) as ei:
        jp.parse('{"a" 1}')
    assert 'expected: ":", but got: "1"' in str(ei.value)


def test_unquoted_key_rejected():
    with pytest.raises(SyntaxError) as ei:
        jp.parse("{a: 1}")
    assert 'expected: "}", but got: "a"' in str(ei.value)


def test_missing_closing_bracket_in_array():
    with pytest.raises(SyntaxError) as ei:
        jp.parse("[1,2")
    assert 'expected: "]", but got: "eof"' in str(ei.value)


def test_missing_closing_brace_in_object():
    with pytest.raises(SyntaxError) as ei:
        jp.parse('{"a": 1')
    assert 'expected: "}", but got: "eof"' in str(ei.value)


def test_extra_data_after_root_rejected():
    with pytest.raises(SyntaxError) as ei:
        jp.parse("[1] 2")
    assert 'expected: "eof", but got: "2"' in str(ei.value)


@pytest.mark.parametrize(
    "text, fragment",
    [
        ("tru3", 'expected: "e", but got: "3"'),
        ("fals", 'expected: "e", but got: "eof"'),
        ("nul", 'expected: "l", but got: "eof"'),
        ("nill", 'expected: "u", but got: "i"'),
    ],
)
def test_literal_mismatch_names_expected_and_found(text, fragment):
    with pytest.raises(SyntaxError) as ei:
        jp.parse(text)
    assert fragment in str(ei.value)


def test_error_carries_line_and_column():
    with pytest.raises(jp.JSONSyntaxError) as ei:
        jp.parse("[1,\n x]")
    err = ei.value
    assert (err.line, err.column) == (2, 2)
    assert err.description == "unexpected token: 'x'"
    assert str(err) == "syntax error in JSON at line 2, column 2: unexpected token: 'x'"


def test_depth_limit_is_configurable():
    assert jp.parse("[[[]]]", max_depth=3) == ArrayElement((ArrayElement((ArrayElement(),)),))
    with pytest.raises(jp.NestingDepthError) as ei:
        jp.parse("[[[]]]", max_depth=2)
    assert "nesting too deep: maximum depth is 2" in str(ei.value)


def test_depth_limit_counts_objects():
    with pytest.raises(jp.NestingDepthError):
        jp.parse('{"a": {"b": {}}}', max_depth=2)


def test_default_depth_limit_stops_deep_input():
    depth = jp.DEPTH_LIMIT_DEFAULT + 1
    with pytest.raises(SyntaxError) as ei:
        jp.parse("[" * depth + "]" * depth)
    assert isinstance(ei.value, jp.NestingDepthError)


def test_default_depth_limit_allows_its_own_depth():
    depth = jp.DEPTH_LIMIT_DEFAULT
    jp.parse("[" * depth + "]" * depth)


def test_non_positive_max_depth_rejected():
    with pytest.raises(ValueError):
        jp.parse("[]", max_depth=0)


def test_default_depth_limit_allows_deep_objects():
    depth = jp.DEPTH_LIMIT_DEFAULT
    tree = jp.parse('{"a":' * depth + "1" + "}" * depth)
    assert pretty(tree).count("\n") == 2 * depth
    assert dump_tree(tree).count("\n") == 3 * depth + 1


def test_stack_exhaustion_reported_as_nesting_error():
    depth = sys.getrecursionlimit()
    with pytest.raises(jp.NestingDepthError) as ei:
        jp.parse('{"a":' * depth + "1" + "}" * depth, max_depth=depth * 2)
    assert "nesting too deep" in str(ei.value)
    assert ei.value.line == 1
