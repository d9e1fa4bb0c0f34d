import pytest

from helmgen.yamlfmt import indent, marshal


@pytest.mark.parametrize(
    ("content", "n", "expected"),
    [
        ("a", -1, "a"),
        ("a", 0, "a"),
        ("a", 1, " a"),
        ("a", 2, "  a"),
    ],
)
def test_indent_cases(content, n, expected):
    assert indent(content, n) == expected


def test_indent_multiline():
    assert indent("a\nb", 2) == "  a\n  b"


def test_indent_negative_keeps_newlines():
    assert indent("a\nb", -3) == "a\nb"


def test_marshal_sorts_keys_and_uses_block_style():
    assert marshal({"b": 1, "a": [1, 2]}, 0) == "a:\n- 1\n- 2\nb: 1"


def test_marshal_with_indent():
    assert marshal({"spec": {"x": "y"}}, 2) == "  spec:\n    x: y"


def test_marshal_strips_trailing_whitespace():
    result = marshal({"a": 1}, 4)
    assert result == "    a: 1"


def test_marshal_scalar_has_no_document_marker():
    assert marshal(None, 0) == "null"
    assert marshal("word", 0) == "word"


def test_marshal_empty_mapping():
    assert marshal({}, 0) == "{}"


def test_marshal_round_trip():
    import yaml

    data = {"rules": [{"apiGroups": [""], "verbs": ["get", "list"]}], "n": 3}
    assert yaml.safe_load(marshal(data, 0)) == data