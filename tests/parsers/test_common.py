import json

from yamlcst.parsers import (
    MapNode,
    ParsedKV,
    ScalarNode,
    find_node_at,
    flatten,
    iter_scalars,
    line_col,
    node_to_dict,
    parse,
    to_python,
)
from yamlcst.parsers.common import LineIndex


def test_flatten_nested():
    text = "db:\n  host: localhost\n  ports: [5432, 5433]\nusers:\n  - name: a\n  - name: b\n"
    items = flatten(parse(text), text=text)
    assert [(kv.key, kv.value, kv.line) for kv in items] == [
        ("db.host", "localhost", 2),
        ("db.ports[0]", "5432", 3),
        ("db.ports[1]", "5433", 3),
        ("users[0].name", "a", 5),
        ("users[1].name", "b", 6),
    ]


def test_flatten_without_text_has_no_lines():
    items = flatten(parse("a: {b: 1}"))
    assert items == [ParsedKV(key="a.b", value="1", line=None, start_offset=7, end_offset=8)]


def test_flatten_top_level_sequence_and_prefix():
    assert [kv.key for kv in flatten(parse("- x\n- y"))] == ["[0]", "[1]"]
    assert [kv.key for kv in flatten(parse("a: 1"), prefix="root")] == ["root.a"]


def test_flatten_empty_document():
    assert flatten(parse("")) == []


def test_to_python_scalar_and_none():
    assert to_python(None) is None
    assert to_python(parse("just text")) == "just text"


def test_iter_scalars_includes_keys_in_order():
    values = [s.value for s in iter_scalars(parse("a: 1\nb: [x, y]"))]
    assert values == ["a", "1", "b", "x", "y"]


def test_node_to_dict_is_json_ready():
    dumped = node_to_dict(parse("k: 'v'"))
    assert json.loads(json.dumps(dumped)) == dumped
    assert dumped["type"] == "map"
    assert dumped["style"] == "block"
    value = dumped["properties"][0]["value"]
    assert value == {
        "type": "scalar",
        "value": "v",
        "rawValue": "'v'",
        "format": "single",
        "startOffset": 3,
        "endOffset": 6,
    }


def test_node_to_dict_sequence():
    dumped = node_to_dict(parse("[a]"))
    assert dumped["type"] == "sequence"
    assert dumped["style"] == "flow"
    assert dumped["items"][0]["value"] == "a"
    assert node_to_dict(None) is None


def test_find_node_at_returns_innermost():
    text = "outer:\n  inner: value"
    root = parse(text)
    hit = find_node_at(root, text.index("value") + 2)
    assert isinstance(hit, ScalarNode)
    assert hit.value == "value"

    key = find_node_at(root, text.index("inner"))
    assert key.value == "inner"


def test_find_node_at_outside_and_between():
    text = "a: 1\nb: [x,  y]"
    root = parse(text)
    assert find_node_at(root, len(text) + 5) is None
    # the blanks between flow items belong to the sequence itself
    gap = find_node_at(root, text.index("y") - 1)
    assert gap.type == "sequence"
    assert isinstance(find_node_at(root, 0), ScalarNode)
    assert isinstance(root, MapNode)


def test_line_col():
    text = "a: 1\r\nb: 2\rc: 3\nd"
    assert line_col(text, 0) == (1, 1)
    assert line_col(text, 3) == (1, 4)
    assert line_col(text, 6) == (2, 1)
    assert line_col(text, 11) == (3, 1)
    assert line_col(text, 16) == (4, 1)


def test_line_index_end_of_text():
    index = LineIndex("ab\n")
    assert index.line_col(2) == (1, 3)
    assert index.line_col(3) == (2, 1)
