from yamlcst.parsers import (
    CollectionStyle,
    ErrorCode,
    MapNode,
    ScalarNode,
    SequenceNode,
    parse,
    to_python,
)


def parse_ok(text):
    errors = []
    node = parse(text, errors)
    assert errors == [], errors
    return node


def test_flow_sequence():
    node = parse_ok("[a, b, c]")
    assert isinstance(node, SequenceNode)
    assert node.style is CollectionStyle.FLOW
    assert [i.value for i in node.items] == ["a", "b", "c"]
    assert (node.start_offset, node.end_offset) == (0, 9)


def test_flow_map():
    node = parse_ok("{a: 1, b: 2}")
    assert isinstance(node, MapNode)
    assert node.style is CollectionStyle.FLOW
    assert to_python(node) == {"a": "1", "b": "2"}
    assert (node.start_offset, node.end_offset) == (0, 12)


def test_empty_flow_collections():
    assert parse_ok("[]").items == ()
    assert parse_ok("{}").properties == ()
    assert to_python(parse_ok("a: []\nb: {}")) == {"a": [], "b": {}}


def test_trailing_comma():
    assert to_python(parse_ok("[a, b,]")) == ["a", "b"]
    assert to_python(parse_ok("{a: 1,}")) == {"a": "1"}


def test_nested_flow():
    text = "{a: [1, {b: [x, y]}], c: {}}"
    assert to_python(parse_ok(text)) == {"a": ["1", {"b": ["x", "y"]}], "c": {}}


def test_quoted_items_in_flow():
    node = parse_ok("['a, b', \"c]\"]")
    assert [i.value for i in node.items] == ["a, b", "c]"]


def test_json_style_colon_without_space():
    assert to_python(parse_ok('{"a":1, "b":[2]}')) == {"a": "1", "b": ["2"]}


def test_plain_scalar_in_flow_may_hold_colon():
    assert to_python(parse_ok("[http://x.y/z]")) == ["http://x.y/z"]


def test_flow_spans_lines():
    text = "key: [\n  one,\n  two\n]\nnext: 1"
    assert to_python(parse_ok(text)) == {"key": ["one", "two"], "next": "1"}


def test_flow_map_spans_lines_with_comments():
    text = "{\n  a: 1, # first\n  b: 2\n}"
    assert to_python(parse_ok(text)) == {"a": "1", "b": "2"}


def test_multiline_plain_item_folds():
    node = parse_ok("[a\n  b, c]")
    assert node.items[0].value == "a b"
    assert node.items[0].raw_value == "a\n  b"
    assert node.items[1].value == "c"


def test_key_without_value_in_flow_map():
    node = parse_ok("{a, b: 1}")
    first = node.properties[0]
    assert first.key.value == "a"
    assert first.value.value == ""
    assert (first.value.start_offset, first.value.end_offset) == (2, 2)
    assert node.properties[1].value.value == "1"


def test_empty_value_after_colon_in_flow_map():
    node = parse_ok("{a: }")
    value = node.properties[0].value
    assert value.value == ""
    assert value.start_offset == 4
    assert node.end_offset == 5


def test_single_pair_inside_flow_sequence():
    node = parse_ok("[a: 1, b]")
    pair = node.items[0]
    assert isinstance(pair, MapNode)
    assert pair.style is CollectionStyle.FLOW
    assert (pair.start_offset, pair.end_offset) == (1, 5)
    assert to_python(node) == [{"a": "1"}, "b"]


def test_repeated_commas_are_skipped():
    assert to_python(parse_ok("[a,, b]")) == ["a", "b"]
    assert to_python(parse_ok("{a: 1,, b: 2}")) == {"a": "1", "b": "2"}


def test_unclosed_flow_sequence_recovers_silently():
    errors = []
    node = parse("[1, 2", errors)
    assert errors == []
    assert [i.value for i in node.items] == ["1", "2"]
    assert node.end_offset == 5


def test_unclosed_flow_map_recovers_silently():
    errors = []
    node = parse("{a: 1", errors)
    assert errors == []
    assert to_python(node) == {"a": "1"}


def test_unclosed_flow_map_in_block_value():
    errors = []
    node = parse("a: {b: 1\n", errors)
    assert errors == []
    assert to_python(node) == {"a": {"b": "1"}}


def test_non_scalar_flow_key_is_reported():
    errors = []
    node = parse("{[a]: 1}", errors)
    assert [e.code for e in errors] == [ErrorCode.EXPECTED_KEY.value]
    assert errors[0].range == (1, 2)
    assert isinstance(node, MapNode)
    assert node.properties == ()


def test_stray_colon_in_flow_sequence_is_reported_once():
    errors = []
    node = parse("[a, :, b]", errors)
    assert [e.code for e in errors] == [ErrorCode.UNEXPECTED_TOKEN.value]
    assert [i.value for i in node.items] == ["a", "b"]


def test_flow_items_are_scalar_nodes_with_exact_ranges():
    text = "k: [ one , 'two' ]"
    node = parse_ok(text)
    for item in node.properties[0].value.items:
        assert isinstance(item, ScalarNode)
        assert text[item.start_offset:item.end_offset] == item.raw_value
