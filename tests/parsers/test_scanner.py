from yamlcst.parsers.scanner import Scanner, TokenKind, column_of
from yamlcst.parsers.types import ScalarFormat


def kinds(text):
    return [t.kind for t in Scanner(text).scan()]


def test_mapping_line_tokens():
    tokens = Scanner("key: value").scan()
    assert [t.kind for t in tokens] == [
        TokenKind.SCALAR,
        TokenKind.COLON,
        TokenKind.SCALAR,
        TokenKind.EOF,
    ]
    assert [(t.start, t.end) for t in tokens[:3]] == [(0, 3), (3, 4), (5, 10)]


def test_indent_token_carries_width():
    tokens = Scanner("a:\n    b: 1").scan()
    indent = [t for t in tokens if t.kind is TokenKind.INDENT][0]
    assert indent.indent == 4
    assert (indent.start, indent.end) == (3, 7)


def test_dash_needs_a_following_blank():
    assert kinds("- a")[:2] == [TokenKind.DASH, TokenKind.SCALAR]
    assert kinds("-a") == [TokenKind.SCALAR, TokenKind.EOF]


def test_flow_indicators_only_inside_brackets():
    assert kinds("a, b") == [TokenKind.SCALAR, TokenKind.EOF]
    assert kinds("[a, b]") == [
        TokenKind.FLOW_SEQ_START,
        TokenKind.SCALAR,
        TokenKind.COMMA,
        TokenKind.SCALAR,
        TokenKind.FLOW_SEQ_END,
        TokenKind.EOF,
    ]


def test_second_colon_on_block_line_is_content():
    tokens = Scanner("a: b: c").scan()
    assert [t.kind for t in tokens] == [TokenKind.SCALAR, TokenKind.COLON, TokenKind.SCALAR, TokenKind.EOF]
    assert tokens[2].value == "b: c"


def test_comment_and_newline_tokens():
    tokens = Scanner("a # note\r\nb").scan()
    assert [t.kind for t in tokens] == [
        TokenKind.SCALAR,
        TokenKind.COMMENT,
        TokenKind.NEWLINE,
        TokenKind.SCALAR,
        TokenKind.EOF,
    ]
    assert tokens[1].value == "# note"
    assert (tokens[2].start, tokens[2].end) == (8, 10)


def test_quoted_and_block_scalar_formats():
    tokens = Scanner("a: 'x'\nb: |\n  y\n").scan()
    formats = [t.format for t in tokens if t.kind is TokenKind.SCALAR]
    assert formats == [
        ScalarFormat.NONE,
        ScalarFormat.SINGLE,
        ScalarFormat.NONE,
        ScalarFormat.LITERAL,
    ]


def test_document_markers_and_directives():
    assert kinds("%YAML 1.2\n---\na\n...\n") == [
        TokenKind.NEWLINE,
        TokenKind.DOCUMENT_START,
        TokenKind.NEWLINE,
        TokenKind.SCALAR,
        TokenKind.NEWLINE,
        TokenKind.DOCUMENT_END,
        TokenKind.NEWLINE,
        TokenKind.EOF,
    ]


def test_column_of():
    text = "ab\r\n  cd"
    assert column_of(text, 0) == 0
    assert column_of(text, 6) == 2
