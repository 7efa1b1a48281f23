from __future__ import annotations

from enum import Enum, auto
from typing import List

from yamlcst.parsers.scalars import (
    INLINE_WS,
    LINE_BREAKS,
    consume_newline,
    is_block_scalar_header,
    is_document_marker,
    line_end,
    read_block_scalar,
    read_plain,
    read_quoted,
    skip_inline_whitespace,
)
from yamlcst.parsers.types import ScalarFormat


class TokenKind(Enum):
    SCALAR = auto()
    COLON = auto()
    DASH = auto()
    COMMA = auto()
    FLOW_MAP_START = auto()
    FLOW_MAP_END = auto()
    FLOW_SEQ_START = auto()
    FLOW_SEQ_END = auto()
    NEWLINE = auto()
    INDENT = auto()
    COMMENT = auto()
    DOCUMENT_START = auto()
    DOCUMENT_END = auto()
    EOF = auto()


# tokens that carry no structure of their own
TRIVIA = frozenset({TokenKind.NEWLINE, TokenKind.INDENT, TokenKind.COMMENT})


class Token:
    __slots__ = ("kind", "start", "end", "value", "format", "indent")

    def __init__(
        self,
        kind: TokenKind,
        start: int,
        end: int,
        value: str = "",
        format: ScalarFormat = ScalarFormat.NONE,
        indent: int = 0,
    ) -> None:
        self.kind = kind
        self.start = start
        self.end = end
        self.value = value
        self.format = format
        self.indent = indent

    def __repr__(self) -> str:
        return f"Token({self.kind.name}, {self.start}, {self.end}, {self.value!r})"


def column_of(text: str, offset: int) -> int:
    """0-based column of `offset` within its line."""
    line_start = max(text.rfind("\n", 0, offset), text.rfind("\r", 0, offset)) + 1
    return offset - line_start


class Scanner:
    """
    Turns the input into a flat token list, one physical line at a time.

    Every line that starts with blanks yields an INDENT token carrying its
    width, so the structure parsers can read indentation without looking at
    the text again. Flow depth is tracked so that `,` `]` `}` are only
    indicators inside brackets.
    """

    def __init__(self, text: str) -> None:
        self.text = text
        self.pos = 0
        self.tokens: List[Token] = []
        self._flow_depth = 0
        # after the first `key:` of a block line, further `: ` is content
        self._seen_block_colon = False

    def scan(self) -> List[Token]:
        while self.pos < len(self.text):
            self._scan_line()
        self._emit(TokenKind.EOF, self.pos, self.pos)
        return self.tokens

    # ----------------------------
    # Lines
    # ----------------------------

    def _scan_line(self) -> None:
        text = self.text
        self._seen_block_colon = False

        if text[self.pos] in LINE_BREAKS:
            self._scan_newline()
            return

        indent_start = self.pos
        while self.pos < len(text) and text[self.pos] in INLINE_WS:
            self.pos += 1
        indent = self.pos - indent_start
        if indent:
            self._emit(TokenKind.INDENT, indent_start, self.pos, indent=indent)

        if self._at_line_end():
            self._scan_newline()
            return

        if indent == 0 and is_document_marker(text, self.pos):
            kind = TokenKind.DOCUMENT_START if text[self.pos] == "-" else TokenKind.DOCUMENT_END
            self._emit(kind, self.pos, self.pos + 3)
            self.pos += 3
            self._scan_line_content()
            self._scan_newline()
            return

        ch = text[self.pos]
        if ch == "#":
            self._scan_comment()
        elif ch == "%":
            # directives (%YAML, %TAG) are skipped
            self.pos = line_end(text, self.pos)
        else:
            self._scan_line_content()
        self._scan_newline()

    def _scan_line_content(self) -> None:
        text = self.text
        while not self._at_line_end():
            self.pos = skip_inline_whitespace(text, self.pos)
            if self._at_line_end():
                break

            ch = text[self.pos]
            in_flow = self._flow_depth > 0

            if ch == "#":
                self._scan_comment()
                break
            elif ch == "{":
                self._flow_depth += 1
                self._emit_char(TokenKind.FLOW_MAP_START)
            elif ch == "}" and in_flow:
                self._flow_depth -= 1
                self._emit_char(TokenKind.FLOW_MAP_END)
            elif ch == "[":
                self._flow_depth += 1
                self._emit_char(TokenKind.FLOW_SEQ_START)
            elif ch == "]" and in_flow:
                self._flow_depth -= 1
                self._emit_char(TokenKind.FLOW_SEQ_END)
            elif ch == "," and in_flow:
                self._emit_char(TokenKind.COMMA)
            elif ch == "-" and self._is_block_dash():
                self._emit_char(TokenKind.DASH)
            elif ch == ":" and self._is_value_colon():
                self._emit_char(TokenKind.COLON)
                if not in_flow:
                    self._seen_block_colon = True
            elif ch == ":" and in_flow and self._follows_json_node():
                # `"key":value` and `[a]:b` need no space after the colon
                self._emit_char(TokenKind.COLON)
            elif ch in ("'", '"'):
                self._scan_quoted()
            elif ch in ("|", ">") and not in_flow and is_block_scalar_header(text, self.pos):
                self._scan_block_scalar()
                # the block scalar consumed whole lines
                break
            else:
                self._scan_plain()

    def _at_line_end(self) -> bool:
        return self.pos >= len(self.text) or self.text[self.pos] in LINE_BREAKS

    def _is_block_dash(self) -> bool:
        nxt = self.text[self.pos + 1:self.pos + 2]
        return nxt == "" or nxt in INLINE_WS or nxt in LINE_BREAKS

    def _is_value_colon(self) -> bool:
        if self._seen_block_colon and self._flow_depth == 0:
            return False
        nxt = self.text[self.pos + 1:self.pos + 2]
        if nxt == "" or nxt in INLINE_WS or nxt in LINE_BREAKS:
            return True
        return self._flow_depth > 0 and nxt in (",", "}", "]")

    def _follows_json_node(self) -> bool:
        for tok in reversed(self.tokens):
            if tok.kind in TRIVIA:
                continue
            if tok.kind is TokenKind.SCALAR:
                return tok.format in (ScalarFormat.SINGLE, ScalarFormat.DOUBLE)
            return tok.kind in (TokenKind.FLOW_MAP_END, TokenKind.FLOW_SEQ_END)
        return False

    # ----------------------------
    # Scalars
    # ----------------------------

    def _scan_quoted(self) -> None:
        start = self.pos
        fmt = ScalarFormat.SINGLE if self.text[start] == "'" else ScalarFormat.DOUBLE
        value, end = read_quoted(self.text, start)
        self._emit(TokenKind.SCALAR, start, end, value=value, format=fmt)
        self.pos = end

    def _scan_plain(self) -> None:
        start = self.pos
        end, stop = read_plain(
            self.text,
            start,
            in_flow=self._flow_depth > 0,
            colons_are_content=self._seen_block_colon and self._flow_depth == 0,
        )
        if stop == start:
            # a lone indicator character that starts nothing else
            end = stop = start + 1
        self._emit(TokenKind.SCALAR, start, end, value=self.text[start:end])
        self.pos = stop

    def _scan_block_scalar(self) -> None:
        start = self.pos
        value, end, fmt = read_block_scalar(self.text, start, self._parent_block_indent())
        self._emit(TokenKind.SCALAR, start, end, value=value, format=fmt)
        self.pos = end

    def _parent_block_indent(self) -> int:
        """
        Indentation the content of a block scalar must exceed: the column of
        the mapping key or sequence dash that owns it, -1 right after `---`.
        """
        for i in range(len(self.tokens) - 1, -1, -1):
            tok = self.tokens[i]
            if tok.kind in TRIVIA:
                continue
            if tok.kind is TokenKind.COLON:
                for j in range(i - 1, -1, -1):
                    key = self.tokens[j]
                    if key.kind not in TRIVIA:
                        return column_of(self.text, key.start)
                return 0
            if tok.kind is TokenKind.DASH:
                return column_of(self.text, tok.start)
            if tok.kind is TokenKind.DOCUMENT_START:
                return -1
            break
        return 0

    # ----------------------------
    # Trivia
    # ----------------------------

    def _scan_comment(self) -> None:
        start = self.pos
        self.pos = line_end(self.text, start)
        self._emit(TokenKind.COMMENT, start, self.pos, value=self.text[start:self.pos])

    def _scan_newline(self) -> None:
        start = self.pos
        self.pos = consume_newline(self.text, start)
        if self.pos > start:
            self._emit(TokenKind.NEWLINE, start, self.pos)

    def _emit_char(self, kind: TokenKind) -> None:
        self._emit(kind, self.pos, self.pos + 1)
        self.pos += 1

    def _emit(self, kind: TokenKind, start: int, end: int, **extra: object) -> None:
        self.tokens.append(Token(kind, start, end, **extra))  # type: ignore[arg-type]
