from __future__ import annotations

from contextlib import contextmanager
from typing import Callable, Iterator, List

from yamlcst.core.models import ParseOptions
from yamlcst.parsers.diagnostics import DiagnosticsCollector, ErrorCode
from yamlcst.parsers.scanner import TRIVIA, Token, TokenKind, column_of
from yamlcst.parsers.types import ScalarFormat, ScalarNode

_BLOCK_FORMATS = (ScalarFormat.LITERAL, ScalarFormat.FOLDED)
_FLOW_OPEN = (TokenKind.FLOW_MAP_START, TokenKind.FLOW_SEQ_START)
_FLOW_CLOSE = (TokenKind.FLOW_MAP_END, TokenKind.FLOW_SEQ_END)
_DOCUMENT_MARKERS = (TokenKind.DOCUMENT_START, TokenKind.DOCUMENT_END)


class TokenCursor:
    """
    Position over the scanner's tokens, shared by the flow and block parsers.

    Holds everything one parse() call needs: the tokens, the source text, the
    diagnostics sink, the options and the current nesting depth. A cursor is
    used for exactly one document and then thrown away.
    """

    def __init__(
        self,
        tokens: List[Token],
        text: str,
        diagnostics: DiagnosticsCollector,
        options: ParseOptions,
    ) -> None:
        self.tokens = tokens
        self.text = text
        self.diagnostics = diagnostics
        self.options = options
        self.pos = 0
        self._depth = 0

    # ----------------------------
    # Token access
    # ----------------------------

    @property
    def current(self) -> Token:
        return self.tokens[self.pos]

    def peek(self, offset: int = 0) -> Token:
        return self.tokens[min(self.pos + offset, len(self.tokens) - 1)]

    def advance(self) -> Token:
        tok = self.tokens[self.pos]
        if tok.kind is not TokenKind.EOF:
            self.pos += 1
        return tok

    def at_eof(self) -> bool:
        return self.current.kind is TokenKind.EOF

    def skip_blank_lines(self) -> None:
        """Skip newlines, comments and indentation of lines with no content."""
        while True:
            kind = self.current.kind
            if kind is TokenKind.NEWLINE or kind is TokenKind.COMMENT:
                self.advance()
            elif kind is TokenKind.INDENT and self.peek(1).kind in (
                TokenKind.NEWLINE,
                TokenKind.COMMENT,
                TokenKind.EOF,
            ):
                self.advance()
            else:
                return

    def at_line_start(self) -> bool:
        """True when the current token is the first thing on its line."""
        if self.pos == 0 or self.current.kind is TokenKind.INDENT:
            return True
        prev = self.tokens[self.pos - 1]
        # block scalars end at the start of the next line
        return prev.kind is TokenKind.NEWLINE or prev.format in _BLOCK_FORMATS

    def current_indent(self) -> int:
        tok = self.current
        return tok.indent if tok.kind is TokenKind.INDENT else 0

    def peek_past_indent(self) -> Token:
        return self.peek(1) if self.current.kind is TokenKind.INDENT else self.current

    def column(self, offset: int) -> int:
        return column_of(self.text, offset)

    # ----------------------------
    # Nodes
    # ----------------------------

    def scalar_from_token(self, tok: Token) -> ScalarNode:
        return ScalarNode(
            value=tok.value,
            raw_value=self.text[tok.start:tok.end],
            start_offset=tok.start,
            end_offset=tok.end,
            format=tok.format,
        )

    @staticmethod
    def empty_scalar(offset: int) -> ScalarNode:
        return ScalarNode(value="", raw_value="", start_offset=offset, end_offset=offset)

    def report(self, code: ErrorCode, message: str, start: int, end: int) -> None:
        self.diagnostics.report(code, message, start, end)

    # ----------------------------
    # Plain scalar continuation
    # ----------------------------

    def continue_plain(self, first: Token, parent_indent: int) -> ScalarNode:
        """
        Extend the plain scalar `first` over following lines.

        A line continues the scalar when it is indented deeper than
        `parent_indent` (any line, for a top-level scalar) and is neither a
        mapping key nor a comment. A single break folds to a space, each
        blank line in between to "\\n".
        """
        parts = [first.value]
        end = first.end

        while True:
            saved = self.pos
            empty_lines = 0
            found = False

            while self.current.kind is TokenKind.NEWLINE:
                self.advance()
                after = self.current
                if after.kind is TokenKind.NEWLINE:
                    empty_lines += 1
                    continue
                if after.kind is TokenKind.INDENT:
                    nxt = self.peek(1)
                    if nxt.kind in (TokenKind.NEWLINE, TokenKind.EOF):
                        empty_lines += 1
                        self.advance()
                        continue
                    found = nxt.kind is not TokenKind.COMMENT and after.indent > parent_indent
                    break
                if after.kind is TokenKind.EOF or after.kind in _DOCUMENT_MARKERS:
                    break
                # content at column 0 only continues a top-level scalar
                found = parent_indent < 0
                break

            if not found:
                self.pos = saved
                break

            if self.current.kind is TokenKind.INDENT:
                self.advance()
            tok = self.current
            separator = "\n" * empty_lines if empty_lines else " "

            if tok.kind is TokenKind.DASH:
                # a more-indented dash cannot open a sequence here; it is text
                dash = self.advance()
                if self.current.kind is TokenKind.SCALAR:
                    rest = self.advance()
                    parts.extend((separator, "- " + self._line_text(rest)))
                    end = rest.end
                else:
                    parts.extend((separator, "-"))
                    end = dash.end
                continue

            if tok.kind is not TokenKind.SCALAR or self.peek(1).kind is TokenKind.COLON:
                self.pos = saved
                break

            self.advance()
            parts.extend((separator, self._line_text(tok)))
            end = tok.end

        return ScalarNode(
            value="".join(parts),
            raw_value=self.text[first.start:end],
            start_offset=first.start,
            end_offset=end,
        )

    def _line_text(self, tok: Token) -> str:
        # quotes on a continuation line are ordinary characters
        if tok.format is ScalarFormat.NONE:
            return tok.value
        return self.text[tok.start:tok.end]

    # ----------------------------
    # Nesting guard
    # ----------------------------

    def too_deep(self) -> bool:
        return self._depth >= self.options.max_depth

    @contextmanager
    def nested(self) -> Iterator[None]:
        self._depth += 1
        try:
            yield
        finally:
            self._depth -= 1

    def swallow_flow(self) -> ScalarNode:
        """Consume a whole bracketed collection as raw text."""
        start = self.current.start
        end = start
        depth = 0
        while not self.at_eof():
            tok = self.advance()
            if tok.kind not in TRIVIA:
                end = tok.end
            if tok.kind in _FLOW_OPEN:
                depth += 1
            elif tok.kind in _FLOW_CLOSE:
                depth -= 1
                if depth <= 0:
                    break
        return self._too_deep_scalar(start, end)

    def swallow_block(self, base_indent: int, owns_line: Callable[[Token], bool]) -> ScalarNode:
        """
        Consume a block collection as raw text: the rest of the current line,
        then every line indented deeper than `base_indent`, plus lines at
        `base_indent` whose first token `owns_line` accepts.
        """
        if self.current.kind is TokenKind.INDENT:
            self.advance()
        start = self.current.start
        end = start
        at_line_start = False

        while not self.at_eof():
            tok = self.current
            if at_line_start and tok.kind is not TokenKind.NEWLINE:
                content = self.peek(1) if tok.kind is TokenKind.INDENT else tok
                if content.kind not in (TokenKind.NEWLINE, TokenKind.COMMENT, TokenKind.EOF):
                    indent = tok.indent if tok.kind is TokenKind.INDENT else 0
                    if (
                        content.kind in _DOCUMENT_MARKERS
                        or indent < base_indent
                        or (indent == base_indent and not owns_line(content))
                    ):
                        break
                at_line_start = False

            self.advance()
            if tok.kind not in TRIVIA:
                end = tok.end
            if tok.kind is TokenKind.NEWLINE or tok.format in _BLOCK_FORMATS:
                at_line_start = True

        return self._too_deep_scalar(start, end)

    def _too_deep_scalar(self, start: int, end: int) -> ScalarNode:
        self.report(
            ErrorCode.NESTING_TOO_DEEP,
            f"Nesting deeper than {self.options.max_depth} levels; kept as text",
            start,
            end,
        )
        raw = self.text[start:end]
        return ScalarNode(value=raw, raw_value=raw, start_offset=start, end_offset=end)
