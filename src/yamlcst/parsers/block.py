from __future__ import annotations

from typing import List, Optional, Set

from yamlcst.parsers.diagnostics import ErrorCode
from yamlcst.parsers.flow import FlowParser
from yamlcst.parsers.scanner import Token, TokenKind
from yamlcst.parsers.types import (
    MapNode,
    Node,
    Property,
    ScalarFormat,
    ScalarNode,
    SequenceNode,
)

_FLOW_OPEN = (TokenKind.FLOW_MAP_START, TokenKind.FLOW_SEQ_START)
_LINE_CONSUMING = (ScalarFormat.LITERAL, ScalarFormat.FOLDED)


class BlockParser(FlowParser):
    """
    Indentation driven mappings and sequences, plus the top-level dispatch.

    Every block collection is parsed against a base indent: lines indented
    less end it, lines indented more are reported and re-attached.
    """

    def parse_document(self) -> Optional[Node]:
        self.skip_blank_lines()
        while self.current.kind is TokenKind.DOCUMENT_START:
            self.advance()
            self.skip_blank_lines()

        if self.current.kind in (TokenKind.EOF, TokenKind.DOCUMENT_END):
            return None
        return self.parse_value(-1)

    # ----------------------------
    # Dispatch
    # ----------------------------

    def parse_value(self, parent_indent: int) -> Optional[Node]:
        self.skip_blank_lines()
        first = self.peek_past_indent()

        if first.kind in _FLOW_OPEN:
            if self.current.kind is TokenKind.INDENT:
                self.advance()
            if first.kind is TokenKind.FLOW_MAP_START:
                return self.parse_flow_map()
            return self.parse_flow_seq()

        indent = self._line_indent()
        if first.kind is TokenKind.DASH:
            return self.parse_block_sequence(indent)
        if self._looks_like_mapping():
            return self.parse_block_mapping(indent)
        if first.kind is TokenKind.SCALAR:
            return self.parse_scalar(parent_indent)
        return None

    def parse_scalar(self, parent_indent: int) -> ScalarNode:
        if self.current.kind is TokenKind.INDENT:
            self.advance()
        tok = self.advance()
        if tok.format is not ScalarFormat.NONE:
            return self.scalar_from_token(tok)
        return self.continue_plain(tok, parent_indent)

    def _looks_like_mapping(self) -> bool:
        offset = 1 if self.current.kind is TokenKind.INDENT else 0
        return (
            self.peek(offset).kind is TokenKind.SCALAR
            and self.peek(offset + 1).kind is TokenKind.COLON
        )

    def _line_indent(self) -> int:
        tok = self.current
        if tok.kind is TokenKind.INDENT:
            return tok.indent
        # content that does not start its line, e.g. after `--- ` or `- `
        return self.column(tok.start)

    # ----------------------------
    # Block mapping
    # ----------------------------

    def parse_block_mapping(self, base_indent: int, inline_first: bool = False) -> Node:
        """
        Sibling `key: value` lines at `base_indent`.

        With `inline_first` the first key sits right after a sequence dash and
        `base_indent` is that key's column.
        """
        if self.too_deep():
            return self.swallow_block(base_indent, lambda t: t.kind is not TokenKind.DASH)

        with self.nested():
            start = self.peek_past_indent().start
            properties: List[Property] = []
            seen: Set[str] = set()

            if inline_first:
                self._add_property(properties, seen, self._parse_mapping_entry(base_indent))

            while True:
                self.skip_blank_lines()
                if self.at_eof():
                    break

                if properties and not self.at_line_start():
                    self._skip_trailing_tokens()
                    continue

                indent = self._line_indent()
                if indent < base_indent:
                    break
                if not self._looks_like_mapping():
                    if indent > base_indent:
                        self._skip_stray_line(base_indent, indent)
                        continue
                    break

                if indent > base_indent:
                    self._report_indentation(base_indent, indent)
                self._add_property(properties, seen, self._parse_mapping_entry(base_indent))

            end = properties[-1].value.end_offset if properties else start
            return MapNode(properties=tuple(properties), start_offset=start, end_offset=end)

    def _add_property(self, properties: List[Property], seen: Set[str], prop: Property) -> None:
        key = prop.key
        if key.value in seen and not self.options.allow_duplicate_keys:
            self.report(
                ErrorCode.DUPLICATE_KEY,
                f'Duplicate key: "{key.value}"',
                key.start_offset,
                key.end_offset,
            )
        seen.add(key.value)
        properties.append(prop)

    def _parse_mapping_entry(self, base_indent: int) -> Property:
        if self.current.kind is TokenKind.INDENT:
            self.advance()
        key = self.scalar_from_token(self.advance())
        colon = self.advance()
        return Property(key=key, value=self._parse_mapping_value(base_indent, colon))

    def _parse_mapping_value(self, base_indent: int, colon: Token) -> Node:
        nxt = self.current

        # value on the same line
        if nxt.kind is TokenKind.FLOW_MAP_START:
            return self.parse_flow_map()
        if nxt.kind is TokenKind.FLOW_SEQ_START:
            return self.parse_flow_seq()
        if nxt.kind is TokenKind.SCALAR:
            tok = self.advance()
            if tok.format is not ScalarFormat.NONE:
                return self.scalar_from_token(tok)
            return self.continue_plain(tok, base_indent)
        if nxt.kind is TokenKind.DASH:
            # `key: - a` is not valid YAML; read it as a sequence at the dash
            return self.parse_block_sequence(self.column(nxt.start))

        # value on the following lines
        self.skip_blank_lines()
        if self.at_eof():
            return self._missing_value(colon, "Missing value")

        indent = self.current_indent()
        if indent == base_indent and self.peek_past_indent().kind is TokenKind.DASH:
            # a sequence may sit at the same indent as its key
            return self.parse_block_sequence(base_indent)
        if indent <= base_indent:
            return self._missing_value(colon, "Missing value")

        return self.parse_value(base_indent) or self.empty_scalar(colon.end)

    # ----------------------------
    # Block sequence
    # ----------------------------

    def parse_block_sequence(self, base_indent: int) -> Node:
        if self.too_deep():
            return self.swallow_block(base_indent, lambda t: t.kind is TokenKind.DASH)

        with self.nested():
            start = self.peek_past_indent().start
            end = start
            items: List[Node] = []

            while True:
                self.skip_blank_lines()
                if self.at_eof():
                    break

                if items and not self.at_line_start():
                    self._skip_trailing_tokens()
                    continue

                indent = self._line_indent()
                if indent < base_indent:
                    break
                if self.peek_past_indent().kind is not TokenKind.DASH:
                    if indent > base_indent:
                        self._skip_stray_line(base_indent, indent)
                        continue
                    break

                if indent > base_indent:
                    self._report_indentation(base_indent, indent)
                if self.current.kind is TokenKind.INDENT:
                    self.advance()
                dash = self.advance()

                item = self._parse_sequence_item_value(base_indent, dash)
                items.append(item)
                end = item.end_offset

            return SequenceNode(items=tuple(items), start_offset=start, end_offset=end)

    def _parse_sequence_item_value(self, base_indent: int, dash: Token) -> Node:
        if self.current.kind is TokenKind.COMMENT:
            self.advance()

        nxt = self.current
        if nxt.kind is TokenKind.FLOW_MAP_START:
            return self.parse_flow_map()
        if nxt.kind is TokenKind.FLOW_SEQ_START:
            return self.parse_flow_seq()
        if nxt.kind is TokenKind.DASH:
            # `- - a`: the inner sequence is anchored at its own dash
            return self.parse_block_sequence(self.column(nxt.start))
        if nxt.kind is TokenKind.SCALAR:
            if self.peek(1).kind is TokenKind.COLON:
                # `- name: x`: continuation keys line up with `name`
                return self.parse_block_mapping(self.column(nxt.start), inline_first=True)
            return self.parse_scalar(base_indent)

        self.skip_blank_lines()
        if self.at_eof() or self.current_indent() <= base_indent:
            return self._missing_value(dash, "Missing sequence item value")
        return self.parse_value(base_indent) or self.empty_scalar(dash.end)

    # ----------------------------
    # Recovery
    # ----------------------------

    def _missing_value(self, marker: Token, message: str) -> ScalarNode:
        self.report(ErrorCode.MISSING_VALUE, message, marker.start, marker.end)
        return self.empty_scalar(marker.end)

    def _report_indentation(self, expected: int, got: int) -> None:
        tok = self.current
        self.report(
            ErrorCode.UNEXPECTED_INDENTATION,
            f"Unexpected indentation (expected {expected}, got {got})",
            tok.start,
            tok.end,
        )

    def _skip_stray_line(self, expected: int, got: int) -> None:
        """Report an over-indented line that fits no construct and drop it."""
        self._report_indentation(expected, got)
        while self.current.kind not in (TokenKind.NEWLINE, TokenKind.EOF):
            tok = self.advance()
            if tok.format in _LINE_CONSUMING:
                break

    def _skip_trailing_tokens(self) -> None:
        """Report and drop whatever follows a finished value on its line."""
        start = end = self.current.start
        while self.current.kind not in (TokenKind.NEWLINE, TokenKind.EOF):
            tok = self.advance()
            if tok.kind is not TokenKind.COMMENT:
                end = tok.end
            if tok.format in _LINE_CONSUMING:
                break
        self.report(ErrorCode.UNEXPECTED_TOKEN, "Unexpected content after value", start, end)
