from __future__ import annotations

from typing import List

from yamlcst.parsers.cursor import TokenCursor
from yamlcst.parsers.diagnostics import ErrorCode
from yamlcst.parsers.scanner import TRIVIA, TokenKind
from yamlcst.parsers.types import (
    CollectionStyle,
    MapNode,
    Node,
    Property,
    ScalarFormat,
    ScalarNode,
    SequenceNode,
)


class FlowParser(TokenCursor):
    """
    `{...}` and `[...]` collections.

    Line breaks, indentation and comments between tokens mean nothing here.
    An unclosed collection ends after the last thing it could parse and is
    returned as-is; that is not reported.
    """

    def parse_flow_map(self) -> Node:
        if self.too_deep():
            return self.swallow_flow()

        with self.nested():
            open_tok = self.advance()
            properties: List[Property] = []
            end = open_tok.end

            self.skip_flow_trivia()
            while self.current.kind not in (TokenKind.FLOW_MAP_END, TokenKind.EOF):
                if self.current.kind is TokenKind.COMMA:
                    # empty entry, e.g. `{a: 1,, b: 2}`
                    self.advance()
                    self.skip_flow_trivia()
                    continue

                if self.current.kind is not TokenKind.SCALAR:
                    tok = self.current
                    self.report(ErrorCode.EXPECTED_KEY, "Expected mapping key", tok.start, tok.end)
                    break

                key = self.parse_flow_scalar()
                self.skip_flow_trivia()

                value: Node
                if self.current.kind is TokenKind.COLON:
                    colon = self.advance()
                    self.skip_flow_trivia()
                    value = self.parse_flow_value()
                    end = max(colon.end, value.end_offset)
                else:
                    # `{ key, other: value }`
                    value = self.empty_scalar(key.end_offset)
                    end = key.end_offset

                properties.append(Property(key=key, value=value))

                self.skip_flow_trivia()
                if self.current.kind is TokenKind.COMMA:
                    end = self.advance().end
                    self.skip_flow_trivia()

            if self.current.kind is TokenKind.FLOW_MAP_END:
                end = self.advance().end

            return MapNode(
                properties=tuple(properties),
                start_offset=open_tok.start,
                end_offset=end,
                style=CollectionStyle.FLOW,
            )

    def parse_flow_seq(self) -> Node:
        if self.too_deep():
            return self.swallow_flow()

        with self.nested():
            open_tok = self.advance()
            items: List[Node] = []
            end = open_tok.end

            self.skip_flow_trivia()
            while self.current.kind not in (TokenKind.FLOW_SEQ_END, TokenKind.EOF):
                kind = self.current.kind
                item: Node
                if kind is TokenKind.COMMA:
                    self.advance()
                    self.skip_flow_trivia()
                    continue
                if kind is TokenKind.FLOW_MAP_START:
                    item = self.parse_flow_map()
                elif kind is TokenKind.FLOW_SEQ_START:
                    item = self.parse_flow_seq()
                elif kind is TokenKind.SCALAR:
                    item = self.parse_flow_scalar()
                else:
                    tok = self.advance()
                    self.report(
                        ErrorCode.UNEXPECTED_TOKEN,
                        "Unexpected token in flow sequence",
                        tok.start,
                        tok.end,
                    )
                    self.skip_flow_trivia()
                    continue

                self.skip_flow_trivia()
                if self.current.kind is TokenKind.COLON and isinstance(item, ScalarNode):
                    item = self._single_pair(item)
                    self.skip_flow_trivia()

                items.append(item)
                end = item.end_offset

                if self.current.kind is TokenKind.COMMA:
                    end = self.advance().end
                    self.skip_flow_trivia()

            if self.current.kind is TokenKind.FLOW_SEQ_END:
                end = self.advance().end

            return SequenceNode(
                items=tuple(items),
                start_offset=open_tok.start,
                end_offset=end,
                style=CollectionStyle.FLOW,
            )

    def _single_pair(self, key: ScalarNode) -> MapNode:
        """`[a: 1]`: a one-entry mapping inside a flow sequence."""
        colon = self.advance()
        self.skip_flow_trivia()
        value = self.parse_flow_value()
        return MapNode(
            properties=(Property(key=key, value=value),),
            start_offset=key.start_offset,
            end_offset=max(colon.end, value.end_offset),
            style=CollectionStyle.FLOW,
        )

    def parse_flow_value(self) -> Node:
        kind = self.current.kind
        if kind is TokenKind.FLOW_MAP_START:
            return self.parse_flow_map()
        if kind is TokenKind.FLOW_SEQ_START:
            return self.parse_flow_seq()
        if kind is TokenKind.SCALAR:
            return self.parse_flow_scalar()
        return self.empty_scalar(self.current.start)

    def parse_flow_scalar(self) -> ScalarNode:
        """
        A scalar inside brackets. Plain scalars may run over several lines,
        each break folding to a single space; a comment ends them.
        """
        tok = self.advance()
        if tok.format is not ScalarFormat.NONE:
            return self.scalar_from_token(tok)

        parts = [tok.value]
        end = tok.end
        while True:
            p = self.pos
            crossed_line = False
            while self.tokens[p].kind in TRIVIA:
                kind = self.tokens[p].kind
                if kind is TokenKind.COMMENT:
                    break
                if kind is TokenKind.NEWLINE:
                    crossed_line = True
                p += 1

            nxt = self.tokens[p]
            if (
                not crossed_line
                or nxt.kind is not TokenKind.SCALAR
                or nxt.format is not ScalarFormat.NONE
                or self.tokens[p + 1].kind is TokenKind.COLON
            ):
                break

            self.pos = p + 1
            parts.extend((" ", nxt.value))
            end = nxt.end

        return ScalarNode(
            value="".join(parts),
            raw_value=self.text[tok.start:end],
            start_offset=tok.start,
            end_offset=end,
        )

    def skip_flow_trivia(self) -> None:
        while self.current.kind in TRIVIA:
            self.advance()
