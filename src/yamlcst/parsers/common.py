from __future__ import annotations

from bisect import bisect_right
from typing import Any, Dict, Iterator, List, Optional, Tuple

from yamlcst.parsers.types import MapNode, Node, ParsedKV, ScalarNode, SequenceNode


def iter_scalars(node: Optional[Node]) -> Iterator[ScalarNode]:
    """Every scalar in the tree (mapping keys included), in source order."""
    if node is None:
        return
    if isinstance(node, ScalarNode):
        yield node
    elif isinstance(node, MapNode):
        for prop in node.properties:
            yield prop.key
            yield from iter_scalars(prop.value)
    else:
        for item in node.items:
            yield from iter_scalars(item)


def to_python(node: Optional[Node]) -> Any:
    """
    Plain dict/list/str view of a tree. Scalars stay strings; for repeated
    keys the later value wins.
    """
    if node is None:
        return None
    if isinstance(node, ScalarNode):
        return node.value
    if isinstance(node, MapNode):
        return {prop.key.value: to_python(prop.value) for prop in node.properties}
    return [to_python(item) for item in node.items]


def node_to_dict(node: Optional[Node]) -> Optional[Dict[str, Any]]:
    """JSON-friendly dump of a tree, offsets included."""
    if node is None:
        return None
    if isinstance(node, ScalarNode):
        return {
            "type": node.type,
            "value": node.value,
            "rawValue": node.raw_value,
            "format": node.format.value,
            "startOffset": node.start_offset,
            "endOffset": node.end_offset,
        }
    if isinstance(node, MapNode):
        return {
            "type": node.type,
            "style": node.style.value,
            "startOffset": node.start_offset,
            "endOffset": node.end_offset,
            "properties": [
                {"key": node_to_dict(p.key), "value": node_to_dict(p.value)}
                for p in node.properties
            ],
        }
    return {
        "type": node.type,
        "style": node.style.value,
        "startOffset": node.start_offset,
        "endOffset": node.end_offset,
        "items": [node_to_dict(item) for item in node.items],
    }


def find_node_at(node: Optional[Node], offset: int) -> Optional[Node]:
    """Innermost node whose range contains `offset` (end inclusive)."""
    if node is None or not node.start_offset <= offset <= node.end_offset:
        return None
    if isinstance(node, MapNode):
        for prop in node.properties:
            hit = find_node_at(prop.key, offset) or find_node_at(prop.value, offset)
            if hit is not None:
                return hit
    elif isinstance(node, SequenceNode):
        for item in node.items:
            hit = find_node_at(item, offset)
            if hit is not None:
                return hit
    return node


class LineIndex:
    """Offset -> (line, column) lookups; both 1-based."""

    def __init__(self, text: str) -> None:
        starts = [0]
        i, n = 0, len(text)
        while i < n:
            ch = text[i]
            if ch == "\r" and text[i + 1:i + 2] == "\n":
                i += 1
            if ch in ("\r", "\n"):
                starts.append(i + 1)
            i += 1
        self._starts = starts

    def line_col(self, offset: int) -> Tuple[int, int]:
        line = bisect_right(self._starts, offset)
        return line, offset - self._starts[line - 1] + 1


def line_col(text: str, offset: int) -> Tuple[int, int]:
    return LineIndex(text).line_col(offset)


def flatten(node: Optional[Node], *, text: Optional[str] = None, prefix: str = "") -> List[ParsedKV]:
    """
    Flatten a tree into dot-path leaves.

    Examples:
      a: {b: 1}         -> [ParsedKV("a.b", "1")]
      a: [{b: 2}]       -> [ParsedKV("a[0].b", "2")]

    With `text`, each leaf also carries its 1-based line.
    """
    index = LineIndex(text) if text is not None else None
    out: List[ParsedKV] = []

    def _join(p: str, k: str) -> str:
        return k if not p else f"{p}.{k}"

    def _walk(n: Node, path: str) -> None:
        if isinstance(n, MapNode):
            for prop in n.properties:
                _walk(prop.value, _join(path, prop.key.value))
        elif isinstance(n, SequenceNode):
            for i, item in enumerate(n.items):
                _walk(item, f"{path}[{i}]" if path else f"[{i}]")
        else:
            out.append(
                ParsedKV(
                    key=path,
                    value=n.value,
                    line=index.line_col(n.start_offset)[0] if index else None,
                    start_offset=n.start_offset,
                    end_offset=n.end_offset,
                )
            )

    if node is not None:
        _walk(node, prefix)
    return out
