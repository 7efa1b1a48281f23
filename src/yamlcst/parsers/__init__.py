from __future__ import annotations

from typing import Any, List, Mapping, Optional, Union

from yamlcst.core.models import ParseOptions
from yamlcst.parsers.block import BlockParser
from yamlcst.parsers.common import find_node_at, flatten, iter_scalars, line_col, node_to_dict, to_python
from yamlcst.parsers.diagnostics import DiagnosticsCollector, ErrorCode, ParseError
from yamlcst.parsers.scanner import Scanner
from yamlcst.parsers.types import (
    CollectionStyle,
    MapNode,
    Node,
    ParsedKV,
    Property,
    ScalarFormat,
    ScalarNode,
    SequenceNode,
)

__all__ = [
    "CollectionStyle",
    "ErrorCode",
    "MapNode",
    "Node",
    "ParseError",
    "ParseOptions",
    "ParsedKV",
    "Property",
    "ScalarFormat",
    "ScalarNode",
    "SequenceNode",
    "find_node_at",
    "flatten",
    "iter_scalars",
    "line_col",
    "node_to_dict",
    "parse",
    "to_python",
]


def parse(
    text: str,
    errors: Optional[List[ParseError]] = None,
    options: Union[ParseOptions, Mapping[str, Any], None] = None,
) -> Optional[Node]:
    """
    Parse `text` into a concrete syntax tree.

    Never raises on malformed input: problems are appended to `errors` (when
    given) and the best tree that could be built is returned. Returns None
    when the text holds no content (empty, blank lines, only comments).
    """
    opts = ParseOptions.coerce(options)
    sink = DiagnosticsCollector(errors if errors is not None else [])
    tokens = Scanner(text).scan()
    return BlockParser(tokens, text, sink, opts).parse_document()
