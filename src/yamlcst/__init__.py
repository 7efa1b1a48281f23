from __future__ import annotations

__version__ = "0.1.0"

from yamlcst.core.models import ParseOptions  # noqa: E402
from yamlcst.parsers import (  # noqa: E402
    ErrorCode,
    MapNode,
    Node,
    ParseError,
    ScalarNode,
    SequenceNode,
    flatten,
    parse,
    to_python,
)

__all__ = [
    "ErrorCode",
    "MapNode",
    "Node",
    "ParseError",
    "ParseOptions",
    "ScalarNode",
    "SequenceNode",
    "__version__",
    "flatten",
    "parse",
    "to_python",
]
