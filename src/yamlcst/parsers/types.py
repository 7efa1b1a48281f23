from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Literal, Optional, Tuple, Union


class ScalarFormat(str, Enum):
    NONE = "none"
    SINGLE = "single"
    DOUBLE = "double"
    LITERAL = "literal"
    FOLDED = "folded"


class CollectionStyle(str, Enum):
    BLOCK = "block"
    FLOW = "flow"


@dataclass(frozen=True)
class ScalarNode:
    """
    A scalar with its decoded value and the exact source slice it came from.

    `raw_value` is always `text[start_offset:end_offset]`.
    """
    value: str
    raw_value: str
    start_offset: int
    end_offset: int
    format: ScalarFormat = ScalarFormat.NONE
    type: Literal["scalar"] = field(default="scalar", init=False)


@dataclass(frozen=True)
class Property:
    key: ScalarNode
    value: "Node"


@dataclass(frozen=True)
class MapNode:
    properties: Tuple[Property, ...]
    start_offset: int
    end_offset: int
    style: CollectionStyle = CollectionStyle.BLOCK
    type: Literal["map"] = field(default="map", init=False)


@dataclass(frozen=True)
class SequenceNode:
    items: Tuple["Node", ...]
    start_offset: int
    end_offset: int
    style: CollectionStyle = CollectionStyle.BLOCK
    type: Literal["sequence"] = field(default="sequence", init=False)


Node = Union[ScalarNode, MapNode, SequenceNode]


@dataclass(frozen=True)
class ParsedKV:
    """ A flattened leaf of a parsed document, addressed by its key path."""
    key: str
    value: str
    line: Optional[int] = None
    start_offset: Optional[int] = None
    end_offset: Optional[int] = None
