from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import List, Tuple

logger = logging.getLogger(__name__)


class ErrorCode(str, Enum):
    MISSING_VALUE = "missing-value"
    DUPLICATE_KEY = "duplicate-key"
    UNEXPECTED_INDENTATION = "unexpected-indentation"
    EXPECTED_KEY = "expected-key"
    UNEXPECTED_TOKEN = "unexpected-token"
    NESTING_TOO_DEEP = "nesting-too-deep"


@dataclass(frozen=True)
class ParseError:
    """ A recoverable problem found while parsing. Never raised."""
    code: str
    message: str
    start_offset: int
    end_offset: int

    @property
    def range(self) -> Tuple[int, int]:
        return (self.start_offset, self.end_offset)


class DiagnosticsCollector:
    """
    Append-only sink over a caller-owned list.

    Diagnostics are appended in the order they are discovered; nothing is
    ever removed or reordered.
    """

    def __init__(self, errors: List[ParseError]) -> None:
        self._errors = errors

    def report(self, code: ErrorCode, message: str, start_offset: int, end_offset: int) -> None:
        err = ParseError(
            code=code.value,
            message=message,
            start_offset=start_offset,
            end_offset=end_offset,
        )
        logger.debug("yaml diagnostic %s at %d..%d: %s", err.code, start_offset, end_offset, message)
        self._errors.append(err)
