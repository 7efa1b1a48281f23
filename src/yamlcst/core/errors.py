from __future__ import annotations

from enum import IntEnum


class ExitCode(IntEnum):
    OK = 0
    DIAGNOSTICS = 1
    ERROR = 2


class YamlCstError(Exception):
    """Base for errors raised outside the parser (the parser itself never raises)."""


class ConfigError(YamlCstError):
    """A config file could not be read or failed validation."""

    def __init__(self, message: str, *, path: object = None) -> None:
        super().__init__(message)
        self.path = path
