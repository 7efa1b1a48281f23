from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


# ================================
# Enums
# ================================


class Severity(str, Enum):
    WARNING = "warning"
    ERROR = "error"


_SEVERITY_RANK = {Severity.WARNING: 0, Severity.ERROR: 1}

# diagnostics not listed here are errors
DEFAULT_CODE_SEVERITY = {
    "duplicate-key": Severity.WARNING,
    "nesting-too-deep": Severity.WARNING,
}


def severity_at_least(sev: Severity, threshold: Severity) -> bool:
    return _SEVERITY_RANK[sev] >= _SEVERITY_RANK[threshold]


# ================================
# Parser options
# ================================

DEFAULT_MAX_DEPTH = 100


class ParseOptions(BaseModel):
    """
    Knobs for a single parse() call. Defaults live here.
    Repo/global/CLI overrides are merged by core/config.py.
    """

    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)

    allow_duplicate_keys: bool = Field(
        default=False,
        alias="allowDuplicateKeys",
        description="Do not report repeated mapping keys.",
    )
    max_depth: int = Field(
        default=DEFAULT_MAX_DEPTH,
        alias="maxDepth",
        ge=1,
        le=150,
        description="Collections nested deeper than this are kept as raw text.",
    )

    @classmethod
    def coerce(cls, value: Union["ParseOptions", Mapping[str, Any], None]) -> "ParseOptions":
        if value is None:
            return _DEFAULT_PARSE_OPTIONS
        if isinstance(value, ParseOptions):
            return value
        return cls.model_validate(dict(value))


_DEFAULT_PARSE_OPTIONS = ParseOptions()


# ================================
# Check config (defaults only)
# ================================

DEFAULT_INCLUDE = ["*.yaml", "*.yml"]

DEFAULT_SKIP_DIRS = [
    ".git",
    ".venv",
    "venv",
    "node_modules",
    "dist",
    "build",
    ".tox",
    ".mypy_cache",
    ".pytest_cache",
    ".ruff_cache",
]

DEFAULT_MAX_FILE_BYTES = 2_000_000


class CheckConfig(BaseModel):
    """
    Defaults live here.
    Repo/global/CLI overrides are merged by core/config.py (do NOT load config in defaults).
    """

    include: List[str] = Field(default_factory=lambda: list(DEFAULT_INCLUDE))
    skip_dirs: List[str] = Field(default_factory=lambda: list(DEFAULT_SKIP_DIRS))
    max_file_bytes: int = Field(default=DEFAULT_MAX_FILE_BYTES, ge=1)
    fail_on: Severity = Severity.ERROR
    # per-code overrides of DEFAULT_CODE_SEVERITY, e.g. {"duplicate-key" = "error"}
    severity: Dict[str, Severity] = Field(default_factory=dict)
    deterministic: bool = True

    @field_validator("include")
    @classmethod
    def _include_not_empty(cls, v: List[str]) -> List[str]:
        if not v:
            raise ValueError("check.include must list at least one glob")
        return v

    def severity_for(self, code: str) -> Severity:
        if code in self.severity:
            return self.severity[code]
        return DEFAULT_CODE_SEVERITY.get(code, Severity.ERROR)


# ================================
# Diagnostics + results
# ================================


class Diagnostic(BaseModel):
    code: str
    severity: Severity = Severity.ERROR
    message: str = ""
    line: int = Field(..., ge=1)
    column: int = Field(..., ge=1)
    start_offset: int = Field(..., ge=0)
    end_offset: int = Field(..., ge=0)

    @model_validator(mode="after")
    def _range_is_ordered(self) -> "Diagnostic":
        if self.end_offset < self.start_offset:
            raise ValueError("end_offset must not precede start_offset")
        return self


class FileReport(BaseModel):
    file: str
    diagnostics: List[Diagnostic] = Field(default_factory=list)
    empty: bool = False

    def at_least(self, threshold: Severity) -> List[Diagnostic]:
        return [d for d in self.diagnostics if severity_at_least(d.severity, threshold)]


class CheckStats(BaseModel):
    files_considered: int = 0
    files_parsed: int = 0
    files_skipped_too_large: int = 0
    diagnostics: int = 0
    duration_ms: int = 0


class CheckError(BaseModel):
    file: str
    message: str
    detail: Optional[str] = None


class CheckResult(BaseModel):
    started_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    finished_at: Optional[datetime] = None

    reports: List[FileReport] = Field(default_factory=list)
    errors: List[CheckError] = Field(default_factory=list)
    stats: CheckStats = Field(default_factory=CheckStats)

    @model_validator(mode="after")
    def _fixup_counts(self) -> "CheckResult":
        self.stats.diagnostics = sum(len(r.diagnostics) for r in self.reports)
        return self

    def diagnostics_at_least(self, threshold: Severity) -> int:
        return sum(len(r.at_least(threshold)) for r in self.reports)


# ================================
# Files
# ================================


class FileCandidate(BaseModel):
    """A file picked for checking. Sizes are taken at discovery time."""

    path: str
    rel_path: str
    size_bytes: int = 0
