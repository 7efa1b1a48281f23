from __future__ import annotations

import logging
import time
from datetime import datetime, timezone
from typing import Callable, Iterable, List, Optional

from yamlcst.core.models import (
    CheckConfig,
    CheckError,
    CheckResult,
    CheckStats,
    Diagnostic,
    FileCandidate,
    FileReport,
    ParseOptions,
)
from yamlcst.parsers import ParseError, parse
from yamlcst.parsers.common import LineIndex

logger = logging.getLogger(__name__)

TextReader = Callable[[FileCandidate], str]


def to_diagnostic(index: LineIndex, error: ParseError, config: CheckConfig) -> Diagnostic:
    line, column = index.line_col(error.start_offset)
    return Diagnostic(
        code=error.code,
        severity=config.severity_for(error.code),
        message=error.message,
        line=line,
        column=column,
        start_offset=error.start_offset,
        end_offset=error.end_offset,
    )


def check_text(
    text: str,
    *,
    file: str,
    options: Optional[ParseOptions] = None,
    config: Optional[CheckConfig] = None,
) -> FileReport:
    """Parse one document and turn its parse errors into a FileReport."""
    config = config or CheckConfig()
    errors: List[ParseError] = []
    node = parse(text, errors, options)

    index = LineIndex(text)
    diagnostics = [to_diagnostic(index, e, config) for e in errors]
    return FileReport(file=file, diagnostics=diagnostics, empty=node is None)


def run_check(
    *,
    candidates: Iterable[FileCandidate],
    options: ParseOptions,
    config: CheckConfig,
    read_text: TextReader,
) -> CheckResult:
    """
    Orchestrate a check:
    enumerate candidates -> read -> parse -> diagnostics -> CheckResult.
    """
    t0 = time.perf_counter()
    started_at = datetime.now(timezone.utc)

    cand_list = list(candidates)
    if config.deterministic:
        cand_list.sort(key=lambda c: c.rel_path)

    stats = CheckStats(files_considered=len(cand_list))
    reports: List[FileReport] = []
    errors: List[CheckError] = []

    for c in cand_list:
        if c.size_bytes > config.max_file_bytes:
            logger.info("skipping %s (%d bytes > %d)", c.rel_path, c.size_bytes, config.max_file_bytes)
            stats.files_skipped_too_large += 1
            continue

        try:
            text = read_text(c)
        except (OSError, UnicodeDecodeError) as e:
            # Non-fatal per-file error; keep checking
            logger.warning("failed reading %s: %s", c.rel_path, e)
            errors.append(CheckError(file=c.rel_path, message="Failed reading file", detail=str(e)))
            continue

        report = check_text(text, file=c.rel_path, options=options, config=config)
        stats.files_parsed += 1
        reports.append(report)

    if config.deterministic:
        for r in reports:
            r.diagnostics.sort(key=lambda d: (d.start_offset, d.end_offset, d.code))

    stats.duration_ms = int((time.perf_counter() - t0) * 1000)
    result = CheckResult(
        started_at=started_at,
        finished_at=datetime.now(timezone.utc),
        reports=reports,
        errors=errors,
        stats=stats,
    )
    logger.info(
        "checked %d file(s): %d diagnostic(s), %d error(s) in %d ms",
        stats.files_parsed,
        result.stats.diagnostics,
        len(errors),
        stats.duration_ms,
    )
    return result
