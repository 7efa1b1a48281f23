from __future__ import annotations

import fnmatch
import os
from pathlib import Path
from typing import Iterable, Iterator, Set

from yamlcst.core.models import CheckConfig, FileCandidate


def ensure_dir(p: Path) -> None:
    p.mkdir(parents=True, exist_ok=True)


def write_file(path: Path, content: str, *, force: bool) -> bool:
    if path.exists() and not force:
        return False
    path.write_text(content, encoding="utf-8")
    return True


def _matches(name: str, globs: Iterable[str]) -> bool:
    return any(fnmatch.fnmatch(name, g) for g in globs)


def _candidate(path: Path, root: Path) -> FileCandidate:
    try:
        rel = path.relative_to(root).as_posix()
    except ValueError:
        rel = path.as_posix()
    return FileCandidate(path=str(path), rel_path=rel or path.name, size_bytes=path.stat().st_size)


def iter_yaml_files(paths: Iterable[Path], config: CheckConfig) -> Iterator[FileCandidate]:
    """
    Expand files and directories into candidates.

    Files named explicitly are always taken; directories are walked for files
    matching `config.include`, pruning `config.skip_dirs`.
    """
    seen: Set[Path] = set()
    skip = set(config.skip_dirs)

    for raw in paths:
        root = raw.resolve()
        if root.is_file():
            if root not in seen:
                seen.add(root)
                yield _candidate(root, root.parent)
            continue
        if not root.is_dir():
            continue

        for dirpath, dirnames, filenames in os.walk(root):
            dirnames[:] = sorted(d for d in dirnames if d not in skip)
            for name in sorted(filenames):
                if not _matches(name, config.include):
                    continue
                p = Path(dirpath) / name
                if p in seen or not p.is_file():
                    continue
                seen.add(p)
                yield _candidate(p, root)


def read_text_candidate(c: FileCandidate) -> str:
    # newline="" keeps \r\n so offsets match the bytes on disk
    with open(c.path, encoding="utf-8", newline="") as fh:
        return fh.read()
