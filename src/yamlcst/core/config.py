from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

from pydantic import ValidationError

from yamlcst.core.errors import ConfigError
from yamlcst.core.models import CheckConfig, ParseOptions

# Python 3.11+ has tomllib; for 3.9/3.10 use tomli
try:
    import tomllib  # type: ignore
except ModuleNotFoundError:  # pragma: no cover
    import tomli as tomllib  # type: ignore

logger = logging.getLogger(__name__)


# Repo-local config (checked into the repo being checked)
DEFAULT_REPO_CONFIG_FILES = (".yamlcst/config.toml",)

# Global config (applies on this machine for all runs)
DEFAULT_GLOBAL_CONFIG_FILES = (
    "~/.config/yamlcst/config.toml",
    "~/.yamlcst/config.toml",
)


def _read_toml(path: Path) -> Dict[str, Any]:
    try:
        data = tomllib.loads(path.read_text(encoding="utf-8", errors="replace"))
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Invalid TOML in {path}: {e}", path=path) from e
    if not isinstance(data, dict):
        return {}
    return data


def _deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """
    Deep-merge override into base (dict-only). Lists/scalars are replaced.
    """
    out = dict(base)
    for k, v in override.items():
        if isinstance(v, dict) and isinstance(out.get(k), dict):
            out[k] = _deep_merge(out[k], v)  # type: ignore[arg-type]
        else:
            out[k] = v
    return out


def _expand_paths(paths: Tuple[str, ...]) -> list[Path]:
    return [Path(p).expanduser().resolve() for p in paths]


def find_repo_config(start_dir: Path) -> Optional[Path]:
    """
    Walk upward to find a repo-local config (works even without git).
    Finds the closest config in parent chain.
    """
    cur = start_dir.resolve()
    for parent in [cur, *cur.parents]:
        for rel in DEFAULT_REPO_CONFIG_FILES:
            p = (parent / rel).resolve()
            if p.exists() and p.is_file():
                return p
    return None


def find_global_config() -> Optional[Path]:
    for p in _expand_paths(DEFAULT_GLOBAL_CONFIG_FILES):
        if p.exists() and p.is_file():
            return p
    return None


def _section(merged: Dict[str, Any], name: str) -> Dict[str, Any]:
    section = merged.get(name) or {}
    if not isinstance(section, dict):
        raise ConfigError(f"[{name}] must be a table, got {type(section).__name__}")
    return section


@dataclass(frozen=True)
class LoadedConfig:
    parse_options: ParseOptions
    check_config: CheckConfig
    global_path: Optional[Path]
    repo_path: Optional[Path]


def load_check_config(
    start_dir: Path,
    cli_overrides: Optional[Dict[str, Any]] = None,
    *,
    use_global: bool = True,
) -> LoadedConfig:
    """
    Precedence (lowest -> highest):
      defaults (ParseOptions / CheckConfig) ->
      global config ->
      repo config (closest) ->
      cli_overrides
    """
    cli_overrides = cli_overrides or {}

    global_path = find_global_config() if use_global else None
    repo_path = find_repo_config(start_dir)

    merged: Dict[str, Any] = {}

    # Global
    if global_path:
        logger.debug("loading global config %s", global_path)
        merged = _deep_merge(merged, _read_toml(global_path))

    # Repo
    if repo_path:
        logger.debug("loading repo config %s", repo_path)
        merged = _deep_merge(merged, _read_toml(repo_path))

    # CLI overrides are expected to be in the same shape as TOML (namespaced)
    merged = _deep_merge(merged, cli_overrides)

    try:
        parse_options = ParseOptions.model_validate(_section(merged, "parser"))
        check_config = CheckConfig.model_validate(_section(merged, "check"))
    except ValidationError as e:
        source = repo_path or global_path
        raise ConfigError(f"Invalid configuration ({source or 'overrides'}):\n{e}", path=source) from e

    return LoadedConfig(
        parse_options=parse_options,
        check_config=check_config,
        global_path=global_path,
        repo_path=repo_path,
    )
