import pytest

from yamlcst.core.config import _deep_merge, find_repo_config, load_check_config
from yamlcst.core.errors import ConfigError
from yamlcst.core.models import CheckConfig, ParseOptions, Severity


def write_config(root, body):
    cfg_dir = root / ".yamlcst"
    cfg_dir.mkdir(parents=True, exist_ok=True)
    path = cfg_dir / "config.toml"
    path.write_text(body, encoding="utf-8")
    return path


def test_defaults_without_any_config(tmp_path):
    loaded = load_check_config(tmp_path)
    assert loaded.parse_options == ParseOptions()
    assert loaded.check_config == CheckConfig()
    assert loaded.repo_path is None
    assert loaded.global_path is None


def test_repo_config_found_from_subdirectory(tmp_path):
    path = write_config(tmp_path, "[parser]\nmax_depth = 20\n")
    nested = tmp_path / "a" / "b"
    nested.mkdir(parents=True)

    assert find_repo_config(nested) == path.resolve()
    loaded = load_check_config(nested)
    assert loaded.parse_options.max_depth == 20
    assert loaded.repo_path == path.resolve()


def test_precedence_global_repo_cli(tmp_path, isolated_home):
    global_dir = isolated_home / ".config" / "yamlcst"
    global_dir.mkdir(parents=True)
    (global_dir / "config.toml").write_text(
        '[parser]\nmax_depth = 10\nallow_duplicate_keys = true\n[check]\nfail_on = "warning"\n',
        encoding="utf-8",
    )
    write_config(tmp_path, "[parser]\nmax_depth = 30\n")

    loaded = load_check_config(tmp_path, {"parser": {"max_depth": 40}})
    assert loaded.parse_options.max_depth == 40
    assert loaded.parse_options.allow_duplicate_keys is True
    assert loaded.check_config.fail_on is Severity.WARNING
    assert loaded.global_path is not None

    ignored = load_check_config(tmp_path, use_global=False)
    assert ignored.parse_options.allow_duplicate_keys is False
    assert ignored.check_config.fail_on is Severity.ERROR


def test_severity_overrides(tmp_path):
    write_config(tmp_path, '[check.severity]\n"duplicate-key" = "error"\n')
    cfg = load_check_config(tmp_path).check_config
    assert cfg.severity_for("duplicate-key") is Severity.ERROR
    assert cfg.severity_for("nesting-too-deep") is Severity.WARNING
    assert cfg.severity_for("missing-value") is Severity.ERROR


def test_invalid_toml_raises_config_error(tmp_path):
    path = write_config(tmp_path, "[parser\n")
    with pytest.raises(ConfigError) as exc:
        load_check_config(tmp_path)
    assert exc.value.path == path.resolve()


def test_invalid_values_raise_config_error(tmp_path):
    write_config(tmp_path, "[parser]\nmax_depth = 0\n")
    with pytest.raises(ConfigError):
        load_check_config(tmp_path)


def test_unknown_parser_key_is_rejected(tmp_path):
    write_config(tmp_path, "[parser]\nmax_dept = 3\n")
    with pytest.raises(ConfigError):
        load_check_config(tmp_path)


def test_section_must_be_a_table(tmp_path):
    write_config(tmp_path, 'parser = "strict"\n')
    with pytest.raises(ConfigError):
        load_check_config(tmp_path)


def test_empty_include_is_rejected():
    with pytest.raises(ValueError):
        CheckConfig(include=[])


def test_deep_merge_replaces_lists_and_merges_tables():
    base = {"check": {"include": ["*.yaml"], "fail_on": "error"}}
    override = {"check": {"include": ["*.yml"]}}
    assert _deep_merge(base, override) == {"check": {"include": ["*.yml"], "fail_on": "error"}}
    assert base["check"]["include"] == ["*.yaml"]
