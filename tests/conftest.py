import pytest


@pytest.fixture(autouse=True)
def isolated_home(tmp_path_factory, monkeypatch):
    # keep a developer's ~/.config/yamlcst out of config and CLI tests
    home = tmp_path_factory.mktemp("home")
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("USERPROFILE", str(home))
    return home


@pytest.fixture
def yaml_tree(tmp_path):
    """A small directory of YAML files, one of them broken."""
    (tmp_path / "good.yaml").write_text("name: demo\nitems:\n  - a\n  - b\n", encoding="utf-8")
    (tmp_path / "dupes.yml").write_text("key: 1\nkey: 2\n", encoding="utf-8")
    (tmp_path / "broken.yaml").write_text("name:\nage: 30\n", encoding="utf-8")
    (tmp_path / "notes.txt").write_text("key:\n", encoding="utf-8")
    skipped = tmp_path / "node_modules"
    skipped.mkdir()
    (skipped / "vendored.yaml").write_text("bad:\n", encoding="utf-8")
    return tmp_path
