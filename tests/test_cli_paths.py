from pathlib import Path


def test_default_tree_path_in_working_directory(tmp_path, monkeypatch):
    """Test default tree path falls back to ./rules.json."""
    monkeypatch.delenv("DECISION_TREE_PATH", raising=False)
    monkeypatch.chdir(tmp_path)
    from decision_tree.cli.paths import default_tree_path

    result = default_tree_path()

    assert Path(result).resolve() == (tmp_path / "rules.json").resolve()


def test_default_tree_path_from_environment(tmp_path, monkeypatch):
    """Test $DECISION_TREE_PATH overrides the working directory."""
    configured = tmp_path / "configured" / "tree.yaml"
    monkeypatch.setenv("DECISION_TREE_PATH", str(configured))
    from decision_tree.cli.paths import default_tree_path

    assert default_tree_path() == str(configured)


def test_empty_environment_value_ignored(tmp_path, monkeypatch):
    """Test an empty $DECISION_TREE_PATH is treated as unset."""
    monkeypatch.setenv("DECISION_TREE_PATH", "")
    monkeypatch.chdir(tmp_path)
    from decision_tree.cli.paths import default_tree_path

    assert Path(default_tree_path()).name == "rules.json"


def test_explicit_path_wins(monkeypatch):
    """Test an explicit path is used as given."""
    monkeypatch.setenv("DECISION_TREE_PATH", "/elsewhere/tree.json")
    from decision_tree.cli.paths import tree_path

    assert tree_path("custom/rules.yaml") == "custom/rules.yaml"
    assert tree_path(None) == "/elsewhere/tree.json"
