"""Integration tests for the command-line entry point."""

import logging

import pytest
import yaml

import main


@pytest.fixture(autouse=True)
def isolated(monkeypatch, tmp_path):
    """Keep CLI runs away from local settings and restore logging after."""
    for name in ("DEBUG_MODE", "LOG_LEVEL", "BENTO_ENV", "ENVIRONMENT", "BENTO_LOG_DIR", "BENTO_SETTINGS"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)

    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


class TestMain:
    """Test the CLI."""

    def test_prints_config(self, config_dir, capsys):
        code = main.main([str(config_dir), "--env", "production", "--log-level", "ERROR"])

        output = yaml.safe_load(capsys.readouterr().out)
        assert code == 0
        assert output["server"]["port"] == 80

    def test_invalid_settings(self, config_dir):
        assert main.main([str(config_dir), "--log-level", "LOUD"]) == 1

    def test_non_yaml_values_printed(self, make_tree, capsys):
        root = make_tree({"index.py": "def create(context):\n    return {'fn': len, 'n': 1}\n"})

        code = main.main([str(root), "--log-level", "ERROR"])

        output = yaml.safe_load(capsys.readouterr().out)
        assert code == 0
        assert output["n"] == 1
        assert "len" in output["fn"]
