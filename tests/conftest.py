"""Pytest configuration and fixtures."""

import pytest
from pathlib import Path

from bento.core.app import BentoBox
from bento.core.config import BentoConfig

FIXTURES_DIR = Path(__file__).parent / "fixtures"


@pytest.fixture
def fixtures_dir():
    """Directory holding the on-disk fixture trees."""
    return FIXTURES_DIR


@pytest.fixture
def modules_dir(fixtures_dir):
    return fixtures_dir / "modules"


@pytest.fixture
def config_dir(fixtures_dir):
    return fixtures_dir / "config"


@pytest.fixture
def make_tree(tmp_path):
    """Write a {relative_path: content} mapping under a temporary directory."""
    def _make(files):
        for relative, content in files.items():
            path = tmp_path / relative
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content, encoding="utf-8")
        return tmp_path
    return _make


@pytest.fixture
def test_settings(config_dir):
    """Create test settings pointing at the fixture config."""
    settings = BentoConfig()
    settings.debug_mode = True
    settings.log_level = "DEBUG"
    settings.config_path = str(config_dir)
    return settings


@pytest.fixture
def bento(test_settings):
    return BentoBox(settings=test_settings)


@pytest.fixture
def recorder():
    """Callback that records every call's arguments."""
    class Recorder:
        def __init__(self):
            self.calls = []

        def __call__(self, *args):
            self.calls.append(args)

    return Recorder()
