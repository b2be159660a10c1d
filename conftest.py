"""
Shared pytest fixtures for the confladder test modules.
"""

import logging
import textwrap

import pytest


@pytest.fixture
def config_dir(tmp_path):
    """Empty configuration directory."""
    directory = tmp_path / "config"
    directory.mkdir()
    return directory


@pytest.fixture
def write_config(config_dir):
    """Write a dedented file into ``config_dir``."""
    def write(name, text):
        path = config_dir / name
        path.write_text(textwrap.dedent(text), encoding="utf-8")
        return path

    return write


@pytest.fixture(autouse=True)
def restore_root_logging():
    """setup_logging() replaces root handlers; put them back after each test."""
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    yield
    for handler in root.handlers[:]:
        if handler not in handlers:
            root.removeHandler(handler)
            handler.close()
    for handler in handlers:
        if handler not in root.handlers:
            root.addHandler(handler)
    root.setLevel(level)
