# tests/core/test_config_management.py
import json
import logging

import pytest

from textrange.dom.style import DefaultStyleResolver
from textrange.managers.config_manager import ConfigManager
from textrange.utils.configure_logging import LogWithTqdm, configure_logger
from textrange.utils.path_utils import PathUtils

# A small, predictable configuration for the tests
MOCK_SETTINGS_CONTENT = {
    "debug": {
        "level": "WARNING",
        "module_levels": {},
        "silenced_loggers": {}
    },
    "parser": {
        "features": "html.parser"
    },
    "style": {
        "honor_inline_style": True,
        "honor_hidden_attribute": True
    },
    "iteration": {
        "trace": False,
        "max_depth": 64
    }
}


@pytest.fixture
def config_env(tmp_path, monkeypatch):
    """
    Sets up an isolated environment for the ConfigManager:
    - Creates a temporary package root holding a fake settings.json.
    - Points the user settings file at a temporary location.
    - Restores the real configuration afterwards, the manager being a singleton.
    """
    package_root = tmp_path / "textrange"
    package_root.mkdir()
    settings_file = package_root / "settings.json"
    settings_file.write_text(json.dumps(MOCK_SETTINGS_CONTENT))
    user_settings_file = tmp_path / "home" / ".textrange" / "settings.json"

    monkeypatch.setattr(PathUtils, 'get_package_root', lambda: package_root)
    monkeypatch.setattr(PathUtils, 'get_user_settings_file', lambda: user_settings_file)

    manager = ConfigManager()
    manager.reset()  # Force a reload from the fake file

    yield manager, user_settings_file

    monkeypatch.undo()
    manager.reset()


@pytest.fixture
def restore_logging():
    root_logger = logging.getLogger()
    handlers, level = list(root_logger.handlers), root_logger.level
    yield root_logger
    root_logger.handlers[:] = handlers
    root_logger.setLevel(level)


# --- ConfigManager ---

def test_config_manager_is_a_singleton(config_env):
    manager, _ = config_env
    assert ConfigManager() is manager


def test_config_manager_load(config_env):
    manager, _ = config_env
    config = manager.get_all()
    assert config["debug"]["level"] == "WARNING"
    assert config["iteration"]["max_depth"] == 64


def test_config_manager_get_nested(config_env):
    manager, _ = config_env
    assert manager.get_nested("parser.features") == "html.parser"
    assert manager.get_nested("style.honor_inline_style") is True
    assert manager.get_nested("non.existent.key", "default") == "default"
    assert manager.get_nested("parser.features.deeper", "default") == "default"


def test_config_manager_set_nested(config_env):
    manager, _ = config_env

    # Change an existing value
    assert manager.set_nested("debug.level", "INFO")
    assert manager.get_nested("debug.level") == "INFO"

    # Add a new key
    manager.set_nested("new_feature.enabled", "True")
    assert manager.get_nested("new_feature.enabled") == "True"

    # Strings are cast to the type of the existing value
    manager.set_nested("iteration.max_depth", "20")
    assert manager.get_nested("iteration.max_depth") == 20
    manager.set_nested("style.honor_inline_style", "false")
    assert manager.get_nested("style.honor_inline_style") is False
    manager.set_nested("iteration.trace", "on")
    assert manager.get_nested("iteration.trace") is True


def test_config_manager_set_nested_refuses_to_descend_into_values(config_env):
    manager, _ = config_env
    assert not manager.set_nested("parser.features.deeper", "x")
    assert manager.get_nested("parser.features") == "html.parser"


def test_config_manager_reset(config_env):
    manager, _ = config_env
    manager.set_nested("debug.level", "DEBUG")
    assert manager.get_nested("debug.level") == "DEBUG"

    manager.reset()

    assert manager.get_nested("debug.level") == "WARNING"


def test_user_settings_override_packaged_ones(config_env):
    manager, user_settings_file = config_env
    user_settings_file.parent.mkdir(parents=True)
    user_settings_file.write_text(json.dumps({"style": {"honor_hidden_attribute": False}}))

    manager.reset()

    assert manager.get_nested("style.honor_hidden_attribute") is False
    # Sibling keys survive the merge
    assert manager.get_nested("style.honor_inline_style") is True


def test_broken_user_settings_are_ignored(config_env, caplog):
    manager, user_settings_file = config_env
    user_settings_file.parent.mkdir(parents=True)
    user_settings_file.write_text("{not json")

    manager.reset()

    assert manager.get_nested("debug.level") == "WARNING"
    assert "Failed to load" in caplog.text


def test_style_resolver_reads_its_defaults_from_config(config_env):
    manager, _ = config_env
    manager.set_nested("style.honor_hidden_attribute", False)
    resolver = DefaultStyleResolver()
    assert resolver.honor_hidden_attribute is False
    assert resolver.honor_inline_style is True


# --- Logging setup ---

def test_configure_logger_installs_tqdm_handler(restore_logging):
    handler = configure_logger("INFO", {"textrange.engine": "DEBUG"}, {"noisy.lib": "ERROR"})

    assert restore_logging.handlers == [handler]
    assert isinstance(handler, LogWithTqdm)
    assert restore_logging.level == logging.INFO
    assert logging.getLogger("textrange.engine").level == logging.DEBUG
    assert logging.getLogger("noisy.lib").level == logging.ERROR

    logging.getLogger("textrange.engine").setLevel(logging.NOTSET)
    logging.getLogger("noisy.lib").setLevel(logging.NOTSET)


def test_log_with_tqdm_writes_to_stderr(restore_logging, capsys):
    configure_logger("WARNING")
    logging.getLogger("textrange.test").warning("careful")
    captured = capsys.readouterr()
    assert "WARNING - [textrange.test:" in captured.err
    assert "careful" in captured.err
