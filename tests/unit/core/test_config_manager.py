"""Unit tests for the Configuration Manager."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
import yaml

from androidgen.build.config import FailurePolicy
from androidgen.core.config_manager import ConfigManager, ConfigSchema
from androidgen.utils.exceptions import ConfigurationError, ManagerInitializationError


def test_config_schema_default_values() -> None:
    """Test that ConfigSchema provides correct default values."""
    schema = ConfigSchema()

    assert schema.logging["level"] == "INFO"
    assert schema.logging["format"] == "text"
    assert schema.logging["file"]["enabled"] is False
    assert schema.logging["console"]["enabled"] is True
    assert schema.generate_sources == {}


def test_config_schema_rejects_unknown_log_level() -> None:
    with pytest.raises(ValueError, match="Unknown log level"):
        ConfigSchema(logging={"level": "LOUD"})


def test_config_schema_validates_generate_sources() -> None:
    with pytest.raises(ValueError, match="Invalid generate_sources section"):
        ConfigSchema(generate_sources={"failure_policy": "sometimes"})


def test_config_manager_yaml_file(tmp_path: Path) -> None:
    """Test loading configuration from a YAML file."""
    config_file = tmp_path / "androidgen.yaml"
    config_file.write_text(yaml.dump({
        "logging": {"level": "DEBUG"},
        "generate_sources": {"source_directory": "java", "create_package_directories": False},
    }))

    manager = ConfigManager(config_path=config_file, environ={})
    manager.initialize()

    assert manager.initialized
    assert manager.get("logging.level") == "DEBUG"
    # Defaults are kept for keys the file does not set
    assert manager.get("logging.console.enabled") is True
    assert manager.get("generate_sources.source_directory") == "java"
    assert manager.status()["loaded_from_file"] is True

    manager.shutdown()
    assert not manager.initialized


def test_config_manager_json_file(tmp_path: Path) -> None:
    """Test loading configuration from a JSON file."""
    config_file = tmp_path / "androidgen.json"
    config_file.write_text(json.dumps({"generate_sources": {"aapt_executable": "/sdk/aapt"}}))

    manager = ConfigManager(config_path=config_file, environ={})
    manager.initialize()

    assert manager.get("generate_sources.aapt_executable") == "/sdk/aapt"


def test_config_manager_nonexistent_file() -> None:
    """Test initialization with a non-existent file path."""
    manager = ConfigManager(config_path="/path/that/does/not/exist.yaml", environ={})
    manager.initialize()

    assert manager.initialized
    assert manager.get("logging.level") == "INFO"
    assert manager.status()["config_file"] is None


def test_config_manager_unsupported_format(tmp_path: Path) -> None:
    config_file = tmp_path / "androidgen.toml"
    config_file.write_text("level = 'x'")

    manager = ConfigManager(config_path=config_file, environ={})
    with pytest.raises(ManagerInitializationError) as exc_info:
        manager.initialize()

    assert isinstance(exc_info.value.__cause__, ConfigurationError)


def test_config_manager_invalid_yaml(tmp_path: Path) -> None:
    config_file = tmp_path / "androidgen.yaml"
    config_file.write_text("logging: [unclosed")

    with pytest.raises(ManagerInitializationError):
        ConfigManager(config_path=config_file, environ={}).initialize()


def test_config_manager_invalid_values(tmp_path: Path) -> None:
    config_file = tmp_path / "androidgen.yaml"
    config_file.write_text(yaml.dump({"generate_sources": {"delete_conflicting_files": "perhaps"}}))

    with pytest.raises(ManagerInitializationError) as exc_info:
        ConfigManager(config_path=config_file, environ={}).initialize()

    assert isinstance(exc_info.value.__cause__, ConfigurationError)


def test_config_manager_env_overrides(tmp_path: Path) -> None:
    """Test that prefixed environment variables override file values."""
    config_file = tmp_path / "androidgen.yaml"
    config_file.write_text(yaml.dump({"generate_sources": {"failure_policy": "fail-fast"}}))

    environ = {
        "ANDROIDGEN_GENERATE_SOURCES__FAILURE_POLICY": "continue",
        "ANDROIDGEN_GENERATE_SOURCES__DELETE_CONFLICTING_FILES": "false",
        "ANDROIDGEN_LOGGING__CONSOLE__LEVEL": "WARNING",
        "UNRELATED": "ignored",
    }
    manager = ConfigManager(config_path=config_file, environ=environ)
    manager.initialize()

    assert manager.get("generate_sources.failure_policy") == "continue"
    assert manager.get("generate_sources.delete_conflicting_files") is False
    assert manager.get("logging.console.level") == "WARNING"
    assert manager.status()["env_vars_applied"] == 3


def test_parse_env_value() -> None:
    assert ConfigManager._parse_env_value("yes") is True
    assert ConfigManager._parse_env_value("off") is False
    assert ConfigManager._parse_env_value("42") == 42
    assert ConfigManager._parse_env_value("-3") == -3
    assert ConfigManager._parse_env_value("1.5") == 1.5
    assert ConfigManager._parse_env_value("src/main/java") == "src/main/java"


def test_get_before_initialize() -> None:
    manager = ConfigManager(environ={})
    with pytest.raises(ConfigurationError):
        manager.get("logging.level")
    with pytest.raises(ConfigurationError):
        manager.set("logging.level", "DEBUG")


def test_get_missing_key_returns_default() -> None:
    manager = ConfigManager(config_path="/nonexistent.yaml", environ={})
    manager.initialize()
    assert manager.get("generate_sources.nothing", "fallback") == "fallback"


def test_set_validates() -> None:
    manager = ConfigManager(config_path="/nonexistent.yaml", environ={})
    manager.initialize()

    manager.set("generate_sources.build_directory", "out")
    assert manager.get("generate_sources.build_directory") == "out"

    with pytest.raises(ConfigurationError) as exc_info:
        manager.set("logging.level", "LOUD")
    assert exc_info.value.config_key == "logging.level"
    assert manager.get("logging.level") == "INFO"


def test_get_generate_sources_config_uses_file_directory(tmp_path: Path) -> None:
    config_file = tmp_path / "androidgen.yaml"
    config_file.write_text(yaml.dump({"generate_sources": {"failure_policy": "continue"}}))

    manager = ConfigManager(config_path=config_file, environ={})
    manager.initialize()
    config = manager.get_generate_sources_config()

    assert config.base_dir == tmp_path
    assert config.failure_policy == FailurePolicy.CONTINUE
    assert config.source_path == tmp_path / "src" / "main" / "java"


def test_get_generate_sources_config_explicit_base_dir(tmp_path: Path) -> None:
    manager = ConfigManager(config_path="/nonexistent.yaml", environ={})
    manager.initialize()
    manager.set("generate_sources.base_dir", str(tmp_path))

    assert manager.get_generate_sources_config().base_dir == tmp_path


def test_config_manager_lifecycle_status(tmp_path: Path) -> None:
    from androidgen.core.base import AndroidGenManager

    manager = ConfigManager(config_path=tmp_path / "missing.yaml", environ={})
    assert isinstance(manager, AndroidGenManager)
    assert manager.name == "config_manager"
    assert manager.status() == {
        "name": "config_manager",
        "initialized": False,
        "healthy": False,
        "config_file": None,
        "loaded_from_file": False,
        "env_vars_applied": 0,
    }

    manager.initialize()
    assert manager.initialized
    assert manager.healthy

    manager.shutdown()
    assert manager.status()["initialized"] is False
    assert not hasattr(manager, "set_logger")
