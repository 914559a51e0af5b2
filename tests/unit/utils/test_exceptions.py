"""Unit tests for the exceptions module."""

import pytest

from androidgen.build.executor import ExecutionResult
from androidgen.utils.exceptions import (
    AndroidGenError,
    ConfigurationError,
    FileDeletionError,
    GenerationAggregateError,
    GenerationError,
    ManagerError,
    ManagerInitializationError,
    ManagerShutdownError,
    MissingInputError,
    ToolExecutionError,
    ToolExecutionFailedError,
    ToolNotFoundError,
)


def test_androidgen_error():
    """Test the base AndroidGenError class."""
    error = AndroidGenError("Test error message")
    assert str(error) == "Test error message"
    assert error.message == "Test error message"
    assert error.details == {}

    details = {"key": "value", "number": 123}
    error = AndroidGenError("Test with details", details=details, extra="x")
    assert error.details == {"key": "value", "number": 123, "extra": "x"}


def test_manager_error():
    """Test the ManagerError class."""
    error = ManagerError("Manager error message")
    assert str(error) == "Manager error message"
    assert "manager_name" not in error.details

    error = ManagerError("Manager error with name", manager_name="config_manager")
    assert error.details["manager_name"] == "config_manager"
    assert str(error) == "Manager error with name (Manager: config_manager)"


def test_manager_subclasses():
    for cls in (ManagerInitializationError, ManagerShutdownError):
        error = cls("failed", manager_name="logging_manager")
        assert isinstance(error, ManagerError)
        assert isinstance(error, AndroidGenError)
        assert error.manager_name == "logging_manager"


def test_configuration_error():
    error = ConfigurationError("bad", config_key="logging.level")
    assert error.config_key == "logging.level"
    assert error.details["config_key"] == "logging.level"


def test_tool_execution_errors():
    """Test the external tool error hierarchy."""
    result = ExecutionResult(program="aapt", exit_code=2, stderr="error")
    error = ToolExecutionFailedError("aapt failed", program="aapt", result=result)

    assert isinstance(error, ToolExecutionError)
    assert error.program == "aapt"
    assert error.exit_code == 2
    assert error.details["program"] == "aapt"

    not_found = ToolNotFoundError("missing", program="aidl")
    assert isinstance(not_found, ToolExecutionError)
    assert not_found.result is None
    assert ToolExecutionFailedError("no result").exit_code is None


def test_path_errors(tmp_path):
    for cls in (FileDeletionError, MissingInputError):
        error = cls("problem", path=tmp_path / "R.java")
        assert error.path == tmp_path / "R.java"
        assert error.details["path"] == str(tmp_path / "R.java")


def test_generation_error():
    error = GenerationError("Failed to generate R.java", task="resource")
    assert error.task == "resource"
    assert str(error) == "Failed to generate R.java (Task: resource)"


def test_generation_aggregate_error():
    errors = [
        GenerationError("R failed", task="resource"),
        GenerationError("aidl failed", task="aidl"),
    ]
    report = object()
    error = GenerationAggregateError(errors, report=report)

    assert error.errors == errors
    assert error.report is report
    assert error.details["tasks"] == ["resource", "aidl"]
    assert str(error).startswith("2 generation task(s) failed")
    assert "R failed (Task: resource)" in str(error)
