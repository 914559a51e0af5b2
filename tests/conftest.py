"""Pytest configuration and fixtures for androidgen tests."""

import logging
import os
import pathlib
from typing import Generator, List
from unittest import mock

import pytest

from androidgen.build.config import GenerateSourcesConfig, SdkConfig
from androidgen.build.executor import ExecutionResult, SubprocessCommandExecutor
from androidgen.build.project import BuildProject


@pytest.fixture
def project_dir(tmp_path: pathlib.Path) -> pathlib.Path:
    """Create a minimal Android project layout with a fake SDK."""
    base_dir = tmp_path / "project"
    (base_dir / "src" / "main" / "java").mkdir(parents=True)
    (base_dir / "AndroidManifest.xml").write_text(
        '<manifest package="com.example.app"/>\n', encoding="utf-8"
    )

    platform_dir = tmp_path / "sdk" / "platforms" / "android-8"
    platform_dir.mkdir(parents=True)
    (platform_dir / "android.jar").write_bytes(b"PK")

    return base_dir


@pytest.fixture
def sdk_dir(project_dir: pathlib.Path) -> pathlib.Path:
    """Path of the fake SDK created next to the project."""
    return project_dir.parent / "sdk"


@pytest.fixture
def android_jar(sdk_dir: pathlib.Path) -> pathlib.Path:
    return sdk_dir / "platforms" / "android-8" / "android.jar"


@pytest.fixture
def generate_config(project_dir: pathlib.Path, sdk_dir: pathlib.Path) -> GenerateSourcesConfig:
    """Generate-sources configuration for the fake project."""
    return GenerateSourcesConfig(
        base_dir=project_dir,
        sdk=SdkConfig(path=sdk_dir, platform="8"),
    )


@pytest.fixture
def build_project(generate_config: GenerateSourcesConfig) -> BuildProject:
    return BuildProject.from_config(generate_config)


@pytest.fixture
def executor_calls() -> List[dict]:
    """Calls recorded by the mock executor, in order."""
    return []


@pytest.fixture
def mock_executor(executor_calls: List[dict]) -> mock.MagicMock:
    """Executor that records invocations instead of starting processes.

    Each recorded call also notes whether the directory of the last argument
    existed at the time of the call.
    """

    def execute(program, arguments, working_directory=None, fail_on_non_zero_exit=True):
        arguments = list(arguments)
        last = pathlib.Path(arguments[-1]) if arguments else None
        executor_calls.append({
            "program": program,
            "arguments": arguments,
            "working_directory": working_directory,
            "fail_on_non_zero_exit": fail_on_non_zero_exit,
            "last_parent_exists": last is not None and last.parent.is_dir(),
        })
        return ExecutionResult(program=program, arguments=arguments)

    executor = mock.MagicMock(spec=SubprocessCommandExecutor)
    executor.execute.side_effect = execute
    return executor


@pytest.fixture
def mock_logger() -> mock.MagicMock:
    return mock.MagicMock(spec=logging.Logger)


@pytest.fixture
def clean_environ() -> Generator[None, None, None]:
    """Remove SDK and androidgen variables from the environment."""
    names = [
        name for name in os.environ
        if name in ("ANDROID_SDK", "ANDROID_HOME") or name.startswith("ANDROIDGEN_")
    ]
    with mock.patch.dict(os.environ):
        for name in names:
            del os.environ[name]
        yield
