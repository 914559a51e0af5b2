"""Source generation for Android projects.

This package runs the external Android build tools that produce sources
during the generate-sources phase of a build.

Modules:
    generator: Orchestrates R.java and AIDL stub generation
    executor: Runs the external tools
    config: Generate-sources configuration classes
    environment: Android SDK settings read from the environment
    project: The build project generated sources are registered with
    cli: Command-line interface
    utils: File scanning, conflict deletion and android.jar lookup
"""

from __future__ import annotations

from androidgen.build.config import FailurePolicy, GenerateSourcesConfig, SdkConfig, TaskKind
from androidgen.build.environment import SdkEnvironment
from androidgen.build.executor import CommandExecutor, ExecutionResult, SubprocessCommandExecutor
from androidgen.build.generator import GenerationReport, GenerationTask, SourceGenerator
from androidgen.build.project import BuildProject

__all__ = [
    "BuildProject",
    "CommandExecutor",
    "ExecutionResult",
    "FailurePolicy",
    "GenerateSourcesConfig",
    "GenerationReport",
    "GenerationTask",
    "SdkConfig",
    "SdkEnvironment",
    "SourceGenerator",
    "SubprocessCommandExecutor",
    "TaskKind",
]
