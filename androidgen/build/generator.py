"""Generator for the sources of an Android project.

This module contains the SourceGenerator class that runs the generate-sources
phase: it removes stale generated files, invokes ``aapt`` to produce R.java
and ``aidl`` to produce interface stubs, and registers the generated
directories as compile source roots.
"""

from __future__ import annotations

import logging
import pathlib
from dataclasses import dataclass, field
from typing import Any, List, Optional

from androidgen.build.config import FailurePolicy, GenerateSourcesConfig, TaskKind
from androidgen.build.executor import CommandExecutor, SubprocessCommandExecutor
from androidgen.build.project import BuildProject
from androidgen.build.utils import delete_file, delete_files, find_files, resolve_android_jar
from androidgen.utils.exceptions import (
    AndroidGenError,
    FileDeletionError,
    GenerationAggregateError,
    GenerationError,
    MissingInputError,
)

R_JAVA_PATTERN = "**/R.java"
AIDL_PATTERN = "**/*.aidl"
THUMBS_DB = pathlib.Path("drawable") / "Thumbs.db"


@dataclass
class GenerationTask:
    """One invocation of an external generator tool."""

    kind: TaskKind
    input_root: pathlib.Path
    output_root: pathlib.Path
    tool_arguments: List[str] = field(default_factory=list)


@dataclass
class GenerationReport:
    """Summary of a generate-sources run."""

    deleted_files: int = 0
    executed: List[GenerationTask] = field(default_factory=list)
    registered_roots: List[pathlib.Path] = field(default_factory=list)
    errors: List[GenerationError] = field(default_factory=list)

    @property
    def succeeded(self) -> bool:
        return not self.errors


def build_aapt_arguments(
        output_directory: pathlib.Path,
        manifest_file: pathlib.Path,
        android_jar: pathlib.Path,
        resource_directory: Optional[pathlib.Path] = None,
        assets_directory: Optional[pathlib.Path] = None,
        create_package_directories: bool = True,
) -> List[str]:
    """Build the aapt command line that generates R.java.

    Args:
        output_directory: Directory R.java is written to (-J)
        manifest_file: AndroidManifest.xml (-M)
        android_jar: Platform library to compile against (-I)
        resource_directory: Resource directory (-S), omitted if None
        assets_directory: Assets directory (-A), omitted if None
        create_package_directories: Add -m

    Returns:
        Ordered list of aapt arguments
    """
    args = ["package"]
    if create_package_directories:
        args.append("-m")
    args.extend(["-J", str(output_directory)])
    args.extend(["-M", str(manifest_file)])
    if resource_directory is not None:
        args.extend(["-S", str(resource_directory)])
    if assets_directory is not None:
        args.extend(["-A", str(assets_directory)])
    args.extend(["-I", str(android_jar)])
    return args


def build_aidl_arguments(
        source_directory: pathlib.Path,
        aidl_file: pathlib.Path,
        java_file: pathlib.Path,
        framework_aidl: Optional[pathlib.Path] = None,
) -> List[str]:
    """Build the aidl command line for one interface file."""
    args = []
    if framework_aidl is not None:
        args.append(f"-p{framework_aidl}")
    args.append(f"-I{source_directory}")
    args.append(str(aidl_file))
    args.append(str(java_file))
    return args


class SourceGenerator:
    """Generator for R.java and AIDL interface stubs.

    Attributes:
        config: Generate-sources configuration
        project: Build project receiving the generated source roots
        executor: Runs aapt and aidl
        logger: Logger for progress messages
        deleted_files: Number of conflicting files deleted so far
        registered_roots: Source roots registered so far
    """

    def __init__(
            self,
            config: GenerateSourcesConfig,
            project: Optional[BuildProject] = None,
            executor: Optional[CommandExecutor] = None,
            logger: Optional[Any] = None,
    ) -> None:
        """Initialize the SourceGenerator.

        Args:
            config: Generate-sources configuration
            project: Build project; created from the configuration if omitted
            executor: Command executor; a subprocess executor if omitted
            logger: Optional logger; defaults to this module's logger
        """
        self.config = config
        self.project = project or BuildProject.from_config(config)
        self.logger = logger or logging.getLogger(__name__)
        self.executor = executor or SubprocessCommandExecutor(self.logger)
        self.deleted_files = 0
        self.registered_roots: List[pathlib.Path] = []

    def log(self, message: str, level: str = "info") -> None:
        """Log a message with the specified level.

        Args:
            message: Message to log
            level: Log level (info, warning, error, debug)
        """
        getattr(self.logger, level)(message)

    def _register(self, directory: pathlib.Path) -> None:
        self.project.add_compile_source_root(directory)
        self.registered_roots.append(directory)
        self.log(f"Added compile source root: {directory}", "debug")

    def generate_r(self) -> GenerationTask:
        """Generate R.java from the manifest, resources and assets.

        Returns:
            The executed aapt task

        Raises:
            GenerationError: If any step fails; the cause is chained
        """
        try:
            android_jar = resolve_android_jar(self.config)

            manifest_file = self.config.manifest_path
            if not manifest_file.is_file():
                raise MissingInputError(
                    f"Android manifest not found: {manifest_file}", path=manifest_file
                )

            if self.config.delete_conflicting_files:
                self._delete_conflicting_r_files()

            output_directory = self.config.get_generated_sources_path(TaskKind.RESOURCE_GEN)
            output_directory.mkdir(parents=True, exist_ok=True)

            resource_directory = self.config.resource_path
            assets_directory = self.config.assets_path

            task = GenerationTask(
                kind=TaskKind.RESOURCE_GEN,
                input_root=resource_directory,
                output_root=output_directory,
                tool_arguments=build_aapt_arguments(
                    output_directory=output_directory,
                    manifest_file=manifest_file,
                    android_jar=android_jar,
                    resource_directory=resource_directory if resource_directory.exists() else None,
                    assets_directory=assets_directory if assets_directory.exists() else None,
                    create_package_directories=self.config.create_package_directories,
                ),
            )

            self.executor.execute(
                self.config.aapt_executable,
                task.tool_arguments,
                self.project.base_dir,
                True,
            )
        except (AndroidGenError, OSError) as e:
            self.log(f"R.java generation failed: {str(e)}", "error")
            raise GenerationError(
                f"Failed to generate R.java: {str(e)}", task=TaskKind.RESOURCE_GEN.value
            ) from e

        self._register(output_directory)
        return task

    def _delete_conflicting_r_files(self) -> None:
        deleted = delete_files(self.config.source_path, R_JAVA_PATTERN)
        if deleted > 0:
            self.deleted_files += deleted
            self.log(
                f"Deleted {deleted} conflicting R.java file(s) in source directory. "
                "If you use an IDE, refresh the project to pick up the change."
            )

        thumbs = self.config.resource_path / THUMBS_DB
        if thumbs.exists():
            self.log("Deleting Thumbs.db from resource directory")
            if delete_file(thumbs):
                self.deleted_files += 1

    def generate_aidl(self) -> List[GenerationTask]:
        """Generate Java interface stubs for every .aidl file in the sources.

        Files are processed one at a time; the first failure aborts the rest.

        Returns:
            The executed aidl tasks, empty if there are no .aidl files

        Raises:
            GenerationError: If any step fails; the cause is chained
        """
        source_directory = self.config.source_path
        files = find_files(source_directory, AIDL_PATTERN)
        self.log(f"Found aidl files: Count = {len(files)}")
        if not files:
            return []

        output_directory = self.config.get_generated_sources_path(TaskKind.AIDL_GEN)
        tasks = []
        deleted = 0

        try:
            output_directory.mkdir(parents=True, exist_ok=True)

            for relative_aidl in files:
                relative_path = pathlib.PurePosixPath(relative_aidl)
                target_directory = output_directory.joinpath(*relative_path.parent.parts)
                target_directory.mkdir(parents=True, exist_ok=True)

                relative_java = relative_path.with_suffix(".java")
                aidl_file = source_directory.joinpath(*relative_path.parts)

                if self.config.delete_conflicting_files:
                    java_file = source_directory.joinpath(*relative_java.parts)
                    if java_file.exists():
                        if not delete_file(java_file):
                            raise FileDeletionError(f'Failed to delete "{java_file}"', path=java_file)
                        deleted += 1

                task = GenerationTask(
                    kind=TaskKind.AIDL_GEN,
                    input_root=source_directory,
                    output_root=output_directory,
                    tool_arguments=build_aidl_arguments(
                        source_directory=source_directory,
                        aidl_file=aidl_file,
                        java_file=target_directory / relative_java.name,
                        framework_aidl=self.config.framework_aidl,
                    ),
                )
                self.executor.execute(
                    self.config.aidl_executable,
                    task.tool_arguments,
                    self.project.base_dir,
                    True,
                )
                tasks.append(task)
        except (AndroidGenError, OSError) as e:
            self.log(f"AIDL generation failed: {str(e)}", "error")
            raise GenerationError(
                f"Failed to generate AIDL sources: {str(e)}", task=TaskKind.AIDL_GEN.value
            ) from e
        finally:
            self.deleted_files += deleted

        if deleted > 0:
            self.log(
                f"Deleted {deleted} conflicting aidl-generated *.java file(s) in source directory. "
                "If you use an IDE, refresh the project to pick up the change."
            )

        self._register(output_directory)
        return tasks

    def execute(self) -> GenerationReport:
        """Run the generate-sources phase.

        R.java is generated first, then the AIDL stubs. With
        ``FailurePolicy.FAIL_FAST`` the first failing task stops the run;
        with ``FailurePolicy.CONTINUE`` both tasks run and all failures are
        raised together afterwards.

        Returns:
            Report of the run

        Raises:
            GenerationError: First task failure under FAIL_FAST
            GenerationAggregateError: All task failures under CONTINUE
        """
        self.deleted_files = 0
        self.registered_roots = []
        report = GenerationReport()

        self.log(f"Generating sources for {self.project.base_dir}")
        self.log(f"Failure policy: {self.config.failure_policy.value}", "debug")

        for step in (self.generate_r, self.generate_aidl):
            try:
                result = step()
            except GenerationError as e:
                if self.config.failure_policy == FailurePolicy.FAIL_FAST:
                    raise
                report.errors.append(e)
                continue
            finally:
                report.deleted_files = self.deleted_files
                report.registered_roots = list(self.registered_roots)

            if isinstance(result, list):
                report.executed.extend(result)
            else:
                report.executed.append(result)

        if report.errors:
            raise GenerationAggregateError(report.errors, report=report)

        self.log(
            f"Generated sources with {len(report.executed)} tool invocation(s), "
            f"registered {len(report.registered_roots)} source root(s)"
        )
        return report
