"""Configuration for the generate-sources phase.

This module contains the configuration classes describing the project layout,
the Android SDK location and the switches that control how ``R.java`` and the
AIDL interface stubs are generated.
"""

from __future__ import annotations

import enum
import json
import pathlib
from typing import Any, Dict, Optional, Union

import pydantic
import yaml


class FailurePolicy(str, enum.Enum):
    """How the generator reacts when one of its tasks fails."""

    FAIL_FAST = "fail-fast"  # Abort on the first failing task
    CONTINUE = "continue"  # Run every task, then report all failures together


class TaskKind(str, enum.Enum):
    """Kinds of generation tasks."""

    RESOURCE_GEN = "resource"  # R.java from resources and manifest (aapt)
    AIDL_GEN = "aidl"  # Interface stubs from .aidl files (aidl)


class SdkConfig(pydantic.BaseModel):
    """Location of the Android SDK.

    Attributes:
        path: Root directory of the SDK installation
        platform: Platform (API level) whose android.jar is compiled against.
            When unset, the highest installed platform is used.
    """

    path: Optional[pathlib.Path] = None
    platform: Optional[str] = None

    @pydantic.field_validator("platform", mode="before")
    @classmethod
    def validate_platform(cls, v: Any) -> Optional[str]:
        """Accept integer API levels as well as strings."""
        if v is None or v == "":
            return None
        return str(v)


class GenerateSourcesConfig(pydantic.BaseModel):
    """Configuration for generating sources of an Android project.

    Relative paths are resolved against ``base_dir``.

    Attributes:
        base_dir: Project base directory, also the tools' working directory
        source_directory: Primary Java source directory
        build_directory: Build output directory; generated sources go below it
        android_manifest_file: AndroidManifest.xml of the project
        resource_directory: Android resource directory (res)
        assets_directory: Android assets directory
        sdk: Android SDK location used to find android.jar
        android_jar: Explicit android.jar, overrides the SDK lookup
        framework_aidl: framework.aidl passed to aidl as preprocessed file
        delete_conflicting_files: Delete stale generated files before generating
        create_package_directories: Pass -m to aapt
        aapt_executable: Name or path of the resource compiler
        aidl_executable: Name or path of the interface-definition compiler
        failure_policy: Whether a failing task stops the remaining ones
    """

    model_config = pydantic.ConfigDict(validate_assignment=True)

    base_dir: pathlib.Path = pathlib.Path(".")
    source_directory: pathlib.Path = pathlib.Path("src/main/java")
    build_directory: pathlib.Path = pathlib.Path("target")
    android_manifest_file: pathlib.Path = pathlib.Path("AndroidManifest.xml")
    resource_directory: pathlib.Path = pathlib.Path("res")
    assets_directory: pathlib.Path = pathlib.Path("assets")
    sdk: SdkConfig = pydantic.Field(default_factory=SdkConfig)
    android_jar: Optional[pathlib.Path] = None
    framework_aidl: Optional[pathlib.Path] = None
    delete_conflicting_files: bool = True
    create_package_directories: bool = True
    aapt_executable: str = "aapt"
    aidl_executable: str = "aidl"
    failure_policy: FailurePolicy = FailurePolicy.FAIL_FAST

    @pydantic.field_validator("aapt_executable", "aidl_executable")
    @classmethod
    def validate_executable(cls, v: str) -> str:
        """Reject empty tool names."""
        if not v or not v.strip():
            raise ValueError("Tool executable must not be empty")
        return v.strip()

    @pydantic.field_validator("failure_policy", mode="before")
    @classmethod
    def validate_failure_policy(cls, v: Any) -> Any:
        """Accept ``fail_fast`` and upper-case spellings of the policies."""
        if isinstance(v, str):
            return v.strip().lower().replace("_", "-")
        return v

    def resolve(self, path: Union[str, pathlib.Path]) -> pathlib.Path:
        """Resolve a configured path against the base directory.

        Args:
            path: Absolute path, or path relative to ``base_dir``

        Returns:
            Absolute path.
        """
        path = pathlib.Path(path)
        if not path.is_absolute():
            path = self.base_dir / path
        return path.absolute()

    @property
    def source_path(self) -> pathlib.Path:
        return self.resolve(self.source_directory)

    @property
    def build_path(self) -> pathlib.Path:
        return self.resolve(self.build_directory)

    @property
    def manifest_path(self) -> pathlib.Path:
        return self.resolve(self.android_manifest_file)

    @property
    def resource_path(self) -> pathlib.Path:
        return self.resolve(self.resource_directory)

    @property
    def assets_path(self) -> pathlib.Path:
        return self.resolve(self.assets_directory)

    def get_generated_sources_path(self, kind: TaskKind) -> pathlib.Path:
        """Get the directory a task writes its generated sources to.

        Args:
            kind: The generation task

        Returns:
            ``<build>/generated-sources/r`` for resources and
            ``<build>/generated-sources/aidl`` for interface stubs.
        """
        name = "r" if kind == TaskKind.RESOURCE_GEN else "aidl"
        return self.build_path / "generated-sources" / name

    @classmethod
    def from_dict(cls, config_dict: Dict[str, Any]) -> GenerateSourcesConfig:
        """Create a GenerateSourcesConfig from a dictionary.

        Args:
            config_dict: Dictionary containing configuration values.

        Returns:
            GenerateSourcesConfig instance.
        """
        return cls(**config_dict)

    @classmethod
    def from_json_file(cls, json_path: Union[str, pathlib.Path]) -> GenerateSourcesConfig:
        """Load a GenerateSourcesConfig from a JSON file.

        Args:
            json_path: Path to the JSON configuration file.

        Returns:
            GenerateSourcesConfig instance.
        """
        with open(json_path, "r", encoding="utf-8") as f:
            config_dict = json.load(f)
        return cls.from_dict(config_dict or {})

    @classmethod
    def from_yaml_file(cls, yaml_path: Union[str, pathlib.Path]) -> GenerateSourcesConfig:
        """Load a GenerateSourcesConfig from a YAML file.

        Args:
            yaml_path: Path to the YAML configuration file.

        Returns:
            GenerateSourcesConfig instance.
        """
        with open(yaml_path, "r", encoding="utf-8") as f:
            config_dict = yaml.safe_load(f)
        return cls.from_dict(config_dict or {})

    def to_dict(self) -> Dict[str, Any]:
        """Convert the configuration to a JSON-compatible dictionary.

        Returns:
            Dictionary with paths as strings and enums as their values.
        """
        return self.model_dump(mode="json")

    def to_json_file(self, json_path: Union[str, pathlib.Path]) -> None:
        """Save the configuration to a JSON file.

        Args:
            json_path: Path where the JSON configuration file will be saved.
        """
        with open(json_path, "w", encoding="utf-8") as f:
            json.dump(self.to_dict(), f, indent=2)
