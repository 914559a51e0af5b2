"""Android SDK settings taken from the process environment.

The environment is read once, when the run starts, and turned into explicit
configuration. Generation tasks never consult ``os.environ`` themselves.
"""

from __future__ import annotations

import os
import pathlib
from dataclasses import dataclass
from typing import Mapping, Optional

from androidgen.build.config import GenerateSourcesConfig
from androidgen.utils.exceptions import ConfigurationError

SDK_ENV_VARS = ("ANDROID_SDK", "ANDROID_HOME")


@dataclass(frozen=True)
class SdkEnvironment:
    """SDK location found in the environment.

    Attributes:
        sdk_path: SDK root, or None if no SDK variable is set
        variable: Name of the variable the path came from
    """

    sdk_path: Optional[pathlib.Path] = None
    variable: Optional[str] = None

    @classmethod
    def from_environ(cls, environ: Optional[Mapping[str, str]] = None) -> SdkEnvironment:
        """Read the SDK location from the environment.

        ``ANDROID_SDK`` takes precedence over ``ANDROID_HOME``.

        Args:
            environ: Environment mapping; defaults to ``os.environ``

        Returns:
            SdkEnvironment instance.
        """
        environ = os.environ if environ is None else environ
        for name in SDK_ENV_VARS:
            value = environ.get(name)
            if value:
                return cls(sdk_path=pathlib.Path(value), variable=name)
        return cls()

    @property
    def framework_aidl(self) -> Optional[pathlib.Path]:
        """framework.aidl shipped with the SDK tools."""
        if self.sdk_path is None:
            return None
        return self.sdk_path / "tools" / "lib" / "framework.aidl"

    def validate(self) -> None:
        """Check the SDK location before any task runs.

        Raises:
            ConfigurationError: If a variable is set but is not a directory
        """
        if self.sdk_path is not None and not self.sdk_path.is_dir():
            raise ConfigurationError(
                f"{self.variable} does not point to a directory: {self.sdk_path}",
                config_key=self.variable,
            )

    def apply(self, config: GenerateSourcesConfig) -> GenerateSourcesConfig:
        """Fill SDK settings the configuration left unset.

        Args:
            config: Generate-sources configuration

        Returns:
            A copy of the configuration; values set explicitly are kept.
        """
        if self.sdk_path is None:
            return config

        update = {}
        if config.framework_aidl is None:
            update["framework_aidl"] = self.framework_aidl
        if config.sdk.path is None:
            update["sdk"] = config.sdk.model_copy(update={"path": self.sdk_path})
        return config.model_copy(update=update)
