"""The build project the generated sources are registered with."""

from __future__ import annotations

import pathlib
from typing import List, Union

from androidgen.build.config import GenerateSourcesConfig


class BuildProject:
    """Enclosing build session of a generate-sources run.

    Generated directories are appended to ``compile_source_roots`` so the
    compile step picks them up. This code never removes a root.

    Attributes:
        base_dir: Project base directory
        source_directory: Primary source directory
        build_directory: Build output directory
        compile_source_roots: Directories whose sources get compiled
    """

    def __init__(
            self,
            base_dir: Union[str, pathlib.Path],
            source_directory: Union[str, pathlib.Path],
            build_directory: Union[str, pathlib.Path],
    ) -> None:
        self.base_dir = pathlib.Path(base_dir).absolute()
        self.source_directory = pathlib.Path(source_directory).absolute()
        self.build_directory = pathlib.Path(build_directory).absolute()
        self.compile_source_roots: List[pathlib.Path] = [self.source_directory]

    def add_compile_source_root(self, path: Union[str, pathlib.Path]) -> None:
        """Register a directory as a compilable source root.

        Args:
            path: Directory to register; ignored if already registered
        """
        path = pathlib.Path(path).absolute()
        if path not in self.compile_source_roots:
            self.compile_source_roots.append(path)

    @classmethod
    def from_config(cls, config: GenerateSourcesConfig) -> BuildProject:
        """Create the project described by a configuration.

        Args:
            config: Generate-sources configuration

        Returns:
            BuildProject instance.
        """
        return cls(
            base_dir=config.resolve(config.base_dir),
            source_directory=config.source_path,
            build_directory=config.build_path,
        )

    def __repr__(self) -> str:
        return f"BuildProject(base_dir={str(self.base_dir)!r}, roots={len(self.compile_source_roots)})"
