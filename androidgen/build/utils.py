"""Utility functions for the generate-sources phase.

This module contains the file-system helpers used by the generator: glob
pattern matching, source-set scanning, deletion of conflicting files and
resolution of the platform android.jar.
"""

from __future__ import annotations

import os
import pathlib
import re
from typing import List, Optional, Union

from androidgen.build.config import GenerateSourcesConfig
from androidgen.utils.exceptions import FileDeletionError, MissingInputError


def get_application_version() -> str:
    """Get the version of androidgen.

    Returns:
        Version string of the package.
    """
    from androidgen.__version__ import __version__
    return __version__


def fnmatch_to_regex(pattern: str) -> str:
    """Convert a glob pattern to a regex pattern.

    ``**/`` matches zero or more directories, ``**`` anything, ``*`` anything
    within one path segment and ``?`` one character within a segment.

    Args:
        pattern: Glob pattern using ``/`` as separator

    Returns:
        Regex pattern string
    """
    parts = []
    i = 0
    while i < len(pattern):
        if pattern.startswith("**/", i):
            parts.append("(?:.*/)?")
            i += 3
        elif pattern.startswith("**", i):
            parts.append(".*")
            i += 2
        elif pattern[i] == "*":
            parts.append("[^/]*")
            i += 1
        elif pattern[i] == "?":
            parts.append("[^/]")
            i += 1
        else:
            parts.append(re.escape(pattern[i]))
            i += 1
    return f"^{''.join(parts)}$"


def find_files(root_directory: Union[str, pathlib.Path], include_pattern: str) -> List[str]:
    """Find files below a directory matching a glob pattern.

    Args:
        root_directory: Directory to search
        include_pattern: Glob pattern matched against the relative path

    Returns:
        Relative ``/``-separated paths of the matching files. Empty if the
        directory does not exist or nothing matches.
    """
    root = pathlib.Path(root_directory)
    if not root.is_dir():
        return []

    regex = re.compile(fnmatch_to_regex(include_pattern))
    matches = []

    for current, dirs, files in os.walk(root):
        rel_dir = pathlib.Path(current).relative_to(root)
        for file in files:
            rel_path = (rel_dir / file).as_posix()
            if regex.match(rel_path):
                matches.append(rel_path)

    return sorted(matches)


def delete_file(path: Union[str, pathlib.Path]) -> bool:
    """Delete a single file if it exists.

    Args:
        path: File to delete

    Returns:
        True if the file was deleted, False if it did not exist

    Raises:
        FileDeletionError: If the file exists but could not be deleted
    """
    path = pathlib.Path(path)
    if not path.exists():
        return False
    try:
        path.unlink()
    except OSError as e:
        raise FileDeletionError(f'Failed to delete "{path}": {str(e)}', path=path) from e
    return True


def delete_files(root_directory: Union[str, pathlib.Path], pattern: str) -> int:
    """Delete every file below a directory matching a glob pattern.

    Args:
        root_directory: Directory to search
        pattern: Glob pattern matched against the relative path

    Returns:
        Number of files deleted

    Raises:
        FileDeletionError: If any matching file could not be deleted
    """
    root = pathlib.Path(root_directory)
    deleted = 0
    for rel_path in find_files(root, pattern):
        if delete_file(root / rel_path):
            deleted += 1
    return deleted


def _platform_sort_key(platform_dir: pathlib.Path):
    suffix = platform_dir.name[len("android-"):]
    try:
        return (1, int(suffix), suffix)
    except ValueError:
        return (0, 0, suffix)


def find_latest_platform(sdk_path: Union[str, pathlib.Path]) -> Optional[str]:
    """Find the highest installed platform of an SDK.

    Args:
        sdk_path: Root directory of the Android SDK

    Returns:
        Platform name without the ``android-`` prefix, or None if no
        platform with an android.jar is installed.
    """
    platforms_dir = pathlib.Path(sdk_path) / "platforms"
    if not platforms_dir.is_dir():
        return None

    candidates = [
        d for d in platforms_dir.glob("android-*")
        if (d / "android.jar").is_file()
    ]
    if not candidates:
        return None

    latest = max(candidates, key=_platform_sort_key)
    return latest.name[len("android-"):]


def resolve_android_jar(config: GenerateSourcesConfig) -> pathlib.Path:
    """Resolve the android.jar to compile resources against.

    An explicit ``android_jar`` wins; otherwise the jar is looked up as
    ``<sdk>/platforms/android-<platform>/android.jar``.

    Args:
        config: Generate-sources configuration

    Returns:
        Absolute path to android.jar

    Raises:
        MissingInputError: If no SDK is configured or the jar does not exist
    """
    if config.android_jar is not None:
        android_jar = config.resolve(config.android_jar)
        if not android_jar.is_file():
            raise MissingInputError(f"android.jar not found: {android_jar}", path=android_jar)
        return android_jar

    if config.sdk.path is None:
        raise MissingInputError(
            "No Android SDK configured. Set sdk.path, android_jar or the ANDROID_SDK environment variable"
        )

    sdk_path = config.resolve(config.sdk.path)
    platform = config.sdk.platform or find_latest_platform(sdk_path)
    if platform is None:
        raise MissingInputError(f"No platforms installed in Android SDK: {sdk_path}", path=sdk_path)

    android_jar = sdk_path / "platforms" / f"android-{platform}" / "android.jar"
    if not android_jar.is_file():
        raise MissingInputError(f"android.jar not found: {android_jar}", path=android_jar)
    return android_jar
