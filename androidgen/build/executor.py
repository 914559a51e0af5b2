"""Execution of the external Android build tools.

The generator talks to ``aapt`` and ``aidl`` only through the
:class:`CommandExecutor` protocol, so tests can substitute a recording
executor for the real subprocess-based one.
"""

from __future__ import annotations

import logging
import pathlib
import subprocess
from dataclasses import dataclass, field
from typing import Any, List, Optional, Protocol, Sequence, Union, runtime_checkable

from androidgen.utils.exceptions import ToolExecutionFailedError, ToolNotFoundError


@dataclass
class ExecutionResult:
    """Outcome of one external program invocation."""

    program: str
    arguments: List[str] = field(default_factory=list)
    exit_code: int = 0
    stdout: str = ""
    stderr: str = ""

    @property
    def succeeded(self) -> bool:
        return self.exit_code == 0

    @property
    def output(self) -> str:
        """Standard output followed by standard error."""
        return "\n".join(part for part in (self.stdout, self.stderr) if part)


@runtime_checkable
class CommandExecutor(Protocol):
    """Protocol for running an external program to completion."""

    def execute(
            self,
            program: str,
            arguments: Sequence[str],
            working_directory: Optional[Union[str, pathlib.Path]] = None,
            fail_on_non_zero_exit: bool = True,
    ) -> ExecutionResult:
        """Run ``program`` with ``arguments`` and wait for it to finish."""
        ...


class SubprocessCommandExecutor:
    """Command executor backed by :mod:`subprocess`.

    Each call starts one child process and blocks until it exits. There is
    no timeout and no retry.

    Attributes:
        logger: Logger receiving the command lines and tool output
    """

    def __init__(self, logger: Optional[Any] = None) -> None:
        """Initialize the executor.

        Args:
            logger: Optional logger; defaults to this module's logger
        """
        self.logger = logger or logging.getLogger(__name__)

    def execute(
            self,
            program: str,
            arguments: Sequence[str],
            working_directory: Optional[Union[str, pathlib.Path]] = None,
            fail_on_non_zero_exit: bool = True,
    ) -> ExecutionResult:
        """Run an external program.

        Args:
            program: Name (looked up on PATH) or path of the program
            arguments: Ordered command-line arguments
            working_directory: Working directory of the child process
            fail_on_non_zero_exit: Raise when the program exits non-zero

        Returns:
            The execution result

        Raises:
            ToolNotFoundError: If the program cannot be started
            ToolExecutionFailedError: If it exits non-zero and
                ``fail_on_non_zero_exit`` is set
        """
        args = [str(arg) for arg in arguments]
        self.logger.info(f"{program} [{', '.join(args)}]")

        try:
            completed = subprocess.run(
                [program, *args],
                cwd=str(working_directory) if working_directory is not None else None,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                text=True,
                encoding="utf-8",
                errors="replace",
            )
        except FileNotFoundError as e:
            raise ToolNotFoundError(
                f"Could not find executable '{program}'", program=program
            ) from e
        except PermissionError as e:
            raise ToolNotFoundError(
                f"Executable '{program}' is not executable", program=program
            ) from e
        except OSError as e:
            raise ToolNotFoundError(
                f"Could not start '{program}': {str(e)}", program=program
            ) from e

        result = ExecutionResult(
            program=program,
            arguments=args,
            exit_code=completed.returncode,
            stdout=completed.stdout or "",
            stderr=completed.stderr or "",
        )

        if result.stdout:
            self.logger.debug(f"{program} stdout: {result.stdout.strip()}")
        if result.stderr:
            self.logger.debug(f"{program} stderr: {result.stderr.strip()}")

        if not result.succeeded:
            if fail_on_non_zero_exit:
                raise ToolExecutionFailedError(
                    f"{program} failed with exit code {result.exit_code}: {result.stderr.strip()}",
                    program=program,
                    result=result,
                    exit_code=result.exit_code,
                )
            self.logger.warning(f"{program} exited with code {result.exit_code}")

        return result
