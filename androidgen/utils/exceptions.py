from __future__ import annotations

from typing import Any, List, Optional, Sequence


class AndroidGenError(Exception):
    """Base exception for all androidgen errors."""

    def __init__(self, message: str, **kwargs: Any) -> None:
        """
        Initialize exception.

        Args:
            message: Error message
            **kwargs: Additional error information
        """
        self.message = message
        details = dict(kwargs.pop("details", None) or {})
        details.update({k: v for k, v in kwargs.items() if v is not None})
        self.details = details
        super().__init__(message)

    def __str__(self) -> str:
        """String representation."""
        return f"{self.message}"


class ConfigurationError(AndroidGenError):
    """Exception raised for configuration-related errors."""

    def __init__(
            self, message: str, *args: Any, config_key: Optional[str] = None, **kwargs: Any
    ) -> None:
        """Initialize a ConfigurationError.

        Args:
            message: A descriptive error message.
            *args: Unused, accepted for compatibility with Exception.
            config_key: The configuration key that caused the error.
            **kwargs: Additional error information.
        """
        super().__init__(message, config_key=config_key, **kwargs)
        self.config_key = config_key


class ManagerError(AndroidGenError):
    """Base exception for manager-related errors."""

    def __init__(self, message: str, manager_name: Optional[str] = None, **kwargs: Any) -> None:
        """
        Initialize manager error.

        Args:
            message: Error message
            manager_name: Name of the affected manager
            **kwargs: Additional error information
        """
        super().__init__(message, manager_name=manager_name, **kwargs)
        self.manager_name = manager_name

    def __str__(self) -> str:
        """String representation."""
        if self.manager_name:
            return f"{self.message} (Manager: {self.manager_name})"
        return super().__str__()


class ManagerInitializationError(ManagerError):
    """Exception raised when a manager fails to initialize."""

    pass


class ManagerShutdownError(ManagerError):
    """Exception raised when a manager fails to shut down cleanly."""

    pass


class ToolExecutionError(AndroidGenError):
    """Exception raised when an external tool cannot be run to completion."""

    def __init__(
            self,
            message: str,
            *args: Any,
            program: Optional[str] = None,
            result: Optional[Any] = None,
            **kwargs: Any,
    ) -> None:
        """Initialize a ToolExecutionError.

        Args:
            message: A descriptive error message.
            *args: Unused, accepted for compatibility with Exception.
            program: The program that was invoked.
            result: The ExecutionResult, when the program ran at all.
            **kwargs: Additional error information.
        """
        super().__init__(message, program=program, **kwargs)
        self.program = program
        self.result = result


class ToolNotFoundError(ToolExecutionError):
    """Exception raised when an external tool cannot be started."""

    pass


class ToolExecutionFailedError(ToolExecutionError):
    """Exception raised when an external tool exits with a non-zero code."""

    @property
    def exit_code(self) -> Optional[int]:
        """Exit code of the failed process."""
        return self.result.exit_code if self.result is not None else None


class FileDeletionError(AndroidGenError):
    """Exception raised when a stale file could not be deleted."""

    def __init__(self, message: str, *args: Any, path: Optional[Any] = None, **kwargs: Any) -> None:
        super().__init__(message, path=str(path) if path is not None else None, **kwargs)
        self.path = path


class MissingInputError(AndroidGenError):
    """Exception raised when a required input file or directory is absent."""

    def __init__(self, message: str, *args: Any, path: Optional[Any] = None, **kwargs: Any) -> None:
        super().__init__(message, path=str(path) if path is not None else None, **kwargs)
        self.path = path


class GenerationError(AndroidGenError):
    """Exception raised when a source generation task fails.

    The underlying error is always available as ``__cause__``.
    """

    def __init__(self, message: str, *args: Any, task: Optional[str] = None, **kwargs: Any) -> None:
        super().__init__(message, task=task, **kwargs)
        self.task = task

    def __str__(self) -> str:
        """String representation."""
        if self.task:
            return f"{self.message} (Task: {self.task})"
        return super().__str__()


class GenerationAggregateError(AndroidGenError):
    """Exception raised after all tasks ran and at least one of them failed."""

    def __init__(
            self, errors: Sequence[GenerationError], report: Optional[Any] = None, **kwargs: Any
    ) -> None:
        """Initialize a GenerationAggregateError.

        Args:
            errors: The task errors collected during the run.
            report: The GenerationReport of the run.
            **kwargs: Additional error information.
        """
        self.errors: List[GenerationError] = list(errors)
        self.report = report
        summary = "; ".join(str(error) for error in self.errors)
        super().__init__(
            f"{len(self.errors)} generation task(s) failed: {summary}",
            tasks=[error.task for error in self.errors],
            **kwargs,
        )
