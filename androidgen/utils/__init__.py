"""Utility functions and classes for androidgen."""

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
