"""Core package containing the configuration and logging managers."""

from androidgen.core.base import AndroidGenManager
from androidgen.core.config_manager import ConfigManager
from androidgen.core.logging_manager import LoggingManager
