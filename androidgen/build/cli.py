"""Command-line interface for androidgen.

This module provides the ``androidgen`` command that runs the
generate-sources phase for a project, and a helper command that prints the
effective configuration.
"""

from __future__ import annotations

import argparse
import sys
from typing import List, Optional

import yaml

from androidgen.build.environment import SdkEnvironment
from androidgen.build.executor import SubprocessCommandExecutor
from androidgen.build.generator import SourceGenerator
from androidgen.build.utils import get_application_version
from androidgen.core.config_manager import ConfigManager
from androidgen.core.logging_manager import LoggingManager
from androidgen.utils.exceptions import AndroidGenError, GenerationAggregateError


def _load_config(args: argparse.Namespace) -> ConfigManager:
    """Create the configuration manager and apply command-line overrides.

    Args:
        args: Command-line arguments

    Returns:
        Initialized ConfigManager
    """
    config_manager = ConfigManager(config_path=args.config)
    config_manager.initialize()

    overrides = {
        "base_dir": args.base_dir,
        "source_directory": args.source_directory,
        "build_directory": args.build_directory,
        "failure_policy": args.failure_policy,
    }
    for key, value in overrides.items():
        if value is not None:
            config_manager.set(f"generate_sources.{key}", value)

    if args.no_delete_conflicting_files:
        config_manager.set("generate_sources.delete_conflicting_files", False)
    if args.no_package_directories:
        config_manager.set("generate_sources.create_package_directories", False)

    if args.log_level:
        config_manager.set("logging.level", args.log_level.upper())
        config_manager.set("logging.console.level", args.log_level.upper())

    return config_manager


def generate_sources_command(args: argparse.Namespace) -> int:
    """Handle the generate-sources command.

    Args:
        args: Command-line arguments

    Returns:
        Exit code (0 for success, non-zero for failure)
    """
    config_manager = None
    logging_manager = None
    try:
        config_manager = _load_config(args)

        logging_manager = LoggingManager(config_manager)
        logging_manager.initialize()
        logger = logging_manager.get_logger("androidgen")

        environment = SdkEnvironment.from_environ()
        environment.validate()
        config = environment.apply(config_manager.get_generate_sources_config())

        generator = SourceGenerator(
            config,
            executor=SubprocessCommandExecutor(logging_manager.get_logger("androidgen.executor")),
            logger=logger,
        )
        report = generator.execute()

        for root in report.registered_roots:
            print(root)

        return 0

    except GenerationAggregateError as e:
        for error in e.errors:
            print(f"Error generating sources: {error}", file=sys.stderr)
        return 1

    except AndroidGenError as e:
        print(f"Error generating sources: {e}", file=sys.stderr)
        return 1

    finally:
        if logging_manager is not None:
            logging_manager.shutdown()
        if config_manager is not None:
            config_manager.shutdown()


def show_config_command(args: argparse.Namespace) -> int:
    """Handle the show-config command.

    Args:
        args: Command-line arguments

    Returns:
        Exit code (0 for success, non-zero for failure)
    """
    try:
        config_manager = _load_config(args)
        environment = SdkEnvironment.from_environ()
        config = environment.apply(config_manager.get_generate_sources_config())
        print(yaml.safe_dump({"generate_sources": config.to_dict()}, default_flow_style=False, sort_keys=False))
        return 0

    except AndroidGenError as e:
        print(f"Error loading configuration: {e}", file=sys.stderr)
        return 1


def _add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--config", "-c", help="Configuration file (YAML or JSON)")
    parser.add_argument("--base-dir", help="Project base directory")
    parser.add_argument("--source-directory", help="Primary source directory")
    parser.add_argument("--build-directory", help="Build output directory")
    parser.add_argument("--no-delete-conflicting-files", action="store_true",
                        help="Keep stale R.java and aidl-generated files")
    parser.add_argument("--no-package-directories", action="store_true",
                        help="Do not pass -m to aapt")
    parser.add_argument("--failure-policy", choices=["fail-fast", "continue"],
                        help="Stop at the first failing task or run all tasks")
    parser.add_argument("--log-level", choices=["debug", "info", "warning", "error"],
                        help="Log level")


def main(args: Optional[List[str]] = None) -> int:
    """Main entry point for the command-line interface.

    Args:
        args: Command-line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code (0 for success, non-zero for failure)
    """
    parser = argparse.ArgumentParser(
        description="Generate Android sources with aapt and aidl",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {get_application_version()}")

    subparsers = parser.add_subparsers(dest="command", help="Command to execute")

    generate_parser = subparsers.add_parser("generate-sources", help="Generate R.java and AIDL stubs")
    _add_common_arguments(generate_parser)

    show_parser = subparsers.add_parser("show-config", help="Print the effective configuration")
    _add_common_arguments(show_parser)

    args = parser.parse_args(args)

    if args.command == "generate-sources":
        return generate_sources_command(args)
    elif args.command == "show-config":
        return show_config_command(args)
    else:
        parser.print_help()
        return 1


if __name__ == "__main__":
    sys.exit(main())
