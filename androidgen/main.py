from __future__ import annotations
import sys

from androidgen.build.cli import main as build_cli


def main() -> int:
    """Run the androidgen command-line interface."""
    return build_cli()


if __name__ == '__main__':
    sys.exit(main())
