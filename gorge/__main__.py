"""Entry point for gorge."""

import sys
import traceback
from importlib.metadata import version

from gorge.cli import main, parse_args


def get_version() -> str:
    """Return the installed gorge version, or ``"unknown"``."""
    try:
        return version("gorge")
    except Exception:
        return "unknown"


def run() -> None:
    """Run the CLI with standard Python tracebacks."""
    args = parse_args(version=get_version())
    try:
        exit_code = main(args)
    except Exception:
        traceback.print_exc()
        exit_code = 1
    sys.exit(exit_code)


if __name__ == "__main__":
    run()
