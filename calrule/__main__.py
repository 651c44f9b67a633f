"""Entry point for `python -m calrule` command.

Delegates to the CLI module; also used as the ``calrule`` console script.
"""

import sys

from calrule.cli import main_entry


def main() -> None:
    """Entry point for python -m calrule and the setuptools console script."""
    try:
        exit_code = main_entry()
    except KeyboardInterrupt:
        print("Operation cancelled by user")
        sys.exit(130)
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
