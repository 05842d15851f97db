"""Entry point module for executing specrunner as a Python module.

This module enables running specrunner via `python -m specrunner`, which
delegates to the CLI main function.
"""

from specrunner.cli import main

if __name__ == "__main__":
    main()
