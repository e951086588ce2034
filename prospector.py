#!/usr/bin/env python
"""
Thin wrapper script to invoke the version_prospector CLI.

Running ``python prospector.py`` is equivalent to running the
``prospector`` console script installed via ``pyproject.toml``.
"""

from version_prospector.cli import main


if __name__ == "__main__":
    main(prog_name="prospector")
