"""
Command line interface for the version_prospector tool.

This module defines the ``main`` function which is used as the entry
point when executing the ``prospector`` command. It loads the optional
repository configuration, merges it with the command line options, runs
the resolution engine and renders the result as a bare version, JSON or
a detailed report. Progress messages and errors go to standard error so
that standard output only ever carries the result.
"""

from __future__ import annotations

import json
import logging
import time
from pathlib import Path
from typing import Optional, Tuple

import click

from version_prospector import __version__
from version_prospector.config.loader import ConfigError, load_config, options_from_config
from version_prospector.engine import BUMP_KINDS, InvalidBumpKindError, VersionResult, compute_version, suggest_bump
from version_prospector.resolution.scanner import ScanCancelled
from version_prospector.vcs.git_client import GitClient

# Create a module-level logger. Attach a null handler and disable
# propagation to avoid logging errors when the root logger's stream is
# closed (such as during unit tests).
logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())
    logger.propagate = False


# ---------------------------------------------------------------------------
# Exit codes
# ---------------------------------------------------------------------------
EXIT_SUCCESS = 0
EXIT_GENERIC_ERROR = 1
EXIT_INVALID_USAGE = 2
EXIT_CONFIG_ERROR = 4
EXIT_CANCELLED = 5


# ---------------------------------------------------------------------------
# Progress and status display utilities
# ---------------------------------------------------------------------------

class ProgressIndicator:
    """Spinner on standard error fed by the engine's progress callback."""

    def __init__(self, message: str, show_spinner: bool = True):
        self.message = message
        self.show_spinner = show_spinner
        self.spinner_chars = ['⠋', '⠙', '⠹', '⠸', '⠼', '⠴', '⠦', '⠧', '⠇', '⠏']
        self.spinner_index = 0
        self.start_time = None

    def __enter__(self):
        self.start_time = time.time()
        if self.show_spinner:
            click.echo(f"{self.spinner_chars[0]} {self.message}...", nl=False, err=True)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if self.show_spinner:
            elapsed = time.time() - self.start_time
            mark = "✓" if exc_type is None else "✗"
            click.echo(f"\r\033[K{mark} {self.message} (took {elapsed:.1f}s)", err=True)
        return False

    def update(self, message: str):
        """Show the latest progress message."""
        self.spinner_index = (self.spinner_index + 1) % len(self.spinner_chars)
        if self.show_spinner:
            click.echo(f"\r\033[K{self.spinner_chars[self.spinner_index]} {message}", nl=False, err=True)


def enable_package_logging() -> None:
    """Let the package's module loggers reach the root handlers."""
    for name, candidate in logging.root.manager.loggerDict.items():
        if name.startswith("version_prospector") and isinstance(candidate, logging.Logger):
            candidate.propagate = True


def print_error(message: str):
    """Print an error message as the final line on standard error."""
    click.echo(f"Error: {message}", err=True)


def format_detailed(result: VersionResult) -> str:
    """Render a labelled, multi-line report of a version result."""
    lines = [
        "Current Version Information:",
        "─" * 50,
        f"Version:           {result.version}",
        f"Branch:            {result.branch}",
        f"Main Branch:       {'Yes' if result.is_trunk else 'No'}",
        f"Commits Since Tag: {result.commits_since_baseline}",
        f"Current Commit:    {result.current_commit[:8]}",
    ]
    if result.baseline_tag:
        lines.append(f"Last Tag:          {result.baseline_tag.name} ({result.baseline_tag.semver})")
        lines.append(f"Tag Commit:        {result.baseline_tag.commit_id[:8]}")
    else:
        lines.append("Last Tag:          (none)")

    tally = result.tally
    if tally.explicit_version is not None:
        lines.append(f"Explicit Version:  {tally.explicit_version}")
    if tally.has_bumps:
        lines += [
            "",
            "Commit-Based Bumps:",
            f"  Major:           {tally.major}",
            f"  Minor:           {tally.minor}",
            f"  Patch:           {tally.patch}",
        ]
    return "\n".join(lines)


@click.command()
@click.option("-d", "--dir", "directory", type=click.Path(exists=True, file_okay=False, path_type=Path), default=".",
              show_default=True, help="Git repository path.")
@click.option("-b", "--branch", "branches", multiple=True,
              help="Trunk branch name; repeat for several (default: main and master).")
@click.option("-p", "--prefix", "tag_prefix", default=None, help="Version tag prefix (default: v).")
@click.option("--json", "output_format", flag_value="json", help="Output the result as JSON.")
@click.option("--detailed", "output_format", flag_value="detailed", help="Output detailed information.")
@click.option("--suggest", type=click.Choice(BUMP_KINDS), default=None,
              help="Suggest the next major, minor or patch release instead.")
@click.option("--no-commit-bumps", is_flag=True, help="Disable commit message based version bumping.")
@click.option("--max-commit-scan", type=click.IntRange(min=0), default=None,
              help="Read every commit (up to N, 0 for no cap) instead of filtering by bump markers.")
@click.option("--progress", is_flag=True, help="Show progress on standard error.")
@click.option("--verbose", is_flag=True, help="Enable verbose (debug) output.")
@click.version_option(version=__version__, prog_name="prospector")
def main(
    directory: Path,
    branches: Tuple[str, ...],
    tag_prefix: Optional[str],
    output_format: Optional[str],
    suggest: Optional[str],
    no_commit_bumps: bool,
    max_commit_scan: Optional[int],
    progress: bool,
    verbose: bool,
) -> None:
    """Calculate a semantic version from Git tags and commit history.

    Trunk branches get release versions: the patch grows by one per commit
    since the last tag, and [major], [minor], [patch], feat:, fix: or
    BREAKING CHANGE markers in commit messages bump accordingly. A
    [version:X.Y.Z] marker sets the version outright. Other branches get
    prerelease versions such as 1.2.4-feature-login.3.
    """
    # Configure logging. Use force=True to ensure handlers are reconfigured
    # on subsequent invocations (important for tests).
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s: %(message)s",
        force=True,
    )
    if verbose:
        enable_package_logging()

    repo_root = GitClient.find_repo_root(directory) or directory
    logger.debug("Resolving version for %s", repo_root)

    try:
        config = load_config(repo_root)
    except ConfigError as exc:
        print_error(f"Configuration error: {exc}")
        raise click.exceptions.Exit(EXIT_CONFIG_ERROR)

    indicator = ProgressIndicator("Calculating version", show_spinner=progress)
    try:
        options = options_from_config(
            config,
            repository_path=repo_root,
            trunk_branches=branches,
            tag_prefix=tag_prefix,
            enable_commit_bumps=False if no_commit_bumps else None,
            max_commit_scan=max_commit_scan,
            progress_callback=indicator.update if progress else None,
        )
        with indicator:
            if suggest:
                output = suggest_bump(suggest, options)
            else:
                result = compute_version(options)
                if output_format == "json":
                    output = json.dumps(result.to_dict(), indent=2)
                elif output_format == "detailed":
                    output = format_detailed(result)
                else:
                    output = result.version
    except ConfigError as exc:
        print_error(f"Configuration error: {exc}")
        raise click.exceptions.Exit(EXIT_CONFIG_ERROR)
    except InvalidBumpKindError as exc:
        print_error(str(exc))
        raise click.exceptions.Exit(EXIT_INVALID_USAGE)
    except ScanCancelled as exc:
        print_error(str(exc))
        raise click.exceptions.Exit(EXIT_CANCELLED)
    except Exception as exc:
        # Catch any other unhandled errors
        logging.exception("Unhandled error: %s", exc)
        print_error(f"Unexpected error: {exc}")
        raise click.exceptions.Exit(EXIT_GENERIC_ERROR)

    click.echo(output)
