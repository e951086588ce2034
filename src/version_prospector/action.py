"""
GitHub Action entry point for version_prospector.

Reads the action inputs from the ``INPUT_*`` environment variables set by
the Actions runner, computes the version and publishes it as step outputs
(``$GITHUB_OUTPUT``) and as a Markdown table in the job summary
(``$GITHUB_STEP_SUMMARY``).
"""

from __future__ import annotations

import logging
import os
import sys
from pathlib import Path
from typing import Dict, List, Optional

import click

from version_prospector.config.loader import ConfigError, load_config, options_from_config
from version_prospector.engine import InvalidBumpKindError, VersionResult, compute_version, suggest_bump
from version_prospector.resolution.scanner import ScanCancelled


logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())
    logger.propagate = False


def get_input(name: str, default: str = "") -> str:
    """Return an action input the way the runner exposes it."""
    value = os.environ.get(f"INPUT_{name.replace(' ', '_').upper()}", "")
    return value.strip() or default


def parse_branches(value: str) -> List[str]:
    return [branch.strip() for branch in value.split(",") if branch.strip()]


def build_outputs(result: VersionResult, version: str) -> Dict[str, str]:
    tag = result.baseline_tag
    return {
        "version": version,
        "branch": result.branch,
        "is-main-branch": str(result.is_trunk).lower(),
        "commits-since-tag": str(result.commits_since_baseline),
        "last-tag": tag.name if tag else "",
        "current-commit": result.current_commit,
        "major-bumps": str(result.tally.major),
        "minor-bumps": str(result.tally.minor),
        "patch-bumps": str(result.tally.patch),
    }


def build_summary(result: VersionResult, version: str) -> str:
    rows = [
        ("Version", version),
        ("Branch", result.branch),
        ("Main Branch", "✅ Yes" if result.is_trunk else "❌ No"),
        ("Commits Since Tag", str(result.commits_since_baseline)),
        ("Last Tag", result.baseline_tag.name if result.baseline_tag else "(none)"),
        ("Current Commit", result.current_commit[:8]),
    ]
    lines = ["## 📦 Prospector Version", "", "| Property | Value |", "| --- | --- |"]
    lines += [f"| {name} | {value} |" for name, value in rows]
    if result.tally.has_bumps:
        lines += [
            "",
            "| Bump Type | Count |",
            "| --- | --- |",
            f"| Major | {result.tally.major} |",
            f"| Minor | {result.tally.minor} |",
            f"| Patch | {result.tally.patch} |",
        ]
    return "\n".join(lines) + "\n"


def write_outputs(outputs: Dict[str, str], output_path: Optional[str]) -> None:
    if output_path:
        with open(output_path, "a", encoding="utf-8") as f:
            for key, value in outputs.items():
                f.write(f"{key}={value}\n")
    else:
        for key, value in outputs.items():
            click.echo(f"OUTPUT: {key}={value}")


def run() -> int:
    """Run the action and return the process exit code."""
    directory = Path(get_input("dir", "."))
    suggest = get_input("suggest")
    no_commit_bumps = get_input("no-commit-bumps").lower() == "true"

    click.echo(f"Calculating version for: {directory}")
    try:
        options = options_from_config(
            load_config(directory),
            repository_path=directory,
            trunk_branches=parse_branches(get_input("branch")) or None,
            tag_prefix=get_input("prefix") or None,
            enable_commit_bumps=False if no_commit_bumps else None,
            progress_callback=click.echo,
        )
        result = compute_version(options)
        version = result.version
        if suggest:
            click.echo(f"Suggesting next {suggest} version...")
            version = suggest_bump(suggest, options)
    except (ConfigError, InvalidBumpKindError, ScanCancelled) as exc:
        click.echo(f"::error::{exc}")
        return 1
    except Exception as exc:
        # Catch any other unhandled errors
        logger.exception("Unhandled error: %s", exc)
        click.echo(f"::error::{exc}")
        return 1

    try:
        write_outputs(build_outputs(result, version), os.environ.get("GITHUB_OUTPUT"))
        summary_path = os.environ.get("GITHUB_STEP_SUMMARY")
        if summary_path:
            with open(summary_path, "a", encoding="utf-8") as f:
                f.write(build_summary(result, version))
    except OSError as exc:
        click.echo(f"::error::Failed to write action outputs: {exc}")
        return 1

    click.echo(f"✅ Version: {version}")
    return 0


def main() -> None:
    sys.exit(run())
