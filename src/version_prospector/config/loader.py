"""
Configuration loader for version_prospector.

A repository may carry an optional JSON file named ``.prospector.json`` in
its root directory. This loader validates the structure of that file and
returns its settings as a dictionary; :func:`options_from_config` turns the
dictionary, together with values given on the command line, into
:class:`~version_prospector.config.options.ProspectorOptions`.

A missing file is not an error. A malformed file, unknown keys or values
of the wrong type raise :class:`ConfigError`.
"""

from __future__ import annotations

import json
import logging
import re
from pathlib import Path
from typing import Any, Dict, Iterable, Optional

from version_prospector.bumps.classifier import BumpPatterns
from version_prospector.config.options import DEFAULT_TAG_PREFIX, DEFAULT_TRUNK_BRANCHES, ProspectorOptions
from version_prospector.resolution.scanner import CancelCheck, ProgressCallback, ScanStrategy


logger = logging.getLogger(__name__)
# Attach a null handler to avoid "No handler" warnings in library use. The
# CLI turns propagation back on under --verbose.
if not logger.handlers:
    logger.addHandler(logging.NullHandler())
    logger.propagate = False

CONFIG_FILE_NAME = ".prospector.json"
PATTERN_KEYS = ("explicit", "major", "minor", "patch")
KNOWN_KEYS = {"trunk_branches", "tag_prefix", "enable_commit_bumps", "max_commit_scan", "bump_patterns"}


class ConfigError(Exception):
    """Raised when the prospector configuration file is invalid."""

    pass


def load_config(repo_root: Path) -> Dict[str, Any]:
    """Load ``.prospector.json`` from ``repo_root`` and return its settings.

    Args:
        repo_root: Root directory of the repository.

    Returns:
        A dictionary with any of the keys:
        - trunk_branches (list of str)
        - tag_prefix (str)
        - enable_commit_bumps (bool)
        - max_commit_scan (int >= 0; 0 means an uncapped exhaustive scan)
        - bump_patterns (dict with optional explicit/major/minor/patch strings)
        An empty dictionary is returned when the file does not exist.

    Raises:
        ConfigError: If the file cannot be read, is not valid JSON, or has
            unknown keys or values of the wrong type.
    """
    config_path = repo_root / CONFIG_FILE_NAME
    if not config_path.exists():
        logger.debug("No configuration file at %s, using defaults", config_path)
        return {}

    try:
        content = config_path.read_text(encoding="utf-8")
        data = json.loads(content)
    except (OSError, json.JSONDecodeError) as exc:
        logger.error("Failed to read or parse configuration file: %s", exc)
        raise ConfigError(f"Invalid JSON in {config_path.name}: {exc}") from exc

    if not isinstance(data, dict):
        raise ConfigError(f"{config_path.name} must contain a JSON object")

    unknown = sorted(set(data) - KNOWN_KEYS)
    if unknown:
        raise ConfigError(f"Unknown configuration keys: {', '.join(unknown)}")

    branches = data.get("trunk_branches")
    if branches is not None and (
        not isinstance(branches, list) or not branches or not all(isinstance(b, str) and b for b in branches)
    ):
        raise ConfigError("'trunk_branches' must be a non-empty list of strings")
    if "tag_prefix" in data and not isinstance(data["tag_prefix"], str):
        raise ConfigError("'tag_prefix' must be a string")
    if "enable_commit_bumps" in data and not isinstance(data["enable_commit_bumps"], bool):
        raise ConfigError("'enable_commit_bumps' must be a boolean")
    scan = data.get("max_commit_scan")
    if scan is not None and (isinstance(scan, bool) or not isinstance(scan, int) or scan < 0):
        raise ConfigError("'max_commit_scan' must be a non-negative integer")

    patterns = data.get("bump_patterns")
    if patterns is not None:
        if not isinstance(patterns, dict):
            raise ConfigError("'bump_patterns' must be an object")
        for key, value in patterns.items():
            if key not in PATTERN_KEYS:
                raise ConfigError(f"Unknown bump pattern '{key}'")
            if not isinstance(value, str):
                raise ConfigError(f"Bump pattern '{key}' must be a string")

    logger.debug("Loaded configuration from: %s", config_path)
    return data


def build_patterns(overrides: Optional[Dict[str, str]]) -> BumpPatterns:
    """Compile bump pattern overrides on top of the defaults.

    Raises:
        ConfigError: If an override is not a valid regular expression.
    """
    if not overrides:
        return BumpPatterns()
    try:
        return BumpPatterns.with_overrides(**overrides)
    except re.error as exc:
        raise ConfigError(f"Invalid bump pattern: {exc}") from exc


def options_from_config(
    data: Dict[str, Any],
    repository_path: Path,
    trunk_branches: Optional[Iterable[str]] = None,
    tag_prefix: Optional[str] = None,
    enable_commit_bumps: Optional[bool] = None,
    max_commit_scan: Optional[int] = None,
    progress_callback: Optional[ProgressCallback] = None,
    cancel_check: Optional[CancelCheck] = None,
) -> ProspectorOptions:
    """Merge file settings with explicitly given values into options.

    Arguments that are None fall back to the file value, then to the
    built-in default.
    """
    branches = tuple(trunk_branches) if trunk_branches else tuple(data.get("trunk_branches") or DEFAULT_TRUNK_BRANCHES)
    if tag_prefix is None:
        tag_prefix = data.get("tag_prefix", DEFAULT_TAG_PREFIX)
    if enable_commit_bumps is None:
        enable_commit_bumps = data.get("enable_commit_bumps", True)
    if max_commit_scan is None:
        max_commit_scan = data.get("max_commit_scan")
    strategy = ScanStrategy.targeted() if max_commit_scan is None else ScanStrategy.exhaustive(max_commit_scan)

    return ProspectorOptions(
        repository_path=repository_path,
        trunk_branches=branches,
        tag_prefix=tag_prefix,
        enable_commit_bumps=enable_commit_bumps,
        scan_strategy=strategy,
        bump_patterns=build_patterns(data.get("bump_patterns")),
        progress_callback=progress_callback,
        cancel_check=cancel_check,
    )
