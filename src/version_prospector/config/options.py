"""
Options controlling a version computation.

A :class:`ProspectorOptions` value is passed explicitly into every call of
the engine; there is no module-level configuration state.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Tuple

from version_prospector.bumps.classifier import BumpPatterns
from version_prospector.resolution.scanner import CancelCheck, ProgressCallback, ScanStrategy


DEFAULT_TRUNK_BRANCHES: Tuple[str, ...] = ("main", "master")
DEFAULT_TAG_PREFIX = "v"


@dataclass(frozen=True)
class ProspectorOptions:
    """Configuration for :func:`version_prospector.engine.compute_version`.

    Attributes
    ----------
    repository_path : Path
        Directory of the checkout; defaults to the current directory.
    trunk_branches : Tuple[str, ...]
        Branch names that receive release versions.
    tag_prefix : str
        Prefix stripped from release tag names before parsing.
    enable_commit_bumps : bool
        When False the trunk version is always baseline patch plus commit count.
    scan_strategy : ScanStrategy
        Targeted (git-side filtered) or exhaustive commit scanning.
    bump_patterns : BumpPatterns
        Patterns used to classify commit messages.
    progress_callback : callable, optional
        Receives human readable status messages.
    cancel_check : callable, optional
        Polled between scan chunks; returning True cancels the computation.
    """

    repository_path: Path = field(default_factory=Path.cwd)
    trunk_branches: Tuple[str, ...] = DEFAULT_TRUNK_BRANCHES
    tag_prefix: str = DEFAULT_TAG_PREFIX
    enable_commit_bumps: bool = True
    scan_strategy: ScanStrategy = field(default_factory=ScanStrategy.targeted)
    bump_patterns: BumpPatterns = field(default_factory=BumpPatterns)
    progress_callback: Optional[ProgressCallback] = field(default=None, compare=False)
    cancel_check: Optional[CancelCheck] = field(default=None, compare=False)

    def report(self, message: str) -> None:
        if self.progress_callback is not None:
            self.progress_callback(message)
