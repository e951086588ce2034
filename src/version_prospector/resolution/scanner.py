"""
Commit retrieval between a baseline and HEAD.

Two strategies feed the same bump aggregation:

* **targeted** (default) lets Git filter the history down to commits whose
  message matches one of the bump patterns. The result is a strict subset
  of the range and is never used for counting.
* **exhaustive** reads every commit in the range, optionally capped. Below
  the cap the number of returned commits is the authoritative count.

In both cases :meth:`CommitScanner.count` provides an exact range count.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import Callable, List, Optional

from version_prospector.bumps.classifier import BumpPatterns
from version_prospector.bumps.model import CommitRecord
from version_prospector.vcs.git_client import GitClient


logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())
    logger.propagate = False

PARSE_CHUNK_SIZE = 1000

ProgressCallback = Callable[[str], None]
CancelCheck = Callable[[], bool]


class ScanCancelled(Exception):
    """Raised when a scan is cancelled through the cancellation hook."""

    pass


class ScanMode(str, enum.Enum):
    """Commit retrieval strategies."""

    TARGETED = "targeted"
    EXHAUSTIVE = "exhaustive"


@dataclass(frozen=True)
class ScanStrategy:
    """How commits are fetched for bump analysis.

    Use :meth:`targeted` or :meth:`exhaustive` rather than the constructor.
    A ``limit`` of None (or 0) means the exhaustive scan is uncapped.
    """

    mode: ScanMode = ScanMode.TARGETED
    limit: Optional[int] = None

    @classmethod
    def targeted(cls) -> "ScanStrategy":
        return cls(mode=ScanMode.TARGETED)

    @classmethod
    def exhaustive(cls, limit: Optional[int] = None) -> "ScanStrategy":
        return cls(mode=ScanMode.EXHAUSTIVE, limit=limit or None)

    @property
    def is_targeted(self) -> bool:
        return self.mode is ScanMode.TARGETED


@dataclass
class ScanResult:
    """Commits fetched for aggregation and whether they cover the whole range."""

    commits: List[CommitRecord]
    complete: bool


class CommitScanner:
    """Fetches commits and commit counts for a range ending at HEAD."""

    def __init__(
        self,
        client: GitClient,
        strategy: ScanStrategy,
        patterns: BumpPatterns,
        progress: Optional[ProgressCallback] = None,
        cancel_check: Optional[CancelCheck] = None,
    ) -> None:
        self.client = client
        self.strategy = strategy
        self.patterns = patterns
        self.progress = progress
        self.cancel_check = cancel_check

    def _report(self, message: str) -> None:
        logger.debug(message)
        if self.progress is not None:
            self.progress(message)

    def commits_in_range(self, from_commit: Optional[str], to_commit: str) -> ScanResult:
        """Return commits between ``from_commit`` (exclusive) and ``to_commit``, newest first.

        Raises
        ------
        ScanCancelled
            If the cancellation hook fires while a targeted scan is processed.
        """
        if self.strategy.is_targeted:
            return ScanResult(commits=self._targeted(from_commit, to_commit), complete=False)

        limit = self.strategy.limit
        if limit:
            self._report(f"Scanning up to {limit} commits for version bumps...")
        else:
            self._report("Scanning all commits for version bumps...")
        commits = self.client.commit_messages(from_commit, to_commit, limit=limit)
        complete = bool(commits) and (limit is None or len(commits) < limit)
        return ScanResult(commits=commits, complete=complete)

    def _targeted(self, from_commit: Optional[str], to_commit: str) -> List[CommitRecord]:
        self._report("Searching for version bump markers...")
        matches = self.client.commit_messages(from_commit, to_commit, grep=self.patterns.grep_patterns())
        if not matches:
            self._report("Search complete - no bump markers found")
            return []

        total = len(matches)
        self._report(f"Found {total:,} commits with bump markers, collecting...")
        commits: List[CommitRecord] = []
        total_chunks = (total + PARSE_CHUNK_SIZE - 1) // PARSE_CHUNK_SIZE
        for chunk_num, start in enumerate(range(0, total, PARSE_CHUNK_SIZE), 1):
            if self.cancel_check is not None and self.cancel_check():
                raise ScanCancelled("Commit scan cancelled")
            commits.extend(matches[start:start + PARSE_CHUNK_SIZE])
            self._report(f"Collected {len(commits):,} / {total:,} commits (chunk {chunk_num}/{total_chunks})")
        return commits

    def count(self, from_commit: Optional[str], to_commit: str) -> int:
        """Authoritative number of commits in the range."""
        return self.client.count_commits(from_commit, to_commit)
