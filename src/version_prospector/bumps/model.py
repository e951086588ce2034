"""
Data models for commit bump analysis.

A :class:`CommitRecord` is a single commit as read from history and a
:class:`BumpTally` is the reduction of a newest-first sequence of such
records into bump counts plus an optional explicit version.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional

import semver


@dataclass(frozen=True)
class CommitRecord:
    """A commit id and its full message."""

    id: str
    message: str


@dataclass
class BumpTally:
    """Aggregated bump markers found in a commit range.

    Attributes
    ----------
    major, minor, patch : int
        Number of commits whose highest-priority marker was of that kind.
    explicit_version : semver.Version, optional
        Version set by the most recent explicit-version marker.
    explicit_commit : str, optional
        Id of the commit carrying ``explicit_version``.
    """

    major: int = 0
    minor: int = 0
    patch: int = 0
    explicit_version: Optional[semver.Version] = None
    explicit_commit: Optional[str] = field(default=None, compare=False)

    @property
    def has_bumps(self) -> bool:
        return self.major > 0 or self.minor > 0 or self.patch > 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "major": self.major,
            "minor": self.minor,
            "patch": self.patch,
            "explicit_version": str(self.explicit_version) if self.explicit_version else None,
        }
