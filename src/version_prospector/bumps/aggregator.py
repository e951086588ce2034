"""
Reduction of a newest-first commit sequence into a :class:`BumpTally`.
"""

from __future__ import annotations

import logging
from typing import Iterable

from version_prospector.bumps.classifier import BumpKind, BumpPatterns, classify_bump
from version_prospector.bumps.model import BumpTally, CommitRecord


logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())
    logger.propagate = False


def aggregate_bumps(commits: Iterable[CommitRecord], patterns: BumpPatterns) -> BumpTally:
    """Fold commits into a bump tally.

    ``commits`` must be ordered newest-first. Iteration stops at the first
    commit carrying a valid explicit-version marker, so only commits newer
    than that marker contribute to the major/minor/patch counters.
    """
    tally = BumpTally()
    for commit in commits:
        kind, version = classify_bump(commit.message, patterns)
        if kind is BumpKind.EXPLICIT:
            tally.explicit_version = version
            tally.explicit_commit = commit.id
            logger.debug("Explicit version %s set by commit %s", version, commit.id[:8])
            break
        if kind is BumpKind.MAJOR:
            tally.major += 1
        elif kind is BumpKind.MINOR:
            tally.minor += 1
        elif kind is BumpKind.PATCH:
            tally.patch += 1
    return tally
