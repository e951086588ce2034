"""
Version composition from a baseline, a bump tally and a commit count.

Trunk branches get a release version derived from bump markers (or from
the commit count when there are none). Any other branch gets a prerelease
version naming the branch, and bump markers are not applied.
"""

from __future__ import annotations

import re
from typing import Optional

import semver

from version_prospector.bumps.model import BumpTally
from version_prospector.resolution.tags import VersionTag


ZERO = semver.Version(0, 0, 0)

_INVALID_BRANCH_CHARS = re.compile(r"[^A-Za-z0-9-]")
_EDGE_DASHES = re.compile(r"^-+|-+$")


def sanitize_branch(name: str) -> str:
    """Make a branch name usable as a prerelease identifier.

    Every character outside ``[A-Za-z0-9-]`` becomes ``-`` and leading or
    trailing dashes are removed.
    """
    return _EDGE_DASHES.sub("", _INVALID_BRANCH_CHARS.sub("-", name))


def _apply_bumps(base: semver.Version, tally: BumpTally, fallback_commits: int) -> semver.Version:
    if tally.major > 0:
        return semver.Version(base.major + tally.major, 0, tally.patch)
    if tally.minor > 0:
        return semver.Version(base.major, base.minor + tally.minor, tally.patch)
    return semver.Version(base.major, base.minor, base.patch + fallback_commits)


def compose_version(
    baseline: Optional[VersionTag],
    tally: BumpTally,
    commits_since_baseline: int,
    commits_since_explicit: int = 0,
) -> semver.Version:
    """Compute the trunk release version.

    Parameters
    ----------
    baseline : VersionTag, optional
        Most recent reachable release tag; None is treated as ``0.0.0``.
    tally : BumpTally
        Bumps counted from commits newer than any explicit marker.
    commits_since_baseline : int
        Commits between the baseline and HEAD.
    commits_since_explicit : int
        Commits newer than the explicit-version commit, when there is one.

    Notes
    -----
    An explicit version replaces the baseline outright. Bumps newer than it
    then apply with the usual rules: a major bump resets minor and patch, a
    minor bump resets patch, and patch markers are added after the reset.
    Without major or minor bumps every commit counts as one patch increment,
    whether or not it carries a patch marker.
    """
    if tally.explicit_version is not None:
        return _apply_bumps(tally.explicit_version, tally, commits_since_explicit)
    base = baseline.semver if baseline is not None else ZERO
    return _apply_bumps(base, tally, commits_since_baseline)


def prerelease_version(baseline: Optional[VersionTag], branch: str, commits_since_baseline: int) -> str:
    """Prerelease version for a non-trunk branch: next patch, branch name and commit count."""
    base = baseline.semver.bump_patch() if baseline is not None else semver.Version(0, 0, 1)
    return f"{base}-{sanitize_branch(branch)}.{commits_since_baseline}"


class BranchPolicy:
    """Decides between trunk and prerelease formatting for a branch."""

    def __init__(self, trunk_branches) -> None:
        self.trunk_branches = frozenset(trunk_branches)

    def is_trunk(self, branch: str) -> bool:
        return branch in self.trunk_branches

    def format(
        self,
        is_trunk: bool,
        baseline: Optional[VersionTag],
        tally: BumpTally,
        commits_since_baseline: int,
        branch: str,
        commits_since_explicit: int = 0,
    ) -> str:
        if is_trunk:
            return str(compose_version(baseline, tally, commits_since_baseline, commits_since_explicit))
        return prerelease_version(baseline, branch, commits_since_baseline)
