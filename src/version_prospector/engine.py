"""
Version resolution engine.

:func:`compute_version` runs the resolution stages in order: read the
repository state, resolve the baseline tag, scan and aggregate commits on
trunk branches, then compose the version string. Each call builds all of
its state from live repository queries and the options it is given.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

import semver

from version_prospector.bumps.aggregator import aggregate_bumps
from version_prospector.bumps.model import BumpTally
from version_prospector.config.options import ProspectorOptions
from version_prospector.resolution.composer import ZERO, BranchPolicy
from version_prospector.resolution.scanner import CommitScanner
from version_prospector.resolution.tags import TagResolver, VersionTag
from version_prospector.vcs.git_client import GitClient


logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())
    logger.propagate = False

BUMP_KINDS = ("major", "minor", "patch")


class InvalidBumpKindError(ValueError):
    """Raised when a version bump of an unknown kind is requested."""

    pass


@dataclass(frozen=True)
class RepositoryState:
    """Branch and HEAD of the checkout being versioned."""

    branch: str
    head: str
    is_trunk: bool


@dataclass
class VersionResult:
    """Outcome of a version computation."""

    version: str
    baseline_tag: Optional[VersionTag]
    commits_since_baseline: int
    tally: BumpTally
    branch: str
    is_trunk: bool
    current_commit: str = field(default="")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "version": self.version,
            "branch": self.branch,
            "is_trunk": self.is_trunk,
            "commits_since_baseline": self.commits_since_baseline,
            "baseline_tag": self.baseline_tag.to_dict() if self.baseline_tag else None,
            "current_commit": self.current_commit,
            "tally": self.tally.to_dict(),
        }


def read_repository_state(client: GitClient, policy: BranchPolicy) -> RepositoryState:
    branch = client.get_current_branch()
    head = client.get_head_commit()
    return RepositoryState(branch=branch, head=head, is_trunk=policy.is_trunk(branch))


def compute_version(options: Optional[ProspectorOptions] = None, client: Optional[GitClient] = None) -> VersionResult:
    """Compute the version of the checkout described by ``options``.

    Parameters
    ----------
    options : ProspectorOptions, optional
        Configuration of this computation; defaults apply when omitted.
    client : GitClient, optional
        Collaborator used for repository queries. A :class:`GitClient` for
        ``options.repository_path`` is created when omitted.

    Returns
    -------
    VersionResult
        The version together with the data it was derived from.

    Raises
    ------
    ScanCancelled
        If ``options.cancel_check`` requested cancellation during the scan.
    """
    options = options or ProspectorOptions()
    client = client or GitClient(options.repository_path)
    policy = BranchPolicy(options.trunk_branches)

    options.report("Getting current branch and commit...")
    state = read_repository_state(client, policy)
    to_commit = state.head or "HEAD"
    options.report(
        f"Branch: {state.branch} | Commit: {state.head[:8]} | Main: {'Yes' if state.is_trunk else 'No'}"
    )

    options.report("Fetching version tags...")
    baseline = TagResolver(client).resolve(options.tag_prefix, to_commit)
    from_commit = baseline.commit_id if baseline is not None else None
    if baseline is not None:
        options.report(f"Baseline tag: {baseline.name}")
    else:
        options.report("No version tags found, starting from 0.0.0")

    scanner = CommitScanner(
        client,
        options.scan_strategy,
        options.bump_patterns,
        progress=options.progress_callback,
        cancel_check=options.cancel_check,
    )

    tally = BumpTally()
    commits_since_baseline: Optional[int] = None
    if state.is_trunk and options.enable_commit_bumps:
        scan = scanner.commits_in_range(from_commit, to_commit)
        tally = aggregate_bumps(scan.commits, options.bump_patterns)
        if scan.complete:
            commits_since_baseline = len(scan.commits)
        if tally.explicit_version is not None:
            options.report(f"Explicit version found: {tally.explicit_version}")
        elif tally.has_bumps:
            options.report(f"Bumps detected | Major: {tally.major} | Minor: {tally.minor} | Patch: {tally.patch}")

    if commits_since_baseline is None:
        commits_since_baseline = scanner.count(from_commit, to_commit)
    options.report(f"{commits_since_baseline:,} commit(s) since {baseline.name if baseline else 'repository root'}")

    commits_since_explicit = 0
    if tally.explicit_commit is not None:
        commits_since_explicit = scanner.count(tally.explicit_commit, to_commit)

    version = policy.format(
        state.is_trunk,
        baseline,
        tally,
        commits_since_baseline,
        state.branch,
        commits_since_explicit=commits_since_explicit,
    )
    options.report(f"Calculated version: {version}")
    logger.debug("Resolved version %s on branch %s", version, state.branch)

    return VersionResult(
        version=version,
        baseline_tag=baseline,
        commits_since_baseline=commits_since_baseline,
        tally=tally,
        branch=state.branch,
        is_trunk=state.is_trunk,
        current_commit=state.head,
    )


def suggest_bump(kind: str, options: Optional[ProspectorOptions] = None, client: Optional[GitClient] = None) -> str:
    """Suggest the next ``kind`` release after the current baseline.

    Commit-based bumps are ignored; the standard semver increment is
    applied to the baseline tag, or to ``0.0.0`` when there is none.

    Raises
    ------
    InvalidBumpKindError
        If ``kind`` is not one of ``major``, ``minor`` or ``patch``.
    """
    if kind not in BUMP_KINDS:
        raise InvalidBumpKindError(f"Invalid bump kind '{kind}'; expected one of: {', '.join(BUMP_KINDS)}")
    result = compute_version(options, client)
    base: semver.Version = result.baseline_tag.semver if result.baseline_tag else ZERO
    return str(getattr(base, f"bump_{kind}")())
