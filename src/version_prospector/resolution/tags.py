"""
Baseline release tag resolution.

A baseline is the highest-versioned release tag whose commit is reachable
from HEAD. Tags are recognised by a configurable prefix followed by a plain
``major.minor.patch`` version; anything else is ignored.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import semver

from version_prospector.vcs.git_client import GitClient


logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())
    logger.propagate = False

_TAG_VERSION = re.compile(r"^[0-9]+\.[0-9]+\.[0-9]+$")


@dataclass(frozen=True)
class VersionTag:
    """A release tag and the version and commit it stands for."""

    name: str
    semver: semver.Version
    commit_id: str

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "version": str(self.semver), "commit": self.commit_id}


def parse_tag_version(name: str, tag_prefix: str) -> Optional[semver.Version]:
    """Return the version encoded in a tag name, or None.

    Prerelease and build metadata on the tag itself are not accepted.
    """
    if not name.startswith(tag_prefix):
        return None
    suffix = name[len(tag_prefix):]
    if not _TAG_VERSION.match(suffix):
        return None
    try:
        return semver.Version.parse(suffix)
    except ValueError:
        return None


def collect_version_tags(client: GitClient, tag_prefix: str) -> List[VersionTag]:
    """Return every parsable release tag, highest version first."""
    names = client.list_tags()
    if not names:
        return []
    candidates = {}
    for name in names:
        version = parse_tag_version(name, tag_prefix)
        if version is not None:
            candidates[name] = version
    if not candidates:
        return []

    commits = client.tag_commits()
    tags = [
        VersionTag(name=name, semver=version, commit_id=commits[name])
        for name, version in candidates.items()
        if commits.get(name)
    ]
    tags.sort(key=lambda tag: tag.semver, reverse=True)
    return tags


class TagResolver:
    """Finds the baseline release tag reachable from HEAD."""

    def __init__(self, client: GitClient) -> None:
        self.client = client

    def resolve(self, tag_prefix: str, head: str) -> Optional[VersionTag]:
        """Return the highest release tag that is an ancestor of (or at) ``head``.

        Returns None when no tag qualifies, including when the repository
        cannot be queried.
        """
        tags = collect_version_tags(self.client, tag_prefix)
        if not tags:
            return None
        logger.debug("Found %d version tag(s), latest %s", len(tags), tags[0].name)

        reachable = self.client.merged_tags(head)
        for tag in tags:
            if tag.name in reachable:
                return tag
        return None
