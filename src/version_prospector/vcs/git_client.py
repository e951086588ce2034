"""
Git client implementation for version_prospector.

This module wraps the read-only Git queries needed to resolve a version
from history. It never creates tags or commits. Every public query
degrades to an empty or zero result when the underlying command fails, so
the resolution engine always has data to work with; only the low-level
:meth:`GitClient._run` raises :class:`GitError`, which keeps the queries
easy to mock in unit tests.
"""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Set

from version_prospector.bumps.model import CommitRecord


logger = logging.getLogger(__name__)
# Attach a null handler to avoid logging errors when the root logger is not
# configured. The CLI turns propagation back on under --verbose.
if not logger.handlers:
    logger.addHandler(logging.NullHandler())
    logger.propagate = False

# ASCII unit/record separators delimit fields and commits in ``git log`` output.
FIELD_SEP = "\x1f"
RECORD_SEP = "\x1e"
LOG_FORMAT = "--format=%H%x1f%B%x1e"


class GitError(Exception):
    """Raised when a Git command fails."""

    pass


def parse_log_output(output: str) -> List[CommitRecord]:
    """Parse ``git log`` output produced with :data:`LOG_FORMAT`.

    Blocks without a commit id are skipped.
    """
    commits: List[CommitRecord] = []
    for block in output.split(RECORD_SEP):
        block = block.lstrip("\n")
        if not block:
            continue
        commit_id, sep, message = block.partition(FIELD_SEP)
        if not sep or not commit_id.strip():
            continue
        commits.append(CommitRecord(id=commit_id.strip(), message=message.strip()))
    return commits


def format_range(from_exclusive: Optional[str], to_inclusive: str) -> str:
    """Return a revision range; with no lower bound the range starts at the root."""
    if from_exclusive:
        return f"{from_exclusive}..{to_inclusive}"
    return to_inclusive


class GitClient:
    """Read-only client for a Git repository."""

    def __init__(self, repo_root: Path) -> None:
        self.repo_root = repo_root

    # ------------------------------------------------------------------
    # Static helpers
    # ------------------------------------------------------------------
    @staticmethod
    def find_repo_root(start: Path) -> Optional[Path]:
        """Find the root of the Git repository starting from ``start``.

        Walk upwards until a ``.git`` entry is found or the filesystem
        root is reached.
        """
        current = start.resolve()
        while True:
            if (current / ".git").exists():
                return current
            if current.parent == current:
                # reached filesystem root
                return None
            current = current.parent

    # ------------------------------------------------------------------
    # Basic Git commands
    # ------------------------------------------------------------------
    def _run(self, args: List[str], check: bool = True) -> subprocess.CompletedProcess:
        """Run a Git command in the repository root.

        Raises
        ------
        GitError
            If Git cannot be started, or if the command exits with a
            non-zero status when ``check`` is True.
        """
        full_cmd = ["git"] + args
        logger.debug("Executing Git command: %s", " ".join(full_cmd))
        try:
            result = subprocess.run(
                full_cmd,
                cwd=self.repo_root,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                text=True,
                encoding="utf-8",
                errors="replace",  # Replace invalid characters instead of failing
            )
        except OSError as e:
            # git missing from PATH, or repo_root does not exist
            raise GitError(f"Failed to run git: {e}") from e

        if check and result.returncode != 0:
            logger.debug(
                "Git command failed: %s\nSTDOUT: %s\nSTDERR: %s",
                " ".join(full_cmd),
                result.stdout,
                result.stderr,
            )
            raise GitError(result.stderr.strip() or result.stdout.strip())
        return result

    def _query(self, args: List[str]) -> str:
        """Run a query and return its stripped output, or ``""`` on failure."""
        try:
            return self._run(args, check=True).stdout.strip()
        except GitError as exc:
            logger.warning("Git query '%s' failed: %s", " ".join(args), exc)
            return ""

    # ------------------------------------------------------------------
    # Repository state
    # ------------------------------------------------------------------
    def get_current_branch(self) -> str:
        """Get the name of the current branch, or ``"unknown"``."""
        return self._query(["rev-parse", "--abbrev-ref", "HEAD"]) or "unknown"

    def get_head_commit(self) -> str:
        """Get the full id of HEAD, or ``""`` when it cannot be resolved."""
        return self._query(["rev-parse", "HEAD"])

    # ------------------------------------------------------------------
    # Tags
    # ------------------------------------------------------------------
    def list_tags(self) -> List[str]:
        """Return the names of all tags."""
        return [line.strip() for line in self._query(["tag", "-l"]).splitlines() if line.strip()]

    def tag_commits(self) -> Dict[str, str]:
        """Map every tag name to the commit it points at.

        Annotated tags are peeled to their commit in the same query.
        """
        output = self._query(
            ["for-each-ref", "refs/tags", "--format=%(refname:strip=2)%00%(objectname)%00%(*objectname)"]
        )
        commits: Dict[str, str] = {}
        for line in output.splitlines():
            parts = line.split("\x00")
            if len(parts) != 3 or not parts[0]:
                continue
            name, object_id, peeled = parts
            commits[name] = peeled or object_id
        return commits

    def merged_tags(self, head: str) -> Set[str]:
        """Return the names of tags whose commit is reachable from ``head``."""
        output = self._query(["tag", "--merged", head or "HEAD"])
        return {line.strip() for line in output.splitlines() if line.strip()}

    # ------------------------------------------------------------------
    # Commits
    # ------------------------------------------------------------------
    def count_commits(self, from_exclusive: Optional[str], to_inclusive: str = "HEAD") -> int:
        """Count commits in ``from_exclusive..to_inclusive``.

        With ``from_exclusive`` set to None every commit reachable from
        ``to_inclusive`` is counted.
        """
        output = self._query(["rev-list", "--count", format_range(from_exclusive, to_inclusive or "HEAD")])
        try:
            return int(output)
        except ValueError:
            return 0

    def commit_messages(
        self,
        from_exclusive: Optional[str],
        to_inclusive: str = "HEAD",
        grep: Optional[Sequence[str]] = None,
        limit: Optional[int] = None,
    ) -> List[CommitRecord]:
        """Return commits in the range, newest first.

        Parameters
        ----------
        from_exclusive : str, optional
            Lower bound of the range; None starts at the repository root.
        to_inclusive : str
            Upper bound of the range.
        grep : sequence of str, optional
            Extended regular expressions matched case-insensitively against
            the message; a commit is kept if any of them matches.
        limit : int, optional
            Maximum number of commits to return.
        """
        args = ["log", format_range(from_exclusive, to_inclusive or "HEAD")]
        if limit:
            args += ["-n", str(limit)]
        if grep:
            args += ["-E", "-i"] + [f"--grep={pattern}" for pattern in grep]
        args.append(LOG_FORMAT)
        try:
            output = self._run(args, check=True).stdout
        except GitError as exc:
            logger.warning("Failed to read commit messages: %s", exc)
            return []
        return parse_log_output(output)
