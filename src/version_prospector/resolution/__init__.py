"""
Version resolution stages.

Tag resolution, commit scanning and version composition live in
:mod:`~version_prospector.resolution.tags`,
:mod:`~version_prospector.resolution.scanner` and
:mod:`~version_prospector.resolution.composer` respectively.
"""

from .composer import BranchPolicy, compose_version, sanitize_branch  # noqa: F401
from .scanner import CommitScanner, ScanCancelled, ScanMode, ScanStrategy  # noqa: F401
from .tags import TagResolver, VersionTag  # noqa: F401
