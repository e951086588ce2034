"""
Version control access for version_prospector.

Only Git is supported; see :mod:`version_prospector.vcs.git_client`.
"""

from .git_client import GitClient, GitError  # noqa: F401
