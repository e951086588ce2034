"""
Version of the version_prospector package itself.

Installed copies report the version recorded in the distribution metadata.
A source checkout that is not installed versions itself with its own
engine, so the package follows the same rules it applies to other
repositories.
"""

from importlib import metadata
from pathlib import Path
from typing import Optional

DISTRIBUTION_NAME = "git-prospector"
FALLBACK_VERSION = "0.0.0"


def version_from_checkout(package_dir: Optional[Path] = None) -> str:
    """Compute the version of the Git checkout containing ``package_dir``.

    Returns:
        The computed version, or FALLBACK_VERSION outside a Git repository.
    """
    from version_prospector.engine import compute_version
    from version_prospector.config.options import ProspectorOptions
    from version_prospector.vcs.git_client import GitClient

    start = package_dir or Path(__file__).resolve().parent
    repo_root = GitClient.find_repo_root(start)
    if repo_root is None:
        return FALLBACK_VERSION
    return compute_version(ProspectorOptions(repository_path=repo_root)).version


def get_version() -> str:
    """Return the package version from metadata, falling back to the checkout."""
    try:
        return metadata.version(DISTRIBUTION_NAME)
    except metadata.PackageNotFoundError:
        return version_from_checkout()
