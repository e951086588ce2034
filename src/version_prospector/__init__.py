"""
Top-level package for version_prospector.

Derives semantic versions from Git history. The programmatic entry points
are :func:`compute_version` and :func:`suggest_bump`; the ``prospector``
command is defined in :mod:`version_prospector.cli`.
"""

__all__ = ["__version__", "compute_version", "suggest_bump", "ProspectorOptions", "VersionResult"]

from version_prospector._version import get_version
from version_prospector.config.options import ProspectorOptions
from version_prospector.engine import VersionResult, compute_version, suggest_bump

__version__ = get_version()
