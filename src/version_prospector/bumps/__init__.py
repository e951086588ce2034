"""
Commit message bump analysis.

See :mod:`version_prospector.bumps.classifier` for the per-message rules and
:mod:`version_prospector.bumps.aggregator` for how a commit range is folded
into a :class:`BumpTally`.
"""

from .aggregator import aggregate_bumps  # noqa: F401
from .classifier import BumpKind, BumpPatterns, classify_bump  # noqa: F401
from .model import BumpTally, CommitRecord  # noqa: F401
