"""
Classification of commit messages into version bump intents.

The classifier is deterministic and driven entirely by the patterns in a
:class:`BumpPatterns` value, so callers can replace any subset of the
defaults. The default pattern sources are written in the subset of syntax
shared by Python's :mod:`re` and POSIX extended regular expressions, which
lets the targeted commit scan hand the very same text to ``git log --grep``.
"""

from __future__ import annotations

import enum
import re
from dataclasses import dataclass, field
from typing import List, Optional, Pattern, Tuple, Union

import semver


PATTERN_FLAGS = re.IGNORECASE | re.MULTILINE

DEFAULT_EXPLICIT_PATTERN = r"\[(version|v):([0-9]+\.[0-9]+\.[0-9]+)\]"
DEFAULT_MAJOR_PATTERN = (
    r"\[major\]|BREAKING[ -]CHANGE|^[a-z]+(\([^)]*\))?!:|\+semver:[ ]*major"
)
DEFAULT_MINOR_PATTERN = r"\[minor\]|^feat(\([^)]*\))?:|\+semver:[ ]*minor"
DEFAULT_PATCH_PATTERN = r"\[patch\]|^fix(\([^)]*\))?:|\+semver:[ ]*patch"

_STRICT_VERSION = re.compile(r"^[0-9]+\.[0-9]+\.[0-9]+$")

PatternLike = Union[str, Pattern[str]]


class BumpKind(str, enum.Enum):
    """Outcome of classifying a single commit message."""

    EXPLICIT = "explicit"
    MAJOR = "major"
    MINOR = "minor"
    PATCH = "patch"
    NONE = "none"


def compile_pattern(pattern: PatternLike) -> Pattern[str]:
    """Compile ``pattern`` with the default flags unless it is already compiled."""
    if isinstance(pattern, str):
        return re.compile(pattern, PATTERN_FLAGS)
    return pattern


@dataclass(frozen=True)
class BumpPatterns:
    """Named patterns used to classify commit messages.

    Strings are compiled case-insensitively with ``^`` anchoring at line
    starts. Pre-compiled patterns are used as given.
    """

    explicit: Pattern[str] = field(default_factory=lambda: compile_pattern(DEFAULT_EXPLICIT_PATTERN))
    major: Pattern[str] = field(default_factory=lambda: compile_pattern(DEFAULT_MAJOR_PATTERN))
    minor: Pattern[str] = field(default_factory=lambda: compile_pattern(DEFAULT_MINOR_PATTERN))
    patch: Pattern[str] = field(default_factory=lambda: compile_pattern(DEFAULT_PATCH_PATTERN))

    @classmethod
    def with_overrides(
        cls,
        explicit: Optional[PatternLike] = None,
        major: Optional[PatternLike] = None,
        minor: Optional[PatternLike] = None,
        patch: Optional[PatternLike] = None,
    ) -> "BumpPatterns":
        """Return the default patterns with the given categories replaced.

        Raises
        ------
        re.error
            If an override string is not a valid regular expression.
        """
        defaults = cls()
        return cls(
            explicit=compile_pattern(explicit) if explicit is not None else defaults.explicit,
            major=compile_pattern(major) if major is not None else defaults.major,
            minor=compile_pattern(minor) if minor is not None else defaults.minor,
            patch=compile_pattern(patch) if patch is not None else defaults.patch,
        )

    def grep_patterns(self) -> List[str]:
        """Pattern sources for the history store's message filter."""
        return [self.explicit.pattern, self.major.pattern, self.minor.pattern, self.patch.pattern]


def _explicit_version(match: re.Match) -> Optional[semver.Version]:
    if "version" in match.re.groupindex:
        text = match.group("version")
    elif match.re.groups:
        text = match.group(match.re.groups)
    else:
        text = match.group(0)
    if not text or not _STRICT_VERSION.match(text):
        return None
    try:
        return semver.Version.parse(text)
    except ValueError:
        # e.g. leading zeros such as 01.2.3
        return None


def classify_bump(message: str, patterns: BumpPatterns) -> Tuple[BumpKind, Optional[semver.Version]]:
    """Classify a commit message into a bump intent.

    Parameters
    ----------
    message : str
        Full commit message (subject and body).
    patterns : BumpPatterns
        Patterns to test, in the fixed order explicit, major, minor, patch.

    Returns
    -------
    Tuple[BumpKind, Optional[semver.Version]]
        The kind of the first matching category and, for
        :attr:`BumpKind.EXPLICIT`, the requested version. A message matching
        several categories only counts toward the highest-priority one.

    Notes
    -----
    An explicit marker whose version text does not parse is ignored and the
    message is tested against the remaining categories.
    """
    match = patterns.explicit.search(message)
    if match:
        version = _explicit_version(match)
        if version is not None:
            return BumpKind.EXPLICIT, version

    if patterns.major.search(message):
        return BumpKind.MAJOR, None
    if patterns.minor.search(message):
        return BumpKind.MINOR, None
    if patterns.patch.search(message):
        return BumpKind.PATCH, None
    return BumpKind.NONE, None
