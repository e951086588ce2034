import unittest

import semver

from version_prospector.bumps.model import BumpTally
from version_prospector.resolution.composer import (
    BranchPolicy,
    compose_version,
    prerelease_version,
    sanitize_branch,
)
from version_prospector.resolution.tags import VersionTag


def tag(version: str) -> VersionTag:
    return VersionTag(name=f"v{version}", semver=semver.Version.parse(version), commit_id="def456")


class TestComposeVersion(unittest.TestCase):
    def test_no_baseline_uses_commit_count(self) -> None:
        for count in (0, 1, 5, 250):
            with self.subTest(count=count):
                self.assertEqual(str(compose_version(None, BumpTally(), count)), f"0.0.{count}")

    def test_commit_count_added_to_baseline_patch(self) -> None:
        self.assertEqual(str(compose_version(tag("1.2.0"), BumpTally(), 3)), "1.2.3")
        self.assertEqual(str(compose_version(tag("4.5.6"), BumpTally(), 4)), "4.5.10")

    def test_major_bump_resets_and_adds_patches(self) -> None:
        tally = BumpTally(major=2, minor=3, patch=1)
        self.assertEqual(str(compose_version(tag("1.5.3"), tally, 6)), "3.0.1")

    def test_minor_bump_resets_patch(self) -> None:
        tally = BumpTally(minor=2, patch=1)
        self.assertEqual(str(compose_version(tag("1.0.0"), tally, 4)), "1.2.1")
        self.assertEqual(str(compose_version(tag("1.2.0"), tally, 3)), "1.4.1")

    def test_patch_markers_alone_use_commit_count(self) -> None:
        tally = BumpTally(patch=2)
        self.assertEqual(str(compose_version(tag("2.1.0"), tally, 2)), "2.1.2")
        self.assertEqual(str(compose_version(tag("2.1.0"), tally, 5)), "2.1.5")

    def test_no_baseline_with_bumps_starts_from_zero(self) -> None:
        self.assertEqual(str(compose_version(None, BumpTally(major=1, minor=1, patch=2), 9)), "1.0.2")
        self.assertEqual(str(compose_version(None, BumpTally(minor=3), 9)), "0.3.0")

    def test_explicit_version_at_head_is_exact(self) -> None:
        tally = BumpTally(explicit_version=semver.Version(2, 0, 0), explicit_commit="c1")
        self.assertEqual(str(compose_version(tag("1.0.0"), tally, 7, commits_since_explicit=0)), "2.0.0")

    def test_commits_after_explicit_version_count_as_patches(self) -> None:
        tally = BumpTally(explicit_version=semver.Version(2, 0, 0), explicit_commit="c1")
        self.assertEqual(str(compose_version(tag("1.0.0"), tally, 3, commits_since_explicit=2)), "2.0.2")

    def test_bumps_after_explicit_version_apply_on_top(self) -> None:
        tally = BumpTally(minor=1, explicit_version=semver.Version(2, 0, 0), explicit_commit="c1")
        self.assertEqual(str(compose_version(tag("1.0.0"), tally, 3, commits_since_explicit=2)), "2.1.0")

    def test_explicit_version_ignores_baseline(self) -> None:
        tally = BumpTally(explicit_version=semver.Version(0, 9, 0), explicit_commit="c0")
        self.assertEqual(str(compose_version(tag("1.0.0"), tally, 1)), "0.9.0")


class TestBranchPolicy(unittest.TestCase):
    def test_sanitize_branch(self) -> None:
        cases = [
            ("feature/test@123", "feature-test-123"),
            ("feature/awesome", "feature-awesome"),
            ("--weird__name--", "weird--name"),
            ("/leading/and/trailing/", "leading-and-trailing"),
            ("release-1.2", "release-1-2"),
            ("ümlaut", "mlaut"),
            ("///", ""),
            ("", ""),
        ]
        for name, expected in cases:
            with self.subTest(name=name):
                sanitized = sanitize_branch(name)
                self.assertEqual(sanitized, expected)
                self.assertEqual(sanitize_branch(sanitized), sanitized)

    def test_prerelease_version(self) -> None:
        self.assertEqual(prerelease_version(tag("1.0.0"), "feature/test@123", 2), "1.0.1-feature-test-123.2")
        self.assertEqual(prerelease_version(tag("1.2.0"), "feature/awesome", 5), "1.2.1-feature-awesome.5")
        self.assertEqual(prerelease_version(None, "feature/test", 3), "0.0.1-feature-test.3")

    def test_is_trunk(self) -> None:
        policy = BranchPolicy(("main", "master"))
        self.assertTrue(policy.is_trunk("main"))
        self.assertTrue(policy.is_trunk("master"))
        self.assertFalse(policy.is_trunk("develop"))

    def test_format_ignores_bumps_off_trunk(self) -> None:
        policy = BranchPolicy(["main"])
        tally = BumpTally(major=1)
        self.assertEqual(policy.format(True, tag("1.0.0"), tally, 2, "main"), "2.0.0")
        self.assertEqual(policy.format(False, tag("1.0.0"), tally, 2, "feat/x"), "1.0.1-feat-x.2")

    def test_prerelease_never_equals_release_form(self) -> None:
        policy = BranchPolicy(["main"])
        for branch in ("main", "x", "1.0.3"):
            trunk = policy.format(True, tag("1.0.0"), BumpTally(), 3, "main")
            feature = policy.format(False, tag("1.0.0"), BumpTally(), 3, branch)
            self.assertNotEqual(trunk, feature)
            self.assertIn("-", feature)


if __name__ == "__main__":
    unittest.main()
