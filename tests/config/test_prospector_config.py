import json
import tempfile
import unittest
from pathlib import Path

from version_prospector.bumps.classifier import BumpKind, classify_bump
from version_prospector.config.loader import CONFIG_FILE_NAME, ConfigError, load_config, options_from_config
from version_prospector.config.options import ProspectorOptions
from version_prospector.resolution.scanner import ScanStrategy


class TestLoadConfig(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.repo = Path(self._tmp.name)

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def write(self, content) -> None:
        text = content if isinstance(content, str) else json.dumps(content)
        (self.repo / CONFIG_FILE_NAME).write_text(text, encoding="utf-8")

    def test_missing_file_returns_empty(self) -> None:
        self.assertEqual(load_config(self.repo), {})

    def test_valid_file(self) -> None:
        data = {
            "trunk_branches": ["trunk"],
            "tag_prefix": "release-",
            "enable_commit_bumps": False,
            "max_commit_scan": 100,
            "bump_patterns": {"major": "^!"},
        }
        self.write(data)
        self.assertEqual(load_config(self.repo), data)

    def test_invalid_json(self) -> None:
        self.write("{not json")
        with self.assertRaises(ConfigError):
            load_config(self.repo)

    def test_invalid_values(self) -> None:
        bad = [
            [],
            {"unknown": 1},
            {"trunk_branches": "main"},
            {"trunk_branches": []},
            {"trunk_branches": ["main", 3]},
            {"tag_prefix": 1},
            {"enable_commit_bumps": "yes"},
            {"max_commit_scan": -1},
            {"max_commit_scan": True},
            {"bump_patterns": ["x"]},
            {"bump_patterns": {"huge": "x"}},
            {"bump_patterns": {"minor": 5}},
        ]
        for data in bad:
            with self.subTest(data=data):
                self.write(data)
                with self.assertRaises(ConfigError):
                    load_config(self.repo)


class TestOptionsFromConfig(unittest.TestCase):
    def test_defaults(self) -> None:
        options = options_from_config({}, repository_path=Path("/repo"))
        self.assertEqual(options.trunk_branches, ("main", "master"))
        self.assertEqual(options.tag_prefix, "v")
        self.assertTrue(options.enable_commit_bumps)
        self.assertEqual(options.scan_strategy, ScanStrategy.targeted())
        self.assertEqual(options.repository_path, Path("/repo"))

    def test_file_values(self) -> None:
        data = {
            "trunk_branches": ["trunk"],
            "tag_prefix": "release-",
            "enable_commit_bumps": False,
            "max_commit_scan": 0,
            "bump_patterns": {"major": "^!"},
        }
        options = options_from_config(data, repository_path=Path("/repo"))
        self.assertEqual(options.trunk_branches, ("trunk",))
        self.assertEqual(options.tag_prefix, "release-")
        self.assertFalse(options.enable_commit_bumps)
        self.assertEqual(options.scan_strategy, ScanStrategy.exhaustive())
        self.assertEqual(classify_bump("! break", options.bump_patterns)[0], BumpKind.MAJOR)

    def test_explicit_values_win(self) -> None:
        data = {"trunk_branches": ["trunk"], "tag_prefix": "release-", "max_commit_scan": 5}
        options = options_from_config(
            data,
            repository_path=Path("/repo"),
            trunk_branches=["develop"],
            tag_prefix="v",
            enable_commit_bumps=False,
            max_commit_scan=20,
        )
        self.assertEqual(options.trunk_branches, ("develop",))
        self.assertEqual(options.tag_prefix, "v")
        self.assertFalse(options.enable_commit_bumps)
        self.assertEqual(options.scan_strategy, ScanStrategy.exhaustive(20))

    def test_empty_branch_override_keeps_file_value(self) -> None:
        options = options_from_config({"trunk_branches": ["trunk"]}, repository_path=Path("/repo"), trunk_branches=())
        self.assertEqual(options.trunk_branches, ("trunk",))

    def test_invalid_pattern_raises_config_error(self) -> None:
        with self.assertRaises(ConfigError):
            options_from_config({"bump_patterns": {"minor": "("}}, repository_path=Path("/repo"))

    def test_report_uses_callback(self) -> None:
        messages = []
        ProspectorOptions(progress_callback=messages.append).report("hello")
        ProspectorOptions().report("ignored")
        self.assertEqual(messages, ["hello"])


if __name__ == "__main__":
    unittest.main()
