import json
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

from click.testing import CliRunner

import changelog_helper.cli as cli
from changelog_helper.changelog.commit_parser import LOG_RECORD_SEPARATOR
from changelog_helper.vcs.git_client import GitError


PACKAGE_JSON = {
    "name": "ckeditor5-dev",
    "version": "1.1.0",
    "bugs": "https://github.com/ckeditor/ckeditor5-dev/issues",
    "repository": {"type": "git", "url": "https://github.com/ckeditor/ckeditor5-dev.git"},
}

LOG_OUTPUT = "\n".join(
    [
        "684997d0eb2eca76b9e058fb1c3fa00b50059cdc",
        "Fix: Simple fix. Closes #2.",
        "",
        LOG_RECORD_SEPARATOR,
        "76b9e058fb1c3fa00b50059cdc684997d0eb2eca",
        "Docs: README.",
        "",
        LOG_RECORD_SEPARATOR,
        "dea35014ab610be0c2150343c6a8a68620cfe5ad",
        "Invalid commit.",
        "",
        LOG_RECORD_SEPARATOR,
        "",
    ]
)


class DummyGitClient:
    def __init__(self, root):
        self.root = root
        self.requested_from = "unset"

    def get_last_tag(self):
        return "v1.0.0"

    def get_commit_log(self, from_ref=None):
        self.requested_from = from_ref
        return LOG_OUTPUT


class TestCLI(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.root = Path(self._tmp.name)
        (self.root / "package.json").write_text(json.dumps(PACKAGE_JSON))
        self.clients = []

        def make_client(root):
            client = DummyGitClient(root)
            self.clients.append(client)
            return client

        patcher_root = patch.object(cli.GitClient, "find_repo_root", return_value=self.root)
        patcher_client = patch.object(cli, "GitClient", side_effect=make_client)
        self.find_root = patcher_root.start()
        mock_client = patcher_client.start()
        mock_client.find_repo_root = self.find_root
        self.addCleanup(patcher_client.stop)
        self.addCleanup(patcher_root.stop)
        self.addCleanup(self._tmp.cleanup)

    def invoke(self, *args):
        runner = CliRunner()
        return runner.invoke(cli.main, ["--cwd", str(self.root), *args])

    def test_writes_changelog(self) -> None:
        result = self.invoke()

        self.assertEqual(result.exit_code, cli.EXIT_SUCCESS, result.output)
        content = (self.root / "CHANGELOG.md").read_text(encoding="utf-8")
        self.assertIn("## [1.1.0](https://github.com/ckeditor/ckeditor5-dev/compare/v1.0.0...v1.1.0)", content)
        self.assertIn("### Bug fixes", content)
        self.assertIn("[#2](https://github.com/ckeditor/ckeditor5-dev/issues/2)", content)
        self.assertNotIn("README", content)
        self.assertEqual(self.clients[0].requested_from, "v1.0.0")

    def test_dry_run_prints_section(self) -> None:
        result = self.invoke("--dry-run", "--version-name", "2.0.0", "--from", "v0.1.0")

        self.assertEqual(result.exit_code, cli.EXIT_SUCCESS, result.output)
        self.assertIn("compare/v0.1.0...v2.0.0", result.output)
        self.assertFalse((self.root / "CHANGELOG.md").exists())
        self.assertEqual(self.clients[0].requested_from, "v0.1.0")

    def test_logs_each_commit(self) -> None:
        result = self.invoke("--dry-run")

        self.assertIn('684997d "Fix: Simple fix. Closes #2."', result.output)
        self.assertIn("SKIPPED", result.output)
        self.assertIn("INVALID", result.output)

    def test_hide_logs(self) -> None:
        with patch.object(cli, "transform_commit", wraps=cli.transform_commit) as mock_transform:
            result = self.invoke("--dry-run", "--hide-logs")

        self.assertEqual(result.exit_code, cli.EXIT_SUCCESS, result.output)
        self.assertNotIn("INCLUDED", result.output)
        self.assertTrue(all(call.args[1] is False for call in mock_transform.call_args_list))

    def test_no_repository(self) -> None:
        self.find_root.return_value = None

        result = self.invoke()

        self.assertEqual(result.exit_code, cli.EXIT_NO_REPO)

    def test_missing_bugs(self) -> None:
        (self.root / "package.json").write_text(json.dumps({"name": "foo", "version": "1.0.0"}))

        result = self.invoke()

        self.assertEqual(result.exit_code, cli.EXIT_CONFIG_ERROR)
        self.assertIn('must contain the "bugs" property', result.output)

    def test_missing_package_json(self) -> None:
        (self.root / "package.json").unlink()

        result = self.invoke()

        self.assertEqual(result.exit_code, cli.EXIT_CONFIG_ERROR)

    def test_git_failure(self) -> None:
        with patch.object(DummyGitClient, "get_commit_log", side_effect=GitError("bad revision")):
            result = self.invoke()

        self.assertEqual(result.exit_code, cli.EXIT_VCS_FAILURE)
        self.assertIn("bad revision", result.output)


if __name__ == "__main__":
    unittest.main()
