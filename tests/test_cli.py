from __future__ import annotations

import io
import json
import tempfile
import unittest
from contextlib import redirect_stderr, redirect_stdout
from datetime import datetime, timezone
from pathlib import Path
from unittest import mock

import requests

from github_contributions import cli


class CliTests(unittest.TestCase):
    def test_passes_parsed_arguments(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            with mock.patch.object(cli, "fetch_contributions", return_value=[]) as fetch:
                with redirect_stdout(io.StringIO()) as out:
                    cli.app(
                        [
                            "https://github.com/octocat",
                            "--from",
                            "2020-01-01T00:00:00Z",
                            "--to",
                            "2021-01-01T00:00:00Z",
                            "--config",
                            str(Path(tmp) / "missing.yaml"),
                            "--output-dir",
                            tmp,
                            "--format",
                            "markdown",
                        ]
                    )
            self.assertTrue((Path(tmp) / "octocat-contributions.md").exists())

        args, kwargs = fetch.call_args
        self.assertEqual(args[0], "octocat")
        self.assertEqual(args[1], datetime(2020, 1, 1, tzinfo=timezone.utc))
        self.assertEqual(args[2], datetime(2021, 1, 1, tzinfo=timezone.utc))
        self.assertEqual(kwargs["config"].output.format, "markdown")
        self.assertIn("Report generated:", out.getvalue())

    def test_stdout_prints_json(self) -> None:
        records = [{"name": "acme/tool", "stargazers": 1}]
        with mock.patch.object(cli, "fetch_contributions", return_value=records):
            with redirect_stdout(io.StringIO()) as out:
                cli.app(["octocat", "--stdout", "--config", "does-not-exist.yaml"])
        self.assertEqual(json.loads(out.getvalue()), records)

    def test_invalid_timestamp_exits(self) -> None:
        with redirect_stderr(io.StringIO()):
            with self.assertRaises(SystemExit):
                cli.app(["octocat", "--from", "yesterday"])

    def test_transport_error_exits(self) -> None:
        with mock.patch.object(cli, "fetch_contributions", side_effect=requests.ConnectionError("boom")):
            with redirect_stderr(io.StringIO()) as err:
                with self.assertRaises(SystemExit):
                    cli.app(["octocat", "--stdout", "--config", "does-not-exist.yaml"])
        self.assertIn("boom", err.getvalue())


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
