from __future__ import annotations

import tempfile
import unittest
from pathlib import Path

from github_contributions.config import AppConfig, load_config


class ConfigTests(unittest.TestCase):
    def test_load_default_config(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            config = load_config(Path(tmp) / "missing.yaml")
        self.assertIsInstance(config, AppConfig)
        self.assertEqual(config.github.api_url, "https://api.github.com/graphql")
        self.assertEqual(config.github.token_env, "GITHUB_TOKEN")
        self.assertEqual(config.pagination.max_windows, 50)
        self.assertEqual(config.output.format, "json")

    def test_load_custom_config(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            config_file = Path(tmp) / "settings.yaml"
            config_file.write_text(
                """
                github:
                  api_url: https://ghe.example.com/api/graphql
                  token_env: GHE_TOKEN
                  timeout: 12.5
                pagination:
                  max_windows: 5
                output:
                  directory: custom_reports
                  format: Markdown
                """,
                encoding="utf-8",
            )

            config = load_config(config_file)

        self.assertEqual(config.github.api_url, "https://ghe.example.com/api/graphql")
        self.assertEqual(config.github.token_env, "GHE_TOKEN")
        self.assertEqual(config.github.timeout, 12.5)
        self.assertEqual(config.pagination.max_windows, 5)
        self.assertEqual(config.output.directory, Path("custom_reports"))
        self.assertEqual(config.output.format, "markdown")

    def test_rejects_unknown_format(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            config_file = Path(tmp) / "settings.yaml"
            config_file.write_text("output:\n  format: xml\n", encoding="utf-8")
            with self.assertRaises(ValueError):
                load_config(config_file)

    def test_rejects_non_positive_window_cap(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            config_file = Path(tmp) / "settings.yaml"
            config_file.write_text("pagination:\n  max_windows: 0\n", encoding="utf-8")
            with self.assertRaises(ValueError):
                load_config(config_file)


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
