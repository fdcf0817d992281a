from __future__ import annotations

import argparse
import logging
import sys
from datetime import datetime
from pathlib import Path

import requests

from .aggregator import fetch_contributions
from .config import OUTPUT_FORMATS, load_config
from .github_api import guess_username_from_profile
from .report import render_json, write_report


def _timestamp(value: str) -> datetime:
    try:
        return datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
    except ValueError as error:
        raise argparse.ArgumentTypeError(f"invalid ISO-8601 timestamp: {value!r}") from error


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="github-contributions",
        description="Summarize a GitHub user's contributions per repository.",
    )
    parser.add_argument("profile", help="GitHub login or profile URL, e.g. https://github.com/octocat")
    parser.add_argument("--from", dest="start", type=_timestamp, help="Oldest timestamp to include (ISO-8601)")
    parser.add_argument("--to", dest="end", type=_timestamp, help="Newest timestamp to include (ISO-8601), defaults to now")
    parser.add_argument("--config", type=Path, help="Path to settings YAML file", default=None)
    parser.add_argument("--output-dir", dest="output_dir", type=Path, help="Directory for the generated report")
    parser.add_argument("--format", dest="output_format", choices=OUTPUT_FORMATS, help="Report format")
    parser.add_argument("--stdout", action="store_true", help="Print JSON to stdout instead of writing a report")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return parser


def app(argv: list[str] | None = None) -> None:
    parser = _build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    try:
        config = load_config(args.config)
        username = guess_username_from_profile(args.profile)
    except ValueError as exc:
        parser.error(str(exc))
        return
    if args.output_dir:
        config.output.directory = args.output_dir
    if args.output_format:
        config.output.format = args.output_format

    try:
        records = fetch_contributions(username, args.start, args.end, config=config)
    except requests.RequestException as exc:
        parser.error(str(exc))
        return

    if args.stdout:
        sys.stdout.write(render_json(records))
        return
    report_path = write_report(username, records, config.output)
    print(f"Report generated: {report_path}")


if __name__ == "__main__":  # pragma: no cover
    app(sys.argv[1:])
