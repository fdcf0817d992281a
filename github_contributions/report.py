from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List

from .config import OutputConfig

_MAX_TIMELINE_ROWS = 10
_COUNT_LABELS = (
    ("commits", "Commits"),
    ("pull_requests", "Pull requests"),
    ("reviews", "Reviews"),
    ("issues", "Issues"),
)


def write_report(user_login: str, records: List[Dict[str, Any]], settings: OutputConfig) -> Path:
    output_dir = settings.directory
    output_dir.mkdir(parents=True, exist_ok=True)
    if settings.format == "markdown":
        report_path = output_dir / f"{user_login}-contributions.md"
        report_path.write_text(render_markdown(user_login, records), encoding="utf-8")
    else:
        report_path = output_dir / f"{user_login}-contributions.json"
        report_path.write_text(render_json(records), encoding="utf-8")
    return report_path


def render_json(records: List[Dict[str, Any]]) -> str:
    return json.dumps(records, indent=2, ensure_ascii=False) + "\n"


def render_markdown(user_login: str, records: List[Dict[str, Any]]) -> str:
    lines: List[str] = []
    lines.append(f"# GitHub Contributions: {user_login}")
    lines.append("")
    if not records:
        lines.append("No public, active repositories with contributions were found.")
        return "\n".join(lines) + "\n"

    for record in records:
        lines.extend(_render_repository(record))
        lines.append("")
    return "\n".join(lines)


def _render_repository(record: Dict[str, Any]) -> List[str]:
    lines = [f"## [{record['name']}]({record['url']})"]
    if record.get("description"):
        lines.append(str(record["description"]).strip())
    lines.append("")

    contributions = record.get("contributions", {})
    rows: List[tuple[str, str]] = []
    rows.append(("Role", record["role"]))
    rows.append(("Stars", str(record["stargazers"])))
    for key, label in _COUNT_LABELS:
        if key in contributions:
            rows.append((label, str(contributions[key])))
    language_summary = _format_language_summary(record.get("languages", []))
    if language_summary:
        rows.append(("Languages", language_summary))
    if record.get("topics"):
        rows.append(("Topics", ", ".join(topic["name"] for topic in record["topics"][:6])))

    lines.extend(["| Field | Details |", "| --- | --- |"])
    for label, value in rows:
        lines.append(f"| {label} | {value} |")

    details = contributions.get("details", [])
    if details:
        lines.append("")
        for entry in details[:_MAX_TIMELINE_ROWS]:
            lines.append(
                f"- {entry['occurred_at'][:10]} {entry['type']} [#{entry['number']} {entry['title']}]({entry['url']})"
            )
        if len(details) > _MAX_TIMELINE_ROWS:
            lines.append(f"- ... and {len(details) - _MAX_TIMELINE_ROWS} more")
    return lines


def _format_language_summary(languages: List[Dict[str, Any]], limit: int = 4) -> str:
    return ", ".join(f"{language['name']} {language['coverage']}%" for language in languages[:limit])
