from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

import yaml


DEFAULT_CONFIG_PATH = Path("config/settings.yaml")
OUTPUT_FORMATS = ("json", "markdown")


@dataclass(slots=True)
class GitHubConfig:
    api_url: str = "https://api.github.com/graphql"
    token_env: str = "GITHUB_TOKEN"
    user_agent: str = "github-contributions/0.1"
    timeout: float = 30.0


@dataclass(slots=True)
class PaginationConfig:
    max_windows: int = 50


@dataclass(slots=True)
class OutputConfig:
    directory: Path = Path("reports")
    format: str = "json"


@dataclass(slots=True)
class AppConfig:
    github: GitHubConfig = field(default_factory=GitHubConfig)
    pagination: PaginationConfig = field(default_factory=PaginationConfig)
    output: OutputConfig = field(default_factory=OutputConfig)


def load_config(path: Optional[Path] = None) -> AppConfig:
    config_path = path or DEFAULT_CONFIG_PATH
    if not config_path.exists():
        return AppConfig()

    with config_path.open("r", encoding="utf-8") as handle:
        raw: Dict[str, Any] = yaml.safe_load(handle) or {}

    github_raw = raw.get("github", {})
    pagination_raw = raw.get("pagination", {})
    output_raw = raw.get("output", {})

    output_format = str(output_raw.get("format", "json")).lower()
    if output_format not in OUTPUT_FORMATS:
        raise ValueError(f"Unsupported output format {output_format!r}, expected one of {', '.join(OUTPUT_FORMATS)}")
    max_windows = int(pagination_raw.get("max_windows", 50))
    if max_windows < 1:
        raise ValueError("pagination.max_windows must be at least 1")

    config = AppConfig(
        github=GitHubConfig(
            api_url=str(github_raw.get("api_url", "https://api.github.com/graphql")),
            token_env=str(github_raw.get("token_env", "GITHUB_TOKEN")),
            user_agent=str(github_raw.get("user_agent", "github-contributions/0.1")),
            timeout=float(github_raw.get("timeout", 30.0)),
        ),
        pagination=PaginationConfig(max_windows=max_windows),
        output=OutputConfig(
            directory=Path(output_raw.get("directory", "reports")),
            format=output_format,
        ),
    )

    return config
