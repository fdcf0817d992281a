from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from typing import Any, Optional, Protocol

import requests
from requests import Response

from .config import GitHubConfig
from .models import RATE_LIMITED, ContributionWindow, QueryError, QueryResult

logger = logging.getLogger(__name__)

_REPOSITORY_FRAGMENT = """
      repository {
        nameWithOwner
        owner { login }
        description
        openGraphImageUrl
        isArchived
        isDisabled
        isLocked
        isPrivate
        collaborators(query: $login) {
          edges { permission }
        }
        stargazers(first: 0) { totalCount }
        languages(first: 10, orderBy: { field: SIZE, direction: DESC }) {
          totalSize
          edges {
            size
            node { color name }
          }
        }
        repositoryTopics(first: 10) {
          nodes {
            topic { name }
            url
          }
        }
        url
      }"""

_COMMIT_CONTRIBUTIONS = """
      contributions { totalCount }"""

_PULL_REQUEST_CONTRIBUTIONS = """
      contributions(first: 100) {
        totalCount
        nodes {
          occurredAt
          pullRequest { number title url }
        }
      }"""

_ISSUE_CONTRIBUTIONS = """
      contributions(first: 100) {
        totalCount
        nodes {
          occurredAt
          issue { number title url }
        }
      }"""

CONTRIBUTIONS_QUERY = f"""
query($login: String!, $from: DateTime!, $to: DateTime!) {{
  user(login: $login) {{
    contributionsCollection(from: $from, to: $to) {{
      commitContributionsByRepository(maxRepositories: 100) {{{_COMMIT_CONTRIBUTIONS}{_REPOSITORY_FRAGMENT}
      }}
      pullRequestContributionsByRepository(maxRepositories: 100) {{{_PULL_REQUEST_CONTRIBUTIONS}{_REPOSITORY_FRAGMENT}
      }}
      pullRequestReviewContributionsByRepository(maxRepositories: 100) {{{_PULL_REQUEST_CONTRIBUTIONS}{_REPOSITORY_FRAGMENT}
      }}
      issueContributionsByRepository(maxRepositories: 100) {{{_ISSUE_CONTRIBUTIONS}{_REPOSITORY_FRAGMENT}
      }}
    }}
  }}
}}
"""


class QueryExecutor(Protocol):
    def execute(self, user_login: str, window: ContributionWindow) -> QueryResult:
        ...


@dataclass(slots=True)
class GitHubSession:
    http: requests.Session
    settings: GitHubConfig = field(default_factory=GitHubConfig)
    rate_limited: bool = False

    @classmethod
    def create(cls, settings: Optional[GitHubConfig] = None) -> "GitHubSession":
        settings = settings or GitHubConfig()
        session = requests.Session()
        headers = {
            "Accept": "application/json",
            "User-Agent": settings.user_agent,
        }
        token = os.getenv(settings.token_env)
        if token:
            headers["Authorization"] = f"Bearer {token}"
        else:
            logger.warning("%s is not set; the GraphQL API rejects anonymous requests", settings.token_env)
        session.headers.update(headers)
        return cls(http=session, settings=settings)

    def close(self) -> None:
        self.http.close()


def _error_message(response: Response) -> str:
    if response.headers.get("Content-Type", "").startswith("application/json"):
        try:
            body = response.json()
        except ValueError:
            return response.text
        if isinstance(body, dict) and "message" in body:
            return str(body["message"])
    return response.text


def _raise_for_status(response: Response) -> None:
    try:
        response.raise_for_status()
    except requests.HTTPError as error:
        message = _error_message(response)
        raise requests.HTTPError(f"GitHub API request failed: {response.status_code} {message}") from error


def _unusable_body(response: Response, reason: str) -> QueryResult:
    content_type = response.headers.get("Content-Type", "unknown content type")
    return QueryResult(errors=[QueryError(field="response", message=f"{reason} ({content_type}): {response.text[:200]}")])


class GraphQLQueryExecutor:
    """Runs the contributions query for one window, single attempt."""

    def __init__(self, session: GitHubSession) -> None:
        self.session = session

    def execute(self, user_login: str, window: ContributionWindow) -> QueryResult:
        variables = {
            "login": user_login,
            "from": window.start.isoformat(timespec="seconds"),
            "to": window.end.isoformat(timespec="seconds"),
        }
        response = self.session.http.post(
            self.session.settings.api_url,
            json={"query": CONTRIBUTIONS_QUERY, "variables": variables},
            timeout=self.session.settings.timeout,
        )
        if response.status_code in (401, 403):
            message = _error_message(response)
            error_type = RATE_LIMITED if "rate limit" in message.lower() else None
            result = QueryResult(
                errors=[QueryError(field="response", message=f"{response.status_code} {message}", type=error_type)]
            )
        else:
            _raise_for_status(response)
            try:
                body: Any = response.json()
            except ValueError:
                return _unusable_body(response, "Response body is not JSON")
            if not isinstance(body, dict):
                return _unusable_body(response, f"Expected a JSON object, got {type(body).__name__}")
            result = QueryResult.from_payload(body)
        if result.rate_limited:
            self.session.rate_limited = True
        return result


def guess_username_from_profile(profile: str) -> str:
    sanitized = profile.strip().rstrip("/")
    if not sanitized or sanitized.endswith("github.com"):
        raise ValueError("Profile must be a login or a URL that includes one, e.g. https://github.com/octocat")
    if "github.com/" not in sanitized:
        if "/" in sanitized or " " in sanitized:
            raise ValueError(f"Unable to parse GitHub username from {profile!r}")
        return sanitized
    username = sanitized.split("github.com/")[-1]
    if "/" in username:
        username = username.split("/")[0]
    if not username:
        raise ValueError("Unable to parse GitHub username from URL")
    return username
