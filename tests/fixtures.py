from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence, Tuple

from github_contributions.models import ContributionWindow, QueryResult


def repository_payload(
    name_with_owner: str,
    *,
    stars: int = 0,
    private: bool = False,
    archived: bool = False,
    disabled: bool = False,
    locked: bool = False,
    permission: Optional[str] = None,
    languages: Sequence[Tuple[str, int]] = (),
    total_size: Optional[int] = None,
    topics: Sequence[str] = (),
) -> Dict[str, Any]:
    owner = name_with_owner.split("/")[0]
    return {
        "nameWithOwner": name_with_owner,
        "owner": {"login": owner},
        "description": f"{name_with_owner} description",
        "openGraphImageUrl": f"https://opengraph.example/{name_with_owner}",
        "isArchived": archived,
        "isDisabled": disabled,
        "isLocked": locked,
        "isPrivate": private,
        "collaborators": {"edges": [{"permission": permission}]} if permission else None,
        "stargazers": {"totalCount": stars},
        "languages": {
            "totalSize": sum(size for _, size in languages) if total_size is None else total_size,
            "edges": [{"size": size, "node": {"name": lang, "color": "#000000"}} for lang, size in languages],
        },
        "repositoryTopics": {
            "nodes": [{"topic": {"name": topic}, "url": f"https://github.com/topics/{topic}"} for topic in topics]
        },
        "url": f"https://github.com/{name_with_owner}",
    }


def node_payload(number: int, occurred_at: str = "2024-03-01T12:00:00Z", kind: str = "pullRequest") -> Dict[str, Any]:
    return {
        "occurredAt": occurred_at,
        kind: {"number": number, "title": f"Item {number}", "url": f"https://github.com/item/{number}"},
    }


def entry_payload(repository: Dict[str, Any], count: int, nodes: Optional[List[Dict[str, Any]]] = None) -> Dict[str, Any]:
    contributions: Dict[str, Any] = {"totalCount": count}
    if nodes is not None:
        contributions["nodes"] = nodes
    return {"repository": repository, "contributions": contributions}


def collection_payload(
    commits: Sequence[Dict[str, Any]] = (),
    pull_requests: Sequence[Dict[str, Any]] = (),
    reviews: Sequence[Dict[str, Any]] = (),
    issues: Sequence[Dict[str, Any]] = (),
) -> Dict[str, Any]:
    return {
        "commitContributionsByRepository": list(commits),
        "pullRequestContributionsByRepository": list(pull_requests),
        "pullRequestReviewContributionsByRepository": list(reviews),
        "issueContributionsByRepository": list(issues),
    }


def page_result(**categories: Sequence[Dict[str, Any]]) -> QueryResult:
    return QueryResult.from_payload({"data": {"user": {"contributionsCollection": collection_payload(**categories)}}})


def empty_result() -> QueryResult:
    return page_result()


def error_result(*messages: str) -> QueryResult:
    return QueryResult.from_payload(
        {
            "data": {"user": None},
            "errors": [{"path": ["user"], "message": message, "type": "NOT_FOUND"} for message in messages],
        }
    )


class FakeExecutor:
    """Replays queued results, then reports an empty window."""

    def __init__(self, results: Optional[List[QueryResult]] = None) -> None:
        self.results = list(results or [])
        self.calls: List[Tuple[str, ContributionWindow]] = []

    def execute(self, user_login: str, window: ContributionWindow) -> QueryResult:
        self.calls.append((user_login, window))
        if self.results:
            return self.results.pop(0)
        return empty_result()
