from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional


class Role(str, Enum):
    OWNER = "owner"
    MAINTAINER = "maintainer"
    COLLABORATOR = "collaborator"
    CONTRIBUTOR = "contributor"


class Category(str, Enum):
    """Contribution categories, in the order they are folded into the aggregate."""

    COMMITS = "commits"
    PULL_REQUESTS = "pull_requests"
    REVIEWS = "reviews"
    ISSUES = "issues"


# Timeline entry type per category; commits produce no timeline entries.
TIMELINE_TYPES: Dict[Category, str] = {
    Category.PULL_REQUESTS: "pull-request",
    Category.REVIEWS: "review",
    Category.ISSUES: "issue",
}


@dataclass(slots=True, frozen=True)
class ContributionWindow:
    start: datetime
    end: datetime

    def __post_init__(self) -> None:
        if self.start > self.end:
            raise ValueError(f"window start {self.start.isoformat()} is after end {self.end.isoformat()}")


# Raw GraphQL shapes


@dataclass(slots=True)
class RawLanguage:
    name: str
    color: Optional[str]
    size: int

    @classmethod
    def from_payload(cls, edge: Dict[str, Any]) -> "RawLanguage":
        node = edge.get("node") or {}
        return cls(name=str(node.get("name", "")), color=node.get("color"), size=int(edge.get("size") or 0))


@dataclass(slots=True)
class RawRepository:
    name_with_owner: str
    owner_login: str
    description: Optional[str]
    url: str
    image_url: Optional[str]
    is_archived: bool
    is_disabled: bool
    is_locked: bool
    is_private: bool
    collaborator_permissions: List[str]
    stargazer_count: int
    languages_total_size: int
    languages: List[RawLanguage] = field(default_factory=list)
    topics: List["Topic"] = field(default_factory=list)

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> "RawRepository":
        owner = payload.get("owner") or {}
        # null when the token may not list collaborators on this repository
        collaborators = payload.get("collaborators") or {}
        stargazers = payload.get("stargazers") or {}
        languages = payload.get("languages") or {}
        topics = payload.get("repositoryTopics") or {}
        return cls(
            name_with_owner=str(payload.get("nameWithOwner", "")),
            owner_login=str(owner.get("login", "")),
            description=payload.get("description"),
            url=str(payload.get("url", "")),
            image_url=payload.get("openGraphImageUrl"),
            is_archived=bool(payload.get("isArchived", False)),
            is_disabled=bool(payload.get("isDisabled", False)),
            is_locked=bool(payload.get("isLocked", False)),
            is_private=bool(payload.get("isPrivate", False)),
            collaborator_permissions=[
                str(edge.get("permission", "")) for edge in collaborators.get("edges") or [] if edge
            ],
            stargazer_count=int(stargazers.get("totalCount") or 0),
            languages_total_size=int(languages.get("totalSize") or 0),
            languages=[RawLanguage.from_payload(edge) for edge in languages.get("edges") or [] if edge],
            topics=[
                Topic(name=str((node.get("topic") or {}).get("name", "")), url=str(node.get("url", "")))
                for node in topics.get("nodes") or []
                if node
            ],
        )


@dataclass(slots=True)
class RawContributionNode:
    occurred_at: str
    number: int
    title: str
    url: str

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> "RawContributionNode":
        item = payload.get("pullRequest") or payload.get("issue") or {}
        return cls(
            occurred_at=str(payload.get("occurredAt", "")),
            number=int(item.get("number") or 0),
            title=str(item.get("title", "")),
            url=str(item.get("url", "")),
        )


@dataclass(slots=True)
class CategoryContribution:
    repository: RawRepository
    total_count: int
    nodes: List[RawContributionNode] = field(default_factory=list)

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> "CategoryContribution":
        contributions = payload.get("contributions") or {}
        return cls(
            repository=RawRepository.from_payload(payload.get("repository") or {}),
            total_count=int(contributions.get("totalCount") or 0),
            nodes=[RawContributionNode.from_payload(node) for node in contributions.get("nodes") or [] if node],
        )


_CATEGORY_KEYS: Dict[Category, str] = {
    Category.COMMITS: "commitContributionsByRepository",
    Category.PULL_REQUESTS: "pullRequestContributionsByRepository",
    Category.REVIEWS: "pullRequestReviewContributionsByRepository",
    Category.ISSUES: "issueContributionsByRepository",
}


@dataclass(slots=True)
class RawPage:
    categories: Dict[Category, List[CategoryContribution]] = field(default_factory=dict)

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> "RawPage":
        return cls(
            categories={
                category: [CategoryContribution.from_payload(item) for item in payload.get(key) or [] if item]
                for category, key in _CATEGORY_KEYS.items()
            }
        )

    def entries(self, category: Category) -> List[CategoryContribution]:
        return self.categories.get(category, [])

    def total_entries(self) -> int:
        return sum(len(items) for items in self.categories.values())


@dataclass(slots=True, frozen=True)
class QueryError:
    field: str
    message: str
    type: Optional[str] = None


RATE_LIMITED = "RATE_LIMITED"


@dataclass(slots=True)
class QueryResult:
    page: Optional[RawPage] = None
    errors: List[QueryError] = field(default_factory=list)

    @property
    def rate_limited(self) -> bool:
        return any(error.type == RATE_LIMITED or "rate limit" in error.message.lower() for error in self.errors)

    @classmethod
    def from_payload(cls, body: Dict[str, Any]) -> "QueryResult":
        errors = [
            QueryError(
                field=".".join(str(part) for part in error.get("path") or []) or "query",
                message=str(error.get("message", error)),
                type=error.get("type"),
            )
            for error in body.get("errors") or []
        ]
        user = (body.get("data") or {}).get("user") or {}
        collection = user.get("contributionsCollection")
        page = RawPage.from_payload(collection) if collection is not None else None
        return cls(page=page, errors=errors)


# Normalized output


@dataclass(slots=True)
class Language:
    name: str
    color: Optional[str]
    byte_size: int
    coverage_percent: int

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "color": self.color, "size": self.byte_size, "coverage": self.coverage_percent}


@dataclass(slots=True)
class Topic:
    name: str
    url: str

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "url": self.url}


@dataclass(slots=True)
class RepositorySummary:
    name_with_owner: str
    description: Optional[str]
    url: str
    image_url: Optional[str]
    is_private: bool
    is_active: bool
    role: Role
    stargazer_count: int
    languages: List[Language] = field(default_factory=list)
    topics: List[Topic] = field(default_factory=list)


@dataclass(slots=True)
class TimelineEntry:
    type: str
    url: str
    title: str
    occurred_at: str
    number: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.type,
            "url": self.url,
            "title": self.title,
            "occurred_at": self.occurred_at,
            "number": self.number,
        }


@dataclass(slots=True)
class ContributionRecord:
    commits: Optional[int] = None
    pull_requests: Optional[int] = None
    reviews: Optional[int] = None
    issues: Optional[int] = None
    details: List[TimelineEntry] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {}
        for category in Category:
            value = getattr(self, category.value)
            if value is not None:
                data[category.value] = value
        data["details"] = [entry.to_dict() for entry in self.details]
        return data


@dataclass(slots=True)
class RepositoryContributions:
    summary: RepositorySummary
    contributions: ContributionRecord = field(default_factory=ContributionRecord)

    @property
    def name(self) -> str:
        return self.summary.name_with_owner

    def to_dict(self) -> Dict[str, Any]:
        summary = self.summary
        return {
            "name": summary.name_with_owner,
            "description": summary.description,
            "url": summary.url,
            "image_url": summary.image_url,
            "is_private": summary.is_private,
            "is_active": summary.is_active,
            "role": summary.role.value,
            "stargazers": summary.stargazer_count,
            "languages": [language.to_dict() for language in summary.languages],
            "topics": [topic.to_dict() for topic in summary.topics],
            "contributions": self.contributions.to_dict(),
        }
