"""Walk a user's contribution history backwards one window at a time.

The contributions API caps the repositories and timeline nodes returned per
query, so the requested range is split into windows of at most one year,
newest first. Every window yields four independently paginated categories
(commits, pull requests, reviews, issues) which are folded into one record per
repository.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Tuple

from .config import AppConfig
from .filters import finalize
from .github_api import GitHubSession, GraphQLQueryExecutor, QueryExecutor
from .models import (
    TIMELINE_TYPES,
    Category,
    CategoryContribution,
    ContributionRecord,
    ContributionWindow,
    QueryResult,
    RawPage,
    RepositoryContributions,
    TimelineEntry,
)
from .summarizer import summarize

logger = logging.getLogger(__name__)

ONE_SECOND = timedelta(seconds=1)
WINDOW_SPAN = timedelta(days=365) - ONE_SECOND
DEFAULT_MAX_WINDOWS = 50


class LoopState(str, Enum):
    CONTINUE = "continue"
    AUTH_ERROR = "auth_error"
    EXHAUSTED = "exhausted"
    RANGE_COMPLETE = "range_complete"
    ITERATION_CAP = "iteration_cap"


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def normalize_bounds(
    start: Optional[datetime], end: Optional[datetime], now: datetime
) -> Tuple[Optional[datetime], datetime]:
    # queries carry whole seconds only
    end = _as_utc(end) if end is not None else _as_utc(now).replace(microsecond=0)
    if start is None:
        return None, end
    start = _as_utc(start)
    if end < start:
        start, end = end, start
    return start, end


def window_before(end: datetime, lower_bound: Optional[datetime]) -> ContributionWindow:
    start = end - WINDOW_SPAN
    if lower_bound is not None and start < lower_bound:
        start = lower_bound
    return ContributionWindow(start=start, end=end)


def record_for(category: Category, entry: CategoryContribution) -> ContributionRecord:
    record = ContributionRecord(**{category.value: entry.total_count})
    entry_type = TIMELINE_TYPES.get(category)
    if entry_type is not None:
        record.details = [
            TimelineEntry(
                type=entry_type,
                url=node.url,
                title=node.title,
                occurred_at=node.occurred_at,
                number=node.number,
            )
            for node in entry.nodes
        ]
    return record


def _add_counts(left: Optional[int], right: Optional[int]) -> Optional[int]:
    if left is None and right is None:
        return None
    return (left or 0) + (right or 0)


def merge_records(existing: ContributionRecord, incoming: ContributionRecord) -> ContributionRecord:
    """Sum the counts and concatenate the timeline, ``existing`` entries first.

    Entries are never deduplicated: a pull request and a review of that pull
    request are two entries.
    """
    return ContributionRecord(
        commits=_add_counts(existing.commits, incoming.commits),
        pull_requests=_add_counts(existing.pull_requests, incoming.pull_requests),
        reviews=_add_counts(existing.reviews, incoming.reviews),
        issues=_add_counts(existing.issues, incoming.issues),
        details=existing.details + incoming.details,
    )


class ContributionAggregator:
    def __init__(
        self,
        executor: QueryExecutor,
        max_windows: int = DEFAULT_MAX_WINDOWS,
        clock: Callable[[], datetime] = lambda: datetime.now(timezone.utc),
    ) -> None:
        if max_windows < 1:
            raise ValueError("max_windows must be at least 1")
        self.executor = executor
        self.max_windows = max_windows
        self.clock = clock
        self.windows: List[ContributionWindow] = []
        self.last_state: Optional[LoopState] = None

    def fetch(
        self,
        user_login: str,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> List[RepositoryContributions]:
        lower_bound, upper_bound = normalize_bounds(start, end, self.clock())
        aggregate: Dict[str, RepositoryContributions] = {}
        self.windows = []

        state = LoopState.CONTINUE
        while state is LoopState.CONTINUE:
            if len(self.windows) >= self.max_windows:
                logger.warning(
                    "Stopped after %d windows for %s; history before %s was not fetched",
                    self.max_windows,
                    user_login,
                    upper_bound.isoformat(),
                )
                state = LoopState.ITERATION_CAP
                break
            window = window_before(upper_bound, lower_bound)
            self.windows.append(window)
            logger.info(
                "Fetching contributions for %s (%s -> %s)",
                user_login,
                window.start.isoformat(),
                window.end.isoformat(),
            )
            result = self.executor.execute(user_login, window)
            state = self._advance(user_login, result, aggregate)
            upper_bound = window.start - ONE_SECOND
            if state is LoopState.CONTINUE and lower_bound is not None and upper_bound < lower_bound:
                state = LoopState.RANGE_COMPLETE

        self.last_state = state
        logger.info(
            "Finished %s after %d window(s): %s, %d repositories",
            user_login,
            len(self.windows),
            state.value,
            len(aggregate),
        )
        return finalize(aggregate.values())

    def _advance(
        self, user_login: str, result: QueryResult, aggregate: Dict[str, RepositoryContributions]
    ) -> LoopState:
        if result.page is None:
            for error in result.errors:
                logger.error("%s: %s", error.field, error.message)
            if not result.errors:
                logger.error("No contributions returned for %s", user_login)
            return LoopState.AUTH_ERROR

        for error in result.errors:
            logger.debug("Ignoring partial error %s: %s", error.field, error.message)

        self._fold_page(user_login, result.page, aggregate)
        if result.page.total_entries() <= 0:
            return LoopState.EXHAUSTED
        return LoopState.CONTINUE

    def _fold_page(self, user_login: str, page: RawPage, aggregate: Dict[str, RepositoryContributions]) -> None:
        for category in Category:
            for entry in page.entries(category):
                summary = summarize(user_login, entry.repository)
                record = record_for(category, entry)
                existing = aggregate.get(summary.name_with_owner)
                if existing is None:
                    aggregate[summary.name_with_owner] = RepositoryContributions(summary=summary, contributions=record)
                else:
                    existing.contributions = merge_records(existing.contributions, record)


def fetch_contributions(
    user_login: str,
    start: Optional[datetime] = None,
    end: Optional[datetime] = None,
    config: Optional[AppConfig] = None,
) -> List[Dict[str, Any]]:
    """Return the user's public, active repositories with merged contributions.

    Records follow the JSON output shape and are ordered by stargazers,
    most popular first.
    """
    config = config or AppConfig()
    session = GitHubSession.create(config.github)
    try:
        aggregator = ContributionAggregator(
            GraphQLQueryExecutor(session),
            max_windows=config.pagination.max_windows,
        )
        repositories = aggregator.fetch(user_login, start, end)
    finally:
        session.close()
    if session.rate_limited:
        logger.warning(
            "GitHub rate limit reached for %s; contributions up to %s are missing from the results",
            user_login,
            aggregator.windows[-1].end.isoformat(),
        )
    return [repository.to_dict() for repository in repositories]
