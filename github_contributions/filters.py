from __future__ import annotations

from typing import Iterable, List

from .models import RepositoryContributions


def select_public_active(repositories: Iterable[RepositoryContributions]) -> List[RepositoryContributions]:
    return [repo for repo in repositories if repo.summary.is_active and not repo.summary.is_private]


def sort_by_popularity(repositories: Iterable[RepositoryContributions]) -> List[RepositoryContributions]:
    """Most starred first; equal star counts fall back to the repository name."""
    return sorted(repositories, key=lambda repo: (-repo.summary.stargazer_count, repo.name.lower(), repo.name))


def finalize(repositories: Iterable[RepositoryContributions]) -> List[RepositoryContributions]:
    return sort_by_popularity(select_public_active(repositories))
