from __future__ import annotations

from typing import List

from .classifier import role_of
from .models import Language, RawLanguage, RawRepository, RepositorySummary


def summarize(user_login: str, repository: RawRepository) -> RepositorySummary:
    return RepositorySummary(
        name_with_owner=repository.name_with_owner,
        description=repository.description,
        url=repository.url,
        image_url=repository.image_url,
        is_private=repository.is_private,
        is_active=not any((repository.is_archived, repository.is_disabled, repository.is_locked)),
        role=role_of(user_login, repository),
        stargazer_count=repository.stargazer_count,
        languages=language_coverage(repository.languages, repository.languages_total_size),
        topics=list(repository.topics),
    )


def language_coverage(languages: List[RawLanguage], total_size: int) -> List[Language]:
    """Attach a floor-truncated percentage of ``total_size`` to each language.

    Percentages are not normalised, so they may sum to less than 100.
    """
    total = max(total_size, 1)
    return [
        Language(
            name=language.name,
            color=language.color,
            byte_size=language.size,
            coverage_percent=language.size * 100 // total,
        )
        for language in languages
    ]
