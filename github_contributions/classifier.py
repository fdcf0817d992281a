from __future__ import annotations

from .models import RawRepository, Role

_PERMISSION_ROLES = {
    "ADMIN": Role.MAINTAINER,
    "MAINTAIN": Role.MAINTAINER,
    "WRITE": Role.COLLABORATOR,
}


def role_of(user_login: str, repository: RawRepository) -> Role:
    """Return the user's relationship to ``repository``.

    The collaborator lookup is filtered to ``user_login`` upstream, so only the
    first permission entry is considered. An empty lookup (for instance when the
    token may not list collaborators) means plain contributor.
    """
    if repository.owner_login == user_login:
        return Role.OWNER
    if repository.collaborator_permissions:
        return _PERMISSION_ROLES.get(repository.collaborator_permissions[0].upper(), Role.CONTRIBUTOR)
    return Role.CONTRIBUTOR
