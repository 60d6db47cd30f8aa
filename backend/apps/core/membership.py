"""
Team-membership gating shared by every team-scoped operation.

Every read or write on a team's challenges, flag attempts, notes and resources
goes through these helpers instead of querying TeamMember ad hoc.
"""
from __future__ import annotations

from typing import Optional

from .exceptions import ForbiddenError
from .models import TeamMember


def get_membership(user, team_id: int) -> Optional[TeamMember]:
    if user is None or not getattr(user, "is_authenticated", False):
        return None
    return TeamMember.objects.filter(user_id=user.pk, team_id=team_id).first()


def is_team_member(user, team_id: int) -> bool:
    return get_membership(user, team_id) is not None


def require_team_membership(user, team_id: int, message: Optional[str] = None) -> TeamMember:
    membership = get_membership(user, team_id)
    if membership is None:
        raise ForbiddenError(message or "You are not a member of this team.")
    return membership


def require_author_or_team_admin(user, author_id: int, team_id: int, message: Optional[str] = None) -> None:
    """Authors may always manage their own content; otherwise an OWNER/ADMIN of the team is required."""
    if user.pk == author_id:
        return
    membership = get_membership(user, team_id)
    if membership is None or not membership.can_manage:
        raise ForbiddenError(message or "Only the author or a team admin can modify this item.")


def user_team_ids(user) -> list[int]:
    return list(TeamMember.objects.filter(user_id=user.pk).values_list("team_id", flat=True))
