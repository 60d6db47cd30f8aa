from __future__ import annotations

import logging
from typing import Optional

from django.db import IntegrityError, transaction

from .exceptions import AlreadyMemberError, DuplicateResourceError, InvalidInviteCodeError, NotFoundError
from .membership import require_team_membership
from .models import Team, TeamMember, generate_invite_code

logger = logging.getLogger(__name__)


def create_team(user, name: str, description: str = "", avatar: str = "") -> Team:
    if Team.objects.filter(name=name).exists():
        raise DuplicateResourceError("A team with this name already exists.")
    try:
        with transaction.atomic():
            team = Team.objects.create(
                name=name,
                description=description or "",
                avatar=avatar or "",
                invite_code=generate_invite_code(),
                owner=user,
            )
            TeamMember.objects.create(user=user, team=team, role=TeamMember.ROLE_OWNER)
    except IntegrityError:
        # lost a race on the unique name
        raise DuplicateResourceError("A team with this name already exists.")
    logger.info("team created id=%s owner=%s", team.id, user.pk)
    return team


def list_user_teams(user) -> list[tuple[Team, str]]:
    """Teams the user belongs to, paired with the user's role in each."""
    memberships = TeamMember.objects.filter(user=user).select_related("team").order_by("joined_at", "id")
    return [(m.team, m.role) for m in memberships]


def get_team(team_id: int, user) -> Team:
    try:
        team = Team.objects.get(id=team_id)
    except Team.DoesNotExist:
        raise NotFoundError("Team not found.")
    require_team_membership(user, team.id, "You are not a member of this team.")
    return team


def join_team(invite_code: Optional[str], user) -> Team:
    try:
        team = Team.objects.get(invite_code=invite_code or "")
    except Team.DoesNotExist:
        raise InvalidInviteCodeError()
    if TeamMember.objects.filter(user=user, team=team).exists():
        raise AlreadyMemberError()
    try:
        with transaction.atomic():
            TeamMember.objects.create(user=user, team=team, role=TeamMember.ROLE_MEMBER)
    except IntegrityError:
        raise AlreadyMemberError()
    logger.info("user %s joined team %s", user.pk, team.id)
    return team
