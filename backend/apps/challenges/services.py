from __future__ import annotations

import logging
from typing import Optional

from django.contrib.auth import get_user_model
from django.db import IntegrityError, transaction
from django.db.models import QuerySet
from django.utils import timezone

from apps.core.exceptions import (
    AlreadyAssignedError,
    AlreadySolvedError,
    DuplicateResourceError,
    ForbiddenError,
    NotFoundError,
)
from apps.core.membership import is_team_member, require_team_membership, user_team_ids
from apps.core.metrics import challenges_solved_total
from apps.events.models import Event, EventTeam

from . import ledger
from .models import Challenge, ChallengeAssignment

logger = logging.getLogger(__name__)
User = get_user_model()


def _get_event(event_id: int) -> Event:
    try:
        return Event.objects.get(id=event_id)
    except Event.DoesNotExist:
        raise NotFoundError("Event not found.")


def get_accessible_challenge(event_id: int, challenge_id: int, user, message: Optional[str] = None) -> Challenge:
    """
    Shared guard for every challenge-scoped endpoint: the event and challenge
    must exist, the challenge must belong to the event, and the user must be a
    member of the challenge's team.
    """
    _get_event(event_id)
    try:
        challenge = Challenge.objects.select_related("team", "event").get(id=challenge_id)
    except Challenge.DoesNotExist:
        raise NotFoundError("Challenge not found.")
    if challenge.event_id != int(event_id):
        raise NotFoundError("Challenge not found.")
    require_team_membership(user, challenge.team_id, message or "You are not allowed to access this challenge.")
    return challenge


def solve_challenge(challenge_id: int, event_id: int, user, flag: str) -> dict:
    """
    Check a submitted flag and record the attempt.

    The challenge row is locked for the duration of the check so that concurrent
    correct submissions produce a single solved transition. Every submission
    leaves exactly one ledger row, including submissions against a challenge
    that is already solved; those are reported as AlreadySolvedError once the
    row has been committed.
    """
    challenge = get_accessible_challenge(
        event_id, challenge_id, user, "You are not allowed to submit flags for this challenge."
    )

    with transaction.atomic():
        locked = Challenge.objects.select_for_update().get(id=challenge.id)
        was_solved = locked.solved
        is_correct = locked.check_flag(flag)
        ledger.record_attempt(flag, is_correct, user, locked.id, challenge=locked)

        newly_solved = is_correct and not was_solved
        if newly_solved:
            locked.solved = True
            locked.solved_at = timezone.now()
            locked.save(update_fields=["solved", "solved_at", "updated_at"])

    if was_solved:
        raise AlreadySolvedError()

    if newly_solved:
        challenges_solved_total.inc()
        logger.info("challenge solved id=%s user=%s", locked.id, user.pk)

    return {"solved": is_correct, "points": (locked.points or 0) if is_correct else 0}


def create_challenge(
    event_id: int,
    team_id: int,
    user,
    name: str,
    description: str = "",
    category: str = "",
    points: Optional[int] = None,
    flag: Optional[str] = None,
    external_id: str = "",
) -> Challenge:
    event = _get_event(event_id)
    if not EventTeam.objects.filter(event=event, team_id=team_id).exists():
        raise ForbiddenError("This team does not participate in the event.")
    require_team_membership(user, team_id, "You must be a member of the team to create challenges.")
    if Challenge.objects.filter(name=name, team_id=team_id, event=event).exists():
        raise DuplicateResourceError("A challenge with this name already exists for this team and event.")

    try:
        with transaction.atomic():
            challenge = Challenge.objects.create(
                name=name,
                description=description or "",
                category=category or "",
                points=points,
                flag=flag or None,
                external_id=external_id or "",
                event=event,
                team_id=team_id,
            )
            ChallengeAssignment.objects.create(challenge=challenge, user=user)
    except IntegrityError:
        raise DuplicateResourceError("A challenge with this name already exists for this team and event.")
    logger.info("challenge created id=%s event=%s team=%s", challenge.id, event.id, team_id)
    return challenge


def list_event_challenges(event_id: int, user) -> QuerySet:
    event = _get_event(event_id)
    team_ids = list(
        EventTeam.objects.filter(event=event, team_id__in=user_team_ids(user)).values_list("team_id", flat=True)
    )
    if not team_ids:
        raise ForbiddenError("You are not allowed to access this event.")
    return (
        Challenge.objects.filter(event=event, team_id__in=team_ids)
        .prefetch_related("assignments__user")
        .order_by("solved", "category", "name")
    )


def get_challenge_detail(event_id: int, challenge_id: int, user) -> Challenge:
    challenge = get_accessible_challenge(event_id, challenge_id, user)
    return (
        Challenge.objects.prefetch_related("assignments__user", "notes__user", "resources__user")
        .select_related("team", "event")
        .get(id=challenge.id)
    )


def assign_user(event_id: int, challenge_id: int, target_user_id: int, user) -> ChallengeAssignment:
    challenge = get_accessible_challenge(event_id, challenge_id, user, "You must be a member of the team to assign users.")
    try:
        target = User.objects.get(id=target_user_id)
    except User.DoesNotExist:
        raise NotFoundError("User not found.")
    if not is_team_member(target, challenge.team_id):
        raise ForbiddenError("The user to assign is not a member of this team.")
    if ChallengeAssignment.objects.filter(challenge=challenge, user=target).exists():
        raise AlreadyAssignedError()
    try:
        with transaction.atomic():
            return ChallengeAssignment.objects.create(challenge=challenge, user=target)
    except IntegrityError:
        raise AlreadyAssignedError()
