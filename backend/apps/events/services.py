from __future__ import annotations

import logging

from django.db import IntegrityError, transaction
from django.db.models import QuerySet

from apps.core.exceptions import ConflictError, ForbiddenError, NotFoundError
from apps.core.membership import user_team_ids
from apps.core.models import Team
from apps.core.services import create_team

from .models import Event, EventTeam

logger = logging.getLogger(__name__)


def _get_event(event_id: int) -> Event:
    try:
        return Event.objects.get(id=event_id)
    except Event.DoesNotExist:
        raise NotFoundError("Event not found.")


def participating_team_ids(event_id: int, user) -> list[int]:
    """Ids of the user's teams linked to the event."""
    return list(
        EventTeam.objects.filter(event_id=event_id, team_id__in=user_team_ids(user)).values_list("team_id", flat=True)
    )


def list_events(user) -> QuerySet:
    return Event.objects.filter(event_teams__team_id__in=user_team_ids(user)).distinct().order_by("-start_date", "-id")


def get_event(event_id: int, user) -> Event:
    event = _get_event(event_id)
    if not participating_team_ids(event.id, user):
        raise ForbiddenError("You are not allowed to access this event.")
    return event


def create_event(**fields) -> Event:
    event = Event.objects.create(**fields)
    logger.info("event created id=%s", event.id)
    return event


def add_team_to_event(event_id: int, team_id: int, user) -> EventTeam:
    event = _get_event(event_id)
    try:
        team = Team.objects.get(id=team_id)
    except Team.DoesNotExist:
        raise NotFoundError("Team not found.")
    if team.owner_id != user.pk:
        raise ForbiddenError("Only the team owner can add the team to an event.")
    if EventTeam.objects.filter(event=event, team=team).exists():
        raise ConflictError("This team is already part of the event.")
    try:
        with transaction.atomic():
            return EventTeam.objects.create(event=event, team=team)
    except IntegrityError:
        raise ConflictError("This team is already part of the event.")


def create_team_for_event(event_id: int, user, name: str, description: str = "", avatar: str = "") -> Team:
    event = _get_event(event_id)
    with transaction.atomic():
        team = create_team(user, name=name, description=description, avatar=avatar)
        EventTeam.objects.create(event=event, team=team)
    return team


def list_event_teams(event_id: int, user) -> QuerySet:
    event = get_event(event_id, user)
    return Team.objects.filter(event_teams__event=event).order_by("name")
