from __future__ import annotations

from datetime import timedelta

from django.contrib.auth import get_user_model
from django.utils import timezone

from apps.challenges.models import Challenge
from apps.core.models import Team, TeamMember
from apps.events.models import Event, EventTeam

User = get_user_model()


def make_user(username: str):
    return User.objects.create_user(username=username, email=f"{username}@example.com", password="x")


def make_team(name: str, owner, *members, role=TeamMember.ROLE_MEMBER):
    team = Team.objects.create(name=name, owner=owner)
    TeamMember.objects.create(user=owner, team=team, role=TeamMember.ROLE_OWNER)
    for member in members:
        TeamMember.objects.create(user=member, team=team, role=role)
    return team


def make_event(name: str, *teams):
    now = timezone.now()
    event = Event.objects.create(name=name, start_date=now, end_date=now + timedelta(days=1))
    for team in teams:
        EventTeam.objects.create(event=event, team=team)
    return event


def make_challenge(event, team, name="warmup", flag="flag{abc}", points=100, **extra):
    return Challenge.objects.create(name=name, event=event, team=team, flag=flag, points=points, **extra)
