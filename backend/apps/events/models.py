from __future__ import annotations

from django.db import models
from django.utils import timezone


class Event(models.Model):
    name = models.CharField(max_length=200)
    description = models.TextField(blank=True, default="")
    start_date = models.DateTimeField()
    end_date = models.DateTimeField()
    website = models.URLField(max_length=255, blank=True, default="")
    ctfd_url = models.URLField(max_length=255, blank=True, default="")
    ctfd_api_key = models.CharField(max_length=255, blank=True, default="")
    logo_url = models.URLField(max_length=255, blank=True, default="")
    teams = models.ManyToManyField("core.Team", through="EventTeam", related_name="events")
    created_at = models.DateTimeField(default=timezone.now)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-start_date", "-id"]

    def __str__(self) -> str:
        return self.name


class EventTeam(models.Model):
    event = models.ForeignKey(Event, on_delete=models.CASCADE, related_name="event_teams")
    team = models.ForeignKey("core.Team", on_delete=models.CASCADE, related_name="event_teams")
    joined_at = models.DateTimeField(default=timezone.now)

    class Meta:
        constraints = [
            models.UniqueConstraint(fields=["event", "team"], name="uniq_event_team"),
        ]

    def __str__(self) -> str:
        return f"{self.team_id}@{self.event_id}"
