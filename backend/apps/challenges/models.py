from __future__ import annotations

import hmac
from typing import Optional

from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models
from django.utils import timezone

from apps.core.models import Team
from apps.events.models import Event


class Challenge(models.Model):
    name = models.CharField(max_length=100)
    description = models.TextField(max_length=1000, blank=True, default="")
    category = models.CharField(max_length=50, blank=True, default="")
    points = models.IntegerField(null=True, blank=True, validators=[MinValueValidator(0)])
    flag = models.CharField(max_length=255, null=True, blank=True)
    solved = models.BooleanField(default=False)
    solved_at = models.DateTimeField(null=True, blank=True)
    external_id = models.CharField(max_length=100, blank=True, default="")
    event = models.ForeignKey(Event, on_delete=models.CASCADE, related_name="challenges")
    team = models.ForeignKey(Team, on_delete=models.CASCADE, related_name="challenges")
    created_at = models.DateTimeField(default=timezone.now)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        constraints = [
            models.UniqueConstraint(fields=["name", "team", "event"], name="uniq_challenge_name_team_event"),
        ]
        indexes = [models.Index(fields=["event", "team"], name="challenge_event_team_idx")]

    def __str__(self) -> str:
        return self.name

    def check_flag(self, submitted: Optional[str]) -> bool:
        """
        Exact match against the configured flag, in constant time.
        A challenge without a configured flag never matches.
        """
        if not self.flag or submitted is None:
            return False
        return hmac.compare_digest(submitted.encode("utf-8"), self.flag.encode("utf-8"))


class ChallengeAssignment(models.Model):
    challenge = models.ForeignKey(Challenge, on_delete=models.CASCADE, related_name="assignments")
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="challenge_assignments")
    assigned_at = models.DateTimeField(default=timezone.now)

    class Meta:
        constraints = [
            models.UniqueConstraint(fields=["challenge", "user"], name="uniq_challenge_assignment"),
        ]

    def __str__(self) -> str:
        return f"{self.user_id} on {self.challenge_id}"


class FlagAttemptError(Exception):
    pass


class FlagAttempt(models.Model):
    """
    One submitted flag. Rows are append-only: after insertion only the
    advisory comment may change.
    """

    MUTABLE_FIELDS = frozenset({"comment"})

    flag_value = models.TextField()
    is_success = models.BooleanField(default=False)
    comment = models.TextField(null=True, blank=True)
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="flag_attempts")
    challenge = models.ForeignKey(Challenge, on_delete=models.CASCADE, related_name="flag_attempts")
    created_at = models.DateTimeField(default=timezone.now)

    class Meta:
        indexes = [
            models.Index(fields=["challenge", "-created_at"], name="flagattempt_chal_created_idx"),
            models.Index(fields=["user"], name="flagattempt_user_idx"),
        ]

    def __str__(self) -> str:
        return f"Attempt#{self.id} chal={self.challenge_id} success={self.is_success}"

    def save(self, *args, **kwargs):
        if not self._state.adding:
            update_fields = kwargs.get("update_fields")
            if update_fields is None or not set(update_fields) <= self.MUTABLE_FIELDS:
                raise FlagAttemptError("Flag attempts are append-only; only the comment can be updated.")
        super().save(*args, **kwargs)
