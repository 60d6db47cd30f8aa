from __future__ import annotations

import secrets

from django.conf import settings
from django.contrib.auth.models import AbstractUser
from django.core.validators import RegexValidator
from django.db import models
from django.utils import timezone


def generate_invite_code() -> str:
    return secrets.token_hex(6)


class User(AbstractUser):
    ROLE_USER = "USER"
    ROLE_ADMIN = "ADMIN"
    ROLE_CHOICES = [(ROLE_USER, "User"), (ROLE_ADMIN, "Admin")]

    username = models.CharField(
        max_length=30,
        unique=True,
        validators=[
            RegexValidator(
                r"^[a-zA-Z0-9_-]{3,30}$",
                "Username must be 3-30 characters: letters, digits, dashes and underscores.",
            )
        ],
        error_messages={"unique": "A user with that username already exists."},
    )
    email = models.EmailField(max_length=255, unique=True)
    role = models.CharField(max_length=8, choices=ROLE_CHOICES, default=ROLE_USER)
    avatar = models.URLField(max_length=255, blank=True, default="")
    bio = models.TextField(max_length=500, blank=True, default="")

    def __str__(self) -> str:
        return self.username


class Team(models.Model):
    name = models.CharField(max_length=120, unique=True)
    description = models.TextField(blank=True, default="")
    avatar = models.URLField(max_length=255, blank=True, default="")
    invite_code = models.CharField(max_length=32, unique=True, default=generate_invite_code)
    owner = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.PROTECT, related_name="owned_teams")
    created_at = models.DateTimeField(default=timezone.now)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self) -> str:
        return self.name


class TeamMember(models.Model):
    ROLE_OWNER = "OWNER"
    ROLE_ADMIN = "ADMIN"
    ROLE_MEMBER = "MEMBER"
    ROLE_CHOICES = [(ROLE_OWNER, "Owner"), (ROLE_ADMIN, "Admin"), (ROLE_MEMBER, "Member")]
    MANAGER_ROLES = (ROLE_OWNER, ROLE_ADMIN)

    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="memberships")
    team = models.ForeignKey(Team, on_delete=models.CASCADE, related_name="memberships")
    role = models.CharField(max_length=8, choices=ROLE_CHOICES, default=ROLE_MEMBER)
    joined_at = models.DateTimeField(default=timezone.now)

    class Meta:
        unique_together = (("user", "team"),)

    def __str__(self) -> str:
        return f"{self.user_id} in {self.team_id} ({self.role})"

    @property
    def can_manage(self) -> bool:
        return self.role in self.MANAGER_ROLES
