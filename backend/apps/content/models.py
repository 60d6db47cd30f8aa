from __future__ import annotations

import os
import uuid

from django.conf import settings
from django.db import models
from django.utils import timezone

from apps.challenges.models import Challenge
from apps.core.models import Team


def resource_upload_to(instance: "Resource", filename: str) -> str:
    ext = os.path.splitext(filename)[1].lower()
    return f"challenges/{instance.challenge_id}/{uuid.uuid4().hex}{ext}"


class Note(models.Model):
    content = models.TextField(max_length=2000)
    challenge = models.ForeignKey(Challenge, on_delete=models.CASCADE, related_name="notes")
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="notes")
    created_at = models.DateTimeField(default=timezone.now)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at", "-id"]

    def __str__(self):
        return f"Note#{self.id} on {self.challenge_id}"


class Resource(models.Model):
    VISIBILITY_TEAM = "team"
    VISIBILITY_CHALLENGE = "challenge"
    VISIBILITY_PUBLIC = "public"
    VISIBILITY_CHOICES = [VISIBILITY_TEAM, VISIBILITY_CHALLENGE, VISIBILITY_PUBLIC]

    file = models.FileField(upload_to=resource_upload_to, max_length=255)
    filename = models.CharField(max_length=255)
    size = models.PositiveBigIntegerField(default=0)
    mime_type = models.CharField(max_length=127, default="application/octet-stream")
    metadata = models.JSONField(default=dict, blank=True)
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="resources")
    team = models.ForeignKey(Team, on_delete=models.CASCADE, related_name="resources")
    challenge = models.ForeignKey(Challenge, on_delete=models.CASCADE, related_name="resources")
    created_at = models.DateTimeField(default=timezone.now)

    class Meta:
        ordering = ["-created_at", "-id"]
        indexes = [models.Index(fields=["challenge", "-created_at"], name="resource_chal_created_idx")]

    def __str__(self):
        return self.filename
