"""
Flag-attempt ledger.

Every flag submission lands here as one row, whether or not it solved the
challenge. Reads and comment updates are limited to members of the team that
owns the challenge.
"""
from __future__ import annotations

import logging
from typing import Optional

from django.db.models import QuerySet

from apps.core.exceptions import NotFoundError
from apps.core.membership import require_team_membership
from apps.core.metrics import flag_attempts_total

from .models import Challenge, FlagAttempt

logger = logging.getLogger(__name__)


def _get_challenge(challenge_id: int, event_id: Optional[int] = None) -> Challenge:
    try:
        challenge = Challenge.objects.get(id=challenge_id)
    except Challenge.DoesNotExist:
        raise NotFoundError("Challenge not found.")
    if event_id is not None and challenge.event_id != int(event_id):
        raise NotFoundError("Challenge not found.")
    return challenge


def record_attempt(
    flag_value: str,
    is_success: bool,
    user,
    challenge_id: int,
    comment: Optional[str] = None,
    challenge: Optional[Challenge] = None,
) -> FlagAttempt:
    """
    Insert one ledger row. The challenge must exist and the user must belong to
    its team; nothing is written otherwise.
    """
    if challenge is None:
        challenge = _get_challenge(challenge_id)
    require_team_membership(user, challenge.team_id, "You are not allowed to submit flags for this challenge.")

    attempt = FlagAttempt.objects.create(
        flag_value=flag_value,
        is_success=is_success,
        comment=comment,
        user=user,
        challenge=challenge,
    )
    flag_attempts_total.labels(success=str(bool(is_success)).lower()).inc()
    logger.info(
        "flag attempt recorded id=%s challenge=%s user=%s success=%s",
        attempt.id,
        challenge.id,
        user.pk,
        is_success,
    )
    return attempt


def list_attempts(challenge_id: int, user, event_id: Optional[int] = None) -> QuerySet:
    challenge = _get_challenge(challenge_id, event_id)
    require_team_membership(user, challenge.team_id, "You are not allowed to view attempts for this challenge.")
    return FlagAttempt.objects.filter(challenge=challenge).select_related("user").order_by("-created_at", "-id")


def get_attempt(attempt_id: int, user, challenge_id: Optional[int] = None) -> FlagAttempt:
    try:
        attempt = FlagAttempt.objects.select_related("challenge", "user").get(id=attempt_id)
    except FlagAttempt.DoesNotExist:
        raise NotFoundError("Flag attempt not found.")
    if challenge_id is not None and attempt.challenge_id != int(challenge_id):
        raise NotFoundError("Flag attempt not found.")
    require_team_membership(user, attempt.challenge.team_id, "You are not allowed to view this attempt.")
    return attempt


def annotate_attempt(attempt_id: int, comment: str, user, challenge_id: Optional[int] = None) -> FlagAttempt:
    """Replace the attempt's comment. The submitted value and outcome stay untouched."""
    attempt = get_attempt(attempt_id, user, challenge_id)
    attempt.comment = comment
    attempt.save(update_fields=["comment"])
    return attempt
