from __future__ import annotations

import logging
import mimetypes
from typing import Optional

from django.conf import settings
from django.db import DatabaseError
from django.db.models import QuerySet

from apps.challenges.services import get_accessible_challenge
from apps.core.exceptions import InvalidInputError, NotFoundError
from apps.core.membership import require_author_or_team_admin

from .models import Note, Resource

logger = logging.getLogger(__name__)


# Notes

def list_notes(event_id: int, challenge_id: int, user) -> QuerySet:
    challenge = get_accessible_challenge(event_id, challenge_id, user, "You are not allowed to view notes for this challenge.")
    return Note.objects.filter(challenge=challenge).select_related("user")


def add_note(event_id: int, challenge_id: int, user, content: str) -> Note:
    challenge = get_accessible_challenge(event_id, challenge_id, user, "You are not allowed to add notes to this challenge.")
    return Note.objects.create(challenge=challenge, user=user, content=content)


def _get_note(challenge, note_id: int) -> Note:
    try:
        return Note.objects.select_related("user").get(id=note_id, challenge=challenge)
    except Note.DoesNotExist:
        raise NotFoundError("Note not found.")


def update_note(event_id: int, challenge_id: int, note_id: int, user, content: str) -> Note:
    challenge = get_accessible_challenge(event_id, challenge_id, user)
    note = _get_note(challenge, note_id)
    require_author_or_team_admin(user, note.user_id, challenge.team_id, "Only the author or a team admin can edit this note.")
    note.content = content
    note.save(update_fields=["content", "updated_at"])
    return note


def delete_note(event_id: int, challenge_id: int, note_id: int, user) -> None:
    challenge = get_accessible_challenge(event_id, challenge_id, user)
    note = _get_note(challenge, note_id)
    require_author_or_team_admin(user, note.user_id, challenge.team_id, "Only the author or a team admin can delete this note.")
    note.delete()


# Resources

def _check_upload(upload) -> None:
    if upload.size > settings.RESOURCE_MAX_UPLOAD_BYTES:
        raise InvalidInputError(
            "File too large.", details={"maxBytes": settings.RESOURCE_MAX_UPLOAD_BYTES, "size": upload.size}
        )


def _mime_type(upload) -> str:
    content_type = getattr(upload, "content_type", None)
    if content_type:
        return content_type
    guessed, _ = mimetypes.guess_type(upload.name or "")
    return guessed or "application/octet-stream"


def _save_or_discard_file(resource: Resource) -> None:
    """Save the row, removing the just-written file if the save fails."""
    try:
        resource.save()
    except DatabaseError:
        resource.file.storage.delete(resource.file.name)
        raise


def add_resource(event_id: int, challenge_id: int, user, upload, metadata: Optional[dict] = None) -> Resource:
    challenge = get_accessible_challenge(event_id, challenge_id, user, "You are not allowed to add resources to this challenge.")
    _check_upload(upload)
    resource = Resource(
        filename=(upload.name or "unnamed-file")[:255],
        size=upload.size,
        mime_type=_mime_type(upload),
        metadata=metadata or {},
        user=user,
        team_id=challenge.team_id,
        challenge=challenge,
    )
    resource.file.save(upload.name or "unnamed-file", upload, save=False)
    _save_or_discard_file(resource)
    logger.info("resource uploaded id=%s challenge=%s size=%s", resource.id, challenge.id, resource.size)
    return resource


def list_resources(event_id: int, challenge_id: int, user) -> QuerySet:
    challenge = get_accessible_challenge(event_id, challenge_id, user, "You are not allowed to view resources for this challenge.")
    return Resource.objects.filter(challenge=challenge).select_related("user")


def get_resource(event_id: int, challenge_id: int, resource_id: int, user) -> Resource:
    challenge = get_accessible_challenge(event_id, challenge_id, user, "You are not allowed to view resources for this challenge.")
    try:
        return Resource.objects.select_related("user").get(id=resource_id, challenge=challenge)
    except Resource.DoesNotExist:
        raise NotFoundError("Resource not found.")


def update_resource(
    event_id: int,
    challenge_id: int,
    resource_id: int,
    user,
    metadata: Optional[dict] = None,
    upload=None,
) -> Resource:
    """
    Merge metadata into the existing metadata and optionally replace the stored
    file. The previous file is removed from storage once the row points at the
    new one.
    """
    resource = get_resource(event_id, challenge_id, resource_id, user)
    require_author_or_team_admin(
        user, resource.user_id, resource.team_id, "Only the author or a team admin can modify this resource."
    )

    resource.metadata = {**(resource.metadata or {}), **(metadata or {})}
    old_name = None
    if upload is not None:
        _check_upload(upload)
        old_name = resource.file.name
        resource.filename = (upload.name or "unnamed-file")[:255]
        resource.size = upload.size
        resource.mime_type = _mime_type(upload)
        resource.file.save(upload.name or "unnamed-file", upload, save=False)
        _save_or_discard_file(resource)
    else:
        resource.save()

    if old_name and old_name != resource.file.name:
        resource.file.storage.delete(old_name)
    return resource


def delete_resource(event_id: int, challenge_id: int, resource_id: int, user) -> None:
    resource = get_resource(event_id, challenge_id, resource_id, user)
    require_author_or_team_admin(
        user, resource.user_id, resource.team_id, "Only the author or a team admin can delete this resource."
    )
    # stored file removed by the post_delete handler
    resource.delete()
    logger.info("resource deleted id=%s", resource_id)
