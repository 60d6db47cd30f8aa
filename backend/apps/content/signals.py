from __future__ import annotations

import logging

from django.db.models.signals import post_delete
from django.dispatch import receiver

from .models import Resource

logger = logging.getLogger(__name__)


@receiver(post_delete, sender=Resource)
def delete_resource_file(sender, instance: Resource, **kwargs):
    # Also runs on cascades from Challenge/Team deletion.
    if instance.file:
        logger.info("deleting stored file %s for resource %s", instance.file.name, instance.id)
        instance.file.delete(save=False)
