from __future__ import annotations

from rest_framework import serializers

from apps.core.serializers import UserPublicSerializer

from .models import Note, Resource


class NoteSerializer(serializers.ModelSerializer):
    user = UserPublicSerializer(read_only=True)
    challengeId = serializers.IntegerField(source="challenge_id", read_only=True)
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)
    updatedAt = serializers.DateTimeField(source="updated_at", read_only=True)

    class Meta:
        model = Note
        fields = ["id", "content", "challengeId", "user", "createdAt", "updatedAt"]


class NoteWriteSerializer(serializers.Serializer):
    content = serializers.CharField(min_length=1, max_length=2000)


class ResourceSerializer(serializers.ModelSerializer):
    user = UserPublicSerializer(read_only=True)
    mimeType = serializers.CharField(source="mime_type", read_only=True)
    challengeId = serializers.IntegerField(source="challenge_id", read_only=True)
    teamId = serializers.IntegerField(source="team_id", read_only=True)
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)

    class Meta:
        model = Resource
        fields = ["id", "filename", "size", "mimeType", "metadata", "challengeId", "teamId", "user", "createdAt"]


class ResourceMetadataSerializer(serializers.Serializer):
    """Metadata accepted alongside an upload (multipart form fields)."""

    description = serializers.CharField(max_length=1000, required=False, allow_blank=True)
    type = serializers.CharField(max_length=50, required=False, allow_blank=True)
    tags = serializers.ListField(child=serializers.CharField(max_length=50), required=False)
    visibility = serializers.ChoiceField(choices=Resource.VISIBILITY_CHOICES, required=False)


class ResourceUploadSerializer(ResourceMetadataSerializer):
    file = serializers.FileField()

    def validate(self, attrs):
        attrs.setdefault("visibility", Resource.VISIBILITY_TEAM)
        return attrs


class ResourceUpdateSerializer(ResourceMetadataSerializer):
    file = serializers.FileField(required=False)
