from __future__ import annotations

from rest_framework import serializers

from apps.core.serializers import TeamSerializer

from .models import Event


class EventSerializer(serializers.ModelSerializer):
    startDate = serializers.DateTimeField(source="start_date")
    endDate = serializers.DateTimeField(source="end_date")
    ctfdUrl = serializers.URLField(source="ctfd_url", max_length=255, required=False, allow_blank=True)
    ctfdApiKey = serializers.CharField(source="ctfd_api_key", max_length=255, required=False, allow_blank=True, write_only=True)
    logoUrl = serializers.URLField(source="logo_url", max_length=255, required=False, allow_blank=True)
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)
    updatedAt = serializers.DateTimeField(source="updated_at", read_only=True)

    class Meta:
        model = Event
        fields = [
            "id",
            "name",
            "description",
            "startDate",
            "endDate",
            "website",
            "ctfdUrl",
            "ctfdApiKey",
            "logoUrl",
            "createdAt",
            "updatedAt",
        ]
        extra_kwargs = {
            "description": {"required": False},
            "website": {"required": False},
        }

    def validate(self, attrs):
        if attrs["end_date"] < attrs["start_date"]:
            raise serializers.ValidationError({"endDate": "End date must be after the start date."})
        return attrs


class EventDetailSerializer(EventSerializer):
    teams = TeamSerializer(many=True, read_only=True)

    class Meta(EventSerializer.Meta):
        fields = EventSerializer.Meta.fields + ["teams"]


class AttachTeamSerializer(serializers.Serializer):
    teamId = serializers.IntegerField()
