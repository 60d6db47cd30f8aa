from __future__ import annotations

from rest_framework import serializers

from apps.content.serializers import NoteSerializer, ResourceSerializer
from apps.core.serializers import UserPublicSerializer

from .models import Challenge, ChallengeAssignment, FlagAttempt


class ChallengeAssignmentSerializer(serializers.ModelSerializer):
    user = UserPublicSerializer(read_only=True)
    assignedAt = serializers.DateTimeField(source="assigned_at", read_only=True)

    class Meta:
        model = ChallengeAssignment
        fields = ["id", "user", "assignedAt"]


class ChallengeSerializer(serializers.ModelSerializer):
    """Challenge as seen by team members. The flag itself is never serialised."""

    solvedAt = serializers.DateTimeField(source="solved_at", read_only=True)
    externalId = serializers.CharField(source="external_id", read_only=True)
    eventId = serializers.IntegerField(source="event_id", read_only=True)
    teamId = serializers.IntegerField(source="team_id", read_only=True)
    hasFlag = serializers.SerializerMethodField()
    assignments = ChallengeAssignmentSerializer(many=True, read_only=True)
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)
    updatedAt = serializers.DateTimeField(source="updated_at", read_only=True)

    class Meta:
        model = Challenge
        fields = [
            "id",
            "name",
            "description",
            "category",
            "points",
            "solved",
            "solvedAt",
            "externalId",
            "eventId",
            "teamId",
            "hasFlag",
            "assignments",
            "createdAt",
            "updatedAt",
        ]

    def get_hasFlag(self, obj) -> bool:
        return bool(obj.flag)


class ChallengeDetailSerializer(ChallengeSerializer):
    notes = NoteSerializer(many=True, read_only=True)
    resources = ResourceSerializer(many=True, read_only=True)

    class Meta(ChallengeSerializer.Meta):
        fields = ChallengeSerializer.Meta.fields + ["notes", "resources"]


class ChallengeCreateSerializer(serializers.Serializer):
    name = serializers.CharField(min_length=3, max_length=100)
    description = serializers.CharField(max_length=1000, required=False, allow_blank=True, default="")
    category = serializers.CharField(max_length=50, required=False, allow_blank=True, default="")
    points = serializers.IntegerField(min_value=0, required=False, allow_null=True, default=None)
    flag = serializers.CharField(max_length=255, required=False, allow_blank=True, allow_null=True, trim_whitespace=False, default=None)
    teamId = serializers.IntegerField()
    externalId = serializers.CharField(max_length=100, required=False, allow_blank=True, default="")


class SolveSerializer(serializers.Serializer):
    # compared verbatim, so no trimming
    flag = serializers.CharField(min_length=1, trim_whitespace=False)


class AssignSerializer(serializers.Serializer):
    userId = serializers.IntegerField()


class SolveResultSerializer(serializers.Serializer):
    solved = serializers.BooleanField()
    points = serializers.IntegerField()


class FlagAttemptSerializer(serializers.ModelSerializer):
    flagValue = serializers.CharField(source="flag_value", read_only=True)
    isSuccess = serializers.BooleanField(source="is_success", read_only=True)
    userId = serializers.IntegerField(source="user_id", read_only=True)
    challengeId = serializers.IntegerField(source="challenge_id", read_only=True)
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)
    user = UserPublicSerializer(read_only=True)

    class Meta:
        model = FlagAttempt
        fields = ["id", "flagValue", "isSuccess", "comment", "userId", "challengeId", "createdAt", "user"]


class CommentSerializer(serializers.Serializer):
    comment = serializers.CharField(min_length=1)
