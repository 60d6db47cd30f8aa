from __future__ import annotations

from django.contrib.auth import get_user_model
from django.contrib.auth.password_validation import validate_password
from django.core.exceptions import ValidationError as DjangoValidationError
from django.core.validators import RegexValidator
from rest_framework import serializers

from .models import Team, TeamMember

User = get_user_model()


class UserPublicSerializer(serializers.ModelSerializer):
    """Public profile attached to attempts, notes and resources."""

    class Meta:
        model = User
        fields = ["id", "username", "avatar"]


class UserSerializer(serializers.ModelSerializer):
    createdAt = serializers.DateTimeField(source="date_joined", read_only=True)
    lastLogin = serializers.DateTimeField(source="last_login", read_only=True)

    class Meta:
        model = User
        fields = ["id", "username", "email", "role", "avatar", "bio", "createdAt", "lastLogin"]
        read_only_fields = fields


class RegisterSerializer(serializers.Serializer):
    username = serializers.CharField(
        min_length=3,
        max_length=30,
        validators=[RegexValidator(r"^[a-zA-Z0-9_-]+$", "Username may only contain letters, digits, _ and -.")],
    )
    email = serializers.EmailField(max_length=255)
    password = serializers.CharField(write_only=True, min_length=12, max_length=60, trim_whitespace=False)

    def validate_username(self, value):
        if User.objects.filter(username__iexact=value).exists():
            raise serializers.ValidationError("Username already taken")
        return value

    def validate_email(self, value):
        if User.objects.filter(email__iexact=value).exists():
            raise serializers.ValidationError("Email already in use")
        return value

    def validate(self, attrs):
        candidate = User(username=attrs["username"], email=attrs["email"])
        try:
            validate_password(attrs["password"], user=candidate)
        except DjangoValidationError as exc:
            raise serializers.ValidationError({"password": list(exc.messages)})
        return attrs

    def create(self, validated_data):
        user = User(username=validated_data["username"], email=validated_data["email"])
        user.set_password(validated_data["password"])
        user.save()
        return user


class LoginSerializer(serializers.Serializer):
    username = serializers.CharField()
    password = serializers.CharField(trim_whitespace=False)


class TeamMemberSerializer(serializers.ModelSerializer):
    user = UserPublicSerializer(read_only=True)
    joinedAt = serializers.DateTimeField(source="joined_at", read_only=True)

    class Meta:
        model = TeamMember
        fields = ["id", "role", "joinedAt", "user"]


class TeamSerializer(serializers.ModelSerializer):
    ownerId = serializers.IntegerField(source="owner_id", read_only=True)
    inviteCode = serializers.CharField(source="invite_code", read_only=True)
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)

    class Meta:
        model = Team
        fields = ["id", "name", "description", "avatar", "inviteCode", "ownerId", "createdAt"]


class TeamDetailSerializer(TeamSerializer):
    members = TeamMemberSerializer(source="memberships", many=True, read_only=True)

    class Meta(TeamSerializer.Meta):
        fields = TeamSerializer.Meta.fields + ["members"]


class TeamCreateSerializer(serializers.Serializer):
    name = serializers.CharField(
        min_length=3,
        max_length=50,
        validators=[RegexValidator(r"^[a-zA-Z0-9\s_-]+$", "Team name may only contain letters, digits, spaces, _ and -.")],
    )
    description = serializers.CharField(max_length=500, required=False, allow_blank=True, default="")
    avatar = serializers.URLField(max_length=255, required=False, allow_blank=True, allow_null=True, default="")


class JoinTeamSerializer(serializers.Serializer):
    inviteCode = serializers.CharField(max_length=32)
