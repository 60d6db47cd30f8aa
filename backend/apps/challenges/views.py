from __future__ import annotations

import logging

from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status
from rest_framework.exceptions import ValidationError
from rest_framework.views import APIView

from apps.core.exceptions import IncorrectFlagError
from apps.core.responses import paginate, success_response

from . import ledger, services
from .filters import FlagAttemptFilter
from .serializers import (
    AssignSerializer,
    ChallengeAssignmentSerializer,
    ChallengeCreateSerializer,
    ChallengeDetailSerializer,
    ChallengeSerializer,
    CommentSerializer,
    FlagAttemptSerializer,
    SolveResultSerializer,
    SolveSerializer,
)

logger = logging.getLogger(__name__)


class EventChallengeListCreateView(APIView):
    @extend_schema(responses=ChallengeSerializer(many=True))
    def get(self, request, event_id: int):
        challenges = services.list_event_challenges(event_id, request.user)
        return success_response("Challenges retrieved.", ChallengeSerializer(challenges, many=True).data)

    @extend_schema(request=ChallengeCreateSerializer, responses={201: ChallengeSerializer})
    def post(self, request, event_id: int):
        serializer = ChallengeCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        challenge = services.create_challenge(
            event_id,
            data["teamId"],
            request.user,
            name=data["name"],
            description=data["description"],
            category=data["category"],
            points=data["points"],
            flag=data["flag"],
            external_id=data["externalId"],
        )
        return success_response("Challenge created.", ChallengeSerializer(challenge).data, status=status.HTTP_201_CREATED)


class ChallengeDetailView(APIView):
    @extend_schema(responses=ChallengeDetailSerializer)
    def get(self, request, event_id: int, challenge_id: int):
        challenge = services.get_challenge_detail(event_id, challenge_id, request.user)
        return success_response("Challenge retrieved.", ChallengeDetailSerializer(challenge).data)


class ChallengeSolveView(APIView):
    throttle_scope = "flag-submit"

    @extend_schema(
        request=SolveSerializer,
        responses={200: SolveResultSerializer},
        description="Submit a flag. Every submission is recorded in the flag-attempt ledger.",
    )
    def post(self, request, event_id: int, challenge_id: int):
        serializer = SolveSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        result = services.solve_challenge(challenge_id, event_id, request.user, serializer.validated_data["flag"])
        if not result["solved"]:
            raise IncorrectFlagError(details={"solved": False, "points": 0})
        return success_response("Challenge solved.", result)


class ChallengeAssignView(APIView):
    @extend_schema(request=AssignSerializer, responses={201: ChallengeAssignmentSerializer})
    def post(self, request, event_id: int, challenge_id: int):
        serializer = AssignSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        assignment = services.assign_user(event_id, challenge_id, serializer.validated_data["userId"], request.user)
        return success_response(
            "User assigned.", ChallengeAssignmentSerializer(assignment).data, status=status.HTTP_201_CREATED
        )


class FlagAttemptListView(APIView):
    @extend_schema(
        parameters=[
            OpenApiParameter("isSuccess", bool),
            OpenApiParameter("userId", int),
            OpenApiParameter("since", str, description="ISO 8601 timestamp"),
            OpenApiParameter("page", int),
            OpenApiParameter("limit", int),
        ],
        responses=FlagAttemptSerializer(many=True),
    )
    def get(self, request, event_id: int, challenge_id: int):
        challenge = services.get_accessible_challenge(
            event_id, challenge_id, request.user, "You are not allowed to view attempts for this challenge."
        )
        attempts = ledger.list_attempts(challenge.id, request.user, event_id=event_id)

        filterset = FlagAttemptFilter(request.query_params, queryset=attempts)
        if not filterset.is_valid():
            raise ValidationError(filterset.errors)
        page, pagination = paginate(filterset.qs, request)
        return success_response(
            "Flag attempts retrieved.", FlagAttemptSerializer(page, many=True).data, pagination=pagination
        )


class FlagAttemptDetailView(APIView):
    @extend_schema(responses=FlagAttemptSerializer)
    def get(self, request, event_id: int, challenge_id: int, attempt_id: int):
        challenge = services.get_accessible_challenge(
            event_id, challenge_id, request.user, "You are not allowed to view this attempt."
        )
        attempt = ledger.get_attempt(attempt_id, request.user, challenge_id=challenge.id)
        return success_response("Flag attempt retrieved.", FlagAttemptSerializer(attempt).data)


class FlagAttemptCommentView(APIView):
    @extend_schema(request=CommentSerializer, responses=FlagAttemptSerializer)
    def post(self, request, event_id: int, challenge_id: int, attempt_id: int):
        challenge = services.get_accessible_challenge(
            event_id, challenge_id, request.user, "You are not allowed to comment on this attempt."
        )
        serializer = CommentSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        attempt = ledger.annotate_attempt(
            attempt_id, serializer.validated_data["comment"], request.user, challenge_id=challenge.id
        )
        return success_response("Comment saved.", FlagAttemptSerializer(attempt).data)
