from __future__ import annotations

from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.views import APIView

from apps.challenges.serializers import ChallengeSerializer
from apps.challenges.services import list_event_challenges
from apps.core.responses import success_response
from apps.core.serializers import TeamCreateSerializer, TeamSerializer

from . import services
from .serializers import AttachTeamSerializer, EventDetailSerializer, EventSerializer


class EventListCreateView(APIView):
    @extend_schema(responses=EventSerializer(many=True))
    def get(self, request):
        events = services.list_events(request.user)
        return success_response("Events retrieved.", EventSerializer(events, many=True).data)

    @extend_schema(request=EventSerializer, responses={201: EventSerializer})
    def post(self, request):
        serializer = EventSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        event = services.create_event(**serializer.validated_data)
        return success_response("Event created.", EventSerializer(event).data, status=status.HTTP_201_CREATED)


class EventDetailView(APIView):
    @extend_schema(responses=EventDetailSerializer)
    def get(self, request, event_id: int):
        event = services.get_event(event_id, request.user)
        data = EventDetailSerializer(event).data
        data["challenges"] = ChallengeSerializer(list_event_challenges(event.id, request.user), many=True).data
        return success_response("Event retrieved.", data)


class EventTeamsView(APIView):
    @extend_schema(responses=TeamSerializer(many=True))
    def get(self, request, event_id: int):
        teams = services.list_event_teams(event_id, request.user)
        return success_response("Event teams retrieved.", TeamSerializer(teams, many=True).data)

    @extend_schema(request=TeamCreateSerializer, responses={201: TeamSerializer})
    def post(self, request, event_id: int):
        serializer = TeamCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        team = services.create_team_for_event(event_id, request.user, **serializer.validated_data)
        return success_response("Team created for event.", TeamSerializer(team).data, status=status.HTTP_201_CREATED)


class EventTeamAttachView(APIView):
    @extend_schema(request=AttachTeamSerializer)
    def post(self, request, event_id: int):
        serializer = AttachTeamSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        link = services.add_team_to_event(event_id, serializer.validated_data["teamId"], request.user)
        return success_response(
            "Team added to event.",
            {"eventId": link.event_id, "teamId": link.team_id, "joinedAt": link.joined_at},
            status=status.HTTP_201_CREATED,
        )
