from __future__ import annotations

import logging

from django.contrib.auth import authenticate
from django.contrib.auth.models import update_last_login
from django.db import DatabaseError, connection
from django.http import HttpResponse
from django.middleware.csrf import get_token
from drf_spectacular.utils import extend_schema
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest
from rest_framework import permissions, status
from rest_framework.views import APIView

from . import services
from .authentication import clear_auth_cookie, issue_access_token, set_auth_cookie
from .exceptions import UnauthorizedError
from .metrics import logins_total
from .responses import error_response, success_response
from .serializers import (
    JoinTeamSerializer,
    LoginSerializer,
    RegisterSerializer,
    TeamCreateSerializer,
    TeamDetailSerializer,
    TeamSerializer,
    UserSerializer,
)

logger = logging.getLogger(__name__)


class RegisterView(APIView):
    permission_classes = [permissions.AllowAny]
    authentication_classes = []

    @extend_schema(request=RegisterSerializer, responses={201: UserSerializer})
    def post(self, request):
        serializer = RegisterSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = serializer.save()
        logger.info("user registered id=%s", user.pk)
        return success_response("User registered.", UserSerializer(user).data, status=status.HTTP_201_CREATED)


class LoginView(APIView):
    permission_classes = [permissions.AllowAny]
    authentication_classes = []
    throttle_scope = "login"

    @extend_schema(request=LoginSerializer)
    def post(self, request):
        serializer = LoginSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = authenticate(
            request,
            username=serializer.validated_data["username"],
            password=serializer.validated_data["password"],
        )
        if not user:
            logins_total.labels(outcome="failure").inc()
            raise UnauthorizedError("Invalid credentials.")
        update_last_login(None, user)
        logins_total.labels(outcome="success").inc()

        token = issue_access_token(user)
        response = success_response("Logged in.", {"token": token, "user": UserSerializer(user).data})
        set_auth_cookie(response, token)
        return response


class LogoutView(APIView):
    permission_classes = [permissions.AllowAny]
    authentication_classes = []

    def post(self, request):
        response = success_response("Logged out.")
        clear_auth_cookie(response)
        return response


class MeView(APIView):
    @extend_schema(responses=UserSerializer)
    def get(self, request):
        return success_response("Current user.", UserSerializer(request.user).data)


class CsrfTokenView(APIView):
    permission_classes = [permissions.AllowAny]
    authentication_classes = []

    def get(self, request):
        # get_token also flags the csrftoken cookie for the middleware to set
        return success_response("CSRF token issued.", {"csrfToken": get_token(request)})


class TeamListCreateView(APIView):
    def get(self, request):
        data = []
        for team, role in services.list_user_teams(request.user):
            item = TeamSerializer(team).data
            item["role"] = role
            data.append(item)
        return success_response("Teams retrieved.", data)

    @extend_schema(request=TeamCreateSerializer, responses={201: TeamSerializer})
    def post(self, request):
        serializer = TeamCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        team = services.create_team(request.user, **serializer.validated_data)
        return success_response("Team created.", TeamSerializer(team).data, status=status.HTTP_201_CREATED)


class TeamJoinView(APIView):
    @extend_schema(request=JoinTeamSerializer, responses=TeamSerializer)
    def post(self, request):
        serializer = JoinTeamSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        team = services.join_team(serializer.validated_data["inviteCode"], request.user)
        return success_response("Joined team.", TeamSerializer(team).data)


class TeamDetailView(APIView):
    @extend_schema(responses=TeamDetailSerializer)
    def get(self, request, team_id: int):
        team = services.get_team(team_id, request.user)
        return success_response("Team retrieved.", TeamDetailSerializer(team).data)


# Observability endpoints

class HealthzView(APIView):
    permission_classes = [permissions.AllowAny]
    authentication_classes = []

    def get(self, request):
        return success_response("OK", {"status": "ok"})


class ReadinessView(APIView):
    permission_classes = [permissions.AllowAny]
    authentication_classes = []

    def get(self, request):
        try:
            with connection.cursor() as cursor:
                cursor.execute("SELECT 1")
        except DatabaseError:
            logger.exception("readiness check failed")
            return error_response("Database unavailable.", code="NOT_READY", status=status.HTTP_503_SERVICE_UNAVAILABLE)
        return success_response("Ready", {"status": "ready"})


class MetricsView(APIView):
    permission_classes = [permissions.AllowAny]
    authentication_classes = []

    def get(self, request):
        data = generate_latest()
        return HttpResponse(data, content_type=CONTENT_TYPE_LATEST)
