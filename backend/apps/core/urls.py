from django.urls import path

from .views import (
    RegisterView,
    LoginView,
    LogoutView,
    MeView,
    CsrfTokenView,
    TeamListCreateView,
    TeamJoinView,
    TeamDetailView,
    HealthzView,
    ReadinessView,
    MetricsView,
)

urlpatterns = [
    path("auth/register", RegisterView.as_view()),
    path("auth/login", LoginView.as_view()),
    path("auth/logout", LogoutView.as_view()),
    path("auth/me", MeView.as_view()),
    path("csrf/token", CsrfTokenView.as_view()),
    path("teams", TeamListCreateView.as_view()),
    path("teams/join", TeamJoinView.as_view()),
    path("teams/<int:team_id>", TeamDetailView.as_view()),
    # Observability
    path("healthz", HealthzView.as_view()),
    path("readiness", ReadinessView.as_view()),
    path("metrics", MetricsView.as_view()),
]
