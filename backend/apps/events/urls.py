from django.urls import path

from .views import EventListCreateView, EventDetailView, EventTeamsView, EventTeamAttachView

urlpatterns = [
    path("events", EventListCreateView.as_view()),
    path("events/<int:event_id>", EventDetailView.as_view()),
    path("events/<int:event_id>/teams", EventTeamsView.as_view()),
    path("events/<int:event_id>/teams/attach", EventTeamAttachView.as_view()),
]
