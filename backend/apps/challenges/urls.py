from django.urls import path

from .views import (
    EventChallengeListCreateView,
    ChallengeDetailView,
    ChallengeSolveView,
    ChallengeAssignView,
    FlagAttemptListView,
    FlagAttemptDetailView,
    FlagAttemptCommentView,
)

challenge = "events/<int:event_id>/challenges/<int:challenge_id>"

urlpatterns = [
    path("events/<int:event_id>/challenges", EventChallengeListCreateView.as_view()),
    path(challenge, ChallengeDetailView.as_view()),
    path(f"{challenge}/solve", ChallengeSolveView.as_view()),
    path(f"{challenge}/assign", ChallengeAssignView.as_view()),
    # Flag-attempt ledger
    path(f"{challenge}/flagAttempts", FlagAttemptListView.as_view()),
    path(f"{challenge}/flagAttempts/<int:attempt_id>", FlagAttemptDetailView.as_view()),
    path(f"{challenge}/flagAttempts/<int:attempt_id>/comment", FlagAttemptCommentView.as_view()),
]
