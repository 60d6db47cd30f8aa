from django.urls import path

from .views import (
    NoteListCreateView,
    NoteDetailView,
    ResourceListCreateView,
    ResourceDetailView,
    ResourceDownloadView,
)

challenge = "events/<int:event_id>/challenges/<int:challenge_id>"

urlpatterns = [
    path(f"{challenge}/notes", NoteListCreateView.as_view()),
    path(f"{challenge}/notes/<int:note_id>", NoteDetailView.as_view()),
    path(f"{challenge}/resources", ResourceListCreateView.as_view()),
    path(f"{challenge}/resources/<int:resource_id>", ResourceDetailView.as_view()),
    path(f"{challenge}/resources/<int:resource_id>/download", ResourceDownloadView.as_view()),
]
