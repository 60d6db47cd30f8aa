from __future__ import annotations

from django.http import FileResponse
from drf_spectacular.utils import OpenApiTypes, extend_schema
from rest_framework import status
from rest_framework.parsers import FormParser, JSONParser, MultiPartParser
from rest_framework.views import APIView

from apps.core.exceptions import NotFoundError
from apps.core.responses import success_response

from . import services
from .serializers import (
    NoteSerializer,
    NoteWriteSerializer,
    ResourceSerializer,
    ResourceUpdateSerializer,
    ResourceUploadSerializer,
)


class NoteListCreateView(APIView):
    @extend_schema(responses=NoteSerializer(many=True))
    def get(self, request, event_id: int, challenge_id: int):
        notes = services.list_notes(event_id, challenge_id, request.user)
        return success_response("Notes retrieved.", NoteSerializer(notes, many=True).data)

    @extend_schema(request=NoteWriteSerializer, responses={201: NoteSerializer})
    def post(self, request, event_id: int, challenge_id: int):
        serializer = NoteWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        note = services.add_note(event_id, challenge_id, request.user, serializer.validated_data["content"])
        return success_response("Note added.", NoteSerializer(note).data, status=status.HTTP_201_CREATED)


class NoteDetailView(APIView):
    @extend_schema(request=NoteWriteSerializer, responses=NoteSerializer)
    def put(self, request, event_id: int, challenge_id: int, note_id: int):
        serializer = NoteWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        note = services.update_note(event_id, challenge_id, note_id, request.user, serializer.validated_data["content"])
        return success_response("Note updated.", NoteSerializer(note).data)

    def delete(self, request, event_id: int, challenge_id: int, note_id: int):
        services.delete_note(event_id, challenge_id, note_id, request.user)
        return success_response("Note deleted.")


def _metadata(validated_data: dict) -> dict:
    return {k: v for k, v in validated_data.items() if k != "file"}


class ResourceListCreateView(APIView):
    parser_classes = [MultiPartParser, FormParser]

    @extend_schema(responses=ResourceSerializer(many=True))
    def get(self, request, event_id: int, challenge_id: int):
        resources = services.list_resources(event_id, challenge_id, request.user)
        return success_response("Resources retrieved.", ResourceSerializer(resources, many=True).data)

    @extend_schema(request={"multipart/form-data": ResourceUploadSerializer}, responses={201: ResourceSerializer})
    def post(self, request, event_id: int, challenge_id: int):
        serializer = ResourceUploadSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        resource = services.add_resource(
            event_id,
            challenge_id,
            request.user,
            serializer.validated_data["file"],
            _metadata(serializer.validated_data),
        )
        return success_response("Resource uploaded.", ResourceSerializer(resource).data, status=status.HTTP_201_CREATED)


class ResourceDetailView(APIView):
    parser_classes = [MultiPartParser, FormParser, JSONParser]

    @extend_schema(responses=ResourceSerializer)
    def get(self, request, event_id: int, challenge_id: int, resource_id: int):
        resource = services.get_resource(event_id, challenge_id, resource_id, request.user)
        return success_response("Resource retrieved.", ResourceSerializer(resource).data)

    @extend_schema(request={"multipart/form-data": ResourceUpdateSerializer}, responses=ResourceSerializer)
    def put(self, request, event_id: int, challenge_id: int, resource_id: int):
        serializer = ResourceUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        resource = services.update_resource(
            event_id,
            challenge_id,
            resource_id,
            request.user,
            metadata=_metadata(serializer.validated_data),
            upload=serializer.validated_data.get("file"),
        )
        return success_response("Resource updated.", ResourceSerializer(resource).data)

    def delete(self, request, event_id: int, challenge_id: int, resource_id: int):
        services.delete_resource(event_id, challenge_id, resource_id, request.user)
        return success_response("Resource deleted.")


class ResourceDownloadView(APIView):
    @extend_schema(responses={(200, "application/octet-stream"): OpenApiTypes.BINARY})
    def get(self, request, event_id: int, challenge_id: int, resource_id: int):
        resource = services.get_resource(event_id, challenge_id, resource_id, request.user)
        if not resource.file or not resource.file.storage.exists(resource.file.name):
            raise NotFoundError("File not found.")
        return FileResponse(
            resource.file.open("rb"),
            as_attachment=True,
            filename=resource.filename,
            content_type=resource.mime_type,
        )
