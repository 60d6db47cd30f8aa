from django.contrib import admin

from .models import Note, Resource


@admin.register(Note)
class NoteAdmin(admin.ModelAdmin):
    list_display = ("id", "challenge", "user", "created_at")
    search_fields = ("content", "challenge__name", "user__username")


@admin.register(Resource)
class ResourceAdmin(admin.ModelAdmin):
    list_display = ("id", "filename", "challenge", "team", "user", "size", "mime_type", "created_at")
    list_filter = ("mime_type",)
    search_fields = ("filename", "challenge__name")
