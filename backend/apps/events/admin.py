from django.contrib import admin

from .models import Event, EventTeam


class EventTeamInline(admin.TabularInline):
    model = EventTeam
    extra = 0


@admin.register(Event)
class EventAdmin(admin.ModelAdmin):
    list_display = ("id", "name", "start_date", "end_date")
    search_fields = ("name",)
    exclude = ("ctfd_api_key",)
    inlines = [EventTeamInline]
