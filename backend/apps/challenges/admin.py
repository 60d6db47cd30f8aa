from django.contrib import admin

from .models import Challenge, ChallengeAssignment, FlagAttempt


class ChallengeAssignmentInline(admin.TabularInline):
    model = ChallengeAssignment
    extra = 0


@admin.register(Challenge)
class ChallengeAdmin(admin.ModelAdmin):
    list_display = ("id", "name", "category", "points", "event", "team", "solved", "solved_at")
    list_filter = ("solved", "category", "event")
    search_fields = ("name", "team__name", "event__name")
    inlines = [ChallengeAssignmentInline]


@admin.register(FlagAttempt)
class FlagAttemptAdmin(admin.ModelAdmin):
    list_display = ("id", "challenge", "user", "is_success", "created_at")
    list_filter = ("is_success",)
    search_fields = ("challenge__name", "user__username")
    readonly_fields = ("flag_value", "is_success", "user", "challenge", "created_at")
    fields = ("flag_value", "is_success", "user", "challenge", "created_at", "comment")

    def has_add_permission(self, request):
        return False

    def has_delete_permission(self, request, obj=None):
        return False

    def save_model(self, request, obj, form, change):
        if change:
            obj.save(update_fields=["comment"])
        else:
            super().save_model(request, obj, form, change)
