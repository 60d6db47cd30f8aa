from __future__ import annotations

import django_filters

from .models import FlagAttempt


class FlagAttemptFilter(django_filters.FilterSet):
    """Query-string filters for the flag-attempt listing (?isSuccess=&userId=&since=)."""

    isSuccess = django_filters.BooleanFilter(field_name="is_success")
    userId = django_filters.NumberFilter(field_name="user_id")
    since = django_filters.IsoDateTimeFilter(field_name="created_at", lookup_expr="gte")

    class Meta:
        model = FlagAttempt
        fields = ["isSuccess", "userId", "since"]
