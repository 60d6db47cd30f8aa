from __future__ import annotations

from rest_framework.throttling import SimpleRateThrottle


class PerIPRateThrottle(SimpleRateThrottle):
    """
    A per-IP throttle keyed on the view's throttle_scope.

    Usage:
    - Listed in DEFAULT_THROTTLE_CLASSES next to ScopedRateThrottle.
    - Set view.throttle_scope = "foo".
    - Configure DEFAULT_THROTTLE_RATES["foo-ip"] in settings.
    Views without a scope, or scopes without an "-ip" rate, are not limited.
    """

    scope_suffix = "-ip"

    def __init__(self):
        # Rate depends on the view; resolved in allow_request.
        pass

    def allow_request(self, request, view):
        base_scope = getattr(view, "throttle_scope", None)
        if not base_scope:
            return True
        self.scope = f"{base_scope}{self.scope_suffix}"
        self.rate = self.get_rate()
        self.num_requests, self.duration = self.parse_rate(self.rate)
        return super().allow_request(request, view)

    def get_rate(self):
        return self.THROTTLE_RATES.get(self.scope)

    def get_cache_key(self, request, view):
        ident = self.get_ident(request)
        if ident is None:
            return None
        return self.cache_format % {"scope": self.scope, "ident": ident}
