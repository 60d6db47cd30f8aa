from __future__ import annotations

import re

from django.core.exceptions import ValidationError


class ComplexityValidator:
    """
    Password must mix lowercase, uppercase, digits and at least one special character.
    Registered in AUTH_PASSWORD_VALIDATORS next to Django's built-in validators.
    """

    checks = (
        (re.compile(r"[a-z]"), "a lowercase letter"),
        (re.compile(r"[A-Z]"), "an uppercase letter"),
        (re.compile(r"\d"), "a digit"),
        (re.compile(r"[^\da-zA-Z]"), "a special character"),
    )

    def validate(self, password, user=None):
        missing = [label for pattern, label in self.checks if not pattern.search(password or "")]
        if missing:
            raise ValidationError(
                "Password must contain %(missing)s.",
                code="password_too_simple",
                params={"missing": ", ".join(missing)},
            )

    def get_help_text(self):
        return "Your password must contain an uppercase letter, a lowercase letter, a digit and a special character."
