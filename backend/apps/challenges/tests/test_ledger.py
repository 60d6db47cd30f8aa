from __future__ import annotations

from datetime import timedelta

from django.core.cache import cache
from django.test import TestCase
from django.utils import timezone
from rest_framework.test import APIClient

from apps.challenges import ledger
from apps.challenges.models import FlagAttempt, FlagAttemptError
from apps.core.exceptions import ForbiddenError, NotFoundError

from .helpers import make_challenge, make_event, make_team, make_user


class LedgerServiceTests(TestCase):
    def setUp(self):
        self.alice = make_user("alice")
        self.bob = make_user("bob")
        self.mallory = make_user("mallory")
        self.team = make_team("alpha", self.alice, self.bob)
        self.event = make_event("E1", self.team)
        self.challenge = make_challenge(self.event, self.team)

    def test_record_attempt_inserts_one_row(self):
        attempt = ledger.record_attempt("flag{x}", False, self.bob, self.challenge.id, comment="first try")
        self.assertEqual(FlagAttempt.objects.count(), 1)
        self.assertEqual(attempt.comment, "first try")
        self.assertFalse(attempt.is_success)
        self.assertEqual(attempt.user, self.bob)

    def test_record_attempt_requires_existing_challenge(self):
        with self.assertRaises(NotFoundError):
            ledger.record_attempt("flag{x}", False, self.alice, 999999)
        self.assertFalse(FlagAttempt.objects.exists())

    def test_record_attempt_requires_membership(self):
        with self.assertRaises(ForbiddenError):
            ledger.record_attempt("flag{x}", True, self.mallory, self.challenge.id)
        self.assertFalse(FlagAttempt.objects.exists())

    def test_list_attempts_newest_first(self):
        first = ledger.record_attempt("a", False, self.alice, self.challenge.id)
        second = ledger.record_attempt("b", False, self.bob, self.challenge.id)
        self.assertEqual(list(ledger.list_attempts(self.challenge.id, self.alice)), [second, first])

    def test_list_attempts_event_guard(self):
        other_event = make_event("E2", self.team)
        with self.assertRaises(NotFoundError):
            ledger.list_attempts(self.challenge.id, self.alice, event_id=other_event.id)

    def test_get_attempt_walks_to_team(self):
        attempt = ledger.record_attempt("a", False, self.alice, self.challenge.id)
        self.assertEqual(ledger.get_attempt(attempt.id, self.bob), attempt)
        with self.assertRaises(ForbiddenError):
            ledger.get_attempt(attempt.id, self.mallory)
        with self.assertRaises(NotFoundError):
            ledger.get_attempt(999999, self.alice)

    def test_get_attempt_under_wrong_challenge(self):
        other = make_challenge(self.event, self.team, name="other")
        attempt = ledger.record_attempt("a", False, self.alice, self.challenge.id)
        with self.assertRaises(NotFoundError):
            ledger.get_attempt(attempt.id, self.alice, challenge_id=other.id)

    def test_annotate_overwrites_comment_only(self):
        attempt = ledger.record_attempt("flag{decoy}", True, self.alice, self.challenge.id)
        ledger.annotate_attempt(attempt.id, "looked right", self.bob)
        ledger.annotate_attempt(attempt.id, "this flag was a decoy", self.alice)
        attempt.refresh_from_db()
        self.assertEqual(attempt.comment, "this flag was a decoy")
        self.assertEqual(attempt.flag_value, "flag{decoy}")
        self.assertTrue(attempt.is_success)
        self.assertEqual(attempt.user, self.alice)

    def test_rows_are_append_only(self):
        attempt = ledger.record_attempt("a", False, self.alice, self.challenge.id)
        attempt.is_success = True
        with self.assertRaises(FlagAttemptError):
            attempt.save()
        with self.assertRaises(FlagAttemptError):
            attempt.save(update_fields=["is_success", "comment"])
        attempt.refresh_from_db()
        self.assertFalse(attempt.is_success)


class FlagAttemptApiTests(TestCase):
    def setUp(self):
        cache.clear()
        self.alice = make_user("alice")
        self.bob = make_user("bob")
        self.mallory = make_user("mallory")
        self.team = make_team("alpha", self.alice, self.bob)
        self.event = make_event("E1", self.team)
        self.challenge = make_challenge(self.event, self.team)
        self.base = f"/api/v1/events/{self.event.id}/challenges/{self.challenge.id}/flagAttempts"

        self.client = APIClient()
        self.client.force_authenticate(self.alice)
        self.mallory_client = APIClient()
        self.mallory_client.force_authenticate(self.mallory)

    def _attempt(self, user, value, success=False, created_at=None):
        attempt = ledger.record_attempt(value, success, user, self.challenge.id)
        if created_at is not None:
            FlagAttempt.objects.filter(id=attempt.id).update(created_at=created_at)
        return attempt

    def test_list_includes_public_profile(self):
        self._attempt(self.bob, "flag{one}")
        r = self.client.get(self.base)
        self.assertEqual(r.status_code, 200)
        item = r.data["data"][0]
        self.assertEqual(item["flagValue"], "flag{one}")
        self.assertFalse(item["isSuccess"])
        self.assertEqual(item["user"], {"id": self.bob.id, "username": "bob", "avatar": ""})
        self.assertNotIn("pagination", r.data["meta"])

    def test_list_is_newest_first(self):
        now = timezone.now()
        old = self._attempt(self.alice, "old", created_at=now - timedelta(hours=2))
        new = self._attempt(self.alice, "new", created_at=now)
        r = self.client.get(self.base)
        self.assertEqual([a["id"] for a in r.data["data"]], [new.id, old.id])

    def test_filters(self):
        now = timezone.now()
        self._attempt(self.alice, "a", success=False, created_at=now - timedelta(days=2))
        self._attempt(self.bob, "b", success=False, created_at=now - timedelta(minutes=5))
        winner = self._attempt(self.bob, "c", success=True, created_at=now)

        r = self.client.get(self.base, {"isSuccess": "true"})
        self.assertEqual([a["id"] for a in r.data["data"]], [winner.id])

        r = self.client.get(self.base, {"userId": self.bob.id})
        self.assertEqual(len(r.data["data"]), 2)

        since = (now - timedelta(hours=1)).isoformat()
        r = self.client.get(self.base, {"since": since})
        self.assertEqual(len(r.data["data"]), 2)

    def test_invalid_filter_is_validation_error(self):
        r = self.client.get(self.base, {"since": "not-a-date"})
        self.assertEqual(r.status_code, 400)
        self.assertEqual(r.data["error"]["code"], "VALIDATION_ERROR")

    def test_pagination(self):
        for i in range(5):
            self._attempt(self.alice, f"flag{{{i}}}")
        r = self.client.get(self.base, {"page": 2, "limit": 2})
        self.assertEqual(r.status_code, 200)
        self.assertEqual(len(r.data["data"]), 2)
        self.assertEqual(r.data["meta"]["pagination"], {"page": 2, "limit": 2, "total": 5, "totalPages": 3})

    def test_detail_and_comment(self):
        attempt = self._attempt(self.bob, "flag{x}")
        r = self.client.get(f"{self.base}/{attempt.id}")
        self.assertEqual(r.status_code, 200)
        self.assertEqual(r.data["data"]["id"], attempt.id)

        r = self.client.post(f"{self.base}/{attempt.id}/comment", {"comment": "first"}, format="json")
        self.assertEqual(r.status_code, 200)
        r = self.client.post(f"{self.base}/{attempt.id}/comment", {"comment": "second"}, format="json")
        self.assertEqual(r.data["data"]["comment"], "second")
        attempt.refresh_from_db()
        self.assertEqual(attempt.comment, "second")
        self.assertEqual(attempt.flag_value, "flag{x}")

    def test_empty_comment_rejected(self):
        attempt = self._attempt(self.bob, "flag{x}")
        r = self.client.post(f"{self.base}/{attempt.id}/comment", {"comment": ""}, format="json")
        self.assertEqual(r.status_code, 400)

    def test_attempt_under_other_challenge_is_not_found(self):
        other = make_challenge(self.event, self.team, name="other")
        attempt = ledger.record_attempt("x", False, self.alice, other.id)
        r = self.client.get(f"{self.base}/{attempt.id}")
        self.assertEqual(r.status_code, 404)

    def test_non_member_forbidden_everywhere(self):
        attempt = self._attempt(self.bob, "flag{x}")
        self.assertEqual(self.mallory_client.get(self.base).status_code, 403)
        self.assertEqual(self.mallory_client.get(f"{self.base}/{attempt.id}").status_code, 403)
        r = self.mallory_client.post(f"{self.base}/{attempt.id}/comment", {"comment": "mine"}, format="json")
        self.assertEqual(r.status_code, 403)
        attempt.refresh_from_db()
        self.assertIsNone(attempt.comment)

    def test_cross_event_list_is_not_found(self):
        other_event = make_event("E2", self.team)
        r = self.client.get(f"/api/v1/events/{other_event.id}/challenges/{self.challenge.id}/flagAttempts")
        self.assertEqual(r.status_code, 404)
