from __future__ import annotations

from django.core.cache import cache
from django.test import TestCase
from django.utils import timezone
from rest_framework.test import APIClient

from apps.challenges.models import FlagAttempt

from .helpers import make_challenge, make_event, make_team, make_user


class SolveFlowTests(TestCase):
    def setUp(self):
        cache.clear()
        self.alice = make_user("alice")
        self.mallory = make_user("mallory")
        self.team = make_team("alpha", self.alice)
        self.other_team = make_team("beta", self.mallory)
        self.event = make_event("E1", self.team, self.other_team)
        self.challenge = make_challenge(self.event, self.team, flag="flag{abc}", points=250)

        self.client = APIClient()
        self.client.force_authenticate(self.alice)

    def _solve(self, flag, client=None, event_id=None, challenge_id=None):
        client = client or self.client
        event_id = event_id or self.event.id
        challenge_id = challenge_id or self.challenge.id
        return client.post(f"/api/v1/events/{event_id}/challenges/{challenge_id}/solve", {"flag": flag}, format="json")

    def test_correct_flag_solves_and_records_success(self):
        before = timezone.now()
        r = self._solve("flag{abc}")
        self.assertEqual(r.status_code, 200)
        self.assertTrue(r.data["success"])
        self.assertEqual(r.data["data"], {"solved": True, "points": 250})

        self.challenge.refresh_from_db()
        self.assertTrue(self.challenge.solved)
        self.assertGreaterEqual(self.challenge.solved_at, before)

        attempts = FlagAttempt.objects.filter(challenge=self.challenge)
        self.assertEqual(attempts.count(), 1)
        self.assertTrue(attempts[0].is_success)
        self.assertEqual(attempts[0].flag_value, "flag{abc}")
        self.assertEqual(attempts[0].user, self.alice)

    def test_incorrect_flag_records_failure_without_solving(self):
        r = self._solve("flag{wrong}")
        self.assertEqual(r.status_code, 400)
        self.assertFalse(r.data["success"])
        self.assertEqual(r.data["error"]["code"], "INCORRECT_FLAG")
        self.assertEqual(r.data["error"]["details"], {"solved": False, "points": 0})

        self.challenge.refresh_from_db()
        self.assertFalse(self.challenge.solved)
        self.assertIsNone(self.challenge.solved_at)
        attempt = FlagAttempt.objects.get(challenge=self.challenge)
        self.assertFalse(attempt.is_success)
        self.assertEqual(attempt.flag_value, "flag{wrong}")

    def test_second_correct_solve_conflicts_but_is_recorded(self):
        self.assertEqual(self._solve("flag{abc}").status_code, 200)
        self.challenge.refresh_from_db()
        first_solved_at = self.challenge.solved_at

        r = self._solve("flag{abc}")
        self.assertEqual(r.status_code, 409)
        self.assertEqual(r.data["error"]["code"], "CHALLENGE_ALREADY_SOLVED")

        self.challenge.refresh_from_db()
        self.assertEqual(self.challenge.solved_at, first_solved_at)
        self.assertEqual(FlagAttempt.objects.filter(challenge=self.challenge).count(), 2)
        self.assertEqual(FlagAttempt.objects.filter(challenge=self.challenge, is_success=True).count(), 2)

    def test_incorrect_flag_on_solved_challenge_conflicts(self):
        self._solve("flag{abc}")
        r = self._solve("flag{nope}")
        self.assertEqual(r.status_code, 409)
        latest = FlagAttempt.objects.filter(challenge=self.challenge).order_by("-id").first()
        self.assertFalse(latest.is_success)

    def test_repeated_solves_transition_once(self):
        codes = [self._solve("flag{abc}").status_code for _ in range(5)]
        self.assertEqual(codes.count(200), 1)
        self.assertEqual(codes.count(409), 4)
        self.assertEqual(FlagAttempt.objects.filter(challenge=self.challenge).count(), 5)

    def test_flag_comparison_is_exact(self):
        for flag in (" flag{abc}", "flag{abc} ", "FLAG{abc}", "flag{ABC}"):
            r = self._solve(flag)
            self.assertEqual(r.status_code, 400, flag)
        self.challenge.refresh_from_db()
        self.assertFalse(self.challenge.solved)
        self.assertEqual(FlagAttempt.objects.filter(challenge=self.challenge, is_success=False).count(), 4)

    def test_challenge_without_flag_never_matches(self):
        for value in (None, ""):
            challenge = make_challenge(self.event, self.team, name=f"noflag-{value!r}", flag=value)
            r = self._solve("anything", challenge_id=challenge.id)
            self.assertEqual(r.status_code, 400)
            challenge.refresh_from_db()
            self.assertFalse(challenge.solved)

    def test_null_points_report_zero(self):
        challenge = make_challenge(self.event, self.team, name="pointless", flag="flag{p}", points=None)
        r = self._solve("flag{p}", challenge_id=challenge.id)
        self.assertEqual(r.status_code, 200)
        self.assertEqual(r.data["data"], {"solved": True, "points": 0})

    def test_cross_event_is_not_found_and_not_recorded(self):
        other_event = make_event("E2", self.team)
        r = self._solve("flag{abc}", event_id=other_event.id)
        self.assertEqual(r.status_code, 404)
        self.assertEqual(r.data["error"]["code"], "RESOURCE_NOT_FOUND")
        self.assertFalse(FlagAttempt.objects.exists())
        self.challenge.refresh_from_db()
        self.assertFalse(self.challenge.solved)

    def test_missing_challenge_and_event(self):
        self.assertEqual(self._solve("flag{abc}", challenge_id=999999).status_code, 404)
        self.assertEqual(self._solve("flag{abc}", event_id=999999).status_code, 404)
        self.assertFalse(FlagAttempt.objects.exists())

    def test_non_member_is_forbidden_and_not_recorded(self):
        mallory = APIClient()
        mallory.force_authenticate(self.mallory)
        for flag in ("flag{abc}", "flag{wrong}"):
            r = self._solve(flag, client=mallory)
            self.assertEqual(r.status_code, 403)
            self.assertEqual(r.data["error"]["code"], "FORBIDDEN_ACTION")
        self.assertFalse(FlagAttempt.objects.exists())
        self.challenge.refresh_from_db()
        self.assertFalse(self.challenge.solved)

    def test_unauthenticated(self):
        r = self._solve("flag{abc}", client=APIClient())
        self.assertEqual(r.status_code, 401)

    def test_empty_flag_is_validation_error(self):
        r = self._solve("")
        self.assertEqual(r.status_code, 400)
        self.assertEqual(r.data["error"]["code"], "VALIDATION_ERROR")
        self.assertFalse(FlagAttempt.objects.exists())

    def test_flag_submit_throttle(self):
        for _ in range(10):
            self.assertEqual(self._solve("flag{nope}").status_code, 400)
        r = self._solve("flag{nope}")
        self.assertEqual(r.status_code, 429)
        self.assertEqual(r.data["error"]["code"], "RATE_LIMITED")
        self.assertEqual(FlagAttempt.objects.count(), 10)
