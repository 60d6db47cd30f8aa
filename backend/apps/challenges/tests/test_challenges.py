from __future__ import annotations

from django.core.cache import cache
from django.test import TestCase
from rest_framework.test import APIClient

from apps.challenges.models import Challenge, ChallengeAssignment, FlagAttempt
from apps.content.models import Note

from .helpers import make_challenge, make_event, make_team, make_user


class ChallengeApiTests(TestCase):
    def setUp(self):
        cache.clear()
        self.alice = make_user("alice")
        self.bob = make_user("bob")
        self.mallory = make_user("mallory")
        self.team = make_team("alpha", self.alice, self.bob)
        self.outsider_team = make_team("beta", self.mallory)
        self.event = make_event("E1", self.team)
        self.base = f"/api/v1/events/{self.event.id}/challenges"

        self.client = APIClient()
        self.client.force_authenticate(self.alice)

    def _create(self, client=None, **payload):
        body = {"name": "warmup", "category": "web", "points": 100, "flag": "flag{abc}", "teamId": self.team.id}
        body.update(payload)
        return (client or self.client).post(self.base, body, format="json")

    def test_create_assigns_creator_and_hides_flag(self):
        r = self._create()
        self.assertEqual(r.status_code, 201)
        self.assertNotIn("flag", r.data["data"])
        self.assertTrue(r.data["data"]["hasFlag"])
        challenge = Challenge.objects.get(id=r.data["data"]["id"])
        self.assertEqual(challenge.flag, "flag{abc}")
        self.assertTrue(ChallengeAssignment.objects.filter(challenge=challenge, user=self.alice).exists())

    def test_duplicate_name_in_same_team_and_event(self):
        self._create()
        r = self._create()
        self.assertEqual(r.status_code, 409)
        self.assertEqual(r.data["error"]["code"], "DUPLICATE_RESOURCE")

    def test_same_name_in_other_event_is_allowed(self):
        self._create()
        other_event = make_event("E2", self.team)
        r = self.client.post(
            f"/api/v1/events/{other_event.id}/challenges", {"name": "warmup", "teamId": self.team.id}, format="json"
        )
        self.assertEqual(r.status_code, 201)

    def test_team_must_participate_in_event(self):
        other_team = make_team("gamma", self.alice)
        r = self._create(teamId=other_team.id)
        self.assertEqual(r.status_code, 403)

    def test_non_member_cannot_create(self):
        mallory = APIClient()
        mallory.force_authenticate(self.mallory)
        r = self._create(client=mallory)
        self.assertEqual(r.status_code, 403)

    def test_validation(self):
        self.assertEqual(self._create(name="ab").status_code, 400)
        self.assertEqual(self._create(points=-1).status_code, 400)
        self.assertEqual(self._create(flag="x" * 256).status_code, 400)

    def test_list_is_limited_to_participants(self):
        make_challenge(self.event, self.team, name="b-chal", category="web")
        make_challenge(self.event, self.team, name="a-chal", category="crypto")
        r = self.client.get(self.base)
        self.assertEqual(r.status_code, 200)
        self.assertEqual([c["name"] for c in r.data["data"]], ["a-chal", "b-chal"])

        mallory = APIClient()
        mallory.force_authenticate(self.mallory)
        self.assertEqual(mallory.get(self.base).status_code, 403)

    def test_detail_includes_notes(self):
        challenge = make_challenge(self.event, self.team)
        Note.objects.create(challenge=challenge, user=self.bob, content="try sqlmap")
        r = self.client.get(f"{self.base}/{challenge.id}")
        self.assertEqual(r.status_code, 200)
        self.assertEqual(r.data["data"]["notes"][0]["content"], "try sqlmap")
        self.assertEqual(r.data["data"]["resources"], [])
        self.assertNotIn("flag", r.data["data"])

    def test_detail_cross_event(self):
        challenge = make_challenge(self.event, self.team)
        other_event = make_event("E2", self.team)
        r = self.client.get(f"/api/v1/events/{other_event.id}/challenges/{challenge.id}")
        self.assertEqual(r.status_code, 404)

    def test_assign(self):
        challenge = make_challenge(self.event, self.team)
        url = f"{self.base}/{challenge.id}/assign"
        r = self.client.post(url, {"userId": self.bob.id}, format="json")
        self.assertEqual(r.status_code, 201)
        self.assertEqual(r.data["data"]["user"]["username"], "bob")

        r = self.client.post(url, {"userId": self.bob.id}, format="json")
        self.assertEqual(r.status_code, 409)
        self.assertEqual(r.data["error"]["code"], "USER_ALREADY_ASSIGNED")

    def test_assign_requires_target_membership(self):
        challenge = make_challenge(self.event, self.team)
        r = self.client.post(f"{self.base}/{challenge.id}/assign", {"userId": self.mallory.id}, format="json")
        self.assertEqual(r.status_code, 403)
        r = self.client.post(f"{self.base}/{challenge.id}/assign", {"userId": 999999}, format="json")
        self.assertEqual(r.status_code, 404)

    def test_deleting_challenge_cascades(self):
        challenge = make_challenge(self.event, self.team)
        self.client.post(f"{self.base}/{challenge.id}/solve", {"flag": "nope"}, format="json")
        Note.objects.create(challenge=challenge, user=self.bob, content="n")
        challenge.delete()
        self.assertFalse(Note.objects.exists())
        self.assertFalse(FlagAttempt.objects.exists())
        self.assertFalse(ChallengeAssignment.objects.filter(challenge_id=challenge.id).exists())
