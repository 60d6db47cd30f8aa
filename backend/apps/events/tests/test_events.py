from __future__ import annotations

from django.core.cache import cache
from django.test import TestCase
from rest_framework.test import APIClient

from apps.challenges.tests.helpers import make_challenge, make_event, make_team, make_user
from apps.core.models import TeamMember
from apps.events.models import Event, EventTeam


class EventApiTests(TestCase):
    def setUp(self):
        cache.clear()
        self.alice = make_user("alice")
        self.bob = make_user("bob")
        self.mallory = make_user("mallory")
        self.team = make_team("alpha", self.alice, self.bob)
        self.client = APIClient()
        self.client.force_authenticate(self.alice)

    def test_create_event_hides_api_key(self):
        r = self.client.post(
            "/api/v1/events",
            {
                "name": "Spring CTF",
                "startDate": "2026-03-01T10:00:00Z",
                "endDate": "2026-03-03T10:00:00Z",
                "ctfdUrl": "https://ctf.example.com",
                "ctfdApiKey": "secret-key",
            },
            format="json",
        )
        self.assertEqual(r.status_code, 201)
        self.assertNotIn("ctfdApiKey", r.data["data"])
        self.assertEqual(Event.objects.get(id=r.data["data"]["id"]).ctfd_api_key, "secret-key")

    def test_end_before_start_rejected(self):
        r = self.client.post(
            "/api/v1/events",
            {"name": "Backwards", "startDate": "2026-03-03T10:00:00Z", "endDate": "2026-03-01T10:00:00Z"},
            format="json",
        )
        self.assertEqual(r.status_code, 400)
        self.assertIn("endDate", r.data["error"]["details"])

    def test_list_only_events_of_my_teams(self):
        mine = make_event("mine", self.team)
        make_event("theirs", make_team("beta", self.mallory))
        r = self.client.get("/api/v1/events")
        self.assertEqual([e["id"] for e in r.data["data"]], [mine.id])

    def test_detail_requires_participation(self):
        event = make_event("E1", self.team)
        make_challenge(event, self.team)
        r = self.client.get(f"/api/v1/events/{event.id}")
        self.assertEqual(r.status_code, 200)
        self.assertEqual(r.data["data"]["teams"][0]["name"], "alpha")
        self.assertEqual(len(r.data["data"]["challenges"]), 1)

        mallory = APIClient()
        mallory.force_authenticate(self.mallory)
        self.assertEqual(mallory.get(f"/api/v1/events/{event.id}").status_code, 403)
        self.assertEqual(self.client.get("/api/v1/events/999999").status_code, 404)

    def test_attach_team_owner_only(self):
        event = make_event("E1")
        url = f"/api/v1/events/{event.id}/teams/attach"

        bob = APIClient()
        bob.force_authenticate(self.bob)
        self.assertEqual(bob.post(url, {"teamId": self.team.id}, format="json").status_code, 403)

        r = self.client.post(url, {"teamId": self.team.id}, format="json")
        self.assertEqual(r.status_code, 201)
        self.assertTrue(EventTeam.objects.filter(event=event, team=self.team).exists())

        r = self.client.post(url, {"teamId": self.team.id}, format="json")
        self.assertEqual(r.status_code, 409)

    def test_create_team_for_event(self):
        event = make_event("E1")
        r = self.client.post(f"/api/v1/events/{event.id}/teams", {"name": "event squad"}, format="json")
        self.assertEqual(r.status_code, 201)
        team_id = r.data["data"]["id"]
        self.assertTrue(EventTeam.objects.filter(event=event, team_id=team_id).exists())
        self.assertEqual(TeamMember.objects.get(team_id=team_id, user=self.alice).role, TeamMember.ROLE_OWNER)

        r = self.client.get(f"/api/v1/events/{event.id}/teams")
        self.assertEqual([t["id"] for t in r.data["data"]], [team_id])

    def test_create_team_for_missing_event(self):
        r = self.client.post("/api/v1/events/999999/teams", {"name": "ghosts"}, format="json")
        self.assertEqual(r.status_code, 404)
