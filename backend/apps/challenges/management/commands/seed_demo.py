from __future__ import annotations

from datetime import timedelta

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand
from django.db import transaction
from django.utils import timezone

from apps.challenges.models import Challenge, ChallengeAssignment
from apps.core.models import Team, TeamMember
from apps.events.models import Event, EventTeam

User = get_user_model()


class Command(BaseCommand):
    help = "Seed demo data: a user, a team, an event and a few challenges."

    def add_arguments(self, parser):
        parser.add_argument("--password", type=str, default="Demo!Passw0rd#", help="Password for the demo user")

    @transaction.atomic
    def handle(self, *args, **options):
        user, created = User.objects.get_or_create(username="demo", defaults={"email": "demo@example.com"})
        if created:
            user.set_password(options["password"])
            user.save()

        team, _ = Team.objects.get_or_create(name="demo-team", defaults={"owner": user})
        TeamMember.objects.get_or_create(user=user, team=team, defaults={"role": TeamMember.ROLE_OWNER})

        now = timezone.now()
        event, _ = Event.objects.get_or_create(
            name="Demo CTF",
            defaults={"start_date": now, "end_date": now + timedelta(days=2), "description": "Practice event."},
        )
        EventTeam.objects.get_or_create(event=event, team=team)

        samples = [
            ("Basic Web", "web", 100, "flag{demo_web}"),
            ("Caesar Salad", "crypto", 150, "flag{demo_crypto}"),
            ("Lost Packets", "forensics", 200, None),
        ]
        for name, category, points, flag in samples:
            chal, chal_created = Challenge.objects.get_or_create(
                name=name,
                team=team,
                event=event,
                defaults={"category": category, "points": points, "flag": flag},
            )
            ChallengeAssignment.objects.get_or_create(challenge=chal, user=user)
            if chal_created:
                self.stdout.write(self.style.SUCCESS(f"Created challenge '{name}'"))
            else:
                self.stdout.write(self.style.WARNING(f"Challenge '{name}' already exists"))

        self.stdout.write(self.style.SUCCESS(f"Seed complete. Invite code: {team.invite_code}"))
