from __future__ import annotations

from io import StringIO

from django.contrib.auth import get_user_model
from django.core.management import call_command
from django.core.management.base import CommandError
from django.test import TestCase

User = get_user_model()


class CreateAdminCommandTests(TestCase):
    def test_creates_platform_admin(self):
        out = StringIO()
        call_command("create_admin", username="root", email="root@example.com", password="Str0ng!Passw0rd#", stdout=out)
        user = User.objects.get(username="root")
        self.assertEqual(user.role, User.ROLE_ADMIN)
        self.assertTrue(user.is_staff)
        self.assertTrue(user.check_password("Str0ng!Passw0rd#"))
        self.assertIn("Created admin", out.getvalue())

    def test_promotes_existing_user(self):
        User.objects.create_user(username="root", email="old@example.com", password="x")
        call_command("create_admin", username="root", email="root@example.com", password="Str0ng!Passw0rd#", stdout=StringIO())
        user = User.objects.get(username="root")
        self.assertEqual(user.role, User.ROLE_ADMIN)
        self.assertEqual(user.email, "root@example.com")

    def test_rejects_weak_password(self):
        with self.assertRaises(CommandError):
            call_command("create_admin", username="root", email="root@example.com", password="short", stdout=StringIO())
        self.assertFalse(User.objects.filter(username="root").exists())
