from django.test import TestCase

from .directory import UserDirectory, UserRef
from .models import User


class UserModelTestCase(TestCase):
    def test_default_role_is_tenant(self):
        user = User.objects.create(user_id="u1", user_name="Tove Tenant")
        self.assertEqual(user.role, User.ROLE_TENANT)
        self.assertEqual(str(user), "Tove Tenant (u1)")


class UserDirectoryTestCase(TestCase):
    def setUp(self):
        User.objects.create(user_id="tenant-1", user_name="Tove Tenant", role=User.ROLE_TENANT)
        User.objects.create(user_id="owner-1", user_name="Olle Owner", role=User.ROLE_LANDLORD)
        self.directory = UserDirectory()

    def test_get_user(self):
        self.assertEqual(
            self.directory.get_user("owner-1"),
            UserRef(user_id="owner-1", name="Olle Owner", role="landlord"),
        )

    def test_missing_user(self):
        self.assertIsNone(self.directory.get_user("ghost"))

    def test_get_users_skips_missing(self):
        users = self.directory.get_users(["tenant-1", "owner-1", "ghost"])

        self.assertEqual(set(users), {"tenant-1", "owner-1"})
        self.assertEqual(users["tenant-1"].name, "Tove Tenant")

    def test_get_users_without_ids(self):
        with self.assertNumQueries(0):
            self.assertEqual(self.directory.get_users([]), {})
