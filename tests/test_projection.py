"""Unit tests for privilege-dependent views of users and service instances."""

import unittest
from datetime import datetime, timezone

from app.models import ServiceInstance, User, UserGroup, UserRole
from app.schemas.service_instance import (
    ServiceInstanceAdminView,
    ServiceInstanceUserView,
    project_instance,
    project_instance_with_token,
)
from app.schemas.user import UserAdminView, UserLookup, UserSelfView, project_user


def _user() -> User:
    group = UserGroup(id="g-1", name="staff")
    return User(
        id="u-1",
        username="dana",
        name="Dana",
        email="dana@example.com",
        hashed_password="$2b$04$hash",
        role=UserRole.USER,
        is_active=True,
        group_id="g-1",
        group=group,
        created_at=datetime(2026, 1, 1, tzinfo=timezone.utc),
    )


def _instance() -> ServiceInstance:
    now = datetime(2026, 1, 1, tzinfo=timezone.utc)
    return ServiceInstance(
        id="i-1",
        name="proxy",
        description="Shared proxy",
        type="proxy",
        url="https://proxy.example.com",
        is_enabled=True,
        data={"api_key": "k-123"},
        created_at=now,
        updated_at=now,
    )


class TestProjectUser(unittest.TestCase):
    def test_self_view_hides_admin_fields(self) -> None:
        view = project_user(_user(), "user")
        self.assertIsInstance(view, UserSelfView)
        dumped = view.model_dump()
        self.assertEqual(dumped["username"], "dana")
        for hidden in ("is_active", "group", "group_id", "hashed_password"):
            self.assertNotIn(hidden, dumped)

    def test_admin_view_includes_group_but_not_hash(self) -> None:
        view = project_user(_user(), "admin")
        self.assertIsInstance(view, UserAdminView)
        dumped = view.model_dump()
        self.assertTrue(dumped["is_active"])
        self.assertEqual(dumped["group"], {"id": "g-1", "name": "staff"})
        self.assertNotIn("hashed_password", dumped)


class TestProjectInstance(unittest.TestCase):
    def test_user_view_hides_data_payload(self) -> None:
        view = project_instance(_instance(), "user")
        self.assertIsInstance(view, ServiceInstanceUserView)
        self.assertNotIn("data", view.model_dump())

    def test_admin_view_includes_data_payload(self) -> None:
        view = project_instance(_instance(), "admin")
        self.assertIsInstance(view, ServiceInstanceAdminView)
        self.assertEqual(view.data, {"api_key": "k-123"})

    def test_with_token_is_user_view_plus_token(self) -> None:
        view = project_instance_with_token(_instance(), "tok-1")
        dumped = view.model_dump()
        self.assertEqual(dumped["token"], "tok-1")
        self.assertEqual(dumped["id"], "i-1")
        self.assertNotIn("data", dumped)


class TestUserLookup(unittest.TestCase):
    def test_requires_exactly_one_key(self) -> None:
        with self.assertRaises(ValueError):
            UserLookup()
        with self.assertRaises(ValueError):
            UserLookup(id="u-1", username="dana")
        self.assertEqual(UserLookup(username="dana").username, "dana")


if __name__ == "__main__":
    unittest.main()
