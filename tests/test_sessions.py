"""Tests for app.core.sessions against an in-memory database: lifecycle and sliding expiry."""

import unittest
from datetime import datetime, timedelta, timezone

from fastapi import Response

from app.core.config import settings
from app.core.sessions import (
    clear_session_cookie,
    create_session,
    delete_expired_sessions,
    invalidate_session,
    set_session_cookie,
    validate_session,
)
from app.models import UserSession
from tests.support import add_user, make_session_factory


class SessionTestCase(unittest.TestCase):
    def setUp(self) -> None:
        self.Session = make_session_factory()
        self.db = self.Session()
        self.user = add_user(self.db, "carol")

    def tearDown(self) -> None:
        self.db.close()

    def _set_expiry(self, session_id: str, expires_at: datetime) -> None:
        row = self.db.get(UserSession, session_id)
        row.expires_at = expires_at
        self.db.commit()


class TestCreateAndValidate(SessionTestCase):
    def test_created_session_is_valid(self) -> None:
        session = create_session(self.db, self.user.id, current_ip="10.0.0.1")
        result = validate_session(self.db, session.id)
        self.assertIsNotNone(result.session)
        self.assertEqual(result.session.user_id, self.user.id)
        self.assertEqual(result.session.current_ip, "10.0.0.1")
        self.assertFalse(result.fresh)

    def test_unknown_session_is_invalid(self) -> None:
        result = validate_session(self.db, "no-such-session")
        self.assertIsNone(result.session)

    def test_expired_session_is_invalid_and_removed(self) -> None:
        session = create_session(self.db, self.user.id)
        self._set_expiry(session.id, datetime.now(timezone.utc) - timedelta(minutes=1))
        result = validate_session(self.db, session.id)
        self.assertIsNone(result.session)
        self.assertIsNone(self.db.get(UserSession, session.id))

    def test_session_near_expiry_is_extended(self) -> None:
        session = create_session(self.db, self.user.id)
        self._set_expiry(session.id, datetime.now(timezone.utc) + timedelta(hours=1))
        result = validate_session(self.db, session.id)
        self.assertTrue(result.fresh)
        expires_at = result.session.expires_at
        if expires_at.tzinfo is None:
            expires_at = expires_at.replace(tzinfo=timezone.utc)
        self.assertGreater(
            expires_at,
            datetime.now(timezone.utc) + timedelta(hours=settings.SESSION_EXPIRE_HOURS - 1),
        )


class TestInvalidate(SessionTestCase):
    def test_invalidate_removes_session(self) -> None:
        session_id = create_session(self.db, self.user.id).id
        invalidate_session(self.db, session_id)
        self.assertIsNone(validate_session(self.db, session_id).session)

    def test_invalidate_twice_does_not_raise(self) -> None:
        session_id = create_session(self.db, self.user.id).id
        invalidate_session(self.db, session_id)
        invalidate_session(self.db, session_id)
        self.assertEqual(self.db.query(UserSession).filter(UserSession.id == session_id).count(), 0)

    def test_delete_expired_sessions_keeps_live_ones(self) -> None:
        live = create_session(self.db, self.user.id)
        dead = create_session(self.db, self.user.id)
        self._set_expiry(dead.id, datetime.now(timezone.utc) - timedelta(hours=1))
        self.assertEqual(delete_expired_sessions(self.db), 1)
        self.assertEqual(delete_expired_sessions(self.db), 0)
        self.assertIsNotNone(self.db.get(UserSession, live.id))


class TestCookies(SessionTestCase):
    def test_session_cookie_attributes(self) -> None:
        session = create_session(self.db, self.user.id)
        response = Response()
        set_session_cookie(response, session)
        header = response.headers["set-cookie"]
        self.assertIn(f"{settings.SESSION_COOKIE_NAME}={session.id}", header)
        self.assertIn("HttpOnly", header)
        self.assertIn("Path=/", header)
        self.assertIn("SameSite=lax", header)

    def test_clear_cookie_expires_immediately(self) -> None:
        response = Response()
        clear_session_cookie(response)
        header = response.headers["set-cookie"]
        self.assertIn(f"{settings.SESSION_COOKIE_NAME}=", header)
        self.assertIn("Max-Age=0", header)


if __name__ == "__main__":
    unittest.main()
