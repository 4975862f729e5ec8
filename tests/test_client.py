"""Unit tests for app.client: the panel HTTP client and the login form flow."""

import asyncio
import json
import tempfile
import unittest
from pathlib import Path

import httpx

from app.client.login_form import (
    GENERIC_ERROR_MESSAGE,
    REMEMBER_KEY,
    RememberedLogin,
    RememberStore,
    initial_form_values,
    submit_login,
)
from app.client.panel import PanelApiError, PanelClient


def _client(handler) -> PanelClient:
    return PanelClient("http://panel.test", transport=httpx.MockTransport(handler))


class StoreTestCase(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.store = RememberStore(Path(self._tmp.name) / "prefs.json")

    def tearDown(self) -> None:
        self._tmp.cleanup()


class TestRememberStore(StoreTestCase):
    def test_defaults_without_saved_preference(self) -> None:
        self.assertEqual(
            initial_form_values(self.store),
            {"username": "", "password": "", "remember_me": True},
        )

    def test_saved_preference_prefills_username_only(self) -> None:
        self.store.save(RememberedLogin(username="alice", remember_me=True))
        values = initial_form_values(self.store)
        self.assertEqual(values["username"], "alice")
        self.assertEqual(values["password"], "")
        saved = json.loads(self.store.path.read_text(encoding="utf-8"))
        self.assertEqual(saved[REMEMBER_KEY], {"username": "alice", "remember_me": True})

    def test_unreadable_file_is_ignored(self) -> None:
        self.store.path.write_text("{not json", encoding="utf-8")
        self.assertIsNone(self.store.load())


class TestSubmitLogin(StoreTestCase):
    def test_field_validation_messages(self) -> None:
        client = _client(lambda request: httpx.Response(200, json={}))
        result = asyncio.run(
            submit_login({"username": "a", "password": "123", "remember_me": True}, client, self.store)
        )
        self.assertFalse(result.ok)
        self.assertEqual(result.errors["username"], "Username must be at least 2 characters.")
        self.assertEqual(result.errors["password"], "Password must be at least 6 characters.")

    def test_success_remembers_username_but_not_password(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            self.assertEqual(request.url.path, "/api/v1/user/login")
            return httpx.Response(200, json={"user_id": "u-1", "username": "alice"})

        result = asyncio.run(
            submit_login(
                {"username": "alice", "password": "secret-pass", "remember_me": True},
                _client(handler),
                self.store,
            )
        )
        self.assertTrue(result.ok)
        self.assertNotIn("secret-pass", self.store.path.read_text(encoding="utf-8"))
        self.assertEqual(self.store.load().username, "alice")

    def test_unchecked_remember_me_forgets_username(self) -> None:
        self.store.save(RememberedLogin(username="alice", remember_me=True))
        client = _client(lambda request: httpx.Response(200, json={}))
        asyncio.run(
            submit_login(
                {"username": "alice", "password": "secret-pass", "remember_me": False},
                client,
                self.store,
            )
        )
        self.assertIsNone(self.store.load())

    def test_api_error_message_shown_on_password_field(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(
                401, json={"code": "UNAUTHORIZED", "detail": "Wrong username or password"}
            )

        result = asyncio.run(
            submit_login(
                {"username": "alice", "password": "bad-pass", "remember_me": True},
                _client(handler),
                self.store,
            )
        )
        self.assertEqual(result.errors, {"password": "Wrong username or password"})

    def test_unexpected_error_shows_generic_message(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, content=b"not json")

        result = asyncio.run(
            submit_login(
                {"username": "alice", "password": "secret-pass", "remember_me": True},
                _client(handler),
                self.store,
            )
        )
        self.assertEqual(result.errors, {"password": GENERIC_ERROR_MESSAGE})


class TestVerifyUserAbilityClient(unittest.TestCase):
    def test_posts_token_and_ips(self) -> None:
        seen: dict = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen.update(json.loads(request.content))
            return httpx.Response(200, json={"user_id": "u-9"})

        async def run() -> str:
            async with _client(handler) as panel:
                return await panel.verify_user_ability("i-1", "tok", request_ip="10.0.0.1")

        self.assertEqual(asyncio.run(run()), "u-9")
        self.assertEqual(
            seen,
            {"instance_id": "i-1", "user_token": "tok", "request_ip": "10.0.0.1", "user_ip": None},
        )

    def test_forbidden_raises_with_code(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(403, json={"code": "FORBIDDEN", "detail": "nope"})

        async def run() -> None:
            async with _client(handler) as panel:
                await panel.verify_user_ability("i-1", "tok")

        with self.assertRaises(PanelApiError) as ctx:
            asyncio.run(run())
        self.assertEqual(ctx.exception.status_code, 403)
        self.assertEqual(ctx.exception.code, "FORBIDDEN")

    def test_connection_error_is_wrapped(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        async def run() -> None:
            async with _client(handler) as panel:
                await panel.logout()

        with self.assertRaises(PanelApiError) as ctx:
            asyncio.run(run())
        self.assertEqual(ctx.exception.message, "Panel unreachable")


if __name__ == "__main__":
    unittest.main()
