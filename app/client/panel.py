"""Async HTTP client for the panel API, used by the login form and by service instances."""

import logging
from ipaddress import IPv4Address, IPv6Address
from typing import Any

import httpx

logger = logging.getLogger(__name__)

DEFAULT_API_PREFIX = "/api/v1"


class PanelApiError(Exception):
    """Raised when the panel answers with an error status or cannot be reached."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        code: str | None = None,
        cause: Exception | None = None,
    ) -> None:
        self.message = message
        self.status_code = status_code
        self.code = code
        self.cause = cause
        super().__init__(message)


def _error_message(response: httpx.Response) -> tuple[str, str | None]:
    """Pull (message, code) out of an error response body."""
    try:
        body = response.json()
    except ValueError:
        return (f"Panel returned status {response.status_code}", None)
    if not isinstance(body, dict):
        return (f"Panel returned status {response.status_code}", None)
    detail = body.get("detail")
    if isinstance(detail, list):
        # FastAPI validation errors: list of {"loc", "msg", ...}
        detail = "; ".join(str(item.get("msg", item)) for item in detail if isinstance(item, dict))
    return (str(detail or f"Panel returned status {response.status_code}"), body.get("code"))


class PanelClient:
    """
    Thin wrapper over ``httpx.AsyncClient``. The client keeps the session
    cookie between calls, so ``login`` followed by other calls just works.

    Use as an async context manager::

        async with PanelClient("https://panel.example.com") as panel:
            user_id = await panel.verify_user_ability(instance_id, token)
    """

    def __init__(
        self,
        base_url: str,
        api_prefix: str = DEFAULT_API_PREFIX,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._client = httpx.AsyncClient(
            base_url=base_url.rstrip("/") + api_prefix,
            timeout=httpx.Timeout(timeout),
            transport=transport,
        )

    async def __aenter__(self) -> "PanelClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        try:
            response = await self._client.request(method, path, **kwargs)
        except httpx.TimeoutException as e:
            raise PanelApiError("Panel request timed out", cause=e) from e
        except httpx.TransportError as e:
            raise PanelApiError("Panel unreachable", cause=e) from e
        if response.is_error:
            message, code = _error_message(response)
            raise PanelApiError(message, status_code=response.status_code, code=code)
        return response

    async def login(self, username: str, password: str) -> dict[str, Any]:
        response = await self._request(
            "POST", "/user/login", json={"username": username, "password": password}
        )
        return response.json()

    async def logout(self) -> None:
        await self._request("POST", "/user/logout")

    async def verify_user_ability(
        self,
        instance_id: str,
        user_token: str,
        request_ip: IPv4Address | IPv6Address | str | None = None,
        user_ip: IPv4Address | IPv6Address | str | None = None,
    ) -> str:
        """Resolve a user's access token for this instance to the user id."""
        response = await self._request(
            "POST",
            "/service-instances/verify-user-ability",
            json={
                "instance_id": instance_id,
                "user_token": user_token,
                "request_ip": str(request_ip) if request_ip is not None else None,
                "user_ip": str(user_ip) if user_ip is not None else None,
            },
        )
        return response.json()["user_id"]
