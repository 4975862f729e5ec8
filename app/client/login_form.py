"""
Login form for panel clients: field validation, the remembered-username
preference, and mapping of login failures to form field errors.
"""

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ValidationError, field_validator
from pydantic_core import PydanticCustomError

from app.client.panel import PanelApiError, PanelClient

logger = logging.getLogger(__name__)

# Fixed key the preference is stored under in the local preferences file.
REMEMBER_KEY = "service-panel-login-form-remember"
GENERIC_ERROR_MESSAGE = "An error occured"


class LoginForm(BaseModel):
    username: str
    password: str
    remember_me: bool = True

    @field_validator("username")
    @classmethod
    def validate_username(cls, v: str) -> str:
        if len(v) < 2:
            raise PydanticCustomError("too_short", "Username must be at least 2 characters.")
        return v

    @field_validator("password")
    @classmethod
    def validate_password(cls, v: str) -> str:
        if len(v) < 6:
            raise PydanticCustomError("too_short", "Password must be at least 6 characters.")
        return v


class RememberedLogin(BaseModel):
    """What is kept between runs. Never the password."""

    username: str
    remember_me: bool


class RememberStore:
    """JSON preferences file; the login preference lives under REMEMBER_KEY."""

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)

    def _read_all(self) -> dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError):
            logger.warning("Ignoring unreadable preferences file", extra={"path": str(self.path)})
            return {}
        return data if isinstance(data, dict) else {}

    def load(self) -> RememberedLogin | None:
        value = self._read_all().get(REMEMBER_KEY)
        if value is None:
            return None
        try:
            return RememberedLogin.model_validate(value)
        except ValidationError:
            return None

    def save(self, value: RememberedLogin | None) -> None:
        data = self._read_all()
        data[REMEMBER_KEY] = value.model_dump() if value is not None else None
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(data, indent=2), encoding="utf-8")


def initial_form_values(store: RememberStore) -> dict[str, Any]:
    """Values to prefill the form with: remembered username, empty password."""
    remembered = store.load()
    return {
        "username": remembered.username if remembered else "",
        "password": "",
        "remember_me": remembered.remember_me if remembered else True,
    }


@dataclass
class LoginResult:
    ok: bool
    errors: dict[str, str] = field(default_factory=dict)


def _field_errors(exc: ValidationError) -> dict[str, str]:
    errors: dict[str, str] = {}
    for err in exc.errors():
        name = str(err["loc"][0]) if err["loc"] else "form"
        errors.setdefault(name, err["msg"])
    return errors


async def submit_login(
    values: dict[str, Any],
    client: PanelClient,
    store: RememberStore,
) -> LoginResult:
    """
    Validate the form, store or forget the remembered username, then log in.

    Errors from the panel are shown on the password field with the panel's
    message; anything else shows a generic message there. Both are logged.
    """
    try:
        form = LoginForm.model_validate(values)
    except ValidationError as e:
        return LoginResult(ok=False, errors=_field_errors(e))

    if form.remember_me:
        store.save(RememberedLogin(username=form.username, remember_me=True))
    else:
        store.save(None)

    try:
        await client.login(form.username, form.password)
    except PanelApiError as e:
        logger.error("Login failed", extra={"status_code": e.status_code, "code": e.code})
        return LoginResult(ok=False, errors={"password": e.message})
    except Exception:
        logger.exception("Login failed with an unexpected error")
        return LoginResult(ok=False, errors={"password": GENERIC_ERROR_MESSAGE})
    return LoginResult(ok=True)
