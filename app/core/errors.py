"""Typed errors raised by services and rendered by the API exception handler."""


class PanelError(Exception):
    """Base error surfaced to API callers with a stable code and HTTP status."""

    code = "INTERNAL_SERVER_ERROR"
    status_code = 500

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class BadRequestError(PanelError):
    """A required identifier or field is missing from the payload."""

    code = "BAD_REQUEST"
    status_code = 400


class UnauthorizedError(PanelError):
    """Bad credentials, invalid or expired session, or invalid access token."""

    code = "UNAUTHORIZED"
    status_code = 401


class ForbiddenError(PanelError):
    """Authenticated, but not permitted to act on this row or action."""

    code = "FORBIDDEN"
    status_code = 403


class NotFoundError(PanelError):
    code = "NOT_FOUND"
    status_code = 404


class InvalidSessionError(UnauthorizedError):
    """The session cookie names no live session; the response also clears the cookie."""
