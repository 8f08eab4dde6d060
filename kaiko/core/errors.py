"""
Error taxonomy for the Kaiko API.

Services raise these; ``kaiko.main`` turns them into ``{"error": ...}`` JSON
responses with the matching status code. Server-side failures (5xx) keep the
underlying message for the logs and send callers a generic one.
"""


class KaikoError(Exception):
    status_code: int = 500
    public_message: str | None = None

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    @property
    def client_message(self) -> str:
        return self.public_message or self.message


class ValidationError(KaikoError):
    status_code = 400


class Unauthorized(KaikoError):
    status_code = 401


class Forbidden(KaikoError):
    status_code = 403


class NotFound(KaikoError):
    status_code = 404


class Conflict(KaikoError):
    status_code = 409


class StoreError(KaikoError):
    status_code = 500
    public_message = "Internal server error"


class UserCreateFailed(StoreError):
    public_message = "Failed to create user"


class AggregationFailed(KaikoError):
    """A read inside a multi-step fetch failed; nothing partial is returned."""

    status_code = 500
    public_message = "Failed to fetch hub data"
