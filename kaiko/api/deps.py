from __future__ import annotations

from collections.abc import Generator

from fastapi import Header, Request
from jose import jwt
from jose.exceptions import JWTError
from sqlalchemy.orm import Session

from kaiko.core.errors import Forbidden, Unauthorized
from kaiko.core.settings import settings

PRIVY_ISSUER = "privy.io"


def get_db(request: Request) -> Generator[Session, None, None]:
    db = request.app.state.session_factory()
    try:
        yield db
    finally:
        db.close()


def get_verified_identity(authorization: str | None = Header(default=None)) -> str | None:
    """Privy user id from the Bearer token, or None when Privy isn't configured."""
    # Dev fallback until Privy is configured: trust the identity in the request.
    privy_configured = bool(settings.PRIVY_APP_ID and settings.PRIVY_VERIFICATION_KEY)
    if not privy_configured:
        return None

    # Privy is configured: require a real Bearer token.
    if not authorization:
        raise Unauthorized("Missing Authorization header")

    parts = authorization.split()
    if len(parts) != 2 or parts[0].lower() != "bearer":
        raise Unauthorized("Invalid Authorization header")

    try:
        payload = jwt.decode(
            parts[1],
            settings.PRIVY_VERIFICATION_KEY,
            algorithms=["ES256"],
            audience=settings.PRIVY_APP_ID,
            issuer=PRIVY_ISSUER,
        )
    except JWTError:
        raise Unauthorized("Invalid token")

    sub = payload.get("sub")
    if not sub:
        raise Unauthorized("Token missing sub")
    return str(sub)


def ensure_identity(verified: str | None, identity_id: str) -> None:
    if verified is not None and verified != identity_id:
        raise Forbidden("Not allowed")
