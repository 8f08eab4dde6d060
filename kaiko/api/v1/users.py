from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel
from sqlalchemy.orm import Session

from kaiko.api.deps import ensure_identity, get_db, get_verified_identity
from kaiko.core.errors import ValidationError
from kaiko.core.settings import settings
from kaiko.schemas import (
    UserConfirmOut,
    UserCreatedOut,
    UserCreateIn,
    UserFetchOut,
    UserOut,
)
from kaiko.services import hub, users

router = APIRouter()

INTENT_CONFIRM = "confirm"
INTENT_FETCH_USER = "fetch-user"
INTENT_FETCH_HUB_DATA = "fetch-hub-data"

FETCH_RESPONSES = {
    200: {"description": "UserConfirmOut, UserFetchOut or HubDataOut, depending on intent"},
}


def _render(out: BaseModel) -> dict:
    # The shape depends on intent, so there is no single response_model;
    # hub chats serialize as lastMessage/unreadCount.
    return out.model_dump(mode="json", by_alias=True)


@router.post("/users", response_model=UserCreatedOut, status_code=201)
def create_user(
    payload: UserCreateIn,
    db: Session = Depends(get_db),
    verified_id: str | None = Depends(get_verified_identity),
):
    if payload.privy_id:
        ensure_identity(verified_id, payload.privy_id.strip())
    user = users.create_user(db, payload)
    return UserCreatedOut(user=UserOut.model_validate(user))


@router.get("/users", responses=FETCH_RESPONSES)
def fetch_user(
    privy_id_param: str | None = Query(default=None, alias="privyId"),
    # The hub screen sends snake_case.
    privy_id: str | None = Query(default=None),
    intent: str | None = Query(default=None),
    db: Session = Depends(get_db),
    verified_id: str | None = Depends(get_verified_identity),
):
    identity_id = (privy_id_param or privy_id or "").strip()
    if not identity_id:
        raise ValidationError("Missing privyId")

    intent = intent or INTENT_FETCH_USER
    if intent not in (INTENT_CONFIRM, INTENT_FETCH_USER, INTENT_FETCH_HUB_DATA):
        raise ValidationError("Invalid intent")

    ensure_identity(verified_id, identity_id)

    if intent == INTENT_CONFIRM:
        exists, user = users.confirm_user(db, identity_id)
        return _render(UserConfirmOut(exists=exists, user=UserOut.model_validate(user) if user else None))

    if intent == INTENT_FETCH_USER:
        return _render(UserFetchOut(user=UserOut.model_validate(users.fetch_user(db, identity_id))))

    hub_data = hub.fetch_hub_data(
        db,
        identity_id,
        recent_sessions_limit=settings.HUB_RECENT_SESSIONS_LIMIT,
        count_never_read=settings.HUB_COUNT_UNREAD_WHEN_NEVER_READ,
    )
    return _render(hub_data)


# Backwards compatible aliases for the original /api/users/{create,fetch} routes.
@router.post("/users/create", response_model=UserCreatedOut, status_code=201)
def create_user_legacy(
    payload: UserCreateIn,
    db: Session = Depends(get_db),
    verified_id: str | None = Depends(get_verified_identity),
):
    return create_user(payload, db, verified_id)


@router.get("/users/fetch", responses=FETCH_RESPONSES)
def fetch_user_legacy(
    privy_id_param: str | None = Query(default=None, alias="privyId"),
    privy_id: str | None = Query(default=None),
    intent: str | None = Query(default=None),
    db: Session = Depends(get_db),
    verified_id: str | None = Depends(get_verified_identity),
):
    return fetch_user(privy_id_param, privy_id, intent, db, verified_id)
