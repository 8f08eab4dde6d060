import logging

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from kaiko.core.errors import Conflict, NotFound, StoreError, UserCreateFailed, ValidationError
from kaiko.models.user import User
from kaiko.schemas import UserCreateIn

logger = logging.getLogger(__name__)

DEFAULT_AVATAR_TYPE = "default"


def find_user(db: Session, identity_id: str) -> User | None:
    try:
        return db.execute(select(User).where(User.privy_id == identity_id)).scalars().one_or_none()
    except SQLAlchemyError as e:
        logger.exception("User lookup failed for %s", identity_id)
        raise StoreError(str(e)) from e


def confirm_user(db: Session, identity_id: str) -> tuple[bool, User | None]:
    user = find_user(db, identity_id)
    return user is not None, user


def fetch_user(db: Session, identity_id: str) -> User:
    user = find_user(db, identity_id)
    if not user:
        raise NotFound("User not found")
    return user


def create_user(db: Session, payload: UserCreateIn) -> User:
    email = payload.email_address or ""
    username = (payload.username or "").strip()
    privy_id = (payload.privy_id or "").strip()
    if not email.strip() or not username or not privy_id:
        raise ValidationError("Missing required fields: email_address, username, privy_id")

    # Fast path only; the unique constraint on users.privy_id is what actually
    # keeps concurrent signups from creating two rows.
    if find_user(db, privy_id):
        raise Conflict("User already exists")

    user = User(
        privy_id=privy_id,
        email_address=email,
        username=username,
        bio=payload.bio or None,
        avatar_type=payload.avatar_type or DEFAULT_AVATAR_TYPE,
        avatar=payload.avatar,
        wallet_address=payload.wallet_address,
    )
    db.add(user)

    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise Conflict("User already exists or username is taken")
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception("Failed to create user %s", privy_id)
        raise UserCreateFailed(str(e)) from e

    db.refresh(user)
    logger.info("Created user %s (%s)", user.id, user.privy_id)
    return user
