"""
Hub aggregation: everything the hub screen shows for one user.

One call resolves the user, then reads friends, active games, recent game
sessions and chat memberships, and finally enriches every chat with its latest
message and unread count. The enrichment is two batched queries keyed by chat
id rather than a pair of queries per chat.

Any store error after the user lookup fails the whole call with
``AggregationFailed``; callers never see a partial hub.
"""

import logging
from datetime import datetime

from sqlalchemy import and_, case, func, or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, joinedload

from kaiko.core.errors import AggregationFailed
from kaiko.models.chat import Chat, ChatParticipant, Message
from kaiko.models.friendship import FRIENDSHIP_ACCEPTED, Friendship
from kaiko.models.game import Game, GameSession, GameSessionPlayer
from kaiko.models.user import User
from kaiko.schemas import (
    ChatOut,
    FriendOut,
    FriendUserOut,
    GameOut,
    GameSessionOut,
    HubDataOut,
    MessageOut,
    UserOut,
)
from kaiko.services.users import fetch_user

logger = logging.getLogger(__name__)

DEFAULT_RECENT_SESSIONS_LIMIT = 10


def fetch_hub_data(
    db: Session,
    identity_id: str,
    *,
    recent_sessions_limit: int = DEFAULT_RECENT_SESSIONS_LIMIT,
    count_never_read: bool = False,
) -> HubDataOut:
    user = fetch_user(db, identity_id)

    try:
        friends = _friends(db, user.id)
        games = _active_games(db)
        sessions = _recent_sessions(db, user.id, recent_sessions_limit)
        memberships = _chat_memberships(db, user.id)

        chat_ids = [chat.id for chat, _ in memberships]
        last_messages = _last_messages(db, chat_ids)
        unread = _unread_counts(db, user.id, chat_ids, count_never_read=count_never_read)
    except SQLAlchemyError as e:
        logger.error("Hub aggregation failed for user %s: %s", user.id, e)
        raise AggregationFailed(str(e)) from e

    chats = [
        ChatOut(
            id=chat.id,
            name=chat.name,
            type=chat.type,
            created_at=chat.created_at,
            updated_at=chat.updated_at,
            last_read_at=last_read_at,
            last_message=last_messages.get(chat.id),
            unread_count=unread.get(chat.id, 0),
        )
        for chat, last_read_at in memberships
    ]

    return HubDataOut(
        user=UserOut.model_validate(user),
        friends=friends,
        games=games,
        sessions=sessions,
        chats=chats,
    )


def _friends(db: Session, user_id: int) -> list[FriendOut]:
    # Accepted friendships count both ways; join on whichever side isn't us.
    counterpart_id = case(
        (Friendship.requester_id == user_id, Friendship.addressee_id),
        else_=Friendship.requester_id,
    )
    rows = db.execute(
        select(Friendship, User)
        .join(User, User.id == counterpart_id)
        .where(
            Friendship.status == FRIENDSHIP_ACCEPTED,
            or_(Friendship.requester_id == user_id, Friendship.addressee_id == user_id),
        )
        .order_by(Friendship.created_at.desc(), Friendship.id.desc())
    ).all()

    return [
        FriendOut(
            id=f.id,
            status=f.status,
            created_at=f.created_at,
            friend=FriendUserOut.model_validate(other),
        )
        for f, other in rows
    ]


def _active_games(db: Session) -> list[GameOut]:
    rows = db.execute(
        select(Game).where(Game.is_active.is_(True)).order_by(Game.name, Game.id)
    ).scalars().all()
    return [GameOut.model_validate(g) for g in rows]


def _recent_sessions(db: Session, user_id: int, limit: int) -> list[GameSessionOut]:
    rows = db.execute(
        select(GameSession, GameSessionPlayer.joined_at)
        .join(GameSessionPlayer, GameSessionPlayer.session_id == GameSession.id)
        .where(GameSessionPlayer.user_id == user_id)
        .options(joinedload(GameSession.game))
        .order_by(GameSessionPlayer.joined_at.desc(), GameSessionPlayer.id.desc())
        .limit(limit)
    ).all()

    return [
        GameSessionOut(
            id=s.id,
            status=s.status,
            started_at=s.started_at,
            completed_at=s.completed_at,
            joined_at=joined_at,
            game=GameOut.model_validate(s.game),
        )
        for s, joined_at in rows
    ]


def _chat_memberships(db: Session, user_id: int) -> list[tuple[Chat, datetime | None]]:
    rows = db.execute(
        select(Chat, ChatParticipant.last_read_at)
        .join(ChatParticipant, ChatParticipant.chat_id == Chat.id)
        .where(ChatParticipant.user_id == user_id)
        .order_by(Chat.updated_at.desc(), Chat.id.desc())
    ).all()
    return [(chat, last_read_at) for chat, last_read_at in rows]


def _last_messages(db: Session, chat_ids: list[int]) -> dict[int, MessageOut]:
    if not chat_ids:
        return {}

    ranked = (
        select(
            Message.id.label("message_id"),
            func.row_number()
            .over(
                partition_by=Message.chat_id,
                order_by=(Message.created_at.desc(), Message.id.desc()),
            )
            .label("rn"),
        )
        .where(Message.chat_id.in_(chat_ids))
        .subquery()
    )
    rows = db.execute(
        select(Message)
        .join(ranked, ranked.c.message_id == Message.id)
        .where(ranked.c.rn == 1)
    ).scalars().all()

    return {m.chat_id: MessageOut.model_validate(m) for m in rows}


def _unread_counts(
    db: Session,
    user_id: int,
    chat_ids: list[int],
    *,
    count_never_read: bool,
) -> dict[int, int]:
    if not chat_ids:
        return {}

    # A NULL last_read_at never compares greater, so never-read chats report 0
    # unless count_never_read is set.
    unread = Message.created_at > ChatParticipant.last_read_at
    if count_never_read:
        unread = or_(ChatParticipant.last_read_at.is_(None), unread)

    rows = db.execute(
        select(Message.chat_id, func.count(Message.id))
        .join(
            ChatParticipant,
            and_(ChatParticipant.chat_id == Message.chat_id, ChatParticipant.user_id == user_id),
        )
        .where(Message.chat_id.in_(chat_ids), unread)
        .group_by(Message.chat_id)
    ).all()

    return {chat_id: count for chat_id, count in rows}
