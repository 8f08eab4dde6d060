from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class UserCreateIn(BaseModel):
    # All optional so a missing field is reported as our 400, not a 422.
    email_address: str | None = None
    username: str | None = None
    privy_id: str | None = None
    bio: str | None = None
    avatar_type: str | None = None
    avatar: str | None = None
    wallet_address: str | None = None


class UserOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    privy_id: str
    email_address: str
    username: str
    bio: str | None
    avatar_type: str
    avatar: str | None
    wallet_address: str | None
    created_at: datetime
    updated_at: datetime


class UserCreatedOut(BaseModel):
    status: str = "success"
    user: UserOut


class UserConfirmOut(BaseModel):
    status: str = "successful"
    exists: bool
    user: UserOut | None = None


class UserFetchOut(BaseModel):
    status: str = "successful"
    user: UserOut


class FriendUserOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str
    avatar_type: str
    avatar: str | None


class FriendOut(BaseModel):
    id: int
    status: str
    created_at: datetime
    friend: FriendUserOut


class GameOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    icon: str | None
    type: str | None
    is_active: bool


class GameSessionOut(BaseModel):
    id: int
    status: str
    started_at: datetime | None
    completed_at: datetime | None
    joined_at: datetime
    game: GameOut


class MessageOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    sender_id: int | None
    content: str
    created_at: datetime


class ChatOut(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: int
    name: str | None
    type: str
    created_at: datetime
    updated_at: datetime
    last_read_at: datetime | None
    last_message: MessageOut | None = Field(default=None, alias="lastMessage")
    unread_count: int = Field(default=0, alias="unreadCount")


class HubDataOut(BaseModel):
    status: str = "successful"
    user: UserOut
    friends: list[FriendOut]
    games: list[GameOut]
    sessions: list[GameSessionOut]
    chats: list[ChatOut]
