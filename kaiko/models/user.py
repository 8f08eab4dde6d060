from datetime import datetime

from sqlalchemy import DateTime, Integer, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from kaiko.db.base import Base


class User(Base):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)

    # External identity (Privy user id, e.g. "did:privy:...").
    privy_id: Mapped[str] = mapped_column(String(128), nullable=False, unique=True, index=True)

    email_address: Mapped[str] = mapped_column(String(320), nullable=False, index=True)
    username: Mapped[str] = mapped_column(String(64), nullable=False, unique=True, index=True)
    bio: Mapped[str | None] = mapped_column(Text)

    # "default" points `avatar` at one of the bundled profile pictures,
    # "uploaded" at an image URL.
    avatar_type: Mapped[str] = mapped_column(String(16), nullable=False, server_default="default")
    avatar: Mapped[str | None] = mapped_column(String(512))

    # Solana embedded wallet provisioned at onboarding.
    wallet_address: Mapped[str | None] = mapped_column(String(128))

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )
