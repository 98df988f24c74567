"""Identity ORM — users, their claims and roles.

Invariants:
    - normalized_user_name is unique (email upper-cased) — duplicate accounts rejected
    - Password stored only as a salted hash, never in clear
    - Claims and role memberships cascade with their user

Design Decisions:
    - Normalized columns for case-insensitive lookup without DB-specific collations
    - lockout_end stored timezone-aware; callers normalize naive values read back from SQLite
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.dialects.postgresql import UUID

from app.db.base import Base


class User(Base):
    """User account — owned and mutated by the identity store only."""
    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    user_name: Mapped[str] = mapped_column(String(256), nullable=False)
    normalized_user_name: Mapped[str] = mapped_column(
        String(256), nullable=False, unique=True, index=True,
    )
    email: Mapped[str] = mapped_column(String(256), nullable=False)
    normalized_email: Mapped[str] = mapped_column(
        String(256), nullable=False, index=True,
    )
    email_confirmed: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False,
    )
    password_hash: Mapped[str] = mapped_column(String(512), nullable=False)
    lockout_enabled: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=True,
    )
    lockout_end: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True,
    )
    access_failed_count: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    claims: Mapped[list["UserClaim"]] = relationship(
        "UserClaim", back_populates="user", cascade="all, delete-orphan",
    )


class UserClaim(Base):
    """A (type, value) claim attached to a user, embedded in issued tokens."""
    __tablename__ = "user_claims"

    id: Mapped[int] = mapped_column(
        Integer, primary_key=True, autoincrement=True,
    )
    user_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False, index=True,
    )
    claim_type: Mapped[str] = mapped_column(String(256), nullable=False)
    claim_value: Mapped[str] = mapped_column(String(512), nullable=False)

    user: Mapped["User"] = relationship("User", back_populates="claims")


class Role(Base):
    """Named role; membership recorded in user_roles."""
    __tablename__ = "roles"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    name: Mapped[str] = mapped_column(String(256), nullable=False)
    normalized_name: Mapped[str] = mapped_column(
        String(256), nullable=False, unique=True,
    )


class UserRole(Base):
    __tablename__ = "user_roles"

    user_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        primary_key=True,
    )
    role_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("roles.id", ondelete="CASCADE"),
        primary_key=True,
    )
