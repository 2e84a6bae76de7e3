"""Database tables / schema"""

from datetime import datetime, timezone
from typing import Any, Optional

from sqlalchemy import JSON
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    pass


class DBRoom(Base):
    __tablename__ = "rooms"
    id: Mapped[str] = mapped_column(primary_key=True)
    board: Mapped[str]
    current_player: Mapped[str]
    status: Mapped[str]
    winner: Mapped[Optional[str]]
    # [row, col] or NULL
    must_continue_from: Mapped[Optional[list[int]]] = mapped_column(JSON, nullable=True)
    # connection id -> {"name": ..., "color": ...}
    players: Mapped[dict[str, Any]] = mapped_column(JSON, default=dict)
    # connection id of an unanswered reset request
    pending_reset: Mapped[Optional[str]]
    created_at: Mapped[datetime] = mapped_column(default=utc_now)
    updated_at: Mapped[datetime] = mapped_column(default=utc_now, onupdate=utc_now)
