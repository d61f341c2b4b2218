"""scoreboards table model."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import Boolean, DateTime, Enum, String, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from models.base import Base
from models.player import StoredPlayer


class StoredScoreboard(Base):
    """One persisted scoreboard; its players live in scoreboard_players."""

    __tablename__ = "scoreboards"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(128), nullable=False, unique=True, index=True)
    game_type: Mapped[str] = mapped_column(
        Enum(
            "points",
            "winloss",
            "zerosum",
            "elo",
            name="scoreboard_game_type",
            native_enum=False,
        ),
        nullable=False,
    )
    owner: Mapped[str] = mapped_column(String(128), nullable=False)
    archived: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=False),
        nullable=False,
        server_default=func.now(),
    )

    players: Mapped[list[StoredPlayer]] = relationship(
        StoredPlayer,
        cascade="all, delete-orphan",
        order_by=StoredPlayer.name,
    )
