"""scoreboard_players table model."""

from __future__ import annotations

from sqlalchemy import CheckConstraint, ForeignKey, Index, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from models.base import Base


class StoredPlayer(Base):
    """Cumulative tallies for one player on one scoreboard."""

    __tablename__ = "scoreboard_players"
    __table_args__ = (
        UniqueConstraint("scoreboard_id", "name", name="uq_scoreboard_player_name"),
        CheckConstraint("wins >= 0", name="ck_scoreboard_player_wins"),
        CheckConstraint("losses >= 0", name="ck_scoreboard_player_losses"),
        CheckConstraint("draws >= 0", name="ck_scoreboard_player_draws"),
        Index("idx_scoreboard_player_board", "scoreboard_id"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    scoreboard_id: Mapped[int] = mapped_column(
        ForeignKey("scoreboards.id", ondelete="CASCADE"),
        nullable=False,
    )
    name: Mapped[str] = mapped_column(String(128), nullable=False)
    wins: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    losses: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    draws: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    points: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    elo: Mapped[int] = mapped_column(Integer, nullable=False, default=1500)
