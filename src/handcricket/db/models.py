"""SQLAlchemy ORM models for the hand cricket database.

Tables: game_sessions (one row per session, with expiry) and
contract_state (instance-level admin / hub / code hash values).
"""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, Index, Integer, String, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Base class for all ORM models."""


class GameSessionRow(Base):
    __tablename__ = "game_sessions"

    session_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=False)
    # Game.model_dump_json(); commitments are hex inside the document.
    state: Mapped[str] = mapped_column(Text, nullable=False)
    phase: Mapped[str] = mapped_column(String(20), nullable=False)
    # Naive UTC.
    expires_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)

    __table_args__ = (Index("ix_game_sessions_expires_at", "expires_at"),)


class ContractStateRow(Base):
    __tablename__ = "contract_state"

    key: Mapped[str] = mapped_column(String(50), primary_key=True)
    value: Mapped[str | None] = mapped_column(String(200), nullable=True)
