"""Tarefa ORM — the single persisted business entity.

Invariants:
    - id is an integer primary key generated by the store, immutable after insert
    - titulo is non-nullable, bounded to 100 characters
    - data_vencimento is optional

Design Decisions:
    - Integer autoincrement over UUID: clients address tasks as /tarefa/{int}
"""

from datetime import datetime

from sqlalchemy import Boolean, DateTime, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from app.db.base import Base


class Tarefa(Base):
    """Task entity — title, completion flag, due date."""
    __tablename__ = "tarefas"

    id: Mapped[int] = mapped_column(
        Integer, primary_key=True, autoincrement=True,
    )
    titulo: Mapped[str] = mapped_column(String(100), nullable=False)
    concluida: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False,
    )
    data_vencimento: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True,
    )
