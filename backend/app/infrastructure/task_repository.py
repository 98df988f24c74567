"""Task Repository — SQLAlchemy implementation of the TaskRepository protocol.

Invariants:
    - Writes are staged; nothing reaches the store before save_changes()
    - save_changes() commits once and returns the rows the store reported changed
      (0 when nothing was staged or every staged UPDATE/DELETE matched no row)
    - list_all() applies no ORDER BY — store enumeration order

Design Decisions:
    - Updates and deletes are staged as explicit statements keyed by id, so the
      count comes from the cursor's rowcount. A row removed by a concurrent request
      therefore reports 0, and an update rewriting identical values still matches 1
    - Inserts go through the unit of work; a successful flush wrote each of them
"""

import logging
from datetime import datetime

from sqlalchemy import Delete, Update, delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.domain_types import TaskId
from app.models.task import Tarefa

logger = logging.getLogger(__name__)


class SqlAlchemyTaskRepository:
    """Task persistence over a request-scoped AsyncSession."""

    def __init__(self, db: AsyncSession):
        self._db = db
        self._inserted: list[Tarefa] = []
        self._statements: list[Update | Delete] = []

    async def find(self, task_id: TaskId) -> Tarefa | None:
        return await self._db.get(Tarefa, task_id)

    async def list_all(self) -> list[Tarefa]:
        result = await self._db.execute(select(Tarefa))
        return list(result.scalars().all())

    def add(
        self, titulo: str, concluida: bool, data_vencimento: datetime | None,
    ) -> Tarefa:
        task = Tarefa(
            titulo=titulo, concluida=concluida,
            data_vencimento=data_vencimento,
        )
        self._db.add(task)
        self._inserted.append(task)
        return task

    def update(
        self, task: Tarefa, titulo: str, concluida: bool,
        data_vencimento: datetime | None,
    ) -> None:
        self._statements.append(
            update(Tarefa)
            .where(Tarefa.id == task.id)
            .values(
                titulo=titulo, concluida=concluida,
                data_vencimento=data_vencimento,
            ),
        )

    async def remove(self, task: Tarefa) -> None:
        self._statements.append(delete(Tarefa).where(Tarefa.id == task.id))

    async def save_changes(self) -> int:
        """Commit staged writes; return rows affected."""
        inserted, self._inserted = self._inserted, []
        statements, self._statements = self._statements, []

        await self._db.flush()
        affected = len(inserted)
        for statement in statements:
            result = await self._db.execute(statement)
            affected += result.rowcount
        await self._db.commit()

        logger.debug(f"Committed task changes: {affected} rows affected")
        return affected
