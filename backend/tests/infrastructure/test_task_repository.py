"""Task Repository — staged writes and rows-affected reporting.

Tests:
    - Each write reports the rows the store changed
    - A rewrite with identical values still matches its row
    - Update/remove of a row deleted by another session reports 0
"""

from sqlalchemy import delete

from app.core.domain_types import TaskId
from app.infrastructure.task_repository import SqlAlchemyTaskRepository
from app.models.task import Tarefa


async def _delete_elsewhere(session_factory, task_id):
    async with session_factory() as other:
        await other.execute(delete(Tarefa).where(Tarefa.id == task_id))
        await other.commit()


async def test_save_without_changes_reports_zero(test_db):
    repo = SqlAlchemyTaskRepository(test_db)
    assert await repo.save_changes() == 0


async def test_add_update_remove_each_report_one_row(test_db):
    repo = SqlAlchemyTaskRepository(test_db)

    task = repo.add("buy milk", False, None)
    assert await repo.save_changes() == 1
    assert task.id is not None

    repo.update(task, "buy milk", True, None)
    assert await repo.save_changes() == 1
    assert (await repo.find(TaskId(task.id))).concluida is True

    await repo.remove(task)
    assert await repo.save_changes() == 1
    assert await repo.find(TaskId(task.id)) is None


async def test_update_with_identical_values_matches_the_row(test_db):
    repo = SqlAlchemyTaskRepository(test_db)
    task = repo.add("same", False, None)
    await repo.save_changes()

    repo.update(task, "same", False, None)
    assert await repo.save_changes() == 1


async def test_remove_after_concurrent_delete_reports_zero(
    test_db, test_session_factory,
):
    repo = SqlAlchemyTaskRepository(test_db)
    task = repo.add("contested", False, None)
    await repo.save_changes()

    await _delete_elsewhere(test_session_factory, task.id)

    await repo.remove(task)
    assert await repo.save_changes() == 0


async def test_update_after_concurrent_delete_reports_zero(
    test_db, test_session_factory,
):
    repo = SqlAlchemyTaskRepository(test_db)
    task = repo.add("contested", False, None)
    await repo.save_changes()

    await _delete_elsewhere(test_session_factory, task.id)

    repo.update(task, "renamed", True, None)
    assert await repo.save_changes() == 0


async def test_list_all(test_db):
    repo = SqlAlchemyTaskRepository(test_db)
    repo.add("a", False, None)
    repo.add("b", True, None)
    assert await repo.save_changes() == 2
    assert {t.titulo for t in await repo.list_all()} == {"a", "b"}
