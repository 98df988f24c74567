"""Task Routes — CRUD behavior, authorization and the end-to-end scenario.

Tests:
    - GET /tarefa is anonymous; other routes need a bearer token
    - Create returns 201 + Location; invalid payloads → validation problem (never 422)
    - Update/delete of unknown ids → 404, update even with an invalid payload
    - Delete requires the ExcluirTarefa claim (403 without it, 401 without a token)
    - Ids outside the 32-bit range are validation problems
    - Writes that change no row answer the save-failure 400
"""

from datetime import datetime, timezone

import pytest
from fastapi import Depends
from sqlalchemy import delete
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.dependencies import get_task_repository
from app.infrastructure.database import get_db
from app.infrastructure.task_repository import SqlAlchemyTaskRepository
from app.main import app
from app.models.task import Tarefa

SAVE_FAILED_MESSAGE = "Houve um problema ao salvar o registro"


async def _create(client, headers, **fields):
    payload = {"titulo": "buy milk", "concluida": False, **fields}
    res = await client.post("/tarefa", json=payload, headers=headers)
    assert res.status_code == 201
    return res.json()


async def test_list_is_anonymous_and_empty(client):
    res = await client.get("/tarefa")
    assert res.status_code == 200
    assert res.json() == []


async def test_list_returns_every_task(client, test_db):
    test_db.add_all([Tarefa(titulo="a"), Tarefa(titulo="b", concluida=True)])
    await test_db.commit()

    res = await client.get("/tarefa")
    assert res.status_code == 200
    assert sorted(t["titulo"] for t in res.json()) == ["a", "b"]


async def test_get_requires_authentication(client):
    res = await client.get("/tarefa/1")
    assert res.status_code == 401
    assert res.headers["www-authenticate"] == "Bearer"


async def test_get_rejects_forged_token(client):
    res = await client.get(
        "/tarefa/1", headers={"Authorization": "Bearer not.a.jwt"},
    )
    assert res.status_code == 401


async def test_get_unknown_id_is_404_with_empty_body(client, auth_headers):
    res = await client.get("/tarefa/12345", headers=auth_headers)
    assert res.status_code == 404
    assert res.content == b""


async def test_create_returns_location_and_entity(client, auth_headers):
    res = await client.post(
        "/tarefa", json={"titulo": "buy milk", "concluida": False},
        headers=auth_headers,
    )
    assert res.status_code == 201
    body = res.json()
    assert isinstance(body["id"], int)
    assert body["titulo"] == "buy milk"
    assert body["concluida"] is False
    assert res.headers["location"] == f"http://test/tarefa/{body['id']}"


async def test_create_ignores_body_id(client, auth_headers):
    body = await _create(client, auth_headers, id=999)
    assert body["id"] != 999


async def test_create_round_trips_due_date(client, auth_headers):
    due = datetime(2026, 12, 1, 9, 30, tzinfo=timezone.utc)
    created = await _create(client, auth_headers, dataVencimento=due.isoformat())

    res = await client.get(f"/tarefa/{created['id']}", headers=auth_headers)
    fetched = datetime.fromisoformat(res.json()["dataVencimento"])
    assert fetched.replace(tzinfo=timezone.utc) == due


async def test_create_requires_authentication(client):
    res = await client.post("/tarefa", json={"titulo": "x"})
    assert res.status_code == 401


async def test_create_missing_title_is_validation_problem(client, auth_headers):
    res = await client.post(
        "/tarefa", json={"concluida": True}, headers=auth_headers,
    )
    assert res.status_code == 400
    assert list(res.json()["errors"]) == ["titulo"]


async def test_create_too_long_title_is_validation_problem(client, auth_headers):
    res = await client.post(
        "/tarefa", json={"titulo": "x" * 101}, headers=auth_headers,
    )
    assert res.status_code == 400
    assert "titulo" in res.json()["errors"]


async def test_create_wrong_type_is_400_not_422(client, auth_headers):
    res = await client.post(
        "/tarefa", json={"titulo": 123}, headers=auth_headers,
    )
    assert res.status_code == 400
    assert "titulo" in res.json()["errors"]


async def test_update_unknown_id_is_404_even_with_invalid_payload(client, auth_headers):
    res = await client.put(
        "/tarefa/4242", json={"titulo": 123}, headers=auth_headers,
    )
    assert res.status_code == 404


async def test_update_validates_incoming_payload(client, auth_headers):
    created = await _create(client, auth_headers)
    res = await client.put(
        f"/tarefa/{created['id']}", json={"titulo": ""}, headers=auth_headers,
    )
    assert res.status_code == 400
    assert "titulo" in res.json()["errors"]


async def test_update_null_body_is_validation_problem(client, auth_headers):
    created = await _create(client, auth_headers)
    res = await client.put(f"/tarefa/{created['id']}", headers=auth_headers)
    assert res.status_code == 400
    assert "errors" in res.json()


async def test_update_with_same_values_still_succeeds(client, auth_headers):
    created = await _create(client, auth_headers)
    res = await client.put(
        f"/tarefa/{created['id']}",
        json={"titulo": "buy milk", "concluida": False},
        headers=auth_headers,
    )
    assert res.status_code == 204


async def test_update_keys_record_by_path_not_body_id(client, auth_headers):
    first = await _create(client, auth_headers, titulo="first")
    second = await _create(client, auth_headers, titulo="second")

    res = await client.put(
        f"/tarefa/{first['id']}",
        json={"id": second["id"], "titulo": "renamed", "concluida": True},
        headers=auth_headers,
    )
    assert res.status_code == 204

    first_now = (await client.get(f"/tarefa/{first['id']}", headers=auth_headers)).json()
    second_now = (await client.get(f"/tarefa/{second['id']}", headers=auth_headers)).json()
    assert first_now["titulo"] == "renamed"
    assert second_now["titulo"] == "second"


async def test_delete_without_token_is_401(client, auth_headers):
    created = await _create(client, auth_headers)
    res = await client.delete(f"/tarefa/{created['id']}")
    assert res.status_code == 401


async def test_delete_without_claim_is_403_even_for_unknown_id(client, auth_headers):
    res = await client.delete("/tarefa/4242", headers=auth_headers)
    assert res.status_code == 403
    assert res.json()["error"]["code"] == "PERMISSION_DENIED"


async def test_delete_unknown_id_with_claim_is_404(client, delete_headers):
    res = await client.delete("/tarefa/4242", headers=delete_headers)
    assert res.status_code == 404


async def test_token_carries_granted_claim(client, delete_headers):
    res = await client.post(
        "/login", json={"email": "gerente@example.com", "password": "Senha@123"},
    )
    claims = res.json()["userToken"]["claims"]
    assert {"type": "ExcluirTarefa", "value": "true"} in claims


async def test_full_task_lifecycle(client, auth_headers, delete_headers):
    res = await client.post(
        "/tarefa", json={"titulo": "buy milk", "concluida": False},
        headers=auth_headers,
    )
    assert res.status_code == 201
    task_id = res.json()["id"]

    res = await client.get(f"/tarefa/{task_id}", headers=auth_headers)
    assert res.status_code == 200
    assert res.json()["titulo"] == "buy milk"
    assert res.json()["concluida"] is False

    res = await client.put(
        f"/tarefa/{task_id}", json={"titulo": "buy milk", "concluida": True},
        headers=auth_headers,
    )
    assert res.status_code == 204

    res = await client.get(f"/tarefa/{task_id}", headers=auth_headers)
    assert res.json()["concluida"] is True

    res = await client.delete(f"/tarefa/{task_id}", headers=auth_headers)
    assert res.status_code == 403

    res = await client.delete(f"/tarefa/{task_id}", headers=delete_headers)
    assert res.status_code == 204

    res = await client.get(f"/tarefa/{task_id}", headers=auth_headers)
    assert res.status_code == 404


def _use_task_repository(repository_class):
    def override(db: AsyncSession = Depends(get_db)):
        return repository_class(db)

    app.dependency_overrides[get_task_repository] = override


@pytest.fixture
def contested_tasks(client, test_session_factory):
    """Rows are deleted by another session right after the handler finds them."""

    class ContestedTaskRepository(SqlAlchemyTaskRepository):
        async def find(self, task_id):
            task = await super().find(task_id)
            if task is not None:
                async with test_session_factory() as other:
                    await other.execute(delete(Tarefa).where(Tarefa.id == task_id))
                    await other.commit()
            return task

    _use_task_repository(ContestedTaskRepository)
    yield
    app.dependency_overrides.pop(get_task_repository, None)


@pytest.fixture
def unsaved_tasks(client):
    """save_changes() discards the staged writes and reports no rows."""

    class UnsavedTaskRepository(SqlAlchemyTaskRepository):
        async def save_changes(self):
            await self._db.rollback()
            return 0

    _use_task_repository(UnsavedTaskRepository)
    yield
    app.dependency_overrides.pop(get_task_repository, None)


async def test_oversized_id_is_validation_problem(client, auth_headers):
    res = await client.get("/tarefa/99999999999999999999", headers=auth_headers)
    assert res.status_code == 400
    assert "task_id" in res.json()["errors"]


async def test_id_bounds_apply_to_update_and_delete(
    client, auth_headers, delete_headers,
):
    res = await client.put(
        f"/tarefa/{2**31}", json={"titulo": "x"}, headers=auth_headers,
    )
    assert res.status_code == 400
    assert "task_id" in res.json()["errors"]

    res = await client.delete(f"/tarefa/{-(2**31) - 1}", headers=delete_headers)
    assert res.status_code == 400
    assert "task_id" in res.json()["errors"]


async def test_largest_id_is_looked_up(client, auth_headers):
    res = await client.get(f"/tarefa/{2**31 - 1}", headers=auth_headers)
    assert res.status_code == 404


async def test_create_invalid_payload_without_token_is_401(client):
    res = await client.post("/tarefa", json={"titulo": 123})
    assert res.status_code == 401


async def test_create_saving_nothing_is_save_failure(client, auth_headers, unsaved_tasks):
    res = await client.post(
        "/tarefa", json={"titulo": "buy milk"}, headers=auth_headers,
    )
    assert res.status_code == 400
    assert "location" not in res.headers
    error = res.json()["error"]
    assert error["code"] == "SAVE_FAILED"
    assert error["message"] == SAVE_FAILED_MESSAGE


async def test_update_of_concurrently_deleted_task_is_save_failure(
    client, auth_headers, test_db, contested_tasks,
):
    task = Tarefa(titulo="contested")
    test_db.add(task)
    await test_db.commit()

    res = await client.put(
        f"/tarefa/{task.id}", json={"titulo": "renamed"}, headers=auth_headers,
    )
    assert res.status_code == 400
    assert res.json()["error"]["message"] == SAVE_FAILED_MESSAGE


async def test_delete_of_concurrently_deleted_task_is_save_failure(
    client, delete_headers, test_db, contested_tasks,
):
    task = Tarefa(titulo="contested")
    test_db.add(task)
    await test_db.commit()

    res = await client.delete(f"/tarefa/{task.id}", headers=delete_headers)
    assert res.status_code == 400
    assert res.json()["error"]["message"] == SAVE_FAILED_MESSAGE
