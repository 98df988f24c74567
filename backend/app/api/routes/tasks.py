"""Task Routes — CRUD for /tarefa, each a pass-through to the task repository.

Invariants:
    - GET /tarefa is anonymous; every other route requires a verified bearer token
    - DELETE additionally requires the ExcluirTarefa claim (checked before lookup)
    - Unknown id → 404 with empty body; on PUT this precedes payload validation
    - Writes report rows affected; zero rows → "Houve um problema ao salvar o registro"

Design Decisions:
    - PUT selects the record by path id only. A body id that differs is ignored and
      logged, not rejected (latent inconsistency kept visible rather than enforced)
    - POST and PUT parse their body inside the handler (load_task_payload), after
      authentication. PUT also runs the existence check first, so an unknown id
      is 404 even for malformed payloads. Unparseable JSON is still rejected by
      the framework before authentication
"""

import logging
from typing import Annotated, Any

from fastapi import APIRouter, Body, Depends, Path, Request, Response, status

from app.api.dependencies import (
    get_current_principal, get_task_repository, require_permission,
)
from app.core.domain_types import Permission, Principal, TaskId
from app.core.errors import SaveFailedError, ValidationProblemError
from app.core.repository_protocols import TaskRepository
from app.core.validation import validate_task
from app.schemas.task import TaskResponse, load_task_payload

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/tarefa", tags=["Tarefa"])

# Ids are 32-bit integers in the store
TaskIdPath = Annotated[int, Path(ge=-(2**31), le=2**31 - 1)]

_NOT_FOUND = {status.HTTP_404_NOT_FOUND: {"description": "Task not found"}}
_BAD_REQUEST = {status.HTTP_400_BAD_REQUEST: {"description": "Validation problem or save failure"}}


@router.get("", name="GetTarefa", response_model=list[TaskResponse])
async def list_tasks(tasks: TaskRepository = Depends(get_task_repository)):
    """Every task, in store order."""
    return await tasks.list_all()


@router.get(
    "/{task_id}", name="GetTarefaPorId",
    response_model=TaskResponse, responses=_NOT_FOUND,
    dependencies=[Depends(get_current_principal)],
)
async def get_task(
    task_id: TaskIdPath,
    tasks: TaskRepository = Depends(get_task_repository),
):
    task = await tasks.find(TaskId(task_id))
    if task is None:
        return Response(status_code=status.HTTP_404_NOT_FOUND)
    return task


@router.post(
    "", name="PostTarefa", response_model=TaskResponse,
    status_code=status.HTTP_201_CREATED, responses=_BAD_REQUEST,
)
async def create_task(
    request: Request,
    response: Response,
    body: Any = Body(None),
    tasks: TaskRepository = Depends(get_task_repository),
    principal: Principal = Depends(get_current_principal),
):
    """Create a task; the body id, if any, is ignored."""
    payload = load_task_payload(body)
    errors = validate_task(payload.titulo)
    if errors:
        raise ValidationProblemError(errors)

    task = tasks.add(payload.titulo, payload.concluida, payload.data_vencimento)
    if await tasks.save_changes() <= 0:
        raise SaveFailedError()

    logger.info(
        "Task created", extra={"task_id": task.id, "user_id": principal.user_id},
    )
    response.headers["Location"] = str(
        request.url_for("GetTarefaPorId", task_id=task.id),
    )
    return task


@router.put(
    "/{task_id}", name="PutTarefa",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={**_NOT_FOUND, **_BAD_REQUEST},
)
async def update_task(
    task_id: TaskIdPath,
    body: Any = Body(None),
    tasks: TaskRepository = Depends(get_task_repository),
    principal: Principal = Depends(get_current_principal),
):
    """Replace a task wholesale."""
    task = await tasks.find(TaskId(task_id))
    if task is None:
        return Response(status_code=status.HTTP_404_NOT_FOUND)

    payload = load_task_payload(body)
    errors = validate_task(payload.titulo)
    if errors:
        raise ValidationProblemError(errors)

    if payload.id is not None and payload.id != task_id:
        logger.warning(
            f"Body id {payload.id} differs from path id; path id used",
            extra={"task_id": task_id, "user_id": principal.user_id},
        )

    tasks.update(task, payload.titulo, payload.concluida, payload.data_vencimento)
    if await tasks.save_changes() <= 0:
        raise SaveFailedError()

    logger.info("Task updated", extra={"task_id": task_id})
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete(
    "/{task_id}", name="DeleteTarefa",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={**_NOT_FOUND, **_BAD_REQUEST},
)
async def delete_task(
    task_id: TaskIdPath,
    tasks: TaskRepository = Depends(get_task_repository),
    principal: Principal = Depends(require_permission(Permission.EXCLUIR_TAREFA)),
):
    task = await tasks.find(TaskId(task_id))
    if task is None:
        return Response(status_code=status.HTTP_404_NOT_FOUND)

    await tasks.remove(task)
    if await tasks.save_changes() <= 0:
        raise SaveFailedError()

    logger.info(
        "Task deleted", extra={"task_id": task_id, "user_id": principal.user_id},
    )
    return Response(status_code=status.HTTP_204_NO_CONTENT)
