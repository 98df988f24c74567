"""Task Schemas — payload accepted by create/update and the task representation.

Invariants:
    - TaskPayload.id is accepted but never trusted: the store generates ids and
      updates are keyed by the path
    - load_task_payload converts parser failures into ValidationProblemError

Design Decisions:
    - load_task_payload lets POST and PUT interpret the body after authentication;
      PUT also runs its existence check first
"""

from datetime import datetime
from typing import Any

from pydantic import ValidationError

from app.core.errors import ValidationProblemError
from app.core.validation import errors_from_locations
from app.schemas import CamelModel


class TaskPayload(CamelModel):
    """Task fields sent by clients."""
    id: int | None = None
    titulo: str | None = None
    concluida: bool = False
    data_vencimento: datetime | None = None


class TaskResponse(CamelModel):
    id: int
    titulo: str
    concluida: bool
    data_vencimento: datetime | None = None


def load_task_payload(raw: Any) -> TaskPayload:
    try:
        return TaskPayload.model_validate(raw)
    except ValidationError as e:
        raise ValidationProblemError(errors_from_locations(e.errors()))
