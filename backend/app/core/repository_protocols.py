"""Boundary Protocols — contracts between route handlers and the stores.

Invariants:
    - Handlers depend on these Protocols, never on SQLAlchemy sessions directly
    - All IO operations accessed through Protocol types
    - Implementations provided by infrastructure/ via FastAPI dependencies

Design Decisions:
    - Protocol over ABC: structural subtyping, no inheritance hierarchy
    - Writes are staged then committed by save_changes(), which reports the
      rows the store changed ("rows affected")
"""

from datetime import datetime
from typing import Protocol
from uuid import UUID

from app.core.domain_types import Claim, IdentityResult, SignInOutcome, TaskId


class TaskLike(Protocol):
    """Structural contract for persisted task records."""
    id: int
    titulo: str
    concluida: bool
    data_vencimento: datetime | None


class UserLike(Protocol):
    """Structural contract for persisted user records."""
    id: UUID
    email: str
    user_name: str


class TaskRepository(Protocol):
    """Contract for task persistence — implemented by infrastructure."""
    async def find(self, task_id: TaskId) -> TaskLike | None: ...
    async def list_all(self) -> list[TaskLike]: ...
    def add(
        self, titulo: str, concluida: bool, data_vencimento: datetime | None,
    ) -> TaskLike: ...
    def update(
        self, task: TaskLike, titulo: str, concluida: bool,
        data_vencimento: datetime | None,
    ) -> None: ...
    async def remove(self, task: TaskLike) -> None: ...
    async def save_changes(self) -> int: ...


class IdentityGateway(Protocol):
    """Contract for user accounts, sign-in and claims — implemented by infrastructure."""
    async def find_by_email(self, email: str) -> UserLike | None: ...
    async def create_user(
        self, email: str, password: str, email_confirmed: bool = True,
    ) -> IdentityResult: ...
    async def password_sign_in(
        self, email: str, password: str, lockout_on_failure: bool = True,
    ) -> SignInOutcome: ...
    async def get_claims(self, user: UserLike) -> list[Claim]: ...
    async def get_roles(self, user: UserLike) -> list[str]: ...
    async def add_claim(self, user: UserLike, claim: Claim) -> IdentityResult: ...
    async def add_to_role(self, user: UserLike, role_name: str) -> IdentityResult: ...
