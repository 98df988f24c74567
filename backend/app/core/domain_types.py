"""Domain Types — rich types that replace bare primitives across the codebase.

Invariants:
    - TaskId wraps int, UserId wraps UUID — never use bare primitives in domain logic
    - Permissions are an enumerated set; claim types outside it never grant access
    - SignInOutcome encodes the three sign-in results (no raw booleans)

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: serialize to JSON without custom encoders
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import NewType
from uuid import UUID


# ─── Identity Types ──────────────────────────────────────────────

TaskId = NewType("TaskId", int)
UserId = NewType("UserId", UUID)

ValidationErrors = dict[str, list[str]]


# ─── Enums ───────────────────────────────────────────────────────

class Permission(str, Enum):
    """Named permissions checked by authorization policies (claim types)."""
    EXCLUIR_TAREFA = "ExcluirTarefa"


class SignInOutcome(str, Enum):
    """Result of a password sign-in attempt."""
    SUCCEEDED = "succeeded"
    LOCKED_OUT = "locked_out"
    FAILED = "failed"


# ─── Value Objects ───────────────────────────────────────────────

@dataclass(frozen=True)
class IdentityError:
    """A single reason an identity operation was refused."""
    code: str
    description: str


@dataclass
class IdentityResult:
    """Outcome of an identity write (create user, add claim)."""
    succeeded: bool
    errors: list[IdentityError] = field(default_factory=list)

    @classmethod
    def success(cls) -> "IdentityResult":
        return cls(succeeded=True)

    @classmethod
    def failed(cls, errors: list[IdentityError]) -> "IdentityResult":
        return cls(succeeded=False, errors=list(errors))


@dataclass(frozen=True)
class Claim:
    """A (type, value) pair attached to a user identity."""
    type: str
    value: str


@dataclass(frozen=True)
class Principal:
    """Authenticated caller, built from a verified bearer token."""
    user_id: str
    email: str
    claims: tuple[Claim, ...] = ()
    roles: tuple[str, ...] = ()

    @property
    def permissions(self) -> frozenset[Permission]:
        present = {c.type for c in self.claims}
        return frozenset(p for p in Permission if p.value in present)

    def has_permission(self, permission: Permission) -> bool:
        return permission in self.permissions
