"""ORM Models — SQLAlchemy declarative models for all persisted entities.

Invariants:
    - All models inherit from Base (db/base.py)
    - Tarefa is independent of the identity tables (no ownership relation)

Design Decisions:
    - All models imported here so SQLAlchemy resolves string-based relationship()
      references before any query runs (ADR: standard SQLAlchemy pattern)
"""

from app.models.task import Tarefa  # noqa: F401
from app.models.user import User, UserClaim, Role, UserRole  # noqa: F401
