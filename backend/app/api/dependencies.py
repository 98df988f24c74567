"""Route Dependencies — gateway factories and authorization policies.

Invariants:
    - Every gateway is built per request around the request's AsyncSession
    - get_current_principal raises AuthenticationError (401) for a missing or
      unverifiable token; require_permission raises PermissionDeniedError (403)
    - Authorization runs before the handler body (FastAPI resolves dependencies first)

Design Decisions:
    - HTTPBearer(auto_error=False): we raise our own typed error so the 401 body
      has the same envelope as every other error
"""

import logging
from typing import Callable

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import Settings, get_settings
from app.core.domain_types import Permission, Principal
from app.core.errors import AuthenticationError, PermissionDeniedError
from app.core.repository_protocols import IdentityGateway, TaskRepository
from app.core.token_issuer import decode_token, principal_from_payload
from app.infrastructure.database import get_db
from app.infrastructure.identity_store import SqlAlchemyIdentityStore
from app.infrastructure.task_repository import SqlAlchemyTaskRepository

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(
    auto_error=False,
    bearerFormat="JWT",
    description="Insira o token JWT desta maneira: Bearer {seu token}",
)


def get_task_repository(
    db: AsyncSession = Depends(get_db),
) -> TaskRepository:
    return SqlAlchemyTaskRepository(db)


def get_identity_gateway(
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> IdentityGateway:
    return SqlAlchemyIdentityStore(
        db, settings.password_policy(), settings.lockout_policy(),
    )


async def get_current_principal(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    settings: Settings = Depends(get_settings),
) -> Principal:
    """Resolve the caller from the bearer token; any authenticated identity passes."""
    if credentials is None or credentials.scheme.lower() != "bearer":
        raise AuthenticationError()
    payload = decode_token(credentials.credentials, settings.jwt_settings())
    return principal_from_payload(payload)


def require_permission(permission: Permission) -> Callable:
    """Build a dependency that admits only principals holding `permission`."""

    async def _check(
        principal: Principal = Depends(get_current_principal),
    ) -> Principal:
        if not principal.has_permission(permission):
            logger.warning(
                f"Authorization denied: missing {permission.value}",
                extra={"user_id": principal.user_id},
            )
            raise PermissionDeniedError(permission.value)
        return principal

    return _check
