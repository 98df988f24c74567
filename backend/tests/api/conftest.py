"""API test fixtures — registered users and bearer headers.

Invariants:
    - Users are created through POST /registro (the real flow)
    - The ExcluirTarefa claim is granted through the identity store, then the user
      logs in again so the new token carries it
"""

import pytest

from app.core.domain_types import Claim, Permission
from app.infrastructure.identity_store import SqlAlchemyIdentityStore

from tests.api.auth_helpers import bearer, login, register


@pytest.fixture
async def auth_headers(client):
    res = await register(client, "ana@example.com")
    assert res.status_code == 200
    return bearer(res.json())


@pytest.fixture
async def delete_headers(client, test_db):
    await register(client, "gerente@example.com")
    store = SqlAlchemyIdentityStore(test_db)
    user = await store.find_by_email("gerente@example.com")
    await store.add_claim(user, Claim(Permission.EXCLUIR_TAREFA.value, "true"))
    res = await login(client, "gerente@example.com")
    assert res.status_code == 200
    return bearer(res.json())
