"""Administration CLI — grant claims and roles to existing accounts.

Usage:
    python -m app.manage grant-claim user@example.com [--claim ExcluirTarefa] [--value true]
    python -m app.manage add-role user@example.com Admin

Reads DATABASE_URL like the API. Exit code 1 when the user does not exist or the
store refuses the change. Grants apply to tokens issued after the change.
"""

import argparse
import asyncio
import sys

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.config import get_settings
from app.core.domain_types import Claim, IdentityResult, Permission
from app.db.session import create_session_factory
from app.infrastructure.identity_store import SqlAlchemyIdentityStore


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Tarefas API administration.")
    sub = p.add_subparsers(dest="command", required=True)

    grant = sub.add_parser("grant-claim", help="Attach a claim to a user.")
    grant.add_argument("email")
    grant.add_argument(
        "--claim", default=Permission.EXCLUIR_TAREFA.value,
        help="Claim type (default ExcluirTarefa).",
    )
    grant.add_argument("--value", default="true", help="Claim value (default true).")

    role = sub.add_parser("add-role", help="Add a user to a role (created if missing).")
    role.add_argument("email")
    role.add_argument("role")
    return p.parse_args(argv)


async def grant_claim(
    session_factory: async_sessionmaker[AsyncSession],
    email: str, claim_type: str, claim_value: str = "true",
) -> IdentityResult | None:
    """Grant a claim; None when the user does not exist."""
    async with session_factory() as db:
        store = SqlAlchemyIdentityStore(db)
        user = await store.find_by_email(email)
        if user is None:
            return None
        return await store.add_claim(user, Claim(claim_type, claim_value))


async def add_role(
    session_factory: async_sessionmaker[AsyncSession], email: str, role_name: str,
) -> IdentityResult | None:
    """Add a role membership; None when the user does not exist."""
    async with session_factory() as db:
        store = SqlAlchemyIdentityStore(db)
        user = await store.find_by_email(email)
        if user is None:
            return None
        return await store.add_to_role(user, role_name)


async def _run(args: argparse.Namespace) -> int:
    engine, factory = create_session_factory(get_settings().database_url)
    try:
        if args.command == "grant-claim":
            result = await grant_claim(factory, args.email, args.claim, args.value)
        else:
            result = await add_role(factory, args.email, args.role)
    finally:
        await engine.dispose()

    if result is None:
        sys.stderr.write(f"[ERROR] User not found: {args.email}\n")
        return 1
    if not result.succeeded:
        for error in result.errors:
            sys.stderr.write(f"[ERROR] {error.code}: {error.description}\n")
        return 1
    print(f"{args.command} ok: {args.email}")
    return 0


def main(argv: list[str] | None = None) -> int:
    return asyncio.run(_run(_parse_args(argv)))


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
