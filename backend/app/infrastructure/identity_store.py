"""Identity Store — SQLAlchemy implementation of the IdentityGateway protocol.

Invariants:
    - Usernames are matched case-insensitively via normalized (upper-cased) columns
    - Passwords hashed with werkzeug.security; the clear password never leaves this module
    - Sign-in never reveals whether the user exists: FAILED for both cases, and an
      unknown user still pays for one hash check
    - A duplicate name that slips past the lookup (concurrent registration) is
      reported as DuplicateUserName, never as a store fault
    - Lockout: the failure that reaches max_failed_attempts locks the account and
      already reports LOCKED_OUT; a locked account stays LOCKED_OUT until lockout_end

Design Decisions:
    - Lockout state persisted on the user row (access_failed_count, lockout_end):
      survives restarts and works across workers
    - Creation validates username uniqueness before password policy so clients see
      the duplicate reason first
"""

import logging
from datetime import datetime, timezone

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from werkzeug.security import check_password_hash, generate_password_hash

from app.core.domain_types import Claim, IdentityError, IdentityResult, SignInOutcome
from app.core.password_policy import (
    LockoutPolicy, PasswordPolicy, check_password, duplicate_user_name, is_locked_out,
)
from app.models.user import Role, User, UserClaim, UserRole

logger = logging.getLogger(__name__)

# Checked against unknown users so both sign-in failures cost one hash
_UNKNOWN_USER_HASH = generate_password_hash("unknown-user")


def normalize(value: str) -> str:
    return value.strip().upper()


def _as_utc(value: datetime | None) -> datetime | None:
    # SQLite hands back naive datetimes even for timezone=True columns
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class SqlAlchemyIdentityStore:
    """User accounts, password sign-in, lockout, claims and roles."""

    def __init__(
        self,
        db: AsyncSession,
        password_policy: PasswordPolicy | None = None,
        lockout_policy: LockoutPolicy | None = None,
    ):
        self._db = db
        self._password_policy = password_policy or PasswordPolicy()
        self._lockout_policy = lockout_policy or LockoutPolicy()

    async def find_by_email(self, email: str) -> User | None:
        result = await self._db.execute(
            select(User).where(User.normalized_user_name == normalize(email)),
        )
        return result.scalar_one_or_none()

    async def create_user(
        self, email: str, password: str, email_confirmed: bool = True,
    ) -> IdentityResult:
        """Create an account using the email as username."""
        errors: list[IdentityError] = []
        if await self.find_by_email(email) is not None:
            errors.append(duplicate_user_name(email))
        errors.extend(check_password(password, self._password_policy))
        if errors:
            logger.info(
                "User creation refused",
                extra={"error_code": ",".join(e.code for e in errors)},
            )
            return IdentityResult.failed(errors)

        user = User(
            user_name=email,
            normalized_user_name=normalize(email),
            email=email,
            normalized_email=normalize(email),
            email_confirmed=email_confirmed,
            password_hash=generate_password_hash(password),
        )
        self._db.add(user)
        try:
            await self._db.commit()
        except IntegrityError:
            # Another registration for the same name committed after our lookup
            await self._db.rollback()
            logger.info(
                "User creation refused", extra={"error_code": "DuplicateUserName"},
            )
            return IdentityResult.failed([duplicate_user_name(email)])
        logger.info("User created", extra={"user_id": str(user.id)})
        return IdentityResult.success()

    async def password_sign_in(
        self, email: str, password: str, lockout_on_failure: bool = True,
    ) -> SignInOutcome:
        user = await self.find_by_email(email)
        if user is None:
            check_password_hash(_UNKNOWN_USER_HASH, password)
            return SignInOutcome.FAILED

        now = datetime.now(timezone.utc)
        if user.lockout_enabled and is_locked_out(_as_utc(user.lockout_end), now):
            return SignInOutcome.LOCKED_OUT

        if check_password_hash(user.password_hash, password):
            if user.access_failed_count or user.lockout_end is not None:
                user.access_failed_count = 0
                user.lockout_end = None
                await self._db.commit()
            return SignInOutcome.SUCCEEDED

        if lockout_on_failure and user.lockout_enabled:
            user.access_failed_count += 1
            locked = user.access_failed_count >= self._lockout_policy.max_failed_attempts
            if locked:
                user.lockout_end = self._lockout_policy.lockout_end(now)
                user.access_failed_count = 0
            await self._db.commit()
            if locked:
                logger.warning(
                    "User locked out", extra={"user_id": str(user.id)},
                )
                return SignInOutcome.LOCKED_OUT
        return SignInOutcome.FAILED

    async def get_claims(self, user: User) -> list[Claim]:
        result = await self._db.execute(
            select(UserClaim)
            .where(UserClaim.user_id == user.id)
            .order_by(UserClaim.id),
        )
        return [
            Claim(c.claim_type, c.claim_value) for c in result.scalars().all()
        ]

    async def get_roles(self, user: User) -> list[str]:
        result = await self._db.execute(
            select(Role.name)
            .join(UserRole, UserRole.role_id == Role.id)
            .where(UserRole.user_id == user.id)
            .order_by(Role.name),
        )
        return list(result.scalars().all())

    async def add_claim(self, user: User, claim: Claim) -> IdentityResult:
        existing = await self.get_claims(user)
        if claim in existing:
            return IdentityResult.success()
        self._db.add(UserClaim(
            user_id=user.id, claim_type=claim.type, claim_value=claim.value,
        ))
        await self._db.commit()
        logger.info(
            f"Claim {claim.type} granted", extra={"user_id": str(user.id)},
        )
        return IdentityResult.success()

    async def add_to_role(self, user: User, role_name: str) -> IdentityResult:
        result = await self._db.execute(
            select(Role).where(Role.normalized_name == normalize(role_name)),
        )
        role = result.scalar_one_or_none()
        if role is None:
            role = Role(name=role_name, normalized_name=normalize(role_name))
            self._db.add(role)
            await self._db.flush()
        elif await self._db.get(UserRole, (user.id, role.id)) is not None:
            return IdentityResult.failed([IdentityError(
                "UserAlreadyInRole", f"User already in role '{role_name}'.",
            )])
        self._db.add(UserRole(user_id=user.id, role_id=role.id))
        await self._db.commit()
        return IdentityResult.success()
