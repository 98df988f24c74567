"""Password & Lockout Policy — complexity rules and lockout arithmetic.

Invariants:
    - check_password returns every violated rule, in a fixed order
    - Lockout is evaluated against an explicit `now` (no clock reads in core)

Design Decisions:
    - Error codes and descriptions follow the common identity-platform wording so
      clients can branch on `code` regardless of locale
"""

from dataclasses import dataclass
from datetime import datetime, timedelta

from app.core.domain_types import IdentityError


@dataclass(frozen=True)
class PasswordPolicy:
    required_length: int = 6
    required_unique_chars: int = 1
    require_digit: bool = True
    require_lowercase: bool = True
    require_uppercase: bool = True
    require_non_alphanumeric: bool = True


@dataclass(frozen=True)
class LockoutPolicy:
    max_failed_attempts: int = 5
    lockout_minutes: int = 5

    def lockout_end(self, now: datetime) -> datetime:
        return now + timedelta(minutes=self.lockout_minutes)


def check_password(password: str, policy: PasswordPolicy) -> list[IdentityError]:
    """Return the policy rules `password` violates (empty when acceptable)."""
    errors: list[IdentityError] = []
    if len(password) < policy.required_length:
        errors.append(IdentityError(
            "PasswordTooShort",
            f"Passwords must be at least {policy.required_length} characters.",
        ))
    if policy.require_non_alphanumeric and all(c.isalnum() for c in password):
        errors.append(IdentityError(
            "PasswordRequiresNonAlphanumeric",
            "Passwords must have at least one non alphanumeric character.",
        ))
    if policy.require_digit and not any("0" <= c <= "9" for c in password):
        errors.append(IdentityError(
            "PasswordRequiresDigit",
            "Passwords must have at least one digit ('0'-'9').",
        ))
    if policy.require_lowercase and not any("a" <= c <= "z" for c in password):
        errors.append(IdentityError(
            "PasswordRequiresLower",
            "Passwords must have at least one lowercase ('a'-'z').",
        ))
    if policy.require_uppercase and not any("A" <= c <= "Z" for c in password):
        errors.append(IdentityError(
            "PasswordRequiresUpper",
            "Passwords must have at least one uppercase ('A'-'Z').",
        ))
    if len(set(password)) < policy.required_unique_chars:
        errors.append(IdentityError(
            "PasswordRequiresUniqueChars",
            f"Passwords must use at least {policy.required_unique_chars} different characters.",
        ))
    return errors


def duplicate_user_name(user_name: str) -> IdentityError:
    return IdentityError(
        "DuplicateUserName", f"Username '{user_name}' is already taken.",
    )


def is_locked_out(lockout_end: datetime | None, now: datetime) -> bool:
    return lockout_end is not None and lockout_end > now
