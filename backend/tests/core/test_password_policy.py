"""Password & Lockout Policy — rule reporting and lockout arithmetic."""

from datetime import datetime, timedelta, timezone

from app.core.password_policy import (
    LockoutPolicy, PasswordPolicy, check_password, is_locked_out,
)


def _codes(password, policy=PasswordPolicy()):
    return [e.code for e in check_password(password, policy)]


def test_strong_password_passes():
    assert _codes("Senha@123") == []


def test_every_violated_rule_is_reported_in_order():
    assert _codes("abc") == [
        "PasswordTooShort",
        "PasswordRequiresNonAlphanumeric",
        "PasswordRequiresDigit",
        "PasswordRequiresUpper",
    ]


def test_relaxed_policy():
    policy = PasswordPolicy(
        require_digit=False, require_uppercase=False,
        require_non_alphanumeric=False,
    )
    assert _codes("abcdef", policy) == []


def test_unique_chars_rule():
    assert _codes("Aa1!Aa1!", PasswordPolicy(required_unique_chars=4)) == []
    assert _codes("Aa1!Aa1!", PasswordPolicy(required_unique_chars=5)) == [
        "PasswordRequiresUniqueChars",
    ]


def test_lockout_window():
    now = datetime(2026, 1, 1, tzinfo=timezone.utc)
    end = LockoutPolicy(lockout_minutes=5).lockout_end(now)
    assert end - now == timedelta(minutes=5)
    assert is_locked_out(end, now)
    assert not is_locked_out(end, end)
    assert not is_locked_out(None, now)
