"""Input Validation — explicit per-type validators returning field -> messages.

Invariants:
    - Every validator is pure: same input, same mapping, no IO
    - Keys are the JSON field names the client sent (camelCase where applicable)
    - Messages per field keep declaration order; an empty mapping means valid

Design Decisions:
    - Plain functions over declarative attributes: rules readable in one place, no reflection
    - email-validator for address syntax (the library pydantic's EmailStr relies on);
      deliverability (DNS) checks disabled — validation must stay IO-free
"""

from email_validator import EmailNotValidError, validate_email

from app.core.domain_types import ValidationErrors

PASSWORD_MIN_LENGTH = 6
PASSWORD_MAX_LENGTH = 100
TITLE_MAX_LENGTH = 100


def _required(value: str | None) -> bool:
    return value is not None and value.strip() != ""


def _add(errors: ValidationErrors, field: str, message: str) -> None:
    errors.setdefault(field, []).append(message)


def _check_email(errors: ValidationErrors, email: str | None) -> None:
    if not _required(email):
        _add(errors, "email", "O campo email é obrigatório.")
        return
    try:
        validate_email(email, check_deliverability=False)
    except EmailNotValidError:
        _add(errors, "email", "O campo email não é um endereço de e-mail válido.")


def _check_password(errors: ValidationErrors, password: str | None) -> None:
    if not _required(password):
        _add(errors, "password", "O campo password é obrigatório.")
        return
    if not PASSWORD_MIN_LENGTH <= len(password) <= PASSWORD_MAX_LENGTH:
        _add(
            errors, "password",
            f"O campo password precisa ter entre {PASSWORD_MIN_LENGTH} "
            f"e {PASSWORD_MAX_LENGTH} caracteres.",
        )


def validate_register_user(
    email: str | None,
    password: str | None,
    confirm_password: str | None = None,
) -> ValidationErrors:
    """Validate a registration request. confirm_password is checked only when sent."""
    errors: ValidationErrors = {}
    _check_email(errors, email)
    _check_password(errors, password)
    if confirm_password is not None and confirm_password != password:
        _add(errors, "confirmPassword", "As senhas não conferem.")
    return errors


def validate_login_user(email: str | None, password: str | None) -> ValidationErrors:
    errors: ValidationErrors = {}
    _check_email(errors, email)
    _check_password(errors, password)
    return errors


def validate_task(titulo: str | None) -> ValidationErrors:
    """Validate a task payload. Only the title carries rules."""
    errors: ValidationErrors = {}
    if not _required(titulo):
        _add(errors, "titulo", "O campo titulo é obrigatório.")
    elif len(titulo) > TITLE_MAX_LENGTH:
        _add(
            errors, "titulo",
            f"O campo titulo deve ter no máximo {TITLE_MAX_LENGTH} caracteres.",
        )
    return errors


def errors_from_locations(details: list[dict]) -> ValidationErrors:
    """Collapse parser error details ({"loc", "msg"}) into field -> messages.

    The leading "body" segment is dropped; a whole-body failure is keyed "body".
    """
    errors: ValidationErrors = {}
    for detail in details:
        loc = [str(part) for part in detail.get("loc", ())]
        if loc and loc[0] in ("body", "query", "path"):
            loc = loc[1:] or loc[:1]
        _add(errors, ".".join(loc) or "body", detail.get("msg", "Invalid value"))
    return errors
