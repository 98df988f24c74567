"""Token Issuer — builds and verifies signed bearer tokens (HS256 JWT).

Invariants:
    - issue_token is pure given `now`: no IO, settings passed explicitly
    - Standard claims: sub, email, jti, nbf, iat, exp, iss, aud
    - User claims appear as `type: value` (repeated types become lists); roles under "role"
    - decode_token raises AuthenticationError for every verification failure

Design Decisions:
    - One function over a fluent builder: the chain always ran the same steps
    - PyJWT handles signing and exp/nbf/iss/aud checks; nothing hand-rolled
"""

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone

import jwt

from app.core.domain_types import Claim, Principal
from app.core.errors import AuthenticationError

ALGORITHM = "HS256"
ROLE_CLAIM = "role"
_REGISTERED = frozenset({"sub", "email", "jti", "nbf", "iat", "exp", "iss", "aud", ROLE_CLAIM})


@dataclass(frozen=True)
class JwtSettings:
    """Explicit configuration for token issuance and verification."""
    secret_key: str
    expiration_hours: int = 2
    issuer: str = "MinimalPilot"
    audience: str = "https://localhost"


@dataclass(frozen=True)
class TokenUser:
    id: str
    email: str


@dataclass
class UserToken:
    id: str
    email: str
    claims: list[Claim] = field(default_factory=list)
    roles: list[str] = field(default_factory=list)


@dataclass
class TokenResponse:
    access_token: str
    expires_in: float
    user_token: UserToken


def issue_token(
    user: TokenUser,
    settings: JwtSettings,
    claims: list[Claim],
    roles: list[str],
    now: datetime | None = None,
) -> TokenResponse:
    """Sign a token for `user` carrying standard claims, user claims and roles."""
    now = now or datetime.now(timezone.utc)
    expires = now + timedelta(hours=settings.expiration_hours)
    issued_at = int(now.timestamp())

    payload: dict = {}
    for claim in claims:
        if claim.type in _REGISTERED:
            continue
        current = payload.get(claim.type)
        if current is None:
            payload[claim.type] = claim.value
        elif isinstance(current, list):
            current.append(claim.value)
        else:
            payload[claim.type] = [current, claim.value]
    payload.update({
        "sub": user.id,
        "email": user.email,
        "jti": str(uuid.uuid4()),
        "nbf": issued_at,
        "iat": issued_at,
        "exp": int(expires.timestamp()),
        "iss": settings.issuer,
        "aud": settings.audience,
        ROLE_CLAIM: list(roles),
    })

    encoded = jwt.encode(payload, settings.secret_key, algorithm=ALGORITHM)
    return TokenResponse(
        access_token=encoded,
        expires_in=timedelta(hours=settings.expiration_hours).total_seconds(),
        user_token=UserToken(
            id=user.id, email=user.email,
            claims=list(claims), roles=list(roles),
        ),
    )


def decode_token(token: str, settings: JwtSettings) -> dict:
    """Verify signature, expiry, issuer and audience; return the payload."""
    try:
        return jwt.decode(
            token,
            settings.secret_key,
            algorithms=[ALGORITHM],
            audience=settings.audience,
            issuer=settings.issuer,
            options={"require": ["exp", "sub"]},
        )
    except jwt.ExpiredSignatureError:
        raise AuthenticationError("Token expired")
    except jwt.InvalidTokenError:
        raise AuthenticationError("Invalid token")


def principal_from_payload(payload: dict) -> Principal:
    """Rebuild the caller identity from a verified payload."""
    claims: list[Claim] = []
    for key, value in payload.items():
        if key in _REGISTERED:
            continue
        values = value if isinstance(value, list) else [value]
        claims.extend(Claim(key, str(v)) for v in values)
    roles = payload.get(ROLE_CLAIM) or []
    if isinstance(roles, str):
        roles = [roles]
    return Principal(
        user_id=str(payload["sub"]),
        email=str(payload.get("email", "")),
        claims=tuple(claims),
        roles=tuple(roles),
    )
