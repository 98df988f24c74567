"""Auth Schemas — registration/login inputs and the bearer token response.

Invariants:
    - Inputs are transient: validated, used, discarded (never persisted as-is)
    - TokenResponse mirrors core.token_issuer.TokenResponse field-for-field
"""

from app.schemas import CamelModel


class RegisterUser(CamelModel):
    email: str | None = None
    password: str | None = None
    confirm_password: str | None = None


class LoginUser(CamelModel):
    email: str | None = None
    password: str | None = None


class ClaimResponse(CamelModel):
    type: str
    value: str


class UserTokenResponse(CamelModel):
    id: str
    email: str
    claims: list[ClaimResponse]
    roles: list[str]


class TokenResponse(CamelModel):
    """Bearer token plus the identity it was issued for."""
    access_token: str
    expires_in: float
    user_token: UserTokenResponse
