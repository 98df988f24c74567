"""Token Service — assembles a bearer token response for a signed-in user.

Invariants:
    - Claims and roles are read from the identity gateway at issuance time,
      so grants take effect on the next login
    - Raises LookupError if the user vanished between sign-in and issuance

Design Decisions:
    - Async orchestration here, signing in core/token_issuer.py (pure)
"""

from app.core.repository_protocols import IdentityGateway
from app.core.token_issuer import JwtSettings, TokenResponse, TokenUser, issue_token


async def build_user_response(
    identity: IdentityGateway, email: str, settings: JwtSettings,
) -> TokenResponse:
    """Issue a token embedding standard claims, user claims and roles."""
    user = await identity.find_by_email(email)
    if user is None:
        raise LookupError("User not found for token issuance")
    claims = await identity.get_claims(user)
    roles = await identity.get_roles(user)
    return issue_token(
        TokenUser(id=str(user.id), email=user.email), settings, claims, roles,
    )
