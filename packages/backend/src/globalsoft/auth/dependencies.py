"""FastAPI auth dependencies.

Used as Depends() in route handlers to extract and validate the current
user from the Authorization: Bearer header.
"""

from typing import Optional

from fastapi import Depends, HTTPException, Header

from globalsoft.auth.jwt import TokenError, verify_token


class CurrentIdentity:
    """The authenticated user making the request."""

    def __init__(self, user_id: int, role: str = "buyer", email: Optional[str] = None):
        self.user_id = user_id
        self.role = role
        self.email = email

    @property
    def is_seller(self) -> bool:
        return self.role == "seller"


def identity_from_token(token: str) -> CurrentIdentity:
    """Decode a bearer token into an identity. Raises TokenError."""
    payload = verify_token(token)
    return CurrentIdentity(
        user_id=payload["user_id"],
        role=payload.get("role", "buyer"),
        email=payload.get("email"),
    )


async def get_current_user_optional(
    authorization: Optional[str] = Header(None),
) -> Optional[CurrentIdentity]:
    """Extract current identity (optional — returns None if no auth)."""
    if not authorization or not authorization.startswith("Bearer "):
        return None

    try:
        return identity_from_token(authorization[7:])
    except TokenError as e:
        raise HTTPException(
            status_code=401,
            detail=str(e),
            headers={"WWW-Authenticate": "Bearer"},
        )


async def get_current_user(
    identity: Optional[CurrentIdentity] = Depends(get_current_user_optional),
) -> CurrentIdentity:
    """Extract current identity (required — 401 if no auth)."""
    if not identity:
        raise HTTPException(
            status_code=401,
            detail="Unauthorized",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return identity


async def require_seller(
    identity: CurrentIdentity = Depends(get_current_user),
) -> CurrentIdentity:
    """Only sellers may list products."""
    if not identity.is_seller:
        raise HTTPException(status_code=403, detail="Only sellers can upload")
    return identity
