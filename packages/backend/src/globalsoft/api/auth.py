"""Auth API — registration, login, current user.

- POST /auth/register → create an account, returns {token, user}
- POST /auth/login → email/password → {token, user}
- GET /auth/me → current user info
"""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from globalsoft.auth.dependencies import CurrentIdentity, get_current_user
from globalsoft.auth.jwt import create_access_token
from globalsoft.db.engine import get_db
from globalsoft.db.models import User
from globalsoft.schemas.user import (
    AuthResponse,
    LoginRequest,
    RegisterRequest,
    UserRead,
)
from globalsoft.services.user_service import DuplicateEmailError, UserService

router = APIRouter(prefix="/auth")


def _svc(db: AsyncSession = Depends(get_db)) -> UserService:
    return UserService(db)


def _auth_response(user: User) -> AuthResponse:
    token = create_access_token(user.id, role=user.role, email=user.email)
    return AuthResponse(token=token, user=UserRead.model_validate(user))


@router.post("/register", response_model=AuthResponse, status_code=201)
async def register(body: RegisterRequest, svc: UserService = Depends(_svc)):
    """Create a new account and log it in."""
    try:
        user = await svc.create_user(
            email=body.email,
            password=body.password,
            name=body.name,
            role=body.role,
        )
    except DuplicateEmailError:
        raise HTTPException(status_code=409, detail="Email already exists")
    return _auth_response(user)


@router.post("/login", response_model=AuthResponse)
async def login(body: LoginRequest, svc: UserService = Depends(_svc)):
    """Login with email and password → bearer token."""
    user = await svc.authenticate(body.email, body.password)
    if not user:
        raise HTTPException(status_code=401, detail="Invalid credentials")
    return _auth_response(user)


@router.get("/me", response_model=UserRead)
async def get_me(
    identity: CurrentIdentity = Depends(get_current_user),
    svc: UserService = Depends(_svc),
):
    user = await svc.get_user(identity.user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return user
