"""User router - FastAPI endpoints for auth, users and editable texts"""

import logging

from fastapi import APIRouter, Depends
from fastapi.security import HTTPAuthorizationCredentials
from sqlalchemy.orm import Session

from ...auth import get_current_admin, get_current_user, security
from ...database import get_db
from ...models import User
from ...storage import SqlCollectionStore
from .schemas import (
    Credentials,
    SessionResponse,
    TextUpdate,
    UserCreate,
    UserResponse,
    UserUpdate,
)
from .service import TextService, UserService, to_response

logger = logging.getLogger(__name__)

auth_router = APIRouter(prefix="/auth", tags=["Auth"])
router = APIRouter(prefix="/users", tags=["Users"])
texts_router = APIRouter(prefix="/texts", tags=["Texts"])


def get_user_service(db: Session = Depends(get_db)) -> UserService:
    """Dependency injection for UserService"""
    return UserService(db)


def get_text_service(db: Session = Depends(get_db)) -> TextService:
    return TextService(SqlCollectionStore(db))


# ============================================================================
# AUTH
# ============================================================================


@auth_router.post("/register", response_model=UserResponse, status_code=201)
async def register(data: Credentials, service: UserService = Depends(get_user_service)):
    """Register a new account"""
    return to_response(service.register(data))


@auth_router.post("/login", response_model=SessionResponse)
async def login(data: Credentials, service: UserService = Depends(get_user_service)):
    """Exchange username/password for a bearer session token"""
    user, token = service.login(data)
    return SessionResponse(token=token, user=to_response(user))


@auth_router.post("/logout")
async def logout(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    service: UserService = Depends(get_user_service),
):
    return service.logout(credentials.credentials)


# ============================================================================
# USERS
# ============================================================================


@router.get("/me", response_model=UserResponse)
async def get_me(current_user: User = Depends(get_current_user)):
    return to_response(current_user)


@router.patch("/me", response_model=UserResponse)
async def update_me(
    data: UserUpdate,
    current_user: User = Depends(get_current_user),
    service: UserService = Depends(get_user_service),
):
    """Update the current user's own profile"""
    return to_response(service.update_user(current_user.id, data, current_user))


@router.get("", response_model=list[UserResponse])
async def list_users(
    _admin: User = Depends(get_current_admin),
    service: UserService = Depends(get_user_service),
):
    return [to_response(u) for u in service.list_users()]


@router.post("", response_model=UserResponse, status_code=201)
async def create_user(
    data: UserCreate,
    _admin: User = Depends(get_current_admin),
    service: UserService = Depends(get_user_service),
):
    return to_response(service.admin_add_user(data))


@router.patch("/{user_id}", response_model=UserResponse)
async def update_user(
    user_id: int,
    data: UserUpdate,
    current_admin: User = Depends(get_current_admin),
    service: UserService = Depends(get_user_service),
):
    return to_response(service.update_user(user_id, data, current_admin))


@router.delete("/{user_id}")
async def delete_user(
    user_id: int,
    _admin: User = Depends(get_current_admin),
    service: UserService = Depends(get_user_service),
):
    """Delete a user together with their clients, procedures and expenses"""
    return service.delete_user(user_id)


# ============================================================================
# EDITABLE TEXTS
# ============================================================================


@texts_router.get("")
async def get_texts(
    _user: User = Depends(get_current_user),
    service: TextService = Depends(get_text_service),
):
    return service.get_texts()


@texts_router.put("/{key}")
async def set_text(
    key: str,
    data: TextUpdate,
    current_user: User = Depends(get_current_user),
    service: TextService = Depends(get_text_service),
):
    return service.set_text(key, data.value, current_user)
