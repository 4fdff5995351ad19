"""User service - Business logic for accounts, sessions and editable texts"""

import logging
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...auth import create_session, hash_password, revoke_session, verify_password
from ...models import User
from ...storage import TEXTS, SqlCollectionStore
from .repository import UserRepository
from .schemas import Credentials, UserCreate, UserProfile, UserResponse, UserUpdate

logger = logging.getLogger(__name__)


def to_response(user: User) -> UserResponse:
    return UserResponse(
        id=user.id,
        publicId=user.public_id,
        username=user.username,
        isBoss=bool(user.is_boss),
        userType=user.user_type,
        profile=UserProfile(**(user.profile or {})),
    )


class UserService:
    """Service layer for user accounts"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = UserRepository()

    def _ensure_username_free(self, username: str, exclude_id: Optional[int] = None) -> None:
        existing = self.repo.get_user_by_username(self.db, username)
        if existing and existing.id != exclude_id:
            raise HTTPException(status_code=409, detail="Username already exists")

    def register(self, data: Credentials) -> User:
        """Self-service registration - new accounts are plain Cliente users"""
        self._ensure_username_free(data.username)
        user = self.repo.create_user(
            self.db,
            username=data.username.lower(),
            password_hash=hash_password(data.password),
            user_type="Cliente",
            profile=UserProfile(fullName=data.username).model_dump(),
        )
        logger.info(f"✅ Registered user {user.id} ({user.username})")
        return user

    def login(self, data: Credentials) -> tuple[User, str]:
        user = self.repo.get_user_by_username(self.db, data.username)
        if not user or not verify_password(data.password, user.password_hash):
            logger.warning(f"⚠️ Failed login for username '{data.username}'")
            raise HTTPException(status_code=401, detail="Invalid username or password")
        return user, create_session(self.db, user)

    def logout(self, token: str) -> dict:
        revoke_session(self.db, token)
        return {"message": "Logged out"}

    def list_users(self) -> list[User]:
        return self.repo.get_users(self.db)

    def get_user(self, user_id: int) -> User:
        user = self.repo.get_user_by_id(self.db, user_id)
        if not user:
            raise HTTPException(status_code=404, detail="User not found")
        return user

    def admin_add_user(self, data: UserCreate) -> User:
        """Create a user from the admin panel"""
        self._ensure_username_free(data.username)
        profile = data.profile.model_dump()
        profile["fullName"] = profile.get("fullName") or data.username
        user = self.repo.create_user(
            self.db,
            username=data.username.lower(),
            password_hash=hash_password(data.password),
            user_type=data.userType,
            profile=profile,
        )
        logger.info(f"✅ Admin created user {user.id} ({user.username})")
        return user

    def update_user(self, user_id: int, data: UserUpdate, acting_user: User) -> User:
        """Update a user's profile. Users may edit themselves; admins may edit anyone."""
        if acting_user.id != user_id and not acting_user.is_admin:
            raise HTTPException(status_code=403, detail="Administrator access required")

        user = self.get_user(user_id)
        updates = {}
        if data.username:
            self._ensure_username_free(data.username, exclude_id=user.id)
            updates["username"] = data.username.strip().lower()
        if data.password:
            updates["password_hash"] = hash_password(data.password)
        if data.userType is not None:
            if not acting_user.is_admin:
                raise HTTPException(status_code=403, detail="Only administrators can change roles")
            updates["user_type"] = data.userType
        if data.profile is not None:
            merged = dict(user.profile or {})
            merged.update(data.profile.model_dump(exclude_unset=True))
            updates["profile"] = merged

        return self.repo.update_user(self.db, user, **updates)

    def delete_user(self, user_id: int) -> dict:
        """Delete a user and every collection they own. The Boss cannot be deleted."""
        user = self.get_user(user_id)
        if user.is_boss:
            raise HTTPException(status_code=400, detail="The studio owner account cannot be deleted")

        SqlCollectionStore(self.db).drop_owner(user.id)
        self.repo.delete_user(self.db, user)
        logger.info(f"🗑️ Deleted user {user_id} and their data")
        return {"message": "User deleted"}


class TextService:
    """Editable UI texts - a single global key/value collection"""

    def __init__(self, store):
        self.store = store

    def get_texts(self) -> dict[str, str]:
        entries = self.store.load(None, TEXTS) or []
        return {e["key"]: e["value"] for e in entries if e.get("key")}

    def set_text(self, key: str, value: str, user: User) -> dict[str, str]:
        if not user.is_boss:
            raise HTTPException(status_code=403, detail="Only the studio owner can edit texts")
        texts = self.get_texts()
        texts[key] = value
        self.store.save(None, TEXTS, [{"key": k, "value": v} for k, v in texts.items()])
        logger.info(f"✏️ Text '{key}' updated by user {user.id}")
        return texts
