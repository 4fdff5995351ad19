"""User repository - Database operations for user accounts"""

from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from ...models import User


class UserRepository:
    """Repository for user database operations"""

    @staticmethod
    def get_users(db: Session) -> list[User]:
        return db.query(User).order_by(User.created_at.asc(), User.id.asc()).all()

    @staticmethod
    def count_users(db: Session) -> int:
        return db.query(func.count(User.id)).scalar() or 0

    @staticmethod
    def get_user_by_id(db: Session, user_id: int) -> Optional[User]:
        return db.query(User).filter(User.id == user_id).first()

    @staticmethod
    def get_user_by_username(db: Session, username: str) -> Optional[User]:
        """Usernames are matched case-insensitively"""
        return db.query(User).filter(User.username == username.strip().lower()).first()

    @staticmethod
    def get_boss(db: Session) -> Optional[User]:
        return db.query(User).filter(User.is_boss.is_(True)).first()

    @staticmethod
    def create_user(db: Session, **user_data) -> User:
        user = User(**user_data)
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    @staticmethod
    def update_user(db: Session, user: User, **updates) -> User:
        """Update a user with provided fields"""
        for key, value in updates.items():
            if value is not None and hasattr(user, key):
                setattr(user, key, value)

        db.commit()
        db.refresh(user)
        return user

    @staticmethod
    def delete_user(db: Session, user: User) -> None:
        db.delete(user)
        db.commit()
