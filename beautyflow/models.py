import uuid

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from .database import Base


def generate_public_id():
    """Generate a unique public ID for users and records"""
    return str(uuid.uuid4())


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    public_id = Column(String(64), unique=True, index=True, default=generate_public_id)
    username = Column(String(150), unique=True, index=True, nullable=False)  # stored lowercase
    password_hash = Column(String(255), nullable=False)
    is_boss = Column(Boolean, default=False, nullable=False)  # Studio owner, sees every user's data
    user_type = Column(String(50), default="Cliente", nullable=False)
    # Profile fields kept as a JSON blob (photo, fullName, displayName, contact, address, bio...)
    profile = Column(JSON, default=dict, nullable=False)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    sessions = relationship("UserSession", back_populates="user", cascade="all, delete-orphan")
    collections = relationship(
        "StoredCollection", back_populates="user", cascade="all, delete-orphan"
    )

    @property
    def is_admin(self) -> bool:
        return bool(self.is_boss) or self.user_type == "Administrador"


class UserSession(Base):
    __tablename__ = "user_sessions"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    token_hash = Column(String(64), unique=True, index=True, nullable=False)  # sha256 of bearer token
    expires_at = Column(DateTime, nullable=False)
    created_at = Column(DateTime, server_default=func.now())

    user = relationship("User", back_populates="sessions")


class StoredCollection(Base):
    """
    One JSON array per (owner, collection name).
    Collections are always read and replaced whole - there are no partial writes.
    owner_id is NULL for global collections (editable texts).
    """

    __tablename__ = "stored_collections"
    __table_args__ = (UniqueConstraint("owner_id", "name", name="uq_collection_owner_name"),)

    id = Column(Integer, primary_key=True, index=True)
    owner_id = Column(Integer, ForeignKey("users.id"), nullable=True, index=True)
    name = Column(String(50), nullable=False)  # clients, procedures, expenses, texts
    payload = Column(Text, nullable=False, default="[]")  # serialized JSON
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    user = relationship("User", back_populates="collections")
