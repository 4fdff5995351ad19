import hashlib
import logging
import secrets
from datetime import datetime, timedelta

from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from passlib.context import CryptContext
from sqlalchemy.orm import Session

from .config import BCRYPT_ROUNDS, SESSION_TTL_HOURS
from .database import get_db
from .models import User, UserSession

logger = logging.getLogger(__name__)

security = HTTPBearer()

# Password hashing context
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=BCRYPT_ROUNDS)


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    """Check a password against its stored bcrypt hash"""
    try:
        return pwd_context.verify(password, password_hash)
    except (ValueError, TypeError) as e:
        logger.error(f"❌ Password verification error: {e}")
        return False


def _token_hash(token: str) -> str:
    return hashlib.sha256(token.encode()).hexdigest()


def create_session(db: Session, user: User) -> str:
    """Issue a new bearer token for the user. Only the token hash is stored."""
    token = secrets.token_urlsafe(32)
    session = UserSession(
        user_id=user.id,
        token_hash=_token_hash(token),
        expires_at=datetime.utcnow() + timedelta(hours=SESSION_TTL_HOURS),
    )
    db.add(session)
    db.commit()
    logger.info(f"🔑 Session created for user {user.id}")
    return token


def revoke_session(db: Session, token: str) -> None:
    db.query(UserSession).filter(UserSession.token_hash == _token_hash(token)).delete(
        synchronize_session=False
    )
    db.commit()


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    db: Session = Depends(get_db),
) -> User:
    """Resolve the bearer token to a user"""
    session = (
        db.query(UserSession)
        .filter(UserSession.token_hash == _token_hash(credentials.credentials))
        .first()
    )
    if not session:
        logger.warning("⚠️ Unknown session token")
        raise HTTPException(status_code=401, detail="Invalid or expired session")

    if session.expires_at < datetime.utcnow():
        logger.info(f"Session expired for user {session.user_id}")
        db.delete(session)
        db.commit()
        raise HTTPException(status_code=401, detail="Invalid or expired session")

    user = db.query(User).filter(User.id == session.user_id).first()
    if not user:
        raise HTTPException(status_code=401, detail="User not found")
    return user


async def get_current_admin(current_user: User = Depends(get_current_user)) -> User:
    """Boss or Administrador accounts only"""
    if not current_user.is_admin:
        logger.warning(f"⚠️ User {current_user.id} attempted an admin-only action")
        raise HTTPException(status_code=403, detail="Administrator access required")
    return current_user

