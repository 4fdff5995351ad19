"""
Application state passed explicitly to every domain service: who is acting
and where collections are persisted. Nothing reads a session or storage global.
"""

from fastapi import Depends
from sqlalchemy.orm import Session

from .auth import get_current_user
from .database import get_db
from .models import User
from .storage import SqlCollectionStore


class AppState:
    """Current user plus the injected collection store"""

    def __init__(self, user: User, store):
        self.user = user
        self.store = store

    @property
    def owner_id(self) -> int:
        return self.user.id

    @property
    def is_boss(self) -> bool:
        return bool(self.user.is_boss)

    def visible_owner_ids(self, collection: str) -> list[int]:
        """
        Owners whose data the current user may read.
        The Boss sees every account's collections; everyone else only their own.
        """
        if not self.is_boss:
            return [self.owner_id]
        owners = set(self.store.owners(collection))
        owners.add(self.owner_id)
        return sorted(owners)


def get_app_state(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> AppState:
    """Dependency injection for AppState"""
    return AppState(current_user, SqlCollectionStore(db))
