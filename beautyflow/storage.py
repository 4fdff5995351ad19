"""
Collection storage port.

Every collection (clients, procedures, expenses, editable texts) is a JSON
array stored whole per owner. Domain code reads a collection into memory,
works on it and hands the full updated list back - there are no incremental
writes, and the last writer wins.
"""

import copy
import json
import logging
from typing import Any, Optional

from sqlalchemy.orm import Session

from .models import StoredCollection

logger = logging.getLogger(__name__)

CLIENTS = "clients"
PROCEDURES = "procedures"
EXPENSES = "expenses"
TEXTS = "texts"

OWNED_COLLECTIONS = (CLIENTS, PROCEDURES, EXPENSES)


class SqlCollectionStore:
    """Collection store backed by the stored_collections table"""

    def __init__(self, db: Session):
        self.db = db

    def _row(self, owner_id: Optional[int], name: str) -> Optional[StoredCollection]:
        query = self.db.query(StoredCollection).filter(StoredCollection.name == name)
        if owner_id is None:
            query = query.filter(StoredCollection.owner_id.is_(None))
        else:
            query = query.filter(StoredCollection.owner_id == owner_id)
        return query.first()

    def load(self, owner_id: Optional[int], name: str) -> Optional[list[Any]]:
        """Return the stored list, or None when the collection was never saved"""
        row = self._row(owner_id, name)
        if row is None:
            return None
        try:
            return json.loads(row.payload or "[]")
        except ValueError as e:
            logger.error(f"❌ Corrupted collection {name} for owner {owner_id}: {e}")
            return []

    def save(self, owner_id: Optional[int], name: str, items: list[Any]) -> None:
        row = self._row(owner_id, name)
        payload = json.dumps(items, ensure_ascii=False)
        if row is None:
            row = StoredCollection(owner_id=owner_id, name=name, payload=payload)
            self.db.add(row)
        else:
            row.payload = payload
        self.db.commit()
        logger.debug(f"💾 Saved {len(items)} item(s) to {name} for owner {owner_id}")

    def owners(self, name: str) -> list[int]:
        rows = (
            self.db.query(StoredCollection.owner_id)
            .filter(StoredCollection.name == name, StoredCollection.owner_id.isnot(None))
            .order_by(StoredCollection.owner_id.asc())
            .all()
        )
        return [r[0] for r in rows]

    def drop_owner(self, owner_id: int) -> None:
        self.db.query(StoredCollection).filter(StoredCollection.owner_id == owner_id).delete(
            synchronize_session=False
        )
        self.db.commit()


class MemoryCollectionStore:
    """In-process collection store, used by scripts and unit tests"""

    def __init__(self):
        self._data: dict[tuple[Optional[int], str], list[Any]] = {}

    def load(self, owner_id: Optional[int], name: str) -> Optional[list[Any]]:
        items = self._data.get((owner_id, name))
        return copy.deepcopy(items) if items is not None else None

    def save(self, owner_id: Optional[int], name: str, items: list[Any]) -> None:
        self._data[(owner_id, name)] = copy.deepcopy(items)

    def owners(self, name: str) -> list[int]:
        return sorted(o for (o, n) in self._data if n == name and o is not None)

    def drop_owner(self, owner_id: int) -> None:
        for key in [k for k in self._data if k[0] == owner_id]:
            del self._data[key]
