"""Procedure repository - whole-collection reads and writes of the catalog"""

from typing import Optional

from ...storage import PROCEDURES
from .schemas import Procedure


class ProcedureRepository:
    """Repository for procedure catalogs"""

    @staticmethod
    def get_procedures(store, owner_id: int) -> list[Procedure]:
        # Procedure validators fill category/isActive for records saved by older versions
        return [Procedure.model_validate(p) for p in store.load(owner_id, PROCEDURES) or []]

    @staticmethod
    def save_procedures(store, owner_id: int, procedures: list[Procedure]) -> None:
        store.save(owner_id, PROCEDURES, [p.model_dump(mode="json") for p in procedures])

    @staticmethod
    def find_by_name(procedures: list[Procedure], name: str) -> Optional[Procedure]:
        """Names are unique by convention only - the first match wins"""
        return next((p for p in procedures if p.name == name), None)
