"""Procedure service - catalog CRUD"""

import logging
import uuid

from fastapi import HTTPException

from ...state import AppState
from .repository import ProcedureRepository
from .schemas import Procedure, ProcedureCreate

logger = logging.getLogger(__name__)


class ProcedureService:
    """Service layer for the procedure catalog"""

    def __init__(self, state: AppState):
        self.state = state
        self.repo = ProcedureRepository()

    def get_procedures(self, active_only: bool = False) -> list[Procedure]:
        procedures = self.repo.get_procedures(self.state.store, self.state.owner_id)
        if active_only:
            procedures = [p for p in procedures if p.isActive]
        return procedures

    def get_procedure(self, procedure_id: str) -> Procedure:
        procedure = next((p for p in self.get_procedures() if p.id == procedure_id), None)
        if not procedure:
            raise HTTPException(status_code=404, detail="Procedure not found")
        return procedure

    def create_procedure(self, data: ProcedureCreate) -> Procedure:
        procedures = self.get_procedures()
        procedure = Procedure(id=f"proc-{uuid.uuid4().hex[:12]}", **data.model_dump())
        procedures.append(procedure)
        self.repo.save_procedures(self.state.store, self.state.owner_id, procedures)
        logger.info(f"✅ Procedure '{procedure.name}' created for user {self.state.owner_id}")
        return procedure

    def replace_procedure(self, procedure_id: str, data: ProcedureCreate) -> Procedure:
        """Whole-object replace keyed by id. Existing appointments are not touched."""
        procedures = self.get_procedures()
        for index, current in enumerate(procedures):
            if current.id == procedure_id:
                procedures[index] = Procedure(id=procedure_id, **data.model_dump())
                self.repo.save_procedures(self.state.store, self.state.owner_id, procedures)
                return procedures[index]
        raise HTTPException(status_code=404, detail="Procedure not found")

    def set_active(self, procedure_id: str, is_active: bool) -> Procedure:
        procedures = self.get_procedures()
        for index, current in enumerate(procedures):
            if current.id == procedure_id:
                procedures[index] = current.model_copy(update={"isActive": is_active})
                self.repo.save_procedures(self.state.store, self.state.owner_id, procedures)
                return procedures[index]
        raise HTTPException(status_code=404, detail="Procedure not found")

    def delete_procedure(self, procedure_id: str) -> dict:
        procedures = self.get_procedures()
        remaining = [p for p in procedures if p.id != procedure_id]
        if len(remaining) == len(procedures):
            raise HTTPException(status_code=404, detail="Procedure not found")
        self.repo.save_procedures(self.state.store, self.state.owner_id, remaining)
        return {"message": "Procedure deleted"}
