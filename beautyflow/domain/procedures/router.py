"""Procedure router - FastAPI endpoints for the procedure catalog"""

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel

from ...state import AppState, get_app_state
from .schemas import Procedure, ProcedureCreate
from .service import ProcedureService

router = APIRouter(prefix="/procedures", tags=["Procedures"])


class ActiveToggle(BaseModel):
    isActive: bool


def get_procedure_service(state: AppState = Depends(get_app_state)) -> ProcedureService:
    """Dependency injection for ProcedureService"""
    return ProcedureService(state)


@router.get("", response_model=list[Procedure])
async def get_procedures(
    active_only: bool = Query(False, alias="activeOnly"),
    service: ProcedureService = Depends(get_procedure_service),
):
    return service.get_procedures(active_only)


@router.get("/{procedure_id}", response_model=Procedure)
async def get_procedure(procedure_id: str, service: ProcedureService = Depends(get_procedure_service)):
    return service.get_procedure(procedure_id)


@router.post("", response_model=Procedure, status_code=201)
async def create_procedure(
    data: ProcedureCreate, service: ProcedureService = Depends(get_procedure_service)
):
    return service.create_procedure(data)


@router.put("/{procedure_id}", response_model=Procedure)
async def replace_procedure(
    procedure_id: str,
    data: ProcedureCreate,
    service: ProcedureService = Depends(get_procedure_service),
):
    return service.replace_procedure(procedure_id, data)


@router.patch("/{procedure_id}/active", response_model=Procedure)
async def set_procedure_active(
    procedure_id: str,
    data: ActiveToggle,
    service: ProcedureService = Depends(get_procedure_service),
):
    """Show or hide a procedure in the catalog without deleting it"""
    return service.set_active(procedure_id, data.isActive)


@router.delete("/{procedure_id}")
async def delete_procedure(
    procedure_id: str, service: ProcedureService = Depends(get_procedure_service)
):
    return service.delete_procedure(procedure_id)
