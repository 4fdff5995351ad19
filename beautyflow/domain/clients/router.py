"""Client router - FastAPI endpoints for client operations"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, HTTPException, Query, UploadFile

from ...state import AppState, get_app_state
from .schemas import (
    AnamnesisPatch,
    Client,
    ClientCreate,
    ClientImportResult,
    ClientStatusFilter,
    ClientUpdate,
    ClientWithStatus,
)
from .service import ClientService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/clients", tags=["Clients"])

IMPORT_EXTENSIONS = (".csv", ".xlsx", ".xlsm")


def get_client_service(state: AppState = Depends(get_app_state)) -> ClientService:
    """Dependency injection for ClientService"""
    return ClientService(state)


# ============================================================================
# CORE CRUD OPERATIONS
# ============================================================================


@router.get("", response_model=list[ClientWithStatus])
async def get_clients(
    search: Optional[str] = Query(None),
    status: ClientStatusFilter = Query("Todos"),
    service: ClientService = Depends(get_client_service),
):
    """Get the current user's clients, sorted by name"""
    return service.get_clients(search, status)


@router.get("/export")
async def export_clients_csv(
    search: Optional[str] = Query(None),
    status: ClientStatusFilter = Query("Todos"),
    service: ClientService = Depends(get_client_service),
):
    """Export clients as CSV with optional filters"""
    return service.export_clients_csv(search, status)


@router.post("/import", response_model=ClientImportResult)
async def import_clients(
    file: UploadFile = File(...),
    service: ClientService = Depends(get_client_service),
):
    """Import clients from a CSV or Excel spreadsheet"""
    filename = file.filename or ""
    logger.info(f"📤 Client import upload: '{filename}'")
    if not filename.lower().endswith(IMPORT_EXTENSIONS):
        raise HTTPException(status_code=400, detail="Only .csv and .xlsx files can be imported")
    content = await file.read()
    return service.import_clients(filename, content)


@router.get("/{client_id}", response_model=Client)
async def get_client(client_id: str, service: ClientService = Depends(get_client_service)):
    return service.get_client(client_id)


@router.post("", response_model=Client, status_code=201)
async def create_client(data: ClientCreate, service: ClientService = Depends(get_client_service)):
    return service.create_client(data)


@router.put("/{client_id}", response_model=Client)
async def update_client(
    client_id: str,
    data: ClientUpdate,
    service: ClientService = Depends(get_client_service),
):
    return service.update_client(client_id, data)


@router.delete("/{client_id}")
async def delete_client(client_id: str, service: ClientService = Depends(get_client_service)):
    return service.delete_client(client_id)


@router.patch("/{client_id}/anamnesis", response_model=Client)
async def update_anamnesis(
    client_id: str,
    patch: AnamnesisPatch,
    service: ClientService = Depends(get_client_service),
):
    """Partially update a client's anamnesis record"""
    return service.update_anamnesis(client_id, patch)
