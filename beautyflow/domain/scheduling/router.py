"""Scheduling router - availability, calendar and appointment record endpoints"""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from ...state import AppState, get_app_state
from ..clients.schemas import Appointment, AppointmentFields, MaterialInput
from .schemas import AppointmentCreate, AvailabilityResponse, CalendarEntry, ScheduledAppointment
from .service import SchedulingService

router = APIRouter(tags=["Scheduling"])


def get_scheduling_service(state: AppState = Depends(get_app_state)) -> SchedulingService:
    """Dependency injection for SchedulingService"""
    return SchedulingService(state)


@router.get("/scheduling/availability", response_model=AvailabilityResponse)
async def get_availability(
    date: str = Query(..., description="YYYY-MM-DD"),
    duration: Optional[int] = Query(None, ge=0, description="Minutes; 0 or missing means one slot"),
    service: SchedulingService = Depends(get_scheduling_service),
):
    """Free start times on a date for a procedure of the given duration"""
    return service.get_availability(date, duration)


@router.get("/scheduling/calendar", response_model=dict[str, list[CalendarEntry]])
async def get_calendar(
    month: str = Query(..., description="YYYY-MM"),
    service: SchedulingService = Depends(get_scheduling_service),
):
    return service.get_calendar(month)


@router.post("/scheduling/appointments", response_model=ScheduledAppointment, status_code=201)
async def create_appointment(
    data: AppointmentCreate,
    service: SchedulingService = Depends(get_scheduling_service),
):
    """Book an appointment; defaults come from the catalog procedure with the same name"""
    return service.create_appointment(data)


# ============================================================================
# APPOINTMENT RECORDS (owned by a client)
# ============================================================================


@router.put("/clients/{client_id}/appointments/{appointment_id}", response_model=Appointment)
async def update_appointment(
    client_id: str,
    appointment_id: str,
    data: AppointmentFields,
    service: SchedulingService = Depends(get_scheduling_service),
):
    return service.update_appointment(client_id, appointment_id, data)


@router.post(
    "/clients/{client_id}/appointments/{appointment_id}/procedure/{procedure_id}",
    response_model=Appointment,
)
async def apply_procedure(
    client_id: str,
    appointment_id: str,
    procedure_id: str,
    service: SchedulingService = Depends(get_scheduling_service),
):
    """Fill the record with a catalog procedure's defaults"""
    return service.apply_procedure(client_id, appointment_id, procedure_id)


@router.delete("/clients/{client_id}/appointments/{appointment_id}")
async def delete_appointment(
    client_id: str,
    appointment_id: str,
    service: SchedulingService = Depends(get_scheduling_service),
):
    return service.delete_appointment(client_id, appointment_id)


@router.post(
    "/clients/{client_id}/appointments/{appointment_id}/materials",
    response_model=Appointment,
    status_code=201,
)
async def add_material(
    client_id: str,
    appointment_id: str,
    material: MaterialInput,
    service: SchedulingService = Depends(get_scheduling_service),
):
    return service.add_material(client_id, appointment_id, material)


@router.put(
    "/clients/{client_id}/appointments/{appointment_id}/materials/{material_id}",
    response_model=Appointment,
)
async def update_material(
    client_id: str,
    appointment_id: str,
    material_id: str,
    material: MaterialInput,
    service: SchedulingService = Depends(get_scheduling_service),
):
    return service.update_material(client_id, appointment_id, material_id, material)


@router.delete(
    "/clients/{client_id}/appointments/{appointment_id}/materials/{material_id}",
    response_model=Appointment,
)
async def remove_material(
    client_id: str,
    appointment_id: str,
    material_id: str,
    service: SchedulingService = Depends(get_scheduling_service),
):
    return service.remove_material(client_id, appointment_id, material_id)
