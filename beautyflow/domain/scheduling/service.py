"""
Scheduling service - booking, editing and listing appointments.

Appointments live inside their client's record, so every mutation loads the
owner's client collection, changes one client and writes the whole list back.
"""

import logging
import re
import uuid
from collections import defaultdict
from typing import Any, Optional

from fastapi import HTTPException

from ...shared.clock import parse_date, parse_hhmm
from ...state import AppState
from ...storage import CLIENTS
from ..clients.repository import ClientRepository
from ..clients.schemas import Appointment, AppointmentFields, Client, MaterialInput
from ..clients.service import ClientService
from ..procedures.repository import ProcedureRepository
from . import appointments as deriver
from .availability import WorkingWindow, available_slots
from .schemas import AppointmentCreate, AvailabilityResponse, CalendarEntry, ScheduledAppointment

logger = logging.getLogger(__name__)

MONTH_PATTERN = re.compile(r"^(\d{4})-(0[1-9]|1[0-2])$")


def _rebuild(appointment: Appointment, changes: dict[str, Any]) -> Appointment:
    """Validate the merged record, keep the legacy mirror fields in step and derive"""
    data = {**appointment.model_dump(), **changes}
    data["procedure"] = data.get("procedureName") or data.get("procedure") or ""
    data["price"] = data.get("value", 0)
    data["time"] = data.get("startTime") or ""
    merged = Appointment.model_validate(data)
    if merged.materials != appointment.materials:
        # An emptied list means zero cost, which derive() alone would not apply
        merged = merged.model_copy(update={"cost": deriver.materials_cost(merged.materials)})
    return deriver.derive(merged)


class SchedulingService:
    """Service layer for appointments and slot availability"""

    def __init__(self, state: AppState, window: Optional[WorkingWindow] = None):
        self.state = state
        self.window = window or WorkingWindow()
        self.clients = ClientService(state)
        self.client_repo = ClientRepository()
        self.procedure_repo = ProcedureRepository()

    # ------------------------------------------------------------------------
    # Availability / calendar
    # ------------------------------------------------------------------------

    def _visible_clients(self) -> list[Client]:
        owner_ids = self.state.visible_owner_ids(CLIENTS)
        return [c for _, c in self.client_repo.get_visible_clients(self.state.store, owner_ids)]

    def booked_on(self, day: str, exclude_id: Optional[str] = None) -> list[tuple[str, int]]:
        """(startTime, duration) of every visible appointment on a date"""
        booked = []
        for client in self._visible_clients():
            for appt in client.appointments:
                if appt.date == day and appt.id != exclude_id:
                    booked.append((appt.startTime, appt.duration))
        return booked

    def get_availability(self, day: str, duration: Optional[int]) -> AvailabilityResponse:
        parsed = parse_date(day)
        if not parsed:
            raise HTTPException(status_code=400, detail="Date must use the YYYY-MM-DD format")
        day = parsed.isoformat()
        slots = available_slots(duration, self.booked_on(day), self.window)
        return AvailabilityResponse(date=day, duration=duration or self.window.interval, slots=slots)

    def get_calendar(self, month: str) -> dict[str, list[CalendarEntry]]:
        """Visible appointments of a month ("YYYY-MM"), grouped by day and sorted by start time"""
        if not MONTH_PATTERN.match(month or ""):
            raise HTTPException(status_code=400, detail="Month must use the YYYY-MM format")
        days: dict[str, list[CalendarEntry]] = defaultdict(list)
        for client in self._visible_clients():
            for appt in client.appointments:
                if appt.date.startswith(month):
                    days[appt.date].append(
                        CalendarEntry(clientId=client.id, clientName=client.name, appointment=appt)
                    )
        calendar = {}
        for day in sorted(days):
            calendar[day] = sorted(
                days[day], key=lambda e: parse_hhmm(e.appointment.startTime) or 0
            )
        return calendar

    # ------------------------------------------------------------------------
    # Appointment mutations
    # ------------------------------------------------------------------------

    def _find(self, client: Client, appointment_id: str) -> tuple[int, Appointment]:
        for index, appt in enumerate(client.appointments):
            if appt.id == appointment_id:
                return index, appt
        raise HTTPException(status_code=404, detail="Appointment not found")

    def _store(self, client: Client, index: Optional[int], appointment: Appointment) -> Appointment:
        appointments = list(client.appointments)
        if index is None:
            appointments.append(appointment)
        else:
            appointments[index] = appointment
        self.clients.replace_stored(client.model_copy(update={"appointments": appointments}))
        return appointment

    def create_appointment(self, data: AppointmentCreate) -> ScheduledAppointment:
        if not data.clientId or not data.procedureName.strip() or not data.startTime:
            raise HTTPException(
                status_code=400, detail="Client, procedure and start time are required"
            )
        client = self.clients.get_client(data.clientId)
        logger.info(f"📥 Scheduling '{data.procedureName}' for client {client.id} on {data.date}")

        appointment = Appointment(
            id=f"appt-{uuid.uuid4().hex[:12]}",
            date=data.date,
            startTime=data.startTime,
            procedureName=data.procedureName.strip(),
            procedureSteps=[],
        )
        procedures = self.procedure_repo.get_procedures(self.state.store, self.state.owner_id)
        template = self.procedure_repo.find_by_name(procedures, appointment.procedureName)
        if template:
            appointment = deriver.seed_from_procedure(appointment, template)

        # Fields the caller sent explicitly win over the template defaults
        overrides = data.model_dump(exclude_unset=True, exclude={"clientId"})
        appointment = _rebuild(appointment, overrides)

        if appointment.startTime not in available_slots(
            appointment.duration, self.booked_on(appointment.date), self.window
        ):
            logger.warning(f"⚠️ Slot {appointment.date} {appointment.startTime} is not available")
            raise HTTPException(status_code=409, detail="Time slot not available")

        self._store(client, None, appointment)
        logger.info(f"✅ Appointment {appointment.id} scheduled")
        return ScheduledAppointment(clientId=client.id, appointment=appointment)

    def update_appointment(self, client_id: str, appointment_id: str, data: AppointmentFields) -> Appointment:
        """Edit a record in place; derived fields are recomputed from the result"""
        client = self.clients.get_client(client_id)
        index, current = self._find(client, appointment_id)
        changes = data.model_dump(exclude_unset=True)
        if changes.get("date") is None:
            changes.pop("date", None)
        return self._store(client, index, _rebuild(current, changes))

    def apply_procedure(self, client_id: str, appointment_id: str, procedure_id: str) -> Appointment:
        """Re-seed an existing record from a catalog template (explicit user action)"""
        client = self.clients.get_client(client_id)
        index, current = self._find(client, appointment_id)
        procedures = self.procedure_repo.get_procedures(self.state.store, self.state.owner_id)
        template = next((p for p in procedures if p.id == procedure_id), None)
        if not template:
            raise HTTPException(status_code=404, detail="Procedure not found")
        return self._store(client, index, deriver.seed_from_procedure(current, template))

    def delete_appointment(self, client_id: str, appointment_id: str) -> dict:
        client = self.clients.get_client(client_id)
        self._find(client, appointment_id)
        remaining = [a for a in client.appointments if a.id != appointment_id]
        self.clients.replace_stored(client.model_copy(update={"appointments": remaining}))
        logger.info(f"🗑️ Appointment {appointment_id} deleted from client {client_id}")
        return {"message": "Appointment deleted"}

    # ------------------------------------------------------------------------
    # Materials
    # ------------------------------------------------------------------------

    def add_material(self, client_id: str, appointment_id: str, material: MaterialInput) -> Appointment:
        client = self.clients.get_client(client_id)
        index, current = self._find(client, appointment_id)
        return self._store(client, index, deriver.add_material(current, material))

    def update_material(
        self, client_id: str, appointment_id: str, material_id: str, material: MaterialInput
    ) -> Appointment:
        client = self.clients.get_client(client_id)
        index, current = self._find(client, appointment_id)
        if not any(m.id == material_id for m in current.materials):
            raise HTTPException(status_code=404, detail="Material not found")
        return self._store(client, index, deriver.update_material(current, material_id, material))

    def remove_material(self, client_id: str, appointment_id: str, material_id: str) -> Appointment:
        client = self.clients.get_client(client_id)
        index, current = self._find(client, appointment_id)
        if not any(m.id == material_id for m in current.materials):
            raise HTTPException(status_code=404, detail="Material not found")
        return self._store(client, index, deriver.remove_material(current, material_id))
